"""ProprioCore: real-time tremor and gait metrics from pose keypoints."""

from proprio_core.core.types import AnalysisMode, EngineState, Joint, KeypointObservation
from proprio_core.pipeline.engine import MotionAnalysisEngine

__version__ = "0.1.0"

__all__ = [
    "MotionAnalysisEngine",
    "AnalysisMode",
    "EngineState",
    "Joint",
    "KeypointObservation",
]
