"""Frame processing pipeline orchestration."""

from proprio_core.pipeline.engine import MotionAnalysisEngine

__all__ = ["MotionAnalysisEngine"]
