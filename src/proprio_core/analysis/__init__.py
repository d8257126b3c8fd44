"""Pure analysis logic: rolling windows, tremor and gait metrics, feedback signals.

This module contains NO I/O operations.
All functions operate on typed dataclasses and return results.
"""

from proprio_core.analysis.feedback import haptic_cue, stability_below_threshold
from proprio_core.analysis.gait import GaitAnalyzer, GaitMetrics, StepEvent
from proprio_core.analysis.tremor import TremorAnalyzer
from proprio_core.analysis.window import RollingWindow

__all__ = [
    "RollingWindow",
    "TremorAnalyzer",
    "GaitAnalyzer",
    "GaitMetrics",
    "StepEvent",
    "haptic_cue",
    "stability_below_threshold",
]
