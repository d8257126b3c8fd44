"""Core infrastructure: config, types, exceptions, and logging."""

from proprio_core.core.config import Settings, get_settings
from proprio_core.core.exceptions import (
    AnalysisError,
    CameraUnavailableError,
    ErrorKind,
    KeypointDecodeError,
    LowConfidenceError,
    ProcessingFailedError,
    ProprioError,
)
from proprio_core.core.logging import get_logger, setup_logging
from proprio_core.core.types import (
    AnalysisMode,
    EngineState,
    HapticCue,
    Joint,
    KeypointObservation,
    TremorTrend,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "Joint",
    "KeypointObservation",
    "AnalysisMode",
    "TremorTrend",
    "EngineState",
    "HapticCue",
    # Exceptions
    "ProprioError",
    "AnalysisError",
    "ErrorKind",
    "CameraUnavailableError",
    "LowConfidenceError",
    "ProcessingFailedError",
    "KeypointDecodeError",
    # Logging
    "setup_logging",
    "get_logger",
]
