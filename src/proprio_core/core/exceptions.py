"""Custom exceptions and the analysis error taxonomy."""

from __future__ import annotations

from enum import Enum, auto


class ErrorKind(Enum):
    """Classification of errors surfaced through engine state."""

    CAMERA_UNAVAILABLE = auto()
    LOW_CONFIDENCE = auto()
    PROCESSING_FAILED = auto()


class ProprioError(Exception):
    """Base exception for all ProprioCore errors."""

    pass


class AnalysisError(ProprioError):
    """An error recorded in engine state rather than raised to the caller."""

    kind: ErrorKind

    def __init__(self, message: str = "Motion analysis error") -> None:
        self.message = message
        super().__init__(self.message)


class CameraUnavailableError(AnalysisError):
    """The upstream frame source cannot supply frames."""

    kind = ErrorKind.CAMERA_UNAVAILABLE

    def __init__(self, message: str = "Camera is unavailable") -> None:
        super().__init__(message)


class LowConfidenceError(AnalysisError):
    """No keypoint met the confidence threshold for too many frames."""

    kind = ErrorKind.LOW_CONFIDENCE

    def __init__(self, frames: int = 0, message: str | None = None) -> None:
        self.frames = frames
        super().__init__(
            message or f"Pose confidence too low for {frames} consecutive frames"
        )


class ProcessingFailedError(AnalysisError):
    """Decoding or analysis of a single frame failed; the frame was skipped."""

    kind = ErrorKind.PROCESSING_FAILED

    def __init__(self, cause: BaseException | None = None, message: str | None = None) -> None:
        self.cause = cause
        if message is None:
            message = f"Frame processing failed: {cause}" if cause else "Frame processing failed"
        super().__init__(message)
        self.__cause__ = cause


class KeypointDecodeError(ProprioError):
    """Pose detector output could not be decoded into keypoints."""

    def __init__(self, message: str = "Failed to decode keypoints") -> None:
        self.message = message
        super().__init__(self.message)
