"""Core data types and structures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from proprio_core.core.exceptions import AnalysisError


class Joint(Enum):
    """Tracked body joints, valued by MediaPipe pose landmark index."""

    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28

    @property
    def is_upper_body(self) -> bool:
        """Shoulders, elbows and wrists."""
        return self.value < Joint.LEFT_HIP.value

    @property
    def side(self) -> str:
        """Body side, "left" or "right"."""
        return "left" if self.name.startswith("LEFT_") else "right"

    @property
    def mirror(self) -> Joint:
        """The same joint on the opposite side of the body."""
        if self.side == "left":
            return Joint[self.name.replace("LEFT_", "RIGHT_", 1)]
        return Joint[self.name.replace("RIGHT_", "LEFT_", 1)]


@dataclass(frozen=True, slots=True)
class KeypointObservation:
    """One joint's detected position for a single frame.

    Coordinates are normalized [0, 1] relative to frame dimensions.
    """

    joint: Joint
    x: float
    y: float
    confidence: float

    @property
    def position(self) -> tuple[float, float]:
        """Position as an (x, y) tuple."""
        return self.x, self.y

    @property
    def is_finite(self) -> bool:
        """Check that no field is NaN or infinite."""
        return all(math.isfinite(v) for v in (self.x, self.y, self.confidence))


class AnalysisMode(Enum):
    """Which metric pipeline is running."""

    GAIT = "Gait Assistance"
    TREMOR = "Fine Motor"


class TremorTrend(Enum):
    """Direction of recent tremor amplitude change."""

    INCREASING = "↑"
    DECREASING = "↓"
    STABLE = "→"


@dataclass(frozen=True, slots=True)
class EngineState:
    """Immutable snapshot of everything the engine publishes.

    A new snapshot replaces the old one as a whole, so readers never
    see metrics from two different updates.

    Attributes:
        tremor_amplitude: Normalized tremor amplitude [0, 1]
        gait_stability_index: Stride regularity [0, 1], 1.0 = stable
        gait_symmetry_index: Left/right agreement [0, 1], 1.0 = symmetric
        session_step_count: Steps detected since the last reset
        is_active: Whether frames are currently being analyzed
        current_mode: Active analysis mode
        last_error: Most recent unresolved error, if any
        tremor_trend: Direction of recent amplitude change
        cadence_spm: Walking cadence in steps per minute
    """

    tremor_amplitude: float = 0.0
    gait_stability_index: float = 1.0
    gait_symmetry_index: float = 1.0
    session_step_count: int = 0
    is_active: bool = False
    current_mode: AnalysisMode = AnalysisMode.GAIT
    last_error: AnalysisError | None = None
    tremor_trend: TremorTrend = TremorTrend.STABLE
    cadence_spm: float = 0.0


@dataclass(frozen=True, slots=True)
class HapticCue:
    """Signals handed to the haptic output subsystem.

    Attributes:
        intensity: Vibration intensity [0, 1]
        tempo_bpm: Entrainment metronome tempo in beats per minute
    """

    intensity: float
    tempo_bpm: float

    @property
    def interval_s(self) -> float:
        """Seconds between metronome ticks."""
        return 60.0 / self.tempo_bpm
