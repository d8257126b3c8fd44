"""Step detection and gait stability/symmetry metrics.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto

import numpy as np

from proprio_core.analysis.window import RollingWindow
from proprio_core.core.config import GaitSettings
from proprio_core.core.logging import get_logger
from proprio_core.core.types import Joint, KeypointObservation

logger = get_logger(__name__)

SIDES = ("left", "right")
ANKLES = {"left": Joint.LEFT_ANKLE, "right": Joint.RIGHT_ANKLE}


class FootPhase(Enum):
    """States in the per-foot swing detector."""

    STANCE = auto()
    SWING = auto()


@dataclass
class FootState:
    """Internal state for one foot."""

    phase: FootPhase = FootPhase.STANCE
    last_strike: int | None = None
    heights: RollingWindow[float] = field(default_factory=RollingWindow)
    strides: RollingWindow[int] = field(default_factory=RollingWindow)
    step_times: RollingWindow[int] = field(default_factory=RollingWindow)


@dataclass(frozen=True, slots=True)
class StepEvent:
    """A detected foot strike.

    Attributes:
        side: "left" or "right"
        frame: Gait frame ordinal of the strike
        stride_frames: Frames since the same foot's previous strike
        step_frames: Frames since the opposite foot's previous strike
    """

    side: str
    frame: int
    stride_frames: int | None
    step_frames: int | None


@dataclass(frozen=True, slots=True)
class GaitMetrics:
    """Gait metrics derived from the current stride history."""

    stability_index: float = 1.0
    symmetry_index: float = 1.0
    cadence_spm: float = 0.0
    step_count: int = 0


class GaitAnalyzer:
    """Detects steps from ankle height and derives gait metrics.

    Each foot runs a two-state detector on its lift above ground level
    (the lowest point seen in its window, image y grows downward):
        STANCE → SWING: lift exceeds the step threshold
        SWING → STANCE: lift drops below half the threshold (foot strike)

    Every foot strike counts one step. Time is measured in gait frame
    ordinals, so results depend only on frame order.
    """

    def __init__(
        self,
        settings: GaitSettings | None = None,
        window_size: int = 60,
        sample_rate_hz: float = 60.0,
    ) -> None:
        """Initialize analyzer with settings.

        Args:
            settings: Gait parameters (uses defaults if None)
            window_size: Capacity of each ankle height window
            sample_rate_hz: Frame rate used to convert frames to cadence
        """
        self.settings = settings or GaitSettings()
        self.window_size = window_size
        self.sample_rate_hz = sample_rate_hz
        self._feet: dict[str, FootState] = {}
        self._frame = 0
        self._step_count = 0
        self._metrics = GaitMetrics()
        self.reset()

    @property
    def step_count(self) -> int:
        """Steps detected since the last reset."""
        return self._step_count

    @property
    def frame(self) -> int:
        """Gait frame ordinal of the most recent frame."""
        return self._frame

    @property
    def metrics(self) -> GaitMetrics:
        """Metrics after the most recent frame."""
        return self._metrics

    @property
    def stride_cycles(self) -> int:
        """Number of recorded stride intervals across both feet."""
        return sum(len(foot.strides) for foot in self._feet.values())

    def foot(self, side: str) -> FootState:
        """Get detector state for one foot."""
        return self._feet[side]

    def reset(self) -> None:
        """Reset detector to initial state."""
        self._feet = {
            side: FootState(
                heights=RollingWindow(self.window_size),
                strides=RollingWindow(self.settings.stride_history),
                step_times=RollingWindow(self.settings.stride_history),
            )
            for side in SIDES
        }
        self._frame = 0
        self._step_count = 0
        self._metrics = GaitMetrics()

    def skip_frame(self) -> None:
        """Advance the frame clock for a frame that yielded no ankle samples."""
        self._frame += 1

    def update(self, samples: Mapping[Joint, KeypointObservation]) -> list[StepEvent]:
        """Process one frame's qualifying ankle observations.

        Args:
            samples: Confidence-gated observations keyed by joint

        Returns:
            Step events completed on this frame
        """
        self._frame += 1

        # Opposite-foot strike times are read from before this frame so that
        # simultaneous strikes are handled the same way for either side
        previous_strikes = {side: self._feet[side].last_strike for side in SIDES}

        events: list[StepEvent] = []
        for side in SIDES:
            observation = samples.get(ANKLES[side])
            if observation is None:
                continue
            other = "right" if side == "left" else "left"
            event = self._update_foot(side, observation.y, previous_strikes[other])
            if event is not None:
                events.append(event)

        if events:
            self._metrics = self._compute_metrics()

        return events

    def _update_foot(self, side: str, y: float, other_strike: int | None) -> StepEvent | None:
        """Run one foot's swing detector.

        Args:
            side: Foot side
            y: Ankle y position (normalized, downward)
            other_strike: Opposite foot's last strike before this frame

        Returns:
            StepEvent if the foot struck the ground, None otherwise
        """
        foot = self._feet[side]
        foot.heights.append(y)

        ground = max(foot.heights)
        lift = ground - y
        threshold = self.settings.step_lift_threshold

        if foot.phase == FootPhase.STANCE:
            if lift > threshold:
                foot.phase = FootPhase.SWING
            return None

        if lift >= threshold / 2:
            return None

        foot.phase = FootPhase.STANCE
        stride = self._frame - foot.last_strike if foot.last_strike is not None else None
        step = self._frame - other_strike if other_strike is not None else None

        if stride is not None:
            foot.strides.append(stride)
        if step is not None and step > 0:
            foot.step_times.append(step)

        foot.last_strike = self._frame
        self._step_count += 1

        logger.debug("Step %d: %s foot strike at frame %d", self._step_count, side, self._frame)
        return StepEvent(side=side, frame=self._frame, stride_frames=stride, step_frames=step)

    def _compute_metrics(self) -> GaitMetrics:
        left = self._feet["left"]
        right = self._feet["right"]

        strides = np.sort(np.concatenate([left.strides.to_array(), right.strides.to_array()]))
        step_times = np.sort(
            np.concatenate([left.step_times.to_array(), right.step_times.to_array()])
        )

        return GaitMetrics(
            stability_index=compute_stability_index(strides, self.settings.stability_scale),
            symmetry_index=(
                1.0
                if len(strides) < 2
                else compute_symmetry_index(
                    left.step_times.to_array(),
                    right.step_times.to_array(),
                    self.settings.symmetry_tolerance,
                )
            ),
            cadence_spm=compute_cadence(step_times, self.sample_rate_hz),
            step_count=self._step_count,
        )


def compute_stability_index(stride_intervals: np.ndarray, scale: float = 4.0) -> float:
    """Invert stride-interval variability into a [0, 1] stability index.

    Args:
        stride_intervals: Stride durations (any unit)
        scale: Multiplier applied to the coefficient of variation

    Returns:
        clamp(1 - CV * scale, 0, 1); 1.0 with fewer than 2 intervals
    """
    if len(stride_intervals) < 2:
        return 1.0

    mean = float(np.mean(stride_intervals))
    if mean <= 0:
        return 1.0

    cv = float(np.std(stride_intervals)) / mean
    return _clamp_unit(1.0 - cv * scale)


def compute_symmetry_index(
    left: np.ndarray,
    right: np.ndarray,
    tolerance: float = 0.05,
) -> float:
    """Compare mean left and right step times.

    Args:
        left: Left step durations
        right: Right step durations
        tolerance: Relative difference treated as perfectly symmetric

    Returns:
        min/max ratio of the side means in [0, 1]; 1.0 if either side
        has no data
    """
    if len(left) == 0 or len(right) == 0:
        return 1.0

    mean_left = float(np.mean(left))
    mean_right = float(np.mean(right))
    longer = max(mean_left, mean_right)
    shorter = min(mean_left, mean_right)

    if longer <= 0:
        return 1.0
    if (longer - shorter) / longer <= tolerance:
        return 1.0
    return _clamp_unit(shorter / longer)


def compute_cadence(step_times: np.ndarray, sample_rate_hz: float) -> float:
    """Steps per minute from step durations in frames."""
    if len(step_times) == 0:
        return 0.0

    mean_frames = float(np.mean(step_times))
    if mean_frames <= 0:
        return 0.0
    return 60.0 * sample_rate_hz / mean_frames


def _clamp_unit(value: float) -> float:
    if not np.isfinite(value):
        return 1.0
    return min(max(value, 0.0), 1.0)
