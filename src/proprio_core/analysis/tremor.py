"""Tremor amplitude from positional variance of a single joint.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

from proprio_core.analysis.window import RollingWindow
from proprio_core.core.config import TremorSettings
from proprio_core.core.types import KeypointObservation, TremorTrend


class TremorAnalyzer:
    """Tracks one coordinate of one joint and derives tremor amplitude.

    Amplitude is the population standard deviation of the window,
    scaled and capped to [0, 1]. Only sample order matters; no timing
    information is used.
    """

    def __init__(self, settings: TremorSettings | None = None, window_size: int = 60) -> None:
        """Initialize analyzer.

        Args:
            settings: Tremor parameters (uses defaults if None)
            window_size: Capacity of the coordinate window
        """
        self.settings = settings or TremorSettings()
        self._window: RollingWindow[float] = RollingWindow(window_size)
        self._amplitudes: RollingWindow[float] = RollingWindow(self.settings.trend_history)
        self._amplitude = 0.0

    @property
    def window(self) -> RollingWindow[float]:
        """Buffered coordinate samples."""
        return self._window

    @property
    def amplitude(self) -> float:
        """Amplitude after the most recent sample."""
        return self._amplitude

    @property
    def trend(self) -> TremorTrend:
        """Direction of change over the amplitude history."""
        return classify_trend(self._amplitudes, self.settings.trend_tolerance)

    def update(self, observation: KeypointObservation) -> float:
        """Add a qualifying observation and recompute amplitude.

        Args:
            observation: Observation of the tracked joint

        Returns:
            Updated tremor amplitude [0, 1]
        """
        value = observation.x if self.settings.axis == "x" else observation.y
        self._window.append(value)
        self._amplitude = compute_tremor_amplitude(self._window, self.settings.scale_factor)
        self._amplitudes.append(self._amplitude)
        return self._amplitude

    def reset(self) -> None:
        """Clear buffered samples and amplitude history."""
        self._window.clear()
        self._amplitudes.clear()
        self._amplitude = 0.0


def compute_tremor_amplitude(samples: Iterable[float], scale_factor: float = 100.0) -> float:
    """Compute normalized tremor amplitude.

    Args:
        samples: Coordinate samples, oldest first
        scale_factor: Multiplier mapping standard deviation to [0, 1]

    Returns:
        min(sqrt(population variance) * scale_factor, 1.0); 0.0 for
        fewer than two samples
    """
    values = np.fromiter(samples, dtype=np.float64)
    if len(values) < 2:
        return 0.0

    with np.errstate(over="ignore", invalid="ignore"):
        variance = float(np.var(values))  # ddof=0: population variance
    amplitude = math.sqrt(variance) * scale_factor if variance >= 0 else math.nan

    # Overflow on extreme jitter saturates instead of reading as no tremor
    if not math.isfinite(amplitude):
        return 1.0
    return min(max(amplitude, 0.0), 1.0)


def classify_trend(amplitudes: Iterable[float], tolerance: float = 0.05) -> TremorTrend:
    """Compare the newer half of an amplitude history against the older half.

    Args:
        amplitudes: Amplitude history, oldest first
        tolerance: Minimum mean difference counted as a change

    Returns:
        TremorTrend; STABLE when fewer than 4 values are available
    """
    values = np.fromiter(amplitudes, dtype=np.float64)
    if len(values) < 4:
        return TremorTrend.STABLE

    mid = len(values) // 2
    delta = float(np.mean(values[mid:]) - np.mean(values[:mid]))

    if delta > tolerance:
        return TremorTrend.INCREASING
    if delta < -tolerance:
        return TremorTrend.DECREASING
    return TremorTrend.STABLE
