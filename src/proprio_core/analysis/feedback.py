"""Signals derived from engine state for haptic and display collaborators.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from proprio_core.core.config import HapticSettings
from proprio_core.core.types import EngineState, HapticCue


def compute_tempo(stability: float, settings: HapticSettings | None = None) -> float:
    """Entrainment tempo from gait stability.

    A fully stable gait plays at the base tempo; lower stability slows
    the metronome down to half the base tempo, bounded by the
    configured range.

    Args:
        stability: Gait stability index [0, 1]
        settings: Tempo parameters (uses defaults if None)

    Returns:
        Tempo in beats per minute
    """
    settings = settings or HapticSettings()
    stability = min(max(stability, 0.0), 1.0)
    tempo = settings.base_bpm * (0.5 + 0.5 * stability)
    return min(max(tempo, settings.min_bpm), settings.max_bpm)


def haptic_cue(state: EngineState, settings: HapticSettings | None = None) -> HapticCue:
    """Build the haptic cue for a state snapshot."""
    return HapticCue(
        intensity=min(max(state.tremor_amplitude, 0.0), 1.0),
        tempo_bpm=compute_tempo(state.gait_stability_index, settings),
    )


def stability_below_threshold(state: EngineState, threshold: float = 0.8) -> bool:
    """Whether the guidance overlay should be shown."""
    return state.gait_stability_index < threshold
