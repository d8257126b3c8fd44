"""Pytest fixtures for ProprioCore tests."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from proprio_core.core.config import (
    AnalysisSettings,
    GaitSettings,
    HapticSettings,
    Settings,
    TremorSettings,
)
from proprio_core.core.types import AnalysisMode, Joint, KeypointObservation
from proprio_core.pipeline.engine import MotionAnalysisEngine

Frame = set[KeypointObservation]

GROUND_Y = 0.9
SWING_FRAMES = 8
LIFT = 0.06


@pytest.fixture
def settings() -> Settings:
    """Default settings built without the cached singleton."""
    return Settings(
        analysis=AnalysisSettings(),
        tremor=TremorSettings(),
        gait=GaitSettings(),
        haptic=HapticSettings(),
    )


@pytest.fixture
def engine(settings: Settings) -> MotionAnalysisEngine:
    """Inactive engine in its default (gait) mode."""
    return MotionAnalysisEngine(settings)


@pytest.fixture
def tremor_engine(engine: MotionAnalysisEngine) -> MotionAnalysisEngine:
    """Active engine in tremor mode."""
    engine.set_mode(AnalysisMode.TREMOR)
    engine.start_analysis()
    return engine


@pytest.fixture
def gait_engine(engine: MotionAnalysisEngine) -> MotionAnalysisEngine:
    """Active engine in gait mode."""
    engine.start_analysis()
    return engine


@pytest.fixture
def oscillating_wrist_x() -> list[float]:
    """60 wrist x-positions alternating ±0.01 around 0.5."""
    return [0.5 + (0.01 if i % 2 == 0 else -0.01) for i in range(60)]


@pytest.fixture
def symmetric_walk() -> list[Frame]:
    """Regular walk: each foot swings every 30 frames, half a cycle apart."""
    return gait_frames(120, left_swings=range(5, 120, 30), right_swings=range(20, 120, 30))


@pytest.fixture
def asymmetric_walk() -> list[Frame]:
    """Walk where the left step takes half as long as the right step."""
    return gait_frames(150, left_swings=range(5, 150, 30), right_swings=range(25, 150, 30))


def wrist_frame(
    x: float,
    y: float = 0.5,
    confidence: float = 0.9,
    joint: Joint = Joint.RIGHT_WRIST,
) -> Frame:
    """Create a frame containing a single wrist observation."""
    return {KeypointObservation(joint=joint, x=x, y=y, confidence=confidence)}


def ankle_height(frame_idx: int, swings: Iterable[int]) -> float:
    """Ankle y for a foot that lifts for SWING_FRAMES after each swing start."""
    for start in swings:
        if start <= frame_idx < start + SWING_FRAMES:
            return GROUND_Y - LIFT
    return GROUND_Y


def gait_frames(
    total: int,
    left_swings: Iterable[int],
    right_swings: Iterable[int],
    confidence: float = 0.9,
) -> list[Frame]:
    """Create ankle frames from explicit swing start frames per foot."""
    left_swings = list(left_swings)
    right_swings = list(right_swings)
    frames = []
    for i in range(total):
        frames.append(
            {
                KeypointObservation(
                    joint=Joint.LEFT_ANKLE,
                    x=0.45,
                    y=ankle_height(i, left_swings),
                    confidence=confidence,
                ),
                KeypointObservation(
                    joint=Joint.RIGHT_ANKLE,
                    x=0.55,
                    y=ankle_height(i, right_swings),
                    confidence=confidence,
                ),
            }
        )
    return frames


def mirror_frames(frames: list[Frame]) -> list[Frame]:
    """Swap left and right joint labels in every frame."""
    return [
        {
            KeypointObservation(joint=obs.joint.mirror, x=obs.x, y=obs.y, confidence=obs.confidence)
            for obs in frame
        }
        for frame in frames
    ]
