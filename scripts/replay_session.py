#!/usr/bin/env python3
"""Replay a recorded keypoint stream through the motion analysis engine.

Each line of the recording is a JSON object, either
``{"keypoints": {"right_wrist": [x, y, confidence], ...}}`` for a frame
or ``{"camera_unavailable": true}`` for a dropped camera.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from proprio_core.core.config import get_settings
from proprio_core.core.exceptions import (
    CameraUnavailableError,
    KeypointDecodeError,
    ProcessingFailedError,
)
from proprio_core.core.logging import get_logger, setup_logging
from proprio_core.core.types import AnalysisMode, EngineState, HapticCue
from proprio_core.pipeline.engine import MotionAnalysisEngine
from proprio_core.vision.keypoints import observations_from_mapping

logger = get_logger(__name__)


def replay(path: Path, engine: MotionAnalysisEngine) -> int:
    """Feed every frame in a recording to the engine.

    Args:
        path: JSON-lines recording
        engine: Active engine

    Returns:
        Number of frames replayed
    """
    frames = 0

    with open(path) as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue

            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("Line %d is not valid JSON", line_no)
                engine.report_error(ProcessingFailedError(e))
                continue

            if record.get("camera_unavailable"):
                engine.report_error(CameraUnavailableError())
                continue

            try:
                observations = observations_from_mapping(record.get("keypoints", {}))
            except KeypointDecodeError as e:
                logger.warning("Line %d: %s", line_no, e.message)
                engine.report_error(ProcessingFailedError(e))
                continue

            engine.process_frame(observations)
            frames += 1

    return frames


def print_summary(state: EngineState, cue: HapticCue, frames: int) -> None:
    """Print final metrics to console."""
    print("\n" + "=" * 40)
    print("SESSION SUMMARY")
    print("=" * 40)
    print(f"Frames replayed:   {frames}")
    print(f"Mode:              {state.current_mode.value}")
    print(f"Tremor amplitude:  {state.tremor_amplitude:.3f} {state.tremor_trend.value}")
    print(f"Gait stability:    {state.gait_stability_index * 100:.0f}%")
    print(f"Gait symmetry:     {state.gait_symmetry_index * 100:.0f}%")
    print(f"Steps:             {state.session_step_count}")
    print(f"Cadence:           {state.cadence_spm:.1f} steps/min")
    print(f"Haptic cue:        intensity {cue.intensity:.2f} @ {cue.tempo_bpm:.0f} BPM")

    if state.last_error is not None:
        print(f"\n! {state.last_error.message}")


def main() -> int:
    """Run replay script."""
    parser = argparse.ArgumentParser(description="Replay recorded keypoints through the engine")
    parser.add_argument(
        "recording",
        type=Path,
        help="Path to JSON-lines keypoint recording",
    )
    parser.add_argument(
        "--mode",
        "-m",
        choices=["gait", "tremor"],
        default="gait",
        help="Analysis mode (default: gait)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override log level",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.logging, level=args.log_level)

    if not args.recording.exists():
        logger.error("Recording not found: %s", args.recording)
        return 1

    with MotionAnalysisEngine(settings) as engine:
        engine.set_mode(AnalysisMode[args.mode.upper()])
        engine.start_analysis()
        frames = replay(args.recording, engine)
        print_summary(engine.state, engine.haptic_cue(), frames)

    return 0


if __name__ == "__main__":
    sys.exit(main())
