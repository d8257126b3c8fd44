"""Decode pose detector output into keypoint observations.

Converts MediaPipe landmark lists and plain joint-name mappings into
KeypointObservation sets so detector objects do not leak into the
analysis code. No detector is run here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from proprio_core.core.exceptions import KeypointDecodeError
from proprio_core.core.types import Joint, KeypointObservation


def observations_from_landmarks(
    landmarks: Sequence[Any],
    joints: Iterable[Joint] | None = None,
) -> set[KeypointObservation]:
    """Convert a MediaPipe-style landmark list.

    Items are indexed by MediaPipe pose landmark number and expose
    `x`, `y` and optionally `visibility` (missing counts as 1.0).

    Args:
        landmarks: Landmarks of a single detected pose
        joints: Joints to extract (all known joints if None)

    Returns:
        Set of observations for joints present in the list

    Raises:
        KeypointDecodeError: If a landmark lacks coordinates
    """
    observations: set[KeypointObservation] = set()

    for joint in joints or Joint:
        if joint.value >= len(landmarks):
            continue
        lm = landmarks[joint.value]
        visibility = getattr(lm, "visibility", None)
        try:
            observations.add(
                KeypointObservation(
                    joint=joint,
                    x=float(lm.x),
                    y=float(lm.y),
                    confidence=1.0 if visibility is None else float(visibility),
                )
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise KeypointDecodeError(f"Invalid landmark for {joint.name}: {e}") from e

    return observations


def observations_from_mapping(mapping: Mapping[str, Any]) -> set[KeypointObservation]:
    """Convert a joint-name mapping.

    Accepts `{"right_wrist": {"x": .5, "y": .4, "confidence": .9}}` or
    `{"right_wrist": [.5, .4, .9]}`. Unknown joint names are ignored.

    Args:
        mapping: Joint name to keypoint data

    Returns:
        Set of observations

    Raises:
        KeypointDecodeError: If the mapping or a keypoint entry is malformed
    """
    if not isinstance(mapping, Mapping):
        raise KeypointDecodeError(f"Expected a mapping of keypoints, got {type(mapping).__name__}")

    observations: set[KeypointObservation] = set()

    for name, data in mapping.items():
        try:
            joint = Joint[str(name).upper()]
        except KeyError:
            continue

        try:
            if isinstance(data, Mapping):
                x, y, confidence = data["x"], data["y"], data["confidence"]
            else:
                x, y, confidence = data
            observations.add(
                KeypointObservation(
                    joint=joint,
                    x=float(x),
                    y=float(y),
                    confidence=float(confidence),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise KeypointDecodeError(f"Malformed keypoint {name!r}: {e}") from e

    return observations
