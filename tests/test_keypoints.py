"""Tests for keypoint decoding."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from proprio_core.core.exceptions import KeypointDecodeError
from proprio_core.core.types import Joint, KeypointObservation
from proprio_core.vision.keypoints import observations_from_landmarks, observations_from_mapping


def _landmarks(count: int = 33) -> list[SimpleNamespace]:
    """MediaPipe-like landmark list with x encoding the index."""
    return [SimpleNamespace(x=i / 100, y=0.5, z=0.0, visibility=0.8) for i in range(count)]


class TestObservationsFromLandmarks:
    """Tests for MediaPipe landmark conversion."""

    def test_extracts_known_joints(self) -> None:
        """Every Joint is taken from its landmark index."""
        observations = observations_from_landmarks(_landmarks())

        assert len(observations) == len(Joint)
        wrist = next(o for o in observations if o.joint == Joint.RIGHT_WRIST)
        assert wrist == KeypointObservation(Joint.RIGHT_WRIST, x=0.16, y=0.5, confidence=0.8)

    def test_restricts_to_requested_joints(self) -> None:
        """Only the requested joints are returned."""
        observations = observations_from_landmarks(_landmarks(), joints=[Joint.LEFT_ANKLE])

        assert {o.joint for o in observations} == {Joint.LEFT_ANKLE}

    def test_missing_visibility_counts_as_confident(self) -> None:
        """Landmarks without visibility get full confidence."""
        landmarks = [SimpleNamespace(x=0.5, y=0.5) for _ in range(33)]
        observations = observations_from_landmarks(landmarks, joints=[Joint.RIGHT_WRIST])

        assert next(iter(observations)).confidence == 1.0

    def test_short_list_skips_missing_indices(self) -> None:
        """Upper-body-only output yields no lower-body joints."""
        observations = observations_from_landmarks(_landmarks(17))

        assert all(o.joint.is_upper_body for o in observations)

    def test_malformed_landmark_raises(self) -> None:
        """Landmarks without coordinates cannot be decoded."""
        landmarks = _landmarks()
        landmarks[Joint.RIGHT_WRIST.value] = SimpleNamespace(y=0.5)

        with pytest.raises(KeypointDecodeError):
            observations_from_landmarks(landmarks)


class TestObservationsFromMapping:
    """Tests for joint-name mapping conversion."""

    def test_accepts_lists_and_dicts(self) -> None:
        """Both entry formats decode to the same observation type."""
        observations = observations_from_mapping(
            {
                "right_wrist": [0.5, 0.4, 0.9],
                "LEFT_ANKLE": {"x": 0.45, "y": 0.9, "confidence": 0.7},
            }
        )

        assert observations == {
            KeypointObservation(Joint.RIGHT_WRIST, x=0.5, y=0.4, confidence=0.9),
            KeypointObservation(Joint.LEFT_ANKLE, x=0.45, y=0.9, confidence=0.7),
        }

    def test_ignores_unknown_joints(self) -> None:
        """Names outside the Joint enum are skipped."""
        assert observations_from_mapping({"nose": [0.5, 0.2, 0.9]}) == set()

    def test_malformed_entry_raises(self) -> None:
        """Entries with missing fields raise KeypointDecodeError."""
        with pytest.raises(KeypointDecodeError):
            observations_from_mapping({"right_wrist": [0.5, 0.4]})
        with pytest.raises(KeypointDecodeError):
            observations_from_mapping({"right_wrist": {"x": 0.5}})

    def test_non_mapping_raises(self) -> None:
        """The top-level value must be a mapping."""
        with pytest.raises(KeypointDecodeError):
            observations_from_mapping([0.5, 0.4, 0.9])  # type: ignore[arg-type]
