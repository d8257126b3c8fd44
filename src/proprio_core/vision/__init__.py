"""Pose detector output decoding."""

from proprio_core.vision.keypoints import observations_from_landmarks, observations_from_mapping

__all__ = ["observations_from_landmarks", "observations_from_mapping"]
