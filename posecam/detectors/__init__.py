"""Pose detector implementations."""

from .mediapipe_pose import MediaPipePoseDetector

__all__ = ["MediaPipePoseDetector"]
