"""Pose landmark data structures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

NUM_POSE_LANDMARKS = 33

# BlazePose skeleton: face, arms/hands, torso, legs/feet.
POSE_CONNECTIONS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (1, 2),
    (2, 3),
    (3, 7),
    (0, 4),
    (4, 5),
    (5, 6),
    (6, 8),
    (9, 10),
    (11, 12),
    (11, 13),
    (13, 15),
    (15, 17),
    (15, 19),
    (15, 21),
    (17, 19),
    (12, 14),
    (14, 16),
    (16, 18),
    (16, 20),
    (16, 22),
    (18, 20),
    (11, 23),
    (12, 24),
    (23, 24),
    (23, 25),
    (24, 26),
    (25, 27),
    (26, 28),
    (27, 29),
    (28, 30),
    (29, 31),
    (30, 32),
    (27, 31),
    (28, 32),
)


@dataclass(frozen=True, slots=True)
class Landmark:
    """Normalized keypoint.

    x, y:
      Image coordinates in [0, 1] (may fall slightly outside when clipped).
    z:
      Depth relative to the hip midpoint, same scale as x.
    """

    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0
    presence: float = 1.0


@dataclass(frozen=True, slots=True)
class PoseResult:
    """Detection output for a single submitted frame."""

    landmarks: Optional[Sequence[Landmark]]
    timestamp_ms: int = 0

    @property
    def has_pose(self) -> bool:
        return bool(self.landmarks)


def to_pixel(landmark: Landmark, width: int, height: int) -> tuple[int, int] | None:
    """Map a normalized landmark to pixel coordinates, or None when non-finite.

    Off-image landmarks still map to (out of range) pixels; OpenCV clips
    lines and circles at the canvas edge.
    """
    x, y = float(landmark.x), float(landmark.y)
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    px = int(math.floor(x * width))
    py = int(math.floor(y * height))
    return px, py
