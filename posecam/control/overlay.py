"""Overlay canvas and the pose result rendering callback."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import cv2
import numpy as np

from .landmarks import POSE_CONNECTIONS, Landmark, PoseResult, to_pixel

logger = logging.getLogger(__name__)


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """Parse '#RRGGBB' (or 'RRGGBB') into an OpenCV BGR tuple."""
    s = str(value).strip().lstrip("#")
    if len(s) != 6:
        raise ValueError(f"expected #RRGGBB color, got {value!r}")
    try:
        r, g, b = (int(s[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError(f"expected #RRGGBB color, got {value!r}") from exc
    return b, g, r


@dataclass(frozen=True)
class OverlayStyle:
    connector_color: tuple[int, int, int] = (0, 255, 0)
    connector_width: int = 4
    landmark_color: tuple[int, int, int] = (0, 0, 255)
    landmark_width: int = 2
    landmark_radius: int = 4


class OverlayCanvas:
    """Transparent drawing surface stacked on top of the video.

    Pixels are drawn into a BGR image; a single-channel mask marks which
    pixels are opaque when compositing.
    """

    def __init__(self, width: int = 0, height: int = 0, visibility_threshold: float = 0.5):
        self.visibility_threshold = float(visibility_threshold)
        self.lock = threading.RLock()
        self._image = np.zeros((0, 0, 3), dtype=np.uint8)
        self._mask = np.zeros((0, 0), dtype=np.uint8)
        self.resize(width, height)

    @property
    def size(self) -> tuple[int, int]:
        with self.lock:
            h, w = self._mask.shape[:2]
        return int(w), int(h)

    def resize(self, width: int, height: int) -> None:
        w = max(0, int(width))
        h = max(0, int(height))
        with self.lock:
            if self._mask.shape[:2] == (h, w):
                return
            self._image = np.zeros((h, w, 3), dtype=np.uint8)
            self._mask = np.zeros((h, w), dtype=np.uint8)

    def clear(self) -> None:
        with self.lock:
            self._image[:] = 0
            self._mask[:] = 0

    def _pixels(self, landmarks: Sequence[Landmark]) -> dict[int, tuple[int, int]]:
        h, w = self._mask.shape[:2]
        out: dict[int, tuple[int, int]] = {}
        for idx, lm in enumerate(landmarks):
            if lm.visibility < self.visibility_threshold:
                continue
            px = to_pixel(lm, w, h)
            if px is not None:
                out[idx] = px
        return out

    def draw_connectors(
        self,
        landmarks: Sequence[Landmark],
        connections: Sequence[tuple[int, int]],
        color: tuple[int, int, int],
        thickness: int,
    ) -> None:
        with self.lock:
            if self._mask.size == 0:
                return
            pts = self._pixels(landmarks)
            for start, end in connections:
                if start in pts and end in pts:
                    cv2.line(self._image, pts[start], pts[end], color, thickness, cv2.LINE_AA)
                    cv2.line(self._mask, pts[start], pts[end], 255, thickness, cv2.LINE_AA)

    def draw_landmarks(
        self,
        landmarks: Sequence[Landmark],
        color: tuple[int, int, int],
        thickness: int,
        radius: int = 4,
    ) -> None:
        with self.lock:
            if self._mask.size == 0:
                return
            for pt in self._pixels(landmarks).values():
                cv2.circle(self._image, pt, radius, color, cv2.FILLED, cv2.LINE_AA)
                cv2.circle(self._image, pt, radius, color, thickness, cv2.LINE_AA)
                cv2.circle(self._mask, pt, radius, 255, cv2.FILLED, cv2.LINE_AA)
                cv2.circle(self._mask, pt, radius, 255, thickness, cv2.LINE_AA)

    def composite(self, frame: np.ndarray) -> np.ndarray:
        """Return frame with the canvas painted over it.

        A frame whose size differs from the canvas is returned untouched.
        """
        with self.lock:
            if frame.shape[:2] != self._mask.shape[:2] or self._mask.size == 0:
                return frame
            out = frame.copy()
            opaque = self._mask > 0
            out[opaque] = self._image[opaque]
            return out


class OverlayRenderer:
    """Result callback: redraw the canvas from the latest pose result."""

    def __init__(
        self,
        canvas: OverlayCanvas,
        frame_size: Callable[[], tuple[int, int]],
        style: Optional[OverlayStyle] = None,
        connections: Sequence[tuple[int, int]] = POSE_CONNECTIONS,
    ):
        self.canvas = canvas
        self.frame_size = frame_size
        self.style = style or OverlayStyle()
        self.connections = tuple(connections)
        self.results_drawn = 0

    def __call__(self, result: PoseResult) -> None:
        width, height = self.frame_size()
        # One redraw at a time so compositing never sees a half-drawn canvas.
        with self.canvas.lock:
            self.canvas.resize(width, height)
            self.canvas.clear()
            if result.has_pose:
                s = self.style
                self.canvas.draw_connectors(
                    result.landmarks, self.connections, s.connector_color, s.connector_width
                )
                self.canvas.draw_landmarks(
                    result.landmarks, s.landmark_color, s.landmark_width, s.landmark_radius
                )
        self.results_drawn += 1
        if self.results_drawn == 1:
            logger.info("[POSE] first result drawn (pose=%s)", result.has_pose)
