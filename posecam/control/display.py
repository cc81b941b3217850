"""Display providers for the composed viewer frame."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import cv2
import numpy as np

logger = logging.getLogger(__name__)

QUIT_KEYS = (27, ord("q"), ord("Q"))


def draw_status(
    frame: np.ndarray,
    lines: Sequence[str],
    color: tuple[int, int, int] = (80, 255, 80),
    origin: tuple[int, int] = (12, 24),
) -> None:
    x, y = origin
    for line in lines:
        cv2.putText(
            frame,
            line,
            (x, y),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.52,
            color,
            1,
            cv2.LINE_AA,
        )
        y += 22


class DisplayProvider:
    """Base display provider interface."""

    def show(self, frame: np.ndarray) -> Optional[int]:
        """Present one frame. Returns the pressed key code, if any."""
        raise NotImplementedError

    def close(self) -> None:
        pass


class OpenCvWindowDisplay(DisplayProvider):
    """HighGUI window; keys come from cv2.waitKey."""

    def __init__(self, title: str = "posecam"):
        self.window_name = title
        self._closed = False

    def show(self, frame: np.ndarray) -> Optional[int]:
        if self._closed:
            return None
        cv2.imshow(self.window_name, frame)
        key = cv2.waitKey(1)
        if key < 0:
            return None
        return key & 0xFF

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            cv2.destroyWindow(self.window_name)
        except cv2.error:
            pass


class NullDisplay(DisplayProvider):
    """Headless provider: frames are counted, never shown."""

    def __init__(self, log_every: int = 100):
        self.log_every = max(1, int(log_every))
        self.frames = 0
        self.last_frame: Optional[np.ndarray] = None

    def show(self, frame: np.ndarray) -> Optional[int]:
        self.frames += 1
        self.last_frame = frame
        if self.frames % self.log_every == 0:
            logger.info("[DISPLAY] %s frames composed", self.frames)
        return None
