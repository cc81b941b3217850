"""Webcam acquisition."""

from __future__ import annotations

import logging
import threading
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class CameraAccessError(RuntimeError):
    """Camera could not be opened (permission denied, busy or missing)."""


class CameraSource:
    """Video-only capture device acting as the video sink.

    The latest frame is kept so the sampler thread can hand it to the
    detector while the main thread keeps reading and displaying.
    """

    def __init__(
        self,
        index: int = 0,
        width: int = 640,
        height: int = 480,
        mirror: bool = False,
    ):
        self.index = int(index)
        self.width = int(width)
        self.height = int(height)
        self.mirror = bool(mirror)

        self.cap = None
        self._lock = threading.Lock()
        self._latest: Optional[np.ndarray] = None
        self._released = False
        self._read_failing = False

    def open(self) -> None:
        if self.cap is not None:
            return
        cap = cv2.VideoCapture(self.index, cv2.CAP_DSHOW)
        if not cap.isOpened():
            cap.release()
            cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise CameraAccessError(f"Cannot open webcam index {self.index}")

        if self.width > 0:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        if self.height > 0:
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self.cap = cap
        self._released = False
        logger.info(
            "[CAMERA] opened (index=%s, requested=%sx%s, mirror=%s)",
            self.index,
            self.width,
            self.height,
            self.mirror,
        )

    @property
    def is_active(self) -> bool:
        return self.cap is not None and not self._released

    @property
    def has_frame(self) -> bool:
        with self._lock:
            return self._latest is not None

    def read(self) -> Optional[np.ndarray]:
        if not self.is_active:
            return None
        ok, frame = self.cap.read()
        if not ok or frame is None:
            if not self._read_failing:
                logger.warning("[CAMERA] frame read failed (index=%s)", self.index)
                self._read_failing = True
            return None
        if self._read_failing:
            logger.info("[CAMERA] frames resumed (index=%s)", self.index)
            self._read_failing = False

        if self.mirror:
            frame = cv2.flip(frame, 1)
        with self._lock:
            first = self._latest is None
            self._latest = frame
        if first:
            h, w = frame.shape[:2]
            logger.info("[CAMERA] first frame available (%sx%s)", w, h)
        return frame

    def latest_frame(self) -> Optional[np.ndarray]:
        with self._lock:
            return None if self._latest is None else self._latest.copy()

    def frame_size(self) -> tuple[int, int]:
        """Return (width, height) of the live video, else the requested size."""
        with self._lock:
            if self._latest is not None:
                h, w = self._latest.shape[:2]
                return int(w), int(h)
        return self.width, self.height

    def release(self) -> None:
        if self.cap is None or self._released:
            return
        self._released = True
        try:
            self.cap.release()
        except cv2.error:
            pass
        logger.info("[CAMERA] released (index=%s)", self.index)
