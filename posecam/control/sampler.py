"""Fixed-interval frame sampling loop."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from ..camera import CameraSource
from .pose_detector import PoseDetector

logger = logging.getLogger(__name__)


class FrameSampler:
    """Hand the current video frame to the detector on a wall-clock timer.

    There is no back-pressure: tick() does not wait for the previous
    inference, so overlapping submissions are left to the detector.
    """

    def __init__(self, camera: CameraSource, detector: PoseDetector, interval_s: float = 0.1):
        if interval_s <= 0.0:
            raise ValueError(f"sampling interval must be > 0, got {interval_s}")
        self.camera = camera
        self.detector = detector
        self.interval_s = float(interval_s)
        self.submitted = 0

        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        t = self._thread
        return t is not None and t.is_alive()

    def tick(self) -> bool:
        if not self.camera.is_active:
            return False
        frame = self.camera.latest_frame()
        if frame is None:
            return False
        self.detector.send(frame)
        self.submitted += 1
        return True

    def _run_loop(self) -> None:
        while not self._stop.wait(self.interval_s):
            try:
                self.tick()
            except (RuntimeError, ValueError):
                # A rejected frame should not kill the timer.
                logger.exception("[POSE] frame submission failed")

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._stop.clear()
            t = threading.Thread(target=self._run_loop, name="posecam-sampler", daemon=True)
            self._thread = t
            t.start()
        logger.info("[POSE] sampling every %.0f ms", self.interval_s * 1000.0)

    def stop(self) -> None:
        with self._lock:
            self._stop.set()
            t = self._thread
            self._thread = None
        if t is not None and t.is_alive() and t is not threading.current_thread():
            t.join(timeout=2.0)
