"""Pose viewer: camera feed with a live skeleton overlay."""

from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np

from ..camera import CameraAccessError, CameraSource
from .display import QUIT_KEYS, DisplayProvider, draw_status
from .overlay import OverlayRenderer
from .pose_detector import PoseDetector
from .sampler import FrameSampler

logger = logging.getLogger(__name__)

PERMISSION_DENIED_TEXT = "Permission denied! Please allow camera access."
LOADING_TEXT = "Loading pose model..."
DEFAULT_FRAME_SIZE = (640, 480)


class PoseViewer:
    """Wires camera, detector, sampler, overlay and display together.

    State carried across the lifetime is two flags (has_permission,
    is_loaded) plus the camera handle. Detection results go straight to the
    renderer and are not kept.
    """

    def __init__(
        self,
        camera: CameraSource,
        detector: PoseDetector,
        display: DisplayProvider,
        renderer: OverlayRenderer,
        sample_interval_s: float = 0.1,
        idle_sleep_s: float = 0.03,
    ):
        self.camera = camera
        self.detector = detector
        self.display = display
        self.renderer = renderer
        self.sampler = FrameSampler(camera, detector, interval_s=sample_interval_s)
        self.idle_sleep_s = float(idle_sleep_s)

        self.has_permission = True
        self.is_loaded = False
        self.frames_shown = 0
        self._closed = False

    def mount(self) -> None:
        # Loading can include a model download; show the loading frame first.
        self.display.show(self.compose())
        self.detector.load()
        self.is_loaded = True
        self.detector.set_result_callback(self.renderer)

        try:
            self.camera.open()
        except CameraAccessError as exc:
            logger.error("[VIEW] error accessing the webcam: %s", exc)
            self.has_permission = False

    def _maybe_start_sampling(self) -> None:
        # Inference begins once the first frame is available.
        if self.sampler.running or self._closed:
            return
        if self.camera.has_frame:
            self.sampler.start()

    def visible_elements(self) -> set[str]:
        elements: set[str] = set()
        if not self.has_permission:
            elements.add("permission_warning")
        if self.is_loaded:
            elements.update(("video", "canvas"))
        else:
            elements.add("loading")
        return elements

    def _blank_frame(self) -> np.ndarray:
        w, h = self.camera.frame_size()
        if w <= 0 or h <= 0:
            w, h = DEFAULT_FRAME_SIZE
        return np.zeros((h, w, 3), dtype=np.uint8)

    def compose(self) -> np.ndarray:
        elements = self.visible_elements()
        frame = None
        if "video" in elements:
            frame = self.camera.latest_frame()
        if frame is None:
            frame = self._blank_frame()
        if "canvas" in elements:
            frame = self.renderer.canvas.composite(frame)

        if "permission_warning" in elements:
            draw_status(frame, [PERMISSION_DENIED_TEXT], color=(68, 68, 239))
        if "loading" in elements:
            draw_status(frame, [LOADING_TEXT])
        return frame

    def step(self) -> Optional[int]:
        """Read one frame (when possible), compose and display it."""
        if self.has_permission and self.camera.is_active:
            if self.camera.read() is None:
                time.sleep(0.01)
            self._maybe_start_sampling()
        else:
            time.sleep(self.idle_sleep_s)
        key = self.display.show(self.compose())
        self.frames_shown += 1
        return key

    def run(self, max_frames: int = 0) -> None:
        while not self._closed:
            key = self.step()
            if key is not None and key in QUIT_KEYS:
                logger.info("[VIEW] quit requested")
                break
            if max_frames > 0 and self.frames_shown >= max_frames:
                break
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.sampler.stop()
        self.camera.release()
        self.detector.set_result_callback(None)
        self.detector.close()
        self.display.close()
        logger.info(
            "[VIEW] closed (frames_shown=%s, frames_sampled=%s)",
            self.frames_shown,
            self.sampler.submitted,
        )
