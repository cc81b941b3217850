"""Pose detector interface."""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from .landmarks import PoseResult

ResultCallback = Callable[[PoseResult], None]


class PoseDetector:
    """Base interface for asynchronous pose detectors.

    Implementations accept BGR frames through send() and deliver results
    later, possibly from another thread, through the result callback.
    """

    name: str = "base"

    def __init__(self) -> None:
        self._on_result: Optional[ResultCallback] = None

    def load(self) -> None:
        """Load model weights. Blocks until the detector is ready."""
        raise NotImplementedError

    def set_result_callback(self, callback: Optional[ResultCallback]) -> None:
        self._on_result = callback

    def _emit(self, result: PoseResult) -> None:
        callback = self._on_result
        if callback is not None:
            callback(result)

    def send(self, frame_bgr: np.ndarray) -> None:
        """Submit one frame for inference. Must not block on the result."""
        raise NotImplementedError

    def close(self) -> None:
        pass
