"""MediaPipe Pose Landmarker detector (live-stream mode)."""

from __future__ import annotations

import logging
import os
import threading
import time
import urllib.error
import urllib.request
from pathlib import Path

import cv2
import mediapipe as mp
import numpy as np

from ..control.landmarks import Landmark, PoseResult
from ..control.pose_detector import PoseDetector

logger = logging.getLogger(__name__)


def _ensure_task_model(task_model_path: str, task_model_url: str) -> Path:
    path = Path(task_model_path)
    if path.exists():
        return path

    if not task_model_url:
        raise RuntimeError(
            f"MediaPipe .task model missing: {path}. Set --mp-task-url or provide local --mp-task-model."
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".download")
    logger.info("[POSE] downloading MediaPipe task model -> %s", path)
    try:
        urllib.request.urlretrieve(task_model_url, tmp_path)
    except (OSError, urllib.error.URLError, ValueError) as exc:
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass
        raise RuntimeError(
            f"Failed to download MediaPipe task model from {task_model_url}: {exc}"
        ) from exc
    os.replace(tmp_path, path)
    return path


def _to_pose_result(result, timestamp_ms: int) -> PoseResult:
    # Only the first pose is drawn; num_poses=1 anyway.
    poses = getattr(result, "pose_landmarks", None)
    if not poses:
        return PoseResult(landmarks=None, timestamp_ms=int(timestamp_ms))

    landmarks = []
    for p in poses[0]:
        landmarks.append(
            Landmark(
                x=float(p.x),
                y=float(p.y),
                z=float(p.z or 0.0),
                visibility=float(1.0 if p.visibility is None else p.visibility),
                presence=float(1.0 if p.presence is None else p.presence),
            )
        )
    return PoseResult(landmarks=tuple(landmarks), timestamp_ms=int(timestamp_ms))


class MediaPipePoseDetector(PoseDetector):
    """
    Webcam pose detector backed by MediaPipe Tasks PoseLandmarker.

    Frames are submitted with detect_async(); MediaPipe invokes the result
    callback from its own worker thread. Frames sent while an inference is
    in flight are dropped by MediaPipe, not here.
    """

    name = "mediapipe"

    def __init__(
        self,
        task_model_path: str = "assets/models/pose_landmarker_lite.task",
        task_model_url: str = "",
        min_detection_confidence: float = 0.5,
        min_presence_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ):
        super().__init__()
        self.task_model_path = str(task_model_path)
        self.task_model_url = str(task_model_url)
        self.min_detection_confidence = float(min_detection_confidence)
        self.min_presence_confidence = float(min_presence_confidence)
        self.min_tracking_confidence = float(min_tracking_confidence)

        self._landmarker = None
        self._closed = False
        self._ts_lock = threading.Lock()
        self._video_ts_ms = 0
        self._t0 = time.monotonic()

    def load(self) -> None:
        if self._landmarker is not None:
            return
        model_path = _ensure_task_model(self.task_model_path, self.task_model_url)

        try:
            BaseOptions = mp.tasks.BaseOptions
            PoseLandmarker = mp.tasks.vision.PoseLandmarker
            PoseLandmarkerOptions = mp.tasks.vision.PoseLandmarkerOptions
            RunningMode = mp.tasks.vision.RunningMode
        except (AttributeError, ImportError) as exc:
            raise RuntimeError(
                "mediapipe.tasks is unavailable. Please upgrade mediapipe (>=0.10)."
            ) from exc
        options = PoseLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(model_path)),
            running_mode=RunningMode.LIVE_STREAM,
            num_poses=1,
            min_pose_detection_confidence=self.min_detection_confidence,
            min_pose_presence_confidence=self.min_presence_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
            output_segmentation_masks=False,
            result_callback=self._handle_result,
        )
        self._landmarker = PoseLandmarker.create_from_options(options)
        self._t0 = time.monotonic()

        logger.info(
            "[POSE] detector=mediapipe (task=%s, det=%.2f, presence=%.2f, tracking=%.2f)",
            model_path,
            self.min_detection_confidence,
            self.min_presence_confidence,
            self.min_tracking_confidence,
        )

    def _next_timestamp_ms(self) -> int:
        # LIVE_STREAM requires strictly increasing timestamps.
        with self._ts_lock:
            ts_ms = int((time.monotonic() - self._t0) * 1000.0)
            self._video_ts_ms = max(self._video_ts_ms + 1, ts_ms)
            return self._video_ts_ms

    def _handle_result(self, result, output_image, timestamp_ms: int) -> None:
        if self._closed:
            return
        self._emit(_to_pose_result(result, timestamp_ms))

    def send(self, frame_bgr: np.ndarray) -> None:
        if self._landmarker is None or self._closed:
            return
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        self._landmarker.detect_async(mp_image, self._next_timestamp_ms())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._landmarker is None:
            return
        try:
            self._landmarker.close()
        except (AttributeError, RuntimeError):
            pass
