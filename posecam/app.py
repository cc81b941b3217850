"""
Webcam pose viewer:
- Camera acquisition (OpenCV VideoCapture); denial shows a warning
- Fixed-interval sampler hands the current frame to the pose detector
- MediaPipe PoseLandmarker (live-stream mode) reports landmarks asynchronously
- Result callback redraws the skeleton overlay canvas
- Display provider shows video + canvas (window or headless)

Deps:
  uv add numpy opencv-python mediapipe pyyaml
"""

from __future__ import annotations

import logging

from .camera import CameraSource
from .config import AppConfig, parse_args
from .control.display import DisplayProvider, NullDisplay, OpenCvWindowDisplay
from .control.overlay import OverlayCanvas, OverlayRenderer, OverlayStyle, parse_hex_color
from .control.pose_detector import PoseDetector
from .control.viewer import PoseViewer

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_detector(cfg: AppConfig) -> PoseDetector:
    from .detectors.mediapipe_pose import MediaPipePoseDetector

    return MediaPipePoseDetector(
        task_model_path=cfg.mp_task_model,
        task_model_url=cfg.mp_task_url,
        min_detection_confidence=cfg.min_detection_confidence,
        min_presence_confidence=cfg.min_presence_confidence,
        min_tracking_confidence=cfg.min_tracking_confidence,
    )


def build_display_provider(cfg: AppConfig) -> DisplayProvider:
    if cfg.display_provider == "window":
        return OpenCvWindowDisplay(title=cfg.window_title)
    if cfg.display_provider == "none":
        return NullDisplay()
    raise RuntimeError(f"Unsupported display provider: {cfg.display_provider}")


def build_renderer(cfg: AppConfig, camera: CameraSource) -> OverlayRenderer:
    style = OverlayStyle(
        connector_color=parse_hex_color(cfg.connector_color),
        connector_width=cfg.connector_width,
        landmark_color=parse_hex_color(cfg.landmark_color),
        landmark_width=cfg.landmark_width,
        landmark_radius=cfg.landmark_radius,
    )
    canvas = OverlayCanvas(visibility_threshold=cfg.visibility_threshold)
    return OverlayRenderer(canvas=canvas, frame_size=camera.frame_size, style=style)


def build_viewer(cfg: AppConfig, detector: PoseDetector | None = None) -> PoseViewer:
    camera = CameraSource(
        index=cfg.camera_index,
        width=cfg.camera_width,
        height=cfg.camera_height,
        mirror=cfg.camera_mirror,
    )
    return PoseViewer(
        camera=camera,
        detector=detector if detector is not None else build_detector(cfg),
        display=build_display_provider(cfg),
        renderer=build_renderer(cfg, camera),
        sample_interval_s=cfg.sample_interval_ms / 1000.0,
    )


def main(argv=None) -> int:
    cfg = parse_args(argv)
    configure_logging(cfg.log_level)

    viewer = build_viewer(cfg)
    try:
        try:
            viewer.mount()
        except RuntimeError:
            logger.exception("[POSE] failed to load pose detector")
            return 1

        if not viewer.has_permission and cfg.display_provider == "none":
            logger.error("[VIEW] camera unavailable and no window to report it; exiting")
            return 1

        viewer.run(max_frames=cfg.max_frames)
    finally:
        viewer.close()
    return 0 if viewer.has_permission else 1


if __name__ == "__main__":
    raise SystemExit(main())
