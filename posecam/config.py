"""CLI config and defaults."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .control.overlay import parse_hex_color

DEFAULT_TASK_MODEL = "assets/models/pose_landmarker_lite.task"
DEFAULT_TASK_URL = (
    "https://storage.googleapis.com/mediapipe-models/pose_landmarker/"
    "pose_landmarker_lite/float16/latest/pose_landmarker_lite.task"
)


@dataclass(frozen=True)
class AppConfig:
    camera_index: int = 0
    camera_width: int = 640
    camera_height: int = 480
    camera_mirror: bool = False
    sample_interval_ms: int = 100
    display_provider: str = "window"
    window_title: str = "posecam - Pose Detection"
    max_frames: int = 0
    connector_color: str = "#00FF00"
    connector_width: int = 4
    landmark_color: str = "#FF0000"
    landmark_width: int = 2
    landmark_radius: int = 4
    visibility_threshold: float = 0.5
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    mp_task_model: str = DEFAULT_TASK_MODEL
    mp_task_url: str = DEFAULT_TASK_URL
    log_level: str = "info"


_APP_CONFIG_FIELDS = {f.name for f in fields(AppConfig)}
_BOOL_FIELDS = {"camera_mirror"}
_INT_FIELDS = {
    "camera_index",
    "camera_width",
    "camera_height",
    "sample_interval_ms",
    "max_frames",
    "connector_width",
    "landmark_width",
    "landmark_radius",
}
_FLOAT_FIELDS = {
    "visibility_threshold",
    "min_detection_confidence",
    "min_presence_confidence",
    "min_tracking_confidence",
}
_STRING_FIELDS = {
    "display_provider",
    "window_title",
    "connector_color",
    "landmark_color",
    "mp_task_model",
    "mp_task_url",
    "log_level",
}


def _parse_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in {"1", "true", "yes", "on"}:
            return True
        if s in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"config key '{key}' expects a bool, got {value!r}")


def _coerce_config_value(key: str, value: Any) -> Any:
    try:
        if key in _BOOL_FIELDS:
            return _parse_bool(value, key)
        if key in _INT_FIELDS:
            return int(value)
        if key in _FLOAT_FIELDS:
            return float(value)
        if key in _STRING_FIELDS:
            return "" if value is None else str(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid value for config key '{key}': {value!r}") from exc
    raise ValueError(f"unsupported config key '{key}'")


def _normalize_config_key(raw_key: Any) -> str:
    if not isinstance(raw_key, str):
        raise ValueError(f"config key must be string, got {type(raw_key).__name__}")
    key = raw_key.strip().replace("-", "_")
    if not key:
        raise ValueError("config key cannot be empty")
    return key


def _load_yaml_config(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ValueError(f"--config file not found: {p}")
    if not p.is_file():
        raise ValueError(f"--config must point to a file: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"failed to read --config file {p}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse YAML config {p}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"--config root must be a mapping/object, got {type(loaded).__name__}")

    normalized: dict[str, Any] = {}
    for raw_key, raw_value in loaded.items():
        key = _normalize_config_key(raw_key)
        if key not in _APP_CONFIG_FIELDS:
            raise ValueError(f"unknown config key in {p}: {raw_key!r}")
        normalized[key] = _coerce_config_value(key, raw_value)
    return normalized


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="posecam",
        description="Webcam viewer with a live MediaPipe pose skeleton overlay.",
    )
    ap.add_argument(
        "--config",
        type=str,
        default="",
        help="YAML config file path. CLI args override YAML values.",
    )
    ap.add_argument(
        "--camera-index",
        type=int,
        default=0,
        help="OpenCV camera index.",
    )
    ap.add_argument(
        "--camera-width",
        type=int,
        default=640,
        help="Requested camera frame width (0 keeps the device default).",
    )
    ap.add_argument(
        "--camera-height",
        type=int,
        default=480,
        help="Requested camera frame height (0 keeps the device default).",
    )
    ap.add_argument(
        "--camera-mirror",
        dest="camera_mirror",
        action="store_true",
        default=False,
        help="Mirror the preview horizontally (selfie view).",
    )
    ap.add_argument(
        "--no-camera-mirror",
        dest="camera_mirror",
        action="store_false",
        help="Disable mirror preview.",
    )
    ap.add_argument(
        "--sample-interval-ms",
        type=int,
        default=100,
        help="Send one frame to the pose detector every N milliseconds.",
    )
    ap.add_argument(
        "--display-provider",
        choices=["window", "none"],
        default="window",
        help="Display provider: OpenCV window or headless (no window).",
    )
    ap.add_argument(
        "--window-title",
        type=str,
        default="posecam - Pose Detection",
        help="OpenCV window title.",
    )
    ap.add_argument(
        "--max-frames",
        type=int,
        default=0,
        help="Stop after N displayed frames (0 = run until quit).",
    )
    ap.add_argument(
        "--connector-color",
        type=str,
        default="#00FF00",
        help="Skeleton connector color as #RRGGBB.",
    )
    ap.add_argument("--connector-width", type=int, default=4, help="Connector line width in px.")
    ap.add_argument(
        "--landmark-color",
        type=str,
        default="#FF0000",
        help="Landmark point color as #RRGGBB.",
    )
    ap.add_argument("--landmark-width", type=int, default=2, help="Landmark outline width in px.")
    ap.add_argument("--landmark-radius", type=int, default=4, help="Landmark point radius in px.")
    ap.add_argument(
        "--visibility-threshold",
        type=float,
        default=0.5,
        help="Skip landmarks whose visibility is below this value, in [0,1].",
    )
    ap.add_argument(
        "--min-detection-confidence",
        type=float,
        default=0.5,
        help="MediaPipe minimum pose detection confidence, in [0,1].",
    )
    ap.add_argument(
        "--min-presence-confidence",
        type=float,
        default=0.5,
        help="MediaPipe minimum pose presence confidence, in [0,1].",
    )
    ap.add_argument(
        "--min-tracking-confidence",
        type=float,
        default=0.5,
        help="MediaPipe minimum tracking confidence, in [0,1].",
    )
    ap.add_argument(
        "--mp-task-model",
        type=str,
        default=DEFAULT_TASK_MODEL,
        help="Path to MediaPipe PoseLandmarker .task model.",
    )
    ap.add_argument(
        "--mp-task-url",
        type=str,
        default=DEFAULT_TASK_URL,
        help="Download URL for .task model when local file is missing.",
    )
    ap.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Global log level.",
    )
    return ap


def _check_unit_interval(name: str, value: float) -> None:
    if not (0.0 <= value <= 1.0):
        raise ValueError(f"--{name} must be in [0,1], got {value}")


def validate_config(cfg: AppConfig) -> None:
    if cfg.camera_index < 0:
        raise ValueError(f"--camera-index must be >= 0, got {cfg.camera_index}")
    if cfg.camera_width < 0:
        raise ValueError(f"--camera-width must be >= 0, got {cfg.camera_width}")
    if cfg.camera_height < 0:
        raise ValueError(f"--camera-height must be >= 0, got {cfg.camera_height}")
    if cfg.sample_interval_ms <= 0:
        raise ValueError(f"--sample-interval-ms must be > 0, got {cfg.sample_interval_ms}")
    if cfg.display_provider not in {"window", "none"}:
        raise ValueError(
            f"--display-provider must be one of window|none, got {cfg.display_provider}"
        )
    if cfg.log_level not in {"debug", "info", "warning", "error"}:
        raise ValueError(
            f"--log-level must be one of debug|info|warning|error, got {cfg.log_level}"
        )
    if cfg.max_frames < 0:
        raise ValueError(f"--max-frames must be >= 0, got {cfg.max_frames}")
    for name, value in (
        ("connector-color", cfg.connector_color),
        ("landmark-color", cfg.landmark_color),
    ):
        try:
            parse_hex_color(value)
        except ValueError as exc:
            raise ValueError(f"--{name}: {exc}") from exc
    if cfg.connector_width <= 0:
        raise ValueError(f"--connector-width must be > 0, got {cfg.connector_width}")
    if cfg.landmark_width <= 0:
        raise ValueError(f"--landmark-width must be > 0, got {cfg.landmark_width}")
    if cfg.landmark_radius <= 0:
        raise ValueError(f"--landmark-radius must be > 0, got {cfg.landmark_radius}")
    _check_unit_interval("visibility-threshold", cfg.visibility_threshold)
    _check_unit_interval("min-detection-confidence", cfg.min_detection_confidence)
    _check_unit_interval("min-presence-confidence", cfg.min_presence_confidence)
    _check_unit_interval("min-tracking-confidence", cfg.min_tracking_confidence)
    if not cfg.mp_task_model.strip():
        raise ValueError("--mp-task-model must be non-empty")


def parse_args(argv=None) -> AppConfig:
    bootstrap = argparse.ArgumentParser(add_help=False)
    bootstrap.add_argument("--config", type=str, default="")
    bootstrap_ns, _ = bootstrap.parse_known_args(argv)

    yaml_cfg: dict[str, Any] = {}
    yaml_error: Optional[str] = None
    if bootstrap_ns.config:
        try:
            yaml_cfg = _load_yaml_config(bootstrap_ns.config)
        except ValueError as exc:
            yaml_error = str(exc)

    ap = build_arg_parser()
    if yaml_error is not None:
        ap.error(yaml_error)
    if yaml_cfg:
        ap.set_defaults(**yaml_cfg)
    args = ap.parse_args(argv)

    cfg = AppConfig(
        camera_index=args.camera_index,
        camera_width=args.camera_width,
        camera_height=args.camera_height,
        camera_mirror=bool(args.camera_mirror),
        sample_interval_ms=args.sample_interval_ms,
        display_provider=args.display_provider,
        window_title=args.window_title,
        max_frames=args.max_frames,
        connector_color=args.connector_color,
        connector_width=args.connector_width,
        landmark_color=args.landmark_color,
        landmark_width=args.landmark_width,
        landmark_radius=args.landmark_radius,
        visibility_threshold=float(args.visibility_threshold),
        min_detection_confidence=float(args.min_detection_confidence),
        min_presence_confidence=float(args.min_presence_confidence),
        min_tracking_confidence=float(args.min_tracking_confidence),
        mp_task_model=args.mp_task_model,
        mp_task_url=args.mp_task_url,
        log_level=args.log_level,
    )
    try:
        validate_config(cfg)
    except ValueError as exc:
        ap.error(str(exc))
    return cfg
