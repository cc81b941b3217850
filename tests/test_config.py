import dataclasses

import pytest

from posecam.config import AppConfig, parse_args, validate_config


def test_validate_config_accepts_defaults():
    validate_config(AppConfig())


def test_defaults_match_viewer_demo():
    cfg = parse_args([])
    assert cfg.sample_interval_ms == 100
    assert (cfg.camera_width, cfg.camera_height) == (640, 480)
    assert cfg.connector_color == "#00FF00"
    assert cfg.connector_width == 4
    assert cfg.landmark_color == "#FF0000"
    assert cfg.landmark_width == 2


@pytest.mark.parametrize(
    "field, value, flag",
    [
        ("sample_interval_ms", 0, "--sample-interval-ms"),
        ("camera_index", -1, "--camera-index"),
        ("camera_width", -1, "--camera-width"),
        ("display_provider", "bad", "--display-provider"),
        ("max_frames", -5, "--max-frames"),
        ("connector_color", "green", "--connector-color"),
        ("landmark_color", "#12", "--landmark-color"),
        ("connector_width", 0, "--connector-width"),
        ("landmark_radius", 0, "--landmark-radius"),
        ("visibility_threshold", 1.5, "--visibility-threshold"),
        ("min_detection_confidence", -0.1, "--min-detection-confidence"),
        ("mp_task_model", "  ", "--mp-task-model"),
    ],
)
def test_validate_config_rejects_invalid_values(field, value, flag):
    cfg = dataclasses.replace(AppConfig(), **{field: value})
    with pytest.raises(ValueError, match=flag):
        validate_config(cfg)


def test_parse_args_reads_yaml_config(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(
        "\n".join(
            [
                "camera_index: 2",
                "camera-mirror: true",
                "sample_interval_ms: 50",
                "display_provider: none",
                "connector_color: '#0000FF'",
            ]
        ),
        encoding="utf-8",
    )
    cfg = parse_args(["--config", str(cfg_path)])
    assert cfg.camera_index == 2
    assert cfg.camera_mirror is True
    assert cfg.sample_interval_ms == 50
    assert cfg.display_provider == "none"
    assert cfg.connector_color == "#0000FF"


def test_parse_args_cli_overrides_yaml(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("camera_mirror: true\nsample_interval_ms: 50\n", encoding="utf-8")
    cfg = parse_args(
        ["--config", str(cfg_path), "--no-camera-mirror", "--sample-interval-ms", "200"]
    )
    assert cfg.camera_mirror is False
    assert cfg.sample_interval_ms == 200


def test_parse_args_rejects_unknown_yaml_key(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("bad_key: 1\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        parse_args(["--config", str(cfg_path)])


def test_parse_args_rejects_non_mapping_yaml(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        parse_args(["--config", str(cfg_path)])


def test_parse_args_rejects_missing_config_file(tmp_path):
    with pytest.raises(SystemExit):
        parse_args(["--config", str(tmp_path / "missing.yaml")])


def test_parse_args_rejects_invalid_cli_value():
    with pytest.raises(SystemExit):
        parse_args(["--sample-interval-ms", "0"])


def test_validate_config_rejects_unknown_log_level():
    cfg = AppConfig(log_level="verbose")
    with pytest.raises(ValueError, match="--log-level"):
        validate_config(cfg)


def test_parse_args_rejects_unknown_log_level_from_yaml(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("log_level: verbose\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        parse_args(["--config", str(cfg_path)])
