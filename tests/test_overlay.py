import numpy as np
import pytest

from posecam.control.landmarks import Landmark, PoseResult
from posecam.control.overlay import (
    OverlayCanvas,
    OverlayRenderer,
    OverlayStyle,
    parse_hex_color,
)

GREEN = (0, 255, 0)
RED = (0, 0, 255)


def _two_point_pose(visibility: float = 1.0):
    return (
        Landmark(x=0.25, y=0.5, visibility=visibility),
        Landmark(x=0.75, y=0.5, visibility=visibility),
    )


def test_parse_hex_color_returns_bgr():
    assert parse_hex_color("#00FF00") == (0, 255, 0)
    assert parse_hex_color("#FF0000") == (0, 0, 255)
    assert parse_hex_color("102030") == (0x30, 0x20, 0x10)


@pytest.mark.parametrize("bad", ["#FFF", "#GG0000", "", "#12345678"])
def test_parse_hex_color_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_hex_color(bad)


def test_draw_connectors_paints_line_between_landmarks():
    canvas = OverlayCanvas(100, 100)
    canvas.draw_connectors(_two_point_pose(), [(0, 1)], GREEN, 4)
    frame = canvas.composite(np.zeros((100, 100, 3), dtype=np.uint8))
    assert tuple(frame[50, 50]) == GREEN
    assert tuple(frame[10, 10]) == (0, 0, 0)


def test_low_visibility_landmarks_are_skipped():
    canvas = OverlayCanvas(100, 100, visibility_threshold=0.5)
    canvas.draw_connectors(_two_point_pose(visibility=0.1), [(0, 1)], GREEN, 4)
    canvas.draw_landmarks(_two_point_pose(visibility=0.1), RED, 2)
    frame = canvas.composite(np.zeros((100, 100, 3), dtype=np.uint8))
    assert not frame.any()


def test_composite_ignores_size_mismatch():
    canvas = OverlayCanvas(100, 100)
    canvas.draw_landmarks(_two_point_pose(), RED, 2)
    frame = np.zeros((50, 80, 3), dtype=np.uint8)
    assert canvas.composite(frame) is frame


def test_composite_keeps_video_where_canvas_is_transparent():
    canvas = OverlayCanvas(100, 100)
    canvas.draw_landmarks(_two_point_pose(), RED, 2)
    video = np.full((100, 100, 3), 7, dtype=np.uint8)
    out = canvas.composite(video)
    assert tuple(out[0, 0]) == (7, 7, 7)
    assert tuple(out[50, 25]) == RED
    assert tuple(video[50, 25]) == (7, 7, 7)


def test_renderer_resizes_canvas_to_video_before_drawing():
    canvas = OverlayCanvas(10, 10)
    renderer = OverlayRenderer(canvas, frame_size=lambda: (320, 240), connections=[(0, 1)])
    renderer(PoseResult(landmarks=_two_point_pose()))
    assert canvas.size == (320, 240)
    out = canvas.composite(np.zeros((240, 320, 3), dtype=np.uint8))
    assert tuple(out[120, 160]) == GREEN
    assert tuple(out[120, 80]) == RED


def test_renderer_clears_previous_drawing_when_pose_is_lost():
    canvas = OverlayCanvas()
    renderer = OverlayRenderer(canvas, frame_size=lambda: (100, 100), connections=[(0, 1)])
    renderer(PoseResult(landmarks=_two_point_pose()))
    renderer(PoseResult(landmarks=None))
    out = canvas.composite(np.zeros((100, 100, 3), dtype=np.uint8))
    assert not out.any()
    assert renderer.results_drawn == 2


def test_renderer_uses_style_colors():
    style = OverlayStyle(connector_color=(255, 0, 0), landmark_color=(0, 255, 255))
    canvas = OverlayCanvas()
    renderer = OverlayRenderer(
        canvas, frame_size=lambda: (100, 100), style=style, connections=[(0, 1)]
    )
    renderer(PoseResult(landmarks=_two_point_pose()))
    out = canvas.composite(np.zeros((100, 100, 3), dtype=np.uint8))
    assert tuple(out[50, 50]) == (255, 0, 0)
    assert tuple(out[50, 75]) == (0, 255, 255)


def test_connector_to_off_image_landmark_is_clipped_not_dropped():
    canvas = OverlayCanvas(100, 100)
    pose = (Landmark(x=0.5, y=0.5), Landmark(x=1.02, y=0.5))
    canvas.draw_connectors(pose, [(0, 1)], GREEN, 4)
    frame = canvas.composite(np.zeros((100, 100, 3), dtype=np.uint8))
    assert tuple(frame[50, 75]) == GREEN
    assert tuple(frame[50, 99]) == GREEN
