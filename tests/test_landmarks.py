from posecam.control.landmarks import (
    NUM_POSE_LANDMARKS,
    POSE_CONNECTIONS,
    Landmark,
    PoseResult,
    to_pixel,
)


def test_pose_connections_reference_valid_landmarks():
    assert len(POSE_CONNECTIONS) == 35
    assert len(set(POSE_CONNECTIONS)) == len(POSE_CONNECTIONS)
    for a, b in POSE_CONNECTIONS:
        assert 0 <= a < NUM_POSE_LANDMARKS
        assert 0 <= b < NUM_POSE_LANDMARKS
        assert a != b


def test_to_pixel_scales_normalized_coordinates():
    assert to_pixel(Landmark(x=0.5, y=0.25), 640, 480) == (320, 120)
    assert to_pixel(Landmark(x=0.0, y=0.0), 640, 480) == (0, 0)


def test_to_pixel_keeps_off_image_landmarks():
    assert to_pixel(Landmark(x=1.0, y=1.0), 640, 480) == (640, 480)
    assert to_pixel(Landmark(x=-0.1, y=0.5), 100, 100) == (-10, 50)
    assert to_pixel(Landmark(x=0.5, y=1.2), 100, 100) == (50, 120)


def test_to_pixel_rejects_non_finite():
    assert to_pixel(Landmark(x=float("nan"), y=0.5), 640, 480) is None
    assert to_pixel(Landmark(x=0.5, y=float("inf")), 640, 480) is None


def test_pose_result_has_pose():
    assert PoseResult(landmarks=None).has_pose is False
    assert PoseResult(landmarks=()).has_pose is False
    assert PoseResult(landmarks=(Landmark(0.1, 0.2),)).has_pose is True
