import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")

from gesture_canvas import camera as camera_module  # noqa: E402
from gesture_canvas.camera import Camera, CameraError  # noqa: E402


class ClosedCapture:
    released = False

    def __init__(self, *args):
        pass

    def isOpened(self):
        return False

    def release(self):
        ClosedCapture.released = True


def test_unopenable_device_raises_and_releases(monkeypatch):
    monkeypatch.setattr(camera_module.cv2, "VideoCapture", ClosedCapture)
    with pytest.raises(CameraError):
        with Camera():
            pass
    assert ClosedCapture.released


def test_each_frame_is_returned_once():
    camera = Camera()
    assert camera.get_frame() is None

    frame = np.zeros((2, 3, 3), dtype=np.uint8)
    frame[:, 0] = 255
    camera._publish(frame)

    mirrored = camera.get_frame()
    assert mirrored[:, 2].tolist() == [[255, 255, 255]] * 2
    assert mirrored[:, 0].tolist() == [[0, 0, 0]] * 2
    assert camera.get_frame() is None

    camera._publish(frame)
    assert camera.get_frame() is not None


def test_stop_without_start_is_safe():
    camera = Camera()
    camera.stop()
    assert camera.get_fps() == 0.0
