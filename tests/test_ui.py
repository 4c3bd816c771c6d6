import pytest

pytest.importorskip("cv2")
pytest.importorskip("mediapipe")

from gesture_canvas.config import AppConfig  # noqa: E402
from gesture_canvas.ui import apply_args, parse_args  # noqa: E402


def test_command_line_overrides_config():
    args = parse_args(["--camera", "1", "--width", "1280", "--max-zoom", "6", "--log-level", "warning"])
    config = apply_args(AppConfig(), args)
    assert config.tracking.camera_id == 1
    assert config.tracking.width == 1280
    assert config.canvas.width == 1280
    assert config.canvas.max_zoom == 6.0
    assert config.log_level == "WARNING"


def test_command_line_without_flags_keeps_config():
    assert apply_args(AppConfig(), parse_args([])) == AppConfig()


def test_invalid_zoom_flags_rejected():
    with pytest.raises(ValueError):
        apply_args(AppConfig(), parse_args(["--min-zoom", "4", "--max-zoom", "2"]))
