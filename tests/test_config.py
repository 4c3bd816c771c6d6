import pytest

from gesture_canvas.config import AppConfig, load_config


def test_defaults_match_tuned_constants():
    config = load_config({})
    assert config.gesture.pinch_threshold == 0.04
    assert config.gesture.thumb_extension_threshold == 0.04
    assert config.gesture.history_size == 4
    assert config.gesture.stability_count == 3
    assert config.smoothing.tolerance == 1.5
    assert config.smoothing.tension == 0.5
    assert config.smoothing.segments == 12
    assert config.canvas.min_zoom is None
    assert config.canvas.max_zoom is None
    assert config == AppConfig()


def test_environment_overrides():
    config = load_config({
        "GESTURE_CANVAS_CAMERA": "2",
        "GESTURE_CANVAS_PINCH_THRESHOLD": "0.05",
        "GESTURE_CANVAS_MAX_ZOOM": "4",
        "GESTURE_CANVAS_MIRROR_X": "yes",
        "GESTURE_CANVAS_LOG_LEVEL": "debug",
        "UNRELATED": "ignored",
    })
    assert config.tracking.camera_id == 2
    assert config.gesture.pinch_threshold == 0.05
    assert config.canvas.max_zoom == 4.0
    assert config.canvas.mirror_x is True
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("env", [
    {"GESTURE_CANVAS_CAMERA": "front"},
    {"GESTURE_CANVAS_MIRROR_X": "maybe"},
    {"GESTURE_CANVAS_STABILITY_COUNT": "5"},
    {"GESTURE_CANVAS_MIN_ZOOM": "0"},
    {"GESTURE_CANVAS_MIN_ZOOM": "3", "GESTURE_CANVAS_MAX_ZOOM": "2"},
])
def test_invalid_values_raise(env):
    with pytest.raises(ValueError):
        load_config(env)
