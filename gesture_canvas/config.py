"""
Configuration Module - Tunable Constants
========================================
Groups the empirically tuned thresholds and application settings into
dataclasses. Values can be overridden from environment variables
(optionally loaded from a .env file by the entry point).
"""

import os
from dataclasses import dataclass, field, replace
from typing import Callable, List, Mapping, Optional, Tuple


ENV_PREFIX = "GESTURE_CANVAS_"


@dataclass(frozen=True)
class GestureConfig:
    """
    Thresholds for finger-state extraction, classification and debouncing.

    Attributes:
        pinch_threshold: Max thumb-index tip distance for a pinch (normalized)
        thumb_extension_threshold: Min thumb tip-IP distance for extended thumb
        history_size: Number of raw labels kept by the stability filter
        stability_count: Votes needed in the window to commit a new gesture
    """
    pinch_threshold: float = 0.04
    thumb_extension_threshold: float = 0.04
    history_size: int = 4
    stability_count: int = 3


@dataclass(frozen=True)
class SmoothingConfig:
    """Douglas-Peucker tolerance and cardinal spline parameters."""
    tolerance: float = 1.5
    tension: float = 0.5
    segments: int = 12
    min_points: int = 5  # strokes need more than this many points


@dataclass(frozen=True)
class CanvasConfig:
    """
    Canvas size, brush defaults and view limits.

    Colors are BGR. ``min_zoom``/``max_zoom`` are None for an unbounded zoom.
    """
    width: int = 960
    height: int = 540
    background_color: Tuple[int, int, int] = (255, 255, 255)
    brush_color: Tuple[int, int, int] = (26, 26, 26)
    brush_size: int = 4
    eraser_size: int = 30
    mirror_x: bool = False
    min_zoom: Optional[float] = None
    max_zoom: Optional[float] = None
    palette: Tuple[Tuple[int, int, int], ...] = (
        (26, 26, 26),     # Ink
        (0, 0, 255),      # Red
        (0, 160, 0),      # Green
        (255, 0, 0),      # Blue
        (0, 200, 255),    # Amber
        (255, 255, 0),    # Cyan
        (255, 0, 255),    # Magenta
        (128, 0, 128),    # Purple
    )
    brush_sizes: Tuple[int, ...] = (2, 4, 6, 10, 16, 24)


@dataclass(frozen=True)
class TrackingConfig:
    """Camera capture and MediaPipe hand landmarker settings."""
    camera_id: int = 0
    width: int = 960
    height: int = 540
    fps: int = 30
    max_hands: int = 2
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.5


@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration for the gesture canvas application."""
    gesture: GestureConfig = field(default_factory=GestureConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    output_dir: str = "output"
    log_level: str = "INFO"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_optional_float(value: str) -> Optional[float]:
    if value.strip().lower() in ("", "none"):
        return None
    return float(value)


# (env suffix, section, field, parser)
_ENV_FIELDS: List[Tuple[str, Optional[str], str, Callable[[str], object]]] = [
    ("PINCH_THRESHOLD", "gesture", "pinch_threshold", float),
    ("THUMB_THRESHOLD", "gesture", "thumb_extension_threshold", float),
    ("HISTORY_SIZE", "gesture", "history_size", int),
    ("STABILITY_COUNT", "gesture", "stability_count", int),
    ("SMOOTH_TOLERANCE", "smoothing", "tolerance", float),
    ("SMOOTH_TENSION", "smoothing", "tension", float),
    ("SMOOTH_SEGMENTS", "smoothing", "segments", int),
    ("BRUSH_SIZE", "canvas", "brush_size", int),
    ("ERASER_SIZE", "canvas", "eraser_size", int),
    ("MIRROR_X", "canvas", "mirror_x", _parse_bool),
    ("MIN_ZOOM", "canvas", "min_zoom", _parse_optional_float),
    ("MAX_ZOOM", "canvas", "max_zoom", _parse_optional_float),
    ("CAMERA", "tracking", "camera_id", int),
    ("WIDTH", "tracking", "width", int),
    ("HEIGHT", "tracking", "height", int),
    ("FPS", "tracking", "fps", int),
    ("OUTPUT_DIR", None, "output_dir", str),
    ("LOG_LEVEL", None, "log_level", str.upper),
]


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build an AppConfig from defaults and ``GESTURE_CANVAS_*`` variables.

    Args:
        env: Mapping to read from (defaults to ``os.environ``)

    Returns:
        The resulting AppConfig

    Raises:
        ValueError: If a variable cannot be parsed or a value is out of range
    """
    env = os.environ if env is None else env
    config = AppConfig()
    sections = {
        "gesture": config.gesture,
        "smoothing": config.smoothing,
        "canvas": config.canvas,
        "tracking": config.tracking,
    }
    top_level = {}

    for suffix, section, name, parser in _ENV_FIELDS:
        raw = env.get(ENV_PREFIX + suffix)
        if raw is None:
            continue
        try:
            value = parser(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid {ENV_PREFIX + suffix}={raw!r}: {exc}") from exc
        if section is None:
            top_level[name] = value
        else:
            sections[section] = replace(sections[section], **{name: value})

    config = replace(config, **sections, **top_level)
    validate_config(config)
    return config


def validate_config(config: AppConfig) -> None:
    """Raise ValueError for settings the pipeline cannot work with."""
    gesture = config.gesture
    if gesture.history_size < 1:
        raise ValueError("history_size must be at least 1")
    if not 1 <= gesture.stability_count <= gesture.history_size:
        raise ValueError("stability_count must be between 1 and history_size")
    if config.smoothing.segments < 1:
        raise ValueError("segments must be at least 1")
    if config.smoothing.tolerance < 0:
        raise ValueError("tolerance must not be negative")

    canvas = config.canvas
    for name in ("min_zoom", "max_zoom"):
        bound = getattr(canvas, name)
        if bound is not None and bound <= 0:
            raise ValueError(f"{name} must be positive")
    if (canvas.min_zoom is not None and canvas.max_zoom is not None
            and canvas.min_zoom > canvas.max_zoom):
        raise ValueError("min_zoom must not exceed max_zoom")
    if config.tracking.max_hands < 1:
        raise ValueError("max_hands must be at least 1")
