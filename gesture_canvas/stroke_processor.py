"""
Stroke Processor Module - Handwriting Simplification & Smoothing
================================================================
Turns point-dense freehand strokes into clean curves: Douglas-Peucker
simplification followed by cardinal spline interpolation.
"""

from typing import List, Sequence, Tuple

import numpy as np

from gesture_canvas.config import SmoothingConfig

WorldPoint = Tuple[float, float]


def perpendicular_distances(
    points: np.ndarray,
    start: np.ndarray,
    end: np.ndarray
) -> np.ndarray:
    """
    Distance of each point to the line through ``start`` and ``end``.

    Falls back to the distance from ``start`` when both ends coincide.
    """
    dx, dy = end - start
    length = np.hypot(dx, dy)
    if length == 0:
        return np.hypot(points[:, 0] - start[0], points[:, 1] - start[1])
    cross = dy * points[:, 0] - dx * points[:, 1] + end[0] * start[1] - end[1] * start[0]
    return np.abs(cross) / length


def simplify_path(points: Sequence[WorldPoint], tolerance: float = 1.5) -> List[WorldPoint]:
    """
    Douglas-Peucker simplification.

    Each index range is split at its farthest point while that distance
    exceeds ``tolerance``; otherwise only its endpoints survive. Ties go
    to the first farthest point. Paths of fewer than 3 points are
    returned unchanged.

    Args:
        points: Ordered (x, y) points
        tolerance: Maximum allowed perpendicular deviation

    Returns:
        The retained points, in order
    """
    if len(points) < 3:
        return list(points)

    coords = np.asarray(points, dtype=float)
    keep = np.zeros(len(coords), dtype=bool)
    keep[0] = keep[-1] = True

    stack = [(0, len(coords) - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        distances = perpendicular_distances(coords[first + 1:last], coords[first], coords[last])
        offset = int(np.argmax(distances))
        if distances[offset] > tolerance:
            split = first + 1 + offset
            keep[split] = True
            stack.append((split, last))
            stack.append((first, split))

    return [points[i] for i in np.flatnonzero(keep)]


def create_spline(
    points: Sequence[WorldPoint],
    tension: float = 0.5,
    segments: int = 12
) -> List[WorldPoint]:
    """
    Cardinal spline through the control points.

    Every segment p1->p2 is sampled at ``segments + 1`` evenly spaced
    parameters including both ends, blending the neighbors p0 and p3
    (clamped to the endpoints at the path boundaries).
    """
    if len(points) < 2:
        return [tuple(p) for p in points]

    coords = np.asarray(points, dtype=float)
    t = np.linspace(0.0, 1.0, segments + 1)
    t2 = t * t
    t3 = t2 * t
    c1 = -tension * t3 + 2 * tension * t2 - tension * t
    c2 = (2 - tension) * t3 + (tension - 3) * t2 + 1
    c3 = (tension - 2) * t3 + (3 - 2 * tension) * t2 + tension * t
    c4 = tension * t3 - tension * t2
    weights = np.stack([c1, c2, c3, c4], axis=1)

    result: List[WorldPoint] = []
    last = len(coords) - 1
    for i in range(last):
        p0 = coords[i - 1] if i > 0 else coords[i]
        p3 = coords[i + 2] if i < last - 1 else coords[i + 1]
        control = np.stack([p0, coords[i], coords[i + 1], p3])
        result.extend((float(x), float(y)) for x, y in weights @ control)
    return result


def smoothen_path(
    points: Sequence[WorldPoint],
    config: SmoothingConfig = SmoothingConfig()
) -> List[WorldPoint]:
    """Simplify then spline a stroke; short paths come back unchanged."""
    if len(points) < 3:
        return list(points)
    simplified = simplify_path(points, config.tolerance)
    return create_spline(simplified, config.tension, config.segments)
