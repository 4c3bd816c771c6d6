"""
Canvas Module - Drawing Elements, View & History
================================================
Holds the drawing model: committed elements, the element being drawn,
the pan/zoom view transform and snapshot-based undo/redo. Rendering
lives in the rendering module; nothing here touches pixels.
"""

import copy
import itertools
import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from gesture_canvas.config import CanvasConfig, SmoothingConfig
from gesture_canvas.stroke_processor import WorldPoint, smoothen_path

logger = logging.getLogger(__name__)

_element_ids = itertools.count(1)


class ElementType(Enum):
    """Kinds of drawable elements."""
    FREEDRAW = 'freedraw'
    ERASE = 'erase'
    CIRCLE = 'circle'


@dataclass
class CanvasElement:
    """
    A drawable unit on the canvas.

    Attributes:
        type: Element kind
        color: BGR color
        stroke_width: Line width in world units
        points: Ordered world-space points
        id: Unique element id
        timestamp: When the element was started
    """
    type: ElementType
    color: Tuple[int, int, int]
    stroke_width: int
    points: List[WorldPoint] = field(default_factory=list)
    id: int = field(default_factory=lambda: next(_element_ids))
    timestamp: float = field(default_factory=time.time)

    def add_point(self, point: WorldPoint):
        """Add a point to the element."""
        self.points.append(point)


@dataclass
class ViewTransform:
    """
    Pan/zoom mapping between world and screen space.

    ``screen = world * zoom + pan_offset``
    """
    pan_offset: Tuple[float, float] = (0.0, 0.0)
    zoom: float = 1.0

    def screen_to_world(self, point: Optional[Tuple[float, float]]) -> Optional[WorldPoint]:
        if point is None:
            return None
        return ((point[0] - self.pan_offset[0]) / self.zoom,
                (point[1] - self.pan_offset[1]) / self.zoom)

    def world_to_screen(self, point: Optional[WorldPoint]) -> Optional[Tuple[float, float]]:
        if point is None:
            return None
        return (point[0] * self.zoom + self.pan_offset[0],
                point[1] * self.zoom + self.pan_offset[1])

    def pan_by(self, dx: float, dy: float):
        self.pan_offset = (self.pan_offset[0] + dx, self.pan_offset[1] + dy)

    def zoom_by(self, factor: float, min_zoom: Optional[float] = None,
                max_zoom: Optional[float] = None):
        """
        Multiply the zoom, optionally clamped to [min_zoom, max_zoom].

        Factors that are not positive are ignored so the zoom stays
        invertible.
        """
        if not factor > 0:
            return
        zoom = self.zoom * factor
        if min_zoom is not None:
            zoom = max(zoom, min_zoom)
        if max_zoom is not None:
            zoom = min(zoom, max_zoom)
        self.zoom = zoom

    def reset(self):
        self.pan_offset = (0.0, 0.0)
        self.zoom = 1.0


class History:
    """
    Snapshot-based undo/redo over the element list.

    The cursor always points at a valid snapshot; a new commit drops
    every snapshot after the cursor.
    """

    def __init__(self):
        self._snapshots: List[List[CanvasElement]] = [[]]
        self._index = 0

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def index(self) -> int:
        return self._index

    def commit(self, elements: List[CanvasElement]):
        """Store a deep copy of ``elements`` after the cursor."""
        del self._snapshots[self._index + 1:]
        self._snapshots.append(copy.deepcopy(elements))
        self._index += 1

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def undo(self) -> Optional[List[CanvasElement]]:
        """Step back; returns the restored elements, None at the oldest snapshot."""
        if not self.can_undo():
            return None
        self._index -= 1
        return copy.deepcopy(self._snapshots[self._index])

    def redo(self) -> Optional[List[CanvasElement]]:
        """Step forward; returns the restored elements, None at the newest snapshot."""
        if not self.can_redo():
            return None
        self._index += 1
        return copy.deepcopy(self._snapshots[self._index])

    def reset(self):
        """Forget everything but a single empty snapshot."""
        self._snapshots = [[]]
        self._index = 0


class DrawingSession:
    """
    The shared state of one drawing session.

    Owns the element list, the in-progress element, the view transform,
    the history and the UI-bound fields (current tool, cursor position,
    brush settings) that the dispatcher and renderer read and write.
    """

    def __init__(
        self,
        config: Optional[CanvasConfig] = None,
        smoothing: Optional[SmoothingConfig] = None
    ):
        self.config = config or CanvasConfig()
        self.smoothing = smoothing or SmoothingConfig()

        self.width = self.config.width
        self.height = self.config.height

        self.elements: List[CanvasElement] = []
        self.current_element: Optional[CanvasElement] = None
        self.view = ViewTransform()
        self.history = History()

        # UI-bound state
        self.current_tool = 'idle'
        self.cursor_position: Optional[Tuple[float, float]] = None

        # Brush settings, latched by new elements only
        self.brush_color = self.config.brush_color
        self.brush_size = self.config.brush_size
        self.eraser_size = self.config.eraser_size

        # Transient status message
        self.status_message = ""
        self._status_until = 0.0

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    # Drawing

    def start_drawing(self, world_pos: WorldPoint, element_type: ElementType):
        """Begin a new element at ``world_pos`` with the current brush."""
        width = self.eraser_size if element_type == ElementType.ERASE else self.brush_size
        self.current_element = CanvasElement(
            type=element_type,
            color=self.brush_color,
            stroke_width=width,
            points=[world_pos]
        )

    def continue_drawing(self, world_pos: WorldPoint):
        if self.current_element is not None:
            self.current_element.add_point(world_pos)

    def finish_drawing(self) -> Optional[CanvasElement]:
        """
        Finalize the in-progress element.

        Elements with at least two points are committed; shorter ones are
        discarded. Returns the committed element, if any.
        """
        element = self.current_element
        if element is None:
            return None
        self.current_element = None
        if len(element.points) > 1:
            self.add_element(element)
            return element
        logger.debug("Discarded %s element with %d point(s)", element.type.value, len(element.points))
        return None

    def add_element(self, element: CanvasElement):
        self.elements.append(element)
        self.history.commit(self.elements)
        logger.debug("Committed %s element #%d (%d points)",
                     element.type.value, element.id, len(element.points))

    # Commands

    def clear(self):
        """
        Remove all elements and reset the view.

        The empty canvas is committed to history so undo brings the
        cleared elements back. Clearing an already empty canvas adds no
        snapshot.
        """
        had_content = bool(self.elements) or self.current_element is not None
        self.elements = []
        self.current_element = None
        self.view.reset()
        if had_content:
            self.history.commit(self.elements)
            logger.info("Canvas cleared")

    def reset(self):
        """Full clear: elements, view and history back to a blank state."""
        self.elements = []
        self.current_element = None
        self.view.reset()
        self.history.reset()
        logger.debug("Canvas reset")

    def undo(self) -> bool:
        """
        Restore the previous snapshot.

        Undoing past the oldest snapshot performs a full reset instead.
        Returns True when a snapshot was restored.
        """
        restored = self.history.undo()
        if restored is None:
            self.reset()
            return False
        self.elements = restored
        logger.info("Undo (%d/%d)", self.history.index, len(self.history) - 1)
        return True

    def redo(self) -> bool:
        restored = self.history.redo()
        if restored is None:
            return False
        self.elements = restored
        logger.info("Redo (%d/%d)", self.history.index, len(self.history) - 1)
        return True

    def smoothen_all(self) -> int:
        """
        Smooth every long enough freehand element.

        Returns the number of elements replaced. A snapshot is taken
        whenever the canvas is not empty.
        """
        if not self.elements:
            return 0

        smoothed = 0
        new_elements = []
        for element in self.elements:
            if (element.type == ElementType.FREEDRAW
                    and len(element.points) > self.smoothing.min_points):
                element = replace(element, points=smoothen_path(element.points, self.smoothing))
                smoothed += 1
            new_elements.append(element)

        self.elements = new_elements
        self.history.commit(self.elements)
        self.show_status("Handwriting Smoothened!")
        logger.info("Smoothened %d element(s)", smoothed)
        return smoothed

    # Brush settings

    def set_brush_color(self, color: Tuple[int, int, int]):
        """Set the brush color (BGR)."""
        self.brush_color = tuple(color)

    def set_brush_size(self, size: int):
        """Set the brush size."""
        self.brush_size = max(1, min(int(size), 50))

    def set_eraser_size(self, size: int):
        """Set the eraser size."""
        self.eraser_size = max(5, min(int(size), 100))

    # Status

    def show_status(self, message: str, duration: float = 0.8):
        self.status_message = message
        self._status_until = time.time() + duration

    def current_status(self) -> str:
        """The status message, or empty once it has expired."""
        if self.status_message and time.time() > self._status_until:
            self.status_message = ""
        return self.status_message
