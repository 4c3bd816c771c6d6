"""
Dispatcher Module - Gesture to Canvas Action
============================================
Turns the stabilized gesture of each frame into exactly one canvas
action: start/continue/finish a stroke, pan by the palm movement,
zoom by the change in two-hand distance, or clear.
"""

import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

from gesture_canvas.canvas import DrawingSession, ElementType
from gesture_canvas.gesture_logic import Gesture, GestureResult
from gesture_canvas.landmarks import (
    HandData, as_hand_list, drawing_position, palm_center, two_hand_distance
)

logger = logging.getLogger(__name__)


class ToolState(Enum):
    """Mutually exclusive dispatcher states."""
    IDLE = 'idle'
    DRAWING = 'drawing'
    PANNING = 'panning'
    ZOOMING = 'zooming'


_STROKE_TYPES = {
    Gesture.DRAW: ElementType.FREEDRAW,
    Gesture.ERASE: ElementType.ERASE,
}


class ToolDispatcher:
    """
    Frame-driven state machine applying gestures to a DrawingSession.

    Pan and zoom are incremental: each frame applies the change since the
    previous frame, so the first frame of either gesture only records an
    anchor.
    """

    def __init__(self, session: DrawingSession):
        self.session = session
        self.state = ToolState.IDLE
        self._last_pan_position: Optional[Tuple[float, float]] = None
        self._last_zoom_distance: Optional[float] = None

    def dispatch(self, result: GestureResult, hands: Optional[Sequence[HandData]]) -> ToolState:
        """
        Apply one frame.

        Args:
            result: Stabilized gesture for the frame
            hands: Hands detected this frame (None or empty when lost)

        Returns:
            The dispatcher state after the frame
        """
        session = self.session
        hands = as_hand_list(hands)[:2]
        primary = hands[0] if hands else None
        gesture = result.gesture
        mirror = session.config.mirror_x

        self._update_tool(result)
        session.cursor_position = None

        if gesture == Gesture.ZOOM and len(hands) == 2:
            self.handle_zoom(two_hand_distance(hands))
        elif gesture == Gesture.PAN:
            session.cursor_position = palm_center(primary, session.size, mirror)
            self.handle_pan(session.cursor_position)
        elif gesture in _STROKE_TYPES:
            session.cursor_position = drawing_position(primary, session.size, mirror)
            self.handle_stroke(_STROKE_TYPES[gesture], session.cursor_position)
        elif gesture == Gesture.CLEAR:
            self._release()
            session.clear()
        else:
            # pointer, idle, or zoom without both hands
            session.cursor_position = drawing_position(primary, session.size, mirror)
            self._release()

        return self.state

    def handle_stroke(self, element_type: ElementType, position: Optional[Tuple[float, float]]):
        """Start or extend a draw/erase element at a screen position."""
        session = self.session
        if position is None:
            self._release()
            return

        current = session.current_element
        if current is not None and current.type != element_type:
            self._release()
            current = None

        self._clear_anchors()
        world_pos = session.view.screen_to_world(position)
        if current is None:
            session.start_drawing(world_pos, element_type)
        else:
            session.continue_drawing(world_pos)
        self.state = ToolState.DRAWING

    def handle_pan(self, position: Optional[Tuple[float, float]]):
        """Move the view by the palm movement since the previous frame."""
        if position is None:
            self._release()
            return

        if self.state != ToolState.PANNING or self._last_pan_position is None:
            self._release()
            self.state = ToolState.PANNING
            self._last_pan_position = position
            return

        dx = position[0] - self._last_pan_position[0]
        dy = position[1] - self._last_pan_position[1]
        self.session.view.pan_by(dx, dy)
        self._last_pan_position = position

    def handle_zoom(self, distance: Optional[float]):
        """
        Scale the view by the ratio of the current to previous hand distance.

        ``distance`` is normalized; it is scaled to screen pixels by the
        canvas width.
        """
        if distance is None:
            self._release()
            return
        distance *= self.session.width

        if self.state != ToolState.ZOOMING:
            self._release()
            self.state = ToolState.ZOOMING

        if distance <= 0:
            # touching fingertips give no ratio; anchor again on the next frame
            self._last_zoom_distance = None
            return

        if self._last_zoom_distance is None:
            self._last_zoom_distance = distance
            return

        config = self.session.config
        self.session.view.zoom_by(distance / self._last_zoom_distance,
                                  config.min_zoom, config.max_zoom)
        self._last_zoom_distance = distance

    def reset(self):
        """Forget the current state without committing anything."""
        self._clear_anchors()
        self.state = ToolState.IDLE

    def _release(self):
        """Finalize any stroke and drop pan/zoom anchors."""
        self.session.finish_drawing()
        self._clear_anchors()
        self.state = ToolState.IDLE

    def _clear_anchors(self):
        self._last_pan_position = None
        self._last_zoom_distance = None

    def _update_tool(self, result: GestureResult):
        if result.tool != self.session.current_tool:
            logger.info("Tool: %s %s", result.info.icon, result.info.name)
            self.session.current_tool = result.tool
