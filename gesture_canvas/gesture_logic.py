"""
Gesture Logic Module - Gesture Classification & Stability Filter
================================================================
Maps hand landmarks to one of seven drawing tools and debounces the
per-frame classification with a majority vote over recent frames.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Optional, Sequence, Tuple

from gesture_canvas.config import GestureConfig
from gesture_canvas.landmarks import (
    HandData, as_hand_list, calculate_finger_states,
    finger_states_to_dict, pinch_distance
)

logger = logging.getLogger(__name__)


class Gesture(Enum):
    """Recognized gestures; each one selects the tool of the same name."""
    POINTER = 'pointer'     # Index finger up - move cursor
    DRAW = 'draw'           # Thumb + index pinch - draw
    ERASE = 'erase'         # Four fingers up - erase
    PAN = 'pan'             # Fist (thumb may be out) - move the canvas
    ZOOM = 'zoom'           # Two hands - zoom
    CLEAR = 'clear'         # Open hand - clear everything
    IDLE = 'idle'           # Nothing recognized


@dataclass(frozen=True)
class GestureInfo:
    """Display metadata for a gesture."""
    icon: str
    name: str
    description: str


GESTURE_INFO = {
    Gesture.POINTER: GestureInfo('☝️', 'Cursor', 'Index finger to move cursor'),
    Gesture.DRAW: GestureInfo('🤏', 'Draw', 'Pinch thumb and index to draw'),
    Gesture.ERASE: GestureInfo('✋', 'Erase', 'Open hand to erase'),
    Gesture.PAN: GestureInfo('✊', 'Pan', 'Fist to move the canvas'),
    Gesture.ZOOM: GestureInfo('🙌', 'Zoom', 'Two hands to zoom'),
    Gesture.CLEAR: GestureInfo('🤚', 'Clear All', 'Both hands open'),
    Gesture.IDLE: GestureInfo('🤷', 'Idle', 'No gesture'),
}


@dataclass(frozen=True)
class GestureResult:
    """A gesture together with its display metadata."""
    gesture: Gesture
    info: GestureInfo

    @classmethod
    def of(cls, gesture: Gesture) -> 'GestureResult':
        """Wrap a gesture with its GESTURE_INFO entry."""
        return cls(gesture=gesture, info=GESTURE_INFO[gesture])

    @property
    def tool(self) -> str:
        """Name of the tool the gesture selects."""
        return self.gesture.value


class StabilityFilter:
    """
    Majority-vote debouncer over the most recent raw gestures.

    A new gesture is committed only once it fills ``stability_count`` of
    the last ``history_size`` observations; otherwise the previously
    committed gesture is kept.
    """

    def __init__(self, history_size: int = 4, stability_count: int = 3):
        self.history_size = history_size
        self.stability_count = stability_count
        self._history: Deque[Gesture] = deque(maxlen=history_size)
        self._current = Gesture.IDLE

    @property
    def current(self) -> Gesture:
        return self._current

    @property
    def history(self) -> Tuple[Gesture, ...]:
        return tuple(self._history)

    def update(self, raw: Gesture) -> Gesture:
        """Feed one raw gesture and return the committed gesture."""
        self._history.append(raw)
        votes = sum(1 for g in self._history if g == raw)
        if votes >= self.stability_count and raw != self._current:
            logger.debug("Gesture committed: %s -> %s", self._current.value, raw.value)
            self._current = raw
        return self._current

    def reset(self):
        self._history.clear()
        self._current = Gesture.IDLE


class GestureDetector:
    """
    Detects the active drawing tool from hand landmark data.

    Classification runs on the primary (first) hand; the number of hands
    only matters for the two-hand zoom gesture. A frame without hands is
    idle at once; every other result passes through the stability filter.
    """

    def __init__(self, config: Optional[GestureConfig] = None):
        """
        Initialize the gesture detector.

        Args:
            config: Thresholds; defaults to the tuned GestureConfig values
        """
        self.config = config or GestureConfig()
        self.stability = StabilityFilter(
            history_size=self.config.history_size,
            stability_count=self.config.stability_count
        )

    def detect(self, hands: Optional[Sequence[HandData]]) -> GestureResult:
        """
        Classify one frame of hands and return the stabilized gesture.

        Args:
            hands: Hands detected this frame (None or empty when lost)

        Returns:
            GestureResult for the committed gesture, or idle when no hand
            is visible
        """
        if not as_hand_list(hands):
            # filter state is left as is for when the hand comes back
            return GestureResult.of(Gesture.IDLE)
        raw = self.classify_frame(hands)
        return GestureResult.of(self.stability.update(raw))

    def classify_frame(self, hands: Optional[Sequence[HandData]]) -> Gesture:
        """Raw (unfiltered) gesture for one frame of hands."""
        hands = as_hand_list(hands)[:2]
        if not hands:
            return Gesture.IDLE
        if len(hands) == 2:
            return Gesture.ZOOM
        if not hands[0].is_complete():
            return Gesture.IDLE

        states = calculate_finger_states(hands[0], self.config.thumb_extension_threshold)
        logger.debug("Finger states: %s", finger_states_to_dict(states))
        return self.classify(states, hands[0], len(hands))

    def classify(
        self,
        finger_states: Sequence[bool],
        hand_data: HandData,
        hand_count: int = 1
    ) -> Gesture:
        """
        Map finger states, landmarks and hand count to a raw gesture.

        Rules are checked in priority order; a pinch also has the index
        finger up, so it must be tested before the pointer rule.
        """
        if hand_count == 2:
            return Gesture.ZOOM

        thumb, index, middle, ring, pinky = finger_states
        others_down = not middle and not ring and not pinky
        extended_count = sum(bool(s) for s in finger_states)

        if pinch_distance(hand_data) < self.config.pinch_threshold and others_down:
            return Gesture.DRAW

        if index and others_down:
            return Gesture.POINTER

        if extended_count == 0 or (extended_count == 1 and thumb):
            return Gesture.PAN

        if extended_count >= 4:
            return Gesture.CLEAR if extended_count == 5 else Gesture.ERASE

        return Gesture.IDLE
