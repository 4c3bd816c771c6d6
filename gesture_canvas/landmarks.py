"""
Landmarks Module - Hand Landmark Types & Geometry
=================================================
Plain data types for the 21 MediaPipe hand landmarks and the geometric
helpers the gesture pipeline needs: finger states, pinch distance,
palm center and two-hand distance.

Landmarks are normalized camera-space points; y grows downward.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np


class HandLandmark(IntEnum):
    """
    MediaPipe hand landmark indices.
    Reference: https://mediapipe.dev/images/mobile/hand_landmarks.png
    """
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


NUM_LANDMARKS = len(HandLandmark)

FINGER_NAMES = ('thumb', 'index', 'middle', 'ring', 'pinky')

# (tip, PIP) pairs for the four long fingers
_FINGER_JOINTS = (
    (HandLandmark.INDEX_TIP, HandLandmark.INDEX_PIP),
    (HandLandmark.MIDDLE_TIP, HandLandmark.MIDDLE_PIP),
    (HandLandmark.RING_TIP, HandLandmark.RING_PIP),
    (HandLandmark.PINKY_TIP, HandLandmark.PINKY_PIP),
)

HAND_CONNECTIONS = (
    # Thumb
    (HandLandmark.WRIST, HandLandmark.THUMB_CMC),
    (HandLandmark.THUMB_CMC, HandLandmark.THUMB_MCP),
    (HandLandmark.THUMB_MCP, HandLandmark.THUMB_IP),
    (HandLandmark.THUMB_IP, HandLandmark.THUMB_TIP),
    # Index
    (HandLandmark.WRIST, HandLandmark.INDEX_MCP),
    (HandLandmark.INDEX_MCP, HandLandmark.INDEX_PIP),
    (HandLandmark.INDEX_PIP, HandLandmark.INDEX_DIP),
    (HandLandmark.INDEX_DIP, HandLandmark.INDEX_TIP),
    # Middle
    (HandLandmark.MIDDLE_MCP, HandLandmark.MIDDLE_PIP),
    (HandLandmark.MIDDLE_PIP, HandLandmark.MIDDLE_DIP),
    (HandLandmark.MIDDLE_DIP, HandLandmark.MIDDLE_TIP),
    # Ring
    (HandLandmark.RING_MCP, HandLandmark.RING_PIP),
    (HandLandmark.RING_PIP, HandLandmark.RING_DIP),
    (HandLandmark.RING_DIP, HandLandmark.RING_TIP),
    # Pinky
    (HandLandmark.WRIST, HandLandmark.PINKY_MCP),
    (HandLandmark.PINKY_MCP, HandLandmark.PINKY_PIP),
    (HandLandmark.PINKY_PIP, HandLandmark.PINKY_DIP),
    (HandLandmark.PINKY_DIP, HandLandmark.PINKY_TIP),
    # Palm
    (HandLandmark.INDEX_MCP, HandLandmark.MIDDLE_MCP),
    (HandLandmark.MIDDLE_MCP, HandLandmark.RING_MCP),
    (HandLandmark.RING_MCP, HandLandmark.PINKY_MCP),
)


@dataclass(frozen=True)
class Point:
    """A normalized landmark position (x, y in 0-1, z relative depth)."""
    x: float
    y: float
    z: float = 0.0

    def distance_to(self, other: 'Point') -> float:
        """Planar Euclidean distance to another point (normalized units)."""
        return float(np.hypot(self.x - other.x, self.y - other.y))


@dataclass
class HandData:
    """
    All landmarks of one detected hand.

    Attributes:
        landmarks: Dict mapping HandLandmark to Point
        handedness: 'Left' or 'Right'
        confidence: Detection confidence score
    """
    landmarks: Dict[HandLandmark, Point] = field(default_factory=dict)
    handedness: str = "Right"
    confidence: float = 0.0

    @classmethod
    def from_points(
        cls,
        points: Sequence[Tuple[float, ...]],
        handedness: str = "Right",
        confidence: float = 1.0
    ) -> 'HandData':
        """Build a hand from an ordered sequence of (x, y[, z]) tuples."""
        landmarks = {
            HandLandmark(idx): Point(*coords)
            for idx, coords in enumerate(points[:NUM_LANDMARKS])
        }
        return cls(landmarks=landmarks, handedness=handedness, confidence=confidence)

    def get_landmark(self, landmark: HandLandmark) -> Optional[Point]:
        """Get a specific landmark point."""
        return self.landmarks.get(landmark)

    def is_complete(self) -> bool:
        """True when all 21 landmarks are present."""
        return all(lm in self.landmarks for lm in HandLandmark)


def calculate_finger_states(
    hand_data: HandData,
    thumb_threshold: float = 0.04
) -> Tuple[bool, bool, bool, bool, bool]:
    """
    Determine which fingers are extended, ordered thumb to pinky.

    The thumb bends sideways, so it counts as extended when its tip is
    farther than ``thumb_threshold`` from the IP joint. The other fingers
    are extended when the tip sits above (smaller y than) the PIP joint.
    Missing landmarks count as retracted.
    """
    landmarks = hand_data.landmarks

    thumb_tip = landmarks.get(HandLandmark.THUMB_TIP)
    thumb_ip = landmarks.get(HandLandmark.THUMB_IP)
    thumb = bool(thumb_tip and thumb_ip and thumb_tip.distance_to(thumb_ip) > thumb_threshold)

    states = [thumb]
    for tip_lm, pip_lm in _FINGER_JOINTS:
        tip = landmarks.get(tip_lm)
        pip = landmarks.get(pip_lm)
        states.append(bool(tip and pip and tip.y < pip.y))

    return tuple(states)


def pinch_distance(hand_data: HandData) -> float:
    """Distance between thumb tip and index tip, inf if either is missing."""
    thumb_tip = hand_data.get_landmark(HandLandmark.THUMB_TIP)
    index_tip = hand_data.get_landmark(HandLandmark.INDEX_TIP)
    if thumb_tip is None or index_tip is None:
        return float('inf')
    return thumb_tip.distance_to(index_tip)


def two_hand_distance(hands: Sequence[HandData]) -> Optional[float]:
    """
    Normalized distance between the index tips of exactly two hands.

    Returns None unless two hands with index tips are given.
    """
    if hands is None or len(hands) != 2:
        return None
    p1 = hands[0].get_landmark(HandLandmark.INDEX_TIP)
    p2 = hands[1].get_landmark(HandLandmark.INDEX_TIP)
    if p1 is None or p2 is None:
        return None
    return p1.distance_to(p2)


def landmark_to_screen(
    point: Point,
    size: Tuple[int, int],
    mirror_x: bool = False
) -> Tuple[float, float]:
    """
    Map a normalized landmark onto a screen of ``size`` (width, height).

    Set ``mirror_x`` when the camera frame was not already flipped.
    """
    width, height = size
    x = (1.0 - point.x) if mirror_x else point.x
    return (x * width, point.y * height)


def drawing_position(
    hand_data: Optional[HandData],
    size: Tuple[int, int],
    mirror_x: bool = False
) -> Optional[Tuple[float, float]]:
    """Screen position of the index fingertip, used as the pen cursor."""
    if hand_data is None:
        return None
    tip = hand_data.get_landmark(HandLandmark.INDEX_TIP)
    return landmark_to_screen(tip, size, mirror_x) if tip else None


def palm_center(
    hand_data: Optional[HandData],
    size: Tuple[int, int],
    mirror_x: bool = False
) -> Optional[Tuple[float, float]]:
    """Screen position of the middle finger base, used as the pan handle."""
    if hand_data is None:
        return None
    base = hand_data.get_landmark(HandLandmark.MIDDLE_MCP)
    return landmark_to_screen(base, size, mirror_x) if base else None


def finger_states_to_dict(states: Sequence[bool]) -> Dict[str, bool]:
    """Label a finger-state vector with finger names."""
    return dict(zip(FINGER_NAMES, states))


def as_hand_list(hands) -> List[HandData]:
    """Normalize an optional hand sequence into a list."""
    return list(hands) if hands else []
