"""
Rendering Module - OpenCV Rendering Sink
========================================
Draws a DrawingSession through its view transform, plus the live cursor,
tool status box and the camera preview inset.
"""

from typing import Optional, Sequence

import cv2
import numpy as np

from gesture_canvas.canvas import CanvasElement, DrawingSession, ElementType
from gesture_canvas.gesture_logic import GestureInfo
from gesture_canvas.landmarks import HAND_CONNECTIONS, HandData, HandLandmark

# UI Colors (BGR)
UI_BG_COLOR = (30, 30, 30)
UI_TEXT_COLOR = (255, 255, 255)
UI_MUTED_COLOR = (150, 150, 150)
CURSOR_POINTER_COLOR = (147, 142, 142)
CURSOR_DRAW_COLOR = (255, 122, 0)
CURSOR_ERASE_COLOR = (48, 59, 255)

_FINGERTIPS = (
    HandLandmark.THUMB_TIP, HandLandmark.INDEX_TIP, HandLandmark.MIDDLE_TIP,
    HandLandmark.RING_TIP, HandLandmark.PINKY_TIP,
)


def render_page(session: DrawingSession) -> np.ndarray:
    """
    Render all elements onto a fresh page.

    Erase elements paint the background color over what is below them.

    Returns:
        BGR image of the session's size
    """
    page = np.full((session.height, session.width, 3), session.config.background_color, dtype=np.uint8)

    elements = list(session.elements)
    if session.current_element is not None:
        elements.append(session.current_element)

    for element in elements:
        _render_element(page, element, session)
    return page


def _render_element(page: np.ndarray, element: CanvasElement, session: DrawingSession):
    if len(element.points) < 2:
        return

    view = session.view
    if element.type == ElementType.ERASE:
        color = session.config.background_color
    else:
        color = element.color
    thickness = max(1, int(round(element.stroke_width * view.zoom)))

    screen = np.array([view.world_to_screen(p) for p in element.points], dtype=np.float64)
    if element.type == ElementType.CIRCLE:
        center = screen[0]
        radius = float(np.hypot(*(screen[-1] - center)))
        cv2.circle(page, tuple(int(v) for v in center), int(radius), color, thickness, cv2.LINE_AA)
        return

    polyline = np.round(screen).astype(np.int32).reshape(-1, 1, 2)
    cv2.polylines(page, [polyline], False, color, thickness, cv2.LINE_AA)
    # Round caps
    for end in (polyline[0, 0], polyline[-1, 0]):
        cv2.circle(page, (int(end[0]), int(end[1])), thickness // 2, color, -1, cv2.LINE_AA)


def draw_cursor(page: np.ndarray, session: DrawingSession) -> np.ndarray:
    """Draw the live cursor feedback for pointer, draw and erase tools."""
    if session.cursor_position is None:
        return page

    tool = session.current_tool
    if tool == 'draw':
        size = session.brush_size * session.view.zoom * 1.5
        color = CURSOR_DRAW_COLOR
    elif tool == 'erase':
        size = session.eraser_size * session.view.zoom
        color = CURSOR_ERASE_COLOR
    elif tool == 'pointer':
        size = 8
        color = CURSOR_POINTER_COLOR
    else:
        return page

    x, y = session.cursor_position
    cv2.circle(page, (int(x), int(y)), max(1, int(size)), color, -1, cv2.LINE_AA)
    return page


def draw_status(page: np.ndarray, info: GestureInfo, session: DrawingSession) -> np.ndarray:
    """
    Draw the current tool box and any transient status message.

    OpenCV's Hershey fonts cannot render the gesture icons, so only the
    tool name and description are shown.
    """
    h, w = page.shape[:2]
    box_h = 60
    cv2.rectangle(page, (10, h - box_h - 10), (330, h - 10), UI_BG_COLOR, -1)
    cv2.putText(page, info.name, (20, h - box_h + 18),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, UI_TEXT_COLOR, 2)
    cv2.putText(page, info.description, (20, h - 22),
                cv2.FONT_HERSHEY_SIMPLEX, 0.45, UI_MUTED_COLOR, 1)

    zoom_text = f"Zoom: {session.view.zoom:.2f}x"
    cv2.putText(page, zoom_text, (w - 160, h - 20),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, UI_MUTED_COLOR, 1)

    message = session.current_status()
    if message:
        (tw, th), _ = cv2.getTextSize(message, cv2.FONT_HERSHEY_SIMPLEX, 0.8, 2)
        x = (w - tw) // 2
        cv2.rectangle(page, (x - 15, 15), (x + tw + 15, 30 + th), UI_BG_COLOR, -1)
        cv2.putText(page, message, (x, 22 + th),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.8, UI_TEXT_COLOR, 2)
    return page


def draw_hand(
    frame: np.ndarray,
    hand_data: HandData,
    landmark_color=(0, 255, 0),
    connection_color=(0, 255, 0),
    thickness: int = 2
) -> np.ndarray:
    """Draw hand connectors and landmarks onto a camera frame."""
    h, w = frame.shape[:2]

    def to_pixel(landmark):
        point = hand_data.get_landmark(landmark)
        if point is None:
            return None
        return (int(point.x * w), int(point.y * h))

    for start, end in HAND_CONNECTIONS:
        p1, p2 = to_pixel(start), to_pixel(end)
        if p1 and p2:
            cv2.line(frame, p1, p2, connection_color, thickness)

    for landmark in hand_data.landmarks:
        pixel = to_pixel(landmark)
        radius = 4 if landmark in _FINGERTIPS else 2
        color = (0, 0, 255) if landmark in _FINGERTIPS else landmark_color
        cv2.circle(frame, pixel, radius, color, -1)
    return frame


def draw_preview(
    page: np.ndarray,
    frame: Optional[np.ndarray],
    hands: Sequence[HandData],
    width: int = 240,
    height: int = 180
) -> np.ndarray:
    """Paste a small camera preview with hand connectors into the top right."""
    if frame is None:
        return page

    preview = cv2.resize(frame, (width, height))
    for hand in hands:
        draw_hand(preview, hand)

    h, w = page.shape[:2]
    if w < width + 20 or h < height + 20:
        return page
    x, y = w - width - 10, 10
    page[y:y + height, x:x + width] = preview
    cv2.rectangle(page, (x - 1, y - 1), (x + width, y + height), UI_BG_COLOR, 2)
    return page


def compose_frame(
    session: DrawingSession,
    info: GestureInfo,
    frame: Optional[np.ndarray] = None,
    hands: Sequence[HandData] = (),
    show_preview: bool = True
) -> np.ndarray:
    """Full display image: page, cursor, status and optional preview."""
    page = render_page(session)
    draw_cursor(page, session)
    draw_status(page, info, session)
    if show_preview:
        draw_preview(page, frame, hands)
    return page
