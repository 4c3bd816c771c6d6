"""
UI Module - Main Application Interface
======================================
Real-time gesture drawing: camera → hand tracking → gesture detection →
tool dispatch → rendering, with keyboard commands for the actions that
have no gesture (save, smoothen, undo/redo, brush settings).
"""

import argparse
import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

import cv2
import numpy as np

from gesture_canvas.camera import Camera, CameraError
from gesture_canvas.canvas import DrawingSession
from gesture_canvas.config import AppConfig, load_config, validate_config
from gesture_canvas.dispatcher import ToolDispatcher
from gesture_canvas.gesture_logic import GestureDetector, GestureResult
from gesture_canvas.hand_tracking import HandTracker
from gesture_canvas.landmarks import HandData
from gesture_canvas.rendering import compose_frame, render_page

logger = logging.getLogger(__name__)

WINDOW_NAME = "Gesture Canvas"


class GestureCanvasApp:
    """
    Main application class for gesture-based drawing.

    Combines webcam capture, hand tracking, gesture recognition and the
    drawing session into one frame-driven loop.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()

        self.camera = Camera(self.config.tracking)
        self.hand_tracker = HandTracker(self.config.tracking)
        self.gesture_detector = GestureDetector(self.config.gesture)

        self.session = DrawingSession(self.config.canvas, self.config.smoothing)
        self.dispatcher = ToolDispatcher(self.session)

        self._gesture = GestureResult.of(self.gesture_detector.stability.current)
        self._show_preview = True
        self._size_idx = self._closest_size_index(self.session.brush_size)

        self._save_dir = Path(self.config.output_dir)

    def _closest_size_index(self, size: int) -> int:
        sizes = self.config.canvas.brush_sizes
        return min(range(len(sizes)), key=lambda i: abs(sizes[i] - size))

    def process_hands(self, hands: Optional[Sequence[HandData]]) -> GestureResult:
        """Run one landmark frame through detection and dispatch."""
        self._gesture = self.gesture_detector.detect(hands)
        self.dispatcher.dispatch(self._gesture, hands)
        return self._gesture

    def save_canvas(self) -> Path:
        """Write the rendered page (without UI overlays) as PNG."""
        self._save_dir.mkdir(parents=True, exist_ok=True)
        filename = self._save_dir / f"gesture-canvas-{int(time.time() * 1000)}.png"
        cv2.imwrite(str(filename), render_page(self.session))
        logger.info("Saved: %s", filename)
        self.session.show_status("Canvas saved")
        return filename

    def _handle_keyboard(self, key: int) -> bool:
        """
        Handle keyboard input.

        Returns:
            False if should quit, True otherwise
        """
        session = self.session
        sizes = self.config.canvas.brush_sizes
        palette = self.config.canvas.palette

        if key == ord('q') or key == 27:  # Q or Escape
            return False

        elif key == ord('s'):
            self.save_canvas()

        elif key == ord('c'):
            self.dispatcher.reset()
            session.clear()
            session.show_status("Canvas cleared")

        elif key == ord('m'):
            session.smoothen_all()

        elif key in (ord('u'), ord('z')):
            if not session.undo():
                session.show_status("Nothing to undo")

        elif key in (ord('r'), ord('y')):
            session.redo()

        elif key in (ord('+'), ord('=')):
            self._size_idx = min(self._size_idx + 1, len(sizes) - 1)
            session.set_brush_size(sizes[self._size_idx])
            session.show_status(f"Brush: {session.brush_size}px")

        elif key == ord('-'):
            self._size_idx = max(self._size_idx - 1, 0)
            session.set_brush_size(sizes[self._size_idx])
            session.show_status(f"Brush: {session.brush_size}px")

        elif ord('1') <= key <= ord('8'):
            idx = key - ord('1')
            if idx < len(palette):
                session.set_brush_color(palette[idx])

        elif key == ord('h'):
            self._show_preview = not self._show_preview

        return True

    def _render(self, frame: Optional[np.ndarray], hands: List[HandData]) -> np.ndarray:
        return compose_frame(self.session, self._gesture.info, frame, hands, self._show_preview)

    def run(self):
        """Run the main application loop."""
        logger.info("Gestures: pinch=draw, index=cursor, four fingers=erase, "
                    "fist=pan, two hands=zoom, open hand=clear")
        logger.info("Keys: [S] save [C] clear [M] smoothen [U/Z] undo [R/Y] redo "
                    "[1-8] color [+/-] brush [H] camera [Q] quit")

        try:
            with self.camera:
                cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
                cv2.resizeWindow(WINDOW_NAME, self.session.width, self.session.height)
                self._loop()
                logger.info("Average capture rate: %.1f fps", self.camera.get_fps())
        except CameraError as exc:
            logger.error("%s", exc)
        finally:
            self.hand_tracker.release()
            cv2.destroyAllWindows()
            logger.info("Application closed")

    def _loop(self):
        while True:
            frame = self.camera.get_frame()
            if frame is None:
                time.sleep(0.001)
                continue

            hands = self.hand_tracker.process(frame)
            self.process_hands(hands)

            cv2.imshow(WINDOW_NAME, self._render(frame, hands))

            key = cv2.waitKey(1) & 0xFF
            if key != 0xFF and not self._handle_keyboard(key):
                break


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Gesture Canvas - Draw on a canvas with hand gestures")
    parser.add_argument('--camera', type=int, help='Camera device index')
    parser.add_argument('--width', type=int, help='Canvas and capture width')
    parser.add_argument('--height', type=int, help='Canvas and capture height')
    parser.add_argument('--min-zoom', type=float, help='Lower zoom bound (unbounded by default)')
    parser.add_argument('--max-zoom', type=float, help='Upper zoom bound (unbounded by default)')
    parser.add_argument('--output', help='Directory for saved PNGs')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING or ERROR')
    return parser.parse_args(argv)


def apply_args(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Override config values with any command-line flags given."""
    tracking = config.tracking
    canvas = config.canvas
    if args.camera is not None:
        tracking = replace(tracking, camera_id=args.camera)
    if args.width is not None:
        tracking = replace(tracking, width=args.width)
        canvas = replace(canvas, width=args.width)
    if args.height is not None:
        tracking = replace(tracking, height=args.height)
        canvas = replace(canvas, height=args.height)
    if args.min_zoom is not None:
        canvas = replace(canvas, min_zoom=args.min_zoom)
    if args.max_zoom is not None:
        canvas = replace(canvas, max_zoom=args.max_zoom)

    config = replace(config, tracking=tracking, canvas=canvas)
    if args.output:
        config = replace(config, output_dir=args.output)
    if args.log_level:
        config = replace(config, log_level=args.log_level.upper())
    validate_config(config)
    return config


def main(argv: Optional[Sequence[str]] = None):
    args = parse_args(argv)
    config = apply_args(load_config(), args)

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="[%(levelname)s] %(message)s"
    )

    app = GestureCanvasApp(config)
    app.run()


if __name__ == "__main__":
    main()
