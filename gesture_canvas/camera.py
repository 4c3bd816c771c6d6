"""
Camera Module - Webcam Stream Handler
=====================================
Background webcam capture for the frame-driven main loop. The capture
thread only publishes the newest mirrored frame; the loop picks up each
published frame once, so the hand tracker never sees the same frame
twice.
"""

import logging
import sys
import threading
import time
from typing import Optional

import cv2
import numpy as np

from gesture_canvas.config import TrackingConfig

logger = logging.getLogger(__name__)


class CameraError(RuntimeError):
    """The capture device could not be opened."""


class Camera:
    """
    Latest-frame webcam source, used as a context manager.

    ``with Camera(config) as camera:`` opens the device and starts the
    capture thread; leaving the block stops it and releases the device.
    """

    def __init__(self, config: Optional[TrackingConfig] = None):
        self.config = config or TrackingConfig()
        self.cap: Optional[cv2.VideoCapture] = None

        self._frame: Optional[np.ndarray] = None
        self._published = 0
        self._taken = 0
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._start_time = 0.0

    def __enter__(self) -> 'Camera':
        self._open()
        self._running = True
        self._start_time = time.time()
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    def _open(self):
        config = self.config
        # DirectShow opens much faster than MSMF on Windows
        if sys.platform.startswith('win'):
            cap = cv2.VideoCapture(config.camera_id, cv2.CAP_DSHOW)
        else:
            cap = cv2.VideoCapture(config.camera_id)

        if not cap.isOpened():
            cap.release()
            raise CameraError(f"Failed to open camera {config.camera_id}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, config.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, config.height)
        cap.set(cv2.CAP_PROP_FPS, config.fps)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        self.cap = cap

        logger.info("Camera %d opened: %dx%d (requested %dx%d @ %dfps)",
                    config.camera_id,
                    int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
                    int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
                    config.width, config.height, config.fps)

    def _capture_loop(self):
        while self._running:
            ret, frame = self.cap.read()
            if ret:
                self._publish(frame)
            else:
                time.sleep(0.001)

    def _publish(self, frame: np.ndarray):
        # Mirror so moving the hand right moves the cursor right
        frame = cv2.flip(frame, 1)
        with self._lock:
            self._frame = frame
            self._published += 1

    def get_frame(self) -> Optional[np.ndarray]:
        """The newest frame if it has not been returned yet, else None."""
        with self._lock:
            if self._frame is None or self._taken == self._published:
                return None
            self._taken = self._published
            return self._frame

    def get_fps(self) -> float:
        """Average capture rate since the camera was opened."""
        elapsed = time.time() - self._start_time
        return self._published / elapsed if self._start_time and elapsed > 0 else 0.0

    def stop(self):
        """Stop the capture thread and release the device."""
        self._running = False

        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("Camera stopped")
