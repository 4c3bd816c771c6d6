"""
Hand Tracking Module - MediaPipe Hand Landmark Detection
========================================================
Detects up to two hands per frame with the MediaPipe Hand Landmarker
(Tasks API, VIDEO mode) and converts the results to HandData.
"""

import logging
import time
import urllib.request
from pathlib import Path
from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from gesture_canvas.config import TrackingConfig
from gesture_canvas.landmarks import HandData, HandLandmark, Point

logger = logging.getLogger(__name__)

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)
DEFAULT_MODEL_PATH = Path(__file__).parent.parent / "models" / "hand_landmarker.task"


def _download_model(model_path: Path) -> None:
    """Download the hand landmarker model if not present."""
    logger.info("Downloading hand landmarker model...")
    model_path.parent.mkdir(parents=True, exist_ok=True)
    urllib.request.urlretrieve(MODEL_URL, model_path)
    logger.info("Model downloaded to %s", model_path)


class HandTracker:
    """
    Hand tracking using MediaPipe Hand Landmarker (Tasks API).

    VIDEO running mode tracks between sequential frames, which keeps
    detection overhead low. Frames must be fed in arrival order.
    """

    def __init__(
        self,
        config: Optional[TrackingConfig] = None,
        model_path: Optional[Path] = None
    ):
        """
        Initialize the hand tracker.

        Args:
            config: Hand count and confidence thresholds
            model_path: Location of hand_landmarker.task (downloaded if missing)
        """
        self.config = config or TrackingConfig()
        self._model_path = Path(model_path) if model_path else DEFAULT_MODEL_PATH

        if not self._model_path.exists():
            _download_model(self._model_path)

        base_options = python.BaseOptions(model_asset_path=str(self._model_path))
        options = vision.HandLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.VIDEO,
            num_hands=self.config.max_hands,
            min_hand_detection_confidence=self.config.min_detection_confidence,
            min_hand_presence_confidence=self.config.min_detection_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence
        )
        self.detector = vision.HandLandmarker.create_from_options(options)
        logger.info("Hand landmarker ready (max %d hands)", self.config.max_hands)

        # Timestamps must be monotonically increasing in VIDEO mode
        self._start_time = time.time()
        self._last_timestamp_ms = -1

    def process(self, frame: np.ndarray) -> List[HandData]:
        """
        Detect hands in a BGR frame.

        Returns:
            One HandData per detected hand, at most ``max_hands``
        """
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        timestamp_ms = int((time.time() - self._start_time) * 1000)
        timestamp_ms = max(timestamp_ms, self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms

        results = self.detector.detect_for_video(mp_image, timestamp_ms)

        hands = []
        for idx, hand_landmarks in enumerate(results.hand_landmarks or []):
            handedness = "Right"
            confidence = 0.0
            if results.handedness and idx < len(results.handedness) and results.handedness[idx]:
                handedness = results.handedness[idx][0].category_name
                confidence = results.handedness[idx][0].score

            landmarks = {
                HandLandmark(lm_idx): Point(x=lm.x, y=lm.y, z=getattr(lm, 'z', 0.0) or 0.0)
                for lm_idx, lm in enumerate(hand_landmarks)
            }
            hands.append(HandData(landmarks=landmarks, handedness=handedness, confidence=confidence))

        return hands[:self.config.max_hands]

    def release(self):
        """Release resources."""
        if self.detector:
            self.detector.close()
            self.detector = None
