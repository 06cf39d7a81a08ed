"""
Fingertip positions from the MediaPipe hand landmarker
"""
import logging
import time
import numpy as np
import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision
from pathlib import Path
from typing import List

from fretgrid.video.geometry import Point

logger = logging.getLogger(__name__)

# Hand landmark indices of the thumb, index, middle, ring and pinky tips
FINGERTIP_INDICES = (4, 8, 12, 16, 20)


class HandTracker:
    """Track the fretting hand and report its fingertips"""

    def __init__(self,
                 model_path,
                 min_detection_confidence=0.5,
                 min_tracking_confidence=0.5,
                 min_presence_confidence=0.5,
                 max_num_hands=1):
        """
        Args:
            model_path: Path to a ``hand_landmarker.task`` model file
            min_detection_confidence: Minimum confidence for hand detection
            min_tracking_confidence: Minimum confidence for hand tracking
            min_presence_confidence: Minimum confidence that a hand is present
            max_num_hands: Maximum number of hands to detect
        """
        model_path = Path(model_path)
        if not model_path.exists():
            raise FileNotFoundError(f"Hand landmarker model not found: {model_path}")

        options = vision.HandLandmarkerOptions(
            base_options=mp_tasks.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=max_num_hands,
            min_hand_detection_confidence=min_detection_confidence,
            min_hand_presence_confidence=min_presence_confidence,
            min_tracking_confidence=min_tracking_confidence
        )
        self.landmarker = vision.HandLandmarker.create_from_options(options)
        self._last_timestamp_ms = -1

    def _next_timestamp_ms(self) -> int:
        # VIDEO mode requires strictly increasing timestamps
        timestamp_ms = int(time.monotonic() * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def detect_fingertips(self, frame: np.ndarray) -> List[Point]:
        """
        Detect fingertips in frame

        Args:
            frame: RGBA image frame

        Returns:
            Normalized fingertip points of every detected hand
        """
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGBA, data=np.ascontiguousarray(frame))
        result = self.landmarker.detect_for_video(mp_image, self._next_timestamp_ms())

        fingertips = []
        for hand_landmarks in result.hand_landmarks:
            for index in FINGERTIP_INDICES:
                landmark = hand_landmarks[index]
                fingertips.append(Point(landmark.x, landmark.y))

        logger.debug(f"Detected {len(result.hand_landmarks)} hand(s)")
        return fingertips

    def __call__(self, frame: np.ndarray) -> List[Point]:
        return self.detect_fingertips(frame)

    def close(self):
        """Release MediaPipe resources"""
        self.landmarker.close()
