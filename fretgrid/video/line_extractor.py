"""
Raw line extraction from the preprocessed maps
"""
import cv2
import numpy as np
from typing import List, Optional

from fretgrid.guitar_config import (
    HOUGH_RHO,
    HOUGH_THRESHOLD,
    HOUGH_MIN_LINE_LENGTH,
    HOUGH_MAX_LINE_GAP,
)
from fretgrid.video.geometry import Line


def _to_lines(raw: Optional[np.ndarray]) -> List[Line]:
    if raw is None:
        return []
    return [Line.from_coords(*segment) for segment in raw.reshape(-1, 4)]


class LineExtractor:
    """Hough transform for strings, line segment detector for frets"""

    def __init__(self):
        self.segment_detector = cv2.createLineSegmentDetector()

    def extract_strings(self, horizontal_map: np.ndarray) -> List[Line]:
        """Segments from the string map, in detector order"""
        lines = cv2.HoughLinesP(
            horizontal_map,
            rho=HOUGH_RHO,
            theta=np.pi / 180,
            threshold=HOUGH_THRESHOLD,
            minLineLength=HOUGH_MIN_LINE_LENGTH,
            maxLineGap=HOUGH_MAX_LINE_GAP
        )
        return _to_lines(lines)

    def extract_frets(self, vertical_map: np.ndarray) -> List[Line]:
        """Segments from the fret map, in detector order"""
        lines = self.segment_detector.detect(vertical_map)[0]
        return _to_lines(lines)
