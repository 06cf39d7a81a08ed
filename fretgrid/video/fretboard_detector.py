"""
Fretboard detection: strings, frets and the landmark grid for one frame
"""
import cv2
import logging
import numpy as np
from dataclasses import dataclass
from typing import List

from fretgrid.video.frame_preprocessor import FramePreprocessor
from fretgrid.video.fret_detector import FretDetector
from fretgrid.video.geometry import Line
from fretgrid.video.grid_composer import Grid, compose_grid, normalize_grid
from fretgrid.video.line_extractor import LineExtractor
from fretgrid.video.string_detector import StringDetector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FretboardDetection:
    """Everything found in a single frame (pixel space unless noted)"""
    strings: List[Line]
    frets: List[Line]
    grid: Grid  # normalized to the unit square
    frame_width: int
    frame_height: int


class FretboardDetector:
    """Detect guitar strings and frets in a frame and build the landmark grid"""

    def __init__(self):
        extractor = LineExtractor()
        self.preprocessor = FramePreprocessor()
        self.string_detector = StringDetector(extractor)
        self.fret_detector = FretDetector(extractor)

    def detect(self, frame: np.ndarray) -> FretboardDetection:
        """
        Detect the fretboard in a frame

        Nothing is kept between calls; an undetectable fretboard gives empty
        string/fret lists and an all-None grid.

        Args:
            frame: RGBA image frame

        Returns:
            FretboardDetection for this frame
        """
        horizontal_map, edges = self.preprocessor.apply(frame)
        h, w = edges.shape[:2]
        strings = self.string_detector.detect(horizontal_map)

        # Fret search is limited to the band between the outer strings
        vertical_map = self.preprocessor.detect_vertical(edges, strings)
        frets = self.fret_detector.detect(vertical_map)

        grid = normalize_grid(compose_grid(strings, frets), w, h)

        logger.debug(f"Frame {w}x{h}: {len(strings)} strings, {len(frets)} frets")

        return FretboardDetection(
            strings=strings,
            frets=frets,
            grid=grid,
            frame_width=w,
            frame_height=h
        )

    def draw_strings(self, frame: np.ndarray, strings: List[Line]) -> np.ndarray:
        """Draw detected string lines on frame"""
        annotated_frame = frame.copy()

        if strings:
            string_names = ['e', 'B', 'G', 'D', 'A', 'E']  # Top to bottom as seen by the camera

            for i, string_line in enumerate(strings):
                x1, y1, x2, y2 = string_line.as_int_tuple()

                cv2.line(annotated_frame, (x1, y1), (x2, y2), self._color(frame, (0, 255, 255)), 2)

                if i < len(string_names):
                    cv2.putText(
                        annotated_frame,
                        string_names[i],
                        (max(0, x1 - 20), y1 + 5),
                        cv2.FONT_HERSHEY_SIMPLEX,
                        0.5,
                        self._color(frame, (0, 255, 255)),
                        2
                    )

        return annotated_frame

    def draw_frets(self, frame: np.ndarray, frets: List[Line]) -> np.ndarray:
        """Draw fret lines on frame, nut-most fret labelled 0"""
        annotated_frame = frame.copy()

        for i, fret_line in enumerate(frets):
            x1, y1, x2, y2 = fret_line.as_int_tuple()
            cv2.line(annotated_frame, (x1, y1), (x2, y2), self._color(frame, (255, 165, 0)), 1)
            cv2.putText(
                annotated_frame,
                str(i),
                (x1, max(10, y1 - 8)),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.4,
                self._color(frame, (255, 165, 0)),
                1
            )

        return annotated_frame

    def draw_grid(self, frame: np.ndarray, grid: Grid) -> np.ndarray:
        """Draw the normalized landmark grid on frame"""
        annotated_frame = frame.copy()
        h, w = frame.shape[:2]

        for row in grid:
            for cell in row:
                if cell is None:
                    continue
                center = (int(round(cell.x * w)), int(round(cell.y * h)))
                cv2.circle(annotated_frame, center, 4, self._color(frame, (0, 255, 0)), -1)

        return annotated_frame

    def draw_fingertips(self, frame: np.ndarray, fingertips) -> np.ndarray:
        """Draw normalized fingertip points on frame"""
        annotated_frame = frame.copy()
        h, w = frame.shape[:2]

        for tip in fingertips:
            center = (int(round(tip.x * w)), int(round(tip.y * h)))
            cv2.circle(annotated_frame, center, 6, self._color(frame, (255, 0, 0)), 2)

        return annotated_frame

    @staticmethod
    def _color(frame: np.ndarray, rgb):
        # RGBA frames need an opaque alpha channel
        if frame.ndim == 3 and frame.shape[2] == 4:
            return (*rgb, 255)
        return rgb
