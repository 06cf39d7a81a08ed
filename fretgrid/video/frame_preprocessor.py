"""
Frame preprocessing: edge map plus string- and fret-emphasis maps
"""
import cv2
import numpy as np
from typing import List, Optional, Tuple

from fretgrid.guitar_config import (
    BLUR_KERNEL_SIZE,
    BLUR_SIGMA,
    CLAHE_CLIP_LIMIT,
    CLAHE_TILE_GRID,
    CANNY_LOW,
    CANNY_HIGH,
    TOP_MASK_NUMERATOR,
    TOP_MASK_DENOMINATOR,
    LEFT_MASK_WIDTH,
    RIGHT_MASK_WIDTH,
    HORIZONTAL_ERODE_KERNEL,
    HORIZONTAL_CLOSE_KERNEL,
    VERTICAL_ERODE_KERNEL,
    VERTICAL_CLOSE_KERNEL,
)
from fretgrid.video.geometry import Line


class FramePreprocessor:
    """Turn a camera frame into binary maps for string and fret detection"""

    def __init__(self):
        self.clahe = cv2.createCLAHE(clipLimit=CLAHE_CLIP_LIMIT, tileGridSize=CLAHE_TILE_GRID)

    def to_gray(self, frame: np.ndarray) -> np.ndarray:
        """
        Convert a frame to a single intensity channel

        Args:
            frame: RGBA image (RGB and grayscale are accepted too)

        Returns:
            uint8 grayscale image
        """
        if not isinstance(frame, np.ndarray) or frame.ndim not in (2, 3):
            raise ValueError("Frame must be a 2-D or 3-D image array")

        if frame.dtype != np.uint8:
            frame = np.clip(frame, 0, 255).astype(np.uint8)

        if frame.ndim == 2:
            return frame

        channels = frame.shape[2]
        if channels == 4:
            return cv2.cvtColor(frame, cv2.COLOR_RGBA2GRAY)
        if channels == 3:
            return cv2.cvtColor(frame, cv2.COLOR_RGB2GRAY)
        if channels == 1:
            return frame[:, :, 0]

        raise ValueError(f"Unsupported channel count: {channels}")

    def edges(self, frame: np.ndarray) -> np.ndarray:
        """Blurred, contrast-equalized Canny edges with the background masked out"""
        gray = self.to_gray(frame)

        # Suppress wood grain and sensor noise
        blurred = cv2.GaussianBlur(gray, BLUR_KERNEL_SIZE, BLUR_SIGMA)

        # Even out lighting across the neck
        enhanced = self.clahe.apply(blurred)

        edges = cv2.Canny(enhanced, CANNY_LOW, CANNY_HIGH)
        return self._mask_background(edges)

    def _mask_background(self, edges: np.ndarray) -> np.ndarray:
        h, w = edges.shape[:2]

        mask = np.full_like(edges, 255)
        mask[:(h // TOP_MASK_DENOMINATOR) * TOP_MASK_NUMERATOR, :] = 0
        mask[:, max(0, w - RIGHT_MASK_WIDTH):] = 0
        mask[:, :LEFT_MASK_WIDTH] = 0

        return cv2.bitwise_and(edges, mask)

    def detect_horizontal(self, edges: np.ndarray) -> np.ndarray:
        """Keep horizontal structure (strings)"""
        # Thin vertical strokes do not survive a wide erosion
        erode_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, HORIZONTAL_ERODE_KERNEL)
        no_vertical = cv2.erode(edges, erode_kernel)

        close_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, HORIZONTAL_CLOSE_KERNEL)
        return cv2.morphologyEx(no_vertical, cv2.MORPH_CLOSE, close_kernel)

    def detect_vertical(self, edges: np.ndarray, strings: Optional[List[Line]] = None) -> np.ndarray:
        """
        Keep vertical structure (frets)

        Args:
            edges: Masked edge map
            strings: Detected string lines, top first. With two or more, the
                map is restricted to the polygon between the outer strings.

        Returns:
            Binary fret-emphasis map
        """
        if strings and len(strings) > 1:
            top_string = strings[0]
            bottom_string = strings[-1]

            polygon = np.array([
                top_string.start,
                top_string.end,
                bottom_string.end,
                bottom_string.start,
            ], dtype=np.float64)
            polygon = np.round(polygon).astype(np.int32)

            fretboard_mask = np.zeros_like(edges)
            cv2.fillPoly(fretboard_mask, [polygon], 255)
            region = cv2.bitwise_and(edges, fretboard_mask)
        else:
            region = edges.copy()

        # Thin horizontal strokes do not survive a tall erosion
        erode_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, VERTICAL_ERODE_KERNEL)
        no_horizontal = cv2.erode(region, erode_kernel)

        close_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, VERTICAL_CLOSE_KERNEL)
        return cv2.morphologyEx(no_horizontal, cv2.MORPH_CLOSE, close_kernel)

    def apply(self, frame: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Run the string-side preprocessing

        Returns:
            (horizontal map, masked edge map). The fret map needs the detected
            strings, so it is built later from the edge map with
            ``detect_vertical``.
        """
        edges = self.edges(frame)
        return self.detect_horizontal(edges), edges
