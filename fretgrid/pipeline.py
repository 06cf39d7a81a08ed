"""
Frame-to-grid pipeline: fretboard detection plus temporal smoothing
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from fretgrid.guitar_config import HISTORY_LENGTH
from fretgrid.video.fretboard_detector import FretboardDetector
from fretgrid.video.geometry import Line, Point
from fretgrid.video.grid_composer import Grid, is_empty
from fretgrid.video.temporal_stabilizer import TemporalStabilizer

logger = logging.getLogger(__name__)

FingertipProvider = Callable[[np.ndarray], Sequence[Point]]


@dataclass(frozen=True)
class GuitarResult:
    """What the overlay layer receives for one processed frame"""
    grid: Grid  # smoothed, normalized
    frame_width: int
    frame_height: int
    processing_time_ms: float
    detected: bool = False  # whether this frame alone produced any grid cell
    strings: Tuple[Line, ...] = ()
    frets: Tuple[Line, ...] = ()
    fingertips: Tuple[Point, ...] = ()


class FretboardPipeline:
    """
    Turn camera frames into a stable fretboard landmark grid

    ``process_frame`` is meant to be called from a single worker thread; the
    ``current`` grid may be read from any thread.
    """

    def __init__(self,
                 history_length: int = HISTORY_LENGTH,
                 fingertip_provider: Optional[FingertipProvider] = None):
        """
        Args:
            history_length: Number of frames averaged by the stabilizer
            fingertip_provider: Optional hand landmark source called with each
                frame, returning normalized fingertip points
        """
        self.detector = FretboardDetector()
        self.stabilizer = TemporalStabilizer(capacity=history_length)
        self.fingertip_provider = fingertip_provider

    @property
    def current(self) -> Grid:
        return self.stabilizer.current

    def process_frame(self, frame: np.ndarray) -> GuitarResult:
        """
        Process one frame

        Args:
            frame: RGBA image frame

        Returns:
            GuitarResult with the smoothed grid and timing information
        """
        start_time = time.perf_counter()

        detection = self.detector.detect(frame)
        grid = self.stabilizer.push(detection.grid)
        fingertips = self._detect_fingertips(frame)

        processing_time_ms = (time.perf_counter() - start_time) * 1000

        return GuitarResult(
            grid=grid,
            frame_width=detection.frame_width,
            frame_height=detection.frame_height,
            processing_time_ms=processing_time_ms,
            detected=not is_empty(detection.grid),
            strings=tuple(detection.strings),
            frets=tuple(detection.frets),
            fingertips=fingertips
        )

    def _detect_fingertips(self, frame: np.ndarray) -> Tuple[Point, ...]:
        if self.fingertip_provider is None:
            return ()
        try:
            return tuple(self.fingertip_provider(frame))
        except Exception as e:
            # Hand tracking failures belong to the landmark model, not the grid
            logger.warning(f"Fingertip detection failed: {e}")
            return ()

    def reset(self):
        """Drop the smoothing history (e.g. when switching videos)"""
        self.stabilizer.reset()
