"""
String detection: six ordered string lines from the horizontal map
"""
import logging
import numpy as np
from typing import List, Optional

from fretgrid.guitar_config import (
    NUM_STRINGS,
    MAX_STRING_CANDIDATES,
    STRING_MERGE_DISTANCE,
    MIN_STRINGS_FOR_EXTRAPOLATION,
)
from fretgrid.video.geometry import Line, Point
from fretgrid.video.line_extractor import LineExtractor
from fretgrid.video.line_selection import (
    select_strong_lines,
    combine_lines,
    extend_lines,
    remove_duplicate_lines,
)

logger = logging.getLogger(__name__)


def extrapolate_strings(lines: List[Line]) -> List[Line]:
    """
    Complete a partial set of string lines to exactly six

    Missing strings are added below the lowest detected one, using the
    average spacing of the detected strings at each end.

    Args:
        lines: Deduplicated string lines in any order

    Returns:
        Six lines ordered top to bottom, or an empty list when fewer than
        three lines were detected
    """
    if len(lines) < MIN_STRINGS_FOR_EXTRAPOLATION:
        return []

    strings = sorted(lines, key=lambda line: line.intercept)

    average_left_distance = np.mean([
        below.start.y - above.start.y for above, below in zip(strings, strings[1:])
    ])
    average_right_distance = np.mean([
        below.end.y - above.end.y for above, below in zip(strings, strings[1:])
    ])

    while len(strings) < NUM_STRINGS:
        line_above = strings[-1]
        strings.append(Line(
            Point(line_above.start.x, line_above.start.y + float(average_left_distance)),
            Point(line_above.end.x, line_above.end.y + float(average_right_distance)),
        ))

    return strings[:NUM_STRINGS]


class StringDetector:
    """Detect the six guitar strings"""

    def __init__(self, extractor: Optional[LineExtractor] = None):
        """
        Args:
            extractor: Shared line extractor (a new one is created if None)
        """
        self.extractor = extractor or LineExtractor()

    def find_string_lines(self, raw_lines: List[Line]) -> List[Line]:
        """Select, merge and complete raw Hough segments into a string set"""
        strong_lines = select_strong_lines(raw_lines, MAX_STRING_CANDIDATES, horizontal=True)
        combined = combine_lines(strong_lines, STRING_MERGE_DISTANCE)
        single_lines = remove_duplicate_lines(extend_lines(combined))

        strings = extrapolate_strings(single_lines)

        logger.debug(
            f"Strings: {len(raw_lines)} raw, {len(strong_lines)} strong, "
            f"{len(combined)} combined, {len(single_lines)} distinct, {len(strings)} final"
        )
        return strings

    def detect(self, horizontal_map: np.ndarray) -> List[Line]:
        """
        Detect string lines in the horizontal-emphasis map

        Returns:
            Six lines top to bottom, or an empty list
        """
        raw_lines = self.extractor.extract_strings(horizontal_map)
        return self.find_string_lines(raw_lines)
