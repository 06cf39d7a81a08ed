"""
Fret detection: regression-based selection and equal-tempered extrapolation
"""
import logging
import numpy as np
from typing import List, Optional, Tuple

from fretgrid.guitar_config import (
    FRET_RATIO,
    MAX_FRET_CANDIDATES,
    FRET_MERGE_DISTANCE,
    FRET_REGRESSION_TOLERANCE,
    RIDGE_MERGE_DISTANCE,
    ANCHOR_FRETS,
    MIN_ANCHOR_FRETS,
    MIN_ANCHOR_GAP,
    FRET_SPACING_TOLERANCE,
    MAX_FRET_CORRECTIONS,
)
from fretgrid.video.geometry import Line, Point, fit_line
from fretgrid.video.line_extractor import LineExtractor
from fretgrid.video.line_selection import select_strong_lines, combine_lines

logger = logging.getLogger(__name__)


def _regression_pass(lines: List[Line], use_end: bool) -> List[Line]:
    """
    Keep lines whose start (or end) point sits on the common regression line

    A line that crosses the regression line has that point snapped onto it.
    """
    fit = fit_line(line.end if use_end else line.start for line in lines)
    if fit is None:
        return []
    gradient, intercept = fit

    selected_lines = []
    for line in lines:
        anchor = line.end if use_end else line.start
        y_on_regression = gradient * anchor.x + intercept

        # Endpoints on opposite sides: the fret crosses the regression line
        if (line.start.y - y_on_regression) * (line.end.y - y_on_regression) <= 0:
            anchor = Point(anchor.x, y_on_regression)

        if abs(anchor.y - y_on_regression) < FRET_REGRESSION_TOLERANCE:
            if use_end:
                selected_lines.append(Line(line.start, anchor))
            else:
                selected_lines.append(Line(anchor, line.end))

    return selected_lines


def select_frets(lines: List[Line]) -> List[Line]:
    """
    Two-pass outlier rejection against the fretboard edges

    The first pass aligns fret tops with the top edge, the second aligns
    fret bottoms with the bottom edge.
    """
    top_aligned = _regression_pass(lines, use_end=False)
    return _regression_pass(top_aligned, use_end=True)


def vertical_ridge(lines: List[Line]) -> List[Line]:
    """Merge near-coincident fret candidates (both edges of one fret wire)"""
    remaining = sorted(lines, key=lambda line: line.start.x)
    ridge_lines = []

    while remaining:
        line = remaining.pop(0)
        leftovers = []

        for connection in remaining:
            distance = connection.start.x - line.start.x
            if distance < RIDGE_MERGE_DISTANCE:
                x1 = line.start.x + distance / 2
                x2 = line.end.x + (connection.end.x - line.end.x) / 2
                y1 = min(line.start.y, connection.start.y)
                y2 = max(line.end.y, connection.end.y)
                line = Line(Point(x1, y1), Point(x2, y2))
            else:
                leftovers.append(connection)

        remaining = leftovers
        ridge_lines.append(line)

    return ridge_lines


def correct_fret_spacing(frets: List[Line],
                         gaps: List[float],
                         ratio: float = FRET_RATIO) -> Tuple[List[Line], List[float]]:
    """
    Forward pass that removes spurious frets and fills in missing ones

    Walking from the bridge towards the nut, every gap should be the previous
    gap divided by ``ratio``. A gap that is too small means the fret closing
    it is noise; a gap that is too large means a fret was missed.

    Args:
        frets: Frets ordered bridge-most first
        gaps: ``gaps[i]`` is the x distance between ``frets[i]`` and ``frets[i + 1]``
        ratio: Equal-tempered spacing ratio

    Returns:
        Corrected (frets, gaps)
    """
    frets = list(frets)
    gaps = list(gaps)
    insertions = 0

    counter = 1
    while counter < len(gaps):
        expected = gaps[counter - 1] / ratio

        if gaps[counter] < expected - FRET_SPACING_TOLERANCE:
            # Drop the fret and fold its gap into the next one
            if counter + 1 < len(gaps):
                gaps[counter + 1] += gaps[counter]
            del gaps[counter]
            del frets[counter + 1]
            continue

        if gaps[counter] > expected + FRET_SPACING_TOLERANCE:
            if insertions >= MAX_FRET_CORRECTIONS:
                break

            previous_fret = frets[counter]
            x1 = previous_fret.start.x - expected
            x2 = previous_fret.end.x - expected
            if x1 < 0 or x2 < 0:
                break

            frets.insert(counter + 1, Line(
                Point(x1, previous_fret.start.y),
                Point(x2, previous_fret.end.y),
            ))
            gaps.insert(counter, expected)
            gaps[counter + 1] -= expected
            insertions += 1

        counter += 1

    if insertions:
        logger.debug(f"Fret spacing: inserted {insertions} missing fret(s)")

    return frets, gaps


def extend_to_nut(frets: List[Line], last_gap: float, ratio: float = FRET_RATIO) -> List[Line]:
    """
    Keep adding frets past the nut-most one until the frame edge

    Args:
        frets: Frets ordered bridge-most first
        last_gap: Gap between the two nut-most frets

    Returns:
        Frets with the extension appended; no endpoint has negative x
    """
    frets = list(frets)
    if not frets or last_gap <= 0:
        return frets

    distance = last_gap
    while True:
        distance /= ratio
        current_fret = frets[-1]

        x1 = current_fret.start.x - distance
        x2 = current_fret.end.x - distance
        if x1 < 0 or x2 < 0:
            break

        frets.append(Line(Point(x1, current_fret.start.y), Point(x2, current_fret.end.y)))

    return frets


def extrapolate_frets(lines: List[Line]) -> List[Line]:
    """
    Anchor on the rightmost frets and extrapolate the rest

    Returns:
        Frets ordered bridge-most first, or an empty list when there are not
        enough usable anchors
    """
    ordered = sorted(lines, key=lambda line: line.start.x)
    rightmost_frets = ordered[-ANCHOR_FRETS:]

    if len(rightmost_frets) < MIN_ANCHOR_FRETS:
        return []

    frets = rightmost_frets[::-1]
    gaps = [fret.start.x - next_fret.start.x for fret, next_fret in zip(frets, frets[1:])]

    if gaps[0] < MIN_ANCHOR_GAP:
        return []

    frets, gaps = correct_fret_spacing(frets, gaps)
    return extend_to_nut(frets, gaps[-1])


class FretDetector:
    """Detect fret positions across the fretboard"""

    def __init__(self, extractor: Optional[LineExtractor] = None):
        """
        Args:
            extractor: Shared line extractor (a new one is created if None)
        """
        self.extractor = extractor or LineExtractor()

    def find_fret_lines(self, raw_lines: List[Line]) -> List[Line]:
        """
        Select, merge and extrapolate raw segments into frets

        Returns:
            Fret lines ordered nut-most first
        """
        strong_lines = select_strong_lines(raw_lines, MAX_FRET_CANDIDATES, horizontal=False)
        combined = combine_lines(strong_lines, FRET_MERGE_DISTANCE)
        selected = select_frets(combined)
        ridged = vertical_ridge(selected)
        frets = extrapolate_frets(ridged)

        logger.debug(
            f"Frets: {len(raw_lines)} raw, {len(strong_lines)} strong, {len(combined)} combined, "
            f"{len(selected)} selected, {len(ridged)} ridges, {len(frets)} final"
        )
        return frets[::-1]

    def detect(self, vertical_map: np.ndarray) -> List[Line]:
        """Detect fret lines in the vertical-emphasis map, nut-most first"""
        raw_lines = self.extractor.extract_frets(vertical_map)
        return self.find_fret_lines(raw_lines)
