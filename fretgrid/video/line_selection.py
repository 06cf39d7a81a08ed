"""
Candidate selection and merging of raw line segments
"""
from typing import Dict, List

from fretgrid.guitar_config import INTERCEPT_BUCKET
from fretgrid.video.geometry import Line, Point, point_distance


def select_strong_lines(lines: List[Line], cutoff: int, horizontal: bool) -> List[Line]:
    """
    Keep the first ``cutoff`` segments with the right orientation

    Selection follows detector order; it is not ranked by any score.

    Args:
        lines: Raw segments
        cutoff: Maximum number of segments to keep
        horizontal: True for string candidates (|gradient| < 1),
            False for fret candidates (|gradient| > 1)

    Returns:
        Oriented segments: left-to-right for strings, top-to-bottom for frets
    """
    strong_lines = []

    for line in lines:
        if len(strong_lines) >= cutoff:
            break

        if horizontal:
            line = line.oriented_horizontal()
            if abs(line.gradient) < 1:
                strong_lines.append(line)
        else:
            line = line.oriented_vertical()
            if abs(line.gradient) > 1:
                strong_lines.append(line)

    return strong_lines


def combine_lines(lines: List[Line], threshold: float) -> List[Line]:
    """
    Chain segments whose start lies near the current end

    Each head segment gets a single sweep over the remaining list, so the
    result depends on list order.
    """
    remaining = list(lines)
    combined_lines = []

    while remaining:
        line = remaining.pop(0)
        leftovers = []

        for connection in remaining:
            if point_distance(line.end, connection.start) < threshold:
                line = Line(line.start, connection.end)
            else:
                leftovers.append(connection)

        remaining = leftovers
        combined_lines.append(line)

    return combined_lines


def extend_lines(lines: List[Line]) -> List[Line]:
    """Stretch every line along its own gradient to the common x-extent"""
    if not lines:
        return []

    left_most = min(line.start.x for line in lines)
    right_most = max(line.end.x for line in lines)

    return [
        Line(Point(left_most, line.y_at(left_most)), Point(right_most, line.y_at(right_most)))
        for line in lines
    ]


def remove_duplicate_lines(lines: List[Line]) -> List[Line]:
    """
    Collapse lines that share a rounded y-intercept

    A group of duplicates becomes one line from the leftmost to the rightmost
    endpoint found among all members.
    """
    groups: Dict[float, List[Line]] = {}
    for line in lines:
        key = round(line.intercept / INTERCEPT_BUCKET) * INTERCEPT_BUCKET
        groups.setdefault(key, []).append(line)

    single_lines = []
    for segments in groups.values():
        if len(segments) == 1:
            single_lines.append(segments[0])
            continue

        left_most = Point(float("inf"), 0.0)
        right_most = Point(float("-inf"), 0.0)
        for segment in segments:
            for point in (segment.start, segment.end):
                if point.x < left_most.x:
                    left_most = point
                if point.x > right_most.x:
                    right_most = point

        single_lines.append(Line(left_most, right_most))

    return single_lines
