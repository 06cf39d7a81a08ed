"""
Points and lines shared by every fretboard stage
"""
import math
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Tuple


class Point(NamedTuple):
    """2D coordinate, either in pixels or normalized to the unit square"""
    x: float
    y: float


@dataclass(frozen=True)
class Line:
    """
    A segment between two points, read as an infinite line clipped to its
    visible extent.

    For strings ``start`` is the left end; for frets ``start`` is the top of
    the fretboard and ``end`` the bottom.
    """
    start: Point
    end: Point

    @classmethod
    def from_coords(cls, x1: float, y1: float, x2: float, y2: float) -> "Line":
        return cls(Point(float(x1), float(y1)), Point(float(x2), float(y2)))

    @property
    def gradient(self) -> float:
        """dy/dx, or +inf for a vertical line"""
        return line_gradient(self.start, self.end)

    @property
    def intercept(self) -> float:
        """y where the line crosses x = 0"""
        gradient = self.gradient
        if math.isinf(gradient) or self.start.x == 0 or gradient == 0:
            return self.start.y
        return self.start.y - gradient * self.start.x

    def y_at(self, x: float) -> float:
        """y on this line at ``x``; a vertical line answers with its start y"""
        gradient = self.gradient
        if math.isinf(gradient):
            return self.start.y
        return gradient * x + self.intercept

    def oriented_horizontal(self) -> "Line":
        """Same line with ``start`` on the left"""
        if self.start.x > self.end.x:
            return Line(self.end, self.start)
        return self

    def oriented_vertical(self) -> "Line":
        """Same line with ``start`` on top"""
        if self.start.y > self.end.y:
            return Line(self.end, self.start)
        return self

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """(x1, y1, x2, y2) rounded for OpenCV drawing calls"""
        return (int(round(self.start.x)), int(round(self.start.y)),
                int(round(self.end.x)), int(round(self.end.y)))


def line_gradient(p1: Point, p2: Point) -> float:
    dx = p2.x - p1.x
    if dx == 0:
        return math.inf
    return (p2.y - p1.y) / dx


def point_distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def fit_line(points: Iterable[Point]) -> Optional[Tuple[float, float]]:
    """
    Least-squares fit of y = gradient * x + intercept

    Args:
        points: Points to fit

    Returns:
        (gradient, intercept), or None when fewer than two points are given
        or every point shares the same x
    """
    points = list(points)
    n = len(points)
    if n < 2:
        return None

    sum_x = sum(p.x for p in points)
    sum_y = sum(p.y for p in points)
    sum_xy = sum(p.x * p.y for p in points)
    sum_x2 = sum(p.x * p.x for p in points)

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return None

    gradient = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - gradient * sum_x) / n
    return gradient, intercept
