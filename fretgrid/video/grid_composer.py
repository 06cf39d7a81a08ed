"""
Compose the string x fret landmark grid
"""
import math
from typing import List, Optional, Tuple

from fretgrid.guitar_config import NUM_STRINGS, GRID_COLUMNS, NUM_GRID_FRETS
from fretgrid.video.geometry import Line, Point

# Rows are strings (top string first), columns are fret positions (nut first)
Grid = Tuple[Tuple[Optional[Point], ...], ...]


def empty_grid() -> Grid:
    """Grid with every cell missing"""
    return tuple(tuple(None for _ in range(GRID_COLUMNS)) for _ in range(NUM_STRINGS))


def is_empty(grid: Grid) -> bool:
    return all(cell is None for row in grid for cell in row)


def column_positions(frets: List[Line]) -> List[float]:
    """
    x positions of the grid columns

    Column 0 sits on the nut-most fret; the others sit halfway between
    consecutive frets, where a finger presses the string.
    """
    positions = [frets[0].start.x]
    for j in range(1, GRID_COLUMNS):
        left = frets[j].start.x
        right = frets[j + 1].start.x
        positions.append(left + (right - left) / 2)
    return positions


def compose_grid(strings: List[Line], frets: List[Line]) -> Grid:
    """
    Intersect the strings with the fret columns

    Args:
        strings: Exactly six string lines, top first
        frets: At least six fret lines, nut-most first

    Returns:
        Grid in pixel coordinates; all cells are None when either set is
        incomplete
    """
    if len(strings) != NUM_STRINGS or len(frets) < NUM_GRID_FRETS:
        return empty_grid()

    positions = column_positions(frets[:NUM_GRID_FRETS])

    rows = []
    for string in strings:
        row = []
        for x in positions:
            y = string.y_at(x)
            row.append(Point(x, y) if math.isfinite(x) and math.isfinite(y) else None)
        rows.append(tuple(row))

    return tuple(rows)


def normalize_grid(grid: Grid, width: int, height: int) -> Grid:
    """Scale pixel coordinates into the unit square"""
    return tuple(
        tuple(Point(cell.x / width, cell.y / height) if cell is not None else None for cell in row)
        for row in grid
    )
