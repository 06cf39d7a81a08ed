"""
Temporal smoothing of landmark grids
"""
import threading
import numpy as np
from collections import deque

from fretgrid.guitar_config import HISTORY_LENGTH, NUM_STRINGS, GRID_COLUMNS
from fretgrid.video.geometry import Point
from fretgrid.video.grid_composer import Grid, empty_grid


class TemporalStabilizer:
    """
    Moving average over the most recent grids

    Written by the processing thread, read by the rendering thread. Readers
    only ever see the immutable grid published by the last ``push``.
    """

    def __init__(self, capacity=HISTORY_LENGTH):
        """
        Args:
            capacity: Number of frames kept in the history window
        """
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")

        self.capacity = capacity
        self._history = deque(maxlen=capacity)
        self._write_lock = threading.Lock()
        self._current: Grid = empty_grid()

    @property
    def current(self) -> Grid:
        """Latest averaged grid"""
        return self._current

    def __len__(self):
        return len(self._history)

    def push(self, grid: Grid) -> Grid:
        """
        Add a frame's grid and publish the new average

        Returns:
            The averaged grid
        """
        with self._write_lock:
            # deque(maxlen) evicts the oldest grid
            self._history.append(grid)
            self._current = self._average()
            return self._current

    def _average(self) -> Grid:
        rows = []
        for row in range(NUM_STRINGS):
            cells = []
            for column in range(GRID_COLUMNS):
                points = [grid[row][column] for grid in self._history if grid[row][column] is not None]
                if points:
                    x, y = np.mean(points, axis=0)
                    cells.append(Point(float(x), float(y)))
                else:
                    cells.append(None)
            rows.append(tuple(cells))
        return tuple(rows)

    def reset(self):
        """Forget all history"""
        with self._write_lock:
            self._history.clear()
            self._current = empty_grid()
