import unittest

from fretgrid.video.geometry import Point
from fretgrid.video.grid_composer import empty_grid
from fretgrid.video.temporal_stabilizer import TemporalStabilizer


def filled_grid(x, y):
    return tuple(tuple(Point(x, y) for _ in range(5)) for _ in range(6))


class TestTemporalStabilizer(unittest.TestCase):
    def test_starts_empty(self):
        stabilizer = TemporalStabilizer()
        self.assertEqual(stabilizer.current, empty_grid())
        self.assertEqual(len(stabilizer), 0)

    def test_single_grid_unchanged(self):
        stabilizer = TemporalStabilizer()
        grid = filled_grid(0.25, 0.5)
        self.assertEqual(stabilizer.push(grid), grid)
        self.assertEqual(stabilizer.current, grid)

    def test_missing_cells_ignored(self):
        stabilizer = TemporalStabilizer()
        stabilizer.push(empty_grid())
        averaged = stabilizer.push(filled_grid(10, 20))
        self.assertEqual(averaged[3][2], Point(10, 20))

    def test_mean_of_history(self):
        stabilizer = TemporalStabilizer()
        stabilizer.push(filled_grid(10, 20))
        averaged = stabilizer.push(filled_grid(20, 40))
        self.assertEqual(averaged[0][0], Point(15, 30))

    def test_oldest_grid_evicted(self):
        stabilizer = TemporalStabilizer(capacity=2)
        stabilizer.push(filled_grid(0, 0))
        stabilizer.push(filled_grid(10, 10))
        averaged = stabilizer.push(filled_grid(20, 20))

        self.assertEqual(len(stabilizer), 2)
        self.assertEqual(averaged[5][4], Point(15, 15))

    def test_all_missing_history(self):
        stabilizer = TemporalStabilizer()
        for _ in range(3):
            stabilizer.push(empty_grid())
        self.assertEqual(stabilizer.current, empty_grid())

    def test_reset(self):
        stabilizer = TemporalStabilizer()
        stabilizer.push(filled_grid(1, 1))
        stabilizer.reset()
        self.assertEqual(len(stabilizer), 0)
        self.assertEqual(stabilizer.current, empty_grid())

    def test_invalid_capacity(self):
        with self.assertRaises(ValueError):
            TemporalStabilizer(capacity=0)


if __name__ == "__main__":
    unittest.main()
