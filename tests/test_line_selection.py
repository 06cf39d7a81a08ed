import unittest

from fretgrid.video.geometry import Line, Point
from fretgrid.video.line_selection import (
    select_strong_lines,
    combine_lines,
    extend_lines,
    remove_duplicate_lines,
)


class TestSelectStrongLines(unittest.TestCase):
    def setUp(self):
        self.lines = [
            Line.from_coords(0, 0, 100, 10),
            Line.from_coords(0, 0, 10, 100),
            Line.from_coords(100, 20, 0, 30),
            Line.from_coords(50, 300, 40, 100),
            Line.from_coords(0, 0, 50, 50),
        ]

    def test_horizontal_candidates(self):
        strings = select_strong_lines(self.lines, 6, horizontal=True)
        self.assertEqual(len(strings), 2)
        # Oriented left to right
        self.assertEqual(strings[1].start, Point(0.0, 30.0))

    def test_vertical_candidates(self):
        frets = select_strong_lines(self.lines, 50, horizontal=False)
        self.assertEqual(len(frets), 2)
        # Oriented top to bottom
        self.assertEqual(frets[1].start, Point(40.0, 100.0))

    def test_cutoff_follows_detector_order(self):
        strings = select_strong_lines(self.lines, 1, horizontal=True)
        self.assertEqual(strings, [self.lines[0]])

    def test_diagonal_excluded_from_both(self):
        diagonal = [Line.from_coords(0, 0, 50, 50)]
        self.assertEqual(select_strong_lines(diagonal, 6, horizontal=True), [])
        self.assertEqual(select_strong_lines(diagonal, 6, horizontal=False), [])


class TestCombineLines(unittest.TestCase):
    def test_chains_nearby_segments(self):
        lines = [
            Line.from_coords(0, 0, 50, 0),
            Line.from_coords(53, 0, 100, 0),
            Line.from_coords(0, 50, 100, 50),
        ]
        combined = combine_lines(lines, 10)
        self.assertEqual(combined, [Line.from_coords(0, 0, 100, 0), lines[2]])

    def test_result_depends_on_order(self):
        # The head only looks forward from its end point
        lines = [Line.from_coords(53, 0, 100, 0), Line.from_coords(0, 0, 50, 0)]
        self.assertEqual(combine_lines(lines, 10), lines)

    def test_empty(self):
        self.assertEqual(combine_lines([], 10), [])


class TestExtendLines(unittest.TestCase):
    def test_common_extent(self):
        extended = extend_lines([
            Line.from_coords(10, 0, 50, 4),
            Line.from_coords(20, 100, 100, 100),
        ])
        for line in extended:
            self.assertEqual(line.start.x, 10.0)
            self.assertEqual(line.end.x, 100.0)

        self.assertAlmostEqual(extended[0].start.y, 0.0)
        self.assertAlmostEqual(extended[0].end.y, 9.0)
        self.assertEqual(extended[1].start.y, 100.0)
        self.assertEqual(extended[1].end.y, 100.0)

    def test_empty(self):
        self.assertEqual(extend_lines([]), [])


class TestRemoveDuplicateLines(unittest.TestCase):
    def test_merges_lines_in_same_bucket(self):
        lines = [
            Line.from_coords(0, 100, 50, 100),
            Line.from_coords(20, 103, 200, 103),
            Line.from_coords(0, 150, 200, 150),
        ]
        single = remove_duplicate_lines(lines)
        self.assertEqual(len(single), 2)
        self.assertEqual(single[0], Line.from_coords(0, 100, 200, 103))
        self.assertEqual(single[1], lines[2])

    def test_half_way_intercepts_round_to_even(self):
        # 15 and 25 both land in the 20 bucket
        lines = [Line.from_coords(0, 15, 100, 15), Line.from_coords(0, 25, 100, 25)]
        self.assertEqual(len(remove_duplicate_lines(lines)), 1)

    def test_distinct_lines_kept(self):
        lines = [Line.from_coords(0, y, 100, y) for y in (200, 240, 280)]
        self.assertEqual(remove_duplicate_lines(lines), lines)


if __name__ == "__main__":
    unittest.main()
