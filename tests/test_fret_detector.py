import unittest

from fretgrid.guitar_config import FRET_RATIO
from fretgrid.video.geometry import Line
from fretgrid.video.fret_detector import (
    FretDetector,
    correct_fret_spacing,
    extend_to_nut,
    extrapolate_frets,
    select_frets,
    vertical_ridge,
)


def make_frets(xs, top=100, bottom=300):
    return [Line.from_coords(x, top, x, bottom) for x in xs]


def ideal_positions(count, start=600.0, first_gap=40.0):
    """Bridge-first fret x positions with equal-tempered spacing"""
    xs = [start]
    gap = first_gap
    for _ in range(count - 1):
        xs.append(xs[-1] - gap)
        gap /= FRET_RATIO
    return xs


def gaps_of(frets):
    return [fret.start.x - next_fret.start.x for fret, next_fret in zip(frets, frets[1:])]


class TestCorrectFretSpacing(unittest.TestCase):
    def test_ideal_spacing_unchanged(self):
        frets = make_frets(ideal_positions(6))
        gaps = gaps_of(frets)

        corrected, corrected_gaps = correct_fret_spacing(frets, gaps)

        self.assertEqual(corrected, frets)
        self.assertEqual(corrected_gaps, gaps)

    def test_missing_fret_inserted(self):
        xs = ideal_positions(5)
        frets = make_frets(xs[:3] + xs[4:])

        corrected, corrected_gaps = correct_fret_spacing(frets, gaps_of(frets))

        self.assertEqual(len(corrected), 5)
        self.assertEqual(len(corrected_gaps), 4)
        for fret, x in zip(corrected, xs):
            self.assertAlmostEqual(fret.start.x, x, places=6)
        # Inserted fret keeps the neighbouring fret's vertical extent
        self.assertEqual(corrected[3].start.y, 100)
        self.assertEqual(corrected[3].end.y, 300)

    def test_spurious_fret_removed(self):
        xs = ideal_positions(5)
        frets = make_frets(xs[:2] + [xs[1] - 5] + xs[2:])

        corrected, corrected_gaps = correct_fret_spacing(frets, gaps_of(frets))

        self.assertEqual([fret.start.x for fret in corrected], xs)
        self.assertEqual(len(corrected_gaps), 4)
        self.assertAlmostEqual(corrected_gaps[1], 40 / FRET_RATIO, places=6)


class TestExtendToNut(unittest.TestCase):
    def test_stops_at_frame_edge(self):
        frets = extend_to_nut(make_frets([200, 160]), 40)

        self.assertEqual(len(frets), 5)
        xs = [fret.start.x for fret in frets]
        self.assertTrue(all(x >= 0 for x in xs))
        self.assertEqual(xs, sorted(xs, reverse=True))
        self.assertAlmostEqual(xs[2], 160 - 40 / FRET_RATIO)

    def test_non_positive_gap(self):
        frets = make_frets([200, 160])
        self.assertEqual(extend_to_nut(frets, 0), frets)
        self.assertEqual(extend_to_nut([], 40), [])


class TestExtrapolateFrets(unittest.TestCase):
    def test_extrapolates_to_nut(self):
        xs = ideal_positions(4)
        frets = extrapolate_frets(make_frets(reversed(xs)))

        self.assertGreater(len(frets), 4)
        self.assertEqual(frets[0].start.x, 600)
        positions = [fret.start.x for fret in frets]
        self.assertEqual(positions, sorted(positions, reverse=True))
        self.assertTrue(all(fret.start.x >= 0 and fret.end.x >= 0 for fret in frets))

    def test_anchors_are_rightmost_frets(self):
        xs = ideal_positions(8)
        frets = extrapolate_frets(make_frets(xs))
        self.assertEqual(frets[0].start.x, 600)
        self.assertAlmostEqual(frets[5].start.x, xs[5], places=6)

    def test_too_few_anchors(self):
        self.assertEqual(extrapolate_frets(make_frets([600, 560])), [])
        self.assertEqual(extrapolate_frets([]), [])

    def test_first_gap_too_small(self):
        self.assertEqual(extrapolate_frets(make_frets([600, 590, 550, 505])), [])


class TestSelectFrets(unittest.TestCase):
    def test_outlier_rejected(self):
        lines = make_frets(range(100, 900, 100))
        outlier = Line.from_coords(450, 160, 450, 360)

        selected = select_frets(lines + [outlier])

        self.assertEqual(len(selected), 8)
        self.assertNotIn(450, [line.start.x for line in selected])

    def test_degenerate_fit(self):
        self.assertEqual(select_frets([Line.from_coords(100, 100, 100, 300)]), [])
        self.assertEqual(select_frets([]), [])


class TestVerticalRidge(unittest.TestCase):
    def test_merges_both_edges_of_a_fret(self):
        lines = [
            Line.from_coords(200, 110, 200, 290),
            Line.from_coords(104, 100, 104, 280),
            Line.from_coords(100, 105, 100, 300),
        ]
        ridges = vertical_ridge(lines)

        self.assertEqual(len(ridges), 2)
        self.assertEqual(ridges[0], Line.from_coords(102, 100, 102, 300))
        self.assertEqual(ridges[1], lines[0])


class TestFretDetector(unittest.TestCase):
    def test_find_fret_lines_nut_first(self):
        xs = ideal_positions(6)
        frets = FretDetector().find_fret_lines(make_frets(xs, top=260, bottom=460))

        self.assertGreaterEqual(len(frets), 6)
        positions = [fret.start.x for fret in frets]
        self.assertEqual(positions, sorted(positions))
        self.assertAlmostEqual(positions[-1], 600, places=3)

    def test_no_candidates(self):
        self.assertEqual(FretDetector().find_fret_lines([]), [])


if __name__ == "__main__":
    unittest.main()
