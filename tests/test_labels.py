from __future__ import annotations

import unittest

from barcode_extract.config import LabelWeights
from barcode_extract.contracts import BBox, Size, TextLine
from barcode_extract.geometry import CardinalDirection
from barcode_extract.labels import associate_label, label_candidates

PAGE = Size(width=1000, height=1000)  # max distance 250
CODE = BBox(x0=100, y0=100, x1=200, y1=200)  # center (150, 150), min distance 50


def _line(text: str, x0: int, y0: int, x1: int, y1: int) -> TextLine:
    return TextLine(page=1, text=text, bbox=BBox(x0=x0, y0=y0, x1=x1, y1=y1))


class TestAssociateLabel(unittest.TestCase):
    def test_prefers_label_below_over_slightly_closer_one_above(self) -> None:
        above = _line("ABOVE", 100, 80, 200, 90)  # distance 65, +10% -> 71.5
        below = _line("  BELOW  ", 100, 210, 200, 230)  # distance 70
        self.assertEqual(associate_label(CODE, [above, below], page_size=PAGE), "BELOW")

    def test_weights_are_configurable(self) -> None:
        above = _line("ABOVE", 100, 80, 200, 90)
        below = _line("BELOW", 100, 210, 200, 230)
        weights = LabelWeights(north=0.0, east_west=0.0, south=0.0)
        self.assertEqual(associate_label(CODE, [above, below], page_size=PAGE, weights=weights), "ABOVE")

    def test_contained_line_is_never_selected(self) -> None:
        wide = BBox(x0=0, y0=0, x1=400, y1=100)  # min distance 50
        inside = _line("INSIDE", 10, 10, 60, 30)  # distance ~167, but inside the code
        self.assertIsNone(associate_label(wide, [inside], page_size=PAGE))

    def test_too_close_and_too_far_are_dropped(self) -> None:
        near = _line("NEAR", 130, 140, 170, 160)  # distance 0
        far = _line("FAR", 100, 600, 200, 620)  # distance 460
        self.assertIsNone(associate_label(CODE, [near, far], page_size=PAGE))
        self.assertIsNone(associate_label(CODE, [], page_size=PAGE))

    def test_ties_keep_enumeration_order(self) -> None:
        left = _line("LEFT", 0, 140, 40, 160)  # distance 130, west
        right = _line("RIGHT", 260, 140, 300, 160)  # distance 130, east
        self.assertEqual(associate_label(CODE, [left, right], page_size=PAGE), "LEFT")
        self.assertEqual(associate_label(CODE, [right, left], page_size=PAGE), "RIGHT")


class TestLabelCandidates(unittest.TestCase):
    def test_candidates_carry_direction_and_penalized_distance(self) -> None:
        lines = [
            _line("S", 100, 210, 200, 230),
            _line("N", 100, 80, 200, 90),
            _line("W", 0, 140, 40, 160),
        ]
        got = {c.line.text: (c.direction, c.distance) for c in label_candidates(CODE, lines, page_size=PAGE)}
        self.assertEqual(got["S"][0], CardinalDirection.SOUTH)
        self.assertAlmostEqual(got["S"][1], 70.0)
        self.assertEqual(got["N"][0], CardinalDirection.NORTH)
        self.assertAlmostEqual(got["N"][1], 71.5)
        self.assertEqual(got["W"][0], CardinalDirection.WEST)
        self.assertAlmostEqual(got["W"][1], 136.5)


if __name__ == "__main__":
    unittest.main()
