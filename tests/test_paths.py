from __future__ import annotations

import unittest

from spreadband.paths import build_path, format_number, polygon_points
from spreadband.series import StripPoint


class PathBuilderTests(unittest.TestCase):
    def test_path_traces_top_then_bottom_and_closes(self) -> None:
        strip = (StripPoint(0.0, 1.0, 0.0), StripPoint(0.5, 0.0, 0.0))
        self.assertEqual(build_path(strip), "M 0 1 L 0.5 0 L 0.5 0 L 0 0 Z")

    def test_three_point_path(self) -> None:
        strip = (StripPoint(10, 5, 7), StripPoint(20, 4, 8), StripPoint(30, 3, 9))
        self.assertEqual(build_path(strip), "M 10 5 L 20 4 L 30 3 L 30 9 L 20 8 L 10 7 Z")

    def test_short_strips_produce_nothing(self) -> None:
        self.assertEqual(build_path(()), "")
        self.assertEqual(build_path((StripPoint(0, 1, 0),)), "")
        self.assertEqual(polygon_points((StripPoint(0, 1, 0),)), ())

    def test_polygon_points_order(self) -> None:
        strip = (StripPoint(0, 1, 0), StripPoint(2, 3, 1))
        self.assertEqual(polygon_points(strip), ((0, 1), (2, 3), (2, 1), (0, 0)))

    def test_number_formatting(self) -> None:
        self.assertEqual(format_number(3.0), "3")
        self.assertEqual(format_number(-0.0), "0")
        self.assertEqual(format_number(0.25), "0.25")
        self.assertEqual(format_number(1 / 3), "0.3333333333333333")


if __name__ == "__main__":
    unittest.main()
