from __future__ import annotations

from datetime import datetime, timedelta
import unittest

from spreadband.highlight import highlight_pair
from spreadband.scales import LinearScale, TimeScale, x_position


def _identity(value: float) -> float:
    return float(value)


def _rows(a: list, b: list) -> list[dict]:
    return [{"x": i, "a": av, "b": bv} for i, (av, bv) in enumerate(zip(a, b))]


class PairHighlightTests(unittest.TestCase):
    def test_gap_interpolated_and_single_above_strip(self) -> None:
        out = highlight_pair(_rows([1, 2, None, 4], [0, 0, 0, 0]), "a", "b", x_scale=_identity, y_scale=_identity, x_key="x")
        self.assertEqual(len(out.strips.above), 1)
        self.assertEqual(out.strips.below, ())
        strip = out.strips.above[0]
        self.assertEqual((strip[0].x, strip[-1].x), (0.0, 3.0))
        self.assertEqual(strip[2].y_top, 3.0)
        self.assertEqual(len(out.regions), 1)
        self.assertEqual(out.regions[0].dominance, "above")

    def test_sign_flip_produces_above_and_below_regions(self) -> None:
        out = highlight_pair(_rows([1, -1], [0, 0]), "a", "b", x_scale=_identity, y_scale=_identity, x_key="x", pair_id="p")
        self.assertEqual([r.key for r in out.regions], ["p-above-0", "p-below-0"])
        above, below = out.regions
        self.assertEqual(above.path, "M 0 1 L 0.5 0 L 0.5 0 L 0 0 Z")
        self.assertEqual(below.path, "M 0.5 0 L 1 0 L 1 -1 L 0.5 0 Z")
        self.assertEqual(above.x_range, (0.0, 0.5))
        self.assertEqual(below.x_range, (0.5, 1.0))

    def test_missing_x_scale_returns_nothing(self) -> None:
        out = highlight_pair(_rows([1, 2, 3], [0, 0, 0]), "a", "b", x_scale=None, y_scale=_identity, x_key="x")
        self.assertEqual(out.regions, ())
        self.assertEqual(len(out.strips), 0)

    def test_missing_y_scale_returns_nothing(self) -> None:
        out = highlight_pair(_rows([1, 2, 3], [0, 0, 0]), "a", "b", x_scale=_identity, y_scale=None, x_key="x")
        self.assertEqual(out.regions, ())

    def test_single_row_returns_nothing(self) -> None:
        out = highlight_pair(_rows([1], [0]), "a", "b", x_scale=_identity, y_scale=_identity, x_key="x")
        self.assertEqual(out.regions, ())

    def test_unresolvable_rows_return_nothing(self) -> None:
        out = highlight_pair(_rows([1, None, None], [None, None, 0]), "a", "b", x_scale=_identity, y_scale=_identity, x_key="x")
        self.assertEqual(out.regions, ())

    def test_disabled_returns_nothing(self) -> None:
        out = highlight_pair(_rows([1, 2], [0, 0]), "a", "b", x_scale=_identity, y_scale=_identity, x_key="x", enabled=False)
        self.assertEqual(out.regions, ())

    def test_failing_scale_call_only_drops_affected_segments(self) -> None:
        def flaky_x(value: float) -> float:
            if value == 1:
                raise ValueError("no band for this value")
            return float(value)

        out = highlight_pair(_rows([1, 1, 1, 1], [0, 0, 0, 0]), "a", "b", x_scale=flaky_x, y_scale=_identity, x_key="x")
        self.assertEqual(len(out.regions), 1)
        self.assertEqual(out.regions[0].x_range, (2.0, 3.0))

    def test_colors_and_opacity_are_applied(self) -> None:
        out = highlight_pair(
            _rows([1, -1], [0, 0]),
            "a",
            "b",
            x_scale=_identity,
            y_scale=_identity,
            x_key="x",
            above_color="#00ff00",
            below_color="#ff0000",
            opacity=0.3,
        )
        self.assertEqual([(r.fill, r.opacity) for r in out.regions], [("#00ff00", 0.3), ("#ff0000", 0.3)])

    def test_scale_objects_with_datetime_rows(self) -> None:
        t0 = datetime(2024, 5, 6)
        rows = [{"timestamp_uk": (t0 + timedelta(days=i)).isoformat(), "a": a, "b": 1.0} for i, a in enumerate([2.0, None, 0.0])]
        x_scale = TimeScale(domain=(x_position(rows[0]["timestamp_uk"]), x_position(rows[-1]["timestamp_uk"])), range=(0.0, 100.0))
        y_scale = LinearScale(domain=(0.0, 2.0), range=(100.0, 0.0))
        out = highlight_pair(rows, "a", "b", x_scale=x_scale, y_scale=y_scale)
        # A falls from 2 to 0 while B holds at 1, so they meet exactly at the interpolated middle row.
        self.assertEqual(len(out.strips.above), 1)
        self.assertEqual(len(out.strips.below), 1)
        self.assertAlmostEqual(out.strips.above[0][-1].x, 50.0)
        self.assertAlmostEqual(out.strips.above[0][-1].y_top, 50.0)

    def test_repeated_calls_are_identical(self) -> None:
        rows = _rows([1, -1, 2, None, -3], [0, 0, 1, 1, None])
        first = highlight_pair(rows, "a", "b", x_scale=_identity, y_scale=_identity, x_key="x")
        second = highlight_pair(rows, "a", "b", x_scale=_identity, y_scale=_identity, x_key="x")
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
