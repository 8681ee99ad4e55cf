from __future__ import annotations

import unittest

from spreadband.config import HighlightConfig
from spreadband.multi import highlight_routes, iter_pairs


def _identity(value: float) -> float:
    return float(value)


def _rows(route: str = "r1") -> list[dict]:
    rows = []
    for i in range(4):
        rows.append(
            {
                "x": i,
                f"spread_acp_{route}": 10.0 + i,
                f"spread_trayport_{route}": -5.0,
                f"cost_all_{route}": 1.0,
                f"cost_fixed_{route}": 2.0 if i != 2 else None,
                f"cost_variable_{route}": 3.0,
            }
        )
    return rows


class PairIterationTests(unittest.TestCase):
    def test_default_config_yields_six_pairs(self) -> None:
        ids = [spec.pair_id for spec in iter_pairs(HighlightConfig())]
        self.assertEqual(
            ids,
            [
                "spread_acp-cost_all-r1",
                "spread_acp-cost_fixed-r1",
                "spread_acp-cost_variable-r1",
                "spread_trayport-cost_all-r1",
                "spread_trayport-cost_fixed-r1",
                "spread_trayport-cost_variable-r1",
            ],
        )

    def test_hidden_metrics_remove_their_pairs(self) -> None:
        specs = list(iter_pairs(HighlightConfig(), {"cost_fixed": True, "spread_acp": False}))
        self.assertEqual(len(specs), 4)
        self.assertTrue(all(spec.cost != "cost_fixed" for spec in specs))
        self.assertEqual(len(list(iter_pairs(HighlightConfig(), {"spread_acp": True, "spread_trayport": True}))), 0)

    def test_routes_multiply_pairs(self) -> None:
        specs = list(iter_pairs(HighlightConfig(routes=("r1", "r2"))))
        self.assertEqual(len(specs), 12)
        self.assertEqual(specs[-1].a_key, "spread_trayport_r2")
        self.assertEqual(specs[-1].b_key, "cost_variable_r2")

    def test_disabled_overlay_yields_nothing(self) -> None:
        self.assertEqual(list(iter_pairs(HighlightConfig(enabled=False))), [])

    def test_opacity_follows_cost_base(self) -> None:
        opacities = {spec.cost: spec.opacity for spec in iter_pairs(HighlightConfig())}
        self.assertEqual(opacities, {"cost_all": 0.08, "cost_fixed": 0.1, "cost_variable": 0.12})


class MultiHighlightTests(unittest.TestCase):
    def test_each_pair_is_shaded_independently(self) -> None:
        config = HighlightConfig(x_key="x")
        result = highlight_routes(_rows(), x_scale=_identity, y_scale=_identity, config=config)
        self.assertEqual(len(result.pairs), 6)
        for pair in result.pairs:
            self.assertEqual(len(pair.regions), 1)
            expected = "above" if pair.pair_id.startswith("spread_acp") else "below"
            self.assertEqual(pair.regions[0].dominance, expected)
        fixed = result.get("spread_acp-cost_fixed-r1")
        assert fixed is not None
        self.assertEqual(fixed.regions[0].opacity, 0.1)
        self.assertEqual(fixed.regions[0].key, "spread_acp-cost_fixed-r1-above-0")
        self.assertEqual(len(result.regions), 6)

    def test_forward_fill_bridges_cost_gap(self) -> None:
        config = HighlightConfig(x_key="x")
        result = highlight_routes(_rows(), x_scale=_identity, y_scale=_identity, config=config)
        fixed = result.get("spread_acp-cost_fixed-r1")
        assert fixed is not None
        self.assertEqual(len(fixed.strips.above[0]), 4)

    def test_missing_scales_give_empty_pairs(self) -> None:
        result = highlight_routes(_rows(), x_scale=None, y_scale=_identity, config=HighlightConfig(x_key="x"))
        self.assertEqual(len(result.pairs), 6)
        self.assertEqual(result.regions, ())

    def test_unknown_route_columns_give_no_regions(self) -> None:
        config = HighlightConfig(x_key="x", routes=("r1", "r2"))
        result = highlight_routes(_rows("r1"), x_scale=_identity, y_scale=_identity, config=config)
        self.assertEqual(len(result.regions), 6)
        self.assertTrue(all(r.pair_id.endswith("-r1") for r in result.regions))

    def test_get_unknown_pair(self) -> None:
        result = highlight_routes(_rows(), x_scale=_identity, y_scale=_identity, config=HighlightConfig(x_key="x"))
        self.assertIsNone(result.get("nope"))


if __name__ == "__main__":
    unittest.main()
