from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from itertools import product
import logging
from typing import Any

from spreadband.config import HighlightConfig
from spreadband.highlight import PairHighlight, highlight_pair
from spreadband.scales import Projector, Scale
from spreadband.series import Region


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairSpec:
    route: str
    spread: str
    cost: str
    opacity: float

    @property
    def pair_id(self) -> str:
        return f"{self.spread}-{self.cost}-{self.route}"

    @property
    def a_key(self) -> str:
        return f"{self.spread}_{self.route}"

    @property
    def b_key(self) -> str:
        return f"{self.cost}_{self.route}"


@dataclass(frozen=True)
class MultiHighlight:
    pairs: tuple[PairHighlight, ...] = ()

    @property
    def regions(self) -> tuple[Region, ...]:
        return tuple(region for pair in self.pairs for region in pair.regions)

    def get(self, pair_id: str) -> PairHighlight | None:
        for pair in self.pairs:
            if pair.pair_id == pair_id:
                return pair
        return None


def iter_pairs(config: HighlightConfig, hidden: Mapping[str, bool] | None = None) -> Iterator[PairSpec]:
    """Yield every (route, spread, cost) combination whose two metrics are both shown."""
    if not config.enabled:
        return
    hidden = hidden or {}
    for route, spread, cost in product(config.routes, config.spread_bases, config.cost_bases):
        if hidden.get(spread) or hidden.get(cost):
            LOGGER.debug("skipping %s-%s-%s: metric hidden", spread, cost, route)
            continue
        yield PairSpec(route=route, spread=spread, cost=cost, opacity=config.opacity_for(cost))


def highlight_routes(
    rows: Sequence[Mapping[str, Any]],
    *,
    x_scale: Scale | Projector | None,
    y_scale: Scale | Projector | None,
    hidden: Mapping[str, bool] | None = None,
    config: HighlightConfig | None = None,
) -> MultiHighlight:
    cfg = config or HighlightConfig()
    pairs = tuple(
        highlight_pair(
            rows,
            spec.a_key,
            spec.b_key,
            x_scale=x_scale,
            y_scale=y_scale,
            pair_id=spec.pair_id,
            a_policy=cfg.a_policy,
            b_policy=cfg.b_policy,
            x_key=cfg.x_key,
            above_color=cfg.above_color,
            below_color=cfg.below_color,
            opacity=spec.opacity,
        )
        for spec in iter_pairs(cfg, hidden)
    )
    return MultiHighlight(pairs=pairs)
