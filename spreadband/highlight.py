from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import Any

from spreadband.config import ABOVE_COLOR, BELOW_COLOR
from spreadband.continuity import KeySelector, resolve
from spreadband.paths import build_path, polygon_points
from spreadband.scales import Projector, Scale, as_projector, project
from spreadband.segments import build_segments
from spreadband.series import ContinuityPolicy, Region, StripSet
from spreadband.strips import extract_strips


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairHighlight:
    pair_id: str
    strips: StripSet
    regions: tuple[Region, ...]

    @property
    def above_regions(self) -> tuple[Region, ...]:
        return tuple(r for r in self.regions if r.dominance == "above")

    @property
    def below_regions(self) -> tuple[Region, ...]:
        return tuple(r for r in self.regions if r.dominance == "below")


def empty_highlight(pair_id: str) -> PairHighlight:
    return PairHighlight(pair_id=pair_id, strips=StripSet(), regions=())


def highlight_pair(
    rows: Iterable[Mapping[str, Any]],
    a_key: KeySelector,
    b_key: KeySelector,
    *,
    x_scale: Scale | Projector | None,
    y_scale: Scale | Projector | None,
    pair_id: str = "pair",
    a_policy: ContinuityPolicy = "interpolate",
    b_policy: ContinuityPolicy = "forward_fill",
    x_key: str = "timestamp_uk",
    above_color: str = ABOVE_COLOR,
    below_color: str = BELOW_COLOR,
    opacity: float = 0.12,
    enabled: bool = True,
) -> PairHighlight:
    """Shade the band between series A and B.

    Regions where ``a > b`` get ``above_color``, everywhere else
    ``below_color``. A is resolved with ``a_policy`` and B with
    ``b_policy``; interpolation fractions are taken in x-scale space so the
    fill follows the drawn lines.

    Every degenerate input (disabled overlay, missing scale, fewer than two
    usable samples) returns an empty highlight instead of raising.
    """
    if not enabled:
        return empty_highlight(pair_id)
    sx = as_projector(x_scale)
    sy = as_projector(y_scale)
    if sx is None or sy is None:
        LOGGER.debug("pair %s: scale not available, skipping", pair_id)
        return empty_highlight(pair_id)

    rows = list(rows)
    if len(rows) < 2:
        return empty_highlight(pair_id)

    samples = resolve(rows, a_key, b_key, a_policy=a_policy, b_policy=b_policy, x_key=x_key, position=sx)
    if len(samples) < 2:
        LOGGER.debug("pair %s: %d resolved sample(s), need 2", pair_id, len(samples))
        return empty_highlight(pair_id)

    segments = build_segments([project(s, sx, sy) for s in samples])
    if not segments:
        return empty_highlight(pair_id)

    strips = extract_strips(segments)
    regions = regions_from_strips(
        strips,
        pair_id=pair_id,
        above_color=above_color,
        below_color=below_color,
        opacity=opacity,
    )
    return PairHighlight(pair_id=pair_id, strips=strips, regions=regions)


def regions_from_strips(
    strips: StripSet,
    *,
    pair_id: str,
    above_color: str = ABOVE_COLOR,
    below_color: str = BELOW_COLOR,
    opacity: float = 0.12,
) -> tuple[Region, ...]:
    out: list[Region] = []
    for dominance, fill in (("above", above_color), ("below", below_color)):
        for idx, strip in enumerate(strips.by_dominance(dominance)):
            path = build_path(strip)
            if not path:
                continue
            out.append(
                Region(
                    key=f"{pair_id}-{dominance}-{idx}",
                    pair_id=pair_id,
                    dominance=dominance,
                    path=path,
                    points=polygon_points(strip),
                    fill=fill,
                    opacity=opacity,
                )
            )
    return tuple(out)
