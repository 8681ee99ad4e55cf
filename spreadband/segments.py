from __future__ import annotations

from collections.abc import Sequence
import logging
import math

from spreadband.series import Crossing, ProjectedSample, Segment


LOGGER = logging.getLogger(__name__)


def build_segments(projected: Sequence[ProjectedSample]) -> list[Segment]:
    """Pair up consecutive samples; segments with any non-finite coordinate are skipped."""
    out: list[Segment] = []
    dropped = 0
    for p0, p1 in zip(projected, projected[1:]):
        coords = (p0.x, p1.x, p0.y_a, p1.y_a, p0.y_b, p1.y_b)
        if not all(math.isfinite(c) for c in coords):
            dropped += 1
            continue
        out.append(
            Segment(
                x0=p0.x,
                x1=p1.x,
                y_a0=p0.y_a,
                y_a1=p1.y_a,
                y_b0=p0.y_b,
                y_b1=p1.y_b,
                above0=p0.above,
                above1=p1.above,
            )
        )
    if dropped:
        LOGGER.debug("dropped %d segment(s) with non-finite coordinates", dropped)
    return out


def solve_crossing(segment: Segment) -> Crossing | None:
    """Locate where A and B meet inside ``segment``, linearly in render space.

    Returns ``None`` when the lines are parallel or meet at or beyond an
    endpoint; only ``0 < t < 1`` counts as an interior crossing.
    """
    diff0 = segment.y_b0 - segment.y_a0
    diff1 = segment.y_b1 - segment.y_a1
    denom = diff0 - diff1
    if denom == 0:
        return None

    t = diff0 / denom
    if not (0.0 < t < 1.0):
        return None

    x = segment.x0 + t * (segment.x1 - segment.x0)
    y = segment.y_a0 + t * (segment.y_a1 - segment.y_a0)
    return Crossing(x=x, y=y, t=t)
