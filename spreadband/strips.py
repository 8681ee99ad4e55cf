from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from functools import reduce
import logging

from spreadband.segments import solve_crossing
from spreadband.series import Segment, Strip, StripPoint, StripSet


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Run:
    """Fold accumulator: the open run plus every strip completed so far."""

    sign: bool | None = None
    points: Strip = ()
    above: tuple[Strip, ...] = ()
    below: tuple[Strip, ...] = ()
    discarded: int = 0


def extract_strips(segments: Iterable[Segment]) -> StripSet:
    """Group segments into same-dominance strips, splitting at crossings.

    A sign change with an interior crossing ends the current strip at the
    crossing and starts the next one there. A sign change without one emits
    the segment as a standalone two-point strip and breaks the run.
    """
    state = _flush(reduce(_step, segments, _Run()))
    if state.discarded:
        LOGGER.debug("discarded %d strip(s) shorter than two points", state.discarded)
    return StripSet(above=state.above, below=state.below)


def _step(state: _Run, segment: Segment) -> _Run:
    p0 = _boundary(segment.x0, segment.y_a0, segment.y_b0, segment.above0)
    p1 = _boundary(segment.x1, segment.y_a1, segment.y_b1, segment.above1)

    if not segment.sign_changes:
        if not state.points:
            state = _push(state, segment.above0, p0)
        return _push(state, segment.above0, p1)

    crossing = solve_crossing(segment)
    if crossing is None:
        state = _flush(state)
        state = _push(state, segment.above0, p0)
        state = _push(state, segment.above0, p1)
        return _flush(state)

    # A == B at the crossing, so the strip pinches to a single y there.
    pinch = StripPoint(x=crossing.x, y_top=crossing.y, y_bot=crossing.y)
    if not state.points:
        state = _push(state, segment.above0, p0)
    state = _push(state, segment.above0, pinch)
    state = _flush(state)
    state = _push(state, segment.above1, pinch)
    return _push(state, segment.above1, p1)


def _boundary(x: float, y_a: float, y_b: float, above: bool) -> StripPoint:
    if above:
        return StripPoint(x=x, y_top=y_a, y_bot=y_b)
    return StripPoint(x=x, y_top=y_b, y_bot=y_a)


def _push(state: _Run, above: bool, point: StripPoint) -> _Run:
    if state.sign is None:
        return replace(state, sign=above, points=(point,))
    if state.sign != above:
        return replace(_flush(state), sign=above, points=(point,))
    return replace(state, points=state.points + (point,))


def _flush(state: _Run) -> _Run:
    if state.sign is None or len(state.points) < 2:
        discarded = state.discarded + (1 if state.points else 0)
        return replace(state, sign=None, points=(), discarded=discarded)
    if state.sign:
        return replace(state, sign=None, points=(), above=state.above + (state.points,))
    return replace(state, sign=None, points=(), below=state.below + (state.points,))
