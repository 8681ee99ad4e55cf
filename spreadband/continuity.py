from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import math
from typing import Any

import numpy as np

from spreadband.adapters.normalize import value_column
from spreadband.scales import Projector, apply_scale, x_position
from spreadband.series import CONTINUITY_POLICIES, ContinuityPolicy, ResolvedSample


KeySelector = str | Callable[[Mapping[str, Any]], Any]


def resolve(
    rows: Iterable[Mapping[str, Any]],
    a_key: KeySelector,
    b_key: KeySelector,
    *,
    a_policy: ContinuityPolicy = "interpolate",
    b_policy: ContinuityPolicy = "forward_fill",
    x_key: str = "timestamp_uk",
    position: Projector | None = None,
) -> list[ResolvedSample]:
    """Resolve both series at every row and keep the rows where both are known.

    ``position`` maps an x-key to the number used for interpolation
    fractions; it defaults to :func:`spreadband.scales.x_position`.
    Unresolvable rows are omitted rather than null-filled.
    """
    _check_policy(a_policy)
    _check_policy(b_policy)
    rows = list(rows)
    if not rows:
        return []

    xs = [row.get(x_key) for row in rows]
    positions: np.ndarray | None = None
    if "interpolate" in (a_policy, b_policy):
        to_position = position or x_position
        positions = np.asarray([apply_scale(to_position, x) for x in xs], dtype=np.float64)

    a_vals = resolve_series(value_column(rows, a_key), a_policy, positions)
    b_vals = resolve_series(value_column(rows, b_key), b_policy, positions)

    out: list[ResolvedSample] = []
    for x, a, b in zip(xs, a_vals.tolist(), b_vals.tolist()):
        if math.isnan(a) or math.isnan(b):
            continue
        out.append(ResolvedSample(x=x, a=a, b=b))
    return out


def resolve_series(
    values: np.ndarray,
    policy: ContinuityPolicy,
    positions: np.ndarray | None = None,
) -> np.ndarray:
    """Return ``values`` with gaps filled under ``policy``; NaN marks an unresolved index."""
    _check_policy(policy)
    if policy == "forward_fill":
        return _forward_fill(values)
    if positions is None or positions.shape != values.shape:
        raise ValueError("interpolation requires one position per value")
    return _interpolate(values, positions)


def _forward_fill(values: np.ndarray) -> np.ndarray:
    out = np.full(values.shape, np.nan, dtype=np.float64)
    last = math.nan
    for i, raw in enumerate(values.tolist()):
        if not math.isnan(raw):
            last = raw
        out[i] = last
    return out


def _interpolate(values: np.ndarray, positions: np.ndarray) -> np.ndarray:
    n = values.size
    valid = ~np.isnan(values)

    next_valid = np.full(n, -1, dtype=np.int64)
    nxt = -1
    for i in range(n - 1, -1, -1):
        if valid[i]:
            nxt = i
        next_valid[i] = nxt

    out = np.full(n, np.nan, dtype=np.float64)
    prev = -1
    for i in range(n):
        if valid[i]:
            out[i] = values[i]
            prev = i
            continue
        left = prev
        right = int(next_valid[i])
        if left == -1 or right == -1 or right == left:
            continue
        denom = positions[right] - positions[left]
        if not math.isfinite(denom) or denom == 0:
            continue
        t = (positions[i] - positions[left]) / denom
        if not math.isfinite(t):
            continue
        out[i] = values[left] + t * (values[right] - values[left])
    return out


def _check_policy(policy: str) -> None:
    if policy not in CONTINUITY_POLICIES:
        raise ValueError(f"unknown continuity policy: {policy!r}")
