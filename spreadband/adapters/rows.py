from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

from spreadband.adapters.normalize import coerce_timestamp, timestamp_seconds
from spreadband.errors import BandDataError


COST_KINDS: dict[str, str] = {
    "all": "cost_all",
    "fixed": "cost_fixed",
    "variable": "cost_variable",
}

SPREAD_SOURCES: dict[str, str] = {
    "acp": "spread_acp",
    "trayport": "spread_trayport",
}

TIMESTAMP_FIELDS: tuple[str, ...] = ("timestamp_uk", "timestamp_utc")

_WEEKEND = {5, 6}


def combine_by_timestamp(
    route_data: Mapping[str, Mapping[str, Iterable[Mapping[str, Any]]]],
    *,
    routes: Sequence[str] | None = None,
) -> list[dict[str, Any]]:
    """Merge per-route cost and spread history points into one row per timestamp.

    Each output row carries ``timestamp_uk``, ``tenor`` and one
    ``"{metric}_{route}"`` field per reading seen at that timestamp. Rows are
    ordered by parsed timestamp; points of unknown kind are ignored.
    """
    selected = list(routes) if routes is not None else list(route_data.keys())
    by_ts: dict[str, dict[str, Any]] = {}
    parsed: dict[str, datetime] = {}

    def ensure(point: Mapping[str, Any]) -> dict[str, Any]:
        ts = point.get("timestampUk")
        if ts is None:
            raise BandDataError(f"history point without timestampUk: {dict(point)!r}")
        key = str(ts)
        row = by_ts.get(key)
        if row is None:
            when = coerce_timestamp(ts)
            if when is None:
                raise BandDataError(f"unparseable timestampUk: {ts!r}")
            parsed[key] = when
            row = {"timestamp_uk": key, "tenor": point.get("tenor")}
            by_ts[key] = row
        return row

    for route in selected:
        data = route_data.get(route)
        if data is None:
            continue
        if not isinstance(data, Mapping):
            raise BandDataError(f"route {route!r} must be an object with costs/spreads")
        for point in _points(route, data, "costs"):
            metric = COST_KINDS.get(str(point.get("costCalculationType", "")).strip().lower())
            row = ensure(point)
            if metric is not None:
                row[f"{metric}_{route}"] = point.get("avg")
        for point in _points(route, data, "spreads"):
            metric = SPREAD_SOURCES.get(str(point.get("source", "")).strip().lower())
            row = ensure(point)
            if metric is not None:
                row[f"{metric}_{route}"] = point.get("avg")

    return sorted(by_ts.values(), key=lambda row: timestamp_seconds(parsed[row["timestamp_uk"]]))


def _points(route: str, data: Mapping[str, Any], field: str) -> list[Mapping[str, Any]]:
    points = data.get(field, ())
    if isinstance(points, (str, bytes)) or not isinstance(points, Sequence):
        raise BandDataError(f"route {route!r}: {field} must be a list of points")
    for i, point in enumerate(points):
        if not isinstance(point, Mapping):
            raise BandDataError(f"route {route!r}: {field}[{i}] must be an object, got {type(point).__name__}")
    return list(points)


def dedupe_weekend_rows(
    rows: Iterable[Mapping[str, Any]],
    *,
    x_key: str = "timestamp_uk",
    ignore: Sequence[str] = TIMESTAMP_FIELDS,
) -> list[Mapping[str, Any]]:
    """Drop weekend rows that repeat an earlier weekend row of the same ISO week.

    Rows are compared on every field except ``x_key`` and ``ignore``. Weekday
    rows, and rows whose timestamp cannot be parsed, are always kept.
    """
    skipped = set(ignore) | {x_key}
    seen: dict[tuple[int, int], list[dict[str, Any]]] = {}
    out: list[Mapping[str, Any]] = []
    for row in rows:
        when = coerce_timestamp(row.get(x_key))
        if when is None or when.weekday() not in _WEEKEND:
            out.append(row)
            continue
        iso = when.isocalendar()
        week = (iso[0], iso[1])
        payload = {k: v for k, v in row.items() if k not in skipped}
        earlier = seen.setdefault(week, [])
        if payload in earlier:
            continue
        earlier.append(payload)
        out.append(row)
    return out
