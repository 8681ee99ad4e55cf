from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
import math
import numbers
from typing import Any

import numpy as np

from spreadband.errors import BandDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def coerce_value(raw: Any) -> float | None:
    """Return ``raw`` as a finite float, or ``None`` when it is not a usable reading.

    Only real numbers count. Booleans, strings, ``None`` and non-finite floats
    are all treated as missing so callers never have to tell them apart.
    """
    if raw is None or isinstance(raw, (bool, np.bool_)):
        return None
    if isinstance(raw, Decimal):
        if not raw.is_finite():
            return None
        return float(raw)
    if not isinstance(raw, numbers.Real):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


def coerce_column(values: Any, *, label: str = "values") -> np.ndarray:
    if torch is not None and isinstance(values, torch.Tensor):
        tensor = values.detach()
        if tensor.ndim != 1:
            raise BandDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _finite_or_nan(tensor.to(torch.float64).numpy())

    if pd is not None and isinstance(values, pd.Series):
        return _coerce_ndarray(values.to_numpy(), label=label)

    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise BandDataError(f"{label} must be 1-D")
        return _coerce_ndarray(values, label=label)

    if isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(values, dtype=object), label=label)

    raise BandDataError(f"unsupported {label} input type: {type(values)!r}")


def rows_from_frame(frame: Any, *, x_key: str = "timestamp_uk") -> list[dict[str, Any]]:
    if pd is None:
        raise BandDataError("pandas is required to read rows from a DataFrame")
    if not isinstance(frame, pd.DataFrame):
        raise BandDataError("`frame` must be a pandas DataFrame")
    if x_key not in frame.columns:
        raise BandDataError(f"column not found: {x_key}")

    rows: list[dict[str, Any]] = []
    for record in frame.to_dict(orient="records"):
        row: dict[str, Any] = {}
        for key, raw in record.items():
            if key == x_key:
                row[str(key)] = raw.to_pydatetime() if isinstance(raw, pd.Timestamp) else raw
                continue
            row[str(key)] = None if _is_missing(raw) else raw
        rows.append(row)
    return rows


def rows_from_columns(
    x_values: Any,
    columns: Mapping[str, Any],
    *,
    x_key: str = "timestamp_uk",
) -> list[dict[str, Any]]:
    """Build rows from an x column plus named metric columns of equal length."""
    xs = x_values.tolist() if hasattr(x_values, "tolist") else list(x_values)
    coerced = {name: coerce_column(values, label=name) for name, values in columns.items()}
    for name, arr in coerced.items():
        if arr.size != len(xs):
            raise BandDataError(f"{name} length mismatch: {arr.size} != {len(xs)}")

    rows: list[dict[str, Any]] = []
    for i, x in enumerate(xs):
        row: dict[str, Any] = {x_key: x}
        for name, arr in coerced.items():
            value = float(arr[i])
            row[name] = None if math.isnan(value) else value
        rows.append(row)
    return rows


def metric_value(row: Mapping[str, Any], key: Any) -> Any:
    if callable(key):
        return key(row)
    return row.get(key)


def value_column(rows: Sequence[Mapping[str, Any]], key: Any) -> np.ndarray:
    out = np.empty(len(rows), dtype=np.float64)
    for i, row in enumerate(rows):
        value = coerce_value(metric_value(row, key))
        out[i] = np.nan if value is None else value
    return out


def _is_missing(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return pd is not None and raw is pd.NaT


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.ndim != 1:
        raise BandDataError(f"{label} must be 1-D")
    if arr.dtype.kind in {"i", "u", "f"}:
        return _finite_or_nan(arr.astype(np.float64, copy=False))

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        value = coerce_value(raw)
        out[i] = np.nan if value is None else value
    return out


def _finite_or_nan(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, dtype=np.float64, copy=True)
    out[~np.isfinite(out)] = np.nan
    return out


def coerce_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def timestamp_seconds(when: datetime) -> float:
    # Naive timestamps are read as UTC so mixed inputs still order consistently.
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.timestamp()
