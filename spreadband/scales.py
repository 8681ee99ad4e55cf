from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
import math
import numbers
from typing import Any, Protocol, runtime_checkable

import numpy as np

from spreadband.adapters.normalize import coerce_timestamp, timestamp_seconds, value_column
from spreadband.series import ProjectedSample, ResolvedSample


Projector = Callable[[Any], float]


@runtime_checkable
class Scale(Protocol):
    def project(self, value: Any) -> float:
        ...


def as_projector(scale: Scale | Projector | None) -> Projector | None:
    """Return the callable behind ``scale``, or ``None`` when no scale is available yet."""
    if scale is None:
        return None
    project = getattr(scale, "project", None)
    if callable(project):
        return project
    if callable(scale):
        return scale
    return None


def x_position(value: Any) -> float:
    """Numeric projection of an x-key: numbers as-is, datetimes as POSIX seconds."""
    if isinstance(value, (bool, np.bool_)):
        return math.nan
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, datetime):
        return timestamp_seconds(value)
    if isinstance(value, date):
        return float(value.toordinal())
    if isinstance(value, str):
        when = coerce_timestamp(value)
        if when is not None:
            return timestamp_seconds(when)
    return math.nan


def project(sample: ResolvedSample, x_scale: Projector, y_scale: Projector) -> ProjectedSample:
    return ProjectedSample(
        x=apply_scale(x_scale, sample.x),
        y_a=apply_scale(y_scale, sample.a),
        y_b=apply_scale(y_scale, sample.b),
        above=sample.above,
    )


def apply_scale(fn: Projector, value: Any) -> float:
    # Scale edge cases become non-finite coordinates; the segment builder drops them.
    try:
        out = fn(value)
    except (TypeError, ValueError, LookupError, ArithmeticError):
        return math.nan
    if isinstance(out, (bool, np.bool_)) or not isinstance(out, numbers.Real):
        return math.nan
    return float(out)


@dataclass(frozen=True)
class DataLimits:
    vmin: float
    vmax: float


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __post_init__(self) -> None:
        d0, d1 = self.domain
        if not (math.isfinite(d0) and math.isfinite(d1)) or d0 == d1:
            raise ValueError("scale domain must be two distinct finite values")
        r0, r1 = self.range
        if not (math.isfinite(r0) and math.isfinite(r1)):
            raise ValueError("scale range must be finite")

    def project(self, value: Any) -> float:
        v = self._domain_value(value)
        d0, d1 = self.domain
        r0, r1 = self.range
        return r0 + (v - d0) * (r1 - r0) / (d1 - d0)

    def __call__(self, value: Any) -> float:
        return self.project(value)

    def _domain_value(self, value: Any) -> float:
        return float(value)


@dataclass(frozen=True)
class TimeScale(LinearScale):
    """Linear scale over :func:`x_position`, for timestamp-like x-keys."""

    def _domain_value(self, value: Any) -> float:
        return x_position(value)


def compute_limits(values: Iterable[float] | np.ndarray, buffer_ratio: float = 0.05) -> DataLimits | None:
    arr = np.asarray(list(values) if not isinstance(values, np.ndarray) else values, dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    vmin = float(np.min(arr))
    vmax = float(np.max(arr))

    if vmin == vmax:
        delta = max(1.0, abs(vmin) * buffer_ratio)
        return DataLimits(vmin=vmin - delta, vmax=vmax + delta)

    pad = (vmax - vmin) * buffer_ratio
    return DataLimits(vmin=vmin - pad, vmax=vmax + pad)


def fit_scales(
    rows: Sequence[Mapping[str, Any]],
    keys: Iterable[str],
    *,
    width: int,
    height: int,
    margin: int = 24,
    x_key: str = "timestamp_uk",
) -> tuple[TimeScale, LinearScale] | None:
    """Fit an x scale to the row timestamps and a y scale to every listed metric.

    Render-space y grows downwards, so larger values map closer to the top
    margin. Returns ``None`` when the rows carry no usable x or y values.
    """
    if width <= 2 * margin or height <= 2 * margin:
        raise ValueError("plot width/height must exceed twice the margin")

    xs = [x_position(row.get(x_key)) for row in rows]
    finite_xs = [x for x in xs if math.isfinite(x)]
    if not finite_xs:
        return None
    x0, x1 = min(finite_xs), max(finite_xs)
    if x0 == x1:
        x0 -= 1.0
        x1 += 1.0

    columns = [value_column(rows, key) for key in keys]
    if not columns:
        return None
    y_limits = compute_limits(np.concatenate(columns))
    if y_limits is None:
        return None

    x_scale = TimeScale(domain=(x0, x1), range=(float(margin), float(width - margin)))
    y_scale = LinearScale(domain=(y_limits.vmin, y_limits.vmax), range=(float(height - margin), float(margin)))
    return x_scale, y_scale
