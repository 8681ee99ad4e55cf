from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
import logging
from pathlib import Path
import tomllib
from types import MappingProxyType
from typing import Any

from PIL import ImageColor

from spreadband.errors import BandConfigError
from spreadband.series import CONTINUITY_POLICIES


LOGGER = logging.getLogger(__name__)

SPREAD_BASES: tuple[str, ...] = ("spread_acp", "spread_trayport")
COST_BASES: tuple[str, ...] = ("cost_all", "cost_fixed", "cost_variable")
DEFAULT_OPACITY_BY_COST: dict[str, float] = {
    "cost_all": 0.08,
    "cost_fixed": 0.1,
    "cost_variable": 0.12,
}
ABOVE_COLOR = "#22c55e"
BELOW_COLOR = "#ef4444"


@dataclass(frozen=True)
class HighlightConfig:
    enabled: bool = True
    routes: tuple[str, ...] = ("r1",)
    spread_bases: tuple[str, ...] = SPREAD_BASES
    cost_bases: tuple[str, ...] = COST_BASES
    above_color: str = ABOVE_COLOR
    below_color: str = BELOW_COLOR
    opacity_by_cost: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_OPACITY_BY_COST), hash=False)
    default_opacity: float = 0.1
    a_policy: str = "interpolate"
    b_policy: str = "forward_fill"
    x_key: str = "timestamp_uk"

    def __post_init__(self) -> None:
        if not self.routes:
            raise BandConfigError("routes must not be empty")
        for name in ("routes", "spread_bases", "cost_bases"):
            values = getattr(self, name)
            if len(set(values)) != len(values):
                raise BandConfigError(f"{name} must not contain duplicates")
        for name in ("a_policy", "b_policy"):
            if getattr(self, name) not in CONTINUITY_POLICIES:
                raise BandConfigError(f"{name} must be one of {', '.join(CONTINUITY_POLICIES)}")
        for name in ("above_color", "below_color"):
            _check_color(name, getattr(self, name))
        _check_opacity("default_opacity", self.default_opacity)
        if not isinstance(self.opacity_by_cost, Mapping):
            raise BandConfigError("opacity_by_cost must be a mapping")
        for cost, opacity in self.opacity_by_cost.items():
            _check_opacity(f"opacity_by_cost.{cost}", opacity)
        # Frozen copy of the validated table.
        object.__setattr__(self, "opacity_by_cost", MappingProxyType(dict(self.opacity_by_cost)))
        if not self.x_key:
            raise BandConfigError("x_key must not be empty")

    def opacity_for(self, cost_base: str) -> float:
        return float(self.opacity_by_cost.get(cost_base, self.default_opacity))


def config_from_mapping(raw: Mapping[str, Any], base: HighlightConfig | None = None) -> HighlightConfig:
    cfg = base or HighlightConfig()
    known = {f.name for f in fields(HighlightConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise BandConfigError(f"unknown highlight config key(s): {', '.join(unknown)}")

    values: dict[str, Any] = {f.name: getattr(cfg, f.name) for f in fields(HighlightConfig)}
    for key, value in raw.items():
        if key in ("routes", "spread_bases", "cost_bases"):
            if isinstance(value, str) or not isinstance(value, (list, tuple)):
                raise BandConfigError(f"{key} must be a list of strings")
            values[key] = tuple(str(v) for v in value)
        elif key == "opacity_by_cost":
            if not isinstance(value, Mapping):
                raise BandConfigError("opacity_by_cost must be a table")
            values[key] = {**values[key], **{str(k): v for k, v in value.items()}}
        elif key == "enabled":
            if not isinstance(value, bool):
                raise BandConfigError("enabled must be a boolean")
            values[key] = value
        else:
            values[key] = value
    return HighlightConfig(**values)


def load_config(path: str | Path) -> HighlightConfig:
    path = Path(path)
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise BandConfigError(f"invalid TOML in {path}: {exc}") from exc
    table = raw.get("highlight", raw)
    if not isinstance(table, Mapping):
        raise BandConfigError("[highlight] must be a table")
    cfg = config_from_mapping(table)
    LOGGER.info("loaded highlight config from %s", path)
    return cfg


def _check_color(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise BandConfigError(f"{name} must be a color string")
    try:
        ImageColor.getrgb(value)
    except ValueError as exc:
        raise BandConfigError(f"{name} is not a valid color: {value!r}") from exc


def _check_opacity(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BandConfigError(f"{name} must be a number")
    if not 0.0 <= float(value) <= 1.0:
        raise BandConfigError(f"{name} must be within [0, 1]")
