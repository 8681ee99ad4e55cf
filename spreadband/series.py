from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


Dominance = Literal["above", "below"]
ContinuityPolicy = Literal["interpolate", "forward_fill"]

CONTINUITY_POLICIES: tuple[ContinuityPolicy, ...] = ("interpolate", "forward_fill")


def dominance_of(above: bool) -> Dominance:
    return "above" if above else "below"


@dataclass(frozen=True)
class ResolvedSample:
    x: Any
    a: float
    b: float

    @property
    def above(self) -> bool:
        # Ties count as B dominant.
        return self.a > self.b


@dataclass(frozen=True)
class ProjectedSample:
    x: float
    y_a: float
    y_b: float
    above: bool


@dataclass(frozen=True)
class Segment:
    x0: float
    x1: float
    y_a0: float
    y_a1: float
    y_b0: float
    y_b1: float
    above0: bool
    above1: bool

    @property
    def sign_changes(self) -> bool:
        return self.above0 != self.above1


@dataclass(frozen=True)
class Crossing:
    x: float
    y: float
    t: float


@dataclass(frozen=True)
class StripPoint:
    x: float
    y_top: float
    y_bot: float


Strip = tuple[StripPoint, ...]


@dataclass(frozen=True)
class StripSet:
    above: tuple[Strip, ...] = ()
    below: tuple[Strip, ...] = ()

    def __len__(self) -> int:
        return len(self.above) + len(self.below)

    def by_dominance(self, dominance: Dominance) -> tuple[Strip, ...]:
        return self.above if dominance == "above" else self.below


@dataclass(frozen=True)
class Region:
    key: str
    pair_id: str
    dominance: Dominance
    path: str
    points: tuple[tuple[float, float], ...]
    fill: str
    opacity: float

    @property
    def x_range(self) -> tuple[float, float]:
        xs = [p[0] for p in self.points]
        return (min(xs), max(xs))
