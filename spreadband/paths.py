from __future__ import annotations

from collections.abc import Sequence
import math

from spreadband.series import StripPoint


def build_path(strip: Sequence[StripPoint]) -> str:
    """SVG path data for a strip: top edge left to right, bottom edge back, closed."""
    if len(strip) < 2:
        return ""
    top = " ".join(f"{'M' if i == 0 else 'L'} {format_number(p.x)} {format_number(p.y_top)}" for i, p in enumerate(strip))
    bottom = " ".join(f"L {format_number(p.x)} {format_number(p.y_bot)}" for p in reversed(strip))
    return f"{top} {bottom} Z"


def polygon_points(strip: Sequence[StripPoint]) -> tuple[tuple[float, float], ...]:
    if len(strip) < 2:
        return ()
    top = [(p.x, p.y_top) for p in strip]
    bottom = [(p.x, p.y_bot) for p in reversed(strip)]
    return tuple(top + bottom)


def format_number(value: float) -> str:
    # Shortest round-trip form, with integral values written without ".0".
    value = float(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)
