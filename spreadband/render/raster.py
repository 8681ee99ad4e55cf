from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from spreadband.series import Region


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def region_color(fill: str, opacity: float) -> RGBA:
    r, g, b, *rest = ImageColor.getrgb(fill)
    a = rest[0] if rest else 255
    out_a = int(max(0.0, min(1.0, opacity)) * a)
    return (r, g, b, out_a)


def fill_polygon(dst: np.ndarray, points: Iterable[tuple[float, float]], color: RGBA) -> None:
    pts = [(float(x), float(y)) for x, y in points]
    if len(pts) < 3:
        return
    height, width = dst.shape[0], dst.shape[1]
    mask_img = Image.new("L", (width, height), 0)
    ImageDraw.Draw(mask_img).polygon(pts, fill=255)
    mask = np.asarray(mask_img, dtype=np.uint8) > 0
    if not np.any(mask):
        return
    a = color[3] / 255.0
    inv = 1.0 - a
    covered = dst[mask]
    covered[:, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + covered[:, :3].astype(np.float32) * inv).astype(np.uint8)
    covered[:, 3] = 255
    dst[mask] = covered


def rasterize_regions(
    regions: Iterable[Region],
    *,
    width: int,
    height: int,
    background: RGBA = (255, 255, 255, 255),
) -> np.ndarray:
    """Alpha-composite every region polygon onto a fresh (H, W, 4) uint8 canvas."""
    if width <= 0 or height <= 0:
        raise ValueError("raster width/height must be > 0")
    canvas = new_canvas(width, height, color=background)
    for region in regions:
        fill_polygon(canvas, region.points, region_color(region.fill, region.opacity))
    return canvas


def save_png(canvas: np.ndarray, path: str | Path) -> Path:
    if canvas.dtype != np.uint8 or canvas.ndim != 3 or canvas.shape[2] != 4:
        raise ValueError("canvas must be a uint8 array of shape (H, W, 4)")
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(canvas)).save(out)
    return out
