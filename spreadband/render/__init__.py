from .raster import fill_polygon, new_canvas, rasterize_regions, region_color, save_png
from .svg import render_svg

__all__ = [
    "fill_polygon",
    "new_canvas",
    "rasterize_regions",
    "region_color",
    "render_svg",
    "save_png",
]
