from __future__ import annotations

from collections.abc import Iterable
import xml.etree.ElementTree as ET

from spreadband.paths import format_number
from spreadband.series import Region


SVG_NS = "http://www.w3.org/2000/svg"


def render_svg(
    regions: Iterable[Region],
    *,
    width: int,
    height: int,
    background: str | None = None,
) -> str:
    """Serialize regions as an SVG document, one ``<g>`` per pair."""
    if width <= 0 or height <= 0:
        raise ValueError("svg width/height must be > 0")
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": str(width),
            "height": str(height),
            "viewBox": f"0 0 {width} {height}",
        },
    )
    if background is not None:
        ET.SubElement(root, "rect", {"x": "0", "y": "0", "width": str(width), "height": str(height), "fill": background})

    groups: dict[str, ET.Element] = {}
    for region in regions:
        group = groups.get(region.pair_id)
        if group is None:
            group = ET.SubElement(root, "g", {"data-pair-highlighter": region.pair_id})
            groups[region.pair_id] = group
        ET.SubElement(group, "path", region_attributes(region))
    return ET.tostring(root, encoding="unicode")


def region_attributes(region: Region) -> dict[str, str]:
    return {
        "data-region": region.key,
        "d": region.path,
        "fill": region.fill,
        "fill-opacity": format_number(region.opacity),
        "stroke": "none",
        "pointer-events": "none",
    }
