from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path
import sys
from typing import Any

from spreadband.adapters import combine_by_timestamp, dedupe_weekend_rows
from spreadband.config import HighlightConfig, load_config
from spreadband.errors import BandConfigError, BandDataError
from spreadband.multi import highlight_routes, iter_pairs
from spreadband.render import rasterize_regions, render_svg, save_png
from spreadband.scales import fit_scales


LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spreadband")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render spread/cost highlight regions to SVG or PNG.")
    render.add_argument("input", type=Path, help="JSON route data ({route: {costs, spreads}}) or a list of rows.")
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--format", choices=["svg", "png"], default=None, help="Default: from --out suffix, else svg.")
    render.add_argument("--config", type=Path, default=None, help="TOML file with a [highlight] table.")
    render.add_argument("--width", type=int, default=960)
    render.add_argument("--height", type=int, default=400)
    render.add_argument("--margin", type=int, default=24)
    render.add_argument("--route", action="append", default=None, help="Route to highlight (repeatable).")
    render.add_argument("--hide", action="append", default=[], help="Metric base to hide, e.g. cost_fixed (repeatable).")
    render.add_argument("--no-dedupe", action="store_true", help="Keep duplicate weekend rows.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "render":
            return _cmd_render(args)
    except (BandConfigError, BandDataError, ValueError, OSError) as exc:
        print(f"spreadband: {exc}", file=sys.stderr)
        return 2
    parser.error(f"unknown command: {args.command}")
    return 2


def _cmd_render(args: argparse.Namespace) -> int:
    config = load_config(args.config) if args.config is not None else HighlightConfig()
    if args.route:
        config = replace(config, routes=tuple(args.route))
    hidden = {key: True for key in args.hide}

    rows = _load_rows(args.input, config)
    if not args.no_dedupe:
        before = len(rows)
        rows = dedupe_weekend_rows(rows, x_key=config.x_key)
        LOGGER.info("weekend dedupe kept %d of %d row(s)", len(rows), before)

    keys = sorted({key for spec in iter_pairs(config, hidden) for key in (spec.a_key, spec.b_key)})
    scales = fit_scales(rows, keys, width=args.width, height=args.height, margin=args.margin, x_key=config.x_key)
    x_scale, y_scale = scales if scales is not None else (None, None)

    result = highlight_routes(rows, x_scale=x_scale, y_scale=y_scale, hidden=hidden, config=config)
    regions = result.regions
    LOGGER.info("%d pair(s), %d region(s)", len(result.pairs), len(regions))

    fmt = args.format or ("png" if args.out.suffix.lower() == ".png" else "svg")
    if fmt == "png":
        save_png(rasterize_regions(regions, width=args.width, height=args.height), args.out)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(render_svg(regions, width=args.width, height=args.height), encoding="utf-8")
    print(f"wrote {len(regions)} region(s) to {args.out}")
    return 0


def _load_rows(path: Path, config: HighlightConfig) -> list[dict[str, Any]]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise BandDataError(f"invalid JSON in {path}: {exc}") from exc
    if isinstance(raw, dict):
        return combine_by_timestamp(raw, routes=config.routes)
    if isinstance(raw, list) and all(isinstance(row, dict) for row in raw):
        return raw
    raise BandDataError("input must be a route-data object or a list of row objects")


if __name__ == "__main__":
    raise SystemExit(main())
