from spreadband.config import HighlightConfig, config_from_mapping, load_config
from spreadband.continuity import resolve, resolve_series
from spreadband.errors import BandConfigError, BandDataError
from spreadband.highlight import PairHighlight, highlight_pair
from spreadband.multi import MultiHighlight, PairSpec, highlight_routes, iter_pairs
from spreadband.paths import build_path, polygon_points
from spreadband.scales import LinearScale, Scale, TimeScale, as_projector, fit_scales, project, x_position
from spreadband.segments import build_segments, solve_crossing
from spreadband.series import Crossing, ProjectedSample, Region, ResolvedSample, Segment, StripPoint, StripSet
from spreadband.strips import extract_strips

__all__ = [
    "BandConfigError",
    "BandDataError",
    "Crossing",
    "HighlightConfig",
    "LinearScale",
    "MultiHighlight",
    "PairHighlight",
    "PairSpec",
    "ProjectedSample",
    "Region",
    "ResolvedSample",
    "Scale",
    "Segment",
    "StripPoint",
    "StripSet",
    "TimeScale",
    "as_projector",
    "build_path",
    "build_segments",
    "config_from_mapping",
    "extract_strips",
    "fit_scales",
    "highlight_pair",
    "highlight_routes",
    "iter_pairs",
    "load_config",
    "polygon_points",
    "project",
    "resolve",
    "resolve_series",
    "solve_crossing",
    "x_position",
]
