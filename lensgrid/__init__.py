from .validate import ValidationError
from .geometry import (
    Corner,
    Point,
    Region,
    boundary_points,
    interpolate_position,
    point_in_region,
    quadrants,
    region_corner,
)
from .lens import JacobianComponent, Lens, LensField, Source, jacobian_contribution
from .classify import Relation, classify_disk, classify_polygon, point_in_polygon, winding_number
from .stats import LevelStats, LevelStatsSnapshot
from .trajectory import SourceTrajectory
from .config import (
    EventConfig,
    SearchOptions,
    event_from_dict,
    get_search_options,
    load_event_config,
    sample_event,
    set_search_options,
)
from .search import (
    SearchNode,
    SearchResult,
    TerminalRegion,
    UnresolvedRegion,
    estimate_magnification,
    search,
)
from .tikz import generate_tikz_code, generate_tikz_document

__all__ = [
    'ValidationError',
    'Corner',
    'Point',
    'Region',
    'boundary_points',
    'interpolate_position',
    'point_in_region',
    'quadrants',
    'region_corner',
    'JacobianComponent',
    'Lens',
    'LensField',
    'Source',
    'jacobian_contribution',
    'Relation',
    'classify_disk',
    'classify_polygon',
    'point_in_polygon',
    'winding_number',
    'LevelStats',
    'LevelStatsSnapshot',
    'SourceTrajectory',
    'EventConfig',
    'SearchOptions',
    'event_from_dict',
    'get_search_options',
    'load_event_config',
    'sample_event',
    'set_search_options',
    'SearchNode',
    'SearchResult',
    'TerminalRegion',
    'UnresolvedRegion',
    'estimate_magnification',
    'search',
    'generate_tikz_code',
    'generate_tikz_document',
]
