"""Adaptive quadtree search for the image-plane regions that map onto the source.

Every node of the search is a square region of the image plane. A node is
first checked for lens singularities, then for a critical curve crossing it,
and only then is its boundary mapped into the source plane and classified
against the source disk. Nodes whose answer is ambiguous are split into four
quadrants until ``region.size <= field.resolution``, which always ends the
branch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .classify import Relation, classify_polygon
from .config import SearchOptions, get_search_options
from .geometry import Corner, Region, boundary_points, quadrants, region_corner
from .lens import LensField, Source
from .logging_utils import debug_log_call
from .stats import LevelStats, LevelStatsSnapshot
from .validate import ValidationError, ensure_depth_fits

logger = logging.getLogger(__name__)

SINGULARITY = "singularity"
CRITICAL_CURVE = "critical-curve"


@dataclass(frozen=True)
class SearchNode:
    region: Region
    check_singularity: bool = True
    check_critical_curve: bool = True
    level: int = 0


@dataclass(frozen=True)
class TerminalRegion:
    """A node that was classified and not split any further.

    ``hit`` marks regions the caller should treat as image area: those fully
    inside the source and every classified region at the resolution floor
    that is not disjoint from it.
    """

    region: Region
    relation: Relation
    level: int
    hit: bool


@dataclass(frozen=True)
class UnresolvedRegion:
    """A node at the resolution floor that still held a lens or a critical curve."""

    region: Region
    level: int
    reason: str


@dataclass
class SearchResult:
    region: Region
    source: Source
    stats: LevelStats
    terminals: List[TerminalRegion] = field(default_factory=list)
    unresolved: List[UnresolvedRegion] = field(default_factory=list)

    @property
    def hit_regions(self) -> List[TerminalRegion]:
        return [terminal for terminal in self.terminals if terminal.hit]

    @property
    def hit_area(self) -> float:
        return sum(terminal.region.area for terminal in self.terminals if terminal.hit)

    @property
    def eliminated_area(self) -> float:
        return sum(terminal.region.area for terminal in self.terminals if not terminal.hit)

    @property
    def recorded_area(self) -> float:
        return self.stats.total_area()

    @property
    def area_fraction(self) -> float:
        return self.recorded_area / self.region.area

    def snapshot(self) -> LevelStatsSnapshot:
        return self.stats.snapshot()

    def __repr__(self) -> str:
        return (
            f"SearchResult(region={self.region!r}, terminals={len(self.terminals)}, "
            f"hits={len(self.hit_regions)}, unresolved={len(self.unresolved)}, "
            f"hit_area={self.hit_area:.6g})"
        )


class _Search:
    def __init__(
        self,
        lens_field: LensField,
        source: Source,
        options: SearchOptions,
        stats: LevelStats,
        result: SearchResult,
    ) -> None:
        self.field = lens_field
        self.source = source
        self.options = options
        self.stats = stats
        self.result = result
        self.resolution = lens_field.resolution

    def run(self, root: SearchNode) -> None:
        # depth first; children are pushed in reverse so they pop in quadrant order
        stack = [root]
        while stack:
            node = stack.pop()
            stack.extend(reversed(self.visit(node)))

    def visit(self, node: SearchNode) -> Tuple[SearchNode, ...]:
        region = node.region
        at_floor = region.size <= self.resolution
        check_singularity = node.check_singularity
        check_critical_curve = node.check_critical_curve

        if check_singularity:
            if self.field.contains_lens(region):
                if at_floor:
                    return self._unresolved(node, SINGULARITY)
                return self.divide(node, True, check_critical_curve)
            check_singularity = False

        if check_critical_curve:
            if self.straddles_critical_curve(region):
                if at_floor:
                    return self._unresolved(node, CRITICAL_CURVE)
                return self.divide(node, check_singularity, True)
            check_critical_curve = False

        relation = self.classify(region, node.level)

        if relation is Relation.NO_OVERLAP:
            self._terminate(node, relation, hit=False)
            return ()
        if relation is Relation.INSIDE_SOURCE or at_floor:
            self._terminate(node, relation, hit=True)
            return ()
        return self.divide(node, check_singularity, check_critical_curve)

    def straddles_critical_curve(self, region: Region) -> bool:
        signs = {self.field.jacobian_sign_at(region_corner(region, corner)) for corner in Corner}
        return len(signs) > 1

    def points_per_side(self, region: Region) -> int:
        return max(self.options.min_points_per_side, int(region.size / self.resolution))

    def classify(self, region: Region, level: int) -> Relation:
        polygon = self.field.map_points(boundary_points(region, self.points_per_side(region)))
        self.stats.record_calls(level, self.options.cost_per_call)
        return classify_polygon(polygon, self.source)

    def divide(
        self, node: SearchNode, check_singularity: bool, check_critical_curve: bool
    ) -> Tuple[SearchNode, ...]:
        return tuple(
            SearchNode(child, check_singularity, check_critical_curve, node.level + 1)
            for child in quadrants(node.region)
        )

    def _terminate(self, node: SearchNode, relation: Relation, *, hit: bool) -> None:
        self.stats.record(node.level, node.region.area)
        self.result.terminals.append(TerminalRegion(node.region, relation, node.level, hit))

    def _unresolved(self, node: SearchNode, reason: str) -> Tuple[SearchNode, ...]:
        logger.debug("Unresolved %s region at level %d: %r", reason, node.level, node.region)
        self.result.unresolved.append(UnresolvedRegion(node.region, node.level, reason))
        return ()


@debug_log_call(logger)
def search(
    lens_field: LensField,
    source: Source,
    region: Region,
    *,
    stats: Optional[LevelStats] = None,
    options: Optional[SearchOptions] = None,
) -> SearchResult:
    """Classify every part of ``region`` against ``source`` under ``lens_field``.

    ``stats`` is reset before the search starts; pass one in to reuse its
    buffers across frames, or leave it out to get a fresh accumulator on the
    result. Evaluating the lens equation exactly on a lens is undefined; the
    singularity check keeps the search away from lens positions down to the
    resolution floor.
    """

    if not isinstance(lens_field, LensField):
        raise ValidationError(f"search needs a LensField, got {lens_field!r}")
    if not isinstance(source, Source):
        raise ValidationError(f"search needs a Source, got {source!r}")
    if not isinstance(region, Region):
        raise ValidationError(f"search needs a Region, got {region!r}")

    opts = options or get_search_options()
    if stats is None:
        stats = LevelStats(opts.level_capacity)
    deepest = ensure_depth_fits(region.size, lens_field.resolution, opts.root_level, stats.capacity)
    stats.reset()

    logger.info(
        "Searching region (%.4g, %.4g, %.4g) for source at (%.4g, %.4g) r=%.4g; "
        "%d lens(es), resolution=%.3g, max level=%d",
        region.x,
        region.y,
        region.size,
        source.origin.x,
        source.origin.y,
        source.radius,
        len(lens_field.lenses),
        lens_field.resolution,
        deepest,
    )

    result = SearchResult(region=region, source=source, stats=stats)
    _Search(lens_field, source, opts, stats, result).run(SearchNode(region, True, True, opts.root_level))

    logger.info(
        "Search finished: %d terminal region(s), %d hit(s), %d unresolved, hit area=%.6g",
        len(result.terminals),
        len(result.hit_regions),
        len(result.unresolved),
        result.hit_area,
    )
    return result


def estimate_magnification(result: SearchResult) -> float:
    """Image area found by ``result`` divided by the source disk area."""

    return result.hit_area / result.source.area


__all__ = [
    "CRITICAL_CURVE",
    "SINGULARITY",
    "SearchNode",
    "SearchResult",
    "TerminalRegion",
    "UnresolvedRegion",
    "estimate_magnification",
    "search",
]
