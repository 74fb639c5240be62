"""Points, square search regions and the helpers the search walks them with."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from .validate import ensure_finite, ensure_positive


@dataclass(frozen=True)
class Point:
    """Image- or source-plane position in Einstein-radius units."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", ensure_finite(self.x, "point x"))
        object.__setattr__(self, "y", ensure_finite(self.y, "point y"))


class Corner(Enum):
    BOTTOM_LEFT = 0
    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_RIGHT = 3


@dataclass(frozen=True)
class Region:
    """Axis-aligned square given by its bottom-left corner and side length."""

    x: float
    y: float
    size: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", ensure_finite(self.x, "region x"))
        object.__setattr__(self, "y", ensure_finite(self.y, "region y"))
        object.__setattr__(self, "size", ensure_positive(self.size, "region size"))

    @property
    def area(self) -> float:
        return self.size * self.size

    @property
    def center(self) -> Point:
        half = self.size * 0.5
        return Point(self.x + half, self.y + half)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return tuple(region_corner(self, corner) for corner in Corner)  # type: ignore[return-value]


def point_in_region(point: Point, region: Region) -> bool:
    """Return ``True`` if ``point`` lies in ``region``, edges included."""

    return (
        region.x <= point.x <= region.x + region.size
        and region.y <= point.y <= region.y + region.size
    )


def interpolate_position(start: Point, end: Point, ratio: float) -> Point:
    """Return the point ``ratio`` of the way from ``start`` to ``end``."""

    return Point(
        start.x + (end.x - start.x) * ratio,
        start.y + (end.y - start.y) * ratio,
    )


def region_corner(region: Region, corner: Corner) -> Point:
    if corner is Corner.TOP_LEFT:
        return Point(region.x, region.y + region.size)
    if corner is Corner.TOP_RIGHT:
        return Point(region.x + region.size, region.y + region.size)
    if corner is Corner.BOTTOM_RIGHT:
        return Point(region.x + region.size, region.y)
    return Point(region.x, region.y)


def quadrants(region: Region) -> Tuple[Region, Region, Region, Region]:
    """Split ``region`` into bottom-left, bottom-right, top-left and top-right halves."""

    half = region.size / 2
    return (
        Region(region.x, region.y, half),
        Region(region.x + half, region.y, half),
        Region(region.x, region.y + half, half),
        Region(region.x + half, region.y + half, half),
    )


def boundary_points(region: Region, points_per_side: int) -> np.ndarray:
    """Sample the boundary of ``region`` as a closed walk from its bottom-left corner.

    The walk goes up the left edge, right along the top, down the right edge
    and left along the bottom. Each edge contributes ``points_per_side``
    samples starting at its first corner, so the result has shape
    ``(4 * points_per_side, 2)`` and every corner appears exactly once.
    """

    if points_per_side < 1:
        raise ValueError("points_per_side must be at least 1")

    step = region.size / points_per_side
    offsets = np.arange(points_per_side, dtype=float) * step
    left = region.x
    right = region.x + region.size
    bottom = region.y
    top = region.y + region.size

    xs = np.concatenate(
        [
            np.full(points_per_side, left),
            left + offsets,
            np.full(points_per_side, right),
            right - offsets,
        ]
    )
    ys = np.concatenate(
        [
            bottom + offsets,
            np.full(points_per_side, top),
            top - offsets,
            np.full(points_per_side, bottom),
        ]
    )
    return np.column_stack([xs, ys])


__all__ = [
    "Corner",
    "Point",
    "Region",
    "boundary_points",
    "interpolate_position",
    "point_in_region",
    "quadrants",
    "region_corner",
]
