"""Classify a source-plane polygon against the source disk."""

from __future__ import annotations

from enum import Enum

import numpy as np

from .geometry import Point
from .lens import Source


class Relation(Enum):
    """How a mapped region boundary sits relative to the source disk."""

    NO_OVERLAP = "no-overlap"
    INSIDE_SOURCE = "inside-source"
    ENCLOSES_SOURCE = "encloses-source"
    OVERLAP = "overlap"


def classify_disk(vertices: np.ndarray, center: Point, radius: float) -> Relation:
    """Return the relation between a closed polygon and the disk ``(center, radius)``.

    ``vertices`` is an ``(n, 2)`` array; the polygon closes from the last vertex
    back to the first. Points on the circle count as inside and a tangent edge
    counts as crossing it.
    """

    v = np.asarray(vertices, dtype=float)
    if v.ndim != 2 or v.shape[0] == 0 or v.shape[1] != 2:
        raise ValueError(f"vertices must be a non-empty (n, 2) array, got shape {v.shape}")

    offset_x = v[:, 0] - center.x
    offset_y = v[:, 1] - center.y

    inside = np.hypot(offset_x, offset_y) <= radius
    if inside.all():
        return Relation.INSIDE_SOURCE
    if inside.any():
        return Relation.OVERLAP

    # No vertex is in the disk: either an edge cuts the circle, or the polygon
    # surrounds the disk, or the two are disjoint.
    du = np.roll(v[:, 0], -1) - v[:, 0]
    dv = np.roll(v[:, 1], -1) - v[:, 1]

    with np.errstate(divide="ignore", invalid="ignore"):
        # vertical ray from the centre towards +y; 0 < p <= 1 counts shared vertices once
        p = -offset_x / du
        crossings = (0 < p) & (p <= 1) & (v[:, 1] + p * dv >= center.y)

        a = du * du + dv * dv
        b = 2 * (du * offset_x + dv * offset_y)
        c = offset_x * offset_x + offset_y * offset_y - radius * radius
        disc = b * b - 4 * a * c
        real = disc >= 0
        root = np.sqrt(np.where(real, disc, 0.0))
        p1 = (-b + root) / (2 * a)
        p2 = (-b - root) / (2 * a)
        hits = real & (((0 <= p1) & (p1 <= 1)) | ((0 <= p2) & (p2 <= 1)))

    if hits.any():
        return Relation.OVERLAP
    if int(np.count_nonzero(crossings)) % 2:
        return Relation.ENCLOSES_SOURCE
    return Relation.NO_OVERLAP


def classify_polygon(vertices: np.ndarray, source: Source) -> Relation:
    return classify_disk(vertices, source.origin, source.radius)


def _edge_on_right(start: np.ndarray, end: np.ndarray, point: Point) -> bool:
    # horizontal edges count as "right" when the point is on or below them
    with np.errstate(divide="ignore", invalid="ignore"):
        dx = (point.y - start[1]) * (end[0] - start[0]) / (end[1] - start[1]) + (start[0] - point.x)
    if dx == 0 or np.isnan(dx):
        return bool(point.y <= start[1])
    return bool(dx > 0)


def winding_number(point: Point, vertices: np.ndarray) -> int:
    """Signed count of upward minus downward edge crossings to the right of ``point``."""

    v = np.asarray(vertices, dtype=float)
    count = 0
    n = len(v)
    for i in range(n):
        start = v[i]
        end = v[(i + 1) % n]
        if not _edge_on_right(start, end, point):
            continue
        if start[1] <= point.y < end[1]:
            count += 1
        elif end[1] <= point.y < start[1]:
            count -= 1
    return count


def point_in_polygon(point: Point, vertices: np.ndarray) -> bool:
    return winding_number(point, vertices) != 0


__all__ = [
    "Relation",
    "classify_disk",
    "classify_polygon",
    "point_in_polygon",
    "winding_number",
]
