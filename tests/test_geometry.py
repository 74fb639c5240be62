import math

import numpy as np
import pytest

from lensgrid import (
    Corner,
    Point,
    Region,
    ValidationError,
    boundary_points,
    interpolate_position,
    point_in_region,
    quadrants,
    region_corner,
)


@pytest.mark.parametrize(
    'point, expected',
    [
        (Point(0.5, 0.5), True),
        (Point(0.0, 0.0), True),
        (Point(1.0, 1.0), True),
        (Point(0.0, 1.0), True),
        (Point(1.0, 0.3), True),
        (Point(1.0000001, 0.5), False),
        (Point(0.5, -1e-12), False),
    ],
)
def test_point_in_region_includes_all_edges(point, expected):
    assert point_in_region(point, Region(0.0, 0.0, 1.0)) is expected


def test_interpolate_position_endpoints_and_midpoint():
    start = Point(-1.0, 2.0)
    end = Point(3.0, -2.0)

    assert interpolate_position(start, end, 0.0) == start
    assert interpolate_position(start, end, 1.0) == end
    assert interpolate_position(start, end, 0.5) == Point(1.0, 0.0)


def test_region_corners():
    region = Region(-1.0, -2.0, 4.0)

    assert region_corner(region, Corner.BOTTOM_LEFT) == Point(-1.0, -2.0)
    assert region_corner(region, Corner.TOP_LEFT) == Point(-1.0, 2.0)
    assert region_corner(region, Corner.TOP_RIGHT) == Point(3.0, 2.0)
    assert region_corner(region, Corner.BOTTOM_RIGHT) == Point(3.0, -2.0)
    assert region.corners()[2] == Point(3.0, 2.0)


@pytest.mark.parametrize('region', [Region(-1.0, -2.0, 4.0), Region(0.25, 0.5, 0.75), Region(5.0, -3.25, 0.125)])
def test_quadrants_tile_parent_exactly(region):
    children = quadrants(region)

    assert len(children) == 4
    assert sum(child.area for child in children) == region.area
    assert all(child.size == region.size / 2 for child in children)

    bl, br, tl, tr = children
    assert region_corner(bl, Corner.BOTTOM_LEFT) == region_corner(region, Corner.BOTTOM_LEFT)
    assert region_corner(br, Corner.BOTTOM_RIGHT) == region_corner(region, Corner.BOTTOM_RIGHT)
    assert region_corner(tl, Corner.TOP_LEFT) == region_corner(region, Corner.TOP_LEFT)
    assert region_corner(tr, Corner.TOP_RIGHT) == region_corner(region, Corner.TOP_RIGHT)
    # shared edges line up pairwise
    assert region_corner(bl, Corner.BOTTOM_RIGHT) == region_corner(br, Corner.BOTTOM_LEFT)
    assert region_corner(bl, Corner.TOP_LEFT) == region_corner(tl, Corner.BOTTOM_LEFT)
    assert region_corner(bl, Corner.TOP_RIGHT) == region_corner(tr, Corner.BOTTOM_LEFT)
    assert region_corner(tl, Corner.TOP_RIGHT) == region_corner(tr, Corner.TOP_LEFT)


def test_boundary_points_walk_order():
    region = Region(0.0, 0.0, 2.0)
    points = boundary_points(region, 4)

    assert points.shape == (16, 2)
    assert tuple(points[0]) == (0.0, 0.0)
    assert tuple(points[4]) == (0.0, 2.0)
    assert tuple(points[8]) == (2.0, 2.0)
    assert tuple(points[12]) == (2.0, 0.0)
    # left edge climbs, top edge moves right
    assert np.all(np.diff(points[:4, 1]) > 0)
    assert np.all(np.diff(points[4:8, 0]) > 0)
    assert np.all(np.diff(points[8:12, 1]) < 0)
    assert np.all(np.diff(points[12:, 0]) < 0)


def test_boundary_points_stay_on_boundary():
    region = Region(-0.5, 1.5, 0.75)
    points = boundary_points(region, 10)

    on_vertical = np.isclose(points[:, 0], region.x) | np.isclose(points[:, 0], region.x + region.size)
    on_horizontal = np.isclose(points[:, 1], region.y) | np.isclose(points[:, 1], region.y + region.size)
    assert np.all(on_vertical | on_horizontal)
    assert len({tuple(p) for p in points}) == 40


def test_boundary_points_rejects_zero_samples():
    with pytest.raises(ValueError):
        boundary_points(Region(0.0, 0.0, 1.0), 0)


@pytest.mark.parametrize('size', [0.0, -1.0, math.nan, math.inf])
def test_region_rejects_bad_size(size):
    with pytest.raises(ValidationError) as exc:
        Region(0.0, 0.0, size)

    assert 'region size' in str(exc.value)


def test_point_rejects_non_finite_coordinates():
    with pytest.raises(ValidationError):
        Point(math.nan, 0.0)


def test_region_center_and_area():
    region = Region(-1.0, -2.0, 4.0)

    assert region.center == Point(1.0, 0.0)
    assert region.area == 16.0
