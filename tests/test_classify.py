import numpy as np
import pytest

from lensgrid import (
    Point,
    Region,
    Relation,
    Source,
    boundary_points,
    classify_disk,
    classify_polygon,
    point_in_polygon,
    winding_number,
)


def _square(x, y, size, per_side=10):
    return boundary_points(Region(x, y, size), per_side)


def _l_shape():
    return np.array(
        [
            [0.0, 0.0],
            [3.0, 0.0],
            [3.0, 1.0],
            [1.0, 1.0],
            [1.0, 3.0],
            [0.0, 3.0],
        ]
    )


def test_relation_is_closed_set_of_four():
    assert {relation.name for relation in Relation} == {
        'NO_OVERLAP',
        'INSIDE_SOURCE',
        'ENCLOSES_SOURCE',
        'OVERLAP',
    }


def test_disjoint_polygon_is_no_overlap():
    source = Source(Point(0.0, 0.0), 0.5)

    assert classify_polygon(_square(2.0, 2.0, 1.0), source) is Relation.NO_OVERLAP


def test_polygon_inside_source():
    source = Source(Point(0.0, 0.0), 1.0)

    assert classify_polygon(_square(-0.2, -0.2, 0.4), source) is Relation.INSIDE_SOURCE


def test_polygon_enclosing_source():
    source = Source(Point(0.05, 0.03), 0.1)

    assert classify_polygon(_square(-1.0, -1.0, 2.0), source) is Relation.ENCLOSES_SOURCE


def test_concave_polygon_around_source_in_notch_is_no_overlap():
    source = Source(Point(2.0, 2.0), 0.3)

    assert classify_polygon(_l_shape(), source) is Relation.NO_OVERLAP


def test_concave_polygon_enclosing_source_in_arm():
    source = Source(Point(0.5, 2.2), 0.2)

    assert classify_polygon(_l_shape(), source) is Relation.ENCLOSES_SOURCE


def test_edge_through_source_with_all_vertices_outside_is_overlap():
    triangle = np.array([[-1.0, -0.05], [1.0, -0.05], [0.0, -2.0]])
    source = Source(Point(0.0, 0.0), 0.1)

    assert classify_polygon(triangle, source) is Relation.OVERLAP


def test_tangent_edge_counts_as_overlap():
    triangle = np.array([[-2.0, 0.5], [2.0, 0.5], [0.0, 3.0]])

    assert classify_disk(triangle, Point(0.0, 0.0), 0.5) is Relation.OVERLAP


def test_vertices_on_circle_count_as_inside():
    diamond = np.array([[1.0, 0.0], [0.0, 1.0], [-1.0, 0.0], [0.0, -1.0]])

    assert classify_disk(diamond, Point(0.0, 0.0), 1.0) is Relation.INSIDE_SOURCE


def test_alternating_vertices_are_overlap():
    star = np.array(
        [
            [0.5 * np.cos(t), 0.5 * np.sin(t)] if i % 2 == 0 else [2.0 * np.cos(t), 2.0 * np.sin(t)]
            for i, t in enumerate(np.linspace(0.0, 2 * np.pi, 12, endpoint=False))
        ]
    )

    assert classify_disk(star, Point(0.0, 0.0), 1.0) is Relation.OVERLAP


def test_single_vertex_inside_is_overlap_even_if_polygon_encloses_center():
    square = _square(-1.0, -1.0, 2.0, per_side=4)
    # the bottom-left corner sits inside the disk, everything else outside
    assert classify_disk(square, Point(-0.9, -0.9), 0.2) is Relation.OVERLAP


@pytest.mark.parametrize(
    'center, expected',
    [
        (Point(0.5, 0.5), Relation.ENCLOSES_SOURCE),
        (Point(0.5, 2.5), Relation.ENCLOSES_SOURCE),
        (Point(2.5, 0.5), Relation.ENCLOSES_SOURCE),
        (Point(2.0, 2.0), Relation.NO_OVERLAP),
        (Point(-1.0, 0.5), Relation.NO_OVERLAP),
    ],
)
def test_zero_radius_reduces_to_point_in_polygon(center, expected):
    assert classify_disk(_l_shape(), center, 0.0) is expected


def test_zero_radius_agrees_with_winding_rule():
    polygon = _l_shape()
    rng = np.random.default_rng(2024)
    for x, y in rng.uniform(-0.5, 3.5, size=(300, 2)):
        center = Point(x, y)
        encloses = classify_disk(polygon, center, 0.0) is Relation.ENCLOSES_SOURCE
        assert encloses == point_in_polygon(center, polygon)


def test_repeated_vertices_do_not_break_classification():
    square = np.array([[0.0, 0.0], [0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0]])

    assert classify_disk(square, Point(0.5, 0.5), 0.1) is Relation.ENCLOSES_SOURCE
    assert classify_disk(square, Point(5.0, 5.0), 0.1) is Relation.NO_OVERLAP


def test_winding_number_sign_follows_orientation():
    clockwise = _square(0.0, 0.0, 1.0, per_side=3)
    counter_clockwise = clockwise[::-1]
    inside = Point(0.4, 0.6)

    assert winding_number(inside, counter_clockwise) == 1
    assert winding_number(inside, clockwise) == -1
    assert winding_number(Point(2.0, 0.5), clockwise) == 0


def test_classify_rejects_bad_vertex_arrays():
    with pytest.raises(ValueError):
        classify_disk(np.zeros((0, 2)), Point(0.0, 0.0), 1.0)
    with pytest.raises(ValueError):
        classify_disk(np.zeros((4, 3)), Point(0.0, 0.0), 1.0)
