import math

import numpy as np
import pytest

from maze_levelgenerator.geometry import Box, BoxIntersection, Quaternion, Transform, vec3


def _box(position=(0, 0, 0), degrees=(0, 0, 0), scale=(2, 2, 2)):
    return Box(vec3(*position), Quaternion.from_degrees(*degrees), vec3(*scale))


def test_box_has_eight_vertices_around_position():
    box = _box(position=(5, 0, 0), scale=(2, 4, 6))
    assert box.vertices.shape == (8, 3)
    assert np.allclose(box.vertices.mean(axis=0), (5, 0, 0))
    lo, hi = box.bounds
    assert np.allclose(lo, (4, -2, -3))
    assert np.allclose(hi, (6, 2, 3))


def test_box_axes_follow_rotation():
    box = _box(degrees=(0, 90, 0))
    assert np.allclose(box.right, (0, 0, -1))
    assert np.allclose(box.up, (0, 1, 0))
    assert np.allclose(box.forward, (-1, 0, 0))


def test_rotated_bounds():
    lo, hi = _box(degrees=(0, 45, 0)).bounds
    assert hi[0] == pytest.approx(math.sqrt(2))
    assert lo[2] == pytest.approx(-math.sqrt(2))


def test_from_transform_matches_constructor():
    t = Transform(vec3(1, 2, 3), Quaternion.from_degrees(0, 30, 0), vec3(4, 5, 6))
    assert np.allclose(Box.from_transform(t).vertices,
                       Box(t.position, t.rotation, t.scale).vertices)
    assert np.allclose(Box.from_matrix(t.model).vertices, Box.from_transform(t).vertices)


def test_separated_when_gap_exceeds_half_extents():
    assert not Box.intersects(_box(), _box(position=(2.5, 0, 0)))


def test_touching_boxes_intersect():
    assert Box.intersects(_box(), _box(position=(2, 0, 0)))


def test_overlapping_boxes_intersect():
    assert Box.intersects(_box(), _box(position=(1.5, 0.5, -0.5)))


def test_intersection_is_symmetric():
    cases = [
        (_box(), _box(position=(2.5, 0, 0))),
        (_box(), _box(position=(1.0, 1.0, 1.0), degrees=(0, 30, 0))),
        (_box(scale=(10, 1, 1)), _box(position=(0, 0, 3), degrees=(0, 90, 0), scale=(10, 1, 1))),
        (_box(degrees=(20, 40, 0)), _box(position=(2.3, 0, 0), degrees=(0, 45, 10))),
        (_box(scale=(1, 1, 8)), _box(position=(3, 0, 3), degrees=(0, 45, 0), scale=(1, 1, 8))),
    ]
    for a, b in cases:
        assert Box.intersects(a, b) == Box.intersects(b, a)


def test_rigid_rotation_does_not_change_result():
    turn = Quaternion.from_degrees(15, 35, -5)
    cases = [
        ((0, 0, 0), (0, 0, 0), (1.5, 0, 0), (0, 0, 0), True),
        ((0, 0, 0), (0, 0, 0), (3.0, 0, 0), (0, 0, 0), False),
        ((0, 0, 0), (0, 0, 0), (2.3, 0, 0), (0, 45, 0), True),
        ((0, 0, 0), (0, 0, 0), (2.6, 0, 0), (0, 45, 0), False),
    ]
    for pa, da, pb, db, expected in cases:
        a = _box(position=pa, degrees=da)
        b = _box(position=pb, degrees=db)
        assert Box.intersects(a, b) is expected

        ra = Box(turn.rotate_vector(vec3(*pa)), turn * Quaternion.from_degrees(*da), vec3(2, 2, 2))
        rb = Box(turn.rotate_vector(vec3(*pb)), turn * Quaternion.from_degrees(*db), vec3(2, 2, 2))
        assert Box.intersects(ra, rb) is expected


def test_rotated_box_corner_reaches_further():
    # A 45 degree box reaches sqrt(2) along X instead of 1
    assert Box.intersects(_box(), _box(position=(2.3, 0, 0), degrees=(0, 45, 0)))
    assert not Box.intersects(_box(), _box(position=(2.5, 0, 0), degrees=(0, 45, 0)))


def test_parallel_edges_do_not_separate():
    # Identical orientation gives zero cross products for 3 of the 9 edge axes
    a = _box(degrees=(0, 30, 0))
    b = _box(position=(0.5, 0.5, 0.5), degrees=(0, 30, 0))
    assert Box.intersects(a, b)


def test_minimum_translation_axis_and_distance():
    info = BoxIntersection()
    assert Box.intersects(_box(), _box(position=(1.5, 0, 0)), info)
    assert info.distance == pytest.approx(0.5)
    assert np.allclose(info.axis, (1, 0, 0))
    assert not info.a_in_b
    assert not info.b_in_a


def test_containment_flags():
    info = _box(scale=(4, 4, 4)).intersection(_box(position=(0.5, 0, 0), scale=(1, 1, 1)))
    assert info is not None
    assert info.b_in_a
    assert not info.a_in_b


def test_intersection_returns_none_when_separated():
    assert _box().intersection(_box(position=(0, 5, 0))) is None
