import math

import numpy as np
import pytest

from maze_levelgenerator.geometry import (
    FORWARD, RIGHT, UP, Quaternion, bounds, even, even_range, normalize, round_half_up, vec3,
)


def test_quarter_turn_about_y_maps_forward_to_negative_x():
    q = Quaternion.from_degrees(0, 90, 0)
    assert np.allclose(q.rotate_vector(FORWARD), (-1.0, 0.0, 0.0))
    assert np.allclose(q.direction, (-1.0, 0.0, 0.0))


def test_identity_direction_is_forward():
    assert np.allclose(Quaternion.identity().direction, (0.0, 0.0, -1.0))


def test_product_applies_right_operand_first():
    a = Quaternion.from_degrees(0, 90, 0)
    b = Quaternion.from_degrees(90, 0, 0)
    v = vec3(1.0, 2.0, 3.0)
    assert np.allclose((a * b).rotate_vector(v), a.rotate_vector(b.rotate_vector(v)))


def test_inverse_undoes_rotation():
    q = Quaternion.from_degrees(20, 130, -45)
    assert (q * q.inverse()).is_close(Quaternion.identity())
    v = vec3(0.3, -1.0, 4.0)
    assert np.allclose(q.inverse().rotate_vector(q.rotate_vector(v)), v)


def test_matrix_round_trip():
    for degrees in [(0, 0, 0), (0, 180, 0), (-180, 0, 0), (10, 250, 33), (0, -90, 0)]:
        q = Quaternion.from_degrees(*degrees)
        m = q.to_matrix()
        assert Quaternion.from_matrix(m).is_close(q)
        assert np.allclose(m[:3, :3] @ RIGHT, q.rotate_vector(RIGHT))
        assert np.allclose(m[:3, :3] @ UP, q.rotate_vector(UP))


def test_is_close_treats_negated_quaternion_as_same_rotation():
    q = Quaternion.from_degrees(0, 45, 0)
    assert q.is_close(Quaternion(-q.x, -q.y, -q.z, -q.w))
    assert not q.is_close(Quaternion.from_degrees(0, 50, 0))


def test_axis_angle_matches_euler_for_single_axis():
    q = Quaternion.from_axis_angle(UP, math.radians(72))
    assert q.is_close(Quaternion.from_degrees(0, 72, 0))


def test_normalized_zero_quaternion_is_identity():
    assert Quaternion(0, 0, 0, 0).normalized() == Quaternion.identity()


def test_even_rounds_half_up_to_even():
    assert even(16) == 16
    assert even(15) == 16
    assert even(17) == 18
    assert even(16.9) == 16
    assert even(-1) == 0


def test_even_range_bounds():
    assert even_range(10, 20) == (10, 20)
    assert even_range(9, 11) == (10, 10)
    assert even_range(0.5, 3) == (2, 2)
    low, high = even_range(9, 9)
    assert low > high


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(1.0) == 1


def test_normalize_zero_vector():
    assert np.allclose(normalize(vec3()), (0.0, 0.0, 0.0))
    assert np.allclose(normalize(vec3(0, 3, 4)), (0.0, 0.6, 0.8))


def test_bounds_of_points():
    lo, hi = bounds([vec3(1, -2, 3), vec3(-1, 5, 0), vec3(0, 0, 9)])
    assert np.allclose(lo, (-1, -2, 0))
    assert np.allclose(hi, (1, 5, 9))


def test_axis_constants_are_read_only():
    with pytest.raises(ValueError):
        FORWARD[0] = 1.0
