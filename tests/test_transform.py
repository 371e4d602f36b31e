import numpy as np
import pytest

from maze_levelgenerator.geometry import (
    DegenerateTransformError, Quaternion, Transform, compose_matrix, decompose_matrix, vec3,
)


def test_model_is_translate_rotate_scale():
    t = Transform(vec3(1, 2, 3), Quaternion.from_degrees(0, 90, 0), vec3(2, 3, 4))
    m = t.model
    # Local +X (scaled by 2) turned a quarter about Y ends up along -Z
    assert np.allclose(m @ np.array([1.0, 0.0, 0.0, 1.0]), (1.0, 2.0, 1.0, 1.0))
    assert np.allclose(m[:3, 3], (1, 2, 3))


def test_decompose_round_trip():
    t = Transform(vec3(-4, 0.5, 9), Quaternion.from_degrees(0, 37, 0), vec3(16, 8, 4))
    assert Transform.from_matrix(t.model).is_close(t)


def test_negative_scale_is_recovered_on_x():
    m = compose_matrix(vec3(), Quaternion.identity(), vec3(-2, 3, 4))
    position, rotation, scale = decompose_matrix(m)
    assert np.allclose(scale, (-2, 3, 4))
    assert rotation.is_close(Quaternion.identity())


def test_mirrored_matrix_recomposes_exactly():
    m = compose_matrix(vec3(1, 1, 1), Quaternion.from_degrees(0, 30, 0), vec3(2, -3, 4))
    assert np.allclose(Transform.from_matrix(m).model, m)


def test_zero_scale_cannot_be_decomposed():
    t = Transform(scale=vec3(0, 1, 1))
    with pytest.raises(DegenerateTransformError):
        Transform.from_matrix(t.model)


def test_tiny_uniform_scale_is_still_invertible():
    t = Transform(vec3(3, 0, -2), Quaternion.from_degrees(0, 45, 0), vec3(1e-4, 1e-4, 1e-4))
    back = Transform.from_matrix(t.model)
    assert np.allclose(back.scale, t.scale, rtol=1e-9, atol=0)
    assert back.rotation.is_close(t.rotation, 1e-6)

    child = Transform(vec3(1, 2, 3))
    assert child.local(t).to_world(t).is_close(child, 1e-6)


def test_parallel_basis_columns_are_degenerate():
    m = np.eye(4)
    m[:3, 1] = (1.0, 0.0, 0.0)
    with pytest.raises(DegenerateTransformError):
        decompose_matrix(m)


def test_local_against_degenerate_parent_fails():
    parent = Transform(scale=vec3(1, 0, 1))
    child = Transform(vec3(1, 2, 3))
    with pytest.raises(DegenerateTransformError):
        child.local(parent)


def test_degenerate_error_is_a_value_error():
    assert issubclass(DegenerateTransformError, ValueError)


def test_local_then_world_round_trip():
    parent = Transform(vec3(5, 0, -3), Quaternion.from_degrees(0, 30, 0), vec3(2, 2, 2))
    world = Transform(vec3(1, 2, 3), Quaternion.from_degrees(0, 75, 0), vec3(4, 1, 2))

    local = world.local(parent)
    assert np.allclose(parent.model @ local.model, world.model)
    assert local.to_world(parent).is_close(world)


def test_local_of_identity_parent_is_unchanged():
    t = Transform(vec3(3, 4, 5), Quaternion.from_degrees(0, -90, 0), vec3(1, 2, 3))
    assert t.local(Transform.identity()).is_close(t)


def test_rotation_is_normalized_on_construction():
    t = Transform(rotation=Quaternion(0, 2, 0, 0))
    assert t.rotation.magnitude() == pytest.approx(1.0)


def test_replace_and_copy():
    t = Transform(vec3(1, 1, 1))
    c = t.copy()
    t.replace(Transform(vec3(9, 9, 9), Quaternion.from_degrees(0, 90, 0), vec3(2, 2, 2)))
    assert np.allclose(t.position, (9, 9, 9))
    assert np.allclose(c.position, (1, 1, 1))
    assert not c.is_close(t)
