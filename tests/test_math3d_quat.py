import math

import jax
import jax.numpy as jnp
import pytest

from minigsg.core.math3d import (
    quat_conjugate,
    quat_from_matrix,
    quat_identity,
    quat_multiply,
    quat_to_matrix,
    rotate_around_axis,
)


def same_rotation(q1, q2, atol=1e-12):
    # q and -q are the same rotation
    return min(float(jnp.max(jnp.abs(q1 - q2))), float(jnp.max(jnp.abs(q1 + q2)))) < atol


def test_rotate_around_z_matches_closed_form():
    angle = 0.7
    c, s = math.cos(angle), math.sin(angle)
    R_expected = jnp.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
    q = rotate_around_axis([0.0, 0.0, 2.0], angle)
    assert jnp.allclose(quat_to_matrix(q), R_expected, atol=1e-12)


@pytest.mark.parametrize(
    "axis, angle",
    [
        ([1.0, 0.0, 0.0], math.pi),
        ([0.0, 1.0, 0.0], -math.pi / 2),
        ([1.0, 1.0, 0.0], math.pi),
        ([0.3, -0.4, 0.8], 2.5),
        ([0.0, 0.0, 1.0], 0.0),
    ],
)
def test_quat_matrix_roundtrip(axis, angle):
    q = rotate_around_axis(axis, angle)
    assert same_rotation(quat_from_matrix(quat_to_matrix(q)), q)


@pytest.mark.parametrize(
    "axis, angle",
    [
        ([0.0, 0.0, 1.0], 0.2),             # w is the largest component
        ([1.0, 0.0, 0.0], math.pi - 0.1),   # x
        ([0.0, 1.0, 0.0], math.pi - 0.1),   # y
        ([0.0, 0.0, 1.0], math.pi - 0.1),   # z
    ],
)
def test_quat_from_matrix_under_jit(axis, angle):
    """Every Shepperd branch traces and agrees with the eager result."""
    q = rotate_around_axis(axis, angle)
    R = quat_to_matrix(q)
    q_jit = jax.jit(quat_from_matrix)(R)
    assert same_rotation(q_jit, q)
    assert same_rotation(q_jit, quat_from_matrix(R))


def test_quat_from_matrix_is_differentiable():
    def first_row_of_roundtrip(angle):
        return quat_to_matrix(quat_from_matrix(quat_to_matrix(rotate_around_axis([0.0, 0.0, 1.0], angle))))[0, 0]

    # d/dθ cos(θ) = -sin(θ)
    g = jax.grad(first_row_of_roundtrip)(0.4)
    assert float(g) == pytest.approx(-math.sin(0.4), abs=1e-9)


def test_quat_multiply_matches_matrix_product():
    q1 = rotate_around_axis([1.0, 0.0, 0.0], 0.4)
    q2 = rotate_around_axis([0.0, 1.0, 1.0], -1.1)
    R = quat_to_matrix(quat_multiply(q1, q2))
    assert jnp.allclose(R, quat_to_matrix(q1) @ quat_to_matrix(q2), atol=1e-12)


def test_quat_conjugate_is_inverse():
    q = rotate_around_axis([0.2, 0.5, -0.1], 1.3)
    assert jnp.allclose(quat_multiply(q, quat_conjugate(q)), quat_identity(), atol=1e-12)
