"""
Rotation primitives for MiniGSG.

This module implements the minimal 3D rotation mathematics needed by the
pose type in :mod:`core.types` and by the contact-plane catalog:

    • Unit quaternions in (w, x, y, z) order: products, conjugates,
      conversion to and from rotation matrices
    • Rotations about an arbitrary axis

All functions are written in JAX and are safe to use under ``jax.jit`` and
``jax.grad``; branching goes through ``jax.lax`` rather than Python ``if``.

Key Functions
-------------
quat_multiply(q1, q2)
    Hamilton product, so that ``R(q1 * q2) == R(q1) @ R(q2)``.

quat_to_matrix(q) / quat_from_matrix(R)
    Conversions between unit quaternions and rotation matrices.

rotate_around_axis(axis, angle)
    Unit quaternion of a rotation by ``angle`` radians about ``axis``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp


def quat_identity() -> jnp.ndarray:
    return jnp.array([1.0, 0.0, 0.0, 0.0])


def quat_multiply(q1: jnp.ndarray, q2: jnp.ndarray) -> jnp.ndarray:
    """Hamilton product ``q1 * q2``."""
    w1, x1, y1, z1 = q1[0], q1[1], q1[2], q1[3]
    w2, x2, y2, z2 = q2[0], q2[1], q2[2], q2[3]
    return jnp.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def quat_conjugate(q: jnp.ndarray) -> jnp.ndarray:
    """Conjugate, which is also the inverse for unit quaternions."""
    return q * jnp.array([1.0, -1.0, -1.0, -1.0])


def quat_normalize(q: jnp.ndarray) -> jnp.ndarray:
    q = jnp.asarray(q, dtype=jnp.float64)
    return q / jnp.linalg.norm(q)


def quat_to_matrix(q: jnp.ndarray) -> jnp.ndarray:
    """Rotation matrix of a unit quaternion."""
    w, x, y, z = q[0], q[1], q[2], q[3]
    return jnp.array(
        [
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
            [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
            [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
        ]
    )


def _quat_w_major(R: jnp.ndarray) -> jnp.ndarray:
    s = jnp.sqrt(1.0 + jnp.trace(R)) * 2.0
    return jnp.array([
        0.25 * s,
        (R[2, 1] - R[1, 2]) / s,
        (R[0, 2] - R[2, 0]) / s,
        (R[1, 0] - R[0, 1]) / s,
    ])


def _quat_x_major(R: jnp.ndarray) -> jnp.ndarray:
    s = jnp.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2]) * 2.0
    return jnp.array([
        (R[2, 1] - R[1, 2]) / s,
        0.25 * s,
        (R[0, 1] + R[1, 0]) / s,
        (R[0, 2] + R[2, 0]) / s,
    ])


def _quat_y_major(R: jnp.ndarray) -> jnp.ndarray:
    s = jnp.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2]) * 2.0
    return jnp.array([
        (R[0, 2] - R[2, 0]) / s,
        (R[0, 1] + R[1, 0]) / s,
        0.25 * s,
        (R[1, 2] + R[2, 1]) / s,
    ])


def _quat_z_major(R: jnp.ndarray) -> jnp.ndarray:
    s = jnp.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1]) * 2.0
    return jnp.array([
        (R[1, 0] - R[0, 1]) / s,
        (R[0, 2] + R[2, 0]) / s,
        (R[1, 2] + R[2, 1]) / s,
        0.25 * s,
    ])


def quat_from_matrix(R: jnp.ndarray) -> jnp.ndarray:
    """
    Unit quaternion of a rotation matrix (Shepperd's method).

    The branch is chosen on the largest of ``trace, R00, R11, R22``, which
    tracks the largest of ``w², x², y², z²``, so the square root is always
    taken of a well-conditioned quantity. Ties go to the ``w`` branch.
    """
    R = jnp.asarray(R, dtype=jnp.float64)
    candidates = jnp.array([jnp.trace(R), R[0, 0], R[1, 1], R[2, 2]])
    branch = jnp.argmax(candidates)
    q = jax.lax.switch(branch, [_quat_w_major, _quat_x_major, _quat_y_major, _quat_z_major], R)
    return quat_normalize(q)


def rotate_around_axis(axis, angle: float) -> jnp.ndarray:
    """
    Unit quaternion of the rotation by ``angle`` radians around ``axis``.

    :param axis: Length-3 array-like, need not be normalized.
    :param angle: Rotation angle in radians (right-hand rule).
    :return: Quaternion ``(w, x, y, z)``.
    """
    axis = jnp.asarray(axis, dtype=jnp.float64).reshape(3,)
    axis = axis / jnp.linalg.norm(axis)
    half = 0.5 * angle
    return jnp.concatenate([jnp.array([jnp.cos(half)]), jnp.sin(half) * axis])
