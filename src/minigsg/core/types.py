# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
Core typed data structures for MiniGSG.

Classes
-------
Pose
    Rigid 6DoF transform: a position in R^3 and a unit quaternion
    ``(w, x, y, z)``. A pose maps a point ``p`` expressed in its own frame to
    ``R p + pos`` in the parent frame. Supports the group operations used by
    the contact algebra:

    - ``a * b``         composition (apply ``b`` first, then ``a``)
    - ``a.inv()``       inverse
    - ``a / b``         right-divide, ``a * b.inv()``
    - ``a.ldiv(b)``     left-divide, ``a.inv() * b``

NodeId
    Internal integer vertex identifier used by :class:`core.forest.Forest`.
    Never exposed through the named API of :mod:`world.contact_graph`.

Notes
-----
Poses are immutable. Values are stored as float64 JAX arrays, and
comparisons go through :meth:`Pose.isapprox` because ``q`` and ``-q`` describe
the same rotation.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import NewType

import jax.numpy as jnp

from .math3d import (
    quat_conjugate,
    quat_from_matrix,
    quat_identity,
    quat_multiply,
    quat_to_matrix,
)

NodeId = NewType("NodeId", int)

#: Default absolute tolerance for pose comparisons.
DEFAULT_ATOL = 1e-9


@dataclass(frozen=True, eq=False)
class Pose:
    """Rigid transform with position ``pos`` (3,) and quaternion ``quat`` (4,), (w, x, y, z)."""
    pos: jnp.ndarray
    quat: jnp.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "pos", jnp.asarray(self.pos, dtype=jnp.float64).reshape(3,))
        object.__setattr__(self, "quat", jnp.asarray(self.quat, dtype=jnp.float64).reshape(4,))

    # --- Constructors ---

    @classmethod
    def identity(cls) -> "Pose":
        return cls(jnp.zeros(3), quat_identity())

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float, orientation=None) -> "Pose":
        """
        Build a pose from a position and an orientation.

        :param orientation: ``None`` (identity), a length-4 quaternion
            ``(w, x, y, z)`` or a 3×3 rotation matrix.
        """
        return cls(jnp.array([x, y, z], dtype=jnp.float64), _as_quat(orientation))

    @classmethod
    def from_rotation(cls, orientation) -> "Pose":
        """Pure rotation (zero translation)."""
        return cls(jnp.zeros(3), _as_quat(orientation))

    @classmethod
    def from_translation(cls, xyz) -> "Pose":
        return cls(jnp.asarray(xyz, dtype=jnp.float64), quat_identity())

    @classmethod
    def from_matrix(cls, T: jnp.ndarray) -> "Pose":
        """Pose from a 4×4 homogeneous matrix."""
        T = jnp.asarray(T, dtype=jnp.float64)
        return cls(T[:3, 3], quat_from_matrix(T[:3, :3]))

    # --- Accessors ---

    @property
    def quat_wxyz(self) -> tuple[float, float, float, float]:
        w, x, y, z = (float(c) for c in self.quat)
        return w, x, y, z

    @property
    def rotation(self) -> jnp.ndarray:
        """3×3 rotation matrix."""
        return quat_to_matrix(self.quat)

    def as_matrix(self) -> jnp.ndarray:
        """4×4 homogeneous matrix."""
        T = jnp.eye(4)
        T = T.at[:3, :3].set(self.rotation)
        T = T.at[:3, 3].set(self.pos)
        return T

    def transform_points(self, pts: jnp.ndarray) -> jnp.ndarray:
        """Apply the pose to a (3,) point or an (N, 3) array of points."""
        pts = jnp.asarray(pts, dtype=jnp.float64)
        return pts @ self.rotation.T + self.pos

    # --- Group operations ---

    def __mul__(self, other: "Pose") -> "Pose":
        if not isinstance(other, Pose):
            return NotImplemented
        R = self.rotation
        return Pose(R @ other.pos + self.pos, quat_multiply(self.quat, other.quat))

    def inv(self) -> "Pose":
        q_inv = quat_conjugate(self.quat)
        return Pose(-(quat_to_matrix(q_inv) @ self.pos), q_inv)

    def __truediv__(self, other: "Pose") -> "Pose":
        if not isinstance(other, Pose):
            return NotImplemented
        return self * other.inv()

    def ldiv(self, other: "Pose") -> "Pose":
        """Left-divide: ``self.inv() * other``."""
        return self.inv() * other

    # --- Comparison ---

    def isapprox(self, other: "Pose", atol: float = DEFAULT_ATOL) -> bool:
        """
        True if both poses agree within ``atol`` on position and on every
        rotation-matrix entry (so ``q`` and ``-q`` compare equal).
        """
        return bool(
            jnp.allclose(self.pos, other.pos, rtol=0.0, atol=atol)
            and jnp.allclose(self.rotation, other.rotation, rtol=0.0, atol=atol)
        )

    def __repr__(self) -> str:
        x, y, z = (float(c) for c in self.pos)
        w, qx, qy, qz = self.quat_wxyz
        return f"Pose(pos=({x:.6g}, {y:.6g}, {z:.6g}), quat=({w:.6g}, {qx:.6g}, {qy:.6g}, {qz:.6g}))"


def left_divide(a: Pose, b: Pose) -> Pose:
    """``a \\ b``, i.e. ``a.inv() * b``."""
    return a.ldiv(b)


def _as_quat(orientation) -> jnp.ndarray:
    if orientation is None:
        return quat_identity()
    arr = jnp.asarray(orientation, dtype=jnp.float64)
    if arr.shape == (4,):
        return arr
    if arr.shape == (3, 3):
        return quat_from_matrix(arr)
    raise ValueError(f"Orientation must be a quaternion (4,) or a rotation matrix (3, 3), got shape {arr.shape}")
