# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
3DoF planar contact between two contact planes.

Two contact planes are *externally tangent* when their ``(x, y)`` planes
coincide and their ``+z`` axes (outward surface normals) point in opposite
directions. The remaining freedom is an in-plane offset ``(x, y)`` and an
angle around the common normal, which is what :class:`PlanarContact` stores.

Concretely, ``PlanarContact(x, y, angle)`` is the rigid motion

    (Transform by ``OUTWARD_NORMAL_FLIP``) ∘
    (Rotate by ``angle`` radians around +z) ∘
    (Translate by ``[x, y, 0]``)

read right to left: translate first, then rotate about z, then flip. An
optional ``slack`` pose turns it into an inexact contact::

    planar_contact_to_6dof(PlanarContact(x, y, angle, slack)) ==
        planar_contact_to_6dof(PlanarContact(x, y, angle)) * slack

Functions
---------
planar_contact_to_6dof(c)
    6DoF pose of the child plane frame relative to the parent plane frame.

closest_approximating_contact(pose)
    Best-fitting contact for an arbitrary relative pose, with the residual
    stored as slack so the conversion round-trips exactly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.math3d import quat_multiply, rotate_around_axis
from ..core.types import Pose

#: Canonical rigid motion flipping the z-axis: a rotation of pi around (1, 1, 0).
#:
#: It fixes what "angular offset" means. If the outward normals of two
#: tangent planes point in opposite directions, composing the child's
#: orientation with this flip makes the two frames share a z-axis and an
#: ``(x, y)`` orientation up to one angle around that axis; that angle is the
#: ``angle`` of a :class:`PlanarContact`.
OUTWARD_NORMAL_FLIP = rotate_around_axis([1.0, 1.0, 0.0], math.pi)


@dataclass(frozen=True)
class PlanarContact:
    """
    Offset ``(x, y)`` and ``angle`` (radians) of the child contact plane in
    the parent contact plane, plus an optional ``slack`` pose for inexact
    contacts.
    """
    x: float
    y: float
    angle: float
    slack: Optional[Pose] = None

    @property
    def is_exact(self) -> bool:
        return self.slack is None


def planar_contact_to_6dof(c: PlanarContact) -> Pose:
    """
    Converts a 3DoF planar contact (external tangency) to the 6DoF relative
    pose of the child plane's coordinate frame relative to the parent plane's
    coordinate frame.
    """
    orn = quat_multiply(OUTWARD_NORMAL_FLIP, rotate_around_axis([0.0, 0.0, 1.0], c.angle))
    p = Pose.from_xyz(c.x, c.y, 0.0, orn)
    if c.slack is None:
        return p
    return p * c.slack


def closest_approximating_contact(pose: Pose) -> PlanarContact:
    """
    Express a 6DoF ``pose`` as a :class:`PlanarContact` with the smallest
    possible slack, such that::

        pose == planar_contact_to_6dof(closest_approximating_contact(pose))

    The slack has the smallest translational offset (its position is always
    ``[0, 0, z]``) and the smallest cosine distance from its orientation to
    the identity. If ``pose`` comes from an exact contact, the slack is the
    identity.
    """
    # The contact satisfies
    #
    #     pose = Pose(x, y, 0, FLIP * Rz(angle)) * slack
    #
    # so Rz(angle) = FLIP \ R(pose) / R(slack). Minimizing the cosine distance
    # between R(slack) and the identity is the same as minimizing it between
    # R(FLIP \ pose) and Rz(angle).
    x, y = float(pose.pos[0]), float(pose.pos[1])
    pose_ = Pose.from_rotation(OUTWARD_NORMAL_FLIP).ldiv(pose)
    w, _, _, z = pose_.quat_wxyz

    # Derivation of the optimal angle θ.
    #
    # Rz(θ) has quaternion (cos(θ/2), 0, 0, sin(θ/2)). For unit quaternions
    # the cosine between the rotations is 2 * <q1, q2>^2 - 1 [1], which is
    # extremal exactly when the dot product
    #
    #     cos(θ/2) * w + sin(θ/2) * z
    #
    # is maximal or minimal, i.e. when θ/2 = atan(z / w) + π n. Any n gives
    # the same rotation, so
    #
    #     θ = 2 * atan2(z, w)
    #
    # [1] https://math.stackexchange.com/questions/90081/quaternion-distance
    angle = 2.0 * math.atan2(z, w)

    slack = planar_contact_to_6dof(PlanarContact(x, y, angle)).ldiv(pose)
    return PlanarContact(x, y, angle, slack)

