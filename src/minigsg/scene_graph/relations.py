# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
Contact relations between shapes.

This module defines the edge payload of the contact graph and the rule that
turns it into relative poses:

    • :class:`ShapeContact`: a choice of contact plane on the parent shape,
      a choice of contact plane on the child shape, and the
      :class:`PlanarContact` relating the two planes.

    • :func:`get_relative_pose_from_contact`: the child's whole-body frame
      relative to the parent's whole-body frame.

    • :func:`contact_graph_agg`: the aggregation function handed to
      :func:`core.forest.forest_scan` when compiling a contact graph. Given
      the parent's absolute pose, the contact and the two shapes, it returns
      the child's absolute pose.

Geometry (shapes and their plane catalogs) lives in :mod:`scene_graph.shapes`
and the planar-contact algebra in :mod:`scene_graph.planar_contact`; this
module only composes them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Hashable, NamedTuple, Tuple

from ..core.types import Pose
from .planar_contact import PlanarContact, planar_contact_to_6dof
from .shapes import Shape


@dataclass(frozen=True)
class ShapeContact:
    """
    Contact relation between two shapes, directed parent -> child.

    - parent_family_id / parent_plane_params: contact plane on the parent
      shape, as in :meth:`Shape.get_contact_plane`
    - child_family_id / child_plane_params: contact plane on the child shape
    - planar_contact: 3DoF pose of the child plane relative to the parent
      plane (3DoF because the two planes are externally tangent)
    """
    parent_family_id: Hashable
    parent_plane_params: Tuple[float, ...]
    child_family_id: Hashable
    child_plane_params: Tuple[float, ...]
    planar_contact: PlanarContact

    def __post_init__(self) -> None:
        object.__setattr__(self, "parent_plane_params", tuple(float(p) for p in self.parent_plane_params))
        object.__setattr__(self, "child_plane_params", tuple(float(p) for p in self.child_plane_params))

    @classmethod
    def between(cls, parent_family_id: Hashable, child_family_id: Hashable,
                planar_contact: PlanarContact | None = None) -> "ShapeContact":
        """Contact between two zero-dimensional families, centered by default."""
        if planar_contact is None:
            planar_contact = PlanarContact(0.0, 0.0, 0.0)
        return cls(parent_family_id, (), child_family_id, (), planar_contact)


class ShapeMeta(NamedTuple):
    """Per-vertex auxiliary record passed to :func:`contact_graph_agg`."""
    shape: Shape


def get_relative_pose_from_contact(parent: Shape, child: Shape, contact: ShapeContact) -> Pose:
    """
    Relative pose of ``child``'s coordinate frame with respect to
    ``parent``'s coordinate frame, given that they touch as described by
    ``contact``.

    These are the frames of the whole shapes, not of the individual contact
    planes: the child plane frame is divided back out on the right.
    """
    parent_plane_frame = parent.get_contact_plane(contact.parent_family_id, *contact.parent_plane_params)
    child_plane_frame = child.get_contact_plane(contact.child_family_id, *contact.child_plane_params)
    return parent_plane_frame * planar_contact_to_6dof(contact.planar_contact) / child_plane_frame


def contact_graph_agg(absolute_pose: Pose, contact: ShapeContact,
                      parent: ShapeMeta, child: ShapeMeta) -> Pose:
    """
    Aggregation rule for contact graphs.

    Given the absolute pose of the parent object, the contact relation and
    the shapes of both objects, returns the absolute pose of the child.
    """
    return absolute_pose * get_relative_pose_from_contact(parent.shape, child.shape, contact)
