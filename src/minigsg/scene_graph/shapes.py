# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
Shapes and their contact-plane catalogs.

A :class:`Shape` exposes a fixed, named catalog of *contact-plane families*.
Each family is a (possibly parametrized) set of planes on the shape's
surface; :meth:`Shape.get_contact_plane` returns the pose of one such plane
in the shape's own coordinate frame, with the plane's ``+z`` axis along the
outward surface normal.

Nothing else in MiniGSG depends on shape internals: a new shape only needs
to subclass :class:`Shape` and implement ``contact_families`` and
``get_contact_plane``.

Shipped shapes
--------------
Box
    Solid axis-aligned box centered at its origin. Six zero-dimensional
    families, one per face.

BoxContainer
    Hollow box shell with the same outer dimensions. Twelve families: an
    ``outer_<face>`` / ``inner_<face>`` pair per face.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, Tuple

from ..core.errors import UnknownContactFamilyError
from ..core.math3d import quat_identity, quat_multiply, rotate_around_axis
from ..core.types import Pose

#: Contact-plane families of :class:`Box`.
BOX_SURFACE_IDS: Tuple[str, ...] = ("top", "bottom", "left", "right", "front", "back")

#: Contact-plane families of :class:`BoxContainer`.
BOX_CONTAINER_SURFACE_IDS: Tuple[str, ...] = tuple(
    f"{side}_{face}" for face in BOX_SURFACE_IDS for side in ("outer", "inner")
)

_X_AXIS = (1.0, 0.0, 0.0)
_Y_AXIS = (0.0, 1.0, 0.0)

# Flips a plane frame's normal while keeping its origin.
_NORMAL_REVERSAL = rotate_around_axis(_X_AXIS, math.pi)


class Shape(ABC):
    """Capability interface: a shape is anything that can place its contact planes."""

    @property
    @abstractmethod
    def contact_families(self) -> Tuple[Hashable, ...]:
        """Ids of all contact-plane families of this shape."""

    @abstractmethod
    def get_contact_plane(self, family_id: Hashable, *params: float) -> Pose:
        """
        Pose of a contact plane in this shape's coordinate frame.

        :param family_id: One of :attr:`contact_families`.
        :param params: Parameters selecting a plane within the family; empty
            for zero-dimensional families.
        :raises UnknownContactFamilyError: If ``family_id`` is not in the catalog.
        """

    def _check_no_params(self, family_id: Hashable, params: Tuple[float, ...]) -> None:
        if params:
            raise ValueError(
                f"Contact plane family {family_id!r} of {type(self).__name__} takes no "
                f"parameters, got {len(params)}"
            )


def _box_face_plane(size_x: float, size_y: float, size_z: float, face: Hashable) -> Pose:
    # Orientations are hard-coded: there is no fully canonical choice of
    # in-plane axes for the faces, and poses downstream depend on this table.
    sx = size_x / 2
    sy = size_y / 2
    sz = size_z / 2
    if face == "top":
        return Pose.from_xyz(0.0, 0.0, sz, quat_identity())
    if face == "bottom":
        return Pose.from_xyz(0.0, 0.0, -sz, rotate_around_axis(_X_AXIS, math.pi))
    if face == "left":
        return Pose.from_xyz(-sx, 0.0, 0.0, rotate_around_axis(_Y_AXIS, -math.pi / 2))
    if face == "right":
        return Pose.from_xyz(sx, 0.0, 0.0, rotate_around_axis(_Y_AXIS, math.pi / 2))
    if face == "front":
        return Pose.from_xyz(0.0, sy, 0.0, rotate_around_axis(_X_AXIS, -math.pi / 2))
    if face == "back":
        return Pose.from_xyz(0.0, -sy, 0.0, rotate_around_axis(_X_AXIS, math.pi / 2))
    raise UnknownContactFamilyError(f"Invalid contact plane family {face!r}")


def _check_sizes(shape: Shape, *sizes: float) -> None:
    if any(not s > 0 for s in sizes):
        raise ValueError(f"{type(shape).__name__} dimensions must be positive, got {sizes}")


@dataclass(frozen=True)
class Box(Shape):
    """
    Box (rectangular prism) with its origin at its geometric center and
    axis-aligned faces.

    Contact plane families, each a single plane centered on its face:

    * ``"left"``   (``x = -size_x / 2``)
    * ``"right"``  (``x = size_x / 2``)
    * ``"bottom"`` (``z = -size_z / 2``)
    * ``"top"``    (``z = size_z / 2``)
    * ``"back"``   (``y = -size_y / 2``)
    * ``"front"``  (``y = size_y / 2``)
    """
    size_x: float
    size_y: float
    size_z: float

    def __post_init__(self) -> None:
        _check_sizes(self, self.size_x, self.size_y, self.size_z)

    @property
    def contact_families(self) -> Tuple[str, ...]:
        return BOX_SURFACE_IDS

    def get_contact_plane(self, family_id: Hashable, *params: float) -> Pose:
        if family_id not in BOX_SURFACE_IDS:
            raise UnknownContactFamilyError(f"Invalid contact plane family {family_id!r} for Box")
        self._check_no_params(family_id, params)
        return _box_face_plane(self.size_x, self.size_y, self.size_z, family_id)


@dataclass(frozen=True)
class BoxContainer(Shape):
    """
    Hollow box shell, e.g. an open tray or a crate.

    ``outer_<face>`` is the corresponding :class:`Box` plane. ``inner_<face>``
    sits at the same point with its normal reversed (rotated by pi about the
    plane's own x-axis), so its ``+z`` points into the cavity and objects can
    be placed inside.
    """
    size_x: float
    size_y: float
    size_z: float

    def __post_init__(self) -> None:
        _check_sizes(self, self.size_x, self.size_y, self.size_z)

    @property
    def contact_families(self) -> Tuple[str, ...]:
        return BOX_CONTAINER_SURFACE_IDS

    def get_contact_plane(self, family_id: Hashable, *params: float) -> Pose:
        if family_id not in BOX_CONTAINER_SURFACE_IDS:
            raise UnknownContactFamilyError(
                f"Invalid contact plane family {family_id!r} for BoxContainer"
            )
        self._check_no_params(family_id, params)
        side, face = family_id.split("_", 1)
        outer = _box_face_plane(self.size_x, self.size_y, self.size_z, face)
        if side == "outer":
            return outer
        return Pose(outer.pos, quat_multiply(outer.quat, _NORMAL_REVERSAL))


def get_contact_plane(shape: Shape, family_id: Hashable, *params: float) -> Pose:
    """Functional form of :meth:`Shape.get_contact_plane`."""
    return shape.get_contact_plane(family_id, *params)
