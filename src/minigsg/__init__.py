# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
MiniGSG: contact graphs of rigid bodies compiled to absolute 6DoF poses.

A scene is a forest of named objects, each carrying a :class:`Shape`.
Edges declare that a contact plane of the parent touches a contact plane of
the child (a :class:`ShapeContact`), roots carry a fixed :class:`Pose`, and
compilation propagates poses from the roots down to every object.

Typical usage
-------------

.. code-block:: python

    from minigsg import Box, ContactGraph, PlanarContact, Pose, ShapeContact

    g = ContactGraph()
    g.add_object("table", Box(1.0, 1.0, 0.8))
    g.add_object("cup", Box(0.1, 0.1, 0.12))
    g.set_pose("table", Pose.identity())
    g.set_contact("table", "cup",
                  ShapeContact("top", (), "bottom", (), PlanarContact(0.2, 0.0, 0.0)))
    poses = g.floating_poses()

Precision
---------
Poses are computed in float64, which the 1e-9 pose tolerances rely on.
Importing this package therefore calls
``jax.config.update("jax_enable_x64", True)``. This is a global side effect:
it switches the default JAX dtype to 64 bits for the whole process, including
code outside MiniGSG that runs after the import. Applications that need
32-bit defaults elsewhere should create their arrays with an explicit
``dtype``.
"""

import jax

jax.config.update("jax_enable_x64", True)

from .core.errors import (  # noqa: E402
    ContactGraphError,
    MissingContactError,
    MissingSeedError,
    NameConflictError,
    OverwriteError,
    PoseOverspecifiedError,
    StructuralViolationError,
    UnknownContactFamilyError,
    UnknownNameError,
)
from .core.forest import Forest, forest_scan  # noqa: E402
from .core.types import NodeId, Pose, left_divide  # noqa: E402
from .scene_graph.planar_contact import (  # noqa: E402
    OUTWARD_NORMAL_FLIP,
    PlanarContact,
    closest_approximating_contact,
    planar_contact_to_6dof,
)
from .scene_graph.relations import (  # noqa: E402
    ShapeContact,
    ShapeMeta,
    contact_graph_agg,
    get_relative_pose_from_contact,
)
from .scene_graph.shapes import (  # noqa: E402
    BOX_SURFACE_IDS,
    Box,
    BoxContainer,
    Shape,
    get_contact_plane,
)
from .world.contact_graph import (  # noqa: E402
    ContactGraph,
    floating_poses_of,
    to_floating_in_place,
)

__all__ = [
    "BOX_SURFACE_IDS",
    "Box",
    "BoxContainer",
    "ContactGraph",
    "ContactGraphError",
    "Forest",
    "MissingContactError",
    "MissingSeedError",
    "NameConflictError",
    "NodeId",
    "OUTWARD_NORMAL_FLIP",
    "OverwriteError",
    "PlanarContact",
    "Pose",
    "PoseOverspecifiedError",
    "Shape",
    "ShapeContact",
    "ShapeMeta",
    "StructuralViolationError",
    "UnknownContactFamilyError",
    "UnknownNameError",
    "closest_approximating_contact",
    "contact_graph_agg",
    "floating_poses_of",
    "forest_scan",
    "get_contact_plane",
    "get_relative_pose_from_contact",
    "left_divide",
    "planar_contact_to_6dof",
    "to_floating_in_place",
]
