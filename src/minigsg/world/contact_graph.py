# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
Contact graphs: named rigid objects linked by surface contacts.

This module provides the user-facing :class:`ContactGraph`, a directed forest
whose vertices are named objects (a :class:`Shape` plus, at roots, a fixed
absolute :class:`Pose`) and whose edges are :class:`ShapeContact` relations
from a parent object to a child object.

Compiling a contact graph means computing the absolute pose of every object:

    - :meth:`ContactGraph.floating_poses` / :func:`floating_poses_of` run one
      :func:`core.forest.forest_scan` over the whole forest with
      :func:`scene_graph.relations.contact_graph_agg` and return a snapshot
      ``{name: Pose}``. The graph is not modified.
    - :meth:`ContactGraph.to_floating` / :func:`to_floating_in_place` assign
      the computed pose to every object and then delete every edge, leaving a
      set of independent, pose-carrying ("floating") objects.
    - :meth:`ContactGraph.get_absolute_pose` computes a single object's pose
      by walking up to its root. It is O(depth); for every object at once
      prefer the batch form.

Invariants
----------
- Each object has at most one parent and there are no cycles.
- An object's placement has exactly one source of truth: either a fixed
  absolute pose (roots only) or its incoming contact. Declaring both raises
  :class:`PoseOverspecifiedError`, whichever call comes second.
- Names are the only public identity. Internal ``NodeId`` integers never
  appear in results or error messages.

Typical usage
-------------

.. code-block:: python

    g = ContactGraph()
    g.add_object("a", Box(1.0, 1.0, 2.0))
    g.add_object("b", Box(1.0, 1.0, 2.0))
    g.set_pose("a", Pose.identity())
    g.set_contact("a", "b", ShapeContact.between("top", "bottom"))
    g.get_absolute_pose("b").pos   # -> [0, 0, 2]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Tuple

from ..core.errors import (
    MissingContactError,
    MissingSeedError,
    NameConflictError,
    OverwriteError,
    PoseOverspecifiedError,
    StructuralViolationError,
    UnknownNameError,
)
from ..core.forest import Forest, forest_scan
from ..core.types import NodeId, Pose
from ..scene_graph.relations import ShapeContact, ShapeMeta, contact_graph_agg
from ..scene_graph.shapes import Shape

logger = logging.getLogger(__name__)


@dataclass
class ObjectNode:
    """Vertex payload: a named object, its shape, and its fixed pose if it has one."""
    name: Hashable
    shape: Shape
    absolute_pose: Optional[Pose] = None
    props: Dict[str, Any] = field(default_factory=dict)


class ContactGraph:
    """
    Directed forest of named objects connected by contact relations.

    All public methods address objects by name. Mutations are validated
    before they are applied, so a failing call leaves the graph unchanged.
    """
    forest: Forest[ShapeContact]
    nodes: Dict[NodeId, ObjectNode]
    name_index: Dict[Hashable, NodeId]

    def __init__(self) -> None:
        self.forest = Forest()
        self.nodes = {}
        self.name_index = {}

    # --- Name resolution ---

    def _id(self, name: Hashable) -> NodeId:
        try:
            return self.name_index[name]
        except KeyError:
            raise UnknownNameError(f"No object named {name!r}") from None

    def _name(self, nid: NodeId) -> Hashable:
        return self.nodes[nid].name

    def __contains__(self, name: Hashable) -> bool:
        return name in self.name_index

    def __len__(self) -> int:
        return len(self.nodes)

    # --- Construction ---

    def add_object(self, name: Hashable, shape: Shape) -> None:
        """
        Add an object with a unique name.

        :param name: Hashable identifier, used for all later addressing.
        :param shape: Geometry of the object.
        :raises NameConflictError: If ``name`` is already registered.
        """
        if name in self.name_index:
            raise NameConflictError(f"An object named {name!r} already exists")
        nid = self.forest.add_vertex()
        self.nodes[nid] = ObjectNode(name=name, shape=shape)
        self.name_index[name] = nid
        logger.debug("added object %r (%s)", name, type(shape).__name__)

    def set_pose(self, name: Hashable, pose: Pose) -> None:
        """
        Fix the absolute pose of an object.

        :raises PoseOverspecifiedError: If the object's pose is already
            determined by an incoming contact relation.
        """
        nid = self._id(name)
        if self.forest.parent_of(nid) is not None:
            raise PoseOverspecifiedError(
                f"The pose of {name!r} is already determined by a contact relation with "
                f"{self._name(self.forest.parent_of(nid))!r}"
            )
        self.nodes[nid].absolute_pose = pose

    def set_contact(self, parent_name: Hashable, child_name: Hashable, contact: ShapeContact) -> None:
        """
        Declare that ``child_name`` rests on ``parent_name`` as described by ``contact``.

        :raises StructuralViolationError: If the child already has a parent,
            or the edge would close a cycle.
        :raises PoseOverspecifiedError: If the child already has a fixed pose.
        """
        parent = self._id(parent_name)
        child = self._id(child_name)
        if self.nodes[child].absolute_pose is not None:
            raise PoseOverspecifiedError(
                f"{child_name!r} already has an absolute pose and cannot also be placed by a contact"
            )
        try:
            self.forest.add_edge(parent, child, contact)
        except StructuralViolationError as err:
            raise StructuralViolationError(
                f"Cannot add contact {parent_name!r} -> {child_name!r}: {err}"
            ) from None
        logger.debug("added contact %r -> %r", parent_name, child_name)

    def set_prop(self, name: Hashable, key: str, value: Any) -> None:
        """Attach an arbitrary caller-defined property to an object."""
        self.nodes[self._id(name)].props[key] = value

    # --- Queries ---

    def get_prop(self, name: Hashable, key: str) -> Any:
        return self.nodes[self._id(name)].props[key]

    def get_shape(self, name: Hashable) -> Shape:
        return self.nodes[self._id(name)].shape

    def has_pose(self, name: Hashable) -> bool:
        """True if the object carries an absolute pose (a fixed root pose, or one assigned by :meth:`to_floating`)."""
        return self.nodes[self._id(name)].absolute_pose is not None

    def get_contact(self, parent_name: Hashable, child_name: Hashable) -> ShapeContact:
        parent = self._id(parent_name)
        child = self._id(child_name)
        if not self.forest.has_edge(parent, child):
            raise MissingContactError(f"No contact from {parent_name!r} to {child_name!r}")
        return self.forest.edge_meta(parent, child)

    def vertex_names(self) -> List[Hashable]:
        """Object names in insertion order."""
        return [node.name for node in self.nodes.values()]

    def named_edges(self) -> List[Tuple[Hashable, Hashable]]:
        """Contact edges as ``(parent_name, child_name)`` pairs."""
        return [(self._name(s), self._name(d)) for s, d in self.forest.edges()]

    def roots(self) -> List[Hashable]:
        """Names of the objects without an incoming contact."""
        return [self._name(v) for v in self.forest.roots()]

    def parent_of(self, name: Hashable) -> Optional[Hashable]:
        parent = self.forest.parent_of(self._id(name))
        return None if parent is None else self._name(parent)

    def children_of(self, name: Hashable) -> List[Hashable]:
        return [self._name(v) for v in self.forest.children_of(self._id(name))]

    def get_absolute_pose(self, name: Hashable) -> Pose:
        """
        Absolute pose of one object.

        Walks the path from the object's root down to the object and applies
        :func:`contact_graph_agg` edge by edge. If you need every object's
        pose, :meth:`floating_poses` is more efficient than calling this in a
        loop.

        :raises MissingSeedError: If the root of the object's tree has no
            absolute pose.
        """
        path = self.forest.path_from_root_to(self._id(name))
        root = self.nodes[path[0]]
        if root.absolute_pose is None:
            raise MissingSeedError(f"Root object {root.name!r} of {name!r} has no absolute pose")
        pose = root.absolute_pose
        for parent, child in zip(path, path[1:]):
            pose = contact_graph_agg(pose,
                                     self.forest.edge_meta(parent, child),
                                     ShapeMeta(self.nodes[parent].shape),
                                     ShapeMeta(self.nodes[child].shape))
        return pose

    # --- Compilation ---

    def _compile(self) -> Dict[NodeId, Pose]:
        values = {nid: node.absolute_pose for nid, node in self.nodes.items()
                  if node.absolute_pose is not None}
        aux = {nid: ShapeMeta(node.shape) for nid, node in self.nodes.items()}
        try:
            # Overwrites are disallowed: an overwrite means an object's pose
            # was given both as an absolute pose and by a contact relation.
            forest_scan(self.forest, values, contact_graph_agg, aux=aux, allow_overwrite=False)
        except MissingSeedError as err:
            raise MissingSeedError(
                f"Root object {self._name(err.vertex)!r} has no absolute pose"
            ) from None
        except OverwriteError as err:
            raise PoseOverspecifiedError(
                f"The pose of {self._name(err.vertex)!r} is overspecified"
            ) from None
        return values

    def floating_poses(self) -> Dict[Hashable, Pose]:
        """
        Compile the graph into ``{name: absolute pose}`` for every object, in
        insertion order. The graph itself is not modified.
        """
        logger.debug("compiling %d objects, %d contacts", len(self.nodes), len(self.forest.edge_data))
        values = self._compile()
        return {node.name: values[nid] for nid, node in self.nodes.items()}

    def to_floating(self) -> "ContactGraph":
        """
        Convert this graph in place to a floating scene graph: every object
        gets its absolute pose, then every contact edge is deleted.
        """
        values = self._compile()
        for nid, node in self.nodes.items():
            node.absolute_pose = values[nid]
        self.forest.clear_edges()
        logger.debug("converted %d objects to floating", len(self.nodes))
        return self

    def copy(self) -> "ContactGraph":
        """Copy of the graph structure. Shapes, poses and contacts are shared (they are immutable)."""
        g = ContactGraph()
        g.forest = self.forest.copy()
        g.nodes = {nid: ObjectNode(node.name, node.shape, node.absolute_pose, dict(node.props))
                   for nid, node in self.nodes.items()}
        g.name_index = dict(self.name_index)
        return g

    def __repr__(self) -> str:  # pragma: no cover - trivial representation
        return f"ContactGraph(objects={len(self.nodes)}, contacts={len(self.forest.edge_data)})"


def floating_poses_of(graph: ContactGraph) -> Dict[Hashable, Pose]:
    """Functional form of :meth:`ContactGraph.floating_poses`."""
    return graph.floating_poses()


def to_floating_in_place(graph: ContactGraph) -> ContactGraph:
    """Functional form of :meth:`ContactGraph.to_floating`."""
    return graph.to_floating()
