# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
Directed forests and the generic ForestScan propagation.

This module is the graph backbone of MiniGSG. It knows nothing about poses,
shapes or contacts: the contact graph in :mod:`world.contact_graph` builds on
it by injecting a pose-aggregation function.

Forest
    Arena of integer :class:`core.types.NodeId` vertices with parent
    pointers, ordered child lists, and one metadata value per edge.
    Edges are checked on insertion so the structure is always a forest:
    no self loops, no cycles, at most one parent per vertex.

forest_scan(forest, values, agg, ...)
    Like ``itertools.accumulate``, but on a forest rather than a list.
    Given a value at the root of each tree, sets the value of every other
    vertex by the rule::

        values[child] = agg(values[parent], edge_meta, aux[parent], aux[child])

    ``aux`` is optional per-vertex metadata, passed as whatever structured
    record the caller stores (``None`` where absent).

Notes
-----
``agg`` must be a pure function of its four arguments. Traversal is one
depth-first pass per tree and nothing may depend on sibling order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, Iterator, List, Mapping, MutableMapping, Optional, Tuple, TypeVar

from .errors import MissingSeedError, OverwriteError, StructuralViolationError
from .types import NodeId

logger = logging.getLogger(__name__)

E = TypeVar("E")
V = TypeVar("V")
A = TypeVar("A")

#: ``agg(parent_value, edge_meta, parent_aux, child_aux) -> child_value``
AggFn = Callable[[V, E, Optional[A], Optional[A]], V]


@dataclass
class Forest(Generic[E]):
    """
    Directed forest with edge metadata.

    - parents: mapping child NodeId -> parent NodeId (roots are absent)
    - children: mapping NodeId -> list of child NodeIds, in insertion order
    - edge_data: mapping (parent, child) -> edge metadata
    """
    parents: Dict[NodeId, NodeId] = field(default_factory=dict)
    children: Dict[NodeId, List[NodeId]] = field(default_factory=dict)
    edge_data: Dict[Tuple[NodeId, NodeId], E] = field(default_factory=dict)
    _next_id: int = 0

    # --- Vertices ---

    def add_vertex(self) -> NodeId:
        nid = NodeId(self._next_id)
        self._next_id += 1
        self.children[nid] = []
        return nid

    def has_vertex(self, v: NodeId) -> bool:
        return v in self.children

    def vertices(self) -> List[NodeId]:
        return list(self.children.keys())

    def __len__(self) -> int:
        return len(self.children)

    # --- Edges ---

    def check_edge(self, parent: NodeId, child: NodeId) -> None:
        """
        Raise :class:`StructuralViolationError` if ``parent -> child`` cannot
        be added without breaking the forest structure.
        """
        assert self.has_vertex(parent) and self.has_vertex(child)
        if parent == child:
            raise StructuralViolationError("an edge from a vertex to itself is a cycle")
        if child in self.parents:
            raise StructuralViolationError("the child vertex already has a parent")
        # child has no parent, so it is a root; a cycle would need parent in child's tree
        if self.root_of(parent) == child:
            raise StructuralViolationError("the edge would create a cycle")

    def add_edge(self, parent: NodeId, child: NodeId, meta: E) -> None:
        self.check_edge(parent, child)
        self.parents[child] = parent
        self.children[parent].append(child)
        self.edge_data[(parent, child)] = meta

    def has_edge(self, parent: NodeId, child: NodeId) -> bool:
        return (parent, child) in self.edge_data

    def edge_meta(self, parent: NodeId, child: NodeId) -> E:
        return self.edge_data[(parent, child)]

    def remove_edge(self, parent: NodeId, child: NodeId) -> E:
        meta = self.edge_data.pop((parent, child))
        del self.parents[child]
        self.children[parent].remove(child)
        return meta

    def clear_edges(self) -> None:
        self.parents.clear()
        self.edge_data.clear()
        for kids in self.children.values():
            kids.clear()

    def edges(self) -> List[Tuple[NodeId, NodeId]]:
        return list(self.edge_data.keys())

    # --- Structure queries ---

    def parent_of(self, v: NodeId) -> Optional[NodeId]:
        return self.parents.get(v)

    def children_of(self, v: NodeId) -> List[NodeId]:
        return list(self.children[v])

    def roots(self) -> List[NodeId]:
        """Roots of all trees, i.e. vertices without an incoming edge."""
        return [v for v in self.children if v not in self.parents]

    def root_of(self, v: NodeId) -> NodeId:
        while v in self.parents:
            v = self.parents[v]
        return v

    def path_from_root_to(self, v: NodeId) -> List[NodeId]:
        """Vertices on the path from the root of ``v``'s tree down to ``v``, inclusive."""
        rev_path = [v]
        while v in self.parents:
            v = self.parents[v]
            rev_path.append(v)
        return rev_path[::-1]

    def descendants(self, root: NodeId) -> Iterator[Tuple[NodeId, NodeId]]:
        """Yield ``(parent, child)`` edges of the tree under ``root`` in depth-first order."""
        stack = [root]
        while stack:
            s = stack.pop()
            for n in self.children[s]:
                yield s, n
                stack.append(n)

    def copy(self) -> "Forest[E]":
        """Structural copy; edge metadata objects are shared, not copied."""
        return Forest(
            parents=dict(self.parents),
            children={v: list(kids) for v, kids in self.children.items()},
            edge_data=dict(self.edge_data),
            _next_id=self._next_id,
        )


def forest_scan(
    forest: Forest[E],
    values: MutableMapping[NodeId, V],
    agg: AggFn,
    *,
    aux: Optional[Mapping[NodeId, A]] = None,
    roots: Optional[Iterable[NodeId]] = None,
    allow_overwrite: bool = False,
) -> MutableMapping[NodeId, V]:
    """
    Propagate root values to every vertex of a forest.

    Parameters
    ----------
    forest:
        The forest to traverse.
    values:
        Mutable mapping holding the seed value of each traversed root. It is
        filled in place with the value of every non-root vertex.
    agg:
        ``agg(parent_value, edge_meta, parent_aux, child_aux) -> child_value``.
    aux:
        Optional per-vertex auxiliary records. Vertices missing from ``aux``
        (or every vertex, when ``aux`` is ``None``) get ``None``.
    roots:
        Restrict the traversal to the trees rooted at these vertices. By
        default all trees are traversed. Repeated roots are traversed once.
    allow_overwrite:
        If ``False`` (the default), raise :class:`OverwriteError` when a
        non-root vertex already has a value, which signals that the vertex
        value was specified twice. Set to ``True`` for recomputation passes.

    Returns
    -------
    MutableMapping
        ``values``, for convenience.
    """
    if roots is None:
        roots = forest.roots()
    roots = list(dict.fromkeys(roots))
    aux = aux if aux is not None else {}

    n_set = 0
    for root in roots:
        assert forest.parent_of(root) is None, "scan roots must be forest roots"
        if root not in values:
            raise MissingSeedError("a forest root has no seed value", vertex=root)
        for s, n in forest.descendants(root):
            if not allow_overwrite and n in values:
                raise OverwriteError("a non-root vertex already has a value", vertex=n)
            values[n] = agg(values[s], forest.edge_meta(s, n), aux.get(s), aux.get(n))
            n_set += 1

    logger.debug("forest_scan set %d vertex values", n_set)
    return values
