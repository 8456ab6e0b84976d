"""
Graph type for small-world ensembles.

Every edge remembers the vertex it is rooted at and the target it had in the
ring lattice. The rooted end stores an :class:`SwEdge` with ``originally_to``
set, the other end a loose :class:`SwEdge`. Rewiring moves the loose end;
resetting moves it back to ``originally_to``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

import numpy as np

from net_ensembles.ensembles.steps import SwChangeState
from net_ensembles.graph.containers import AdjContainer
from net_ensembles.graph.errors import EdgeDoesNotExistError, EdgeExistsError, SelfLoopError
from net_ensembles.graph.generic_graph import GenericGraph


@dataclass
class SwEdge:
    """Adjacency entry of a small-world container."""

    to: int
    originally_to: Optional[int] = None

    def is_root(self) -> bool:
        """True if the edge is rooted at the vertex holding this entry."""
        return self.originally_to is not None

    def is_at_root(self) -> bool:
        """True if the edge still points at its ring-lattice target."""
        return self.to == self.originally_to


class SwContainer(AdjContainer):
    """Adjacency container whose entries are :class:`SwEdge` records."""

    def __init__(self, id: int, node: Any):
        super().__init__(id, node)
        self._adj: List[SwEdge] = []

    def neighbors(self) -> Iterator[int]:
        return (e.to for e in self._adj)

    def degree(self) -> int:
        return len(self._adj)

    def adjacency(self) -> Tuple[int, ...]:
        return tuple(e.to for e in self._adj)

    def edges(self) -> Tuple[SwEdge, ...]:
        return tuple(self._adj)

    def root_edges(self) -> List[SwEdge]:
        return [e for e in self._adj if e.is_root()]

    def count_root(self) -> int:
        """Number of edges rooted at this vertex."""
        return sum(1 for e in self._adj if e.is_root())

    def _find(self, other_id: int) -> Optional[int]:
        for pos, e in enumerate(self._adj):
            if e.to == other_id:
                return pos
        return None

    def sort_adj(self) -> None:
        self._adj.sort(key=lambda e: e.to)

    def shuffle_adj(self, rng: np.random.Generator) -> None:
        rng.shuffle(self._adj)

    def _push(self, other: "SwContainer") -> None:
        # the new edge is rooted here
        if self.is_adjacent(other.id):
            raise EdgeExistsError(self._id, other.id)
        self._adj.append(SwEdge(other.id, other.id))
        other._adj.append(SwEdge(self._id))

    def _remove(self, other: "SwContainer") -> Tuple[int, int]:
        pos_self = self._find(other.id)
        if pos_self is None:
            raise EdgeDoesNotExistError(self._id, other.id)
        pos_other = other._find(self._id)
        del self._adj[pos_self]
        del other._adj[pos_other]
        return pos_self, pos_other

    def _insert_at(self, other: "SwContainer", pos_self: int, pos_other: int) -> None:
        # reinserted edges are rooted at ``self``
        if self.is_adjacent(other.id):
            raise EdgeExistsError(self._id, other.id)
        self._adj.insert(pos_self, SwEdge(other.id, other.id))
        other._adj.insert(pos_other, SwEdge(self._id))

    def _clear(self) -> None:
        self._adj.clear()


class SwGraph(GenericGraph):
    """Graph of :class:`SwContainer` supporting rewire and reset of rooted edges."""

    container_class = SwContainer

    def init_ring(self, distance: int) -> None:
        """
        Replace all edges by a ring lattice.

        Vertex ``i`` gets edges rooted at it towards ``i+1, ..., i+distance``
        (modulo the vertex count), so every vertex ends with degree
        ``2 * distance``.

        Raises:
            ValueError: if ``distance < 1`` or the ring is too small to hold
                ``2 * distance`` distinct neighbours per vertex.
        """
        n = self.vertex_count()
        if distance < 1:
            raise ValueError(f"Ring distance must be at least 1, got {distance}")
        if n <= 2 * distance:
            raise ValueError(
                f"A ring lattice with distance {distance} needs more than "
                f"{2 * distance} vertices, got {n}"
            )
        self.clear_edges()
        for i in range(n):
            for step in range(1, distance + 1):
                self.add_edge(i, (i + step) % n)

    def count_root(self, i: int) -> Optional[int]:
        """Edges rooted at ``i``; ``None`` if out of range."""
        c = self.container_checked(i)
        return None if c is None else c.count_root()

    def root_edges(self) -> List[Tuple[int, int]]:
        """All rooted edges as ``(root, current target)``."""
        return [(c.id, e.to) for c in self.container_iter() for e in c.root_edges()]

    def rewired_edge_count(self) -> int:
        """Rooted edges that currently point away from their lattice target."""
        return sum(
            1 for c in self.container_iter() for e in c.root_edges() if not e.is_at_root()
        )

    def _rewire(self, i0: int, i1: int, i2: int, insert_at: Optional[int] = None) -> int:
        """
        Move the edge rooted at ``i0`` from ``i1`` to ``i2``, unchecked.

        The loose entry is removed from ``i1`` in place and appended to ``i2``
        (or inserted at ``insert_at``).

        Returns:
            Position the loose entry had in ``i1``'s list.
        """
        c0, c1, c2 = self._vertices[i0], self._vertices[i1], self._vertices[i2]
        c0._adj[c0._find(i1)].to = i2
        position = c1._find(i0)
        del c1._adj[position]
        loose = SwEdge(i0)
        if insert_at is None:
            c2._adj.append(loose)
        else:
            c2._adj.insert(insert_at, loose)
        self._version += 1
        return position

    def rewire_edge(self, i0: int, i1: int, i2: int) -> SwChangeState:
        """
        Move the edge rooted at ``i0`` from ``i1`` to ``i2``.

        Returns:
            ``REWIRE`` on success, ``NOTHING`` if ``i1 == i2``,
            ``BLOCKED_BY_EXISTING_EDGE`` if ``i0`` and ``i2`` are already
            adjacent and ``INVALID_ADJACENCY`` if there is no edge from
            ``i0`` to ``i1`` rooted at ``i0``.

        Raises:
            IndexOutOfRangeError: for ids outside the graph.
            SelfLoopError: if ``i2 == i0``.
        """
        i0, i1, i2 = self._index(i0), self._index(i1), self._index(i2)
        if i1 == i2:
            return SwChangeState.nothing()
        if i2 == i0:
            raise SelfLoopError(i0)
        c0 = self._vertices[i0]
        pos = c0._find(i1)
        if pos is None or not c0._adj[pos].is_root():
            return SwChangeState.invalid_adjacency()
        if c0.is_adjacent(i2):
            return SwChangeState.blocked()
        position = self._rewire(i0, i1, i2)
        return SwChangeState.rewire(i0, i1, i2, position)

    def reset_edge(self, i0: int, i1: int) -> SwChangeState:
        """
        Move the edge rooted at ``i0`` that currently ends at ``i1`` back to
        its lattice target.

        Returns:
            ``RESET`` (with ``i2`` the lattice target) on success,
            ``NOTHING`` if the edge is already at its target,
            ``BLOCKED_BY_EXISTING_EDGE`` if ``i0`` is adjacent to the target
            through another edge, ``GRAPH_ERROR`` if ``i0`` and ``i1`` are
            not adjacent and ``INVALID_ADJACENCY`` if the edge is not rooted
            at ``i0``.
        """
        i0, i1 = self._index(i0), self._index(i1)
        c0 = self._vertices[i0]
        pos = c0._find(i1)
        if pos is None:
            return SwChangeState.graph_error(EdgeDoesNotExistError(i0, i1))
        edge = c0._adj[pos]
        if not edge.is_root():
            return SwChangeState.invalid_adjacency()
        if edge.is_at_root():
            return SwChangeState.nothing()
        root = edge.originally_to
        if c0.is_adjacent(root):
            return SwChangeState.blocked()
        position = self._rewire(i0, i1, root)
        return SwChangeState.reset(i0, i1, root, position)
