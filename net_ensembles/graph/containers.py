"""
Per-vertex adjacency containers.

A container couples a vertex id, its payload and the ordered list of its
neighbours. Containers never talk to the graph; the graph keeps them
consistent by always mutating both ends of an edge together through the
underscore methods below.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional, Tuple

import numpy as np

from net_ensembles.graph.errors import EdgeDoesNotExistError, EdgeExistsError


class AdjContainer(ABC):
    """
    Abstract adjacency container.

    Subclasses decide how an adjacency entry is represented. Public methods
    are read-only apart from reordering; topology changes go through the
    owning graph.
    """

    def __init__(self, id: int, node: Any):
        self._id = id
        self.contained = node

    @property
    def id(self) -> int:
        """Vertex id, fixed at construction."""
        return self._id

    def contained_mut(self) -> Any:
        """Return the payload for in-place modification."""
        return self.contained

    # =========================================================================
    # QUERIES
    # =========================================================================

    @abstractmethod
    def neighbors(self) -> Iterator[int]:
        """Iterate over neighbour ids in adjacency-list order."""

    @abstractmethod
    def degree(self) -> int:
        """Number of neighbours."""

    @abstractmethod
    def adjacency(self) -> Tuple[int, ...]:
        """Neighbour ids as a tuple, in list order."""

    def is_adjacent(self, other_id: int) -> bool:
        return any(n == other_id for n in self.neighbors())

    def adj_first(self) -> Optional[int]:
        """First neighbour, ``None`` for an isolated vertex."""
        return next(self.neighbors(), None)

    # =========================================================================
    # REORDERING
    # =========================================================================

    @abstractmethod
    def sort_adj(self) -> None:
        """Sort the adjacency list by neighbour id."""

    @abstractmethod
    def shuffle_adj(self, rng: np.random.Generator) -> None:
        """Randomly permute the adjacency list."""

    # =========================================================================
    # TOPOLOGY (called by the graph only)
    # =========================================================================

    @abstractmethod
    def _push(self, other: "AdjContainer") -> None:
        """Append an edge to ``other`` on both ends."""

    @abstractmethod
    def _remove(self, other: "AdjContainer") -> Tuple[int, int]:
        """
        Remove the edge to ``other`` on both ends, keeping the order of the
        remaining entries.

        Returns:
            Positions the entries had in this and in ``other``'s list.
        """

    @abstractmethod
    def _insert_at(self, other: "AdjContainer", pos_self: int, pos_other: int) -> None:
        """Reinsert an edge removed by :meth:`_remove` at its old positions."""

    @abstractmethod
    def _clear(self) -> None:
        """Drop all adjacency entries of this vertex only."""

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id={self._id}, "
            f"contained={self.contained!r}, adj={list(self.adjacency())})"
        )


class NodeContainer(AdjContainer):
    """Plain container: the adjacency list holds neighbour ids."""

    def __init__(self, id: int, node: Any):
        super().__init__(id, node)
        self._adj: List[int] = []

    def neighbors(self) -> Iterator[int]:
        return iter(self._adj)

    def degree(self) -> int:
        return len(self._adj)

    def adjacency(self) -> Tuple[int, ...]:
        return tuple(self._adj)

    def is_adjacent(self, other_id: int) -> bool:
        return other_id in self._adj

    def adj_first(self) -> Optional[int]:
        return self._adj[0] if self._adj else None

    def sort_adj(self) -> None:
        self._adj.sort()

    def shuffle_adj(self, rng: np.random.Generator) -> None:
        rng.shuffle(self._adj)

    def _push(self, other: "NodeContainer") -> None:
        if self.is_adjacent(other.id):
            raise EdgeExistsError(self._id, other.id)
        self._adj.append(other.id)
        other._adj.append(self._id)

    def _remove(self, other: "NodeContainer") -> Tuple[int, int]:
        try:
            pos_self = self._adj.index(other.id)
        except ValueError:
            raise EdgeDoesNotExistError(self._id, other.id) from None
        pos_other = other._adj.index(self._id)
        del self._adj[pos_self]
        del other._adj[pos_other]
        return pos_self, pos_other

    def _insert_at(self, other: "NodeContainer", pos_self: int, pos_other: int) -> None:
        if self.is_adjacent(other.id):
            raise EdgeExistsError(self._id, other.id)
        self._adj.insert(pos_self, other.id)
        other._adj.insert(pos_other, self._id)

    def _clear(self) -> None:
        self._adj.clear()
