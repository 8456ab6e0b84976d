"""
Lazy graph traversals.

Each traversal owns its own visited buffer and frontier, so several
traversals over the same graph may be interleaved freely. A traversal remembers
the graph's mutation counter when it is created and refuses to continue once
the topology changed.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Any, Callable, Deque, Iterator, List, Optional, Tuple

import numpy as np

from net_ensembles.graph.errors import GraphMutatedError

if TYPE_CHECKING:
    from net_ensembles.graph.generic_graph import GenericGraph


class _Traversal:
    """Shared bookkeeping for all traversals."""

    def __init__(self, graph: "GenericGraph"):
        self._graph = graph
        self._version = graph._version
        self._handled = np.zeros(graph.vertex_count(), dtype=bool)

    def _valid_start(self, start: Any) -> bool:
        return (
            isinstance(start, (int, np.integer))
            and not isinstance(start, bool)
            and 0 <= start < self._graph.vertex_count()
        )

    def _check_version(self) -> None:
        if self._graph._version != self._version:
            raise GraphMutatedError("Graph was mutated during traversal")

    def __iter__(self):
        return self


class Dfs(_Traversal):
    """
    Depth first search yielding vertex ids in pre-order.

    Neighbours are explored in adjacency-list order. Vertices not reachable
    from ``start`` are never yielded; an invalid start yields nothing.
    """

    def __init__(self, graph: "GenericGraph", start: int):
        super().__init__(graph)
        self._stack: List[Tuple[int, Iterator[int]]] = []
        self._pending: Optional[int] = None
        if self._valid_start(start):
            start = int(start)
            self._handled[start] = True
            self._pending = start

    def _advance(self) -> int:
        self._check_version()
        if self._pending is not None:
            index = self._pending
            self._pending = None
            self._stack.append((index, self._graph.container(index).neighbors()))
            return index
        while self._stack:
            _, neighbors = self._stack[-1]
            for n in neighbors:
                if not self._handled[n]:
                    self._handled[n] = True
                    self._stack.append((n, self._graph.container(n).neighbors()))
                    return n
            self._stack.pop()
        raise StopIteration

    def __next__(self) -> int:
        return self._advance()


class DfsWithIndex(Dfs):
    """Depth first search yielding ``(vertex_id, payload)`` pairs."""

    def __next__(self) -> Tuple[int, Any]:
        index = self._advance()
        return index, self._graph.container(index).contained


class Bfs(_Traversal):
    """
    Breadth first search yielding ``(vertex_id, depth)``.

    The start vertex has depth 0.
    """

    def __init__(self, graph: "GenericGraph", start: int):
        super().__init__(graph)
        self._queue: Deque[Tuple[int, int]] = deque()
        self._push_start(start)

    def _push_start(self, start: int) -> None:
        if self._valid_start(start):
            start = int(start)
            self._handled[start] = True
            self._queue.append((start, 0))

    def _accept(self, index: int) -> bool:
        return True

    def reuse(self, start: int) -> "Bfs":
        """Restart at ``start`` reusing the buffers of this traversal."""
        self._version = self._graph._version
        if len(self._handled) != self._graph.vertex_count():
            self._handled = np.zeros(self._graph.vertex_count(), dtype=bool)
        else:
            self._handled.fill(False)
        self._queue.clear()
        self._push_start(start)
        return self

    def _advance(self) -> Tuple[int, int]:
        self._check_version()
        if not self._queue:
            raise StopIteration
        index, depth = self._queue.popleft()
        for n in self._graph.container(index).neighbors():
            if not self._handled[n] and self._accept(n):
                self._handled[n] = True
                self._queue.append((n, depth + 1))
        return index, depth

    def __next__(self) -> Tuple[int, int]:
        return self._advance()


class BfsFiltered(Bfs):
    """
    Breadth first search restricted to vertices accepted by
    ``keep(payload, index)``. Yields ``(vertex_id, payload, depth)``.
    """

    def __init__(
        self,
        graph: "GenericGraph",
        start: int,
        keep: Callable[[Any, int], bool],
    ):
        self._keep = keep
        super().__init__(graph, start)

    def _accept(self, index: int) -> bool:
        return bool(self._keep(self._graph.container(index).contained, index))

    def __next__(self) -> Tuple[int, Any, int]:
        index, depth = self._advance()
        return index, self._graph.container(index).contained, depth
