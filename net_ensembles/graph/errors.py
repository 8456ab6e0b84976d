"""
Exception hierarchy for graph and ensemble operations.

Every error raised by the library derives from :class:`GraphError`, so a
caller can catch the whole family at once. Errors that also have an obvious
builtin counterpart (out-of-range indices, self loops, mutation during
iteration) additionally derive from that builtin.
"""

from __future__ import annotations

from typing import Any, List, Optional


class GraphError(Exception):
    """Base class for all graph related errors."""


class EdgeExistsError(GraphError):
    """Raised when adding an edge between vertices that are already adjacent."""

    def __init__(self, i: int, j: int):
        super().__init__(f"Edge ({i}, {j}) already exists")
        self.i = i
        self.j = j


class EdgeDoesNotExistError(GraphError):
    """Raised when removing an edge between vertices that are not adjacent."""

    def __init__(self, i: int, j: int):
        super().__init__(f"Edge ({i}, {j}) does not exist")
        self.i = i
        self.j = j


class IndexOutOfRangeError(GraphError, IndexError):
    """Raised for a vertex id outside ``[0, vertex_count)``."""

    def __init__(self, index: Any, vertex_count: int):
        super().__init__(
            f"Vertex index {index} out of range for graph with {vertex_count} vertices"
        )
        self.index = index
        self.vertex_count = vertex_count


class SelfLoopError(GraphError, ValueError):
    """Raised when an edge would connect a vertex with itself."""

    def __init__(self, index: int):
        super().__init__(f"Self loops are not allowed (vertex {index})")
        self.index = index


class GraphMutatedError(GraphError, RuntimeError):
    """Raised when a traversal is advanced after its graph changed."""


class InvariantViolationError(GraphError):
    """
    Raised when a Markov step ends up in a state that a consistent ensemble
    can never produce (invalid adjacency or an inner graph error).

    The offending step token is kept as ``state``.
    """

    def __init__(self, message: str, state: Any = None):
        super().__init__(message)
        self.state = state


class UndoError(GraphError):
    """
    Raised by checked undo when a step token does not match the graph.

    When raised from a chained undo, ``undone`` holds the inverse tokens of
    the steps that were already reverted and ``failed_index`` the position
    (in the original token list) of the token that failed.
    """

    def __init__(
        self,
        message: str,
        token: Any = None,
        undone: Optional[List[Any]] = None,
        failed_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.token = token
        self.undone = undone if undone is not None else []
        self.failed_index = failed_index
