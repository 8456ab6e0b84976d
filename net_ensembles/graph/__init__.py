"""Graph data structures, traversals and structural observables."""

from net_ensembles.graph.containers import AdjContainer, NodeContainer
from net_ensembles.graph.errors import (
    EdgeDoesNotExistError,
    EdgeExistsError,
    GraphError,
    GraphMutatedError,
    IndexOutOfRangeError,
    InvariantViolationError,
    SelfLoopError,
    UndoError,
)
from net_ensembles.graph.generic_graph import GenericGraph, Graph
from net_ensembles.graph.iterators import Bfs, BfsFiltered, Dfs, DfsWithIndex
from net_ensembles.graph.nodes import CountingNode, EmptyNode, Node

__all__ = [
    "AdjContainer",
    "NodeContainer",
    "GenericGraph",
    "Graph",
    "Bfs",
    "BfsFiltered",
    "Dfs",
    "DfsWithIndex",
    "Node",
    "EmptyNode",
    "CountingNode",
    "GraphError",
    "EdgeExistsError",
    "EdgeDoesNotExistError",
    "IndexOutOfRangeError",
    "SelfLoopError",
    "GraphMutatedError",
    "InvariantViolationError",
    "UndoError",
]
