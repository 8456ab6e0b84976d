"""
Erdős–Rényi ensemble with a constant number of edges.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Type, Union

import numpy as np

from net_ensembles.ensembles.steps import Edge, ErStepC, StepKind
from net_ensembles.ensembles.traits import HasRng, MarkovChain, SimpleSample, WithGraph
from net_ensembles.graph.errors import UndoError
from net_ensembles.graph.generic_graph import Graph
from net_ensembles.graph.nodes import Node, NodeFactory
from net_ensembles.utils.random import RngLike, draw_two_from_range, make_rng

logger = logging.getLogger(__name__)


def _ordered(a: int, b: int) -> Edge:
    return (a, b) if a < b else (b, a)


class ErEnsembleC(HasRng, SimpleSample, MarkovChain, WithGraph):
    """
    Uniform ensemble of simple graphs with exactly ``target_edges`` edges.

    A Markov step swaps one existing edge for one vertex pair, so the edge
    count never changes. Swaps onto an existing edge are reported as
    ``BLOCKED_BY_EXISTING_EDGE`` instead of being retried, which keeps the
    chain symmetric.

    Parameters
    ----------
    n : int
        Number of vertices.
    target_edges : int
        Number of edges, at most ``n * (n - 1) / 2``.
    rng : int, SeedSequence or Generator, optional
        Seed or generator; passed to ``numpy.random.default_rng``.
    node_factory : callable or Node subclass, optional
        Vertex payload factory.
    """

    def __init__(
        self,
        n: int,
        target_edges: int,
        rng: RngLike = None,
        node_factory: Optional[Union[NodeFactory, Type[Node]]] = None,
    ):
        self._graph = Graph(n, node_factory=node_factory)
        max_edges = self.max_edges()
        if isinstance(target_edges, bool) or not isinstance(target_edges, (int, np.integer)):
            raise TypeError(f"target_edges must be an integer, got {type(target_edges).__name__}")
        if not 0 <= target_edges <= max_edges:
            raise ValueError(
                f"target_edges must be in [0, {max_edges}] for {n} vertices, got {target_edges}"
            )
        self._target_edges = int(target_edges)
        self._rng = make_rng(rng)
        self._current_edges: List[Edge] = []
        logger.debug("Creating ErEnsembleC with n=%d, target_edges=%d", n, target_edges)
        self.randomize()

    def target_edges(self) -> int:
        return self._target_edges

    def max_edges(self) -> int:
        n = self._graph.vertex_count()
        return n * (n - 1) // 2

    def edge_list(self) -> List[Edge]:
        """Current edges as ``(i, j)`` with ``i < j``, in internal order."""
        return list(self._current_edges)

    # =========================================================================
    # SAMPLING
    # =========================================================================

    def randomize(self) -> None:
        """
        Draw a fresh graph with exactly ``target_edges`` edges.

        Sparse targets use rejection sampling of vertex pairs. Above half of
        the possible edges that would reject most draws, so instead all
        pairs are shuffled and a prefix is taken. Both are uniform.
        """
        graph = self._graph
        graph.clear_edges()
        self._current_edges = []
        n = graph.vertex_count()
        if self._target_edges == 0:
            return

        if 2 * self._target_edges <= self.max_edges():
            logger.debug("Randomizing %d edges by rejection sampling", self._target_edges)
            while len(self._current_edges) < self._target_edges:
                a, b = draw_two_from_range(self._rng, n)
                if graph.container(a).is_adjacent(b):
                    continue
                graph.add_edge(a, b)
                self._current_edges.append(_ordered(a, b))
        else:
            logger.debug("Randomizing %d edges by shuffling all pairs", self._target_edges)
            pairs = [(i, j) for i in range(n) for j in range(i + 1, n)]
            for k in self._rng.permutation(len(pairs))[: self._target_edges]:
                a, b = pairs[k]
                graph.add_edge(a, b)
                self._current_edges.append((a, b))

    def markov_step(self) -> ErStepC:
        """
        Replace a uniformly chosen edge by a uniformly chosen vertex pair.

        Returns ``NOTHING`` if the graph has no edges or no free pairs and
        ``BLOCKED_BY_EXISTING_EDGE`` if the chosen pair is already an edge.
        """
        if self._target_edges == 0 or self._target_edges == self.max_edges():
            return ErStepC.nothing()

        index = int(self._rng.integers(self._target_edges))
        a, b = draw_two_from_range(self._rng, self._graph.vertex_count())
        if self._graph.container(a).is_adjacent(b):
            return ErStepC.blocked()

        removed = self._current_edges[index]
        inserted = _ordered(a, b)
        positions = self._graph._remove_edge_positions(*removed)
        self._graph.add_edge(*inserted)
        self._current_edges[index] = inserted
        return ErStepC(
            StepKind.SWAPPED_EDGE,
            removed=removed,
            inserted=inserted,
            index=index,
            positions=positions,
        )

    # =========================================================================
    # UNDO
    # =========================================================================

    def _swap_back(self, token: ErStepC) -> ErStepC:
        positions = self._graph._remove_edge_positions(*token.inserted)
        self._graph._add_edge_at(*token.removed, *token.positions)
        self._current_edges[token.index] = token.removed
        return ErStepC(
            StepKind.SWAPPED_EDGE,
            removed=token.inserted,
            inserted=token.removed,
            index=token.index,
            positions=positions,
        )

    def undo_step(self, token: ErStepC) -> ErStepC:
        if not isinstance(token, ErStepC):
            raise UndoError(f"Expected ErStepC, got {type(token).__name__}", token=token)
        if token.is_rejected:
            return token
        if token.kind is not StepKind.SWAPPED_EDGE:
            raise UndoError(f"Cannot undo step of kind {token.kind.name}", token=token)

        graph = self._graph
        if (
            token.index is None
            or token.positions is None
            or not 0 <= token.index < len(self._current_edges)
            or self._current_edges[token.index] != token.inserted
        ):
            raise UndoError(f"Token {token} does not match the current edge list", token=token)
        r0, r1 = token.removed
        if graph.container(r0).is_adjacent(r1):
            raise UndoError(f"Removed edge {token.removed} exists again", token=token)
        p0, p1 = token.positions
        # positions refer to the lists after the inserted edge is gone again
        shrink0 = 1 if r0 in token.inserted else 0
        shrink1 = 1 if r1 in token.inserted else 0
        if p0 > graph.degree(r0) - shrink0 or p1 > graph.degree(r1) - shrink1:
            raise UndoError(f"Token {token} holds stale adjacency positions", token=token)
        return self._swap_back(token)

    def undo_step_quiet(self, token: ErStepC) -> None:
        if token.kind is StepKind.SWAPPED_EDGE:
            self._swap_back(token)
