"""
Erdős–Rényi ensemble with constant connection probability.
"""

from __future__ import annotations

import logging
from typing import Optional, Type, Union

from net_ensembles.ensembles.steps import ErStepM, StepKind
from net_ensembles.ensembles.traits import HasRng, MarkovChain, SimpleSample, WithGraph
from net_ensembles.graph.errors import UndoError
from net_ensembles.graph.generic_graph import Graph
from net_ensembles.graph.nodes import Node, NodeFactory
from net_ensembles.utils.random import RngLike, draw_two_from_range, make_rng

logger = logging.getLogger(__name__)


def _check_prob(prob: float) -> float:
    prob = float(prob)
    if not 0.0 <= prob <= 1.0:
        raise ValueError(f"Probability must be in [0, 1], got {prob}")
    return prob


class ErEnsembleM(HasRng, SimpleSample, MarkovChain, WithGraph):
    """
    G(n, p) ensemble: every vertex pair is an edge with probability ``prob``.

    ``randomize`` draws every pair independently. A Markov step proposes to
    add (with probability ``prob``) or remove one uniformly chosen pair, so the
    realized edge count wanders around ``prob * n(n-1)/2``; use :meth:`get_m`
    to read it.

    Args:
        n: Number of vertices.
        prob: Connection probability in ``[0, 1]``.
        rng: Seed or generator, passed to ``numpy.random.default_rng``.
        node_factory: Vertex payload factory.
    """

    def __init__(
        self,
        n: int,
        prob: float,
        rng: RngLike = None,
        node_factory: Optional[Union[NodeFactory, Type[Node]]] = None,
    ):
        self._prob = _check_prob(prob)
        self._graph = Graph(n, node_factory=node_factory)
        self._rng = make_rng(rng)
        logger.debug("Creating ErEnsembleM with n=%d, prob=%g", n, self._prob)
        self.randomize()

    # =========================================================================
    # PARAMETERS
    # =========================================================================

    def prob(self) -> float:
        return self._prob

    def set_prob(self, prob: float) -> None:
        """Set the connection probability used by later steps and :meth:`randomize`."""
        self._prob = _check_prob(prob)
        logger.debug("Connection probability set to %g", self._prob)

    def target_connectivity(self) -> float:
        """Expected degree ``prob * (n - 1)``."""
        return self._prob * max(self._graph.vertex_count() - 1, 0)

    def set_target_connectivity(self, connectivity: float) -> None:
        """Choose ``prob`` so that the expected degree equals ``connectivity``."""
        n = self._graph.vertex_count()
        if n < 2:
            raise ValueError("Target connectivity needs at least two vertices")
        self.set_prob(connectivity / (n - 1))

    def get_m(self) -> int:
        """Realized number of edges."""
        return self._graph.edge_count()

    # =========================================================================
    # SAMPLING
    # =========================================================================

    def randomize(self) -> None:
        graph = self._graph
        graph.clear_edges()
        n = graph.vertex_count()
        for i in range(n):
            draws = self._rng.random(n - i - 1)
            for offset in (draws < self._prob).nonzero()[0]:
                graph.add_edge(i, i + 1 + int(offset))

    def markov_step(self) -> ErStepM:
        """
        Propose a change of one uniformly chosen vertex pair.

        With probability ``prob`` the pair is added, otherwise it is removed.
        A proposal that does not change the graph yields a ``NOTHING`` token.
        The stationary distribution is G(n, prob), the same ensemble
        :meth:`randomize` draws from.
        """
        n = self._graph.vertex_count()
        if n < 2:
            return ErStepM.nothing()
        a, b = draw_two_from_range(self._rng, n)
        edge = (a, b) if a < b else (b, a)
        add = self._rng.random() < self._prob
        if add == self._graph.container(a).is_adjacent(b):
            return ErStepM.nothing()
        if add:
            self._graph.add_edge(*edge)
            return ErStepM(StepKind.ADDED_EDGE, edge=edge)
        positions = self._graph._remove_edge_positions(*edge)
        return ErStepM(StepKind.REMOVED_EDGE, edge=edge, positions=positions)

    # =========================================================================
    # UNDO
    # =========================================================================

    def _toggle_back(self, token: ErStepM) -> ErStepM:
        if token.kind is StepKind.ADDED_EDGE:
            positions = self._graph._remove_edge_positions(*token.edge)
            return ErStepM(StepKind.REMOVED_EDGE, edge=token.edge, positions=positions)
        if token.positions is None:
            self._graph.add_edge(*token.edge)
        else:
            self._graph._add_edge_at(*token.edge, *token.positions)
        return ErStepM(StepKind.ADDED_EDGE, edge=token.edge)

    def undo_step(self, token: ErStepM) -> ErStepM:
        if not isinstance(token, ErStepM):
            raise UndoError(f"Expected ErStepM, got {type(token).__name__}", token=token)
        if token.is_rejected:
            return token
        if token.kind not in (StepKind.ADDED_EDGE, StepKind.REMOVED_EDGE) or token.edge is None:
            raise UndoError(f"Cannot undo step {token}", token=token)

        a, b = token.edge
        degree_a, degree_b = self._graph.degree(a), self._graph.degree(b)
        if degree_a is None or degree_b is None or a == b:
            raise UndoError(f"Token {token} does not fit this graph", token=token)
        adjacent = self._graph.container(a).is_adjacent(b)
        if token.kind is StepKind.ADDED_EDGE and not adjacent:
            raise UndoError(f"Edge {token.edge} was not added: it does not exist", token=token)
        if token.kind is StepKind.REMOVED_EDGE:
            if adjacent:
                raise UndoError(f"Edge {token.edge} was not removed: it exists", token=token)
            if token.positions is not None and (
                token.positions[0] > degree_a or token.positions[1] > degree_b
            ):
                raise UndoError(f"Token {token} holds stale adjacency positions", token=token)
        return self._toggle_back(token)

    def undo_step_quiet(self, token: ErStepM) -> None:
        if not token.is_rejected:
            self._toggle_back(token)
