"""
Watts–Strogatz small-world ensemble.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Type, Union

from net_ensembles.ensembles.small_world.sw_graph import SwGraph
from net_ensembles.ensembles.steps import INVALID_KINDS, StepKind, SwChangeState
from net_ensembles.ensembles.traits import HasRng, MarkovChain, SimpleSample, WithGraph
from net_ensembles.graph.errors import InvariantViolationError, UndoError
from net_ensembles.graph.nodes import Node, NodeFactory
from net_ensembles.utils.random import RngLike, draw_excluding, make_rng

logger = logging.getLogger(__name__)


def _check_r_prob(r_prob: float) -> float:
    r_prob = float(r_prob)
    if not 0.0 <= r_prob <= 1.0:
        raise ValueError(f"r_prob must be in [0, 1], got {r_prob}")
    return r_prob


class SwEnsemble(HasRng, SimpleSample, MarkovChain, WithGraph):
    """
    Small-world ensemble built on a ring lattice.

    Each vertex ``i`` roots ``neighbor_distance`` edges, initially towards
    ``i+1, ..., i+neighbor_distance``. ``randomize`` rebuilds the lattice and
    rewires every rooted edge with probability ``r_prob``. A Markov step
    picks one rooted edge and either rewires it (probability ``r_prob``) or
    resets it to its lattice target.

    Args:
        n: Number of vertices, more than ``2 * neighbor_distance``.
        r_prob: Rewiring probability in ``[0, 1]``.
        rng: Seed or generator, passed to ``numpy.random.default_rng``.
        neighbor_distance: Lattice reach on each side of a vertex.
        node_factory: Vertex payload factory.
    """

    def __init__(
        self,
        n: int,
        r_prob: float,
        rng: RngLike = None,
        neighbor_distance: int = 2,
        node_factory: Optional[Union[NodeFactory, Type[Node]]] = None,
    ):
        self._r_prob = _check_r_prob(r_prob)
        if neighbor_distance < 1:
            raise ValueError(f"neighbor_distance must be at least 1, got {neighbor_distance}")
        if n <= 2 * neighbor_distance:
            raise ValueError(
                f"Small-world ensemble with neighbor_distance={neighbor_distance} "
                f"needs more than {2 * neighbor_distance} vertices, got {n}"
            )
        self._neighbor_distance = int(neighbor_distance)
        self._graph = SwGraph(n, node_factory=node_factory)
        self._rng = make_rng(rng)
        logger.debug(
            "Creating SwEnsemble with n=%d, r_prob=%g, neighbor_distance=%d",
            n,
            self._r_prob,
            self._neighbor_distance,
        )
        self.randomize()

    def graph(self) -> SwGraph:
        return self._graph

    def r_prob(self) -> float:
        return self._r_prob

    def set_r_prob(self, r_prob: float) -> None:
        """
        Change the rewiring probability for future steps and draws.
        Edges that are already rewired stay where they are.
        """
        self._r_prob = _check_r_prob(r_prob)
        logger.debug("Rewiring probability set to %g", self._r_prob)

    def neighbor_distance(self) -> int:
        return self._neighbor_distance

    def _check_state(self, state: SwChangeState) -> SwChangeState:
        if state.kind in INVALID_KINDS:
            raise InvariantViolationError(
                f"Small-world graph is inconsistent: {state.kind.name}"
                + (f" ({state.error})" if state.error is not None else ""),
                state=state,
            )
        return state

    # =========================================================================
    # SAMPLING
    # =========================================================================

    def randomize(self) -> None:
        """
        Rebuild the ring lattice and rewire each rooted edge with probability
        ``r_prob`` to a uniform vertex other than its root. A rewire onto an
        existing neighbour is skipped and the edge stays in the lattice.
        """
        graph = self._graph
        graph.init_ring(self._neighbor_distance)
        if self._r_prob == 0.0:
            return
        n = graph.vertex_count()
        for container in graph.container_iter():
            i0 = container.id
            for target in [e.to for e in container.root_edges()]:
                if self._rng.random() < self._r_prob:
                    i2 = draw_excluding(self._rng, n, i0)
                    self._check_state(graph.rewire_edge(i0, target, i2))

    def draw_edge(self) -> Tuple[int, int, int]:
        """
        Draw a uniform rooted edge ``(i0, i1)`` and a target ``i2``.

        ``i2`` is uniform over all vertices except ``i0`` and ``i1``.
        """
        graph = self._graph
        n = graph.vertex_count()
        # every vertex roots the same number of edges
        i0 = int(self._rng.integers(n))
        roots = graph.container(i0).root_edges()
        i1 = roots[int(self._rng.integers(len(roots)))].to
        i2 = draw_excluding(self._rng, n, i0, i1)
        return i0, i1, i2

    def markov_step(self) -> SwChangeState:
        """
        Rewire a random rooted edge with probability ``r_prob``, otherwise
        reset it to its lattice target.

        Raises:
            InvariantViolationError: if the graph reports an invalid
                adjacency or an inner graph error.
        """
        i0, i1, i2 = self.draw_edge()
        if self._rng.random() < self._r_prob:
            state = self._graph.rewire_edge(i0, i1, i2)
        else:
            state = self._graph.reset_edge(i0, i1)
        return self._check_state(state)

    # =========================================================================
    # UNDO
    # =========================================================================

    def _move_back(self, token: SwChangeState) -> SwChangeState:
        # both a rewire and a reset are undone by moving the edge back to i1
        position = self._graph._rewire(token.i0, token.i2, token.i1, insert_at=token.position)
        return SwChangeState.rewire(token.i0, token.i2, token.i1, position)

    def undo_step(self, token: SwChangeState) -> SwChangeState:
        if not isinstance(token, SwChangeState):
            raise UndoError(f"Expected SwChangeState, got {type(token).__name__}", token=token)
        if token.is_rejected:
            return token
        if token.kind not in (StepKind.REWIRE, StepKind.RESET):
            raise UndoError(f"Cannot undo step of kind {token.kind.name}", token=token)

        graph = self._graph
        n = graph.vertex_count()
        i0, i1, i2 = token.i0, token.i1, token.i2
        if not all(isinstance(i, int) and 0 <= i < n for i in (i0, i1, i2)) or len({i0, i1, i2}) < 3:
            raise UndoError(f"Token {token} does not fit this graph", token=token)
        c0 = graph.container(i0)
        pos = c0._find(i2)
        if pos is None or not c0._adj[pos].is_root():
            raise UndoError(f"No edge rooted at {i0} points to {i2}", token=token)
        if token.kind is StepKind.RESET and not c0._adj[pos].is_at_root():
            raise UndoError(f"Edge rooted at {i0} is not at its lattice target {i2}", token=token)
        if c0.is_adjacent(i1):
            raise UndoError(f"Vertices {i0} and {i1} are already adjacent", token=token)
        if token.position is not None and token.position > graph.container(i1).degree():
            raise UndoError(f"Token {token} holds a stale adjacency position", token=token)
        return self._move_back(token)

    def undo_step_quiet(self, token: SwChangeState) -> None:
        if token.kind in (StepKind.REWIRE, StepKind.RESET):
            self._move_back(token)
