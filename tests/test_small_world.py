"""
Unit tests for the small-world graph and ensemble.

These tests validate:
1. The ring lattice and its root bookkeeping
2. Rewire and reset outcomes on hand-built graphs
3. Degree-sum conservation and bit-for-bit undo along the Markov chain

Run with: pytest tests/test_small_world.py -v
"""

import pytest

from net_ensembles import (
    InvariantViolationError,
    StepKind,
    SwChangeState,
    SwEnsemble,
    SwGraph,
    UndoError,
)
from tests.helpers import assert_consistent


def edge_tags(graph: SwGraph) -> list:
    """Every adjacency entry with its root tag, in adjacency order."""
    return [[(e.to, e.originally_to) for e in c.edges()] for c in graph.container_iter()]


def ring_neighbors(i: int, n: int, distance: int) -> set:
    return {(i + k) % n for k in range(1, distance + 1)} | {(i - k) % n for k in range(1, distance + 1)}


# =============================================================================
# TEST: RING LATTICE
# =============================================================================

class TestRingLattice:
    """Tests for the deterministic starting graph."""

    def test_zero_rewiring_gives_lattice(self):
        """Test that r_prob = 0 leaves every edge at its root."""
        ensemble = SwEnsemble(10, 0.0, rng=1)
        graph = ensemble.graph()
        assert graph.edge_count() == 20
        assert graph.rewired_edge_count() == 0
        for i in range(10):
            assert set(graph.container(i).neighbors()) == ring_neighbors(i, 10, 2)
            assert graph.count_root(i) == 2
            assert all(e.is_at_root() for e in graph.container(i).root_edges())
        assert_consistent(graph)

    def test_neighbor_distance(self):
        """Test lattices with other reaches."""
        ensemble = SwEnsemble(9, 0.0, rng=2, neighbor_distance=3)
        graph = ensemble.graph()
        assert graph.edge_count() == 27
        assert set(graph.container(0).neighbors()) == ring_neighbors(0, 9, 3)

    def test_too_small_ring(self):
        """Test that rings without room for the lattice are rejected."""
        with pytest.raises(ValueError):
            SwEnsemble(4, 0.1)
        with pytest.raises(ValueError):
            SwGraph(4).init_ring(2)
        with pytest.raises(ValueError):
            SwEnsemble(10, 1.5)

    def test_full_rewiring_keeps_structure(self):
        """Test that randomize with r_prob = 1 keeps edge and root counts."""
        ensemble = SwEnsemble(30, 1.0, rng=3)
        graph = ensemble.graph()
        assert graph.edge_count() == 60
        assert graph.rewired_edge_count() > 0
        assert all(graph.count_root(i) == 2 for i in range(30))
        assert_consistent(graph)


# =============================================================================
# TEST: REWIRE AND RESET
# =============================================================================

class TestRewireReset:
    """Tests for rewire_edge / reset_edge on a distance-1 ring of 8 vertices."""

    @pytest.fixture
    def ring(self) -> SwGraph:
        graph = SwGraph(8)
        graph.init_ring(1)
        return graph

    def test_rewire(self, ring):
        """Test a successful rewire."""
        state = ring.rewire_edge(0, 1, 4)
        assert state == SwChangeState(StepKind.REWIRE, 0, 1, 4)
        assert ring.container(0).is_adjacent(4)
        assert not ring.container(1).is_adjacent(0)
        assert ring.edge_count() == 8
        assert ring.rewired_edge_count() == 1
        assert_consistent(ring)

    def test_rewire_outcomes(self, ring):
        """Test the rejected rewire outcomes."""
        assert ring.rewire_edge(0, 1, 1).kind is StepKind.NOTHING
        # 7 roots an edge towards 0, so 0 is already adjacent to 7
        assert ring.rewire_edge(0, 1, 7).kind is StepKind.BLOCKED_BY_EXISTING_EDGE
        # the edge 0-7 is rooted at 7, not at 0
        assert ring.rewire_edge(0, 7, 3).kind is StepKind.INVALID_ADJACENCY
        assert ring.rewire_edge(0, 5, 3).kind is StepKind.INVALID_ADJACENCY

    def test_reset(self, ring):
        """Test moving a rewired edge back to its root."""
        ring.rewire_edge(0, 1, 4)
        state = ring.reset_edge(0, 4)
        assert state == SwChangeState(StepKind.RESET, 0, 4, 1)
        assert ring.container(0).is_adjacent(1)
        assert ring.rewired_edge_count() == 0
        assert ring.reset_edge(0, 1).kind is StepKind.NOTHING

    def test_reset_outcomes(self, ring):
        """Test the rejected and invalid reset outcomes."""
        ring.rewire_edge(0, 1, 4)
        state = ring.reset_edge(0, 5)
        assert state.kind is StepKind.GRAPH_ERROR
        assert state.error is not None
        assert ring.reset_edge(0, 7).kind is StepKind.INVALID_ADJACENCY
        # give 0 another connection to its root target 1
        assert ring.rewire_edge(1, 2, 0).kind is StepKind.REWIRE
        assert ring.reset_edge(0, 4).kind is StepKind.BLOCKED_BY_EXISTING_EDGE


# =============================================================================
# TEST: ENSEMBLE MARKOV CHAIN
# =============================================================================

class TestSwEnsemble:
    """Tests for steps, undo and parameters of the ensemble."""

    def test_draw_edge(self):
        """Test that drawn edges are rooted and targets are fresh."""
        ensemble = SwEnsemble(20, 0.3, rng=4)
        for _ in range(200):
            i0, i1, i2 = ensemble.draw_edge()
            assert i2 not in (i0, i1)
            assert (i0, i1) in ensemble.graph().root_edges()

    def test_steps_keep_invariants(self):
        """Test that steps conserve the edge count and root counts."""
        ensemble = SwEnsemble(20, 0.4, rng=5)
        allowed = {
            StepKind.REWIRE,
            StepKind.RESET,
            StepKind.NOTHING,
            StepKind.BLOCKED_BY_EXISTING_EDGE,
        }
        tokens = ensemble.m_steps(500)
        assert {t.kind for t in tokens} <= allowed
        assert StepKind.REWIRE in {t.kind for t in tokens}
        assert StepKind.RESET in {t.kind for t in tokens}
        assert ensemble.edge_count() == 40
        assert all(ensemble.graph().count_root(i) == 2 for i in range(20))
        assert_consistent(ensemble.graph())

    def test_round_trip(self):
        """Test that undo restores adjacency lists and root tags bit for bit."""
        ensemble = SwEnsemble(15, 0.5, rng=6)
        for _ in range(300):
            before = edge_tags(ensemble.graph())
            ensemble.undo_step(ensemble.markov_step())
            assert edge_tags(ensemble.graph()) == before
            ensemble.markov_step()

    def test_chained_round_trip(self):
        """Test undoing a long sequence of steps."""
        ensemble = SwEnsemble(15, 0.5, rng=7)
        before = edge_tags(ensemble.graph())
        rewired = ensemble.graph().rewired_edge_count()
        ensemble.undo_steps(ensemble.m_steps(200))
        assert edge_tags(ensemble.graph()) == before
        ensemble.undo_steps_quiet(ensemble.m_steps(200))
        assert edge_tags(ensemble.graph()) == before
        assert ensemble.graph().rewired_edge_count() == rewired

    def test_undo_mismatch(self):
        """Test that checked undo refuses a token that was already undone."""
        ensemble = SwEnsemble(15, 1.0, rng=8)
        token = ensemble.markov_step()
        while token.kind is not StepKind.REWIRE:
            token = ensemble.markov_step()
        ensemble.undo_step(token)
        before = ensemble.graph().adjacency_snapshot()
        with pytest.raises(UndoError):
            ensemble.undo_step(token)
        assert ensemble.graph().adjacency_snapshot() == before

    def test_set_r_prob_keeps_edges(self):
        """Test that changing r_prob does not touch rewired edges."""
        ensemble = SwEnsemble(20, 0.8, rng=9)
        before = ensemble.graph().adjacency_snapshot()
        ensemble.set_r_prob(0.0)
        assert ensemble.r_prob() == 0.0
        assert ensemble.graph().adjacency_snapshot() == before
        with pytest.raises(ValueError):
            ensemble.set_r_prob(-0.5)

    def test_zero_r_prob_steps_reset(self):
        """Test that with r_prob = 0 the chain walks back to the lattice."""
        ensemble = SwEnsemble(12, 1.0, rng=10)
        ensemble.set_r_prob(0.0)
        previous = ensemble.graph().rewired_edge_count()
        for _ in range(500):
            token = ensemble.markov_step()
            assert token.kind in (
                StepKind.RESET,
                StepKind.NOTHING,
                StepKind.BLOCKED_BY_EXISTING_EDGE,
            )
            current = ensemble.graph().rewired_edge_count()
            assert current <= previous, "Resetting must never add rewired edges"
            previous = current

    def test_invalid_state_raises(self, monkeypatch):
        """Test that an inconsistent graph surfaces as an exception."""
        ensemble = SwEnsemble(12, 1.0, rng=11)
        monkeypatch.setattr(
            ensemble.graph(), "rewire_edge", lambda *args: SwChangeState.invalid_adjacency()
        )
        with pytest.raises(InvariantViolationError) as info:
            ensemble.markov_step()
        assert info.value.state.kind is StepKind.INVALID_ADJACENCY
