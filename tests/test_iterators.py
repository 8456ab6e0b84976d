"""
Unit tests for graph traversals.

Run with: pytest tests/test_iterators.py -v
"""

import pytest

from net_ensembles import CountingNode, Graph, GraphMutatedError
from net_ensembles.graph.iterators import Bfs


@pytest.fixture
def small_tree() -> Graph:
    """Vertex 0 with children 2 and 1 (in that order), 1 with child 3, 4 isolated."""
    graph = Graph(5, node_factory=CountingNode)
    graph.add_edge(0, 2)
    graph.add_edge(0, 1)
    graph.add_edge(1, 3)
    return graph


# =============================================================================
# TEST: DEPTH FIRST SEARCH
# =============================================================================

class TestDfs:
    """Tests for depth first traversals."""

    def test_preorder_in_adjacency_order(self, small_tree):
        """Test that neighbours are explored in list order."""
        assert list(small_tree.dfs(0)) == [0, 2, 1, 3]

    def test_unreachable_vertices_absent(self, small_tree):
        """Test that the isolated vertex is never visited."""
        assert 4 not in list(small_tree.dfs(3))
        assert list(small_tree.dfs(4)) == [4]

    def test_invalid_start(self, small_tree):
        """Test that an out of range start yields nothing."""
        assert list(small_tree.dfs(5)) == []
        assert list(small_tree.dfs(-1)) == []

    def test_restartable(self, small_tree):
        """Test that each call starts a fresh traversal."""
        assert list(small_tree.dfs(1)) == list(small_tree.dfs(1))

    def test_with_index(self, small_tree):
        """Test that payloads are paired with vertex ids."""
        pairs = list(small_tree.dfs_with_index(0))
        assert [i for i, _ in pairs] == [0, 2, 1, 3]
        assert all(node.index == i for i, node in pairs)

    def test_deep_path(self):
        """Test that long paths do not hit recursion limits."""
        graph = Graph(5000)
        for i in range(4999):
            graph.add_edge(i, i + 1)
        assert sum(1 for _ in graph.dfs(0)) == 5000


# =============================================================================
# TEST: BREADTH FIRST SEARCH
# =============================================================================

class TestBfs:
    """Tests for breadth first traversals."""

    def test_depths(self, small_tree):
        """Test visiting order and depths."""
        assert list(small_tree.bfs_index_depth(0)) == [(0, 0), (2, 1), (1, 1), (3, 2)]

    def test_start_from_leaf(self, small_tree):
        """Test depths from a leaf."""
        assert dict(small_tree.bfs_index_depth(3)) == {3: 0, 1: 1, 0: 2, 2: 3}

    def test_invalid_start(self, small_tree):
        """Test that an out of range start yields nothing."""
        assert list(small_tree.bfs_index_depth(10)) == []

    def test_reuse(self, small_tree):
        """Test that a traversal can be restarted at another vertex."""
        bfs = Bfs(small_tree, 0)
        first = list(bfs)
        second = list(bfs.reuse(3))
        assert first == list(small_tree.bfs_index_depth(0))
        assert second == list(small_tree.bfs_index_depth(3))

    def test_filtered(self, small_tree):
        """Test that rejected vertices block the search."""
        bfs = small_tree.bfs_filtered(0, lambda node, index: index != 1)
        assert [(i, depth) for i, _, depth in bfs] == [(0, 0), (2, 1)]

    def test_filtered_rejected_start(self, small_tree):
        """Test that a rejected or invalid start gives None."""
        assert small_tree.bfs_filtered(0, lambda node, index: False) is None
        assert small_tree.bfs_filtered(9, lambda node, index: True) is None


# =============================================================================
# TEST: MUTATION DURING TRAVERSAL
# =============================================================================

class TestMutationDetection:
    """Tests that traversals notice a changing graph."""

    def test_dfs_detects_mutation(self, small_tree):
        """Test that a DFS cannot continue after an edge was added."""
        it = small_tree.dfs(0)
        next(it)
        small_tree.add_edge(3, 4)
        with pytest.raises(GraphMutatedError):
            next(it)

    def test_bfs_detects_mutation(self, small_tree):
        """Test that a BFS cannot continue after an edge was removed."""
        it = small_tree.bfs_index_depth(0)
        next(it)
        small_tree.remove_edge(1, 3)
        with pytest.raises(RuntimeError):
            next(it)

    def test_interleaved_reads_are_fine(self, small_tree):
        """Test that two traversals over an unchanged graph interleave."""
        a = small_tree.dfs(0)
        b = small_tree.bfs_index_depth(0)
        assert next(a) == 0
        assert next(b) == (0, 0)
        assert list(a) == [2, 1, 3]
