"""Graph builders and invariant checks shared by the test modules."""

import numpy as np

from net_ensembles import GenericGraph, Graph


def path_graph(n: int) -> Graph:
    graph = Graph(n)
    for i in range(n - 1):
        graph.add_edge(i, i + 1)
    return graph


def cycle_graph(n: int) -> Graph:
    graph = path_graph(n)
    graph.add_edge(n - 1, 0)
    return graph


def random_graph(n: int, p: float, seed: int) -> Graph:
    rng = np.random.default_rng(seed)
    graph = Graph(n)
    for i in range(n):
        for j in range(i + 1, n):
            if rng.random() < p:
                graph.add_edge(i, j)
    return graph


def assert_consistent(graph: GenericGraph) -> None:
    """Check symmetry, absence of self loops and duplicates, and the edge count."""
    total = 0
    for container in graph.container_iter():
        adj = container.adjacency()
        assert container.id not in adj, f"Self loop at {container.id}"
        assert len(set(adj)) == len(adj), f"Duplicate neighbours at {container.id}: {adj}"
        for n in adj:
            assert graph.container(n).is_adjacent(container.id), (
                f"Edge {container.id}-{n} is not symmetric"
            )
        total += len(adj)
    assert total == 2 * graph.edge_count(), f"Edge count {graph.edge_count()} != {total}/2"
