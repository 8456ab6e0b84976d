"""
Undirected simple graph over a fixed vertex set.

Vertices are dense integer ids into a list of adjacency containers. The vertex
count never changes after construction; only edges are added and removed.
Besides the mutation primitives this module hosts every structural
observable used by the ensembles (components, diameter, transitivity, q-core,
vertex load, biconnected components).
"""

from __future__ import annotations

import copy
from collections import deque
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

import networkx as nx
import numpy as np

from net_ensembles.graph.containers import AdjContainer, NodeContainer
from net_ensembles.graph.errors import IndexOutOfRangeError, SelfLoopError
from net_ensembles.graph.iterators import Bfs, BfsFiltered, Dfs, DfsWithIndex
from net_ensembles.graph.nodes import Node, NodeFactory, resolve_node_factory


class GenericGraph:
    """
    Undirected graph of adjacency containers.

    Parameters
    ----------
    size : int
        Number of vertices. All vertices start isolated.
    node_factory : callable or Node subclass, optional
        Creates the payload of vertex ``i`` as ``node_factory(i)``.
        Defaults to :class:`~net_ensembles.graph.nodes.EmptyNode`.
    container_class : type, optional
        Adjacency container type. Subclasses set a default through the
        ``container_class`` class attribute.
    """

    container_class: Type[AdjContainer] = NodeContainer

    def __init__(
        self,
        size: int,
        node_factory: Optional[Union[NodeFactory, Type[Node]]] = None,
        container_class: Optional[Type[AdjContainer]] = None,
    ):
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
            raise TypeError(f"Graph size must be an integer, got {type(size).__name__}")
        if size < 0:
            raise ValueError(f"Graph size must be non-negative, got {size}")

        if container_class is not None:
            self.container_class = container_class
        factory = resolve_node_factory(node_factory)
        self._vertices: List[AdjContainer] = [
            self.container_class(i, factory(i)) for i in range(int(size))
        ]
        self._edge_count = 0
        # Bumped on every topology or ordering change; read by traversals.
        self._version = 0

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_payloads(
        cls,
        payloads: Iterable[Any],
        container_class: Optional[Type[AdjContainer]] = None,
    ) -> "GenericGraph":
        """Create a graph with one isolated vertex per payload, in order."""
        payloads = list(payloads)
        return cls(len(payloads), node_factory=lambda i: payloads[i], container_class=container_class)

    @classmethod
    def complete_graph(
        cls,
        size: int,
        node_factory: Optional[Union[NodeFactory, Type[Node]]] = None,
    ) -> "GenericGraph":
        """Create the complete graph on ``size`` vertices."""
        graph = cls(size, node_factory=node_factory)
        for i in range(graph.vertex_count()):
            for j in range(i + 1, graph.vertex_count()):
                graph.add_edge(i, j)
        return graph

    def copy(self) -> "GenericGraph":
        """Deep copy, payloads included."""
        return copy.deepcopy(self)

    def clone_topology(self, map_fn: Callable[[Any], Any]) -> "Graph":
        """
        Create a plain :class:`Graph` with the same edges, in the same
        adjacency order, whose payloads are ``map_fn(payload)``.
        """
        clone = Graph(self.vertex_count(), node_factory=lambda i: map_fn(self._vertices[i].contained))
        for container, target in zip(self._vertices, clone._vertices):
            target._adj = list(container.neighbors())
        clone._edge_count = self._edge_count
        return clone

    def cloned_subgraph(self, vertex_ids: Sequence[int]) -> Optional["Graph"]:
        """
        Induced subgraph on ``vertex_ids``.

        Vertex ``vertex_ids[k]`` becomes vertex ``k`` of the new graph and
        keeps a deep copy of its payload. Returns ``None`` for an empty
        selection or when any id is out of range.
        """
        if len(vertex_ids) == 0:
            return None
        if any(self.container_checked(i) is None for i in vertex_ids):
            return None
        mapping: Dict[int, int] = {}
        for k, i in enumerate(vertex_ids):
            if int(i) in mapping:
                raise ValueError(f"Vertex {i} selected more than once")
            mapping[int(i)] = k

        sub = Graph(
            len(vertex_ids),
            node_factory=lambda k: copy.deepcopy(self._vertices[int(vertex_ids[k])].contained),
        )
        for old, new in mapping.items():
            for n in self._vertices[old].neighbors():
                other = mapping.get(n)
                if other is not None and new < other:
                    sub.add_edge(new, other)
        return sub

    def to_networkx(self) -> nx.Graph:
        """Convert to a ``networkx.Graph``; payloads go to the ``node`` attribute."""
        G = nx.Graph()
        G.add_nodes_from((c.id, {"node": c.contained}) for c in self._vertices)
        G.add_edges_from(self.edges())
        return G

    # =========================================================================
    # ACCESS
    # =========================================================================

    def _index(self, i: Any) -> int:
        if (
            isinstance(i, (int, np.integer))
            and not isinstance(i, bool)
            and 0 <= i < len(self._vertices)
        ):
            return int(i)
        raise IndexOutOfRangeError(i, len(self._vertices))

    def vertex_count(self) -> int:
        return len(self._vertices)

    def edge_count(self) -> int:
        return self._edge_count

    def container(self, i: int) -> AdjContainer:
        """Container of vertex ``i``; raises :class:`IndexOutOfRangeError`."""
        return self._vertices[self._index(i)]

    def container_checked(self, i: int) -> Optional[AdjContainer]:
        """Container of vertex ``i`` or ``None`` if out of range."""
        try:
            return self.container(i)
        except IndexOutOfRangeError:
            return None

    def container_iter(self) -> Iterator[AdjContainer]:
        return iter(self._vertices)

    def container_iter_neighbors(self, i: int) -> Iterator[AdjContainer]:
        """Containers of the neighbours of ``i``."""
        return (self._vertices[n] for n in self.container(i).neighbors())

    def at(self, i: int) -> Any:
        """Payload of vertex ``i``."""
        return self.container(i).contained

    def set_at(self, i: int, payload: Any) -> None:
        self.container(i).contained = payload

    def contained_iter(self) -> Iterator[Any]:
        return (c.contained for c in self._vertices)

    def contained_iter_neighbors(self, i: int) -> Iterator[Any]:
        return (c.contained for c in self.container_iter_neighbors(i))

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Every edge once, as ``(i, j)`` with ``i < j``."""
        for c in self._vertices:
            for n in c.neighbors():
                if c.id < n:
                    yield c.id, n

    def adjacency_snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        """Exact adjacency state (list order included) for comparisons."""
        return tuple(c.adjacency() for c in self._vertices)

    # =========================================================================
    # MUTATION
    # =========================================================================

    def _pair(self, i: int, j: int) -> Tuple[AdjContainer, AdjContainer]:
        i, j = self._index(i), self._index(j)
        if i == j:
            raise SelfLoopError(i)
        return self._vertices[i], self._vertices[j]

    def add_edge(self, i: int, j: int) -> None:
        """
        Connect ``i`` and ``j``.

        Raises:
            IndexOutOfRangeError: if either id is out of range.
            SelfLoopError: if ``i == j``.
            EdgeExistsError: if the vertices are already adjacent.
        """
        a, b = self._pair(i, j)
        a._push(b)
        self._edge_count += 1
        self._version += 1

    def remove_edge(self, i: int, j: int) -> None:
        """
        Disconnect ``i`` and ``j``.

        Raises:
            IndexOutOfRangeError: if either id is out of range.
            SelfLoopError: if ``i == j``.
            EdgeDoesNotExistError: if the vertices are not adjacent.
        """
        self._remove_edge_positions(i, j)

    def _remove_edge_positions(self, i: int, j: int) -> Tuple[int, int]:
        a, b = self._pair(i, j)
        positions = a._remove(b)
        self._edge_count -= 1
        self._version += 1
        return positions

    def _add_edge_at(self, i: int, j: int, pos_i: int, pos_j: int) -> None:
        a, b = self._pair(i, j)
        a._insert_at(b, pos_i, pos_j)
        self._edge_count += 1
        self._version += 1

    def clear_edges(self) -> None:
        """Remove every edge."""
        for c in self._vertices:
            c._clear()
        self._edge_count = 0
        self._version += 1

    def sort_adj(self) -> None:
        """Sort every adjacency list by neighbour id."""
        for c in self._vertices:
            c.sort_adj()
        self._version += 1

    def shuffle_adjs(self, rng: np.random.Generator) -> None:
        """Randomly permute every adjacency list."""
        for c in self._vertices:
            c.shuffle_adj(rng)
        self._version += 1

    # =========================================================================
    # DEGREES
    # =========================================================================

    def degree(self, i: int) -> Optional[int]:
        """Degree of ``i``, ``None`` if out of range."""
        c = self.container_checked(i)
        return None if c is None else c.degree()

    def degree_vec(self) -> np.ndarray:
        return np.array([c.degree() for c in self._vertices], dtype=np.int64)

    def degree_histogram(self) -> np.ndarray:
        """``hist[k]`` is the number of vertices with degree ``k``."""
        return np.bincount(self.degree_vec())

    def average_degree(self) -> float:
        """``2 * edge_count / vertex_count``; ``nan`` for the empty graph."""
        if not self._vertices:
            return float("nan")
        return 2.0 * self._edge_count / len(self._vertices)

    def leaf_count(self) -> int:
        """Number of vertices with degree exactly 1."""
        return sum(1 for c in self._vertices if c.degree() == 1)

    # =========================================================================
    # TRAVERSALS
    # =========================================================================

    def dfs(self, start: int) -> Dfs:
        return Dfs(self, start)

    def dfs_with_index(self, start: int) -> DfsWithIndex:
        return DfsWithIndex(self, start)

    def bfs_index_depth(self, start: int) -> Bfs:
        return Bfs(self, start)

    def bfs_filtered(
        self, start: int, keep: Callable[[Any, int], bool]
    ) -> Optional[BfsFiltered]:
        """
        BFS restricted to vertices with ``keep(payload, index)``.

        Returns ``None`` if ``start`` is out of range or itself rejected.
        """
        c = self.container_checked(start)
        if c is None or not keep(c.contained, c.id):
            return None
        return BfsFiltered(self, start, keep)

    # =========================================================================
    # CONNECTIVITY
    # =========================================================================

    def connected_components_ids(self) -> Tuple[int, np.ndarray]:
        """
        Label every vertex with its component.

        Returns:
            Number of components and an array mapping vertex id to
            component label (labels are ``0..count-1`` in discovery order).
        """
        ids = np.full(self.vertex_count(), -1, dtype=np.int64)
        count = 0
        for root in range(self.vertex_count()):
            if ids[root] != -1:
                continue
            ids[root] = count
            queue = deque([root])
            while queue:
                v = queue.popleft()
                for n in self._vertices[v].neighbors():
                    if ids[n] == -1:
                        ids[n] = count
                        queue.append(n)
            count += 1
        return count, ids

    def connected_components(self) -> List[int]:
        """Component sizes, largest first. Empty list for the empty graph."""
        count, ids = self.connected_components_ids()
        if count == 0:
            return []
        sizes = np.bincount(ids, minlength=count)
        return sorted((int(s) for s in sizes), reverse=True)

    def is_connected(self) -> Optional[bool]:
        """
        ``None`` for graphs with fewer than two vertices, where connectivity
        is left undefined; otherwise whether there is a single component.
        """
        if self.vertex_count() < 2:
            return None
        return sum(1 for _ in self.dfs(0)) == self.vertex_count()

    def longest_shortest_path_from_index(self, i: int) -> Optional[int]:
        """Eccentricity of ``i`` within its component; ``None`` if out of range."""
        if self.container_checked(i) is None:
            return None
        return max(depth for _, depth in self.bfs_index_depth(i))

    def diameter(self) -> Optional[int]:
        """
        Largest eccentricity over all vertices, one BFS per vertex.

        ``None`` unless the graph is connected.
        """
        if not self.is_connected():
            return None
        bfs = Bfs(self, 0)
        best = 0
        for i in range(self.vertex_count()):
            for _, depth in bfs.reuse(i):
                if depth > best:
                    best = depth
        return best

    def closeness_centrality(self) -> np.ndarray:
        """
        ``(n - 1) / sum of distances`` to every reachable vertex.

        Vertices that reach nothing get ``nan``.
        """
        n = self.vertex_count()
        totals = np.zeros(n, dtype=np.float64)
        if n == 0:
            return totals
        bfs = Bfs(self, 0)
        for i in range(n):
            for _, depth in bfs.reuse(i):
                totals[i] += depth
        result = np.full(n, np.nan)
        mask = totals > 0
        result[mask] = (n - 1) / totals[mask]
        return result

    # =========================================================================
    # STRUCTURAL OBSERVABLES
    # =========================================================================

    def transitivity(self) -> float:
        """
        Global clustering coefficient.

        ``3 * triangles / connected triples``, ``0.0`` if there are no
        connected triples.
        """
        neighbor_sets = [set(c.neighbors()) for c in self._vertices]
        triples = 0
        closed = 0
        for c in self._vertices:
            adj = list(c.neighbors())
            k = len(adj)
            triples += k * (k - 1) // 2
            for a in range(k):
                na = neighbor_sets[adj[a]]
                for b in range(a + 1, k):
                    if adj[b] in na:
                        closed += 1
        if triples == 0:
            return 0.0
        # Each triangle is closed at all three of its corners.
        return closed / triples

    def q_core(self, q: int) -> List[int]:
        """
        Vertices of the q-core, ascending.

        Vertices of degree below ``q`` are peeled off repeatedly until every
        remaining vertex has at least ``q`` remaining neighbours. The graph
        itself is left untouched.
        """
        degrees = self.degree_vec()
        removed = np.zeros(self.vertex_count(), dtype=bool)
        queue = deque(int(i) for i in np.flatnonzero(degrees < q))
        removed[list(queue)] = True
        while queue:
            v = queue.popleft()
            for n in self._vertices[v].neighbors():
                if removed[n]:
                    continue
                degrees[n] -= 1
                if degrees[n] < q:
                    removed[n] = True
                    queue.append(n)
        return [int(i) for i in np.flatnonzero(~removed)]

    def q_core_size(self, q: int) -> Optional[int]:
        """
        Size of the largest connected piece of the q-core.

        ``None`` if ``q < 2`` or the graph is empty.
        """
        if q < 2 or self.vertex_count() == 0:
            return None
        core = self.q_core(q)
        if not core:
            return 0
        sub = self.cloned_subgraph(core)
        return sub.connected_components()[0]

    def vertex_load(self, include_endpoints: bool = False) -> np.ndarray:
        """
        Number of shortest paths running through each vertex.

        One BFS per source builds the predecessor DAG; path counts are then
        pushed back from the farthest vertices towards the source, split
        equally between predecessors (Newman, Phys. Rev. E 64, 016132).

        Args:
            include_endpoints: Count paths that start or end at the vertex.
                In a complete graph on ``n`` vertices every vertex then has
                load ``n - 1``, otherwise ``0``.

        Returns:
            Array of length ``vertex_count``.
        """
        n = self.vertex_count()
        load = np.zeros(n, dtype=np.float64)
        for source in range(n):
            distance = np.full(n, -1, dtype=np.int64)
            predecessors: List[List[int]] = [[] for _ in range(n)]
            ordering: List[int] = []
            distance[source] = 0
            queue = deque([source])
            while queue:
                v = queue.popleft()
                ordering.append(v)
                for w in self._vertices[v].neighbors():
                    if distance[w] == -1:
                        distance[w] = distance[v] + 1
                        queue.append(w)
                        predecessors[w].append(v)
                    elif distance[w] == distance[v] + 1:
                        predecessors[w].append(v)

            paths = np.ones(n, dtype=np.float64)
            # ordering[0] is the source itself
            for v in reversed(ordering[1:]):
                load[v] += paths[v]
                if not include_endpoints:
                    load[v] -= 1.0
                share = paths[v] / len(predecessors[v])
                for p in predecessors[v]:
                    paths[p] += share
        return load

    def vertex_biconnected_components(self, alternative_definition: bool = False) -> List[int]:
        """
        Sizes of the biconnected components, largest first.

        Uses an iterative Hopcroft-Tarjan low-link DFS with an edge stack.
        Every edge belongs to exactly one component, so a bridge forms a
        component of size 2 and isolated vertices belong to none.

        Args:
            alternative_definition: Drop components with two or fewer
                vertices.
        """
        n = self.vertex_count()
        disc = np.full(n, -1, dtype=np.int64)
        low = np.zeros(n, dtype=np.int64)
        clock = 0
        edge_stack: List[Tuple[int, int]] = []
        sizes: List[int] = []

        for root in range(n):
            if disc[root] != -1 or self._vertices[root].degree() == 0:
                continue
            disc[root] = low[root] = clock
            clock += 1
            stack = [(root, -1, self._vertices[root].neighbors())]
            while stack:
                v, parent, neighbors = stack[-1]
                descended = False
                for w in neighbors:
                    if disc[w] == -1:
                        edge_stack.append((v, w))
                        disc[w] = low[w] = clock
                        clock += 1
                        stack.append((w, v, self._vertices[w].neighbors()))
                        descended = True
                        break
                    if w != parent and disc[w] < disc[v]:
                        # back edge
                        edge_stack.append((v, w))
                        low[v] = min(low[v], disc[w])
                if descended:
                    continue
                stack.pop()
                if not stack:
                    continue
                u = stack[-1][0]
                low[u] = min(low[u], low[v])
                if low[v] >= disc[u]:
                    members = set()
                    while True:
                        edge = edge_stack.pop()
                        members.update(edge)
                        if edge == (u, v):
                            break
                    sizes.append(len(members))

        if alternative_definition:
            sizes = [s for s in sizes if s > 2]
        sizes.sort(reverse=True)
        return sizes

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(vertex_count={self.vertex_count()}, "
            f"edge_count={self.edge_count()})"
        )


class Graph(GenericGraph):
    """Graph with plain :class:`NodeContainer` adjacency."""

    container_class = NodeContainer
