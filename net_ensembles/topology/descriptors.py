"""
Topological descriptors of ensemble graphs.

Collects the observables a sampler usually records for a graph into one
record, and follows them along a Markov chain.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import networkx as nx
import numpy as np

from net_ensembles.ensembles.traits import MarkovChain, WithGraph
from net_ensembles.graph.generic_graph import GenericGraph

logger = logging.getLogger(__name__)


@dataclass
class TopologicalDescriptor:
    """Snapshot of the structural observables of one graph."""

    # Counts
    num_vertices: int = 0
    num_edges: int = 0
    leaf_count: int = 0

    # Degree statistics
    mean_degree: float = 0.0
    degree_variance: float = 0.0
    max_degree: int = 0

    # Connectivity
    num_components: int = 0
    largest_component: int = 0
    is_connected: Optional[bool] = None
    diameter: Optional[int] = None

    # Clustering
    transitivity: float = 0.0
    average_clustering: float = 0.0

    # Cores and cut structure
    q_core_size: Optional[int] = None
    largest_biconnected_component: int = 0

    # Load
    max_vertex_load: float = 0.0
    mean_vertex_load: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_vector(self) -> np.ndarray:
        """
        Numeric feature vector. Undefined entries (connectivity of tiny
        graphs, diameter of disconnected graphs, q-core size for ``q < 2``)
        become ``nan``.
        """

        def _num(value: Any) -> float:
            return float("nan") if value is None else float(value)

        return np.array(
            [
                self.num_vertices,
                self.num_edges,
                self.leaf_count,
                self.mean_degree,
                self.degree_variance,
                self.max_degree,
                self.num_components,
                self.largest_component,
                _num(self.is_connected),
                _num(self.diameter),
                self.transitivity,
                self.average_clustering,
                _num(self.q_core_size),
                self.largest_biconnected_component,
                self.max_vertex_load,
                self.mean_vertex_load,
            ],
            dtype=np.float64,
        )


class TopologicalDescriptorExtractor:
    """
    Computes :class:`TopologicalDescriptor` records.

    The diameter and vertex load cost one BFS per vertex; they can be
    switched off for large graphs.
    """

    def __init__(
        self,
        q: int = 2,
        compute_diameter: bool = True,
        compute_load: bool = True,
        include_endpoints: bool = False,
    ):
        """
        Initialize the descriptor extractor.

        Args:
            q: Core order used for ``q_core_size``.
            compute_diameter: Whether to compute the diameter.
            compute_load: Whether to compute vertex load statistics.
            include_endpoints: Passed to ``vertex_load``.
        """
        self.q = q
        self.compute_diameter = compute_diameter
        self.compute_load = compute_load
        self.include_endpoints = include_endpoints

    def extract(self, graph: GenericGraph) -> TopologicalDescriptor:
        """
        Extract the descriptor of a graph.

        Args:
            graph: Graph to analyze.

        Returns:
            TopologicalDescriptor of the current state.
        """
        descriptor = TopologicalDescriptor()
        descriptor.num_vertices = graph.vertex_count()
        descriptor.num_edges = graph.edge_count()

        if graph.vertex_count() == 0:
            return descriptor

        descriptor.leaf_count = graph.leaf_count()

        degrees = graph.degree_vec()
        descriptor.mean_degree = float(np.mean(degrees))
        descriptor.degree_variance = float(np.var(degrees))
        descriptor.max_degree = int(np.max(degrees))

        components = graph.connected_components()
        descriptor.num_components = len(components)
        descriptor.largest_component = components[0]
        descriptor.is_connected = graph.is_connected()
        if self.compute_diameter:
            descriptor.diameter = graph.diameter()

        descriptor.transitivity = graph.transitivity()
        descriptor.average_clustering = float(nx.average_clustering(graph.to_networkx()))

        descriptor.q_core_size = graph.q_core_size(self.q)
        biconnected = graph.vertex_biconnected_components()
        descriptor.largest_biconnected_component = biconnected[0] if biconnected else 0

        if self.compute_load:
            load = graph.vertex_load(self.include_endpoints)
            descriptor.max_vertex_load = float(np.max(load))
            descriptor.mean_vertex_load = float(np.mean(load))

        return descriptor

    def extract_chain(self, ensemble: Any, steps: int) -> List[TopologicalDescriptor]:
        """
        Run ``steps`` Markov steps on ``ensemble`` and describe the graph
        before the first step and after each step.

        Returns:
            ``steps + 1`` descriptors.
        """
        if not isinstance(ensemble, MarkovChain) or not isinstance(ensemble, WithGraph):
            raise TypeError(f"{type(ensemble).__name__} is not a Markov chain ensemble")
        descriptors = [self.extract(ensemble.graph())]
        for _ in range(steps):
            ensemble.markov_step()
            descriptors.append(self.extract(ensemble.graph()))
        logger.debug("Extracted %d descriptors along the chain", len(descriptors))
        return descriptors

    def extract_evolution_features(
        self, descriptors: List[TopologicalDescriptor]
    ) -> Dict[str, np.ndarray]:
        """
        Turn a list of descriptors into per-observable time series.

        Returns dictionary of arrays, one entry per descriptor field.
        """
        if not descriptors:
            return {}
        vectors = np.vstack([d.to_vector() for d in descriptors])
        names = list(descriptors[0].to_dict())
        return {name: vectors[:, k] for k, name in enumerate(names)}


def extract_descriptor(graph: GenericGraph, q: int = 2) -> TopologicalDescriptor:
    """Descriptor of ``graph`` with every observable enabled."""
    return TopologicalDescriptorExtractor(q=q).extract(graph)


def extract_chain(ensemble: Any, steps: int, q: int = 2) -> List[TopologicalDescriptor]:
    """Descriptors along ``steps`` Markov steps of ``ensemble``."""
    return TopologicalDescriptorExtractor(q=q).extract_chain(ensemble, steps)
