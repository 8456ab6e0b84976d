"""
Unit tests for topological descriptors.

Run with: pytest tests/test_descriptors.py -v
"""

import math

import numpy as np
import pytest

from net_ensembles import ErEnsembleC, Graph, SwEnsemble
from net_ensembles.topology import (
    TopologicalDescriptor,
    TopologicalDescriptorExtractor,
    extract_chain,
    extract_descriptor,
)
from tests.helpers import path_graph


class TestExtract:
    """Tests for single graph descriptors."""

    def test_path_graph(self):
        """Test the descriptor of the four vertex path."""
        d = extract_descriptor(path_graph(4))
        assert d.num_vertices == 4
        assert d.num_edges == 3
        assert d.leaf_count == 2
        assert d.mean_degree == pytest.approx(1.5)
        assert d.max_degree == 2
        assert d.num_components == 1
        assert d.largest_component == 4
        assert d.is_connected is True
        assert d.diameter == 3
        assert d.transitivity == 0.0
        assert d.q_core_size == 0
        assert d.largest_biconnected_component == 2
        # inner vertices carry 4 ordered paths each: 1 carries 0-2, 0-3 and reverse
        assert d.max_vertex_load == pytest.approx(4.0)

    def test_empty_graph(self):
        """Test that the empty graph gives the default record."""
        d = extract_descriptor(Graph(0))
        assert d == TopologicalDescriptor()

    def test_vector_matches_fields(self):
        """Test that the vector has one entry per field, nan for undefined."""
        d = extract_descriptor(Graph(1))
        vector = d.to_vector()
        assert len(vector) == len(d.to_dict())
        assert math.isnan(vector[list(d.to_dict()).index("diameter")])

    def test_optional_parts(self):
        """Test switching off the expensive observables."""
        extractor = TopologicalDescriptorExtractor(compute_diameter=False, compute_load=False)
        d = extractor.extract(path_graph(5))
        assert d.diameter is None
        assert d.max_vertex_load == 0.0


class TestChain:
    """Tests for descriptors along a Markov chain."""

    def test_chain_length(self):
        """Test that every step is recorded."""
        ensemble = ErEnsembleC(12, 18, rng=1)
        descriptors = extract_chain(ensemble, 10)
        assert len(descriptors) == 11
        assert all(d.num_edges == 18 for d in descriptors)

    def test_evolution_features(self):
        """Test turning descriptors into time series."""
        ensemble = SwEnsemble(16, 0.2, rng=2)
        extractor = TopologicalDescriptorExtractor()
        series = extractor.extract_evolution_features(extractor.extract_chain(ensemble, 5))
        assert set(series) == set(TopologicalDescriptor().to_dict())
        assert series["num_edges"].shape == (6,)
        np.testing.assert_allclose(series["num_edges"], 32.0)

    def test_rejects_non_chains(self):
        """Test that plain graphs are not accepted as chains."""
        with pytest.raises(TypeError):
            extract_chain(path_graph(3), 2)
