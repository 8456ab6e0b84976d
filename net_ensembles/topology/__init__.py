"""Topological descriptors of ensemble graphs."""

from net_ensembles.topology.descriptors import (
    TopologicalDescriptor,
    TopologicalDescriptorExtractor,
    extract_chain,
    extract_descriptor,
)

__all__ = [
    "TopologicalDescriptor",
    "TopologicalDescriptorExtractor",
    "extract_chain",
    "extract_descriptor",
]
