"""
net_ensembles: random graph ensembles with reversible Markov steps

Provides Erdős–Rényi ensembles (constant edge count and constant connection
probability) and Watts–Strogatz small-world ensembles over a generic graph
type, together with the structural observables used when sampling them:
connectivity, diameter, transitivity, q-core, vertex load and biconnected
components.
"""

__version__ = "0.1.0"
__author__ = "net_ensembles Contributors"

from net_ensembles.graph import (
    AdjContainer,
    CountingNode,
    EdgeDoesNotExistError,
    EdgeExistsError,
    EmptyNode,
    GenericGraph,
    Graph,
    GraphError,
    GraphMutatedError,
    IndexOutOfRangeError,
    InvariantViolationError,
    Node,
    NodeContainer,
    SelfLoopError,
    UndoError,
)
from net_ensembles.ensembles import (
    ErEnsembleC,
    ErEnsembleM,
    ErStepC,
    ErStepM,
    HasRng,
    MarkovChain,
    SimpleSample,
    StepKind,
    SwChangeState,
    SwEnsemble,
    SwGraph,
    WithGraph,
)
from net_ensembles.topology import TopologicalDescriptor, extract_descriptor
from net_ensembles.utils.config import ErCConfig, ErMConfig, SwConfig, build_ensemble

__all__ = [
    # Graphs
    "GenericGraph",
    "Graph",
    "AdjContainer",
    "NodeContainer",
    "Node",
    "EmptyNode",
    "CountingNode",
    # Errors
    "GraphError",
    "EdgeExistsError",
    "EdgeDoesNotExistError",
    "IndexOutOfRangeError",
    "SelfLoopError",
    "GraphMutatedError",
    "InvariantViolationError",
    "UndoError",
    # Ensembles
    "ErEnsembleC",
    "ErEnsembleM",
    "SwEnsemble",
    "SwGraph",
    "HasRng",
    "SimpleSample",
    "MarkovChain",
    "WithGraph",
    "StepKind",
    "ErStepC",
    "ErStepM",
    "SwChangeState",
    # Descriptors
    "TopologicalDescriptor",
    "extract_descriptor",
    # Configuration
    "ErCConfig",
    "ErMConfig",
    "SwConfig",
    "build_ensemble",
]
