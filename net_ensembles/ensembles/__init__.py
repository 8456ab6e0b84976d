"""Random graph ensembles with reversible Markov steps."""

from net_ensembles.ensembles.steps import (
    ErStepC,
    ErStepM,
    StepKind,
    StepToken,
    SwChangeState,
)
from net_ensembles.ensembles.traits import HasRng, MarkovChain, SimpleSample, WithGraph
from net_ensembles.ensembles.er_c import ErEnsembleC
from net_ensembles.ensembles.er_m import ErEnsembleM
from net_ensembles.ensembles.small_world import SwContainer, SwEdge, SwEnsemble, SwGraph

__all__ = [
    "StepKind",
    "StepToken",
    "ErStepC",
    "ErStepM",
    "SwChangeState",
    "HasRng",
    "SimpleSample",
    "MarkovChain",
    "WithGraph",
    "ErEnsembleC",
    "ErEnsembleM",
    "SwEnsemble",
    "SwGraph",
    "SwContainer",
    "SwEdge",
]
