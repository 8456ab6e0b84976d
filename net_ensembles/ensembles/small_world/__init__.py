"""Watts–Strogatz small-world ensemble."""

from net_ensembles.ensembles.small_world.ensemble import SwEnsemble
from net_ensembles.ensembles.small_world.sw_graph import SwContainer, SwEdge, SwGraph

__all__ = ["SwEnsemble", "SwGraph", "SwContainer", "SwEdge"]
