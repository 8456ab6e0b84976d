"""Utility functions for net_ensembles."""

from net_ensembles.utils.config import (
    Config,
    ErCConfig,
    ErMConfig,
    SwConfig,
    build_ensemble,
    load_config,
    save_config,
)
from net_ensembles.utils.random import draw_two_from_range, make_rng

__all__ = [
    "Config",
    "ErCConfig",
    "ErMConfig",
    "SwConfig",
    "build_ensemble",
    "load_config",
    "save_config",
    "draw_two_from_range",
    "make_rng",
]
