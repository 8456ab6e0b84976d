"""
Random number helpers shared by the ensembles.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

import numpy as np

RngLike = Optional[Union[int, np.random.SeedSequence, np.random.Generator]]


def make_rng(seed: RngLike = None) -> np.random.Generator:
    """Build a generator from a seed; an existing generator is used as is."""
    return np.random.default_rng(seed)


def draw_two_from_range(rng: np.random.Generator, high: int) -> Tuple[int, int]:
    """
    Draw two distinct integers uniformly from ``[0, high)``.

    The second value is drawn from one slot fewer and shifted past the first,
    which keeps the pair uniform without rejection.
    """
    if high < 2:
        raise ValueError(f"Need at least two values to draw from, got high={high}")
    first = int(rng.integers(high))
    second = int(rng.integers(high - 1))
    if second >= first:
        second += 1
    return first, second


def draw_excluding(rng: np.random.Generator, high: int, *excluded: int) -> int:
    """Draw uniformly from ``[0, high)`` without the distinct values in ``excluded``."""
    skip = sorted(set(excluded))
    if high - len(skip) < 1:
        raise ValueError(f"Nothing left to draw from [0, {high}) excluding {skip}")
    value = int(rng.integers(high - len(skip)))
    for s in skip:
        if value >= s:
            value += 1
    return value
