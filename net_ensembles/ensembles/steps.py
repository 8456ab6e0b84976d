"""
Markov step tokens.

A token describes exactly one mutation performed by ``markov_step`` and is
enough to invert it. Tokens hold no reference to the graph. Besides the
public description they may carry the adjacency-list positions the removed
entries occupied, so that undo restores list order as well as topology.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple

Edge = Tuple[int, int]


class StepKind(Enum):
    """Outcome of a single Markov step."""

    ADDED_EDGE = auto()
    REMOVED_EDGE = auto()
    SWAPPED_EDGE = auto()  # one edge removed, another added
    REWIRE = auto()  # rooted edge moved to a new target
    RESET = auto()  # rooted edge moved back to its ring-lattice target
    NOTHING = auto()
    BLOCKED_BY_EXISTING_EDGE = auto()
    INVALID_ADJACENCY = auto()
    GRAPH_ERROR = auto()


REJECTED_KINDS = frozenset({StepKind.NOTHING, StepKind.BLOCKED_BY_EXISTING_EDGE})
INVALID_KINDS = frozenset({StepKind.INVALID_ADJACENCY, StepKind.GRAPH_ERROR})


@dataclass(frozen=True)
class StepToken:
    """Common base of all step tokens."""

    kind: StepKind

    @property
    def is_rejected(self) -> bool:
        """True for steps that left the graph unchanged on purpose."""
        return self.kind in REJECTED_KINDS

    @property
    def is_valid(self) -> bool:
        """False if the step reports a broken graph invariant."""
        return self.kind not in INVALID_KINDS


@dataclass(frozen=True)
class ErStepC(StepToken):
    """Step of the constant edge count ensemble."""

    removed: Optional[Edge] = None
    inserted: Optional[Edge] = None
    index: Optional[int] = None
    positions: Optional[Tuple[int, int]] = field(default=None, compare=False, repr=False)

    @classmethod
    def nothing(cls) -> "ErStepC":
        return cls(StepKind.NOTHING)

    @classmethod
    def blocked(cls) -> "ErStepC":
        return cls(StepKind.BLOCKED_BY_EXISTING_EDGE)


@dataclass(frozen=True)
class ErStepM(StepToken):
    """Step of the constant probability ensemble: one edge toggled."""

    edge: Optional[Edge] = None
    positions: Optional[Tuple[int, int]] = field(default=None, compare=False, repr=False)

    @classmethod
    def nothing(cls) -> "ErStepM":
        return cls(StepKind.NOTHING)


@dataclass(frozen=True)
class SwChangeState(StepToken):
    """
    Result of a small-world rewire or reset.

    For ``REWIRE`` the edge rooted at ``i0`` moved from ``i1`` to ``i2``; for
    ``RESET`` it moved from ``i1`` back to its root target ``i2``.
    ``GRAPH_ERROR`` keeps the underlying exception in ``error``.
    """

    i0: Optional[int] = None
    i1: Optional[int] = None
    i2: Optional[int] = None
    error: Optional[Exception] = field(default=None, compare=False)
    position: Optional[int] = field(default=None, compare=False, repr=False)

    @classmethod
    def rewire(cls, i0: int, i1: int, i2: int, position: int) -> "SwChangeState":
        return cls(StepKind.REWIRE, i0, i1, i2, position=position)

    @classmethod
    def reset(cls, i0: int, i1: int, i2: int, position: int) -> "SwChangeState":
        return cls(StepKind.RESET, i0, i1, i2, position=position)

    @classmethod
    def nothing(cls) -> "SwChangeState":
        return cls(StepKind.NOTHING)

    @classmethod
    def blocked(cls) -> "SwChangeState":
        return cls(StepKind.BLOCKED_BY_EXISTING_EDGE)

    @classmethod
    def invalid_adjacency(cls) -> "SwChangeState":
        return cls(StepKind.INVALID_ADJACENCY)

    @classmethod
    def graph_error(cls, error: Exception) -> "SwChangeState":
        return cls(StepKind.GRAPH_ERROR, error=error)
