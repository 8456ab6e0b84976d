"""
Capabilities shared by all ensembles.

An ensemble mixes in the pieces it supports:

* :class:`HasRng`: owns a ``numpy.random.Generator`` that can be swapped out.
* :class:`SimpleSample`: can redraw its whole graph independently.
* :class:`MarkovChain`: performs small reversible steps.
* :class:`WithGraph`: exposes its graph and the graph's observables.

External samplers (Metropolis, Wang-Landau, ...) only rely on these
interfaces.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

import numpy as np

from net_ensembles.ensembles.steps import StepToken
from net_ensembles.graph.errors import UndoError
from net_ensembles.graph.generic_graph import GenericGraph

logger = logging.getLogger(__name__)

R = TypeVar("R")


class HasRng(ABC):
    """Exclusive ownership of a random number generator."""

    _rng: np.random.Generator

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def swap_rng(self, rng: np.random.Generator) -> np.random.Generator:
        """
        Install ``rng`` and hand back the previous generator.

        Neither generator is copied, so the caller can later swap the old one
        back in and continue its stream exactly where it stopped.
        """
        if not isinstance(rng, np.random.Generator):
            raise TypeError(f"Expected numpy.random.Generator, got {type(rng).__name__}")
        old = self._rng
        if type(old.bit_generator) is not type(rng.bit_generator):
            logger.warning(
                "Swapping %s generator for %s generator",
                type(old.bit_generator).__name__,
                type(rng.bit_generator).__name__,
            )
        self._rng = rng
        return old


class SimpleSample(ABC):
    """Independent sampling by redrawing the whole graph."""

    @abstractmethod
    def randomize(self) -> None:
        """Discard all edges and draw a fresh graph from the model."""

    def simple_sample(self, times: int, fn: Callable[[Any], None]) -> None:
        """Randomize ``times`` times, calling ``fn(self)`` after each draw."""
        for _ in range(times):
            self.randomize()
            fn(self)

    def simple_sample_list(self, times: int, fn: Callable[[Any], R]) -> List[R]:
        """Like :meth:`simple_sample` but collects the return values."""
        results = []
        for _ in range(times):
            self.randomize()
            results.append(fn(self))
        return results


class MarkovChain(ABC):
    """
    Reversible Markov steps.

    ``undo_step(markov_step())`` restores the graph exactly, adjacency order
    included, as long as nothing else touched the ensemble in between.
    """

    @abstractmethod
    def markov_step(self) -> StepToken:
        """Perform one step and describe it."""

    @abstractmethod
    def undo_step(self, token: StepToken) -> StepToken:
        """
        Revert the step described by ``token``.

        The token is validated against the current graph first; a mismatch
        raises :class:`~net_ensembles.graph.errors.UndoError` and leaves the
        graph untouched.

        Returns:
            Token describing the inverse step.
        """

    @abstractmethod
    def undo_step_quiet(self, token: StepToken) -> None:
        """Revert ``token`` without validation. The token must be the latest step."""

    def m_steps(self, count: int) -> List[StepToken]:
        """Perform ``count`` steps and return their tokens in order."""
        return [self.markov_step() for _ in range(count)]

    def m_steps_quiet(self, count: int) -> None:
        """Perform ``count`` steps, discarding the tokens."""
        for _ in range(count):
            self.markov_step()

    def undo_steps(self, tokens: Sequence[StepToken]) -> List[StepToken]:
        """
        Revert ``tokens`` last to first.

        Stops at the first token that does not match; the raised
        :class:`UndoError` records the inverse tokens produced so far
        (``undone``) and the index of the failing token (``failed_index``).

        Returns:
            Inverse tokens in the order they were applied.
        """
        undone: List[StepToken] = []
        for index in range(len(tokens) - 1, -1, -1):
            try:
                undone.append(self.undo_step(tokens[index]))
            except UndoError as err:
                raise UndoError(
                    f"Undo failed at step {index}: {err}",
                    token=tokens[index],
                    undone=undone,
                    failed_index=index,
                ) from err
        return undone

    def undo_steps_quiet(self, tokens: Sequence[StepToken]) -> None:
        """Revert ``tokens`` last to first without validation."""
        for token in reversed(tokens):
            self.undo_step_quiet(token)


class WithGraph(ABC):
    """Access to the ensemble's graph plus shortcuts to its observables."""

    _graph: GenericGraph

    def graph(self) -> GenericGraph:
        """
        The current graph. Treat it as read-only: mutating it directly
        breaks the ensemble's bookkeeping.
        """
        return self._graph

    def at(self, i: int) -> Any:
        return self._graph.at(i)

    def set_at(self, i: int, payload: Any) -> None:
        self._graph.set_at(i, payload)

    def contained_iter(self) -> Iterable[Any]:
        return self._graph.contained_iter()

    def sort_adj(self) -> None:
        """
        Sort all adjacency lists. Tokens issued before the call can no longer
        be undone bit for bit.
        """
        self._graph.sort_adj()

    # Observables of the underlying graph

    def vertex_count(self) -> int:
        return self._graph.vertex_count()

    def edge_count(self) -> int:
        return self._graph.edge_count()

    def degree(self, i: int) -> Optional[int]:
        return self._graph.degree(i)

    def average_degree(self) -> float:
        return self._graph.average_degree()

    def leaf_count(self) -> int:
        return self._graph.leaf_count()

    def connected_components(self) -> List[int]:
        return self._graph.connected_components()

    def is_connected(self) -> Optional[bool]:
        return self._graph.is_connected()

    def diameter(self) -> Optional[int]:
        return self._graph.diameter()

    def transitivity(self) -> float:
        return self._graph.transitivity()

    def q_core(self, q: int) -> List[int]:
        return self._graph.q_core(q)

    def q_core_size(self, q: int) -> Optional[int]:
        return self._graph.q_core_size(q)

    def vertex_load(self, include_endpoints: bool = False) -> np.ndarray:
        return self._graph.vertex_load(include_endpoints)

    def vertex_biconnected_components(self, alternative_definition: bool = False) -> List[int]:
        return self._graph.vertex_biconnected_components(alternative_definition)

    def longest_shortest_path_from_index(self, i: int) -> Optional[int]:
        return self._graph.longest_shortest_path_from_index(i)
