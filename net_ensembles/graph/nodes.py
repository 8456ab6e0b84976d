"""
Vertex payloads.

A graph stores one payload per vertex. Payloads are produced by a node
factory, any callable ``factory(index) -> payload``. :class:`Node` documents
the expected shape; its ``new_from_index`` classmethod is the factory used
when a subclass is passed in place of a callable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type, Union

NodeFactory = Callable[[int], Any]


class Node:
    """Base class for vertex payloads."""

    @classmethod
    def new_from_index(cls, index: int) -> "Node":
        """Create the payload for vertex ``index``."""
        return cls()


@dataclass
class EmptyNode(Node):
    """Payload that stores nothing. Use it when only the topology matters."""

    @classmethod
    def new_from_index(cls, index: int) -> "EmptyNode":
        return cls()


@dataclass
class CountingNode(Node):
    """Payload that remembers the index it was created for."""

    index: int = 0

    @classmethod
    def new_from_index(cls, index: int) -> "CountingNode":
        return cls(index)


def resolve_node_factory(
    factory: Optional[Union[NodeFactory, Type[Node]]],
) -> NodeFactory:
    """
    Turn the user supplied factory argument into a plain callable.

    ``None`` selects :class:`EmptyNode`; a :class:`Node` subclass selects its
    ``new_from_index``; any other callable is used as is.
    """
    if factory is None:
        return EmptyNode.new_from_index
    if isinstance(factory, type) and issubclass(factory, Node):
        return factory.new_from_index
    if not callable(factory):
        raise TypeError(f"node_factory must be callable, got {type(factory).__name__}")
    return factory
