"""
Node factory helpers shared by the built-in node modules.
"""

from __future__ import annotations

from typing import Any, Callable

from vestige.graph.types import AnyNodeData, Node, Position, unique_id

NodeFactory = Callable[..., Node]


def create_node(
    node_type: str,
    data: AnyNodeData,
    x: float = 0.0,
    y: float = 0.0,
    node_id: str | None = None,
) -> Node:
    """Create a node with a fresh random id unless ``node_id`` is given."""
    return Node(
        id=node_id or unique_id(),
        type=node_type,
        data=data,
        position=Position(x, y),
    )


def make_node_factory(node_type: str, data_factory: Callable[..., AnyNodeData]) -> NodeFactory:
    """Return ``factory(x, y, node_id=None, **kwargs)`` for one node type.

    Extra keyword arguments are forwarded to ``data_factory``.

    Example:
        create_lfo_node = make_node_factory("lfo", LfoNodeData)
        lfo = create_lfo_node(0, 120, frequency=2.0)
    """

    def factory(x: float = 0.0, y: float = 0.0, node_id: str | None = None, **kwargs: Any) -> Node:
        return create_node(node_type, data_factory(**kwargs), x, y, node_id)

    factory.__name__ = f"create_{node_type.replace('-', '_')}_node"
    factory.__doc__ = f"Create a new '{node_type}' node with a random id."
    return factory
