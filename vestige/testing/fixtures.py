"""
Test Fixtures - graph-building helpers.

Provides:
    - Edge construction between nodes
    - Mock node factories
    - A registry with the built-in and mock codecs
"""

from __future__ import annotations

from typing import Any, Iterable

from vestige.engine.mutator import GraphMutator, graph_from_existing
from vestige.graph.handles import NOTE_INPUT_MAIN, NOTE_OUTPUT, SIGNAL_INPUT_MAIN, SIGNAL_OUTPUT, VALUE_OUTPUT
from vestige.graph.snapshot import GraphSnapshot
from vestige.graph.types import Edge, Node, unique_id
from vestige.nodes.base import create_node
from vestige.serialization.registry import CodecRegistry
from vestige.testing.mock import (
    MOCK_EFFECT_TYPE,
    MOCK_INSTRUMENT_TYPE,
    MockInstrumentCodec,
    constant_value_data,
    mock_effect_data,
    mock_instrument_data,
    scripted_notes_data,
    sum_value_data,
)


def edge(source: Node, source_handle: str, target: Node, target_handle: str, edge_id: str | None = None) -> Edge:
    return Edge(edge_id or unique_id(), source.id, source_handle, target.id, target_handle)


def note_edge(source: Node, target: Node, target_handle: str = NOTE_INPUT_MAIN) -> Edge:
    return edge(source, NOTE_OUTPUT, target, target_handle)


def signal_edge(source: Node, target: Node, target_handle: str = SIGNAL_INPUT_MAIN) -> Edge:
    return edge(source, SIGNAL_OUTPUT, target, target_handle)


def value_edge(source: Node, target: Node, target_handle: str) -> Edge:
    return edge(source, VALUE_OUTPUT, target, target_handle)


def create_mock_instrument_node(*params: str, x: float = 0, y: float = 0) -> Node:
    return create_node(MOCK_INSTRUMENT_TYPE, mock_instrument_data(*params), x, y)


def create_mock_effect_node(*params: str, x: float = 0, y: float = 0, **kwargs: Any) -> Node:
    return create_node(MOCK_EFFECT_TYPE, mock_effect_data(*params, **kwargs), x, y)


def create_constant_node(value: float, x: float = 0, y: float = 0) -> Node:
    return create_node("constant", constant_value_data(value), x, y)


def create_sum_node(*params: str, x: float = 0, y: float = 0) -> Node:
    return create_node("sum", sum_value_data(*params), x, y)


def create_scripted_notes_node(
    script: Any,
    inputs: int = 0,
    x: float = 0,
    y: float = 0,
    node_id: str | None = None,
) -> Node:
    return create_node("scripted-notes", scripted_notes_data(script, inputs), x, y, node_id)


def create_test_graph(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    mutator: GraphMutator | None = None,
) -> GraphSnapshot:
    """Build a wired snapshot, firing a CONNECT for every edge."""
    return graph_from_existing(nodes, edges, mutator)


def create_test_registry() -> CodecRegistry:
    """Built-in codecs plus the ``mock-instrument`` codec."""
    from vestige.nodes import default_registry

    registry = default_registry()
    registry.register(MockInstrumentCodec())
    return registry
