"""
Vestige - Testing Utilities

Tools for testing graphs without an audio backend.

Components:
    MockAudioGenerator  - Instrument capability recording note events
    MockAudioEffect     - Effect capability with recording destinations
    ScriptedNotes       - Note generator driven by a script
    Fixtures            - Edge and node builders

Usage:
    from vestige.testing import create_mock_instrument_node, note_edge

    synth = create_mock_instrument_node()
    graph = create_test_graph([keys, synth], [note_edge(keys, synth)])
"""

from vestige.testing.mock import (
    CallRecord,
    MockDestination,
    MockAudioGenerator,
    MockAudioEffect,
    RecordingParameter,
    ConstantValue,
    SumValue,
    ScriptedNotes,
    MockInstrumentCodec,
    MOCK_INSTRUMENT_TYPE,
    MOCK_EFFECT_TYPE,
    mock_instrument_data,
    mock_effect_data,
    constant_value_data,
    sum_value_data,
    scripted_notes_data,
)

from vestige.testing.fixtures import (
    edge,
    note_edge,
    signal_edge,
    value_edge,
    create_mock_instrument_node,
    create_mock_effect_node,
    create_constant_node,
    create_sum_node,
    create_scripted_notes_node,
    create_test_graph,
    create_test_registry,
)

__all__ = [
    # Mocks
    "CallRecord",
    "MockDestination",
    "MockAudioGenerator",
    "MockAudioEffect",
    "RecordingParameter",
    "ConstantValue",
    "SumValue",
    "ScriptedNotes",
    "MockInstrumentCodec",
    "MOCK_INSTRUMENT_TYPE",
    "MOCK_EFFECT_TYPE",
    "mock_instrument_data",
    "mock_effect_data",
    "constant_value_data",
    "sum_value_data",
    "scripted_notes_data",
    # Fixtures
    "edge",
    "note_edge",
    "signal_edge",
    "value_edge",
    "create_mock_instrument_node",
    "create_mock_effect_node",
    "create_constant_node",
    "create_sum_node",
    "create_scripted_notes_node",
    "create_test_graph",
    "create_test_registry",
]
