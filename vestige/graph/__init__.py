"""
Graph module - nodes, edges, handles and snapshots.

STABILITY: PROJECT_VERSION is bumped only when the serialized envelope changes.
"""

from vestige.graph.handles import (
    SIGNAL_INPUT_PREFIX,
    SIGNAL_INPUT_MAIN,
    SIGNAL_OUTPUT,
    NOTE_INPUT_PREFIX,
    NOTE_INPUT_MAIN,
    NOTE_OUTPUT,
    VALUE_OUTPUT,
    VALUE_INPUT_PREFIX,
    param_handle_id,
    note_in_handle_id,
    signal_in_handle_id,
)
from vestige.graph.types import (
    PROJECT_VERSION,
    Pitches,
    as_pitches,
    unique_id,
    NodeRole,
    NoteEventType,
    NoteEvent,
    Position,
    Automatable,
    NoteGenerator,
    ValueGenerator,
    AudioDestination,
    AudioGenerator,
    AudioEffect,
    UnaryAudioDestination,
    NodeData,
    NoteGeneratorData,
    InstrumentData,
    EffectData,
    ValueData,
    FinalData,
    Node,
    Edge,
)
from vestige.graph.snapshot import (
    NoteState,
    GraphSnapshot,
    admit_edge,
    root_nodes,
    outgoing,
    incoming,
)

__all__ = [
    # Handles
    "SIGNAL_INPUT_PREFIX",
    "SIGNAL_INPUT_MAIN",
    "SIGNAL_OUTPUT",
    "NOTE_INPUT_PREFIX",
    "NOTE_INPUT_MAIN",
    "NOTE_OUTPUT",
    "VALUE_OUTPUT",
    "VALUE_INPUT_PREFIX",
    "param_handle_id",
    "note_in_handle_id",
    "signal_in_handle_id",
    # Types
    "PROJECT_VERSION",
    "Pitches",
    "as_pitches",
    "unique_id",
    "NodeRole",
    "NoteEventType",
    "NoteEvent",
    "Position",
    "Automatable",
    "NoteGenerator",
    "ValueGenerator",
    "AudioDestination",
    "AudioGenerator",
    "AudioEffect",
    "UnaryAudioDestination",
    "NodeData",
    "NoteGeneratorData",
    "InstrumentData",
    "EffectData",
    "ValueData",
    "FinalData",
    "Node",
    "Edge",
    # Snapshots
    "NoteState",
    "GraphSnapshot",
    "admit_edge",
    "root_nodes",
    "outgoing",
    "incoming",
]
