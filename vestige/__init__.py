"""
Vestige - a modular note and audio graph engine.

Architecture:
    edits → GraphMutator → GraphSnapshot → GraphTracer (per tick) → audio backend

Public API (stable):
    GraphMutator        - Applies edits, wires the audio backend to match.
    GraphTracer         - Forwards values and notes through a snapshot.
    TickScheduler       - Runs the tracer on a fixed cadence while playing.
    encode / decode     - Versioned binary project format.

Internals (for advanced users):
    vestige.graph           - Node, Edge, handles, capability protocols
    vestige.serialization   - Codecs and the codec registry
    vestige.nodes           - Built-in note and value nodes
    vestige.testing         - Mock capabilities and graph fixtures

Example:
    from vestige import GraphMutator, GraphSnapshot, GraphTracer
    from vestige.nodes import create_keyboard_node

    mutator = GraphMutator(on_first_final_connect=transport.start)
    graph = mutator.add_node(GraphSnapshot(), create_keyboard_node(0, 0))
    GraphTracer().trace(0.0, graph)
"""

__version__ = "0.1.0"

from vestige.config import EngineConfig
from vestige.errors import (
    VestigeError,
    InvariantViolationError,
    UnknownNodeError,
    InvalidConnectionError,
    MissingParameterError,
    PortOccupiedError,
    SerializationError,
    UnknownFormatError,
    UnsupportedVersionError,
    MissingCodecError,
    MissingFieldError,
)
from vestige.graph import (
    PROJECT_VERSION,
    NodeRole,
    NoteEvent,
    NoteEventType,
    Automatable,
    Node,
    Edge,
    Position,
    NoteState,
    GraphSnapshot,
    admit_edge,
)
from vestige.engine import (
    ConnectionAction,
    ConnectionChange,
    GraphMutator,
    graph_from_existing,
    GraphTracer,
    diff_notes,
    TickScheduler,
    render_offline,
)
from vestige.serialization import (
    CodecRegistry,
    encode,
    decode,
    decode_async,
    encode_base64,
    decode_base64,
)
from vestige.settings import PersistentSettings

__all__ = [
    "__version__",
    # Config
    "EngineConfig",
    "PersistentSettings",
    # Errors
    "VestigeError",
    "InvariantViolationError",
    "UnknownNodeError",
    "InvalidConnectionError",
    "MissingParameterError",
    "PortOccupiedError",
    "SerializationError",
    "UnknownFormatError",
    "UnsupportedVersionError",
    "MissingCodecError",
    "MissingFieldError",
    # Graph
    "PROJECT_VERSION",
    "NodeRole",
    "NoteEvent",
    "NoteEventType",
    "Automatable",
    "Node",
    "Edge",
    "Position",
    "NoteState",
    "GraphSnapshot",
    "admit_edge",
    # Engine
    "ConnectionAction",
    "ConnectionChange",
    "GraphMutator",
    "graph_from_existing",
    "GraphTracer",
    "diff_notes",
    "TickScheduler",
    "render_offline",
    # Serialization
    "CodecRegistry",
    "encode",
    "decode",
    "decode_async",
    "encode_base64",
    "decode_base64",
]
