"""
Graph Types - Nodes, edges and the capabilities they carry.

A project is a set of nodes wired together by edges. Every node plays exactly
one role, and the role decides which capabilities its payload carries:

    NOTES       note generator: (time, inputs) -> active pitches
    INSTRUMENT  audio generator accepting discrete note events + parameters
    EFFECT      audio effect with per-handle destinations + parameters
    VALUE       value generator: time -> normalized scalar in [0, 1]
    FINAL       the single terminal signal sink

The payloads form a closed union (``NodeData``). The engine dispatches on
``data.role`` and never on the concrete node implementation, which is what
lets hosts plug their own modules in.

STABILITY:
    PROJECT_VERSION is the serialization protocol version. It only changes
    when the envelope layout changes, never when node data changes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Iterable, Mapping, Protocol, Union, runtime_checkable

# Serialization protocol version. Version 0 is never valid.
PROJECT_VERSION = 1

# Active pitches, in the order the generator produced them, without duplicates.
Pitches = tuple[int, ...]


def as_pitches(notes: Iterable[int]) -> Pitches:
    """Normalize generator output into an ordered, duplicate-free tuple."""
    return tuple(dict.fromkeys(int(n) for n in notes))


def unique_id() -> str:
    """Short random id for nodes and regenerated edges, e.g. ``"3f9a1c07b2e4"``."""
    return uuid.uuid4().hex[:12]


class NodeRole(str, Enum):
    """The role a node plays in the graph."""
    NOTES = "NOTES"
    INSTRUMENT = "INSTRUMENT"
    EFFECT = "EFFECT"
    VALUE = "VALUE"
    FINAL = "FINAL"


class NoteEventType(str, Enum):
    NOTE_ON = "NOTE_ON"
    NOTE_OFF = "NOTE_OFF"


@dataclass(frozen=True)
class NoteEvent:
    """A discrete note transition delivered to an instrument.

    The tracer derives these from two consecutive pitch snapshots of a
    note-to-instrument edge.
    """
    type: NoteEventType
    pitch: int

    @classmethod
    def on(cls, pitch: int) -> NoteEvent:
        return cls(NoteEventType.NOTE_ON, pitch)

    @classmethod
    def off(cls, pitch: int) -> NoteEvent:
        return cls(NoteEventType.NOTE_OFF, pitch)


@dataclass(frozen=True)
class Position:
    """Editor coordinates. Presentation only; the engine never reads them."""
    x: float = 0.0
    y: float = 0.0


class Automatable:
    """A normalized parameter that can hold a constant or follow a VALUE node.

    ``change`` is the side-effecting setter. ``controlled_by`` holds the id of
    the VALUE node currently driving the parameter; the connection mutator is
    its only writer. Consumers are expected to ignore direct user edits while
    the parameter is automated - the engine itself only ever calls ``change``.
    """

    def __init__(self, change: Callable[[float], None], controlled_by: str | None = None):
        self.change = change
        self.controlled_by = controlled_by

    def is_automated(self) -> bool:
        return self.controlled_by is not None

    def __repr__(self) -> str:
        return f"Automatable(controlled_by={self.controlled_by!r})"


# =============================================================================
# Capabilities (implemented by node modules and the external audio backend)
# =============================================================================

@runtime_checkable
class NoteGenerator(Protocol):
    """Produces the pitches active at ``time``.

    ``inputs`` is the declared arity. A generator with arity 0 is called as
    ``generate(time)``; any other arity is called as ``generate(time, inputs)``
    where ``inputs`` maps each note-input handle to the pitches received on it.
    Implementations must be pure functions of their arguments.
    """
    inputs: int

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> Iterable[int]: ...


@runtime_checkable
class ValueGenerator(Protocol):
    def generate(self, time: float) -> float: ...


@runtime_checkable
class AudioDestination(Protocol):
    """Something a signal source can be routed into."""

    def accept(self, source: Any) -> None: ...


@runtime_checkable
class AudioGenerator(Protocol):
    def accept(self, events: list[NoteEvent]) -> None: ...

    def connect_to(self, destination: AudioDestination) -> None: ...

    def disconnect(self) -> None: ...


@runtime_checkable
class AudioEffect(Protocol):
    def connect_to(self, destination: AudioDestination) -> None: ...

    def disconnect(self) -> None: ...

    def get_connect_destination(self, handle: str) -> AudioDestination: ...


class UnaryAudioDestination:
    """Destination that connects every accepted source to a single output."""

    def __init__(self, output: Any):
        self.output = output

    def accept(self, source: Any) -> None:
        source.connect(self.output)


# =============================================================================
# Role payloads
# =============================================================================

class NodeData:
    """Base of every role payload.

    Payloads may additionally define ``on_tick(time)`` (called by the offline
    driver after each pass) and ``dispose()`` (called when the node is removed).
    """
    role: ClassVar[NodeRole]


@dataclass
class NoteGeneratorData(NodeData):
    generator: NoteGenerator
    role: ClassVar[NodeRole] = NodeRole.NOTES

    @property
    def inputs(self) -> int:
        return self.generator.inputs


@dataclass
class InstrumentData(NodeData):
    generator: AudioGenerator
    parameters: dict[str, Automatable] = field(default_factory=dict)
    role: ClassVar[NodeRole] = NodeRole.INSTRUMENT


@dataclass
class EffectData(NodeData):
    effect: AudioEffect
    parameters: dict[str, Automatable] = field(default_factory=dict)
    role: ClassVar[NodeRole] = NodeRole.EFFECT


@dataclass
class ValueData(NodeData):
    """VALUE payload. ``parameters`` lets combinators receive upstream values."""
    generator: ValueGenerator
    parameters: dict[str, Automatable] = field(default_factory=dict)
    role: ClassVar[NodeRole] = NodeRole.VALUE


@dataclass
class FinalData(NodeData):
    destination: AudioDestination
    role: ClassVar[NodeRole] = NodeRole.FINAL

    def get_input_destination(self) -> AudioDestination:
        return self.destination


AnyNodeData = Union[NoteGeneratorData, InstrumentData, EffectData, ValueData, FinalData]


@dataclass(frozen=True)
class Node:
    """A module placed in the project.

    ``type`` is the node-type tag (e.g. ``"lfo"``) used to find the codec for
    ``data``; ``data.role`` is what the engine dispatches on.
    """
    id: str
    type: str
    data: AnyNodeData
    position: Position = field(default_factory=Position)

    @property
    def role(self) -> NodeRole:
        return self.data.role


@dataclass(frozen=True)
class Edge:
    """A connection from a source handle to a target handle."""
    id: str
    source: str
    source_handle: str | None
    target: str
    target_handle: str | None

    @property
    def port(self) -> tuple[str, str | None]:
        """The (target, target handle) pair this edge occupies."""
        return (self.target, self.target_handle)

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id
