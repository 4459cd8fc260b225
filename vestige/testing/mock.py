"""
Mock capabilities for testing graphs without an audio backend.

Features:
    - Call recording on every capability
    - Recording destinations per signal handle
    - Constant and scripted generators
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from vestige.graph.handles import SIGNAL_INPUT_MAIN, param_handle_id
from vestige.graph.types import (
    AudioDestination,
    Automatable,
    EffectData,
    InstrumentData,
    NoteEvent,
    NoteGeneratorData,
    Pitches,
    ValueData,
)
from vestige.serialization.codecs import FlatNodeDataCodec, prop

MOCK_INSTRUMENT_TYPE = "mock-instrument"
MOCK_EFFECT_TYPE = "mock-effect"


@dataclass
class CallRecord:
    """Record of a mock capability call."""

    method: str
    args: tuple = field(default_factory=tuple)
    timestamp: float = field(default_factory=time.time)


class _Recorder:
    def __init__(self) -> None:
        self._calls: list[CallRecord] = []

    def _record(self, method: str, *args: Any) -> None:
        self._calls.append(CallRecord(method, args))

    @property
    def calls(self) -> list[CallRecord]:
        return list(self._calls)

    def calls_to(self, method: str) -> list[CallRecord]:
        return [c for c in self._calls if c.method == method]

    @property
    def call_count(self) -> int:
        return len(self._calls)

    def reset(self) -> None:
        self._calls.clear()


class MockDestination(_Recorder):
    """Destination remembering every source routed into it."""

    def __init__(self, name: str = SIGNAL_INPUT_MAIN):
        super().__init__()
        self.name = name
        self.sources: list[Any] = []

    def accept(self, source: Any) -> None:
        self._record("accept", source)
        self.sources.append(source)


class MockAudioGenerator(_Recorder):
    """Instrument capability recording note events and routing.

    Example:
        gen = MockAudioGenerator()
        tracer.trace(0.0, graph)
        assert gen.accepted_events == [[NoteEvent.on(60)]]
    """

    def __init__(self) -> None:
        super().__init__()
        self.accepted_events: list[list[NoteEvent]] = []
        self.destination: AudioDestination | None = None
        self.disposed = False

    def accept(self, events: list[NoteEvent]) -> None:
        self._record("accept", list(events))
        self.accepted_events.append(list(events))

    def connect_to(self, destination: AudioDestination) -> None:
        self._record("connect_to", destination)
        self.destination = destination
        destination.accept(self)

    def disconnect(self) -> None:
        self._record("disconnect")
        self.destination = None

    def dispose(self) -> None:
        self.disposed = True

    @property
    def is_connected(self) -> bool:
        return self.destination is not None


class MockAudioEffect(_Recorder):
    """Effect capability with one recording destination per signal handle."""

    def __init__(self, handles: Iterable[str] = (SIGNAL_INPUT_MAIN,)):
        super().__init__()
        self.inputs = {h: MockDestination(h) for h in handles}
        self.destination: AudioDestination | None = None

    def connect_to(self, destination: AudioDestination) -> None:
        self._record("connect_to", destination)
        self.destination = destination
        destination.accept(self)

    def disconnect(self) -> None:
        self._record("disconnect")
        self.destination = None

    def get_connect_destination(self, handle: str) -> AudioDestination:
        return self.inputs[handle]


class RecordingParameter(Automatable):
    """Automatable that keeps every value it was changed to."""

    def __init__(self) -> None:
        self.values: list[float] = []
        super().__init__(self.values.append)

    @property
    def last(self) -> float | None:
        return self.values[-1] if self.values else None


# =============================================================================
# Generators
# =============================================================================

class ConstantValue:
    """Value generator returning ``value`` and counting its calls."""

    def __init__(self, value: float):
        self.value = value
        self.generate_calls: list[float] = []

    def generate(self, time: float) -> float:
        self.generate_calls.append(time)
        return self.value


class SumValue:
    """Value combinator adding up whatever its parameters last received."""

    def __init__(self) -> None:
        self.received: dict[str, float] = {}
        self.generate_calls: list[float] = []

    def parameter(self, name: str) -> Automatable:
        handle = param_handle_id(name)
        return Automatable(lambda v: self.received.__setitem__(handle, v))

    def generate(self, time: float) -> float:
        self.generate_calls.append(time)
        return min(1.0, sum(self.received.values()))


class ScriptedNotes:
    """Note generator returning scripted pitches.

    ``script`` is either a mapping from time to pitches (times not listed
    produce silence) or a callable ``(time, inputs) -> pitches``.
    """

    def __init__(
        self,
        script: Mapping[float, Iterable[int]] | Callable[[float, Mapping[str, Pitches]], Iterable[int]],
        inputs: int = 0,
    ):
        self.script = script
        self.inputs = inputs
        self.generate_calls: list[tuple[float, dict[str, Pitches]]] = []

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> list[int]:
        received = dict(inputs or {})
        self.generate_calls.append((time, received))
        if callable(self.script):
            return list(self.script(time, received))
        return list(self.script.get(time, ()))


# =============================================================================
# Payloads
# =============================================================================

def mock_instrument_data(*params: str) -> InstrumentData:
    """Instrument payload exposing a ``RecordingParameter`` per name."""
    names = params or ("value",)
    return InstrumentData(
        generator=MockAudioGenerator(),
        parameters={param_handle_id(n): RecordingParameter() for n in names},
    )


def mock_effect_data(*params: str, handles: Iterable[str] = (SIGNAL_INPUT_MAIN,)) -> EffectData:
    return EffectData(
        effect=MockAudioEffect(handles),
        parameters={param_handle_id(n): RecordingParameter() for n in params},
    )


def constant_value_data(value: float) -> ValueData:
    return ValueData(ConstantValue(value))


def sum_value_data(*params: str) -> ValueData:
    generator = SumValue()
    return ValueData(generator, {param_handle_id(n): generator.parameter(n) for n in params})


def scripted_notes_data(script: Any, inputs: int = 0) -> NoteGeneratorData:
    return NoteGeneratorData(ScriptedNotes(script, inputs))


class MockInstrumentCodec(FlatNodeDataCodec[InstrumentData]):
    """Codec for ``mock-instrument`` nodes storing the automation binding."""

    type = MOCK_INSTRUMENT_TYPE

    spec = {
        "pv": prop(lambda d: d.parameters[param_handle_id("value")]).field("controlled_by", default=None),
    }

    def make(self) -> InstrumentData:
        return mock_instrument_data("value")
