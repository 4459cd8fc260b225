"""
Pentatonic generators - melodies and chords in a five-note scale.

Both generators take no note inputs and are pure functions of time. Their
randomness comes from per-instance offsets fixed at construction.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Any, Mapping

from vestige.graph.types import NoteGeneratorData, Pitches
from vestige.nodes.base import make_node_factory
from vestige.nodes.music import MIDI_NOTES, ScaleMode, get_harmony, hashify, pick_random, rand_int, scale_for, seed_rng
from vestige.serialization.codecs import FlatNodeDataCodec, prop

MELODY_NODE_TYPE = "pentatonic-melody"
CHORDS_NODE_TYPE = "pentatonic-chords"


def _random_offset() -> float:
    return random.random() * 100


def _random_seed_offset() -> int:
    return random.randrange(10000)


# =============================================================================
# Melody
# =============================================================================

@dataclass
class PentatonicMelodyGenerator:
    """Each scale pitch is a lane that switches on and off deterministically.

    ``density`` (0 to 100) shifts how often lanes play; at most ``polyphony``
    lanes sound at once.
    """

    density: float = 50
    octave: int = 4
    pitch_range: int = 6
    polyphony: int = 1
    root_note: int = MIDI_NOTES["Cs"]
    mode: ScaleMode = ScaleMode.MINOR
    offset: float = field(default_factory=_random_offset)
    inputs: int = field(default=0, init=False)

    def available(self) -> list[int]:
        return get_harmony(scale_for(self.mode), self.root_note, self.octave, self.pitch_range)

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> list[int]:
        x = time + self.offset
        d = (self.density / 100) * 2

        played: list[int] = []
        for note in self.available():
            if len(played) >= self.polyphony:
                break

            z = math.fmod(hashify(note + 0xDEAD), 4096) / 8
            if z == 0:
                continue

            pre = math.floor(math.sin(2 * x + 5 * z) + math.sin(math.pi * x + x / z) - (1 - d))
            if math.fmod(pre, 2) == 1:
                played.append(note)

        return played


@dataclass
class PentatonicMelodyNodeData(NoteGeneratorData):
    generator: PentatonicMelodyGenerator = field(default_factory=PentatonicMelodyGenerator)


def melody_data(**kwargs: Any) -> PentatonicMelodyNodeData:
    return PentatonicMelodyNodeData(PentatonicMelodyGenerator(**kwargs))


class _ScaleCodec(FlatNodeDataCodec):
    def serialize(self, data: Any) -> dict[str, Any]:
        encoded = super().serialize(data)
        encoded["m"] = ScaleMode(encoded["m"]).value
        return encoded


class PentatonicMelodyCodec(_ScaleCodec):
    type = MELODY_NODE_TYPE

    spec = {
        "d": prop(lambda d: d.generator).field("density"),
        "o": prop(lambda d: d.generator).field("octave"),
        "r": prop(lambda d: d.generator).field("pitch_range"),
        "n": prop(lambda d: d.generator).field("root_note"),
        "m": prop(lambda d: d.generator).field("mode"),
        # Added after the first release; older projects play monophonic.
        "p": prop(lambda d: d.generator).field("polyphony", default=1),
    }

    def make(self) -> PentatonicMelodyNodeData:
        return melody_data()


# =============================================================================
# Chords
# =============================================================================

@dataclass
class PentatonicChordsGenerator:
    """Plays a new random chord every ``chord_length`` seconds."""

    chord_length: float = 6
    min_notes: int = 4
    max_notes: int = 6
    octave: int = 4
    pitch_range: int = 12
    root_note: int = MIDI_NOTES["Cs"]
    mode: ScaleMode = ScaleMode.MINOR
    offset: float = field(default_factory=_random_offset)
    seed_offset: int = field(default_factory=_random_seed_offset)
    inputs: int = field(default=0, init=False)

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> list[int]:
        x = time + self.offset
        available = get_harmony(scale_for(self.mode), self.root_note, self.octave, self.pitch_range)

        seed = math.floor(x / self.chord_length)
        rng = seed_rng(seed + self.seed_offset)

        count = min(rand_int(self.min_notes, self.max_notes, rng), len(available))
        return pick_random(available, count, rng)


@dataclass
class PentatonicChordsNodeData(NoteGeneratorData):
    generator: PentatonicChordsGenerator = field(default_factory=PentatonicChordsGenerator)


def chords_data(**kwargs: Any) -> PentatonicChordsNodeData:
    return PentatonicChordsNodeData(PentatonicChordsGenerator(**kwargs))


class PentatonicChordsCodec(_ScaleCodec):
    type = CHORDS_NODE_TYPE

    spec = {
        "l": prop(lambda d: d.generator).field("chord_length"),
        "a": prop(lambda d: d.generator).field("min_notes"),
        "b": prop(lambda d: d.generator).field("max_notes"),
        "o": prop(lambda d: d.generator).field("octave"),
        "r": prop(lambda d: d.generator).field("pitch_range"),
        "n": prop(lambda d: d.generator).field("root_note"),
        "m": prop(lambda d: d.generator).field("mode"),
    }

    def make(self) -> PentatonicChordsNodeData:
        return chords_data()


create_pentatonic_melody_node = make_node_factory(MELODY_NODE_TYPE, melody_data)
create_pentatonic_chords_node = make_node_factory(CHORDS_NODE_TYPE, chords_data)
