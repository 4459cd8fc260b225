"""
Arpeggiator node - steps through the notes of its input chord one at a time.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from vestige.graph.types import NoteGeneratorData, Pitches
from vestige.nodes.base import make_node_factory
from vestige.nodes.pick_note import main_input
from vestige.serialization.codecs import FlatNodeDataCodec, prop

NODE_TYPE = "arpeggiator"

MIN_SPEED = 0.05
MAX_SPEED = 2.0


class ArpStyle(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    RANDOM = "RANDOM"


def _fract(x: float) -> float:
    return x - math.floor(x)


@dataclass
class ArpeggiatorGenerator:
    """Plays one note of the sorted input every ``speed`` seconds."""

    style: ArpStyle = ArpStyle.UP
    speed: float = 0.25
    inputs: int = field(default=1, init=False)

    def step_index(self, time: float, n: int) -> int:
        style = ArpStyle(self.style)
        if style == ArpStyle.UP:
            return math.floor(time / self.speed) % n
        if style == ArpStyle.DOWN:
            return (n - 1) - math.floor((time / self.speed) % n)

        # Hash of the step number, reseeded every 64 seconds.
        noise = math.sin(math.floor(time / self.speed)) * (
            math.sin((math.floor(time / 64) + 1) * 456.341) * 456735.4352
        )
        return math.floor(_fract(noise) * n)

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> list[int]:
        notes = sorted(main_input(inputs, NODE_TYPE))
        if not notes:
            return []
        return [notes[self.step_index(time, len(notes))]]


@dataclass
class ArpeggiatorNodeData(NoteGeneratorData):
    generator: ArpeggiatorGenerator = field(default_factory=ArpeggiatorGenerator)


def arpeggiator_data(**kwargs) -> ArpeggiatorNodeData:
    return ArpeggiatorNodeData(ArpeggiatorGenerator(**kwargs))


class ArpeggiatorCodec(FlatNodeDataCodec[ArpeggiatorNodeData]):
    type = NODE_TYPE

    spec = {
        "m": prop(lambda d: d.generator).field("style"),
        "s": prop(lambda d: d.generator).field("speed"),
    }

    def make(self) -> ArpeggiatorNodeData:
        return arpeggiator_data()

    def serialize(self, data: ArpeggiatorNodeData) -> dict:
        encoded = super().serialize(data)
        encoded["m"] = ArpStyle(encoded["m"]).value
        return encoded


create_arpeggiator_node = make_node_factory(NODE_TYPE, arpeggiator_data)
