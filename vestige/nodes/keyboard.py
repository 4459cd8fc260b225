"""
Keyboard node - plays whatever pitches are currently held down.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from vestige.graph.types import NoteGeneratorData, Pitches
from vestige.nodes.base import make_node_factory
from vestige.serialization.codecs import NullNodeDataCodec

NODE_TYPE = "keyboard"


class KeyboardGenerator:
    inputs = 0

    def __init__(self) -> None:
        self.held_notes: list[int] = []

    def press(self, pitch: int) -> None:
        if pitch not in self.held_notes:
            self.held_notes.append(pitch)

    def release(self, pitch: int) -> None:
        if pitch in self.held_notes:
            self.held_notes.remove(pitch)

    def release_all(self) -> None:
        self.held_notes.clear()

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> list[int]:
        return list(self.held_notes)


@dataclass
class KeyboardNodeData(NoteGeneratorData):
    generator: KeyboardGenerator = field(default_factory=KeyboardGenerator)


class KeyboardCodec(NullNodeDataCodec[KeyboardNodeData]):
    type = NODE_TYPE

    def make(self) -> KeyboardNodeData:
        return KeyboardNodeData()


create_keyboard_node = make_node_factory(NODE_TYPE, KeyboardNodeData)
