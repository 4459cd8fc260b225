"""
Pick-note node - reduces a chord to its lowest or highest pitch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from vestige.errors import InvariantViolationError
from vestige.graph.handles import NOTE_INPUT_MAIN
from vestige.graph.types import NoteGeneratorData, Pitches
from vestige.nodes.base import make_node_factory
from vestige.serialization.codecs import NodeDataCodec, required

NODE_TYPE = "pick-note"


class PickMode(str, Enum):
    LOWEST = "LOWEST"
    HIGHEST = "HIGHEST"


def main_input(inputs: Mapping[str, Pitches] | None, node_type: str) -> Pitches:
    """The pitches on ``in-notes-main``. Raises if the handle is absent."""
    if not inputs or NOTE_INPUT_MAIN not in inputs:
        raise InvariantViolationError(
            "note-input",
            f"No '{NOTE_INPUT_MAIN}' input was provided to a {node_type} node",
            {"inputs": sorted(inputs or {})},
        )
    return inputs[NOTE_INPUT_MAIN]


@dataclass
class PickNoteGenerator:
    mode: PickMode = PickMode.LOWEST
    inputs: int = field(default=1, init=False)

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> list[int]:
        notes = main_input(inputs, NODE_TYPE)
        if not notes:
            return []
        return [min(notes)] if PickMode(self.mode) == PickMode.LOWEST else [max(notes)]


@dataclass
class PickNoteNodeData(NoteGeneratorData):
    generator: PickNoteGenerator = field(default_factory=PickNoteGenerator)


def pick_note_data(mode: PickMode = PickMode.LOWEST) -> PickNoteNodeData:
    return PickNoteNodeData(PickNoteGenerator(mode))


class PickNoteCodec(NodeDataCodec[PickNoteNodeData]):
    type = NODE_TYPE

    def serialize(self, data: PickNoteNodeData) -> dict[str, Any]:
        return {"m": PickMode(data.generator.mode).value}

    def deserialize(self, raw: Any) -> PickNoteNodeData:
        return pick_note_data(PickMode(required(raw, "m", self.type)))


create_pick_note_node = make_node_factory(NODE_TYPE, pick_note_data)
