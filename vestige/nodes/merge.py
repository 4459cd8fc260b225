"""
Note-merge node - plays the union of two note inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from vestige.graph.handles import note_in_handle_id
from vestige.graph.types import NoteGeneratorData, Pitches
from vestige.nodes.base import make_node_factory
from vestige.serialization.codecs import NullNodeDataCodec

NODE_TYPE = "note-merge"

NOTE_INPUT_A = note_in_handle_id("a")
NOTE_INPUT_B = note_in_handle_id("b")


@dataclass
class NoteMergeGenerator:
    inputs: int = field(default=2, init=False)

    def generate(self, time: float, inputs: Mapping[str, Pitches] | None = None) -> list[int]:
        inputs = inputs or {}
        merged = list(inputs.get(NOTE_INPUT_A, ()))
        merged.extend(p for p in inputs.get(NOTE_INPUT_B, ()) if p not in merged)
        return merged


@dataclass
class NoteMergeNodeData(NoteGeneratorData):
    generator: NoteMergeGenerator = field(default_factory=NoteMergeGenerator)


class NoteMergeCodec(NullNodeDataCodec[NoteMergeNodeData]):
    type = NODE_TYPE

    def make(self) -> NoteMergeNodeData:
        return NoteMergeNodeData()


create_note_merge_node = make_node_factory(NODE_TYPE, NoteMergeNodeData)
