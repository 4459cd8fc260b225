"""
Built-in node modules.

Every module provides a payload class, a ``create_<name>_node`` factory and a
codec. ``default_registry()`` returns a registry holding all built-in codecs;
hosts add codecs for their own instrument and effect nodes on top.
"""

from vestige.nodes.base import create_node, make_node_factory
from vestige.nodes.final import FinalCodec, FinalOutput, create_final_node
from vestige.nodes.lfo import LfoCodec, LfoNodeData, LfoShape, LfoValueGenerator, create_lfo_node
from vestige.nodes.math import MathCodec, MathNodeData, MathValueGenerator, Operation, create_math_node
from vestige.nodes.keyboard import KeyboardCodec, KeyboardGenerator, KeyboardNodeData, create_keyboard_node
from vestige.nodes.pick_note import PickMode, PickNoteCodec, PickNoteGenerator, PickNoteNodeData, create_pick_note_node
from vestige.nodes.arpeggiator import (
    ArpStyle,
    ArpeggiatorCodec,
    ArpeggiatorGenerator,
    ArpeggiatorNodeData,
    create_arpeggiator_node,
)
from vestige.nodes.pentatonic import (
    PentatonicChordsCodec,
    PentatonicChordsGenerator,
    PentatonicChordsNodeData,
    PentatonicMelodyCodec,
    PentatonicMelodyGenerator,
    PentatonicMelodyNodeData,
    create_pentatonic_chords_node,
    create_pentatonic_melody_node,
)
from vestige.nodes.merge import (
    NOTE_INPUT_A,
    NOTE_INPUT_B,
    NoteMergeCodec,
    NoteMergeGenerator,
    NoteMergeNodeData,
    create_note_merge_node,
)
from vestige.serialization.codecs import NodeDataCodec
from vestige.serialization.registry import CodecRegistry


def builtin_codecs() -> list[NodeDataCodec]:
    return [
        FinalCodec(),
        LfoCodec(),
        MathCodec(),
        KeyboardCodec(),
        PickNoteCodec(),
        ArpeggiatorCodec(),
        PentatonicMelodyCodec(),
        PentatonicChordsCodec(),
        NoteMergeCodec(),
    ]


def default_registry() -> CodecRegistry:
    """A fresh registry holding every built-in codec."""
    return CodecRegistry(builtin_codecs())


__all__ = [
    "create_node",
    "make_node_factory",
    "builtin_codecs",
    "default_registry",
    # Final
    "FinalCodec",
    "FinalOutput",
    "create_final_node",
    # Values
    "LfoCodec",
    "LfoNodeData",
    "LfoShape",
    "LfoValueGenerator",
    "create_lfo_node",
    "MathCodec",
    "MathNodeData",
    "MathValueGenerator",
    "Operation",
    "create_math_node",
    # Notes
    "KeyboardCodec",
    "KeyboardGenerator",
    "KeyboardNodeData",
    "create_keyboard_node",
    "PickMode",
    "PickNoteCodec",
    "PickNoteGenerator",
    "PickNoteNodeData",
    "create_pick_note_node",
    "ArpStyle",
    "ArpeggiatorCodec",
    "ArpeggiatorGenerator",
    "ArpeggiatorNodeData",
    "create_arpeggiator_node",
    "PentatonicChordsCodec",
    "PentatonicChordsGenerator",
    "PentatonicChordsNodeData",
    "PentatonicMelodyCodec",
    "PentatonicMelodyGenerator",
    "PentatonicMelodyNodeData",
    "create_pentatonic_chords_node",
    "create_pentatonic_melody_node",
    "NOTE_INPUT_A",
    "NOTE_INPUT_B",
    "NoteMergeCodec",
    "NoteMergeGenerator",
    "NoteMergeNodeData",
    "create_note_merge_node",
]
