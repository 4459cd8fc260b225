"""
Serialization module - codecs, the codec registry and project encoding.
"""

from vestige.serialization.codecs import (
    MISSING,
    NodeDataCodec,
    NullNodeDataCodec,
    FlatField,
    FlatNodeDataCodec,
    prop,
    required,
)
from vestige.serialization.registry import CodecRegistry, get_registry
from vestige.serialization.project import (
    FORMAT_RAW,
    FORMAT_COMPRESSED,
    build_envelope,
    read_envelope,
    encode,
    decode,
    decode_async,
    encode_base64,
    decode_base64,
    decode_base64_async,
)

__all__ = [
    # Codecs
    "MISSING",
    "NodeDataCodec",
    "NullNodeDataCodec",
    "FlatField",
    "FlatNodeDataCodec",
    "prop",
    "required",
    # Registry
    "CodecRegistry",
    "get_registry",
    # Projects
    "FORMAT_RAW",
    "FORMAT_COMPRESSED",
    "build_envelope",
    "read_envelope",
    "encode",
    "decode",
    "decode_async",
    "encode_base64",
    "decode_base64",
    "decode_base64_async",
]
