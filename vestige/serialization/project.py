"""
Project encoding - whole graphs to bytes and back.

Wire layout:

    byte 0      format prefix: 0x00 raw, 0x01 compressed (raw DEFLATE)
    bytes 1..   CBOR envelope:
                {
                    "version": 1,
                    "nodes": [{"i": id, "t": type, "x": x, "y": y, "d": data}, ...],
                    "edges": [{"s": source, "sh": source handle,
                               "t": target, "th": target handle}, ...],
                }

The FINAL node, if any, is always the first entry of ``nodes``. Whichever of
the raw and compressed forms is smaller is written. Edge ids are not stored;
decoding generates fresh ones.

STABILITY:
    The envelope layout is versioned by PROJECT_VERSION. Node data evolves
    additively through codec defaults and never bumps the version.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import zlib
from typing import Any, Iterable, Sequence

import cbor2

from vestige.config import EngineConfig
from vestige.errors import MissingFieldError, SerializationError, UnknownFormatError, UnsupportedVersionError
from vestige.graph.types import PROJECT_VERSION, Edge, Node, NodeRole, Position, unique_id
from vestige.serialization.codecs import is_awaitable
from vestige.serialization.registry import CodecRegistry, get_registry

logger = logging.getLogger(__name__)

FORMAT_RAW = 0x00
FORMAT_COMPRESSED = 0x01

# Raw DEFLATE stream, no zlib header or checksum.
_WBITS = -15

SUPPORTED_VERSIONS = frozenset({PROJECT_VERSION})


# =============================================================================
# Envelope
# =============================================================================

def _encode_node(node: Node, registry: CodecRegistry) -> dict[str, Any]:
    codec = registry.resolve(node.type)
    return {
        "i": node.id,
        "t": node.type,
        "x": node.position.x,
        "y": node.position.y,
        "d": codec.serialize(node.data),
    }


def _encode_edge(edge: Edge) -> dict[str, Any]:
    return {
        "s": edge.source,
        "sh": edge.source_handle,
        "t": edge.target,
        "th": edge.target_handle,
    }


def _require(raw: Any, keys: tuple[str, ...], what: str) -> None:
    if not isinstance(raw, dict):
        raise SerializationError(f"Envelope {what} is a {type(raw).__name__}, not a map")
    for key in keys:
        if key not in raw:
            logger.error(f"Envelope {what} is missing '{key}'")
            raise MissingFieldError(key)


def _decode_edge(raw: Any) -> Edge:
    _require(raw, ("s", "t"), "edge")
    return Edge(
        id=f"id-{raw['t']}-{raw.get('th')}-{raw['s']}-{raw.get('sh')}-{unique_id()}",
        source=raw["s"],
        source_handle=raw.get("sh"),
        target=raw["t"],
        target_handle=raw.get("th"),
    )


def build_envelope(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    registry: CodecRegistry,
    version: int = PROJECT_VERSION,
) -> dict[str, Any]:
    """Build the plain envelope, FINAL node first."""
    ordered = [n for n in nodes if n.role == NodeRole.FINAL]
    ordered.extend(n for n in nodes if n.role != NodeRole.FINAL)

    return {
        "version": version,
        "nodes": [_encode_node(n, registry) for n in ordered],
        "edges": [_encode_edge(e) for e in edges],
    }


# =============================================================================
# Byte streams
# =============================================================================

def _compress(data: bytes, level: int) -> bytes:
    compressor = zlib.compressobj(level, zlib.DEFLATED, _WBITS)
    return compressor.compress(data) + compressor.flush()


def _decompress(data: bytes) -> bytes:
    try:
        return zlib.decompress(data, _WBITS)
    except zlib.error as e:
        raise SerializationError(f"Corrupt compressed project: {e}") from e


def encode(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    registry: CodecRegistry | None = None,
    config: EngineConfig | None = None,
) -> bytes:
    """Serialize a project into prefixed bytes.

    ``config`` supplies the DEFLATE level and the envelope version stamped
    on the project; defaults are used when omitted.
    """
    registry = registry or get_registry()
    config = config or EngineConfig()
    envelope = build_envelope(tuple(nodes), tuple(edges), registry, config.project_version)

    data = cbor2.dumps(envelope)
    compressed = _compress(data, config.compression_level)

    if len(compressed) < len(data):
        logger.debug(f"Using compressed format - saved bytes: {len(data) - len(compressed)}")
        return bytes([FORMAT_COMPRESSED]) + compressed

    logger.debug(f"Using raw format - overhead: {len(compressed) - len(data)}")
    return bytes([FORMAT_RAW]) + data


def read_envelope(data: bytes) -> dict[str, Any]:
    """Strip the format prefix, decode the CBOR and validate the version."""
    if not data:
        raise UnknownFormatError(None)

    prefix, body = data[0], bytes(data[1:])
    if prefix == FORMAT_RAW:
        pass
    elif prefix == FORMAT_COMPRESSED:
        body = _decompress(body)
    else:
        logger.error(f"Unknown data prefix {prefix}")
        raise UnknownFormatError(prefix)

    try:
        project = cbor2.loads(body)
    except cbor2.CBORDecodeError as e:
        raise SerializationError(f"Corrupt project envelope: {e}") from e

    if not isinstance(project, dict):
        raise SerializationError(f"Project envelope is a {type(project).__name__}, not a map")

    version = project.get("version")
    # bool is an int subclass; True must not pass for version 1.
    if isinstance(version, bool) or not isinstance(version, int) or version not in SUPPORTED_VERSIONS:
        logger.error(f"Rejected project envelope with version {version!r}")
        raise UnsupportedVersionError(version)

    logger.debug(f"Project envelope decoded: {len(project.get('nodes', []))} nodes, "
                 f"{len(project.get('edges', []))} edges")
    return project


def _node_shell(raw: Any) -> tuple[str, str, Position]:
    _require(raw, ("i", "t"), "node")
    return raw["i"], raw["t"], Position(raw.get("x", 0.0), raw.get("y", 0.0))


def decode(
    data: bytes,
    registry: CodecRegistry | None = None,
) -> tuple[list[Node], list[Edge]]:
    """Deserialize prefixed bytes into ``(nodes, edges)``.

    Raises SerializationError if any codec returns an awaitable; use
    ``decode_async`` for those projects.
    """
    registry = registry or get_registry()
    project = read_envelope(data)

    nodes = []
    for raw in project.get("nodes", []):
        node_id, node_type, position = _node_shell(raw)
        payload = registry.resolve(node_type).deserialize(raw.get("d"))
        if is_awaitable(payload):
            if hasattr(payload, "close"):
                payload.close()
            raise SerializationError(
                f"Codec for '{node_type}' is asynchronous; use decode_async",
                {"node": node_id},
            )
        nodes.append(Node(node_id, node_type, payload, position))

    edges = [_decode_edge(raw) for raw in project.get("edges", [])]
    return nodes, edges


async def decode_async(
    data: bytes,
    registry: CodecRegistry | None = None,
) -> tuple[list[Node], list[Edge]]:
    """Like ``decode``, awaiting codecs that load their data asynchronously."""
    registry = registry or get_registry()
    project = read_envelope(data)

    async def load(raw: dict[str, Any]) -> Node:
        node_id, node_type, position = _node_shell(raw)
        payload = registry.resolve(node_type).deserialize(raw.get("d"))
        if is_awaitable(payload):
            payload = await payload
        return Node(node_id, node_type, payload, position)

    nodes = await asyncio.gather(*(load(raw) for raw in project.get("nodes", [])))
    edges = [_decode_edge(raw) for raw in project.get("edges", [])]
    return list(nodes), edges


# =============================================================================
# URL-safe text
# =============================================================================

def encode_base64(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    registry: CodecRegistry | None = None,
    config: EngineConfig | None = None,
) -> str:
    """Encode for a hyperlink fragment (``-`` and ``_`` instead of ``+`` and ``/``)."""
    raw = encode(nodes, edges, registry, config)
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _from_base64(text: str) -> bytes:
    text = text.strip()
    text += "=" * (-len(text) % 4)
    try:
        return base64.urlsafe_b64decode(text)
    except (binascii.Error, ValueError) as e:
        raise SerializationError(f"Invalid base64 project: {e}") from e


def decode_base64(text: str, registry: CodecRegistry | None = None) -> tuple[list[Node], list[Edge]]:
    return decode(_from_base64(text), registry)


async def decode_base64_async(
    text: str,
    registry: CodecRegistry | None = None,
) -> tuple[list[Node], list[Edge]]:
    return await decode_async(_from_base64(text), registry)
