"""
Codec registry, mapping node-type tags to codecs.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from vestige.errors import MissingCodecError
from vestige.serialization.codecs import NodeDataCodec

logger = logging.getLogger(__name__)


class CodecRegistry:
    """Lookup table from a node ``type`` tag to its codec.

    Example:
        registry = CodecRegistry()
        registry.register(LfoCodec())

        codec = registry.resolve("lfo")
    """

    def __init__(self, codecs: Iterable[NodeDataCodec] = ()):
        self._codecs: dict[str, NodeDataCodec] = {}
        for codec in codecs:
            self.register(codec)

    @property
    def codecs(self) -> dict[str, NodeDataCodec]:
        """All registered codecs."""
        return self._codecs.copy()

    def register(self, codec: NodeDataCodec, replace: bool = False) -> None:
        """Register a codec under ``codec.type``.

        Raises:
            ValueError: If the tag is empty, or taken and ``replace`` is False.
        """
        if not codec.type:
            raise ValueError(f"{codec!r} has no node type")
        if codec.type in self._codecs and not replace:
            raise ValueError(f"Codec for '{codec.type}' already registered")

        self._codecs[codec.type] = codec
        logger.debug(f"Registered codec for '{codec.type}'")

    def unregister(self, node_type: str) -> NodeDataCodec | None:
        return self._codecs.pop(node_type, None)

    def get(self, node_type: str | None) -> NodeDataCodec | None:
        if node_type is None:
            return None
        return self._codecs.get(node_type)

    def resolve(self, node_type: str | None) -> NodeDataCodec:
        """Get the codec for ``node_type``. Raises MissingCodecError if absent."""
        codec = self.get(node_type)
        if codec is None:
            logger.error(f"No codec for node type '{node_type}'")
            raise MissingCodecError(node_type)
        return codec

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._codecs

    def __iter__(self) -> Iterator[NodeDataCodec]:
        return iter(self._codecs.values())

    def __len__(self) -> int:
        return len(self._codecs)

    def clear(self) -> None:
        self._codecs.clear()


# Global registry access
_global_registry: CodecRegistry | None = None


def get_registry() -> CodecRegistry:
    """Get the global codec registry, populated with the built-in node codecs."""
    global _global_registry
    if _global_registry is None:
        from vestige.nodes import default_registry

        _global_registry = default_registry()
    return _global_registry
