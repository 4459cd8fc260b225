"""
Per-node-type data codecs.

A codec turns a node payload into a plain value (dicts, lists, strings,
numbers) and back. Three kinds are provided:

- ``NodeDataCodec``: hand-written ``serialize``/``deserialize``.
- ``NullNodeDataCodec``: for payloads with nothing to store.
- ``FlatNodeDataCodec``: maps short output keys to getter/setter pairs,
  usually built with ``prop``. A field may carry a default so projects saved
  before it existed still decode.

Example:
    class MathCodec(FlatNodeDataCodec):
        type = "math"
        spec = {
            "a": prop(lambda d: d.generator).field("a"),
            "p": prop(lambda d: d.generator).field("polyphony", default=1),
        }

        def make(self):
            return MathNodeData()
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, ClassVar, Generic, TypeVar

from vestige.errors import MissingFieldError
from vestige.graph.types import NodeData

T = TypeVar("T", bound=NodeData)

# Marks a flat field that has no default.
MISSING: Any = object()


class NodeDataCodec(ABC, Generic[T]):
    """Serializes the payload of one node type.

    ``deserialize`` may return an awaitable for payloads that need to load
    external resources; only ``decode_async`` accepts those.
    """

    type: ClassVar[str] = ""

    @abstractmethod
    def serialize(self, data: T) -> Any:
        """Convert ``data`` into a plain value."""

    @abstractmethod
    def deserialize(self, raw: Any) -> T | Awaitable[T]:
        """Rebuild a payload from a plain value."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r})"


class NullNodeDataCodec(NodeDataCodec[T]):
    """Codec for payloads with no persistent state."""

    def serialize(self, data: T) -> dict:
        return {}

    def deserialize(self, raw: Any) -> T:
        return self.make()

    @abstractmethod
    def make(self) -> T:
        """Create a fresh payload."""


# =============================================================================
# Flat codecs
# =============================================================================

@dataclass(frozen=True)
class FlatField:
    """How one output key is read from and written to a payload."""

    get: Callable[[Any], Any]
    set: Callable[[Any, Any], None]
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


class _PropBuilder:
    def __init__(self, target: Callable[[Any], Any]):
        self._target = target

    def field(self, name: str, default: Any = MISSING) -> FlatField:
        """Bind attribute ``name`` of the object returned by the target getter."""
        target = self._target
        return FlatField(
            get=lambda data: getattr(target(data), name),
            set=lambda data, value: setattr(target(data), name, value),
            default=default,
        )


def prop(target: Callable[[Any], Any]) -> _PropBuilder:
    """Start a flat field on the object ``target(data)`` returns.

    ``prop(lambda d: d.generator).field("speed")`` reads and writes
    ``data.generator.speed``.
    """
    return _PropBuilder(target)


class FlatNodeDataCodec(NodeDataCodec[T]):
    """Codec driven by a ``spec`` mapping output keys to ``FlatField``s.

    Decoding starts from ``make()``. Keys absent from the input fall back to
    the field default, or raise MissingFieldError when there is none.
    """

    spec: ClassVar[dict[str, FlatField]] = {}

    @abstractmethod
    def make(self) -> T:
        """Create a payload with default state."""

    def serialize(self, data: T) -> dict[str, Any]:
        return {key: field.get(data) for key, field in self.spec.items()}

    def deserialize(self, raw: Any) -> T:
        raw = raw or {}
        data = self.make()

        for key, field in self.spec.items():
            if key in raw:
                field.set(data, raw[key])
            elif field.has_default:
                field.set(data, field.default)
            else:
                raise MissingFieldError(key, self.type)

        return data


def required(raw: Any, key: str, node_type: str | None = None) -> Any:
    """Read a field that has no default from stored node data."""
    if not isinstance(raw, dict) or key not in raw:
        raise MissingFieldError(key, node_type)
    return raw[key]


def is_awaitable(value: Any) -> bool:
    return inspect.isawaitable(value)
