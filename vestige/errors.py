"""
Vestige Errors - Fatal error types.

Every error here signals a programming error or a corrupt input: the engine
makes no attempt to heal a broken graph or save file, so these propagate to
the host's top-level handler. Transient conditions (a half-wired graph) are
logged instead and never raise.

Error hierarchy:
    VestigeError (base)
    ├── InvariantViolationError
    ├── UnknownNodeError
    ├── InvalidConnectionError
    │   └── MissingParameterError
    ├── PortOccupiedError
    └── SerializationError
        ├── UnknownFormatError
        ├── UnsupportedVersionError
        ├── MissingCodecError
        └── MissingFieldError
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from vestige.graph.types import Edge, NodeRole


class VestigeError(Exception):
    """Base error for all Vestige errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvariantViolationError(VestigeError):
    """Raised when an engine invariant is violated during a pass."""

    def __init__(
        self,
        invariant_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(f"[{invariant_id}] {message}", details)
        self.invariant_id = invariant_id


class UnknownNodeError(VestigeError):
    """Raised when an edge references a node that is not in the node set."""

    def __init__(self, node_id: str, details: dict[str, Any] | None = None):
        super().__init__(f"No node with id '{node_id}'", details)
        self.node_id = node_id


class InvalidConnectionError(VestigeError):
    """
    Raised when an edge joins two structurally incompatible roles.

    Invalid signal pairings:
    - a NOTES node as either signal endpoint
    - FINAL or VALUE as the signal source
    - INSTRUMENT or VALUE as the signal target
    """

    def __init__(
        self,
        message: str,
        edge: Edge | None = None,
        source_role: NodeRole | None = None,
        target_role: NodeRole | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.edge = edge
        self.source_role = source_role
        self.target_role = target_role


class MissingParameterError(InvalidConnectionError):
    """Raised when a value edge names a parameter the target does not expose."""

    def __init__(self, handle: str | None, node_id: str, edge: Edge | None = None):
        super().__init__(
            f"No automatable handle '{handle}' on node '{node_id}'",
            edge=edge,
        )
        self.handle = handle
        self.node_id = node_id


class PortOccupiedError(VestigeError):
    """Raised when a second edge is admitted into an occupied target port."""

    def __init__(self, target: str, target_handle: str | None, existing: Edge):
        super().__init__(
            f"Port '{target_handle}' of node '{target}' is already fed by edge '{existing.id}'",
            {"existing_edge": existing.id},
        )
        self.target = target
        self.target_handle = target_handle
        self.existing = existing


class SerializationError(VestigeError):
    """Base error for project encoding and decoding."""


class UnknownFormatError(SerializationError):
    """Raised when a byte stream starts with an unrecognized format prefix."""

    def __init__(self, prefix: int | None):
        super().__init__(f"Unknown data prefix {prefix!r}")
        self.prefix = prefix


class UnsupportedVersionError(SerializationError):
    """Raised for a missing, zero or unknown envelope version."""

    def __init__(self, version: Any):
        if not version:
            message = "Invalid project schema (no version field)"
        else:
            message = f"Unsupported project schema version {version}"
        super().__init__(message)
        self.version = version


class MissingCodecError(SerializationError):
    """Raised when no codec is registered for a node type."""

    def __init__(self, node_type: str | None):
        super().__init__(f"No (de)serializer for node type '{node_type}'")
        self.node_type = node_type


class MissingFieldError(SerializationError):
    """Raised when a required (default-less) field is absent from node data."""

    def __init__(self, key: str, node_type: str | None = None):
        where = f" in '{node_type}' node data" if node_type else ""
        super().__init__(f"Missing required field '{key}'{where}")
        self.key = key
        self.node_type = node_type
