"""
Port/handle vocabulary.

Handle ids are the wire contract between the engine and node implementations.
Edges name a source handle and a target handle; the engine dispatches on the
prefix of those names, never on the node implementation.

    in-signal-main      main signal input
    in-signal-<name>    any other signal input
    out-signal-main     main signal output
    in-notes-main       main note input
    in-notes-<name>     any other note input
    out-notes-main      main note output
    out-value-main      value output
    param-<name>        automatable parameter (value input)
"""

from __future__ import annotations

SIGNAL_INPUT_PREFIX = "in-signal"
SIGNAL_INPUT_MAIN = "in-signal-main"
SIGNAL_OUTPUT = "out-signal-main"

NOTE_INPUT_PREFIX = "in-notes"
NOTE_INPUT_MAIN = "in-notes-main"
NOTE_OUTPUT = "out-notes-main"

VALUE_OUTPUT = "out-value-main"
VALUE_INPUT_PREFIX = "param"


def param_handle_id(name: str) -> str:
    """Handle id of the automatable parameter ``name``."""
    return f"{VALUE_INPUT_PREFIX}-{name}"


def note_in_handle_id(name: str) -> str:
    return f"{NOTE_INPUT_PREFIX}-{name}"


def signal_in_handle_id(name: str) -> str:
    return f"{SIGNAL_INPUT_PREFIX}-{name}"


def is_signal_input(handle: str | None) -> bool:
    return handle is not None and handle.startswith(SIGNAL_INPUT_PREFIX)


def is_note_input(handle: str | None) -> bool:
    return handle is not None and handle.startswith(NOTE_INPUT_PREFIX)


def is_param_handle(handle: str | None) -> bool:
    return handle is not None and handle.startswith(VALUE_INPUT_PREFIX)


def is_signal_edge(source_handle: str | None, target_handle: str | None) -> bool:
    """True for main-signal-output to signal-input edges."""
    return source_handle == SIGNAL_OUTPUT and is_signal_input(target_handle)


def is_value_edge(source_handle: str | None, target_handle: str | None) -> bool:
    """True for value-output to parameter edges."""
    return source_handle == VALUE_OUTPUT and is_param_handle(target_handle)
