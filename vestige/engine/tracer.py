"""
Forwarding Engine - one synchronous pass over a snapshot per tick.

Two sub-passes run back to back:

1. Values. Every VALUE root generates at ``time`` and its output flows along
   value edges. A VALUE target generates only once all of its incoming edges
   have delivered in this pass; an EFFECT/INSTRUMENT parameter is terminal and
   receives ``change(value)``.

2. Notes. Every arity-0 NOTES root generates its active pitches. Arity-1
   targets transform immediately; wider targets buffer per handle until every
   input is present. At an INSTRUMENT the pitches are diffed against what the
   same edge carried last pass and the resulting NOTE_OFF/NOTE_ON events are
   delivered.

Generators are pure functions of time, so a branch that cannot complete this
pass (a half-wired graph) is logged and dropped; the next tick retries it.
"""

from __future__ import annotations

import logging
from typing import Sequence

from vestige.errors import InvariantViolationError
from vestige.graph.snapshot import GraphSnapshot, NoteState, incoming, outgoing, root_nodes
from vestige.graph.types import Edge, Node, NodeRole, NoteEvent, Pitches, as_pitches

logger = logging.getLogger(__name__)


def diff_notes(previous: Sequence[int], current: Sequence[int]) -> list[NoteEvent]:
    """Derive note transitions between two active-pitch snapshots.

    NOTE_OFFs come first, in ``previous`` order, then NOTE_ONs in ``current``
    order. Equal inputs yield an empty list.
    """
    current_set = set(current)
    previous_set = set(previous)

    events = [NoteEvent.off(p) for p in previous if p not in current_set]
    events.extend(NoteEvent.on(p) for p in current if p not in previous_set)
    return events


class GraphTracer:
    """Walks a snapshot and forwards generated values and notes.

    Args:
        max_note_inputs: Widest note-generator arity accepted as a target.
    """

    def __init__(self, max_note_inputs: int = 8):
        self.max_note_inputs = max_note_inputs

    def trace(self, time: float, graph: GraphSnapshot) -> None:
        """Run the value pass, then the note pass."""
        self.trace_values(time, graph.nodes, graph.edges)
        self.trace_notes(time, graph.nodes, graph.edges, graph.note_state)

    # =========================================================================
    # Value pass
    # =========================================================================

    def trace_values(self, time: float, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        required = {
            n.id: len(incoming(n.id, edges))
            for n in nodes
            if n.role == NodeRole.VALUE
        }
        received: dict[str, int] = {}

        def forward(node: Node, value: float) -> None:
            for edge, target in outgoing(node.id, nodes, edges):
                if target.role == NodeRole.VALUE:
                    parameter = target.data.parameters.get(edge.target_handle)
                    if parameter is not None:
                        parameter.change(value)

                    need = required.get(target.id, 0)
                    have = received.get(target.id, 0) + 1
                    received[target.id] = have
                    if have > need:
                        logger.error(f"Fan-in overflow on {target.id}: {have} > {need}")
                        raise InvariantViolationError(
                            "value-fan-in",
                            f"Value node '{target.id}' received more inputs than it has edges",
                            {"node": target.id, "required": need, "received": have},
                        )

                    if have == need:
                        forward(target, target.data.generator.generate(time))
                    else:
                        logger.debug(f"{target.id} waiting for inputs ({have}/{need})")

                elif target.role in (NodeRole.EFFECT, NodeRole.INSTRUMENT):
                    parameter = target.data.parameters.get(edge.target_handle)
                    if parameter is None:
                        logger.error(f"No parameter {edge.target_handle} on {target.id}")
                        raise InvariantViolationError(
                            "value-target-parameter",
                            f"Node '{target.id}' has no parameter '{edge.target_handle}'",
                            {"node": target.id, "handle": edge.target_handle},
                        )
                    parameter.change(value)

                else:
                    logger.warning(f"Unexpected value target {target.role.value} {target.id}, skipping")

        for root in root_nodes(nodes, edges, NodeRole.VALUE):
            forward(root, root.data.generator.generate(time))

    # =========================================================================
    # Note pass
    # =========================================================================

    def trace_notes(
        self,
        time: float,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        note_state: NoteState,
    ) -> None:
        pending: dict[str, dict[str, Pitches]] = {}

        def forward(node: Node, notes: Pitches) -> None:
            for edge, target in outgoing(node.id, nodes, edges):
                if target.role == NodeRole.INSTRUMENT:
                    previous = note_state.previous(node.id, target.id)
                    events = diff_notes(previous, notes)
                    if events:
                        target.data.generator.accept(events)
                    note_state.remember(node.id, target.id, notes)

                elif target.role == NodeRole.NOTES:
                    arity = target.data.inputs
                    handle = edge.target_handle or ""

                    if arity <= 0 or arity > self.max_note_inputs:
                        logger.warning(f"{target.id} (arity {arity}) cannot receive notes, abandoning branch")
                        continue

                    if arity == 1:
                        forward(target, as_pitches(target.data.generator.generate(time, {handle: notes})))
                        continue

                    inputs = pending.setdefault(target.id, {})
                    inputs[handle] = notes
                    if len(inputs) < arity:
                        logger.debug(f"{target.id} waiting for note inputs ({len(inputs)}/{arity})")
                        continue

                    del pending[target.id]
                    forward(target, as_pitches(target.data.generator.generate(time, inputs)))

                else:
                    logger.warning(f"Unexpected note target {target.role.value} {target.id}, skipping")

        for root in root_nodes(nodes, edges, NodeRole.NOTES):
            if root.data.inputs != 0:
                continue
            forward(root, as_pitches(root.data.generator.generate(time)))
