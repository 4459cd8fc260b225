"""
Connection Mutator - incremental graph edits.

Each edit produces a brand-new GraphSnapshot. Before handing it back, the
mutator diffs the old and new edge sets and fires exactly one notification per
edge that appeared or disappeared:

    removed edge / edge touching a removed node  -> DISCONNECT (old node union)
    added edge                                   -> CONNECT    (new node union)

Signal edges are wired into (or out of) the external audio backend; value
edges toggle the target parameter's ``controlled_by``. Note edges need no
wiring - the tracer walks them every tick.

Example:
    mutator = GraphMutator(on_first_final_connect=transport.start)
    graph = mutator.add_node(graph, synth)
    graph = mutator.connect(graph, Edge("e1", synth.id, SIGNAL_OUTPUT, final.id, SIGNAL_INPUT_MAIN))

While a TickScheduler is playing, edits go through ``scheduler.apply`` so
they never interleave with a trace pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable, Sequence

from vestige.errors import InvalidConnectionError, MissingParameterError, UnknownNodeError
from vestige.graph.handles import is_note_input, is_signal_edge, is_value_edge
from vestige.graph.snapshot import GraphSnapshot, NoteState, admit_edge
from vestige.graph.types import AudioDestination, Edge, Node, NodeRole, Position

logger = logging.getLogger(__name__)


class ConnectionAction(str, Enum):
    CONNECT = "CONNECT"
    DISCONNECT = "DISCONNECT"


@dataclass(frozen=True)
class ConnectionChange:
    """A single fired notification."""
    edge: Edge
    action: ConnectionAction

    def __str__(self) -> str:
        sign = "+" if self.action == ConnectionAction.CONNECT else "-"
        return f"{sign} {self.edge.source}:{self.edge.source_handle} -> {self.edge.target}:{self.edge.target_handle}"


_INVALID_SIGNAL_SOURCES = frozenset({NodeRole.NOTES, NodeRole.FINAL, NodeRole.VALUE})
_INVALID_SIGNAL_TARGETS = frozenset({NodeRole.NOTES, NodeRole.INSTRUMENT, NodeRole.VALUE})


def diff_connections(
    old_nodes: Sequence[Node],
    old_edges: Sequence[Edge],
    new_nodes: Sequence[Node],
    new_edges: Sequence[Edge],
) -> list[ConnectionChange]:
    """Compute the notifications that take ``old`` to ``new``.

    Disconnects come first: every old edge missing from ``new_edges`` and
    every old edge touching a node missing from ``new_nodes``, each once.
    Then a connect for every new edge missing from ``old_edges``.
    """
    new_edge_ids = {e.id for e in new_edges}
    old_edge_ids = {e.id for e in old_edges}
    removed_nodes = {n.id for n in old_nodes} - {n.id for n in new_nodes}

    changes: list[ConnectionChange] = []
    for edge in old_edges:
        if edge.id not in new_edge_ids or edge.source in removed_nodes or edge.target in removed_nodes:
            changes.append(ConnectionChange(edge, ConnectionAction.DISCONNECT))

    for edge in new_edges:
        if edge.id not in old_edge_ids:
            changes.append(ConnectionChange(edge, ConnectionAction.CONNECT))

    return changes


class GraphMutator:
    """Applies edits to snapshots and keeps the audio backend wired to match.

    Args:
        on_signal_connect: Called as ``(source, target)`` after each signal
            edge connects.
        on_first_final_connect: Called once, the first time any signal edge
            connects into the FINAL node. Typically starts playback.
        on_change: Called with every ConnectionChange after it is applied.
    """

    def __init__(
        self,
        on_signal_connect: Callable[[Node, Node], None] | None = None,
        on_first_final_connect: Callable[[], None] | None = None,
        on_change: Callable[[ConnectionChange], None] | None = None,
    ):
        self.on_signal_connect = on_signal_connect
        self.on_first_final_connect = on_first_final_connect
        self.on_change = on_change
        self._final_connected = False

    @property
    def final_connected(self) -> bool:
        """Whether the first-final-connect hook has fired."""
        return self._final_connected

    # =========================================================================
    # Edits
    # =========================================================================

    def mutate(
        self,
        graph: GraphSnapshot,
        nodes: Iterable[Node] | None = None,
        edges: Iterable[Edge] | None = None,
    ) -> GraphSnapshot:
        """Apply new ``nodes`` and/or ``edges`` to ``graph``.

        When only ``nodes`` is given, edges touching removed nodes are dropped
        from the result. The note memory of ``graph`` is carried over, minus
        the entries of note edges that were removed.
        """
        new_nodes = tuple(nodes) if nodes is not None else graph.nodes
        if edges is not None:
            new_edges = tuple(edges)
        else:
            present = {n.id for n in new_nodes}
            new_edges = tuple(
                e for e in graph.edges if e.source in present and e.target in present
            )

        for change in diff_connections(graph.nodes, graph.edges, new_nodes, new_edges):
            if change.action == ConnectionAction.DISCONNECT:
                self.on_connect_change(graph.nodes, change.edge, change.action)
                _forget_notes(graph.note_state, change.edge)
            else:
                self.on_connect_change(new_nodes, change.edge, change.action)

        return GraphSnapshot(new_nodes, new_edges, note_state=graph.note_state)

    def mutate_edges(self, graph: GraphSnapshot, removed: Iterable[str]) -> GraphSnapshot:
        """Remove the edges with the given ids.

        Only edges whose endpoints are both still present are disconnected.
        """
        removed_ids = set(removed)
        node_ids = graph.node_ids
        for edge in graph.edges:
            if edge.id not in removed_ids:
                continue
            _forget_notes(graph.note_state, edge)
            if edge.source not in node_ids or edge.target not in node_ids:
                continue
            self.on_connect_change(graph.nodes, edge, ConnectionAction.DISCONNECT)

        return GraphSnapshot(
            graph.nodes,
            tuple(e for e in graph.edges if e.id not in removed_ids),
            note_state=graph.note_state,
        )

    def add_node(self, graph: GraphSnapshot, node: Node) -> GraphSnapshot:
        return self.mutate(graph, nodes=(*graph.nodes, node))

    def remove_node(self, graph: GraphSnapshot, node_id: str) -> GraphSnapshot:
        """Remove a node, disconnect its edges, then dispose its resources.

        ``dispose()`` is called on the payload if it defines one, otherwise on
        its generator or effect capability.
        """
        node = graph.node(node_id)
        result = self.mutate(graph, nodes=[n for n in graph.nodes if n.id != node_id])

        for owner in (node.data, getattr(node.data, "generator", None), getattr(node.data, "effect", None)):
            dispose = getattr(owner, "dispose", None)
            if callable(dispose):
                dispose()
                logger.debug(f"Disposed {node.type} node {node.id}")
                break
        return result

    def connect(self, graph: GraphSnapshot, edge: Edge) -> GraphSnapshot:
        """Admit ``edge`` into the graph. Raises PortOccupiedError if taken."""
        return self.mutate(graph, edges=admit_edge(graph.edges, edge))

    def reposition(self, graph: GraphSnapshot, node_id: str, x: float, y: float) -> GraphSnapshot:
        """Move a node. Fires nothing; topology is unchanged."""
        nodes = tuple(
            replace(n, position=Position(x, y)) if n.id == node_id else n
            for n in graph.nodes
        )
        return GraphSnapshot(nodes, graph.edges, note_state=graph.note_state)

    # =========================================================================
    # Per-edge wiring
    # =========================================================================

    def on_connect_change(
        self,
        node_union: Sequence[Node],
        edge: Edge,
        action: ConnectionAction,
    ) -> None:
        """Apply one connection change.

        ``node_union`` must contain both endpoints: the old nodes for a
        disconnect, the new nodes for a connect.
        """
        source = _lookup(node_union, edge.source)
        target = _lookup(node_union, edge.target)

        if is_signal_edge(edge.source_handle, edge.target_handle):
            self._apply_signal(source, target, edge, action)
        elif is_value_edge(edge.source_handle, edge.target_handle):
            self._apply_value(source, target, edge, action)

        if self.on_change is not None:
            self.on_change(ConnectionChange(edge, action))

    def _apply_signal(self, source: Node, target: Node, edge: Edge, action: ConnectionAction) -> None:
        if source.role in _INVALID_SIGNAL_SOURCES or target.role in _INVALID_SIGNAL_TARGETS:
            logger.error(f"Invalid connection: {source.role.value} {source.id} -> {target.role.value} {target.id}")
            raise InvalidConnectionError(
                f"Attempted to connect a {source.role.value} node to a {target.role.value} node",
                edge=edge,
                source_role=source.role,
                target_role=target.role,
            )

        capability = source.data.generator if source.role == NodeRole.INSTRUMENT else source.data.effect

        if action == ConnectionAction.DISCONNECT:
            capability.disconnect()
            logger.info(f"Disconnected: {source.id} -> {target.id}")
            return

        destination: AudioDestination
        if target.role == NodeRole.EFFECT:
            destination = target.data.effect.get_connect_destination(edge.target_handle)
        else:
            destination = target.data.get_input_destination()

        capability.connect_to(destination)
        logger.info(f"Connected: {source.id} -> {target.id} ({edge.target_handle})")

        if self.on_signal_connect is not None:
            self.on_signal_connect(source, target)

        if target.role == NodeRole.FINAL and not self._final_connected:
            self._final_connected = True
            if self.on_first_final_connect is not None:
                self.on_first_final_connect()

    def _apply_value(self, source: Node, target: Node, edge: Edge, action: ConnectionAction) -> None:
        parameters = getattr(target.data, "parameters", None)
        if parameters is None:
            logger.error(f"Value edge into {target.role.value} node {target.id}, which has no parameters")
            raise MissingParameterError(edge.target_handle, target.id, edge)

        automatable = parameters.get(edge.target_handle)
        if automatable is None:
            if target.role == NodeRole.VALUE:
                # Plain combinator input: counted by the tracer, nothing to bind.
                return
            logger.error(f"No automatable handle {edge.target_handle} on {target.id}")
            raise MissingParameterError(edge.target_handle, target.id, edge)

        automatable.controlled_by = source.id if action == ConnectionAction.CONNECT else None
        logger.debug(f"{target.id}.{edge.target_handle} controlled by {automatable.controlled_by}")


def _forget_notes(note_state: NoteState, edge: Edge) -> None:
    # A reconnected edge starts from silence.
    if is_note_input(edge.target_handle):
        note_state.forget(NoteState.key(edge.source, edge.target))


def _lookup(nodes: Sequence[Node], node_id: str) -> Node:
    for node in nodes:
        if node.id == node_id:
            return node
    raise UnknownNodeError(node_id)


def graph_from_existing(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    mutator: GraphMutator | None = None,
) -> GraphSnapshot:
    """Build a snapshot from scratch, firing a CONNECT for every edge."""
    mutator = mutator or GraphMutator()
    return mutator.mutate(GraphSnapshot(), nodes=nodes, edges=edges)
