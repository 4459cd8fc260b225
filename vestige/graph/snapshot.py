"""
Graph snapshots and the engine memory carried between them.

A ``GraphSnapshot`` is one immutable revision of the project: an ordered
tuple of nodes and an ordered tuple of edges. Every edit produces a new
snapshot. The only cross-tick memory, the pitches each note-to-instrument
edge held on the previous tick, lives in a separate ``NoteState`` that the
mutator hands from one snapshot to the next.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from vestige.errors import PortOccupiedError, UnknownNodeError
from vestige.graph.types import Edge, Node, NodeRole, Pitches


class NoteState:
    """Pitches active on each note-to-instrument edge as of the last pass.

    Keys have the form ``"<source id>-<target id>"``. The tracer writes entries
    during a pass; the mutator drops the entry of a note edge it removes.
    """

    def __init__(self, initial: dict[str, Pitches] | None = None):
        self._notes: dict[str, Pitches] = dict(initial or {})

    @staticmethod
    def key(source_id: str, target_id: str) -> str:
        return f"{source_id}-{target_id}"

    def previous(self, source_id: str, target_id: str) -> Pitches:
        return self._notes.get(self.key(source_id, target_id), ())

    def remember(self, source_id: str, target_id: str, pitches: Pitches) -> None:
        self._notes[self.key(source_id, target_id)] = pitches

    def forget(self, key: str) -> None:
        self._notes.pop(key, None)

    def clear(self) -> None:
        self._notes.clear()

    def as_dict(self) -> dict[str, Pitches]:
        return dict(self._notes)

    def __contains__(self, key: object) -> bool:
        return key in self._notes

    def __len__(self) -> int:
        return len(self._notes)

    def __repr__(self) -> str:
        return f"NoteState({self._notes!r})"


@dataclass(frozen=True)
class GraphSnapshot:
    """One immutable (nodes, edges) revision plus the shared note memory.

    Snapshots are built by ``GraphMutator``; constructing one directly does
    not wire anything in the audio backend.
    """
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    note_state: NoteState = field(default_factory=NoteState, compare=False, repr=False)

    def __post_init__(self) -> None:
        # Accept any sequence, store tuples.
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    # =========================================================================
    # Lookup
    # =========================================================================

    def node(self, node_id: str) -> Node:
        """Get node by id. Raises UnknownNodeError if absent."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise UnknownNodeError(node_id)

    def find_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edge(self, edge_id: str) -> Edge | None:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def nodes_of_role(self, role: NodeRole) -> list[Node]:
        return [n for n in self.nodes if n.role == role]

    def final_node(self) -> Node | None:
        for node in self.nodes:
            if node.role == NodeRole.FINAL:
                return node
        return None

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.nodes)

    @property
    def edge_ids(self) -> frozenset[str]:
        return frozenset(e.id for e in self.edges)

    def topology_key(self) -> tuple[frozenset[str], frozenset[str]]:
        """Identity of the graph's shape; unchanged by repositioning nodes."""
        return (self.node_ids, self.edge_ids)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


# =============================================================================
# Traversal helpers
# =============================================================================

def incoming(node_id: str, edges: Iterable[Edge]) -> list[Edge]:
    return [e for e in edges if e.target == node_id]


def outgoing(node_id: str, nodes: Sequence[Node], edges: Iterable[Edge]) -> list[tuple[Edge, Node]]:
    """Edges leaving ``node_id`` paired with their target nodes.

    Edges whose target is not in ``nodes`` are skipped.
    """
    by_id = {n.id: n for n in nodes}
    result = []
    for edge in edges:
        if edge.source != node_id:
            continue
        target = by_id.get(edge.target)
        if target is not None:
            result.append((edge, target))
    return result


def root_nodes(nodes: Sequence[Node], edges: Sequence[Edge], role: NodeRole) -> list[Node]:
    """Nodes of ``role`` with no incoming edges at all."""
    targets = {e.target for e in edges}
    return [n for n in nodes if n.role == role and n.id not in targets]


def admit_edge(edges: Sequence[Edge], edge: Edge) -> tuple[Edge, ...]:
    """Return ``edges`` with ``edge`` appended.

    A target port accepts at most one source: raises PortOccupiedError when
    another edge already feeds ``(edge.target, edge.target_handle)``.
    Admitting an edge whose id is already present is a no-op.
    """
    for existing in edges:
        if existing.id == edge.id:
            return tuple(edges)
        if existing.port == edge.port:
            raise PortOccupiedError(edge.target, edge.target_handle, existing)
    return (*edges, edge)
