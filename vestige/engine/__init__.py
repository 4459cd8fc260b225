"""
Engine module - connection mutator, forwarding tracer and tick scheduling.
"""

from vestige.engine.mutator import (
    ConnectionAction,
    ConnectionChange,
    GraphMutator,
    diff_connections,
    graph_from_existing,
)
from vestige.engine.tracer import GraphTracer, diff_notes
from vestige.engine.scheduler import TickScheduler, render_offline

__all__ = [
    "ConnectionAction",
    "ConnectionChange",
    "GraphMutator",
    "diff_connections",
    "graph_from_existing",
    "GraphTracer",
    "diff_notes",
    "TickScheduler",
    "render_offline",
]
