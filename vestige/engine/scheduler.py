"""
Tick scheduling for the forwarding engine.

``TickScheduler`` drives live playback: a daemon worker calls
``tracer.trace`` at a fixed wall-clock cadence, independent of the audio
backend. ``render_offline`` drives the same passes at exact, evenly spaced
times for bouncing a project without real time passing.
"""

from __future__ import annotations

import logging
import threading
import time as _time
from typing import Callable

from vestige.config import EngineConfig
from vestige.engine.tracer import GraphTracer
from vestige.graph.snapshot import GraphSnapshot

logger = logging.getLogger(__name__)


class TickScheduler:
    """Periodically traces the current snapshot while playback is active.

    Args:
        tracer: The forwarding engine to drive.
        clock: Returns the current transport time in seconds.
        config: Supplies the tick interval.

    Graph edits made while playback runs must go through ``apply``, which
    holds off trace passes until the edit and the snapshot swap complete.

    Example:
        scheduler = TickScheduler(GraphTracer(), transport.seconds)
        scheduler.update(graph)
        scheduler.start()
        scheduler.apply(lambda g: mutator.connect(g, edge))
    """

    def __init__(
        self,
        tracer: GraphTracer | None = None,
        clock: Callable[[], float] | None = None,
        config: EngineConfig | None = None,
    ):
        self.config = config or EngineConfig()
        self.tracer = tracer or GraphTracer(self.config.max_note_inputs)
        self._clock = clock or _monotonic_clock()

        self._snapshot = GraphSnapshot()
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._worker_thread: threading.Thread | None = None
        self._restarts = 0
        self._error: BaseException | None = None

    @property
    def is_running(self) -> bool:
        return self._worker_thread is not None and self._worker_thread.is_alive()

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    @property
    def restarts(self) -> int:
        """How many times a topology change restarted the cadence."""
        return self._restarts

    @property
    def error(self) -> BaseException | None:
        """The exception that stopped the worker, if any."""
        return self._error

    def start(self) -> None:
        """Start ticking. No-op if already running."""
        if self.is_running:
            return
        self._error = None
        self._stop_event.clear()
        self._worker_thread = threading.Thread(
            target=self._worker_loop,
            daemon=True,
            name="vestige-tick-worker",
        )
        self._worker_thread.start()
        logger.debug(f"Tick scheduler started at {self.config.tick_rate_hz} Hz")

    def stop(self) -> None:
        """Stop ticking and wait for the worker to exit."""
        self._stop_event.set()
        worker = self._worker_thread
        if worker and worker.is_alive() and worker is not threading.current_thread():
            worker.join(timeout=2.0)
        self._worker_thread = None
        logger.debug("Tick scheduler stopped")

    def update(self, snapshot: GraphSnapshot) -> None:
        """Swap in a new snapshot.

        The cadence restarts only if the node or edge identities changed;
        moving nodes around keeps ticking undisturbed.
        """
        with self._lock:
            changed = self._swap(snapshot)
        self._restart_if(changed)

    def apply(self, edit: Callable[[GraphSnapshot], GraphSnapshot]) -> GraphSnapshot:
        """Run ``edit`` on the current snapshot between two passes.

        ``edit`` receives the current snapshot and returns its successor,
        typically through a ``GraphMutator`` method. No pass runs until the
        edit has finished and the result is swapped in.

        Example:
            graph = scheduler.apply(lambda g: mutator.remove_node(g, node_id))
        """
        with self._lock:
            snapshot = edit(self._snapshot)
            changed = self._swap(snapshot)
        self._restart_if(changed)
        return snapshot

    def _swap(self, snapshot: GraphSnapshot) -> bool:
        changed = snapshot.topology_key() != self._snapshot.topology_key()
        self._snapshot = snapshot
        return changed

    def _restart_if(self, changed: bool) -> None:
        # Called without the lock held: stop() joins a worker that takes it every pass.
        if changed and self.is_running:
            self._restarts += 1
            logger.debug("Topology changed, restarting tick cadence")
            self.stop()
            self.start()

    def tick(self) -> None:
        """Run a single pass at the current clock time."""
        with self._lock:
            self.tracer.trace(self._clock(), self._snapshot)

    def _worker_loop(self) -> None:
        interval = self.config.tick_interval
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception as e:
                # Fatal graph errors stop playback; the host inspects ``error``.
                self._error = e
                logger.exception(f"Trace pass failed: {e}")
                return
            self._stop_event.wait(interval)


def _monotonic_clock() -> Callable[[], float]:
    start = _time.monotonic()
    return lambda: _time.monotonic() - start


def render_offline(
    snapshot: GraphSnapshot,
    duration: float,
    tick_rate_hz: float = 96.0,
    on_tick: Callable[[float], None] | None = None,
    tracer: GraphTracer | None = None,
) -> int:
    """Trace ``snapshot`` at ``i / tick_rate_hz`` for every tick in ``[0, duration)``.

    After each pass every payload's optional ``on_tick(time)`` hook runs,
    followed by ``on_tick`` if given. Returns the number of ticks.
    """
    if tick_rate_hz <= 0:
        raise ValueError("tick_rate_hz must be > 0")

    tracer = tracer or GraphTracer()
    hooks = [
        hook for hook in (getattr(n.data, "on_tick", None) for n in snapshot.nodes)
        if callable(hook)
    ]

    ticks = 0
    while True:
        time = ticks / tick_rate_hz
        if time >= duration:
            break
        tracer.trace(time, snapshot)
        for hook in hooks:
            hook(time)
        if on_tick is not None:
            on_tick(time)
        ticks += 1

    logger.info(f"Rendered {ticks} ticks ({duration}s at {tick_rate_hz} Hz)")
    return ticks
