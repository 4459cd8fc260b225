"""
Engine configuration for Vestige.

Defines the forwarding cadence and serialization tuning.
"""

from __future__ import annotations

from dataclasses import dataclass

from vestige.graph.types import PROJECT_VERSION


@dataclass
class EngineConfig:
    """Configuration shared by the scheduler, tracer and serializer.

    Args:
        tick_rate_hz: How many forwarding passes run per second of playback.
        compression_level: zlib level for the compressed stream form.
        project_version: Envelope version written by ``encode``.
        max_note_inputs: Widest note-generator arity the tracer accepts.

    Example:
        config = EngineConfig(tick_rate_hz=48.0, compression_level=6)
        scheduler = TickScheduler(GraphTracer(), clock, config)
    """

    tick_rate_hz: float = 96.0
    """Forwarding passes per second."""

    compression_level: int = 9
    """DEFLATE level, 0 (store) to 9 (smallest)."""

    project_version: int = PROJECT_VERSION
    """Envelope version stamped on encoded projects."""

    max_note_inputs: int = 8
    """Upper bound on a note generator's declared input arity."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.tick_rate_hz <= 0:
            raise ValueError("tick_rate_hz must be > 0")
        if not 0 <= self.compression_level <= 9:
            raise ValueError("compression_level must be between 0 and 9")
        if self.project_version < 1:
            raise ValueError("project_version must be >= 1")
        if self.max_note_inputs < 1:
            raise ValueError("max_note_inputs must be >= 1")

    @property
    def tick_interval(self) -> float:
        """Seconds between two forwarding passes."""
        return 1.0 / self.tick_rate_hz
