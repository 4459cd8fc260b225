"""
LFO node - a low-frequency oscillator producing a value in ``[min, max]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from vestige.graph.types import ValueData
from vestige.nodes.base import make_node_factory
from vestige.serialization.codecs import NodeDataCodec, required

NODE_TYPE = "lfo"


class LfoShape(str, Enum):
    SINE = "sine"
    SQUARE = "square"
    SAW = "saw"


def _bipolar(shape: LfoShape, t: np.ndarray, frequency: float) -> np.ndarray:
    phase = np.mod(t * frequency, 1.0)
    if shape == LfoShape.SINE:
        return np.sin(2 * np.pi * t * frequency)
    if shape == LfoShape.SQUARE:
        return np.where(phase < 0.5, 1.0, -1.0)
    return 2 * phase - 1


@dataclass
class LfoValueGenerator:
    shape: LfoShape = LfoShape.SINE
    frequency: float = 1.0
    min: float = 0.0
    max: float = 1.0

    def curve(self, times: Any) -> np.ndarray:
        """Evaluate the LFO at every time in ``times``."""
        t = np.asarray(times, dtype=np.float64)
        unipolar = (_bipolar(LfoShape(self.shape), t, self.frequency) + 1) / 2
        return self.min + unipolar * (self.max - self.min)

    def generate(self, time: float) -> float:
        return float(self.curve(time))


@dataclass
class LfoNodeData(ValueData):
    generator: LfoValueGenerator = field(default_factory=LfoValueGenerator)


def lfo_data(**kwargs: Any) -> LfoNodeData:
    return LfoNodeData(LfoValueGenerator(**kwargs))


class LfoCodec(NodeDataCodec[LfoNodeData]):
    type = NODE_TYPE

    def serialize(self, data: LfoNodeData) -> dict[str, Any]:
        lfo = data.generator
        return {
            "s": LfoShape(lfo.shape).value,
            "f": lfo.frequency,
            "a": lfo.min,
            "b": lfo.max,
        }

    def deserialize(self, raw: Any) -> LfoNodeData:
        return lfo_data(
            shape=LfoShape(required(raw, "s", self.type)),
            frequency=required(raw, "f", self.type),
            min=required(raw, "a", self.type),
            max=required(raw, "b", self.type),
        )


create_lfo_node = make_node_factory(NODE_TYPE, lfo_data)
