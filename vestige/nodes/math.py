"""
Math node - arithmetic on two automatable values, clamped to ``[0, 1]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from vestige.graph.handles import param_handle_id
from vestige.graph.types import Automatable, ValueData
from vestige.nodes.base import make_node_factory
from vestige.serialization.codecs import FlatNodeDataCodec, prop

NODE_TYPE = "math"

PARAM_A = param_handle_id("a")
PARAM_B = param_handle_id("b")


class Operation(str, Enum):
    ADD = "ADD"
    SUBTRACT = "SUBTRACT"
    MULTIPLY = "MULTIPLY"
    DIVIDE = "DIVIDE"
    INVERT = "INVERT"
    LOG = "LOG"
    SQRT = "SQRT"
    POW = "POW"


_OPERATIONS = {
    Operation.ADD: lambda a, b: a + b,
    Operation.SUBTRACT: lambda a, b: a - b,
    Operation.MULTIPLY: lambda a, b: a * b,
    Operation.DIVIDE: lambda a, b: a / b,
    Operation.INVERT: lambda a, b: 1 - a,
    Operation.LOG: lambda a, b: np.log(a) / np.log(b),
    Operation.SQRT: lambda a, b: np.sqrt(a),
    Operation.POW: lambda a, b: np.power(a, b),
}


@dataclass
class MathValueGenerator:
    a: float = 0.0
    b: float = 0.0
    operation: Operation = Operation.ADD

    def generate(self, time: float) -> float:
        with np.errstate(divide="ignore", invalid="ignore"):
            result = _OPERATIONS[Operation(self.operation)](np.float64(self.a), np.float64(self.b))
        # Division by zero saturates; undefined results fall to 0.
        result = np.nan_to_num(result, nan=0.0, posinf=1.0, neginf=0.0)
        return float(np.clip(result, 0.0, 1.0))


@dataclass
class MathNodeData(ValueData):
    generator: MathValueGenerator = field(default_factory=MathValueGenerator)

    def __post_init__(self) -> None:
        if not self.parameters:
            self.parameters = {
                PARAM_A: Automatable(self._set_a),
                PARAM_B: Automatable(self._set_b),
            }

    def _set_a(self, value: float) -> None:
        self.generator.a = value

    def _set_b(self, value: float) -> None:
        self.generator.b = value


def math_data(**kwargs: Any) -> MathNodeData:
    return MathNodeData(MathValueGenerator(**kwargs))


class MathCodec(FlatNodeDataCodec[MathNodeData]):
    type = NODE_TYPE

    spec = {
        "pa": prop(lambda d: d.parameters[PARAM_A]).field("controlled_by"),
        "pb": prop(lambda d: d.parameters[PARAM_B]).field("controlled_by"),
        "a": prop(lambda d: d.generator).field("a"),
        "b": prop(lambda d: d.generator).field("b"),
        "o": prop(lambda d: d.generator).field("operation", default=Operation.ADD),
    }

    def make(self) -> MathNodeData:
        return math_data()

    def serialize(self, data: MathNodeData) -> dict[str, Any]:
        encoded = super().serialize(data)
        encoded["o"] = Operation(encoded["o"]).value
        return encoded


create_math_node = make_node_factory(NODE_TYPE, math_data)
