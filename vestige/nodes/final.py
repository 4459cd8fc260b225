"""
Final output node - the single terminal signal sink.
"""

from __future__ import annotations

import logging
from typing import Any

from vestige.graph.types import FinalData
from vestige.nodes.base import make_node_factory
from vestige.serialization.codecs import NullNodeDataCodec

logger = logging.getLogger(__name__)

NODE_TYPE = "final"


class FinalOutput:
    """Destination collecting every distinct source routed into the output."""

    def __init__(self) -> None:
        self.sources: list[Any] = []

    def accept(self, source: Any) -> None:
        if source not in self.sources:
            self.sources.append(source)
        logger.debug(f"Final output accepted {source!r}")


def final_data(destination: Any = None) -> FinalData:
    return FinalData(destination if destination is not None else FinalOutput())


class FinalCodec(NullNodeDataCodec[FinalData]):
    type = NODE_TYPE

    def make(self) -> FinalData:
        return final_data()


create_final_node = make_node_factory(NODE_TYPE, final_data)
