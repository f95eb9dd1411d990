from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Dict, List, Optional


class NodeType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VOICE = "voice"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    SOURCE = "source"
    PREVIEW = "preview"
    RESULT = "result"


class SourceKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VOICE = "voice"


# Node types whose text is the join of their received values.
AGGREGATOR_TYPES = frozenset({NodeType.RESULT, NodeType.PREVIEW})


class PortDirection(Enum):
    INPUT = auto()
    OUTPUT = auto()


@dataclass
class Port:
    """
    A single input or output handle on a node.

    ``id`` is positional (``input1``, ``output2``) and ``label`` is the
    editable name referenced by ``{label}`` tokens in templates.
    """

    id: str
    label: str
    direction: PortDirection = PortDirection.INPUT


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Node:
    """
    A typed text-processing node.

    ``text`` is always the template; the rendered value is computed on
    demand from ``input_values``. Aggregator nodes overwrite ``text`` with the
    join of their received values.
    """

    id: str
    type: NodeType
    title: str
    description: str = ""
    text: str = ""
    inputs: List[Port] = field(default_factory=list)
    outputs: List[Port] = field(default_factory=list)
    input_values: Dict[str, str] = field(default_factory=dict)
    config: Dict[str, object] = field(default_factory=dict)
    created_at: str = field(default_factory=utc_timestamp)

    @property
    def is_aggregator(self) -> bool:
        return self.type in AGGREGATOR_TYPES

    @property
    def is_source(self) -> bool:
        return self.type == NodeType.SOURCE

    def ports(self, is_input: bool) -> List[Port]:
        return self.inputs if is_input else self.outputs

    def find_port(self, port_id: str, is_input: bool) -> Optional[Port]:
        for port in self.ports(is_input):
            if port.id == port_id:
                return port
        return None

    def port_index(self, port_id: str, is_input: bool) -> int:
        for index, port in enumerate(self.ports(is_input)):
            if port.id == port_id:
                return index
        return -1


@dataclass
class Edge:
    id: str
    source: str
    target: str
    source_handle: str
    target_handle: str

    @staticmethod
    def make_id(source: str, source_handle: str, target: str, target_handle: str) -> str:
        return f"e{source}{source_handle}-{target}{target_handle}"
