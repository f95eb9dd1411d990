from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Union

from .base import Node, NodeType, PortDirection, SourceKind
from .handles import default_ports


@dataclass(frozen=True)
class NodeTemplate:
    """
    Describes how to instantiate a node of a given type for the editor.
    """

    type: NodeType
    description: str
    input_count: int = 1
    output_count: int = 1
    default_config: Dict[str, object] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.type.value.capitalize()

    def default_text(self, node_id: str) -> str:
        if self.type in (NodeType.RESULT, NodeType.PREVIEW):
            return ""
        return f"{self.type.value} {node_id}"

    def instantiate(self, node_id: str) -> Node:
        config: Dict[str, object] = {
            "show_description": True,
            "show_inputs": False,
            "show_output": False,
            "collapsed": False,
        }
        config.update(self.default_config)
        return Node(
            id=node_id,
            type=self.type,
            title=f"{self.title} {node_id}",
            description=self.description,
            text=self.default_text(node_id),
            inputs=default_ports(self.input_count, "input", PortDirection.INPUT),
            outputs=default_ports(self.output_count, "output", PortDirection.OUTPUT),
            config=config,
        )


_TEMPLATES: List[NodeTemplate] = [
    NodeTemplate(
        type=NodeType.TEXT,
        description="Transforms text input using template syntax",
    ),
    NodeTemplate(
        type=NodeType.IMAGE,
        description="Processes image data",
    ),
    NodeTemplate(
        type=NodeType.VOICE,
        description="Handles voice and audio processing",
    ),
    NodeTemplate(
        type=NodeType.JAVASCRIPT,
        description="Executes JavaScript code",
    ),
    NodeTemplate(
        type=NodeType.PYTHON,
        description="Runs Python code",
    ),
    NodeTemplate(
        type=NodeType.SOURCE,
        description="Provides initial input data",
        input_count=0,
        default_config={"source_kind": SourceKind.TEXT.value},
    ),
    NodeTemplate(
        type=NodeType.PREVIEW,
        description="Shows live preview of changes",
    ),
    NodeTemplate(
        type=NodeType.RESULT,
        description="Displays final output",
        output_count=0,
    ),
]

_TEMPLATE_MAP: Dict[NodeType, NodeTemplate] = {template.type: template for template in _TEMPLATES}


def get_node_templates() -> Iterable[NodeTemplate]:
    """
    Return an iterable of all registered node templates.
    """

    return tuple(_TEMPLATES)


def get_node_template(node_type: Union[NodeType, str]) -> NodeTemplate:
    """
    Look up a node template by its type tag.

    Raises ``KeyError`` for tags outside the known node types.
    """

    try:
        key = NodeType(node_type)
    except ValueError:
        raise KeyError(node_type) from None
    return _TEMPLATE_MAP[key]
