"""
Node graph primitives: entities, templates, handles and propagation.
"""

from .base import AGGREGATOR_TYPES, Edge, Node, NodeType, Port, PortDirection, SourceKind
from .builtin import NodeTemplate, get_node_template, get_node_templates
from .graph import NodeGraph
from .handles import default_ports, relabel_port, resize_inputs, resize_outputs
from .presets import GraphPreset, get_default_preset, get_presets
from .propagation import join_values, propagate, propagation_order
from .template import render, substitute

__all__ = [
    "AGGREGATOR_TYPES",
    "Edge",
    "GraphPreset",
    "Node",
    "NodeGraph",
    "NodeTemplate",
    "NodeType",
    "Port",
    "PortDirection",
    "SourceKind",
    "default_ports",
    "get_default_preset",
    "get_node_template",
    "get_node_templates",
    "get_presets",
    "join_values",
    "propagate",
    "propagation_order",
    "relabel_port",
    "render",
    "resize_inputs",
    "resize_outputs",
    "substitute",
]
