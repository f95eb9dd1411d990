"""
Qt bindings for presenting and editing a node graph.
"""

from .flow_model import FlowModel

__all__ = ["FlowModel"]
