"""
Editing operations over the node graph.
"""

from textflow.results import OperationResult, OperationStatus

from .engine import GraphEditor

__all__ = ["GraphEditor", "OperationResult", "OperationStatus"]
