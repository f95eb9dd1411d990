"""
textflow: a text dataflow graph editor core.

Nodes hold text templates that reference their input ports with ``{label}``
tokens; editing any node pushes its rendered text through every connected
descendant.
"""

from .config import EditorSettings
from .editing import GraphEditor
from .results import OperationResult, OperationStatus

__all__ = ["EditorSettings", "GraphEditor", "OperationResult", "OperationStatus"]
