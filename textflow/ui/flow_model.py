from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from textflow.config import EditorSettings
from textflow.editing import GraphEditor, OperationResult
from textflow.nodes import Edge, GraphPreset, Node

logger = logging.getLogger(__name__)


class FlowModel(QObject):
    """
    Qt-facing owner of a graph editor.

    Canvas and inspector widgets call the slots below for each user gesture
    and redraw when ``graphChanged`` fires. Rejected gestures are reported
    through ``operationRejected`` instead of raising.
    """

    graphChanged = Signal()
    nodeAdded = Signal(str)  # node_id
    nodeRemoved = Signal(str)  # node_id
    selectionChanged = Signal(object)  # node_id | None
    operationRejected = Signal(str, object)  # operation name, OperationResult

    def __init__(
        self,
        editor: Optional[GraphEditor] = None,
        settings: Optional[EditorSettings] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._editor = editor or GraphEditor(settings=settings)

    @classmethod
    def from_preset(
        cls,
        preset: GraphPreset,
        settings: Optional[EditorSettings] = None,
        parent: Optional[QObject] = None,
    ) -> "FlowModel":
        return cls(GraphEditor.from_preset(preset, settings), parent=parent)

    @property
    def editor(self) -> GraphEditor:
        return self._editor

    def nodes(self) -> Tuple[Node, ...]:
        return self._editor.nodes()

    def edges(self) -> Tuple[Edge, ...]:
        return self._editor.edges()

    def selected_node(self) -> Optional[Node]:
        node_id = self._editor.selected_node
        return self._editor.get_node(node_id) if node_id is not None else None

    def load_preset(self, preset: GraphPreset) -> None:
        self._editor.load_preset(preset)
        self.selectionChanged.emit(None)
        self.graphChanged.emit()

    def add_node(self, node_type: str, position: Optional[Tuple[float, float]] = None) -> OperationResult:
        result = self._apply("add_node", self._editor.add_node(node_type, position))
        if result.ok and result.subject is not None:
            self.nodeAdded.emit(result.subject)
        return result

    def remove_node(self, node_id: str) -> OperationResult:
        was_selected = self._editor.selected_node == node_id
        result = self._apply("remove_node", self._editor.remove_node(node_id))
        if result.ok:
            self.nodeRemoved.emit(node_id)
            if was_selected:
                self.selectionChanged.emit(None)
        return result

    def select_node(self, node_id: Optional[str]) -> OperationResult:
        if node_id == self._editor.selected_node:
            return OperationResult.success(node_id)
        result = self._editor.select_node(node_id)
        if result.ok:
            self.selectionChanged.emit(node_id)
        else:
            self.operationRejected.emit("select_node", result)
        return result

    def connect_ports(
        self,
        source: str,
        target: str,
        source_handle: str,
        target_handle: str,
    ) -> OperationResult:
        return self._apply(
            "connect", self._editor.connect(source, target, source_handle, target_handle)
        )

    def disconnect_edges(self, edge_ids: Iterable[str]) -> OperationResult:
        return self._apply("disconnect_edges", self._editor.disconnect_edges(edge_ids))

    def edit_text(self, node_id: str, text: str) -> OperationResult:
        return self._apply("edit_text", self._editor.edit_text(node_id, text))

    def set_input_value(self, node_id: str, port_id: str, value: str) -> OperationResult:
        return self._apply("set_input_value", self._editor.set_input_value(node_id, port_id, value))

    def resize_inputs(self, node_id: str, count: int) -> OperationResult:
        return self._apply("resize_inputs", self._editor.resize_inputs(node_id, count))

    def resize_outputs(self, node_id: str, count: int) -> OperationResult:
        return self._apply("resize_outputs", self._editor.resize_outputs(node_id, count))

    def relabel_port(self, node_id: str, port_id: str, label: str, is_input: bool) -> OperationResult:
        return self._apply(
            "relabel_port", self._editor.relabel_port(node_id, port_id, label, is_input)
        )

    def change_source_kind(self, node_id: str, kind: str) -> OperationResult:
        return self._apply("change_source_kind", self._editor.change_source_kind(node_id, kind))

    def change_source_media(self, node_id: str, url: str) -> OperationResult:
        return self._apply("change_source_media", self._editor.change_source_media(node_id, url))

    def set_title(self, node_id: str, title: str) -> OperationResult:
        return self._apply("set_title", self._editor.set_title(node_id, title))

    def set_description(self, node_id: str, description: str) -> OperationResult:
        return self._apply("set_description", self._editor.set_description(node_id, description))

    def set_presentation(self, node_id: str, **flags: object) -> OperationResult:
        return self._apply("set_presentation", self._editor.set_presentation(node_id, **flags))

    def _apply(self, operation: str, result: OperationResult) -> OperationResult:
        if result.ok:
            self.graphChanged.emit()
        else:
            logger.debug("Operation %s was rejected: %s", operation, result.reason)
            self.operationRejected.emit(operation, result)
        return result
