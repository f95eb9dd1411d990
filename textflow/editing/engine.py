from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from textflow.config import EditorSettings
from textflow.nodes import (
    Edge,
    GraphPreset,
    Node,
    NodeGraph,
    NodeType,
    SourceKind,
    get_node_template,
    propagate,
    relabel_port,
    render,
    resize_inputs,
    resize_outputs,
)
from textflow.nodes.propagation import detach_edges, refresh_aggregate
from textflow.results import OperationResult, OperationStatus

logger = logging.getLogger(__name__)

_PRESENTATION_FLAGS = frozenset(
    {"collapsed", "show_description", "show_inputs", "show_output", "position"}
)


class GraphEditor:
    """
    Apply editing operations to a node graph and keep derived values current.

    Each operation validates its preconditions first. A rejected operation
    returns an :class:`OperationResult` describing why and leaves the graph
    untouched; an accepted one mutates the graph and propagates the change
    downstream before returning.
    """

    def __init__(
        self,
        graph: Optional[NodeGraph] = None,
        settings: Optional[EditorSettings] = None,
    ) -> None:
        self._graph = graph or NodeGraph()
        self._settings = settings or EditorSettings()
        self._selected: Optional[str] = None

    @classmethod
    def from_preset(
        cls,
        preset: GraphPreset,
        settings: Optional[EditorSettings] = None,
    ) -> "GraphEditor":
        editor = cls(settings=settings)
        editor.load_preset(preset)
        return editor

    @property
    def graph(self) -> NodeGraph:
        return self._graph

    @property
    def settings(self) -> EditorSettings:
        return self._settings

    @property
    def selected_node(self) -> Optional[str]:
        return self._selected

    def nodes(self) -> Tuple[Node, ...]:
        return self._graph.node_list()

    def edges(self) -> Tuple[Edge, ...]:
        return self._graph.edges()

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._graph.get_node(node_id)

    def rendered_text(self, node_id: str) -> Optional[str]:
        node = self._graph.get_node(node_id)
        if node is None:
            return None
        return render(node)

    def load_preset(self, preset: GraphPreset) -> None:
        """
        Replace the graph contents with ``preset`` and seed every root node's
        value into its descendants.

        Preset node IDs only tie the payload's edges together; every node gets
        a freshly issued ID, so IDs used earlier in the session stay retired.
        """

        self._graph.clear()
        self._selected = None
        id_map: Dict[str, str] = {}

        nodes_data: Iterable[Dict[str, Any]] = preset.payload.get("nodes", [])  # type: ignore[assignment]
        for node_payload in nodes_data:
            node_type = node_payload.get("type")
            node_id = node_payload.get("id")
            if not node_type or not node_id:
                logger.warning("Preset '%s' has a node without id or type; skipped.", preset.id)
                continue

            try:
                template = get_node_template(node_type)
            except KeyError:
                logger.warning("Preset '%s' uses unknown node type '%s'.", preset.id, node_type)
                continue

            if str(node_id) in id_map:
                logger.warning("Preset '%s' repeats node id '%s'; skipped.", preset.id, node_id)
                continue

            node = template.instantiate(self._graph.issue_node_id())
            id_map[str(node_id)] = node.id
            node.title = str(node_payload.get("title", node.title))
            node.description = str(node_payload.get("description", node.description))
            node.text = str(node_payload.get("text", node.text))
            config = node_payload.get("config", {})
            if isinstance(config, dict):
                node.config.update(config)
            self._graph.add_node(node)

            position = node_payload.get("position")
            if isinstance(position, (list, tuple)) and len(position) == 2:
                self._graph.set_node_position(node.id, float(position[0]), float(position[1]))

        edges_data: Iterable[Dict[str, Any]] = preset.payload.get("edges", [])  # type: ignore[assignment]
        for edge_payload in edges_data:
            edge = self._graph.connect(
                id_map.get(str(edge_payload.get("source")), ""),
                str(edge_payload.get("source_handle")),
                id_map.get(str(edge_payload.get("target")), ""),
                str(edge_payload.get("target_handle")),
                allow_cycles=self._settings.allow_cycles,
            )
            if edge is None:
                logger.warning("Preset '%s' has an invalid edge %s; skipped.", preset.id, edge_payload)

        for node in self._graph.node_list():
            if not self._graph.incoming(node.id):
                self._propagate(node.id)

    def add_node(
        self,
        node_type: Union[NodeType, str],
        position: Optional[Tuple[float, float]] = None,
    ) -> OperationResult:
        try:
            template = get_node_template(node_type)
        except KeyError:
            return self._reject(
                "add_node", OperationStatus.TYPE_NOT_ALLOWED, f"Unknown node type '{node_type}'."
            )

        if position is None:
            position = self._next_position()

        node = template.instantiate(self._graph.issue_node_id())
        self._graph.add_node(node)
        self._graph.set_node_position(node.id, position[0], position[1])
        logger.debug("Added %s node %s.", node.type.value, node.id)
        return OperationResult.success(node.id)

    def remove_node(self, node_id: str) -> OperationResult:
        if self._graph.get_node(node_id) is None:
            return self._missing_node("remove_node", node_id)

        removed = self._graph.remove_node(node_id)
        for target_id in detach_edges(self._graph, removed, self._settings.join_separator):
            self._propagate(target_id)
        if self._selected == node_id:
            self._selected = None
        return OperationResult.success(node_id)

    def select_node(self, node_id: Optional[str]) -> OperationResult:
        if node_id is not None and self._graph.get_node(node_id) is None:
            return self._missing_node("select_node", node_id)
        self._selected = node_id
        return OperationResult.success(node_id)

    def connect(
        self,
        source: str,
        target: str,
        source_handle: str,
        target_handle: str,
    ) -> OperationResult:
        status, reason = self._graph.can_connect(
            source,
            source_handle,
            target,
            target_handle,
            allow_cycles=self._settings.allow_cycles,
        )
        if status != OperationStatus.OK:
            return self._reject("connect", status, reason or "")

        edge = self._graph.connect(
            source,
            source_handle,
            target,
            target_handle,
            allow_cycles=self._settings.allow_cycles,
        )
        if edge is None:
            return self._reject("connect", OperationStatus.NOT_FOUND, "Connection could not be created.")

        source_node = self._graph.get_node(source)
        target_node = self._graph.get_node(target)
        target_node.input_values[target_handle] = render(source_node)
        refresh_aggregate(target_node, self._settings.join_separator)
        self._propagate(source)
        return OperationResult.success(edge.id)

    def disconnect_edges(self, edge_ids: Iterable[str]) -> OperationResult:
        removed = self._graph.remove_edges(edge_ids)
        if not removed:
            return self._reject("disconnect_edges", OperationStatus.NOT_FOUND, "No matching edges.")

        for target_id in detach_edges(self._graph, removed, self._settings.join_separator):
            self._propagate(target_id)
        return OperationResult.success()

    def edit_text(self, node_id: str, text: str) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("edit_text", node_id)
        if node.is_aggregator:
            return self._reject(
                "edit_text",
                OperationStatus.TYPE_NOT_ALLOWED,
                f"{node.type.value.capitalize()} nodes display their inputs and cannot be edited.",
            )

        node.text = text
        self._propagate(node_id)
        return OperationResult.success(node_id)

    def set_input_value(self, node_id: str, port_id: str, value: str) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("set_input_value", node_id)
        if node.find_port(port_id, is_input=True) is None:
            return self._reject(
                "set_input_value", OperationStatus.NOT_FOUND, f"Node {node_id} has no input '{port_id}'."
            )

        node.input_values[port_id] = value
        refresh_aggregate(node, self._settings.join_separator)
        self._propagate(node_id)
        return OperationResult.success(node_id)

    def resize_inputs(self, node_id: str, count: int) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("resize_inputs", node_id)
        if node.type == NodeType.SOURCE:
            return self._reject(
                "resize_inputs", OperationStatus.TYPE_NOT_ALLOWED, "Source nodes have no inputs."
            )
        rejected = self._check_port_count("resize_inputs", count)
        if rejected is not None:
            return rejected
        if count == len(node.inputs):
            return OperationResult.success(node_id)

        resize_inputs(self._graph, node, count, self._settings.join_separator)
        self._propagate(node_id)
        return OperationResult.success(node_id)

    def resize_outputs(self, node_id: str, count: int) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("resize_outputs", node_id)
        if node.type == NodeType.RESULT:
            return self._reject(
                "resize_outputs", OperationStatus.TYPE_NOT_ALLOWED, "Result nodes have no outputs."
            )
        rejected = self._check_port_count("resize_outputs", count)
        if rejected is not None:
            return rejected
        if count == len(node.outputs):
            return OperationResult.success(node_id)

        removed = resize_outputs(self._graph, node, count, self._settings.join_separator)
        for edge in removed:
            self._propagate(edge.target)
        return OperationResult.success(node_id)

    def relabel_port(self, node_id: str, port_id: str, label: str, is_input: bool) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("relabel_port", node_id)
        if not relabel_port(self._graph, node, port_id, label, is_input):
            kind = "input" if is_input else "output"
            return self._reject(
                "relabel_port", OperationStatus.NOT_FOUND, f"Node {node_id} has no {kind} '{port_id}'."
            )

        self._propagate(node_id)
        return OperationResult.success(node_id)

    def change_source_kind(self, node_id: str, kind: Union[SourceKind, str]) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("change_source_kind", node_id)
        if node.type != NodeType.SOURCE:
            return self._reject(
                "change_source_kind", OperationStatus.TYPE_NOT_ALLOWED, "Only source nodes hold media."
            )
        try:
            source_kind = SourceKind(kind)
        except ValueError:
            return self._reject(
                "change_source_kind", OperationStatus.TYPE_NOT_ALLOWED, f"Unknown source kind '{kind}'."
            )

        node.config["source_kind"] = source_kind.value
        node.config.pop("image_url", None)
        node.config.pop("audio_url", None)
        node.text = ""
        self._propagate(node_id)
        return OperationResult.success(node_id)

    def change_source_media(self, node_id: str, url: str) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("change_source_media", node_id)
        kind = node.config.get("source_kind")
        if node.type != NodeType.SOURCE or kind == SourceKind.TEXT.value:
            return self._reject(
                "change_source_media",
                OperationStatus.TYPE_NOT_ALLOWED,
                "Media can only be attached to image or voice sources.",
            )

        key = "image_url" if kind == SourceKind.IMAGE.value else "audio_url"
        node.config[key] = url
        node.text = url
        self._propagate(node_id)
        return OperationResult.success(node_id)

    def set_title(self, node_id: str, title: str) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("set_title", node_id)
        node.title = title
        return OperationResult.success(node_id)

    def set_description(self, node_id: str, description: str) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("set_description", node_id)
        node.description = description
        return OperationResult.success(node_id)

    def set_presentation(self, node_id: str, **flags: object) -> OperationResult:
        node = self._graph.get_node(node_id)
        if node is None:
            return self._missing_node("set_presentation", node_id)
        unknown = sorted(set(flags) - _PRESENTATION_FLAGS)
        if unknown:
            return self._reject(
                "set_presentation", OperationStatus.NOT_FOUND, f"Unknown presentation flags: {unknown}."
            )

        position = flags.pop("position", None)
        if position is not None:
            if not (isinstance(position, (list, tuple)) and len(position) == 2):
                return self._reject(
                    "set_presentation", OperationStatus.OUT_OF_RANGE, "Position must be an (x, y) pair."
                )
            try:
                x, y = float(position[0]), float(position[1])
            except (TypeError, ValueError):
                return self._reject(
                    "set_presentation", OperationStatus.OUT_OF_RANGE, "Position coordinates must be numbers."
                )
            self._graph.set_node_position(node_id, x, y)
        for key, value in flags.items():
            node.config[key] = bool(value)
        return OperationResult.success(node_id)

    def _propagate(self, node_id: str) -> None:
        propagate(self._graph, node_id, self._settings.join_separator)

    def _next_position(self) -> Tuple[float, float]:
        last = self._graph.last_node()
        if last is None:
            return self._settings.default_position
        x, y = self._graph.node_position(last.id) or self._settings.default_position
        dx, dy = self._settings.node_offset
        return x + dx, y + dy

    def _check_port_count(self, operation: str, count: int) -> Optional[OperationResult]:
        low, high = self._settings.min_ports, self._settings.max_ports
        if low <= count <= high:
            return None
        return self._reject(
            operation, OperationStatus.OUT_OF_RANGE, f"Port count must be between {low} and {high}."
        )

    def _missing_node(self, operation: str, node_id: str) -> OperationResult:
        return self._reject(operation, OperationStatus.NOT_FOUND, f"Node {node_id} does not exist.")

    def _reject(self, operation: str, status: OperationStatus, reason: str) -> OperationResult:
        logger.debug("%s rejected (%s): %s", operation, status.value, reason)
        return OperationResult.rejected(status, reason)
