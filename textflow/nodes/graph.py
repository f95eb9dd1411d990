from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from textflow.results import OperationStatus

from .base import Edge, Node, Port

logger = logging.getLogger(__name__)


class NodeGraph:
    """
    In-memory store of nodes and edges shared by the editor and any
    presentation layer.

    Node IDs are decimal strings issued from a counter that only grows, so an
    ID freed by removing a node is never handed out again.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []
        self._highest_id = 0

    def issue_node_id(self) -> str:
        self._highest_id += 1
        while str(self._highest_id) in self._nodes:
            self._highest_id += 1
        return str(self._highest_id)

    @property
    def highest_id(self) -> int:
        return self._highest_id

    def add_node(self, node: Node) -> None:
        if node.id.isdigit():
            self._highest_id = max(self._highest_id, int(node.id))
        self._nodes[node.id] = node

    def remove_node(self, node_id: str) -> Tuple[Edge, ...]:
        """
        Remove a node together with every edge touching it.

        Returns the removed edges so callers can clean up the targets.
        """

        if self._nodes.pop(node_id, None) is None:
            return tuple()
        removed = tuple(
            edge for edge in self._edges if edge.source == node_id or edge.target == node_id
        )
        self._edges = [
            edge for edge in self._edges if edge.source != node_id and edge.target != node_id
        ]
        return removed

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_port(self, node_id: str, port_id: str, is_input: bool) -> Optional[Port]:
        node = self._nodes.get(node_id)
        if node is None:
            return None
        return node.find_port(port_id, is_input)

    def nodes(self) -> Dict[str, Node]:
        return dict(self._nodes)

    def node_list(self) -> Tuple[Node, ...]:
        return tuple(self._nodes.values())

    def last_node(self) -> Optional[Node]:
        if not self._nodes:
            return None
        return next(reversed(self._nodes.values()))

    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def can_connect(
        self,
        source: str,
        source_handle: str,
        target: str,
        target_handle: str,
        *,
        allow_cycles: bool = False,
    ) -> Tuple[OperationStatus, Optional[str]]:
        if self.get_port(source, source_handle, is_input=False) is None:
            return OperationStatus.NOT_FOUND, "Source node or output port does not exist."
        if self.get_port(target, target_handle, is_input=True) is None:
            return OperationStatus.NOT_FOUND, "Target node or input port does not exist."

        if self.connections_to(target, target_handle):
            return OperationStatus.PORT_OCCUPIED, "Target port already has an incoming connection."

        if not allow_cycles and self.would_create_cycle(source, target):
            return OperationStatus.CYCLE, "Connection would create a cycle."

        return OperationStatus.OK, None

    def connect(
        self,
        source: str,
        source_handle: str,
        target: str,
        target_handle: str,
        *,
        allow_cycles: bool = False,
    ) -> Optional[Edge]:
        status, reason = self.can_connect(
            source, source_handle, target, target_handle, allow_cycles=allow_cycles
        )
        if status != OperationStatus.OK:
            logger.debug("Refusing edge %s.%s -> %s.%s: %s", source, source_handle, target, target_handle, reason)
            return None

        edge = Edge(
            id=Edge.make_id(source, source_handle, target, target_handle),
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
        )
        self._edges.append(edge)
        return edge

    def remove_edges(self, edge_ids: Iterable[str]) -> Tuple[Edge, ...]:
        wanted = set(edge_ids)
        removed = tuple(edge for edge in self._edges if edge.id in wanted)
        self._edges = [edge for edge in self._edges if edge.id not in wanted]
        return removed

    def incoming(self, node_id: str) -> Tuple[Edge, ...]:
        return tuple(edge for edge in self._edges if edge.target == node_id)

    def outgoing(self, node_id: str) -> Tuple[Edge, ...]:
        return tuple(edge for edge in self._edges if edge.source == node_id)

    def connections_from(self, node_id: str, port_id: Optional[str] = None) -> Tuple[Edge, ...]:
        return tuple(
            edge
            for edge in self._edges
            if edge.source == node_id and (port_id is None or edge.source_handle == port_id)
        )

    def connections_to(self, node_id: str, port_id: Optional[str] = None) -> Tuple[Edge, ...]:
        return tuple(
            edge
            for edge in self._edges
            if edge.target == node_id and (port_id is None or edge.target_handle == port_id)
        )

    def to_digraph(self) -> nx.DiGraph:
        g = nx.DiGraph()
        g.add_nodes_from(self._nodes.keys())
        for edge in self._edges:
            if edge.source in self._nodes and edge.target in self._nodes:
                g.add_edge(edge.source, edge.target)
        return g

    def would_create_cycle(self, source: str, target: str) -> bool:
        if source == target:
            return True
        g = self.to_digraph()
        if source not in g or target not in g:
            return False
        return nx.has_path(g, target, source)

    def set_node_position(self, node_id: str, x: float, y: float) -> None:
        node = self._nodes.get(node_id)
        if node is not None:
            node.config["position"] = (float(x), float(y))

    def node_position(self, node_id: str) -> Optional[Tuple[float, float]]:
        node = self._nodes.get(node_id)
        if node is not None:
            position = node.config.get("position")
            if isinstance(position, (list, tuple)) and len(position) == 2:
                return float(position[0]), float(position[1])
        return None

    def is_empty(self) -> bool:
        return not self._nodes

    def clear(self) -> None:
        """
        Drop every node and edge. The ID counter is kept so IDs issued before
        the reset are not reused.
        """

        self._nodes.clear()
        self._edges.clear()
