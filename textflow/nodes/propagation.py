from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

import networkx as nx

from .base import Edge, Node
from .template import render

if TYPE_CHECKING:  # pragma: no cover - type checking imports
    from .graph import NodeGraph

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "\n\n"


def join_values(values: Dict[str, str], separator: str = DEFAULT_SEPARATOR) -> str:
    return separator.join(values.values())


def refresh_aggregate(node: Node, separator: str = DEFAULT_SEPARATOR) -> None:
    """
    Recompute the displayed text of an aggregator node. Other nodes keep
    their template untouched.
    """

    if node.is_aggregator:
        node.text = join_values(node.input_values, separator)


def detach_edges(
    graph: "NodeGraph",
    edges: Iterable[Edge],
    separator: str = DEFAULT_SEPARATOR,
) -> List[str]:
    """
    Forget the values delivered by ``edges`` on their target nodes.

    The edges must already be gone from the graph. Returns the affected
    target IDs, first occurrence order.
    """

    affected: List[str] = []
    for edge in edges:
        target = graph.get_node(edge.target)
        if target is None:
            continue
        target.input_values.pop(edge.target_handle, None)
        refresh_aggregate(target, separator)
        if target.id not in affected:
            affected.append(target.id)
    return affected


def propagation_order(graph: "NodeGraph", start_id: str) -> Tuple[str, ...]:
    """
    Return ``start_id`` followed by every node reachable from it, each once.

    Nodes are discovered depth first. When the reachable subgraph is acyclic
    the discovery order is refined into a topological order, so a node is only
    visited after all of its reachable predecessors.
    """

    if graph.get_node(start_id) is None:
        return tuple()

    discovered: List[str] = []
    visited = set()
    stack = [start_id]
    while stack:
        node_id = stack.pop()
        if node_id in visited or graph.get_node(node_id) is None:
            continue
        visited.add(node_id)
        discovered.append(node_id)
        # Reversed so the first outgoing edge is explored first.
        for edge in reversed(graph.outgoing(node_id)):
            if edge.target not in visited:
                stack.append(edge.target)

    rank = {node_id: index for index, node_id in enumerate(discovered)}
    subgraph = graph.to_digraph().subgraph(discovered)
    if not nx.is_directed_acyclic_graph(subgraph):
        logger.debug("Cycle reachable from node %s; using discovery order.", start_id)
        return tuple(discovered)
    return tuple(nx.lexicographical_topological_sort(subgraph, key=rank.__getitem__))


def propagate(
    graph: "NodeGraph",
    changed_node_id: str,
    separator: str = DEFAULT_SEPARATOR,
) -> Tuple[str, ...]:
    """
    Push the output of ``changed_node_id`` to all of its descendants.

    Every descendant re-reads the rendered output of each upstream node into
    ``input_values``; aggregators then rebuild their joined text. The changed
    node keeps its own input values. Returns the visited node IDs.
    """

    order = propagation_order(graph, changed_node_id)
    for node_id in order:
        node = graph.get_node(node_id)
        if node is None:
            continue
        if node_id != changed_node_id:
            for edge in graph.incoming(node_id):
                if not edge.source_handle or not edge.target_handle:
                    continue
                source = graph.get_node(edge.source)
                if source is None:
                    continue
                node.input_values[edge.target_handle] = render(source)
        refresh_aggregate(node, separator)

    logger.debug("Propagated from node %s through %d node(s).", changed_node_id, len(order))
    return order
