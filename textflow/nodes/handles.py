from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Tuple

from .base import Edge, Node, Port, PortDirection
from .propagation import DEFAULT_SEPARATOR, detach_edges, refresh_aggregate

if TYPE_CHECKING:  # pragma: no cover - type checking imports
    from .graph import NodeGraph


def default_ports(
    count: int,
    prefix: str,
    direction: PortDirection = PortDirection.INPUT,
) -> List[Port]:
    """
    Build ``count`` ports with IDs ``prefix1..prefixN`` and labels
    ``prefix_1..prefix_N``.
    """

    return [
        Port(id=f"{prefix}{index}", label=f"{prefix}_{index}", direction=direction)
        for index in range(1, count + 1)
    ]


def resize_inputs(
    graph: "NodeGraph",
    node: Node,
    new_count: int,
    separator: str = DEFAULT_SEPARATOR,
) -> Tuple[Edge, ...]:
    """
    Replace the input ports of ``node`` with ``new_count`` default ports.

    Survival is positional: the incoming edge of the port at index ``i`` and
    its value, when non-empty, move to the new port at index ``i`` if that
    index still exists, and are dropped otherwise. Returns the edges that
    were removed.
    """

    old_ports = node.inputs
    new_ports = default_ports(new_count, "input", PortDirection.INPUT)

    new_values: Dict[str, str] = {}
    for index, port in enumerate(new_ports[: len(old_ports)]):
        value = node.input_values.get(old_ports[index].id)
        if value:
            new_values[port.id] = value

    dropped: List[str] = []
    for edge in graph.connections_to(node.id):
        index = next((i for i, port in enumerate(old_ports) if port.id == edge.target_handle), -1)
        if 0 <= index < new_count:
            edge.target_handle = new_ports[index].id
        else:
            dropped.append(edge.id)

    node.inputs = new_ports
    node.input_values = new_values
    refresh_aggregate(node, separator)
    return graph.remove_edges(dropped)


def resize_outputs(
    graph: "NodeGraph",
    node: Node,
    new_count: int,
    separator: str = DEFAULT_SEPARATOR,
) -> Tuple[Edge, ...]:
    """
    Replace the output ports of ``node`` with ``new_count`` default ports.

    Edges sourced from ports that no longer exist are removed and their
    targets forget the value they received. Returns the removed edges.
    """

    new_ports = default_ports(new_count, "output", PortDirection.OUTPUT)
    surviving = {port.id for port in new_ports}
    stale = [edge for edge in graph.connections_from(node.id) if edge.source_handle not in surviving]

    node.outputs = new_ports
    removed = graph.remove_edges(edge.id for edge in stale)
    detach_edges(graph, removed, separator)
    return removed


def relabel_port(
    graph: "NodeGraph",
    node: Node,
    port_id: str,
    new_label: str,
    is_input: bool,
) -> bool:
    """
    Rename a port in place.

    Renaming an output port mirrors the label onto every input port it feeds,
    so tokens downstream keep naming the same upstream value. Returns
    ``False`` when the port does not exist.
    """

    port = node.find_port(port_id, is_input)
    if port is None:
        return False
    port.label = new_label

    if is_input:
        return True

    for edge in graph.connections_from(node.id, port_id):
        target = graph.get_node(edge.target)
        if target is None:
            continue
        target_port = target.find_port(edge.target_handle, is_input=True)
        if target_port is not None:
            target_port.label = new_label
    return True
