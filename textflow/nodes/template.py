from __future__ import annotations

from typing import Mapping, Sequence

from .base import Node, Port


def substitute(text: str, values: Mapping[str, str], ports: Sequence[Port]) -> str:
    """
    Replace ``{label}`` tokens in ``text`` with the values recorded for each port.

    Ports are applied in order using their current labels. A port without a
    recorded value leaves its token untouched, as does any token that matches
    no port. When two ports share a label the first one holding a value wins,
    since its replacement consumes every occurrence of the token.
    """

    processed = text
    for port in ports:
        value = values.get(port.id)
        if value is None:
            continue
        processed = processed.replace("{" + port.label + "}", value)
    return processed


def render(node: Node) -> str:
    """
    Return the processed output of ``node``: its template evaluated over its
    own input ports.
    """

    return substitute(node.text, node.input_values, node.inputs)
