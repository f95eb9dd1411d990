from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

_TRUTHY = {"1", "true", "yes", "on"}

# Upper bound for TEXTFLOW_MAX_PORTS; wider ranges must be set in code.
PORT_LIMIT = 5


@dataclass(frozen=True)
class EditorSettings:
    """
    Tunables for the graph editor.

    Parameters
    ----------
    min_ports, max_ports:
        Bounds accepted when resizing a node's port lists.
    join_separator:
        Separator placed between values on aggregator nodes.
    allow_cycles:
        Accept connections that close a cycle. Propagation still terminates
        because every node is visited at most once per pass.
    default_position, node_offset:
        Canvas placement for the first node and the shift applied to each
        node added after it.
    """

    min_ports: int = 1
    max_ports: int = 5
    join_separator: str = "\n\n"
    allow_cycles: bool = False
    default_position: Tuple[float, float] = (250.0, 100.0)
    node_offset: Tuple[float, float] = (50.0, 50.0)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorSettings":
        """
        Build settings from ``TEXTFLOW_*`` environment variables.

        ``TEXTFLOW_MAX_PORTS`` is clamped to ``[min_ports, PORT_LIMIT]``.
        """

        env = os.environ if environ is None else environ
        settings = cls()

        max_ports = env.get("TEXTFLOW_MAX_PORTS")
        if max_ports:
            limited = min(PORT_LIMIT, max(settings.min_ports, int(max_ports)))
            settings = replace(settings, max_ports=limited)

        allow_cycles = env.get("TEXTFLOW_ALLOW_CYCLES")
        if allow_cycles is not None:
            settings = replace(settings, allow_cycles=allow_cycles.strip().lower() in _TRUTHY)

        return settings
