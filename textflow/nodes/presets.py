from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class GraphPreset:
    id: str
    name: str
    description: str
    payload: Dict[str, object]


_DEFAULT_PRESET = GraphPreset(
    id="greeting-waterfall",
    name="Greeting Waterfall",
    description="A source handle flows through a text template into a preview and a result.",
    payload={
        "nodes": [
            {
                "id": "1",
                "type": "source",
                "title": "Some Text File",
                "description": "A source node containing some text",
                "text": "@quanturtle",
                "config": {"show_description": False, "collapsed": True},
                "position": (-50, -50),
            },
            {
                "id": "2",
                "type": "text",
                "title": "My Text Node",
                "description": "Transforms the input text",
                "text": "Hola, I'm {input_1}",
                "config": {"show_description": False},
                "position": (400, 100),
            },
            {
                "id": "3",
                "type": "preview",
                "title": "Preview",
                "description": "Shows a preview of the transformed text",
                "config": {"show_description": False, "collapsed": True},
                "position": (825, 200),
            },
            {
                "id": "4",
                "type": "result",
                "title": "Result",
                "description": "Displays the final result",
                "config": {"show_description": False},
                "position": (1250, 350),
            },
        ],
        "edges": [
            {"source": "1", "source_handle": "output1", "target": "2", "target_handle": "input1"},
            {"source": "2", "source_handle": "output1", "target": "3", "target_handle": "input1"},
            {"source": "3", "source_handle": "output1", "target": "4", "target_handle": "input1"},
        ],
    },
)


def get_presets() -> Tuple[GraphPreset, ...]:
    return (_DEFAULT_PRESET,)


def get_default_preset() -> GraphPreset:
    return _DEFAULT_PRESET
