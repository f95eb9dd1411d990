import pytest

from textflow import GraphEditor
from textflow.nodes import get_default_preset


@pytest.fixture(scope="session")
def qt_core_app():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def editor():
    return GraphEditor()


@pytest.fixture
def add_node(editor):
    """Add a node of the given type to ``editor`` and return its ID."""

    def _add(node_type):
        result = editor.add_node(node_type)
        assert result.ok, result.reason
        return result.subject

    return _add


@pytest.fixture
def preset_editor():
    return GraphEditor.from_preset(get_default_preset())
