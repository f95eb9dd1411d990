"""Tests for editor settings."""

from textflow import EditorSettings
from textflow.config import PORT_LIMIT


def test_defaults():
    settings = EditorSettings()
    assert (settings.min_ports, settings.max_ports) == (1, 5)
    assert settings.join_separator == "\n\n"
    assert settings.allow_cycles is False


def test_from_environ_overrides():
    settings = EditorSettings.from_environ(
        {"TEXTFLOW_MAX_PORTS": "3", "TEXTFLOW_ALLOW_CYCLES": "yes"}
    )
    assert settings.max_ports == 3
    assert settings.allow_cycles is True


def test_from_environ_ignores_missing_values():
    assert EditorSettings.from_environ({}) == EditorSettings()


def test_max_ports_never_below_minimum():
    assert EditorSettings.from_environ({"TEXTFLOW_MAX_PORTS": "0"}).max_ports == 1


def test_max_ports_capped_at_limit():
    assert EditorSettings.from_environ({"TEXTFLOW_MAX_PORTS": "8"}).max_ports == PORT_LIMIT
