"""Shared fixtures for launcher_tools tests."""

from __future__ import annotations

import io
import logging
import textwrap
from pathlib import Path

import pytest

from launcher_tools import core


@pytest.fixture(autouse=True)
def reset_tool_registry():
    """Save and restore _TOOL_REGISTRY around each test."""
    saved = core._TOOL_REGISTRY.copy()
    yield
    core._TOOL_REGISTRY.clear()
    core._TOOL_REGISTRY.update(saved)


@pytest.fixture
def make_workspace(tmp_path: Path):
    """Factory that creates a temp workspace with an optional config.yaml.

    Usage::

        ws = make_workspace(config_yaml=\"\"\"
            launcher:
                mode: full_auto
        \"\"\")
    """
    _counter = 0

    def _make(config_yaml: str | None = None) -> Path:
        nonlocal _counter
        ws = tmp_path / f"workspace_{_counter}"
        ws.mkdir()
        _counter += 1

        if config_yaml is not None:
            (ws / "config.yaml").write_text(
                textwrap.dedent(config_yaml), encoding="utf-8",
            )
        return ws

    return _make


@pytest.fixture
def capture_logs():
    """Capture launcher_tools logger output into a StringIO buffer.

    The logger has propagate=False and its own StreamHandler, so
    capsys/caplog cannot see it.  This fixture adds a temporary handler.
    """
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("launcher_tools")
    logger.addHandler(handler)
    yield buf
    logger.removeHandler(handler)
