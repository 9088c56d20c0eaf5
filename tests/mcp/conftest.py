"""Fixtures for MCP server tests."""

from __future__ import annotations

import pytest

from linear_context.mcp_server import ToolDispatcher
from tests._fake_linear import FakeLinear


@pytest.fixture
def dispatcher(fake_linear: FakeLinear) -> ToolDispatcher:
    """Dispatcher wired to an empty FakeLinear."""
    return ToolDispatcher(fake_linear)


@pytest.fixture
def populated_dispatcher(populated_linear: FakeLinear) -> ToolDispatcher:
    """Dispatcher wired to the populated FakeLinear."""
    return ToolDispatcher(populated_linear)
