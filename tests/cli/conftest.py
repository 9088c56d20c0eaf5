"""Fixtures for CLI interface tests."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import pytest
from mcp import ClientSession
from mcp.shared.memory import create_connected_server_and_client_session

from linear_context import probe
from linear_context.mcp_server import create_server
from tests._fake_linear import FakeLinear


@pytest.fixture
def probe_backend(monkeypatch: pytest.MonkeyPatch, populated_linear: FakeLinear) -> FakeLinear:
    """Route ``probe`` commands to an in-memory server over *populated_linear*.

    Also sets LINEAR_API_KEY so the config check before spawning passes.
    """
    monkeypatch.setenv("LINEAR_API_KEY", "lin_api_test")
    # Keep server-side warnings out of the captured command output.
    monkeypatch.setattr(logging.getLogger("linear_context"), "handlers", [logging.NullHandler()])

    @asynccontextmanager
    async def _in_memory(params: Any) -> AsyncIterator[ClientSession]:
        server = create_server(populated_linear)
        async with create_connected_server_and_client_session(server) as session:
            yield session

    monkeypatch.setattr(probe, "open_session", _in_memory)
    return populated_linear
