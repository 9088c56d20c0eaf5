"""Manual test harness: drive the MCP server as a client would.

Spawns ``python -m linear_context.mcp_server`` over stdio with the ``mcp``
client SDK.  Used by the ``linear-context probe`` commands; not part of the
server's request path.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import TextContent, TextResourceContents


def server_parameters(env_file: Path | None = None) -> StdioServerParameters:
    """Parameters to spawn the server with this interpreter and the caller's environment."""
    args = ["-m", "linear_context.mcp_server"]
    if env_file is not None:
        args += ["--env-file", str(env_file)]
    return StdioServerParameters(command=sys.executable, args=args, env=dict(os.environ))


@asynccontextmanager
async def open_session(params: StdioServerParameters) -> AsyncIterator[ClientSession]:
    """Spawn the server subprocess and yield an initialized client session."""
    async with stdio_client(params) as (read_stream, write_stream), ClientSession(read_stream, write_stream) as session:
        await session.initialize()
        yield session


def _first_text(contents: list[Any]) -> str | None:
    for item in contents:
        if isinstance(item, TextContent | TextResourceContents):
            return item.text
    return None


def _maybe_json(text: str | None) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


async def describe_resources(session: ClientSession) -> dict[str, Any]:
    """List issue resources and read the first one, if any."""
    listed = await session.list_resources()
    resources = [{"uri": str(r.uri), "name": r.name} for r in listed.resources]
    first: Any = None
    if listed.resources:
        read = await session.read_resource(listed.resources[0].uri)
        first = _maybe_json(_first_text(list(read.contents)))
    return {"resources": resources, "first": first}


async def describe_tools(session: ClientSession) -> list[dict[str, Any]]:
    listed = await session.list_tools()
    return [
        {
            "name": t.name,
            "description": t.description,
            "required": list(t.inputSchema.get("required", [])),
        }
        for t in listed.tools
    ]


async def invoke_tool(session: ClientSession, name: str, arguments: dict[str, Any] | None = None) -> tuple[bool, Any]:
    """Call *name* and return ``(is_error, parsed_payload)``."""
    result = await session.call_tool(name, arguments or {})
    return bool(result.isError), _maybe_json(_first_text(list(result.content)))
