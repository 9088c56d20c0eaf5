"""MCP tools for team discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.types import Tool

from linear_context.mcp_tools.common import ToolHandler, ToolResult, _ok, _project_team

if TYPE_CHECKING:
    from linear_context.client import LinearBackend


def register() -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Return (tool_definitions, handler_map) for team-domain tools."""
    tools = [
        Tool(
            name="list_teams",
            description="List all Linear teams I have access to.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]

    handlers: dict[str, ToolHandler] = {
        "list_teams": _handle_list_teams,
    }

    return tools, handlers


async def _handle_list_teams(client: LinearBackend, arguments: dict[str, Any]) -> ToolResult:
    teams = await client.list_viewer_teams()
    return _ok([_project_team(t) for t in teams])
