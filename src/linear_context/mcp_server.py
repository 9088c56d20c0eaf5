"""MCP server exposing Linear issue tracking.

Speaks MCP over stdio and forwards every tool call and resource read to the
Linear GraphQL API through a single injected :class:`LinearClient`.

Usage:
    linear-context-mcp                       # Reads LINEAR_API_KEY (and .env)
    linear-context-mcp --env-file ./my.env   # Explicit .env file
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Resource, Tool
from pydantic import AnyUrl

from linear_context import __version__
from linear_context.client import LinearAuthError, LinearBackend, LinearClient, LinearError
from linear_context.config import ConfigError, LinearConfig
from linear_context.mcp_tools import issues, teams
from linear_context.mcp_tools.common import ToolHandler, ToolResult, _error, _project_issue
from linear_context.validation import validate_arguments

logger = logging.getLogger(__name__)

SERVER_NAME = "linear-context"
ISSUE_SCHEME = "issue"

# ---------------------------------------------------------------------------
# Resource errors
# ---------------------------------------------------------------------------


class ResourceError(ValueError):
    """A resource read that cannot be satisfied."""


class UnsupportedResourceError(ResourceError):
    """URI scheme is not one this server resolves."""


class IssueNotFoundError(ResourceError):
    """The issue named by a resource URI does not exist upstream."""

    def __init__(self, issue_id: str) -> None:
        self.issue_id = issue_id
        super().__init__(f"Issue not found: {issue_id}")


# ---------------------------------------------------------------------------
# Tool registry + dispatch
# ---------------------------------------------------------------------------


def build_registry(*, case_sensitive_search: bool = False) -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Merge every tool module's (tools, handlers) into one registry.

    Raises RuntimeError on duplicate tool names or when a module declares a
    tool without a handler (or the reverse).
    """
    all_tools: list[Tool] = []
    all_handlers: dict[str, ToolHandler] = {}
    for module_tools, module_handlers in (
        issues.register(case_sensitive_search=case_sensitive_search),
        teams.register(),
    ):
        declared = {t.name for t in module_tools}
        if declared != set(module_handlers):
            msg = f"Tool/handler mismatch: declared={sorted(declared)}, handled={sorted(module_handlers)}"
            raise RuntimeError(msg)
        for tool in module_tools:
            if tool.name in all_handlers:
                msg = f"Duplicate tool name: {tool.name}"
                raise RuntimeError(msg)
            all_tools.append(tool)
            all_handlers[tool.name] = module_handlers[tool.name]
    return all_tools, all_handlers


class ToolDispatcher:
    """Route tool calls by name to their handlers.

    Every call yields a :class:`ToolResult`: unknown names, schema violations,
    handler-level failures and upstream Linear errors all come back as
    ``is_error`` results, so one failing call never takes the server down.
    """

    def __init__(self, client: LinearBackend, *, case_sensitive_search: bool = False) -> None:
        self.client = client
        self.tools, self.handlers = build_registry(case_sensitive_search=case_sensitive_search)
        self._schemas = {t.name: t.inputSchema for t in self.tools}

    @property
    def tool_names(self) -> set[str]:
        return set(self.handlers)

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        handler = self.handlers.get(name)
        if handler is None:
            return _error(f"Unknown tool: {name}", "unknown_tool")

        arguments = dict(arguments or {})
        problem = validate_arguments(arguments, self._schemas[name])
        if problem is not None:
            return _error(problem, "validation_error")

        try:
            return await handler(self.client, arguments)
        except LinearAuthError as e:
            return _error(str(e), "auth_error")
        except LinearError as e:
            return _error(str(e), "upstream_error")


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


def parse_issue_uri(uri: str) -> str:
    """Extract the issue identifier from ``issue://<id>`` (or ``issue:///<id>``).

    Raises UnsupportedResourceError for any other scheme or an empty id.
    """
    parts = urlsplit(uri)
    if parts.scheme != ISSUE_SCHEME:
        msg = f"Unsupported resource type: {parts.scheme or uri}"
        raise UnsupportedResourceError(msg)
    issue_id = parts.netloc or parts.path.lstrip("/").split("/", 1)[0]
    if not issue_id:
        msg = f"Unsupported resource type: missing issue id in {uri}"
        raise UnsupportedResourceError(msg)
    return issue_id


async def list_issue_resources(client: LinearBackend) -> list[Resource]:
    """One resource per issue currently assigned to the viewer."""
    assigned = await client.list_viewer_assigned_issues()
    return [
        Resource(
            uri=AnyUrl(f"{ISSUE_SCHEME}://{issue['id']}"),
            name=f"{issue.get('identifier') or issue['id']}: {issue.get('title', '')}",
            description=issue.get("description") or None,
            mimeType="application/json",
        )
        for issue in assigned
    ]


async def read_issue_resource(client: LinearBackend, uri: str) -> str:
    """Resolve an issue resource URI to the pretty-printed issue projection."""
    issue_id = parse_issue_uri(uri)
    issue = await client.get_issue(issue_id)
    if issue is None:
        raise IssueNotFoundError(issue_id)
    return json.dumps(_project_issue(issue), indent=2, default=str)


# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------


def create_server(client: LinearBackend, *, case_sensitive_search: bool = False) -> Server[Any, Any]:
    """Build an MCP server wired to *client*.

    The client is the only state shared between requests.
    """
    server: Server[Any, Any] = Server(SERVER_NAME, version=__version__)
    dispatcher = ToolDispatcher(client, case_sensitive_search=case_sensitive_search)

    @server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
    async def list_tools() -> list[Tool]:
        return list(dispatcher.tools)

    @server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
        t0 = time.monotonic()
        try:
            result = await dispatcher.dispatch(name, arguments)
        except Exception:
            logger.error("tool_error", extra={"tool": name, "args_data": arguments}, exc_info=True)
            raise
        duration_ms = round((time.monotonic() - t0) * 1000, 1)
        if result.is_error:
            logger.warning(
                "tool_failed",
                extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms, "code": result.code},
            )
        else:
            logger.info("tool_call", extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms})
        return result.to_call_tool_result()

    @server.list_resources()  # type: ignore[untyped-decorator,no-untyped-call]
    async def list_resources() -> list[Resource]:
        return await list_issue_resources(client)

    @server.read_resource()  # type: ignore[untyped-decorator,no-untyped-call]
    async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        try:
            text = await read_issue_resource(client, str(uri))
        except ResourceError as e:
            logger.warning("resource_failed", extra={"args_data": {"uri": str(uri)}, "error": str(e)})
            raise
        return [ReadResourceContents(content=text, mime_type="application/json")]

    return server


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def _run(config: LinearConfig) -> None:
    from linear_context.logging import setup_logging

    setup_logging(config.log_dir, config.log_level)
    logger.info("mcp_server_start", extra={"tool": "server", "args_data": {"api_url": config.api_url}})

    async with LinearClient(config) as client:
        server = create_server(client, case_sensitive_search=config.search_case_sensitive)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    parser = argparse.ArgumentParser(description="Linear MCP server")
    parser.add_argument("--env-file", type=Path, default=None, help="Load environment from this .env file")
    args = parser.parse_args()

    try:
        config = LinearConfig.from_env(args.env_file)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    asyncio.run(_run(config))


if __name__ == "__main__":
    main()
