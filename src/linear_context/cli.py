"""CLI for linear-context.

Usage:
    linear-context serve                            # Run the MCP server on stdio
    linear-context probe resources                  # List assigned issues, read the first
    linear-context probe tools                      # List advertised tools
    linear-context probe call list_teams            # Invoke a tool
    linear-context probe call search_issues --args '{"query": "auth"}'
"""

from __future__ import annotations

import asyncio
import json as json_mod
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from linear_context import __version__
from linear_context.config import ConfigError, LinearConfig

_T = TypeVar("_T")


def _load_config(env_file: Path | None) -> LinearConfig:
    """Load config or exit(1) with a diagnostic."""
    try:
        return LinearConfig.from_env(env_file)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _with_session(env_file: Path | None, action: Callable[[Any], Awaitable[_T]]) -> _T:
    """Spawn the server, run *action(session)*, and tear everything down."""
    from linear_context.probe import open_session, server_parameters

    async def _go() -> _T:
        async with open_session(server_parameters(env_file)) as session:
            return await action(session)

    return asyncio.run(_go())


def _echo_json(data: Any) -> None:
    click.echo(json_mod.dumps(data, indent=2, default=str))


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="linear-context")
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to .env file",
)
@click.pass_context
def cli(ctx: click.Context, env_file: Path | None) -> None:
    """linear-context: Linear issues over MCP."""
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server on stdio."""
    from linear_context.mcp_server import _run

    config = _load_config(ctx.obj["env_file"])
    asyncio.run(_run(config))


@cli.group()
@click.pass_context
def probe(ctx: click.Context) -> None:
    """Spawn the server and exercise it as an MCP client."""
    _load_config(ctx.obj["env_file"])


@probe.command("resources")
@click.pass_context
def probe_resources(ctx: click.Context) -> None:
    """List assigned-issue resources and read the first one."""
    from linear_context.probe import describe_resources

    data = _with_session(ctx.obj["env_file"], describe_resources)
    if not data["resources"]:
        click.echo("No assigned issues.")
        return
    for resource in data["resources"]:
        click.echo(f"{resource['uri']}  {resource['name']}")
    click.echo("\nFirst issue:")
    _echo_json(data["first"])


@probe.command("tools")
@click.pass_context
def probe_tools(ctx: click.Context) -> None:
    """List the tools the server advertises."""
    from linear_context.probe import describe_tools

    for tool in _with_session(ctx.obj["env_file"], describe_tools):
        required = ", ".join(tool["required"]) or "-"
        click.echo(f"{tool['name']:<16} required: {required}")
        click.echo(f"    {tool['description']}")


@probe.command("call")
@click.argument("tool_name")
@click.option("--args", "args_json", default="{}", help="Tool arguments as a JSON object")
@click.pass_context
def probe_call(ctx: click.Context, tool_name: str, args_json: str) -> None:
    """Invoke TOOL_NAME and print its result."""
    from linear_context.probe import invoke_tool

    try:
        arguments = json_mod.loads(args_json)
    except json_mod.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args") from e
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    async def _call(session: Any) -> tuple[bool, Any]:
        return await invoke_tool(session, tool_name, arguments)

    is_error, payload = _with_session(ctx.obj["env_file"], _call)
    _echo_json(payload)
    if is_error:
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
