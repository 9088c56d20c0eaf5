"""Pure helpers and constants shared across MCP tool modules.

This module has NO dependency on ``mcp_server``, so it can be imported
freely without triggering circular-import issues.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar, cast

from mcp.types import CallToolResult, TextContent

from linear_context.types.api import (
    CommentProjection,
    ErrorResponse,
    IssueProjection,
    SlimIssue,
    TeamProjection,
)

if TYPE_CHECKING:
    from linear_context.client import LinearBackend

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Assignee alias resolved to the authenticated viewer's id.
SELF_ASSIGNEE = "me"

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 250


@dataclass(frozen=True)
class ToolResult:
    """Tagged outcome returned by every tool handler.

    ``is_error`` selects the MCP ``isError`` flag; ``code`` is the machine
    readable error code (``None`` on success).
    """

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False
    code: str | None = None

    def to_call_tool_result(self) -> CallToolResult:
        return CallToolResult(content=list(self.content), isError=self.is_error)


ToolHandler = Callable[["LinearBackend", dict[str, Any]], Awaitable[ToolResult]]


def _parse_args(arguments: dict[str, Any], cls: type[_T]) -> _T:
    """Cast validated MCP arguments to their TypedDict for static analysis.

    The dispatcher runs ``validate_arguments`` against the tool schema before
    any handler sees *arguments*; this cast() provides type narrowing only.
    """
    return cast(_T, arguments)


def _text(content: object) -> list[TextContent]:
    if isinstance(content, str):
        return [TextContent(type="text", text=content)]
    return [TextContent(type="text", text=json.dumps(content, indent=2, default=str))]


def _ok(payload: object) -> ToolResult:
    return ToolResult(content=_text(payload))


def _error(message: str, code: str) -> ToolResult:
    return ToolResult(content=_text(ErrorResponse(error=message, code=code)), is_error=True, code=code)


def _not_found(issue_id: str) -> ToolResult:
    return _error(f"Issue not found: {issue_id}", "not_found")


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------


def _name_of(node: dict[str, Any] | None, *keys: str) -> str | None:
    if not node:
        return None
    for key in keys:
        value = node.get(key)
        if value:
            return str(value)
    return None


def _project_issue(issue: dict[str, Any]) -> IssueProjection:
    """Flatten a raw Linear issue node."""
    return IssueProjection(
        id=issue["id"],
        identifier=issue.get("identifier"),
        title=issue.get("title", ""),
        description=issue.get("description"),
        state=_name_of(issue.get("state"), "name"),
        assignee=_name_of(issue.get("assignee"), "name", "displayName"),
        priority=issue.get("priority"),
        url=issue.get("url"),
        createdAt=issue.get("createdAt"),
        updatedAt=issue.get("updatedAt"),
    )


def _slim_issue(issue: dict[str, Any]) -> SlimIssue:
    """Return a lightweight dict for list_issues."""
    return SlimIssue(
        id=issue["id"],
        title=issue.get("title", ""),
        state=_name_of(issue.get("state"), "name"),
        url=issue.get("url"),
    )


def _project_team(team: dict[str, Any]) -> TeamProjection:
    return TeamProjection(id=team["id"], name=team.get("name", ""), key=team.get("key", ""))


def _project_comment(comment: dict[str, Any], issue_id: str | None = None) -> CommentProjection:
    issue = comment.get("issue") or {}
    return CommentProjection(
        id=comment["id"],
        body=comment.get("body", ""),
        url=comment.get("url"),
        createdAt=comment.get("createdAt"),
        issueId=issue.get("id") or issue_id,
    )


# ---------------------------------------------------------------------------
# Resolution helpers
# ---------------------------------------------------------------------------


async def _resolve_assignee(client: LinearBackend, assignee: str) -> str:
    """Map ``"me"`` to the viewer's id; any other value is a raw user id."""
    if assignee == SELF_ASSIGNEE:
        viewer = await client.get_viewer()
        return str(viewer["id"])
    return assignee


async def _resolve_state_id(client: LinearBackend, issue: dict[str, Any], status: str) -> str:
    """Map a workflow-state name to its id within the issue's team.

    Matching is case-insensitive.  When nothing matches (or the issue has no
    team), *status* is passed through as a raw state id.
    """
    team = issue.get("team") or {}
    team_id = team.get("id")
    if not team_id:
        return status
    wanted = status.strip().lower()
    for state in await client.list_team_states(team_id):
        if str(state.get("name", "")).lower() == wanted:
            return str(state["id"])
    logger.debug("No state named %r in team %s; treating as state id", status, team_id)
    return status
