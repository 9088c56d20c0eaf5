"""MCP tools for issue listing, CRUD, comments, and search."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from mcp.types import Tool

from linear_context.mcp_tools.common import (
    DEFAULT_SEARCH_LIMIT,
    MAX_SEARCH_LIMIT,
    ToolHandler,
    ToolResult,
    _error,
    _not_found,
    _ok,
    _parse_args,
    _project_comment,
    _project_issue,
    _resolve_assignee,
    _resolve_state_id,
    _slim_issue,
)
from linear_context.types.api import SearchResponse
from linear_context.types.inputs import AddCommentArgs, CreateIssueArgs, SearchIssuesArgs, UpdateIssueArgs

if TYPE_CHECKING:
    from linear_context.client import LinearBackend


def register(*, case_sensitive_search: bool = False) -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Return (tool_definitions, handler_map) for issue-domain tools.

    *case_sensitive_search* selects the comparator search_issues uses for its
    title/description text match.
    """
    tools = [
        Tool(
            name="list_issues",
            description="List all Linear issues assigned to me.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="create_issue",
            description="Create a new Linear issue in my first team.",
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {"type": "string", "minLength": 1, "description": "Issue title"},
                    "description": {"type": "string", "description": "Issue description (markdown)"},
                    "assignee": {
                        "type": "string",
                        "description": "Set to 'me' to assign to self, otherwise a Linear user ID",
                    },
                },
                "required": ["title"],
            },
        ),
        Tool(
            name="update_issue",
            description="Update an existing Linear issue. Only the fields provided are changed.",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "string", "description": "Issue ID or identifier (e.g. ENG-123)"},
                    "title": {"type": "string", "description": "New title"},
                    "description": {"type": "string", "description": "New description (markdown)"},
                    "assignee": {
                        "type": "string",
                        "description": "Set to 'me' to assign to self, otherwise a Linear user ID",
                    },
                    "status": {
                        "type": "string",
                        "description": "Workflow state name (e.g. 'In Progress') or state ID",
                    },
                },
                "required": ["issueId"],
            },
        ),
        Tool(
            name="add_comment",
            description="Add a comment to a Linear issue.",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "string", "description": "Issue ID or identifier (e.g. ENG-123)"},
                    "body": {"type": "string", "minLength": 1, "description": "Comment text (markdown)"},
                },
                "required": ["issueId", "body"],
            },
        ),
        Tool(
            name="search_issues",
            description=(
                "Search Linear issues. All filters are optional and combined with AND; "
                "query matches title or description. Most recently updated first."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "Text to find in title or description"},
                    "teamId": {"type": "string", "description": "Filter by team ID"},
                    "status": {"type": "string", "description": "Filter by workflow state name"},
                    "assignee": {
                        "type": "string",
                        "description": "Filter by assignee user ID, or 'me' for issues assigned to me",
                    },
                    "priority": {
                        "type": "integer",
                        "minimum": 0,
                        "maximum": 4,
                        "description": "Filter by priority (0=none, 1=urgent, 2=high, 3=medium, 4=low)",
                    },
                    "includeArchived": {
                        "type": "boolean",
                        "default": False,
                        "description": "Include archived issues",
                    },
                    "limit": {
                        "type": "integer",
                        "default": DEFAULT_SEARCH_LIMIT,
                        "minimum": 1,
                        "maximum": MAX_SEARCH_LIMIT,
                        "description": f"Max results (default {DEFAULT_SEARCH_LIMIT})",
                    },
                },
            },
        ),
    ]

    handlers: dict[str, ToolHandler] = {
        "list_issues": _handle_list_issues,
        "create_issue": _handle_create_issue,
        "update_issue": _handle_update_issue,
        "add_comment": _handle_add_comment,
        "search_issues": partial(_handle_search_issues, case_sensitive=case_sensitive_search),
    }

    return tools, handlers


def build_issue_filter(
    *,
    query: str | None = None,
    team_id: str | None = None,
    status: str | None = None,
    assignee_id: str | None = None,
    priority: int | None = None,
    case_sensitive: bool = False,
) -> dict[str, Any]:
    """Build a Linear ``IssueFilter`` from whichever predicates are present.

    Top-level keys are ANDed by Linear.  *query* becomes an ``or`` over title
    and description using ``containsIgnoreCase`` (or ``contains`` when
    *case_sensitive*).
    """
    issue_filter: dict[str, Any] = {}
    if query:
        comparator = "contains" if case_sensitive else "containsIgnoreCase"
        issue_filter["or"] = [
            {"title": {comparator: query}},
            {"description": {comparator: query}},
        ]
    if team_id:
        issue_filter["team"] = {"id": {"eq": team_id}}
    if status:
        issue_filter["state"] = {"name": {"eq": status}}
    if assignee_id:
        issue_filter["assignee"] = {"id": {"eq": assignee_id}}
    if priority is not None:
        issue_filter["priority"] = {"eq": priority}
    return issue_filter


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_list_issues(client: LinearBackend, arguments: dict[str, Any]) -> ToolResult:
    issues = await client.list_viewer_assigned_issues()
    return _ok([_slim_issue(i) for i in issues])


async def _handle_create_issue(client: LinearBackend, arguments: dict[str, Any]) -> ToolResult:
    args = _parse_args(arguments, CreateIssueArgs)

    teams = await client.list_viewer_teams()
    if not teams:
        return _error("No team found for the authenticated user", "no_team")

    issue_input: dict[str, Any] = {"teamId": teams[0]["id"], "title": args["title"]}
    if "description" in args:
        issue_input["description"] = args["description"]
    if args.get("assignee"):
        issue_input["assigneeId"] = await _resolve_assignee(client, args["assignee"])

    issue = await client.create_issue(issue_input)
    return _ok(_project_issue(issue))


async def _handle_update_issue(client: LinearBackend, arguments: dict[str, Any]) -> ToolResult:
    args = _parse_args(arguments, UpdateIssueArgs)

    issue = await client.get_issue(args["issueId"])
    if issue is None:
        return _not_found(args["issueId"])

    changes: dict[str, Any] = {}
    if "title" in args:
        changes["title"] = args["title"]
    if "description" in args:
        changes["description"] = args["description"]
    if "assignee" in args:
        changes["assigneeId"] = await _resolve_assignee(client, args["assignee"])
    if "status" in args:
        changes["stateId"] = await _resolve_state_id(client, issue, args["status"])

    if not changes:
        return _ok(_project_issue(issue))

    updated = await client.update_issue(issue["id"], changes)
    return _ok(_project_issue(updated))


async def _handle_add_comment(client: LinearBackend, arguments: dict[str, Any]) -> ToolResult:
    args = _parse_args(arguments, AddCommentArgs)

    issue = await client.get_issue(args["issueId"])
    if issue is None:
        return _not_found(args["issueId"])

    comment = await client.create_comment(issue["id"], args["body"])
    return _ok(_project_comment(comment, issue["id"]))


async def _handle_search_issues(
    client: LinearBackend,
    arguments: dict[str, Any],
    *,
    case_sensitive: bool = False,
) -> ToolResult:
    args = _parse_args(arguments, SearchIssuesArgs)

    assignee_id: str | None = None
    if args.get("assignee"):
        assignee_id = await _resolve_assignee(client, args["assignee"])

    issue_filter = build_issue_filter(
        query=args.get("query"),
        team_id=args.get("teamId"),
        status=args.get("status"),
        assignee_id=assignee_id,
        priority=args.get("priority"),
        case_sensitive=case_sensitive,
    )
    issues = await client.search_issues(
        issue_filter,
        first=args.get("limit", DEFAULT_SEARCH_LIMIT),
        include_archived=args.get("includeArchived", False),
    )
    projected = [_project_issue(i) for i in issues]
    return _ok(SearchResponse(total=len(projected), issues=projected))
