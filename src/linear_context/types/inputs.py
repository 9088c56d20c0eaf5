# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDict contracts for MCP tool handler input arguments.

Each TypedDict mirrors the JSON Schema ``inputSchema`` on the corresponding
``mcp.types.Tool`` definition.  ``TOOL_ARGS_MAP`` maps tool names to their
TypedDict class so the sync test can verify structural agreement.

Handlers receive arguments only after
:func:`linear_context.validation.validate_arguments` has checked them against
the schema, so the ``cast()`` in ``_parse_args`` narrows an already-checked
mapping.
"""

# NOTE: Do NOT add ``from __future__ import annotations`` to this module.
# It breaks TypedDict.__required_keys__ / __optional_keys__ introspection
# on Python <3.14, which the sync test in test_input_type_contracts.py
# depends on for verifying required/optional agreement with JSON Schema.

from typing import NotRequired, TypedDict

# ---------------------------------------------------------------------------
# issues.py handlers
# ---------------------------------------------------------------------------


class CreateIssueArgs(TypedDict):
    title: str
    description: NotRequired[str]
    assignee: NotRequired[str]


class UpdateIssueArgs(TypedDict):
    issueId: str
    title: NotRequired[str]
    description: NotRequired[str]
    assignee: NotRequired[str]
    status: NotRequired[str]


class AddCommentArgs(TypedDict):
    issueId: str
    body: str


class SearchIssuesArgs(TypedDict):
    query: NotRequired[str]
    teamId: NotRequired[str]
    status: NotRequired[str]
    assignee: NotRequired[str]
    priority: NotRequired[int]
    includeArchived: NotRequired[bool]
    limit: NotRequired[int]


# Registry: tool_name -> TypedDict class.
# No-argument tools (list_issues, list_teams) are intentionally excluded.
TOOL_ARGS_MAP: dict[str, type] = {
    "create_issue": CreateIssueArgs,
    "update_issue": UpdateIssueArgs,
    "add_comment": AddCommentArgs,
    "search_issues": SearchIssuesArgs,
}
