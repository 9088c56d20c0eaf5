# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDicts for MCP tool and resource response projections.

Keys are camelCase where they mirror Linear's own field names, so a projection
reads the same as the upstream entity it flattens.
"""

from __future__ import annotations

from typing import TypedDict

# ---------------------------------------------------------------------------
# Shared types
# ---------------------------------------------------------------------------


class ErrorResponse(TypedDict):
    """Standard error envelope returned by every failing tool call."""

    error: str
    code: str


class SlimIssue(TypedDict):
    """Reduced issue shape for list_issues."""

    id: str
    title: str
    state: str | None
    url: str | None


class IssueProjection(TypedDict):
    """Flattened snapshot of a Linear issue."""

    id: str
    identifier: str | None
    title: str
    description: str | None
    state: str | None
    assignee: str | None
    priority: int | None
    url: str | None
    createdAt: str | None
    updatedAt: str | None


class TeamProjection(TypedDict):
    id: str
    name: str
    key: str


class CommentProjection(TypedDict):
    id: str
    body: str
    url: str | None
    createdAt: str | None
    issueId: str | None


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class SearchResponse(TypedDict):
    """search_issues envelope."""

    total: int
    issues: list[IssueProjection]
