# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""Typed contracts for MCP tool arguments and response projections."""

from __future__ import annotations

from linear_context.types.api import (
    CommentProjection,
    ErrorResponse,
    IssueProjection,
    SearchResponse,
    SlimIssue,
    TeamProjection,
)

__all__ = [
    "CommentProjection",
    "ErrorResponse",
    "IssueProjection",
    "SearchResponse",
    "SlimIssue",
    "TeamProjection",
]
