"""Async client for the Linear GraphQL API.

Thin adapter over ``https://api.linear.app/graphql``: every public method
issues exactly one GraphQL request and returns the raw node dicts (camelCase
keys, as Linear sends them).  Shaping into caller-facing projections happens
in :mod:`linear_context.mcp_tools.common`.

Failures are raised, never swallowed: HTTP/transport problems and GraphQL
``errors`` become :class:`LinearError` (or :class:`LinearAuthError` for
rejected credentials).  No retries, no caching.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol

import httpx

from linear_context.config import LinearConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
ASSIGNED_ISSUES_PAGE = 50

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class LinearError(Exception):
    """Upstream failure talking to the Linear API."""


class LinearAuthError(LinearError):
    """The configured credential was rejected (HTTP 401/403 or auth error)."""


class LinearNotFoundError(LinearError):
    """Linear reported that a referenced entity does not exist."""


# ---------------------------------------------------------------------------
# GraphQL documents
# ---------------------------------------------------------------------------

ISSUE_FIELDS = """
fragment IssueFields on Issue {
  id
  identifier
  title
  description
  priority
  url
  createdAt
  updatedAt
  state { id name type }
  assignee { id name displayName }
  team { id key name }
}
"""

VIEWER_QUERY = """
query Viewer {
  viewer { id name displayName email }
}
"""

VIEWER_TEAMS_QUERY = """
query ViewerTeams {
  viewer {
    teams { nodes { id name key } }
  }
}
"""

ASSIGNED_ISSUES_QUERY = (
    ISSUE_FIELDS
    + """
query AssignedIssues($first: Int) {
  viewer {
    assignedIssues(first: $first, orderBy: updatedAt) { nodes { ...IssueFields } }
  }
}
"""
)

ISSUE_QUERY = (
    ISSUE_FIELDS
    + """
query Issue($id: String!) {
  issue(id: $id) { ...IssueFields }
}
"""
)

TEAM_STATES_QUERY = """
query TeamStates($id: String!) {
  team(id: $id) {
    states { nodes { id name type } }
  }
}
"""

CREATE_ISSUE_MUTATION = (
    ISSUE_FIELDS
    + """
mutation IssueCreate($input: IssueCreateInput!) {
  issueCreate(input: $input) { success issue { ...IssueFields } }
}
"""
)

UPDATE_ISSUE_MUTATION = (
    ISSUE_FIELDS
    + """
mutation IssueUpdate($id: String!, $input: IssueUpdateInput!) {
  issueUpdate(id: $id, input: $input) { success issue { ...IssueFields } }
}
"""
)

CREATE_COMMENT_MUTATION = """
mutation CommentCreate($input: CommentCreateInput!) {
  commentCreate(input: $input) {
    success
    comment { id body url createdAt issue { id identifier } }
  }
}
"""

SEARCH_ISSUES_QUERY = (
    ISSUE_FIELDS
    + """
query SearchIssues($filter: IssueFilter, $first: Int, $includeArchived: Boolean) {
  issues(filter: $filter, first: $first, includeArchived: $includeArchived, orderBy: updatedAt) {
    nodes { ...IssueFields }
  }
}
"""
)


# ---------------------------------------------------------------------------
# Backend protocol
# ---------------------------------------------------------------------------


class LinearBackend(Protocol):
    """Operations the MCP layer needs from Linear.

    :class:`LinearClient` is the production implementation; tests substitute
    an in-memory fake with the same shape.
    """

    async def get_viewer(self) -> dict[str, Any]: ...

    async def list_viewer_teams(self) -> list[dict[str, Any]]: ...

    async def list_viewer_assigned_issues(self, first: int = ASSIGNED_ISSUES_PAGE) -> list[dict[str, Any]]: ...

    async def get_issue(self, issue_id: str) -> dict[str, Any] | None: ...

    async def list_team_states(self, team_id: str) -> list[dict[str, Any]]: ...

    async def create_issue(self, issue_input: dict[str, Any]) -> dict[str, Any]: ...

    async def update_issue(self, issue_id: str, issue_input: dict[str, Any]) -> dict[str, Any]: ...

    async def create_comment(self, issue_id: str, body: str) -> dict[str, Any]: ...

    async def search_issues(
        self,
        issue_filter: dict[str, Any],
        *,
        first: int,
        include_archived: bool = False,
    ) -> list[dict[str, Any]]: ...


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


def _is_auth_error(error: dict[str, Any]) -> bool:
    extensions = error.get("extensions") or {}
    code = str(extensions.get("code", "")).upper()
    kind = str(extensions.get("type", "")).lower()
    return code == "AUTHENTICATION_ERROR" or kind == "authentication error"


def _is_not_found_error(error: dict[str, Any]) -> bool:
    message = str(error.get("message", "")).lower()
    extensions = error.get("extensions") or {}
    presentable = str(extensions.get("userPresentableMessage", "")).lower()
    return "entity not found" in message or "could not find" in presentable


class LinearClient:
    """Authenticated async GraphQL client for Linear.

    One instance is created at startup and shared by every request; it holds
    only the credential and the underlying ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        config: LinearConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.config = config
        self._http = httpx.AsyncClient(
            headers={
                "Authorization": config.authorization_header,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> LinearClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST a GraphQL document and return its ``data`` object.

        Raises:
            LinearAuthError: HTTP 401/403 or an authentication GraphQL error.
            LinearNotFoundError: Linear reported a missing entity.
            LinearError: any other transport, HTTP or GraphQL failure.
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        try:
            response = await self._http.post(self.config.api_url, json=payload)
        except httpx.HTTPError as e:
            msg = f"Linear API request failed: {e}"
            raise LinearError(msg) from e

        if response.status_code in (401, 403):
            msg = f"Linear API rejected the credential (HTTP {response.status_code})"
            raise LinearAuthError(msg)

        try:
            body = response.json()
        except ValueError:
            body = None

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            if any(_is_auth_error(err) for err in errors):
                msg = f"Linear authentication failed: {messages}"
                raise LinearAuthError(msg)
            if any(_is_not_found_error(err) for err in errors):
                raise LinearNotFoundError(messages)
            msg = f"Linear API error: {messages}"
            raise LinearError(msg)

        if response.status_code >= 400:
            msg = f"Linear API returned HTTP {response.status_code}"
            raise LinearError(msg)
        if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
            msg = "Linear API returned a response without data"
            raise LinearError(msg)
        return body["data"]

    # -- viewer -------------------------------------------------------------

    async def get_viewer(self) -> dict[str, Any]:
        data = await self.execute(VIEWER_QUERY)
        viewer = data.get("viewer")
        if not viewer:
            msg = "Linear API returned no viewer for the configured credential"
            raise LinearError(msg)
        return viewer

    async def list_viewer_teams(self) -> list[dict[str, Any]]:
        data = await self.execute(VIEWER_TEAMS_QUERY)
        return list(((data.get("viewer") or {}).get("teams") or {}).get("nodes") or [])

    async def list_viewer_assigned_issues(self, first: int = ASSIGNED_ISSUES_PAGE) -> list[dict[str, Any]]:
        data = await self.execute(ASSIGNED_ISSUES_QUERY, {"first": first})
        return list(((data.get("viewer") or {}).get("assignedIssues") or {}).get("nodes") or [])

    # -- issues -------------------------------------------------------------

    async def get_issue(self, issue_id: str) -> dict[str, Any] | None:
        """Fetch one issue by UUID or identifier (e.g. ``ENG-123``); ``None`` if absent."""
        try:
            data = await self.execute(ISSUE_QUERY, {"id": issue_id})
        except LinearNotFoundError:
            logger.debug("Issue %s not found upstream", issue_id)
            return None
        return data.get("issue")

    async def list_team_states(self, team_id: str) -> list[dict[str, Any]]:
        data = await self.execute(TEAM_STATES_QUERY, {"id": team_id})
        return list(((data.get("team") or {}).get("states") or {}).get("nodes") or [])

    async def create_issue(self, issue_input: dict[str, Any]) -> dict[str, Any]:
        data = await self.execute(CREATE_ISSUE_MUTATION, {"input": issue_input})
        return self._mutation_node(data, "issueCreate", "issue")

    async def update_issue(self, issue_id: str, issue_input: dict[str, Any]) -> dict[str, Any]:
        data = await self.execute(UPDATE_ISSUE_MUTATION, {"id": issue_id, "input": issue_input})
        return self._mutation_node(data, "issueUpdate", "issue")

    async def create_comment(self, issue_id: str, body: str) -> dict[str, Any]:
        data = await self.execute(CREATE_COMMENT_MUTATION, {"input": {"issueId": issue_id, "body": body}})
        return self._mutation_node(data, "commentCreate", "comment")

    async def search_issues(
        self,
        issue_filter: dict[str, Any],
        *,
        first: int,
        include_archived: bool = False,
    ) -> list[dict[str, Any]]:
        variables: dict[str, Any] = {
            "filter": issue_filter or None,
            "first": first,
            "includeArchived": include_archived,
        }
        data = await self.execute(SEARCH_ISSUES_QUERY, variables)
        return list((data.get("issues") or {}).get("nodes") or [])

    @staticmethod
    def _mutation_node(data: dict[str, Any], operation: str, key: str) -> dict[str, Any]:
        payload = data.get(operation) or {}
        node = payload.get(key)
        if not payload.get("success") or not node:
            msg = f"Linear {operation} did not succeed"
            raise LinearError(msg)
        return node
