"""MCP error handling: unknown tools, argument validation, upstream failures."""

from __future__ import annotations

import pytest

from linear_context.client import LinearAuthError, LinearError
from linear_context.mcp_server import ToolDispatcher
from tests._fake_linear import FakeLinear
from tests.mcp._helpers import _parse


class TestUnknownTool:
    @pytest.mark.parametrize("name", ["create_note", "", "LIST_ISSUES", "delete_everything"])
    async def test_unknown_tool_is_error_result(self, dispatcher: ToolDispatcher, fake_linear: FakeLinear, name: str) -> None:
        result = await dispatcher.dispatch(name, {})
        assert result.is_error is True
        data = _parse(result)
        assert data["code"] == "unknown_tool"
        assert f"Unknown tool: {name}" == data["error"]
        assert fake_linear.calls == []

    async def test_to_call_tool_result_sets_is_error(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.dispatch("create_note", {})
        wire = result.to_call_tool_result()
        assert wire.isError is True
        assert wire.content[0].type == "text"


class TestArgumentValidation:
    async def test_missing_required_field_named(self, dispatcher: ToolDispatcher, fake_linear: FakeLinear) -> None:
        result = await dispatcher.dispatch("create_issue", {"description": "no title"})
        data = _parse(result)
        assert result.is_error is True
        assert data["code"] == "validation_error"
        assert data["error"] == "Missing required argument: title"
        assert fake_linear.calls == []

    async def test_add_comment_missing_body(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.dispatch("add_comment", {"issueId": "iss-1"})
        assert _parse(result)["error"] == "Missing required argument: body"

    async def test_blank_title_rejected(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.dispatch("create_issue", {"title": "   "})
        data = _parse(result)
        assert data["code"] == "validation_error"
        assert "title" in data["error"]

    async def test_wrong_type(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.dispatch("search_issues", {"limit": "ten"})
        data = _parse(result)
        assert data["code"] == "validation_error"
        assert data["error"] == "limit must be an integer"

    async def test_priority_out_of_range(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.dispatch("search_issues", {"priority": 7})
        data = _parse(result)
        assert data["code"] == "validation_error"
        assert "<= 4" in data["error"]

    async def test_bool_is_not_integer(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.dispatch("search_issues", {"limit": True})
        assert _parse(result)["code"] == "validation_error"


class TestUpstreamErrors:
    async def test_upstream_error_becomes_error_result(self, dispatcher: ToolDispatcher, fake_linear: FakeLinear) -> None:
        fake_linear.fail_with = LinearError("Linear API request failed: connection refused")
        result = await dispatcher.dispatch("list_teams", {})
        assert result.is_error is True
        data = _parse(result)
        assert data["code"] == "upstream_error"
        assert "connection refused" in data["error"]

    async def test_auth_error_code(self, dispatcher: ToolDispatcher, fake_linear: FakeLinear) -> None:
        fake_linear.fail_with = LinearAuthError("Linear API rejected the credential (HTTP 401)")
        result = await dispatcher.dispatch("list_issues", {})
        assert _parse(result)["code"] == "auth_error"

    async def test_keeps_serving_after_failure(self, dispatcher: ToolDispatcher, fake_linear: FakeLinear) -> None:
        fake_linear.fail_with = LinearError("rate limited")
        failed = await dispatcher.dispatch("list_teams", {})
        assert failed.is_error is True

        fake_linear.fail_with = None
        recovered = await dispatcher.dispatch("list_teams", {})
        assert recovered.is_error is False
        assert _parse(recovered)[0]["key"] == "ENG"
