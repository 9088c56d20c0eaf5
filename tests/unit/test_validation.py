"""Tests for the shared validation module."""

from __future__ import annotations

from typing import Any

from linear_context.validation import validate_arguments

SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "issueId": {"type": "string"},
        "body": {"type": "string", "minLength": 1},
        "priority": {"type": "integer", "minimum": 0, "maximum": 4},
        "includeArchived": {"type": "boolean"},
    },
    "required": ["issueId", "body"],
}


class TestValidateArguments:
    """validate_arguments() pure function tests."""

    def test_valid(self) -> None:
        assert validate_arguments({"issueId": "iss-1", "body": "hi"}, SCHEMA) is None

    def test_missing_required_names_field(self) -> None:
        assert validate_arguments({"body": "hi"}, SCHEMA) == "Missing required argument: issueId"

    def test_null_counts_as_missing(self) -> None:
        assert validate_arguments({"issueId": None, "body": "hi"}, SCHEMA) == "Missing required argument: issueId"

    def test_first_missing_in_declared_order(self) -> None:
        assert validate_arguments({}, SCHEMA) == "Missing required argument: issueId"

    def test_wrong_string_type(self) -> None:
        assert validate_arguments({"issueId": 5, "body": "hi"}, SCHEMA) == "issueId must be a string"

    def test_wrong_boolean_type(self) -> None:
        err = validate_arguments({"issueId": "a", "body": "b", "includeArchived": "yes"}, SCHEMA)
        assert err == "includeArchived must be a boolean"

    def test_bool_rejected_for_integer(self) -> None:
        err = validate_arguments({"issueId": "a", "body": "b", "priority": False}, SCHEMA)
        assert err == "priority must be an integer"

    def test_integer_bounds(self) -> None:
        assert validate_arguments({"issueId": "a", "body": "b", "priority": -1}, SCHEMA) == "priority must be >= 0"
        assert validate_arguments({"issueId": "a", "body": "b", "priority": 5}, SCHEMA) == "priority must be <= 4"
        assert validate_arguments({"issueId": "a", "body": "b", "priority": 4}, SCHEMA) is None

    def test_blank_min_length_string(self) -> None:
        assert validate_arguments({"issueId": "a", "body": "  "}, SCHEMA) == "body must not be empty"

    def test_unknown_keys_ignored(self) -> None:
        assert validate_arguments({"issueId": "a", "body": "b", "extra": 1}, SCHEMA) is None

    def test_non_mapping(self) -> None:
        assert validate_arguments(["not", "a", "dict"], SCHEMA) == "arguments must be an object"  # type: ignore[arg-type]

    def test_empty_schema(self) -> None:
        assert validate_arguments({}, {"type": "object", "properties": {}}) is None
