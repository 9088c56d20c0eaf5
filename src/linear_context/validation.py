"""Argument validation against MCP tool input schemas.

Pure functions with no MCP or Click dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}

_ARTICLES = {"integer": "an", "object": "an", "array": "an"}


def _matches_type(value: Any, json_type: str) -> bool:
    expected = _JSON_TYPES.get(json_type)
    if expected is None:
        return True
    # bool is an int subclass; JSON keeps them distinct.
    if isinstance(value, bool) and json_type in ("integer", "number"):
        return False
    return isinstance(value, expected)


def validate_arguments(arguments: Mapping[str, Any], schema: Mapping[str, Any]) -> str | None:
    """Check *arguments* against a tool's JSON *schema*.

    Returns None when valid, otherwise a message naming the first offending
    field.  Checks required presence, declared JSON type, and integer
    ``minimum``/``maximum`` bounds.  Unknown keys are left to the handler,
    which ignores them.
    """
    if not isinstance(arguments, Mapping):
        return "arguments must be an object"

    for field in schema.get("required", []):
        if arguments.get(field) is None:
            return f"Missing required argument: {field}"

    properties: Mapping[str, Any] = schema.get("properties", {})
    for field, prop_schema in properties.items():
        if field not in arguments or arguments[field] is None:
            continue
        value = arguments[field]
        json_type = prop_schema.get("type")
        if json_type and not _matches_type(value, json_type):
            return f"{field} must be {_ARTICLES.get(json_type, 'a')} {json_type}"
        if json_type == "integer":
            minimum = prop_schema.get("minimum")
            maximum = prop_schema.get("maximum")
            if minimum is not None and value < minimum:
                return f"{field} must be >= {minimum}"
            if maximum is not None and value > maximum:
                return f"{field} must be <= {maximum}"
        if json_type == "string" and prop_schema.get("minLength") and not value.strip():
            return f"{field} must not be empty"
    return None
