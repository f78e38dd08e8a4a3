"""
JSON type names used by the type-oriented assertion kinds.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

# Marker for a field that is absent from the record
MISSING: Any = object()

KNOWN_TYPES = frozenset({
    "string",
    "number",
    "integer",
    "boolean",
    "object",
    "array",
    "null",
    "undefined",
    "any",
})


def type_name(value: Any) -> str:
    """Report the JSON type name of a value (``undefined`` for MISSING)."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def matches_type(value: Any, declared: str) -> bool:
    """Check a value against a declared type name."""
    if declared == "any":
        return value is not MISSING
    if declared == "integer":
        return is_integer(value)
    return type_name(value) == declared


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    if not is_number(value):
        return False
    return isinstance(value, int) or value.is_integer()


def as_text(value: Any) -> str:
    """Render a field value the way pattern checks see it (falsy -> "")."""
    if value is MISSING or not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def display_value(value: Any) -> str:
    """Render a value for messages: strings as-is, everything else as JSON."""
    if value is MISSING:
        return "undefined"
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that keeps booleans apart from numbers (``True != 1``)."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if type_name(left) != type_name(right):
        return False
    return left == right


def identity_key(value: Any) -> str:
    """
    Canonical form of a value for uniqueness checks.

    Mappings compare by content regardless of key order; integral floats
    collapse onto the matching int.
    """
    return json.dumps(_canonical(value), sort_keys=True, default=repr)


def _canonical(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value
