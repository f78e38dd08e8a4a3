"""
Input normalization for assertion kinds.

Suite files allow several input shapes per kind (a bare list of field
names, a single field name, or a structured object). This module turns
every accepted shape into the one typed payload the rules expect, so
rules never branch on input shape.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .errors import ConfigShapeError
from .models import (
    ArrayInputs,
    AssertionKind,
    CoercionInputs,
    ConditionalInputs,
    CustomInputs,
    DateInputs,
    DefaultValueInputs,
    EnumerationInputs,
    ErrorMessageInputs,
    FieldListInputs,
    InputPayload,
    MultiTypeInputs,
    NestedObjectInputs,
    NullabilityInputs,
    NumberFieldInputs,
    PatternInputs,
    SchemaInputs,
    StringFieldInputs,
)
from .types import KNOWN_TYPES, is_number

Parser = Callable[[AssertionKind, Any], InputPayload]


def parse_inputs(kind: AssertionKind, raw: Any) -> InputPayload:
    """
    Normalize raw decoded inputs for a kind.

    Raises:
        ConfigShapeError: if the inputs do not fit the kind
    """
    from .catalog import CATALOG

    return CATALOG[kind].parse(kind, raw)


# ─────────────────────────────────────────────────────────────────────────────
# Shared helpers
# ─────────────────────────────────────────────────────────────────────────────

def _mapping(kind: AssertionKind, raw: Any) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigShapeError(kind.value, f"expected an object, got {type(raw).__name__}")
    return raw


def _names(kind: AssertionKind, raw: Any, key: str) -> tuple[str, ...]:
    """A list of field names; a single name is treated as a one-item list."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, (list, tuple)):
        for name in raw:
            if not isinstance(name, str):
                raise ConfigShapeError(kind.value, f"'{key}' must contain field names, got {name!r}")
        return tuple(raw)
    raise ConfigShapeError(kind.value, f"'{key}' must be a list of field names")


def _field(kind: AssertionKind, data: Mapping[str, Any], key: str = "field") -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigShapeError(kind.value, f"missing required key '{key}'")
    return value


def _pattern(kind: AssertionKind, data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ConfigShapeError(kind.value, f"missing required key '{key}'")
    return value


def _bound(kind: AssertionKind, data: Mapping[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is not None and not is_number(value):
        raise ConfigShapeError(kind.value, f"'{key}' must be a number, got {value!r}")
    return value


def _type_names(kind: AssertionKind, names: Any, key: str) -> None:
    for name in names:
        if name not in KNOWN_TYPES:
            raise ConfigShapeError(
                kind.value,
                f"unknown type {name!r} in '{key}' (valid: {', '.join(sorted(KNOWN_TYPES))})",
            )


# ─────────────────────────────────────────────────────────────────────────────
# Per-kind parsers
# ─────────────────────────────────────────────────────────────────────────────

def parse_schema(kind: AssertionKind, raw: Any) -> SchemaInputs:
    data = _mapping(kind, raw)
    schema = data.get("schema")
    if not isinstance(schema, Mapping):
        raise ConfigShapeError(kind.value, "No schema object provided in inputs.")
    _type_names(kind, schema.values(), "schema")
    return SchemaInputs(schema=dict(schema), strict=bool(data.get("strict", False)))


def parse_field_list(kind: AssertionKind, raw: Any) -> FieldListInputs:
    if isinstance(raw, Mapping):
        return FieldListInputs(fields=_names(kind, raw.get("fields"), "fields"))
    if raw is None:
        raise ConfigShapeError(kind.value, "expected a list of field names")
    return FieldListInputs(fields=_names(kind, raw, "inputs"))


def parse_allowed_fields(kind: AssertionKind, raw: Any) -> FieldListInputs:
    if isinstance(raw, (list, tuple, str)):
        return FieldListInputs(fields=_names(kind, raw, "inputs"))
    data = _mapping(kind, raw)
    return FieldListInputs(fields=_names(kind, data.get("allowedFields", []), "allowedFields"))


def parse_string_fields(kind: AssertionKind, raw: Any) -> StringFieldInputs:
    if isinstance(raw, (list, tuple, str)):
        return StringFieldInputs(fields=_names(kind, raw, "inputs"), non_empty=True)
    data = _mapping(kind, raw)
    pattern = data.get("pattern")
    if pattern is not None and not isinstance(pattern, str):
        raise ConfigShapeError(kind.value, "'pattern' must be a string")
    return StringFieldInputs(
        fields=_names(kind, data.get("fields"), "fields"),
        min_length=_bound(kind, data, "minLength"),
        max_length=_bound(kind, data, "maxLength"),
        pattern=pattern or None,
    )


def parse_number_fields(kind: AssertionKind, raw: Any) -> NumberFieldInputs:
    if isinstance(raw, (list, tuple, str)):
        return NumberFieldInputs(fields=_names(kind, raw, "inputs"))
    data = _mapping(kind, raw)
    return NumberFieldInputs(
        fields=_names(kind, data.get("fields"), "fields"),
        minimum=_bound(kind, data, "min"),
        maximum=_bound(kind, data, "max"),
        integer_only=bool(data.get("integerOnly", False)),
    )


def parse_array(kind: AssertionKind, raw: Any) -> ArrayInputs:
    data = _mapping(kind, raw)
    field_name = data.get("field")
    if field_name is not None and not isinstance(field_name, str):
        raise ConfigShapeError(kind.value, "'field' must be a string")
    return ArrayInputs(
        field=field_name,
        min_length=_bound(kind, data, "minLength"),
        max_length=_bound(kind, data, "maxLength"),
        enforce_unique=bool(data.get("enforceUnique", False)),
    )


def parse_nested_object(kind: AssertionKind, raw: Any) -> NestedObjectInputs:
    data = _mapping(kind, raw)
    return NestedObjectInputs(
        field=_field(kind, data),
        required_fields=_names(kind, data.get("requiredFields"), "requiredFields"),
    )


def parse_pattern(kind: AssertionKind, raw: Any) -> PatternInputs:
    data = _mapping(kind, raw)
    return PatternInputs(field=_field(kind, data), pattern=_pattern(kind, data, "pattern"))


def parse_disallowed_pattern(kind: AssertionKind, raw: Any) -> PatternInputs:
    data = _mapping(kind, raw)
    return PatternInputs(
        field=_field(kind, data),
        pattern=_pattern(kind, data, "disallowedPattern"),
    )


def parse_enumeration(kind: AssertionKind, raw: Any) -> EnumerationInputs:
    data = _mapping(kind, raw)
    allowed = data.get("allowedValues")
    if not isinstance(allowed, (list, tuple)):
        raise ConfigShapeError(kind.value, "missing required key 'allowedValues' (a list)")
    return EnumerationInputs(field=_field(kind, data), allowed_values=tuple(allowed))


def parse_date(kind: AssertionKind, raw: Any) -> DateInputs:
    data = _mapping(kind, raw)
    return DateInputs(
        field=_field(kind, data),
        validate_actual_date=bool(data.get("validateActualDate", False)),
    )


def parse_nullability(kind: AssertionKind, raw: Any) -> NullabilityInputs:
    data = _mapping(kind, raw)
    return NullabilityInputs(
        non_nullable=_names(kind, data.get("nonNullable"), "nonNullable"),
        nullable=_names(kind, data.get("nullable"), "nullable"),
    )


def parse_default_value(kind: AssertionKind, raw: Any) -> DefaultValueInputs:
    data = _mapping(kind, raw)
    return DefaultValueInputs(field=_field(kind, data), default_value=data.get("defaultValue"))


def parse_conditional(kind: AssertionKind, raw: Any) -> ConditionalInputs:
    data = _mapping(kind, raw)
    return ConditionalInputs(
        if_field=_field(kind, data, "ifField"),
        then_field=_field(kind, data, "thenField"),
    )


def parse_coercion(kind: AssertionKind, raw: Any) -> CoercionInputs:
    data = _mapping(kind, raw)
    expected = data.get("expectedTypeAfterCoercion")
    if not isinstance(expected, str):
        raise ConfigShapeError(kind.value, "missing required key 'expectedTypeAfterCoercion'")
    _type_names(kind, [expected], "expectedTypeAfterCoercion")
    return CoercionInputs(field=_field(kind, data), expected_type=expected)


def parse_multi_type(kind: AssertionKind, raw: Any) -> MultiTypeInputs:
    data = _mapping(kind, raw)
    allowed = _names(kind, data.get("allowedTypes"), "allowedTypes")
    if not allowed:
        raise ConfigShapeError(kind.value, "missing required key 'allowedTypes'")
    _type_names(kind, allowed, "allowedTypes")
    return MultiTypeInputs(field=_field(kind, data), allowed_types=allowed)


def parse_error_message(kind: AssertionKind, raw: Any) -> ErrorMessageInputs:
    data = _mapping(kind, raw)
    error_field = data.get("errorField") or "error"
    contains = data.get("messageContains")
    if contains is not None and not isinstance(contains, str):
        raise ConfigShapeError(kind.value, "'messageContains' must be a string")
    return ErrorMessageInputs(error_field=str(error_field), message_contains=contains or None)


def parse_custom(kind: AssertionKind, raw: Any) -> CustomInputs:
    data = _mapping(kind, raw)
    path = data.get("path")
    if not isinstance(path, str) or not path:
        raise ConfigShapeError(kind.value, "missing required key 'path'")
    return CustomInputs(path=path, config={k: v for k, v in data.items() if k != "path"})
