"""
Item-level assertion rules.

Each rule checks one record (a mapping) against the normalized inputs of
its kind and returns a Verdict. Rules stop at the first failing condition.
"""

from __future__ import annotations

import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Mapping

from .errors import ConfigShapeError
from .models import (
    ArrayInputs,
    AssertionKind,
    CoercionInputs,
    ConditionalInputs,
    DateInputs,
    DefaultValueInputs,
    EnumerationInputs,
    ErrorMessageInputs,
    FieldListInputs,
    MultiTypeInputs,
    NestedObjectInputs,
    NullabilityInputs,
    NumberFieldInputs,
    PatternInputs,
    SchemaInputs,
    StringFieldInputs,
    Verdict,
)
from .types import (
    MISSING,
    as_text,
    display_value,
    identity_key,
    is_integer,
    is_number,
    matches_type,
    strict_equals,
    type_name,
)


def check_schema(record: Mapping[str, Any], inputs: SchemaInputs) -> Verdict:
    for name, expected in inputs.schema.items():
        value = record.get(name, MISSING)
        if not matches_type(value, expected):
            return Verdict.fail(
                f'Field "{name}" should be type "{expected}" but got "{type_name(value)}".'
            )

    if inputs.strict:
        for key in record:
            if key not in inputs.schema:
                return Verdict.fail(f'Strict schema compliance failed. Unexpected field "{key}".')
    return Verdict.ok()


def check_required_fields(record: Mapping[str, Any], inputs: FieldListInputs) -> Verdict:
    for name in inputs.fields:
        if name not in record:
            return Verdict.fail(f'Missing required field: "{name}".')
    return Verdict.ok()


def check_no_additional_fields(record: Mapping[str, Any], inputs: FieldListInputs) -> Verdict:
    allowed = set(inputs.fields)
    for key in record:
        if key not in allowed:
            return Verdict.fail(f'Unexpected field found: "{key}".')
    return Verdict.ok()


def check_string_fields(record: Mapping[str, Any], inputs: StringFieldInputs) -> Verdict:
    for name in inputs.fields:
        value = record.get(name, MISSING)
        if not isinstance(value, str):
            return Verdict.fail(f'Field "{name}" is not a string.')

        trimmed = value.strip()
        if inputs.non_empty and not trimmed:
            return Verdict.fail(f'Field "{name}" cannot be an empty string.')
        if inputs.min_length is not None and len(trimmed) < inputs.min_length:
            return Verdict.fail(f'Field "{name}" length is below minimum {inputs.min_length}.')
        if inputs.max_length is not None and len(trimmed) > inputs.max_length:
            return Verdict.fail(f'Field "{name}" length exceeds maximum {inputs.max_length}.')
        if inputs.pattern and not re.search(inputs.pattern, trimmed):
            return Verdict.fail(f'Field "{name}" does not match pattern: {inputs.pattern}')
    return Verdict.ok()


def check_number_fields(record: Mapping[str, Any], inputs: NumberFieldInputs) -> Verdict:
    for name in inputs.fields:
        value = record.get(name, MISSING)
        if not is_number(value):
            return Verdict.fail(f'Field "{name}" is not a number.')
        if inputs.minimum is not None and value < inputs.minimum:
            return Verdict.fail(f'Field "{name}" is below minimum value {inputs.minimum}.')
        if inputs.maximum is not None and value > inputs.maximum:
            return Verdict.fail(f'Field "{name}" exceeds maximum value {inputs.maximum}.')
        if inputs.integer_only and not is_integer(value):
            return Verdict.fail(f'Field "{name}" must be an integer.')
    return Verdict.ok()


def check_boolean_fields(record: Mapping[str, Any], inputs: FieldListInputs) -> Verdict:
    for name in inputs.fields:
        if not isinstance(record.get(name, MISSING), bool):
            return Verdict.fail(f'Field "{name}" is not a boolean.')
    return Verdict.ok()


def check_array_field(record: Mapping[str, Any], inputs: ArrayInputs) -> Verdict:
    if inputs.field is None:
        raise ConfigShapeError(
            AssertionKind.ARRAY.value,
            "missing required key 'field' when the response is an object",
        )

    name = inputs.field
    items = record.get(name, MISSING)
    if not isinstance(items, (list, tuple)):
        return Verdict.fail(f'Field "{name}" is not an array.')
    if inputs.min_length is not None and len(items) < inputs.min_length:
        return Verdict.fail(f'Array "{name}" length is below minimum {inputs.min_length}.')
    if inputs.max_length is not None and len(items) > inputs.max_length:
        return Verdict.fail(f'Array "{name}" length exceeds maximum {inputs.max_length}.')
    if inputs.enforce_unique and duplicate_positions(items):
        return Verdict.fail(f'Array "{name}" contains duplicate elements.')
    return Verdict.ok()


def check_nested_object(record: Mapping[str, Any], inputs: NestedObjectInputs) -> Verdict:
    nested = record.get(inputs.field, MISSING)
    if not isinstance(nested, Mapping):
        return Verdict.fail(f'Field "{inputs.field}" is not a valid nested object.')
    for name in inputs.required_fields:
        if name not in nested:
            return Verdict.fail(f'Missing nested field "{name}" in object "{inputs.field}".')
    return Verdict.ok()


def check_pattern(record: Mapping[str, Any], inputs: PatternInputs) -> Verdict:
    text = as_text(record.get(inputs.field, MISSING))
    if not re.search(inputs.pattern, text):
        return Verdict.fail(f'Field "{inputs.field}" does not match pattern: {inputs.pattern}')
    return Verdict.ok()


def check_enumeration(record: Mapping[str, Any], inputs: EnumerationInputs) -> Verdict:
    value = record.get(inputs.field, MISSING)
    if not any(strict_equals(value, allowed) for allowed in inputs.allowed_values):
        allowed = ", ".join(display_value(v) for v in inputs.allowed_values)
        return Verdict.fail(
            f'Field "{inputs.field}" has invalid value: "{display_value(value)}". Allowed: {allowed}'
        )
    return Verdict.ok()


def check_date_field(record: Mapping[str, Any], inputs: DateInputs) -> Verdict:
    value = record.get(inputs.field, MISSING)
    if not isinstance(value, str):
        return Verdict.fail(f'Field "{inputs.field}" is not a string date.')
    if inputs.validate_actual_date and not parses_as_date(value):
        return Verdict.fail(f'Field "{inputs.field}" is not a valid date: {value}')
    return Verdict.ok()


def check_nullability(record: Mapping[str, Any], inputs: NullabilityInputs) -> Verdict:
    for name in inputs.non_nullable:
        if name in record and record[name] is None:
            return Verdict.fail(f'Field "{name}" should not be null.')
    for name in inputs.nullable:
        if name in record and record[name] is not None:
            return Verdict.fail(f'Field "{name}" must be null if present.')
    return Verdict.ok()


def check_default_value(record: Mapping[str, Any], inputs: DefaultValueInputs) -> Verdict:
    if inputs.field not in record:
        return Verdict.fail(
            f'Missing field "{inputs.field}". Expected a default of "{inputs.default_value}".'
        )
    return Verdict.ok()


def check_strict(record: Mapping[str, Any], inputs: FieldListInputs) -> Verdict:
    allowed = set(inputs.fields)
    for key in record:
        if key not in allowed:
            return Verdict.fail(f'Strict validation failed: unexpected field "{key}".')
    return Verdict.ok()


def check_conditional(record: Mapping[str, Any], inputs: ConditionalInputs) -> Verdict:
    if record.get(inputs.if_field) and inputs.then_field not in record:
        return Verdict.fail(
            f'If "{inputs.if_field}" is present, "{inputs.then_field}" must be set.'
        )
    return Verdict.ok()


def check_coercion(record: Mapping[str, Any], inputs: CoercionInputs) -> Verdict:
    if not matches_type(record.get(inputs.field, MISSING), inputs.expected_type):
        return Verdict.fail(
            f'Field "{inputs.field}" is not coerced to type "{inputs.expected_type}".'
        )
    return Verdict.ok()


def check_multi_type(record: Mapping[str, Any], inputs: MultiTypeInputs) -> Verdict:
    value = record.get(inputs.field, MISSING)
    if not any(matches_type(value, allowed) for allowed in inputs.allowed_types):
        return Verdict.fail(
            f'Field "{inputs.field}" has type "{type_name(value)}" '
            f'but must be one of [{", ".join(inputs.allowed_types)}].'
        )
    return Verdict.ok()


def check_error_message(record: Mapping[str, Any], inputs: ErrorMessageInputs) -> Verdict:
    message = record.get(inputs.error_field, MISSING)
    if not isinstance(message, str):
        return Verdict.fail(
            f'Expected a string in "{inputs.error_field}" but got {type_name(message)}.'
        )
    if inputs.message_contains and inputs.message_contains not in message:
        return Verdict.fail(
            f'Error message does not contain: "{inputs.message_contains}". Actual: "{message}"'
        )
    return Verdict.ok()


def check_read_only(record: Mapping[str, Any], inputs: FieldListInputs) -> Verdict:
    for name in inputs.fields:
        if name in record:
            return Verdict.fail(f'Read-only field "{name}" should not be present or changed.')
    return Verdict.ok()


def check_disallowed_pattern(record: Mapping[str, Any], inputs: PatternInputs) -> Verdict:
    text = as_text(record.get(inputs.field, MISSING))
    if re.search(inputs.pattern, text):
        return Verdict.fail(
            f'Field "{inputs.field}" has disallowed characters matching: {inputs.pattern}'
        )
    return Verdict.ok()


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def duplicate_positions(items: list[Any] | tuple[Any, ...]) -> list[int]:
    """Positions of elements equal to an earlier element, in ascending order."""
    seen: set[str] = set()
    duplicates: list[int] = []
    for index, item in enumerate(items):
        key = identity_key(item)
        if key in seen:
            duplicates.append(index)
        else:
            seen.add(key)
    return duplicates


def parses_as_date(text: str) -> bool:
    """Accept ISO 8601 dates/datetimes and RFC 2822 dates."""
    try:
        datetime.fromisoformat(text.strip())
        return True
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text) is not None
    except (TypeError, ValueError, IndexError):
        return False
