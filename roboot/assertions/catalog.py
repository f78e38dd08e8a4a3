"""
Static registry of assertion kinds.

Every AssertionKind maps to exactly one entry carrying its scope, its input
parser and its item-level rule. "Custom" has no rule here: it is delegated
to the custom check bridge by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from . import inputs as parsers
from . import rules
from .models import AssertionKind, InputPayload, Scope, Verdict

Rule = Callable[[Mapping[str, Any], Any], Verdict]


@dataclass(frozen=True)
class CatalogEntry:
    """Evaluation metadata for one assertion kind."""
    kind: AssertionKind
    parse: Callable[[AssertionKind, Any], InputPayload]
    rule: Rule | None
    input_shape: str
    scope: Scope = Scope.ITEM


_ENTRIES = [
    CatalogEntry(
        AssertionKind.SCHEMA_COMPLIANCE, parsers.parse_schema, rules.check_schema,
        "{schema: {field: type}, strict?}",
    ),
    CatalogEntry(
        AssertionKind.REQUIRED_FIELDS, parsers.parse_field_list, rules.check_required_fields,
        "[field, ...]",
    ),
    CatalogEntry(
        AssertionKind.NO_ADDITIONAL_FIELDS, parsers.parse_field_list,
        rules.check_no_additional_fields, "[field, ...]",
    ),
    CatalogEntry(
        AssertionKind.STRING_FIELDS, parsers.parse_string_fields, rules.check_string_fields,
        "[field, ...] | {fields, minLength?, maxLength?, pattern?}",
    ),
    CatalogEntry(
        AssertionKind.NUMBER_FIELDS, parsers.parse_number_fields, rules.check_number_fields,
        "[field, ...] | {fields, min?, max?, integerOnly?}",
    ),
    CatalogEntry(
        AssertionKind.BOOLEAN_FIELDS, parsers.parse_field_list, rules.check_boolean_fields,
        "[field, ...]",
    ),
    CatalogEntry(
        AssertionKind.ARRAY, parsers.parse_array, rules.check_array_field,
        "{field?, minLength?, maxLength?, enforceUnique?}", scope=Scope.ARRAY,
    ),
    CatalogEntry(
        AssertionKind.NESTED_OBJECT, parsers.parse_nested_object, rules.check_nested_object,
        "{field, requiredFields}",
    ),
    CatalogEntry(
        AssertionKind.PATTERN, parsers.parse_pattern, rules.check_pattern,
        "{field, pattern}",
    ),
    CatalogEntry(
        AssertionKind.ENUMERATION, parsers.parse_enumeration, rules.check_enumeration,
        "{field, allowedValues}",
    ),
    CatalogEntry(
        AssertionKind.DATE_FIELD, parsers.parse_date, rules.check_date_field,
        "{field, validateActualDate?}",
    ),
    CatalogEntry(
        AssertionKind.NULLABILITY, parsers.parse_nullability, rules.check_nullability,
        "{nonNullable: [...], nullable: [...]}",
    ),
    CatalogEntry(
        AssertionKind.DEFAULT_VALUES, parsers.parse_default_value, rules.check_default_value,
        "{field, defaultValue}",
    ),
    CatalogEntry(
        AssertionKind.STRICT, parsers.parse_allowed_fields, rules.check_strict,
        "{allowedFields: [...]}",
    ),
    CatalogEntry(
        AssertionKind.CUSTOM_LOGIC, parsers.parse_conditional, rules.check_conditional,
        "{ifField, thenField}",
    ),
    CatalogEntry(
        AssertionKind.DATA_TRANSFORMATION, parsers.parse_coercion, rules.check_coercion,
        "{field, expectedTypeAfterCoercion}",
    ),
    CatalogEntry(
        AssertionKind.MULTI_TYPE, parsers.parse_multi_type, rules.check_multi_type,
        "{field, allowedTypes}",
    ),
    CatalogEntry(
        AssertionKind.ERROR_MESSAGING, parsers.parse_error_message, rules.check_error_message,
        "{errorField?, messageContains?}",
    ),
    CatalogEntry(
        AssertionKind.READ_ONLY, parsers.parse_field_list, rules.check_read_only,
        "[field, ...]",
    ),
    CatalogEntry(
        AssertionKind.DISALLOWED_PATTERN, parsers.parse_disallowed_pattern,
        rules.check_disallowed_pattern, "{field, disallowedPattern}",
    ),
    CatalogEntry(
        AssertionKind.CUSTOM, parsers.parse_custom, None,
        "{path, ...config}",
    ),
]

CATALOG: dict[AssertionKind, CatalogEntry] = {entry.kind: entry for entry in _ENTRIES}


def classify(kind: AssertionKind | str) -> Scope:
    """
    Decide whether a kind runs against the whole collection or per element.

    Unknown kinds are item-level; they are reported as unrecognized when
    evaluated.
    """
    known = AssertionKind.lookup(kind)
    if known is None:
        return Scope.ITEM
    return CATALOG[known].scope
