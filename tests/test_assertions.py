import copy

import pytest

from roboot.assertions import AssertionEngine, AssertionSpec, run_assertions_sync
from roboot.assertions.models import PASS_MESSAGE


def check(record, kind, inputs):
    """Run one assertion against one response and return its result."""
    [result] = AssertionEngine().run_sync(record, [{"assertion": kind, "inputs": inputs}])
    return result


# --- Schema Compliance ---


def test_schema_passes_on_matching_types():
    result = check(
        {"id": 1, "title": "Hello", "tags": [], "meta": {}, "done": False},
        "Schema Compliance",
        {"schema": {"id": "number", "title": "string", "tags": "array", "meta": "object", "done": "boolean"}},
    )
    assert result.passed
    assert result.message == PASS_MESSAGE


def test_schema_reports_first_type_mismatch():
    result = check({"id": "1"}, "Schema Compliance", {"schema": {"id": "number"}})
    assert not result.passed
    assert result.message == 'Field "id" should be type "number" but got "string".'


def test_schema_missing_field_is_undefined():
    result = check({}, "Schema Compliance", {"schema": {"id": "number"}})
    assert result.message == 'Field "id" should be type "number" but got "undefined".'


def test_schema_null_and_array_type_names():
    result = check({"a": None}, "Schema Compliance", {"schema": {"a": "array"}})
    assert result.message == 'Field "a" should be type "array" but got "null".'


def test_schema_strict_rejects_extra_fields():
    result = check({"id": 1, "extra": True}, "Schema Compliance", {"schema": {"id": "number"}, "strict": True})
    assert not result.passed
    assert "extra" in result.message
    assert result.message == 'Strict schema compliance failed. Unexpected field "extra".'


def test_schema_non_strict_allows_extra_fields():
    result = check({"id": 1, "extra": True}, "Schema Compliance", {"schema": {"id": "number"}})
    assert result.passed


def test_schema_without_schema_object_fails_with_config_message():
    result = check({"id": 1}, "Schema Compliance", {})
    assert not result.passed
    assert result.message == 'Invalid inputs for "Schema Compliance": No schema object provided in inputs.'


def test_schema_unknown_type_name_is_rejected():
    result = check({"id": 1}, "Schema Compliance", {"schema": {"id": "float"}})
    assert not result.passed
    assert "unknown type 'float'" in result.message


# --- Required Fields / No Additional Fields / Strict / Read-Only ---


def test_required_fields_names_missing_field():
    result = check({"id": 1}, "Required Fields", ["id", "name"])
    assert not result.passed
    assert result.message == 'Missing required field: "name".'


def test_required_fields_accepts_fields_object():
    result = check({"id": 1, "name": "x"}, "Required Fields", {"fields": ["id", "name"]})
    assert result.passed


def test_required_fields_present_but_null_passes():
    assert check({"id": None}, "Required Fields", ["id"]).passed


def test_no_additional_fields():
    assert check({"id": 1}, "No Additional Fields", ["id", "name"]).passed
    result = check({"id": 1, "secret": "x"}, "No Additional Fields", ["id"])
    assert result.message == 'Unexpected field found: "secret".'


def test_strict_validation_uses_allowed_fields():
    result = check({"id": 1, "debug": True}, "Strict Validation", {"allowedFields": ["id"]})
    assert not result.passed
    assert result.message == 'Strict validation failed: unexpected field "debug".'


def test_read_only_fields_must_be_absent():
    assert check({"name": "x"}, "Read-Only Fields", ["id"]).passed
    result = check({"id": 1}, "Read-Only Fields", ["id"])
    assert result.message == 'Read-only field "id" should not be present or changed.'


# --- String / Number / Boolean ---


def test_string_fields_flat_list_rejects_blank():
    result = check({"title": "   "}, "String Field Validation", ["title"])
    assert result.message == 'Field "title" cannot be an empty string.'


def test_string_fields_rejects_non_string():
    result = check({"title": 5}, "String Field Validation", ["title"])
    assert result.message == 'Field "title" is not a string.'


def test_string_fields_length_and_pattern():
    inputs = {"fields": ["code"], "minLength": 2, "maxLength": 4, "pattern": "^[A-Z]+$"}
    assert check({"code": "ABC"}, "String Field Validation", inputs).passed
    assert check({"code": "A"}, "String Field Validation", inputs).message == (
        'Field "code" length is below minimum 2.'
    )
    assert check({"code": "ABCDE"}, "String Field Validation", inputs).message == (
        'Field "code" length exceeds maximum 4.'
    )
    assert check({"code": "abc"}, "String Field Validation", inputs).message == (
        'Field "code" does not match pattern: ^[A-Z]+$'
    )


def test_string_length_is_measured_on_trimmed_value():
    inputs = {"fields": ["code"], "maxLength": 3}
    assert check({"code": "  abc  "}, "String Field Validation", inputs).passed


def test_number_integer_only_rejects_fraction():
    result = check({"price": 10.5}, "Number Field Validation", {"fields": ["price"], "integerOnly": True})
    assert not result.passed
    assert result.message == 'Field "price" must be an integer.'


def test_number_integer_only_with_max_passes():
    result = check(
        {"price": 10},
        "Number Field Validation",
        {"fields": ["price"], "integerOnly": True, "max": 20},
    )
    assert result.passed


def test_number_bounds():
    inputs = {"fields": ["n"], "min": 1, "max": 5}
    assert check({"n": 0}, "Number Field Validation", inputs).message == (
        'Field "n" is below minimum value 1.'
    )
    assert check({"n": 6}, "Number Field Validation", inputs).message == (
        'Field "n" exceeds maximum value 5.'
    )


def test_number_rejects_booleans_and_strings():
    assert check({"n": True}, "Number Field Validation", ["n"]).message == 'Field "n" is not a number.'
    assert not check({"n": "3"}, "Number Field Validation", ["n"]).passed


def test_number_non_numeric_bound_is_config_error():
    result = check({"n": 1}, "Number Field Validation", {"fields": ["n"], "min": "one"})
    assert not result.passed
    assert result.message.startswith('Invalid inputs for "Number Field Validation":')


def test_boolean_fields():
    assert check({"ok": False}, "Boolean Field Validation", ["ok"]).passed
    assert check({"ok": 0}, "Boolean Field Validation", ["ok"]).message == 'Field "ok" is not a boolean.'


# --- Array (on an object) / Nested Object ---


def test_array_field_on_object():
    inputs = {"field": "tags", "minLength": 1, "maxLength": 3, "enforceUnique": True}
    assert check({"tags": ["a", "b"]}, "Array Validation", inputs).passed
    assert check({"tags": "a"}, "Array Validation", inputs).message == 'Field "tags" is not an array.'
    assert check({"tags": []}, "Array Validation", inputs).message == (
        'Array "tags" length is below minimum 1.'
    )
    assert check({"tags": ["a", "b", "c", "d"]}, "Array Validation", inputs).message == (
        'Array "tags" length exceeds maximum 3.'
    )
    assert check({"tags": ["a", "a"]}, "Array Validation", inputs).message == (
        'Array "tags" contains duplicate elements.'
    )


def test_array_field_required_on_object():
    result = check({"tags": []}, "Array Validation", {"minLength": 1})
    assert not result.passed
    assert result.message.startswith('Invalid inputs for "Array Validation":')


def test_nested_object():
    inputs = {"field": "author", "requiredFields": ["id", "name"]}
    assert check({"author": {"id": 1, "name": "x"}}, "Nested Object Validation", inputs).passed
    assert check({"author": []}, "Nested Object Validation", inputs).message == (
        'Field "author" is not a valid nested object.'
    )
    assert check({"author": {"id": 1}}, "Nested Object Validation", inputs).message == (
        'Missing nested field "name" in object "author".'
    )


# --- Pattern / Disallowed Pattern / Enumeration / Date ---


def test_pattern_matching_searches_anywhere():
    inputs = {"field": "email", "pattern": "@example\\.com"}
    assert check({"email": "a@example.com"}, "Pattern Matching", inputs).passed
    assert check({"email": "a@test.org"}, "Pattern Matching", inputs).message == (
        'Field "email" does not match pattern: @example\\.com'
    )


def test_pattern_matches_numbers_as_text():
    assert check({"id": 42}, "Pattern Matching", {"field": "id", "pattern": "^\\d+$"}).passed


def test_disallowed_pattern():
    inputs = {"field": "name", "disallowedPattern": "[<>]"}
    assert check({"name": "plain"}, "Disallowed Pattern", inputs).passed
    assert check({"name": "<script>"}, "Disallowed Pattern", inputs).message == (
        'Field "name" has disallowed characters matching: [<>]'
    )


def test_invalid_regex_is_reported_not_raised():
    result = check({"name": "x"}, "Pattern Matching", {"field": "name", "pattern": "["})
    assert not result.passed
    assert result.message.startswith('Error during assertion "Pattern Matching":')


def test_enumeration_uses_strict_equality():
    inputs = {"field": "status", "allowedValues": ["open", "closed", 1]}
    assert check({"status": "open"}, "Enumeration Validation", inputs).passed
    assert check({"status": 1}, "Enumeration Validation", inputs).passed
    assert not check({"status": True}, "Enumeration Validation", inputs).passed
    assert check({"status": "draft"}, "Enumeration Validation", inputs).message == (
        'Field "status" has invalid value: "draft". Allowed: open, closed, 1'
    )


def test_enumeration_message_renders_json_literals():
    inputs = {"field": "flag", "allowedValues": [False, None, "on"]}
    assert check({"flag": True}, "Enumeration Validation", inputs).message == (
        'Field "flag" has invalid value: "true". Allowed: false, null, on'
    )
    assert check({}, "Enumeration Validation", inputs).message == (
        'Field "flag" has invalid value: "undefined". Allowed: false, null, on'
    )


def test_date_field_validation():
    inputs = {"field": "created", "validateActualDate": True}
    assert check({"created": "2024-01-15"}, "Date Field Validation", inputs).passed
    assert check({"created": "2024-01-15T10:30:00+00:00"}, "Date Field Validation", inputs).passed
    assert check({"created": "Mon, 15 Jan 2024 10:30:00 GMT"}, "Date Field Validation", inputs).passed
    assert check({"created": "yesterday"}, "Date Field Validation", inputs).message == (
        'Field "created" is not a valid date: yesterday'
    )
    assert check({"created": 20240115}, "Date Field Validation", inputs).message == (
        'Field "created" is not a string date.'
    )


def test_date_field_without_actual_date_check_only_needs_string():
    assert check({"created": "whenever"}, "Date Field Validation", {"field": "created"}).passed


# --- Nullability / Default Values / Custom Logic ---


def test_nullability_non_nullable():
    inputs = {"nonNullable": ["id"]}
    assert not check({"id": None}, "Nullability", inputs).passed
    assert check({"id": None}, "Nullability", inputs).message == 'Field "id" should not be null.'
    assert check({"id": 1}, "Nullability", inputs).passed
    assert check({}, "Nullability", inputs).passed


def test_nullability_nullable_must_be_null_if_present():
    inputs = {"nullable": ["deleted_at"]}
    assert check({"deleted_at": None}, "Nullability", inputs).passed
    assert check({"deleted_at": "2024"}, "Nullability", inputs).message == (
        'Field "deleted_at" must be null if present.'
    )


def test_default_values_requires_presence():
    inputs = {"field": "currency", "defaultValue": "USD"}
    assert check({"currency": "EUR"}, "Default Values", inputs).passed
    assert check({}, "Default Values", inputs).message == (
        'Missing field "currency". Expected a default of "USD".'
    )


def test_custom_logic_conditional_presence():
    inputs = {"ifField": "discount", "thenField": "discount_code"}
    assert check({"discount": 0}, "Custom Logic", inputs).passed
    assert check({"discount": 5, "discount_code": "X"}, "Custom Logic", inputs).passed
    assert check({"discount": 5}, "Custom Logic", inputs).message == (
        'If "discount" is present, "discount_code" must be set.'
    )


# --- Data Transformation / Multi-Type / Error Messaging ---


def test_data_transformation():
    inputs = {"field": "count", "expectedTypeAfterCoercion": "number"}
    assert check({"count": 3}, "Data Transformation", inputs).passed
    assert check({"count": "3"}, "Data Transformation", inputs).message == (
        'Field "count" is not coerced to type "number".'
    )


def test_multi_type_fields():
    inputs = {"field": "value", "allowedTypes": ["string", "number"]}
    assert check({"value": "x"}, "Multi-Type Fields", inputs).passed
    assert check({"value": 2}, "Multi-Type Fields", inputs).passed
    assert check({"value": None}, "Multi-Type Fields", inputs).message == (
        'Field "value" has type "null" but must be one of [string, number].'
    )


def test_error_messaging():
    inputs = {"messageContains": "not found"}
    assert check({"error": "Resource not found"}, "Error Messaging", inputs).passed
    assert check({"error": "boom"}, "Error Messaging", inputs).message == (
        'Error message does not contain: "not found". Actual: "boom"'
    )
    assert check({"message": "x"}, "Error Messaging", inputs).message == (
        'Expected a string in "error" but got undefined.'
    )


def test_error_messaging_custom_field():
    inputs = {"errorField": "detail"}
    assert check({"detail": "Invalid token"}, "Error Messaging", inputs).passed


# --- Response shapes ---


def test_scalar_response_is_wrapped_as_value():
    assert check("hello", "String Field Validation", ["value"]).passed
    assert not check(None, "Required Fields", ["id"]).passed


def test_results_keep_spec_order_and_count():
    specs = [
        {"assertion": "Required Fields", "inputs": ["id"]},
        {"assertion": "Bogus Kind", "inputs": {}},
        {"assertion": "Schema Compliance", "inputs": {}},
        {"assertion": "Number Field Validation", "inputs": ["id"]},
    ]
    results = run_assertions_sync({"id": 1}, specs)
    assert len(results) == len(specs)
    assert [r.kind for r in results] == [s["assertion"] for s in specs]
    assert [r.passed for r in results] == [True, True, False, True]


def test_evaluation_is_idempotent_and_does_not_mutate():
    data = [{"id": 1, "tags": ["a"]}, {"id": "x", "tags": ["a", "a"]}]
    snapshot = copy.deepcopy(data)
    specs = [
        {"assertion": "Number Field Validation", "inputs": ["id"]},
        {"assertion": "Array Validation", "inputs": {"enforceUnique": True}},
        {"assertion": "Schema Compliance", "inputs": {"schema": {"id": "number"}, "strict": True}},
    ]
    engine = AssertionEngine()
    first = [r.to_dict() for r in engine.run_sync(data, specs)]
    second = [r.to_dict() for r in engine.run_sync(data, specs)]
    assert first == second
    assert data == snapshot


def test_prebuilt_specs_are_accepted():
    spec = AssertionSpec.from_dict({"assertion": "Required Fields", "inputs": ["id"]})
    [result] = AssertionEngine().run_sync({"id": 1}, [spec])
    assert result.passed
    assert result.kind == "Required Fields"


def test_kind_key_is_accepted_as_alias():
    [result] = AssertionEngine().run_sync({}, [{"kind": "Required Fields", "inputs": ["id"]}])
    assert result.message == 'Missing required field: "id".'


@pytest.mark.parametrize("inputs", [None, 5, {"fields": 3}])
def test_bad_field_list_inputs_fail_cleanly(inputs):
    result = check({"id": 1}, "Required Fields", inputs)
    assert not result.passed
    assert result.message.startswith('Invalid inputs for "Required Fields":')
