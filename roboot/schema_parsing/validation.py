"""
Schema validation for roboot suite files.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
Assertion specs are checked too: kinds that are not recognized and
inputs that do not fit their kind are reported as warnings, because the
engine still evaluates them (as skipped or failed assertions).
"""

from __future__ import annotations

import difflib
import json
from dataclasses import dataclass, field
from typing import Any

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathParserError

from ..assertions import AssertionKind, AssertionSpec, ConfigShapeError
from .models import HttpMethod


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "test_cases[0].expected_results[2]"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def add_warning(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.warnings.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            lines = ["✅ Schema validation passed"]
        else:
            lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
            lines.extend(str(e) for e in self.errors)
        if self.warnings:
            lines.append(f"\n{len(self.warnings)} warning(s):")
            lines.extend(str(w).replace("❌", "⚠️", 1) for w in self.warnings)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Suite Validator
# ─────────────────────────────────────────────────────────────────────────────

class SuiteValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"name", "url", "test_cases"}
    OPTIONAL_TOP_LEVEL = {
        "method",
        "headers",
        "env",
        "timeout_ms",
        "strict_kinds",
        "suite_pre_script",
        "suite_post_script",
    }
    # Accepted and kept as metadata, no behavior attached
    METADATA_KEYS = {
        "save_to_history",
        "sync_to_slack",
        "report_results",
        "target_squads",
        "target_owners",
    }
    REQUIRED_CASE_KEYS = {"description", "expected_results"}
    OPTIONAL_CASE_KEYS = {
        "parameters",
        "query",
        "select",
        "pre_request_script",
        "post_request_script",
    }
    VALID_METHODS = {m.value for m in HttpMethod}
    VALID_KINDS = [k.value for k in AssertionKind]

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_name()
        self._validate_url()
        self._validate_method()
        self._validate_key_values("headers", self.data.get("headers"))
        self._validate_env()
        self._validate_options()
        self._validate_scripts()
        self._validate_test_cases()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        known = self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL | self.METADATA_KEYS
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - known

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown):
            self.result.add_error(
                key,
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(known))}"
            )

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self.result.add_error(
                "name",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "name",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_url(self) -> None:
        url = self.data.get("url")
        if not isinstance(url, str) or not url:
            self.result.add_error(
                "url",
                "Must be a non-empty string",
                value=url
            )
        elif not (url.startswith(("http://", "https://")) or url.startswith("{{")):
            self.result.add_error(
                "url",
                "Must be a valid HTTP(S) URL",
                value=url,
                suggestion="URL should start with 'http://' or 'https://'"
            )

    def _validate_method(self) -> None:
        method = self.data.get("method")
        if method is None:
            return
        if not isinstance(method, str) or method.upper() not in self.VALID_METHODS:
            self.result.add_error(
                "method",
                "Invalid HTTP method",
                value=method,
                suggestion=f"Valid methods: {', '.join(sorted(self.VALID_METHODS))}"
            )

    def _validate_key_values(self, path: str, items: Any) -> None:
        if items is None:
            return
        if not isinstance(items, list):
            self.result.add_error(
                path,
                "Must be a list of {key, value} objects",
                value=items
            )
            return

        for i, item in enumerate(items):
            if not isinstance(item, dict) or not isinstance(item.get("key"), str):
                self.result.add_error(
                    f"{path}[{i}]",
                    "Must be an object with a string 'key'",
                    value=item,
                    suggestion="Use '- key: \"Accept\"\\n  value: \"application/json\"'"
                )

    def _validate_env(self) -> None:
        env = self.data.get("env")
        if env is None:
            return
        if not isinstance(env, dict):
            self.result.add_error(
                "env",
                "Must be an object (key-value pairs)",
                value=env
            )

    def _validate_options(self) -> None:
        timeout = self.data.get("timeout_ms")
        if timeout is not None:
            if not isinstance(timeout, int) or isinstance(timeout, bool) or timeout < 0:
                self.result.add_error(
                    "timeout_ms",
                    "Must be a non-negative integer (milliseconds)",
                    value=timeout
                )

        strict = self.data.get("strict_kinds")
        if strict is not None and not isinstance(strict, bool):
            self.result.add_error(
                "strict_kinds",
                "Must be a boolean",
                value=strict
            )

    def _validate_scripts(self) -> None:
        for key in ("suite_pre_script", "suite_post_script"):
            script = self.data.get(key)
            if script is not None and (not isinstance(script, str) or not script.strip()):
                self.result.add_error(
                    key,
                    "Must be a path or module name",
                    value=script
                )

    def _validate_test_cases(self) -> None:
        cases = self.data.get("test_cases")
        if not isinstance(cases, list):
            self.result.add_error(
                "test_cases",
                "Must be a list",
                value=cases
            )
            return

        if len(cases) == 0:
            self.result.add_error(
                "test_cases",
                "Must contain at least one test case",
                suggestion="Add a test case with a description and expected_results"
            )
            return

        for i, case in enumerate(cases):
            self._validate_test_case(i, case)

    def _validate_test_case(self, index: int, case: Any) -> None:
        path = f"test_cases[{index}]"

        if not isinstance(case, dict):
            self.result.add_error(
                path,
                "Test case must be an object",
                value=case
            )
            return

        keys = set(case.keys())
        for key in sorted(self.REQUIRED_CASE_KEYS - keys):
            self.result.add_error(
                f"{path}.{key}",
                f"Required field '{key}' is missing"
            )
        for key in sorted(keys - self.REQUIRED_CASE_KEYS - self.OPTIONAL_CASE_KEYS):
            self.result.add_error(
                f"{path}.{key}",
                f"Unknown test case field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_CASE_KEYS | self.OPTIONAL_CASE_KEYS))}"
            )

        description = case.get("description")
        if "description" in case and not isinstance(description, str):
            self.result.add_error(
                f"{path}.description",
                "Must be a string",
                value=description
            )

        self._validate_key_values(f"{path}.parameters", case.get("parameters"))
        self._validate_key_values(f"{path}.query", case.get("query"))
        self._validate_body(path, case.get("parameters"))
        self._validate_select(path, case.get("select"))

        if "expected_results" in case:
            self._validate_expected_results(path, case["expected_results"])

    def _validate_body(self, path: str, parameters: Any) -> None:
        if not isinstance(parameters, list):
            return
        for i, param in enumerate(parameters):
            if not isinstance(param, dict) or param.get("key") != "body":
                continue
            value = param.get("value")
            if isinstance(value, dict):
                continue
            if not isinstance(value, str):
                self.result.add_error(
                    f"{path}.parameters[{i}].value",
                    "Body must be JSON text or an object",
                    value=value
                )
                continue
            try:
                decoded = json.loads(value)
            except json.JSONDecodeError as e:
                self.result.add_error(
                    f"{path}.parameters[{i}].value",
                    f"Body is not valid JSON: {e}",
                    suggestion="Use a YAML block scalar ('value: |') for multi-line JSON"
                )
                continue
            if not isinstance(decoded, dict):
                self.result.add_error(
                    f"{path}.parameters[{i}].value",
                    "Body must decode to a JSON object",
                    value=type(decoded).__name__
                )

    def _validate_select(self, path: str, select: Any) -> None:
        if select is None:
            return
        if not isinstance(select, str):
            self.result.add_error(
                f"{path}.select",
                "Must be a JSONPath string",
                value=select
            )
            return
        try:
            parse_jsonpath(select)
        except JsonPathParserError as e:
            self.result.add_error(
                f"{path}.select",
                f"Invalid JSONPath expression: {e}",
                value=select,
                suggestion="JSONPath should start with '$', e.g. '$.data.items'"
            )
        except Exception as e:
            self.result.add_error(
                f"{path}.select",
                f"Failed to parse JSONPath: {type(e).__name__}: {e}",
                value=select
            )

    def _validate_expected_results(self, path: str, specs: Any) -> None:
        if not isinstance(specs, list):
            self.result.add_error(
                f"{path}.expected_results",
                "Must be a list of assertions",
                value=specs
            )
            return

        for i, spec in enumerate(specs):
            spec_path = f"{path}.expected_results[{i}]"
            if not isinstance(spec, dict):
                self.result.add_error(
                    spec_path,
                    "Assertion must be an object",
                    value=spec
                )
                continue

            kind = spec.get("assertion", spec.get("kind"))
            if not isinstance(kind, str):
                self.result.add_error(
                    f"{spec_path}.assertion",
                    "Must name an assertion type",
                    value=kind,
                    suggestion="Add 'assertion: \"Required Fields\"' (see 'roboot kinds')"
                )
                continue

            if AssertionKind.lookup(kind) is None:
                close = difflib.get_close_matches(kind, self.VALID_KINDS, n=1)
                self.result.add_warning(
                    f"{spec_path}.assertion",
                    "Unrecognized assertion type",
                    value=kind,
                    suggestion=f"Did you mean '{close[0]}'?" if close else "Run 'roboot kinds' to list supported assertions"
                )
                continue

            try:
                AssertionSpec.from_dict(spec)
            except ConfigShapeError as e:
                self.result.add_warning(
                    f"{spec_path}.inputs",
                    str(e),
                    value=spec.get("inputs")
                )
