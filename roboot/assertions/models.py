"""
Assertion data models.

This module defines the closed set of assertion kinds, the typed input
payload for each kind, the assertion spec that pairs the two, and the
result structures produced by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

PASS_MESSAGE = "Assertion passed."


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class AssertionKind(str, Enum):
    """Supported assertion kinds, keyed by their suite-file identifier."""
    SCHEMA_COMPLIANCE = "Schema Compliance"
    REQUIRED_FIELDS = "Required Fields"
    NO_ADDITIONAL_FIELDS = "No Additional Fields"
    STRING_FIELDS = "String Field Validation"
    NUMBER_FIELDS = "Number Field Validation"
    BOOLEAN_FIELDS = "Boolean Field Validation"
    ARRAY = "Array Validation"
    NESTED_OBJECT = "Nested Object Validation"
    PATTERN = "Pattern Matching"
    ENUMERATION = "Enumeration Validation"
    DATE_FIELD = "Date Field Validation"
    NULLABILITY = "Nullability"
    DEFAULT_VALUES = "Default Values"
    STRICT = "Strict Validation"
    CUSTOM_LOGIC = "Custom Logic"
    DATA_TRANSFORMATION = "Data Transformation"
    MULTI_TYPE = "Multi-Type Fields"
    ERROR_MESSAGING = "Error Messaging"
    READ_ONLY = "Read-Only Fields"
    DISALLOWED_PATTERN = "Disallowed Pattern"
    CUSTOM = "Custom"

    @classmethod
    def lookup(cls, identifier: Any) -> AssertionKind | None:
        """Return the kind for an identifier, or None if it is not recognized."""
        if isinstance(identifier, cls):
            return identifier
        try:
            return cls(identifier)
        except ValueError:
            return None


class Scope(str, Enum):
    """Whether a kind is checked once per collection or once per element."""
    ARRAY = "array"
    ITEM = "item"


# ─────────────────────────────────────────────────────────────────────────────
# Input payloads
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SchemaInputs:
    schema: dict[str, str]
    strict: bool = False


@dataclass(frozen=True)
class FieldListInputs:
    """A plain list of field names (required, allowed, boolean, read-only)."""
    fields: tuple[str, ...]


@dataclass(frozen=True)
class StringFieldInputs:
    fields: tuple[str, ...]
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    non_empty: bool = False  # set by the flat-list form


@dataclass(frozen=True)
class NumberFieldInputs:
    fields: tuple[str, ...]
    minimum: float | None = None
    maximum: float | None = None
    integer_only: bool = False


@dataclass(frozen=True)
class ArrayInputs:
    field: str | None = None  # only used at item level
    min_length: int | None = None
    max_length: int | None = None
    enforce_unique: bool = False


@dataclass(frozen=True)
class NestedObjectInputs:
    field: str
    required_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class PatternInputs:
    """A field and a regular expression (Pattern Matching, Disallowed Pattern)."""
    field: str
    pattern: str


@dataclass(frozen=True)
class EnumerationInputs:
    field: str
    allowed_values: tuple[Any, ...]


@dataclass(frozen=True)
class DateInputs:
    field: str
    validate_actual_date: bool = False


@dataclass(frozen=True)
class NullabilityInputs:
    non_nullable: tuple[str, ...] = ()
    nullable: tuple[str, ...] = ()


@dataclass(frozen=True)
class DefaultValueInputs:
    field: str
    default_value: Any = None


@dataclass(frozen=True)
class ConditionalInputs:
    if_field: str
    then_field: str


@dataclass(frozen=True)
class CoercionInputs:
    field: str
    expected_type: str


@dataclass(frozen=True)
class MultiTypeInputs:
    field: str
    allowed_types: tuple[str, ...]


@dataclass(frozen=True)
class ErrorMessageInputs:
    error_field: str = "error"
    message_contains: str | None = None


@dataclass(frozen=True)
class CustomInputs:
    path: str
    config: dict[str, Any] = field(default_factory=dict)


InputPayload = Union[
    SchemaInputs,
    FieldListInputs,
    StringFieldInputs,
    NumberFieldInputs,
    ArrayInputs,
    NestedObjectInputs,
    PatternInputs,
    EnumerationInputs,
    DateInputs,
    NullabilityInputs,
    DefaultValueInputs,
    ConditionalInputs,
    CoercionInputs,
    MultiTypeInputs,
    ErrorMessageInputs,
    CustomInputs,
]


# ─────────────────────────────────────────────────────────────────────────────
# Spec
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AssertionSpec:
    """
    One declarative check: a kind plus its normalized inputs.

    For an unrecognized kind, ``kind`` keeps the raw identifier and
    ``inputs`` keeps the raw value so the engine can still report on it.
    """
    kind: AssertionKind | str
    inputs: Any = None

    @property
    def name(self) -> str:
        return self.kind.value if isinstance(self.kind, AssertionKind) else str(self.kind)

    @property
    def is_known(self) -> bool:
        return isinstance(self.kind, AssertionKind)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssertionSpec:
        """
        Build a spec from a decoded suite entry.

        Accepts ``{"assertion": ..., "inputs": ...}`` as written in suite
        files, or ``{"kind": ..., "inputs": ...}``.

        Raises:
            ConfigShapeError: if the inputs do not fit the kind
        """
        from .inputs import parse_inputs

        identifier = data.get("assertion", data.get("kind"))
        raw_inputs = data.get("inputs")
        kind = AssertionKind.lookup(identifier)
        if kind is None:
            return cls(kind=str(identifier), inputs=raw_inputs)
        return cls(kind=kind, inputs=parse_inputs(kind, raw_inputs))


# ─────────────────────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Verdict:
    """Outcome of evaluating one kind against one record or collection."""
    passed: bool
    message: str = PASS_MESSAGE
    failed_indices: tuple[int, ...] = ()

    @classmethod
    def ok(cls) -> Verdict:
        return cls(True)

    @classmethod
    def fail(cls, message: str) -> Verdict:
        return cls(False, message)


@dataclass
class AssertionResult:
    """
    Result of a single assertion spec.

    Attributes:
        kind: The assertion identifier as written in the suite
        passed: Whether the assertion passed
        message: Human-readable diagnostic
        failed_indices: Failing element positions when the check fanned out
        details: Additional context for reporters
    """
    kind: str
    passed: bool
    message: str = PASS_MESSAGE
    failed_indices: list[int] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.passed:
            return f"✅ PASS [{self.kind}]: {self.message}"
        return f"❌ FAIL [{self.kind}]: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "assertion": self.kind,
            "passed": self.passed,
            "message": self.message,
            "failed_indices": list(self.failed_indices),
            "details": dict(self.details),
        }

    @classmethod
    def from_verdict(cls, kind: str, verdict: Verdict) -> AssertionResult:
        return cls(
            kind=kind,
            passed=verdict.passed,
            message=verdict.message,
            failed_indices=list(verdict.failed_indices),
        )

    @classmethod
    def passed_result(cls, kind: str, message: str = PASS_MESSAGE) -> AssertionResult:
        """Create a passing result."""
        return cls(kind=kind, passed=True, message=message)

    @classmethod
    def failed_result(
        cls,
        kind: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> AssertionResult:
        """Create a failing result."""
        return cls(kind=kind, passed=False, message=message, details=details or {})
