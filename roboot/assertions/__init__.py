"""
Assertion Engine for HTTP Response Validation

This package evaluates declarative assertion specs against parsed
response bodies and produces one pass/fail result per spec.

Supported assertions (see ``AssertionKind``):
    - Schema Compliance, Required Fields, No Additional Fields
    - String / Number / Boolean Field Validation
    - Array Validation (array-level when the response is a list)
    - Nested Object Validation, Pattern Matching, Enumeration Validation
    - Date Field Validation, Nullability, Default Values
    - Strict Validation, Custom Logic, Data Transformation
    - Multi-Type Fields, Error Messaging, Read-Only Fields
    - Disallowed Pattern
    - Custom (delegated to a user module's ``validate(record, config)``)

Usage:
    from roboot.assertions import AssertionEngine

    data = [{"id": 1, "name": "a"}, {"id": 2}]
    engine = AssertionEngine()
    results = engine.run_sync(data, [
        {"assertion": "Required Fields", "inputs": ["id", "name"]},
        {"assertion": "Array Validation", "inputs": {"minLength": 1}},
    ])

    for result in results:
        print(result)
"""

# Models
from .models import (
    AssertionKind,
    AssertionResult,
    AssertionSpec,
    Scope,
    Verdict,
)

# Errors
from .errors import (
    ConfigShapeError,
    CustomCheckContractError,
    EvaluationError,
    RobootError,
)

# Catalog
from .catalog import CATALOG, CatalogEntry, classify

# Engine
from .custom import CustomCheckBridge
from .engine import (
    AssertionEngine,
    # Convenience functions
    run_assertions,
    run_assertions_sync,
)

__all__ = [
    # Models
    "AssertionKind",
    "AssertionResult",
    "AssertionSpec",
    "Scope",
    "Verdict",
    # Errors
    "ConfigShapeError",
    "CustomCheckContractError",
    "EvaluationError",
    "RobootError",
    # Catalog
    "CATALOG",
    "CatalogEntry",
    "classify",
    # Engine
    "AssertionEngine",
    "CustomCheckBridge",
    # Convenience functions
    "run_assertions",
    "run_assertions_sync",
]
