"""
Schema Parsing for roboot Test Suites

This package provides tools for parsing, validating, and working with
``.ibgroboot.yaml`` suite files.

Usage:
    from roboot.schema_parsing import load_suite, validate_suite_yaml

    # Load from file
    suite, result = load_suite("suites/posts.ibgroboot.yaml")
    if not result.is_valid:
        print(result)

    # Or validate from string
    suite, result = validate_suite_yaml(yaml_string)
"""

# Public API
from .loader import load_suite, validate_suite_yaml

# Models (for type hints and isinstance checks)
from .models import HttpMethod, KeyValue, Suite, TestCase

# Validation (for custom validation if needed)
from .validation import SuiteValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suite",
    "validate_suite_yaml",
    # Models
    "Suite",
    "TestCase",
    "KeyValue",
    "HttpMethod",
    # Validation
    "ValidationResult",
    "ValidationError",
    "SuiteValidator",
]
