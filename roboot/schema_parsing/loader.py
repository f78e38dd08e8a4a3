"""
Suite loader for roboot suite files.

This module provides the public API for loading and validating
suite files from disk or YAML strings.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from .models import Suite
from .parser import SuiteParser
from .validation import SuiteValidator, ValidationResult


def load_suite(path: str | Path) -> tuple[Suite | None, ValidationResult]:
    """
    Load and validate a suite from a YAML file.

    Args:
        path: Path to the YAML suite file

    Returns:
        Tuple of (Suite or None, ValidationResult)
        If validation fails, Suite will be None.

    Example:
        suite, result = load_suite("suites/posts.ibgroboot.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(1)
        # Use suite...
    """
    path = Path(path)

    # Check file exists
    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    # Parse YAML
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        result = ValidationResult()
        result.add_error(str(path), f"Cannot read file: {e}")
        return None, result

    return _load(text, str(path), source_dir=path.resolve().parent)


def validate_suite_yaml(
    yaml_string: str,
    source_dir: str | Path | None = None,
) -> tuple[Suite | None, ValidationResult]:
    """
    Validate a suite from a YAML string (useful for testing).

    Args:
        yaml_string: YAML content as a string
        source_dir: Directory relative script paths should resolve against

    Returns:
        Tuple of (Suite or None, ValidationResult)
    """
    return _load(
        yaml_string,
        "yaml",
        source_dir=Path(source_dir) if source_dir is not None else None,
    )


def _load(
    text: str,
    origin: str,
    source_dir: Path | None,
) -> tuple[Suite | None, ValidationResult]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(
            origin,
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            origin,
            "File must contain a YAML object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    # Validate schema
    validator = SuiteValidator(data)
    result = validator.validate()

    if not result.is_valid:
        return None, result

    # Parse to typed structure
    parser = SuiteParser(data, source_dir=source_dir)
    return parser.parse(), result
