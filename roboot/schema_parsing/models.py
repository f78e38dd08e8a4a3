"""
Typed data structures for roboot test suites.

This module contains all enums and dataclasses that represent
the internal typed structure of a parsed suite file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """HTTP methods a suite can use."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


# ─────────────────────────────────────────────────────────────────────────────
# Building blocks
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class KeyValue:
    """A ``{key, value}`` pair as used for headers, parameters and query."""
    key: str
    value: Any = None


# ─────────────────────────────────────────────────────────────────────────────
# Test cases
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class TestCase:
    """One request plus the assertions to run on its response."""
    __test__ = False  # not a pytest class

    description: str
    expected_results: list[dict[str, Any]] = field(default_factory=list)
    parameters: list[KeyValue] = field(default_factory=list)
    query: list[KeyValue] = field(default_factory=list)
    select: str | None = None  # JSONPath for the value under test
    pre_request_script: str | None = None
    post_request_script: str | None = None

    def parameter(self, key: str) -> Any:
        """Return the value of the first parameter with this key, if any."""
        for param in self.parameters:
            if param.key == key:
                return param.value
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Suite
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Suite:
    """Fully parsed and validated suite file."""
    name: str
    url: str
    method: HttpMethod = HttpMethod.GET
    headers: list[KeyValue] = field(default_factory=list)
    env: dict[str, Any] = field(default_factory=dict)
    timeout_ms: int = 30000
    strict_kinds: bool = False
    suite_pre_script: str | None = None
    suite_post_script: str | None = None
    test_cases: list[TestCase] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_dir: Path | None = None  # directory relative script paths resolve against
