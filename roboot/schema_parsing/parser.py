"""
Suite parser for roboot suite files.

This module converts validated YAML data into typed Suite structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .models import HttpMethod, KeyValue, Suite, TestCase
from .validation import SuiteValidator


class SuiteParser:
    """Parses and converts validated YAML to typed Suite structure."""

    def __init__(self, data: dict[str, Any], source_dir: Path | None = None):
        self.data = data
        self.source_dir = source_dir

    def parse(self) -> Suite:
        """Convert validated data to typed Suite."""
        return Suite(
            name=self.data["name"],
            url=self.data["url"],
            method=HttpMethod(str(self.data.get("method", "GET")).upper()),
            headers=self._parse_key_values(self.data.get("headers")),
            env=self.data.get("env") or {},
            timeout_ms=self.data.get("timeout_ms", 30000),
            strict_kinds=self.data.get("strict_kinds", False),
            suite_pre_script=self.data.get("suite_pre_script"),
            suite_post_script=self.data.get("suite_post_script"),
            test_cases=[self._parse_test_case(case) for case in self.data["test_cases"]],
            metadata={
                key: self.data[key]
                for key in sorted(SuiteValidator.METADATA_KEYS)
                if key in self.data
            },
            source_dir=self.source_dir,
        )

    def _parse_key_values(self, items: list[dict] | None) -> list[KeyValue]:
        return [KeyValue(key=item["key"], value=item.get("value")) for item in items or []]

    def _parse_test_case(self, case: dict) -> TestCase:
        return TestCase(
            description=case["description"],
            expected_results=list(case.get("expected_results") or []),
            parameters=self._parse_key_values(case.get("parameters")),
            query=self._parse_key_values(case.get("query")),
            select=case.get("select"),
            pre_request_script=case.get("pre_request_script"),
            post_request_script=case.get("post_request_script"),
        )
