"""
Report data models for roboot suite runs.

This module defines the data structures for capturing complete
run records including metadata, per test case results, and timing.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..assertions import AssertionResult


class CaseStatus(str, Enum):
    """Status of an individual test case."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class TestCaseRecord:
    """
    Record of a single test case execution.

    Captures the request that was sent, the response status, every
    assertion result in declaration order, and any transport error.
    """
    __test__ = False  # not a pytest class

    index: int
    description: str
    status: CaseStatus = CaseStatus.PENDING

    # Timing
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Request/Response
    request: dict[str, Any] | None = None
    http_status: int | None = None

    # Assertions, one per expected result
    assertions: list[AssertionResult] = field(default_factory=list)

    # Errors and messages
    error_message: str | None = None
    skip_reason: str | None = None

    @property
    def passed_assertions(self) -> int:
        return sum(1 for a in self.assertions if a.passed)

    @property
    def failed_assertions(self) -> int:
        return sum(1 for a in self.assertions if not a.passed)

    def start(self) -> None:
        """Mark the test case as started."""
        self.status = CaseStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self, status: CaseStatus) -> None:
        """Mark the test case as completed with given status."""
        self.status = status
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            delta = self.ended_at - self.started_at
            self.duration_ms = delta.total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "index": self.index,
            "description": self.description,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "request": _safe_serialize(self.request),
            "http_status": self.http_status,
            "assertions": [a.to_dict() for a in self.assertions],
            "error_message": self.error_message,
            "skip_reason": self.skip_reason,
        }


@dataclass
class RunReport:
    """
    Complete record of a suite run.

    Contains metadata about the run, the suite being tested,
    and detailed records for each test case.
    """
    # Run identification
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Timing
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Suite info
    suite_name: str = ""
    suite_url: str = ""
    suite_method: str = "GET"
    suite_hash: str = ""

    # Overall status
    status: RunStatus = RunStatus.PENDING

    # Test case records
    test_cases: list[TestCaseRecord] = field(default_factory=list)

    # Summary stats
    total_cases: int = 0
    passed_cases: int = 0
    failed_cases: int = 0
    error_cases: int = 0
    skipped_cases: int = 0

    def start(self) -> None:
        """Mark the run as started."""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        delta = self.ended_at - self.started_at
        self.duration_ms = delta.total_seconds() * 1000

        # Calculate summary stats
        self.total_cases = len(self.test_cases)
        self.passed_cases = sum(1 for c in self.test_cases if c.status == CaseStatus.PASSED)
        self.failed_cases = sum(1 for c in self.test_cases if c.status == CaseStatus.FAILED)
        self.error_cases = sum(1 for c in self.test_cases if c.status == CaseStatus.ERROR)
        self.skipped_cases = sum(1 for c in self.test_cases if c.status == CaseStatus.SKIPPED)

        # Determine overall status
        if self.error_cases > 0:
            self.status = RunStatus.ERROR
        elif self.failed_cases > 0:
            self.status = RunStatus.FAILED
        else:
            self.status = RunStatus.PASSED

    @property
    def passed(self) -> bool:
        return self.status == RunStatus.PASSED

    def add_case(self, case: TestCaseRecord) -> None:
        """Add a test case record to the run."""
        self.test_cases.append(case)

    def get_case(self, index: int) -> TestCaseRecord | None:
        """Get a test case record by position."""
        for case in self.test_cases:
            if case.index == index:
                return case
        return None

    def percent(self, count: int) -> int:
        """Share of test cases, as a whole percentage (for progress bars)."""
        if not self.total_cases:
            return 0
        return round(count * 100 / self.total_cases)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "suite_name": self.suite_name,
            "suite_url": self.suite_url,
            "suite_method": self.suite_method,
            "suite_hash": self.suite_hash,
            "status": self.status.value,
            "summary": {
                "total": self.total_cases,
                "passed": self.passed_cases,
                "failed": self.failed_cases,
                "errors": self.error_cases,
                "skipped": self.skipped_cases,
            },
            "test_cases": [case.to_dict() for case in self.test_cases],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def summary(self) -> str:
        """Render the run as a plain-text block for terminals and logs."""
        rule = "─" * 60
        duration = f"{self.duration_ms:.0f}ms" if self.duration_ms else "N/A"
        lines = [
            "═" * 60,
            f"  {status_icon(self.status)} {self.suite_name}: {self.status.value.upper()}",
            rule,
            f"  Target:     {self.suite_method} {self.suite_url}",
            f"  Run:        {self.run_id} (suite {self.suite_hash or 'N/A'})",
            f"  Duration:   {duration}",
            f"  Test cases: {self.passed_cases} passed, {self.failed_cases} failed, "
            f"{self.error_cases} errors, {self.skipped_cases} skipped",
            rule,
        ]

        for case in self.test_cases:
            took = f"{case.duration_ms:.0f}ms" if case.duration_ms else "N/A"
            http = f"HTTP {case.http_status}" if case.http_status is not None else "no response"
            lines.append(f"  {status_icon(case.status)} [{case.index}] {case.description} - {http}, {took}")

            if case.error_message:
                lines.append(f"      └─ Error: {case.error_message}")
            elif case.skip_reason:
                lines.append(f"      └─ Skipped: {case.skip_reason}")
            for assertion in case.assertions:
                if not assertion.passed:
                    lines.append(f"      └─ {assertion.kind}: {assertion.message}")

        lines.append("═" * 60)
        return "\n".join(lines)


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """
    Compute a hash of the suite for tracking/versioning.

    Args:
        suite_dict: The suite data as a dict

    Returns:
        SHA-256 hash (first 12 chars)
    """
    serialized = json.dumps(suite_dict, sort_keys=True, default=str)
    hash_bytes = hashlib.sha256(serialized.encode()).hexdigest()
    return hash_bytes[:12]


def _safe_serialize(value: Any) -> Any:
    """Safely serialize a value, handling non-JSON types."""
    if value is None:
        return None
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


# Shared by run and case statuses (both are str enums over the same values)
STATUS_ICONS = {
    "pending": "⏳",
    "running": "🔄",
    "passed": "✅",
    "failed": "❌",
    "error": "⚠️",
    "skipped": "⏭️",
}


def status_icon(status: RunStatus | CaseStatus) -> str:
    return STATUS_ICONS.get(status.value, "❓")
