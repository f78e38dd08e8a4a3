"""
Reporter for building and managing run reports.

This module provides the Reporter class which helps construct
run reports from suite executions.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from .html import render_html
from .models import (
    CaseStatus,
    RunReport,
    TestCaseRecord,
    compute_suite_hash,
)

if TYPE_CHECKING:
    from ..assertions import AssertionResult
    from ..schema_parsing import Suite


class Reporter:
    """
    Builds and manages run reports.

    The Reporter provides a convenient interface for creating reports
    from Suite objects and recording test case results.

    Example:
        from roboot.schema_parsing import load_suite
        from roboot.reporting import Reporter

        suite, _ = load_suite("posts.ibgroboot.yaml")
        reporter = Reporter.from_suite(suite)

        reporter.start_run()
        reporter.start_case(0)
        reporter.complete_case(0, assertion_results, http_status=200)

        report = reporter.finish_run()
        print(report.summary())
    """

    def __init__(self, report: RunReport):
        """
        Initialize with a RunReport.

        Use Reporter.from_suite() for the typical case.
        """
        self.report = report

    @classmethod
    def from_suite(
        cls,
        suite: Suite,
        run_id: str | None = None,
    ) -> Reporter:
        """
        Create a Reporter from a parsed Suite.

        Args:
            suite: The parsed suite to create a report for
            run_id: Optional custom run ID (auto-generated if not provided)

        Returns:
            Reporter instance ready to record test case results
        """
        report = RunReport(
            suite_name=suite.name,
            suite_url=suite.url,
            suite_method=suite.method.value,
            suite_hash=compute_suite_hash(_suite_to_dict(suite)),
        )

        if run_id:
            report.run_id = run_id

        # Pre-populate records so skipped cases still show up
        for index, case in enumerate(suite.test_cases):
            report.add_case(TestCaseRecord(index=index, description=case.description))

        return cls(report)

    def start_run(self) -> None:
        """Mark the run as started."""
        self.report.start()

    def finish_run(self) -> RunReport:
        """
        Mark the run as completed and return the final report.

        Cases never started are marked as skipped.
        """
        for case in self.report.test_cases:
            if case.status in (CaseStatus.PENDING, CaseStatus.RUNNING):
                case.skip_reason = case.skip_reason or "Not executed"
                case.complete(CaseStatus.SKIPPED)
        self.report.complete()
        return self.report

    def start_case(self, index: int, request: dict[str, Any] | None = None) -> TestCaseRecord | None:
        """Mark a test case as started."""
        case = self.report.get_case(index)
        if case:
            case.request = request
            case.start()
        return case

    def complete_case(
        self,
        index: int,
        results: list[AssertionResult],
        http_status: int | None = None,
    ) -> TestCaseRecord | None:
        """
        Record assertion results for a test case.

        The case passes only when every assertion passed.
        """
        case = self.report.get_case(index)
        if case:
            case.assertions = list(results)
            case.http_status = http_status
            passed = all(r.passed for r in results)
            case.complete(CaseStatus.PASSED if passed else CaseStatus.FAILED)
        return case

    def fail_case_error(
        self,
        index: int,
        error_message: str,
        http_status: int | None = None,
    ) -> TestCaseRecord | None:
        """Mark a test case as errored (no response to assert on)."""
        case = self.report.get_case(index)
        if case:
            case.error_message = error_message
            case.http_status = http_status
            case.complete(CaseStatus.ERROR)
        return case

    def skip_case(self, index: int, reason: str | None = None) -> TestCaseRecord | None:
        """Mark a test case as skipped."""
        case = self.report.get_case(index)
        if case:
            case.skip_reason = reason
            case.complete(CaseStatus.SKIPPED)
        return case

    def save_json(self, path: str | Path) -> Path:
        """Save the report to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report.to_json(), encoding="utf-8")
        return path

    def save_html(self, path: str | Path) -> Path:
        """Save the report as a self-contained HTML page."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_html(self.report), encoding="utf-8")
        return path

    def get_summary(self) -> str:
        """Get a human-readable summary of the run."""
        return self.report.summary()


def _suite_to_dict(suite: Suite) -> dict[str, Any]:
    """Convert a Suite to a dict for hashing."""
    return {
        "name": suite.name,
        "url": suite.url,
        "method": suite.method.value,
        "headers": [{"key": h.key, "value": h.value} for h in suite.headers],
        "timeout_ms": suite.timeout_ms,
        "suite_pre_script": suite.suite_pre_script,
        "suite_post_script": suite.suite_post_script,
        "test_cases": [
            {
                "description": case.description,
                "parameters": [{"key": p.key, "value": p.value} for p in case.parameters],
                "query": [{"key": q.key, "value": q.value} for q in case.query],
                "select": case.select,
                "expected_results": case.expected_results,
            }
            for case in suite.test_cases
        ],
    }
