"""
Reporting for roboot Suite Runs

This package captures a complete record of a suite run.

Features:
    - Run metadata (ID, timestamp, suite info and hash)
    - Per test case records with timing and HTTP status
    - Every assertion result in declaration order
    - JSON serialization and a jinja2-rendered HTML page
    - Human-readable summaries

Usage:
    from roboot.schema_parsing import load_suite
    from roboot.reporting import Reporter

    suite, _ = load_suite("posts.ibgroboot.yaml")
    reporter = Reporter.from_suite(suite)

    reporter.start_run()
    reporter.start_case(0)
    reporter.complete_case(0, results, http_status=200)

    report = reporter.finish_run()
    print(report.summary())

    reporter.save_json("reports/run.json")
    reporter.save_html("reports/run.html")
"""

# Models
from .models import (
    CaseStatus,
    RunReport,
    RunStatus,
    TestCaseRecord,
    compute_suite_hash,
)

# Reporter
from .reporter import Reporter

# HTML
from .html import render_html

__all__ = [
    # Models
    "RunReport",
    "RunStatus",
    "TestCaseRecord",
    "CaseStatus",
    "compute_suite_hash",
    # Reporter
    "Reporter",
    # HTML
    "render_html",
]
