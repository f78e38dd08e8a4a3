import json

from roboot.assertions import AssertionResult
from roboot.reporting import CaseStatus, Reporter, RunStatus, compute_suite_hash, render_html
from roboot.schema_parsing import KeyValue, Suite, TestCase


def make_suite():
    return Suite(
        name="Posts <API>",
        url="https://api.example.com/posts",
        headers=[KeyValue("Accept", "application/json")],
        test_cases=[
            TestCase(description="lists posts", expected_results=[{"assertion": "Required Fields"}]),
            TestCase(description="gets a post"),
            TestCase(description="never runs"),
        ],
    )


def run_report():
    reporter = Reporter.from_suite(make_suite(), run_id="run-1")
    reporter.start_run()
    reporter.start_case(0, request={"method": "GET"})
    reporter.complete_case(
        0,
        [
            AssertionResult.passed_result("Required Fields"),
            AssertionResult.failed_result("Nullability", 'Field "id" should not be null.'),
        ],
        http_status=200,
    )
    reporter.start_case(1)
    reporter.fail_case_error(1, "Connection failed: refused")
    return reporter, reporter.finish_run()


# --- Reporter ---


def test_from_suite_prepopulates_cases():
    reporter = Reporter.from_suite(make_suite())
    assert [c.description for c in reporter.report.test_cases] == [
        "lists posts",
        "gets a post",
        "never runs",
    ]
    assert all(c.status is CaseStatus.PENDING for c in reporter.report.test_cases)
    assert len(reporter.report.suite_hash) == 12


def test_case_statuses_and_summary_counts():
    _, report = run_report()
    failed, errored, skipped = report.test_cases
    assert failed.status is CaseStatus.FAILED
    assert failed.passed_assertions == 1
    assert failed.failed_assertions == 1
    assert errored.status is CaseStatus.ERROR
    assert skipped.status is CaseStatus.SKIPPED
    assert skipped.skip_reason == "Not executed"
    assert (report.failed_cases, report.error_cases, report.skipped_cases) == (1, 1, 1)
    assert report.status is RunStatus.ERROR
    assert report.duration_ms is not None


def test_all_passing_run_is_passed():
    reporter = Reporter.from_suite(Suite(name="s", url="https://x", test_cases=[TestCase("a")]))
    reporter.start_run()
    reporter.start_case(0)
    reporter.complete_case(0, [AssertionResult.passed_result("Required Fields")], http_status=200)
    report = reporter.finish_run()
    assert report.passed
    assert report.percent(report.passed_cases) == 100


def test_unknown_index_is_ignored():
    reporter = Reporter.from_suite(make_suite())
    assert reporter.start_case(99) is None
    assert reporter.complete_case(99, []) is None


def test_suite_hash_is_stable():
    assert compute_suite_hash({"a": 1, "b": 2}) == compute_suite_hash({"b": 2, "a": 1})
    assert compute_suite_hash({"a": 1}) != compute_suite_hash({"a": 2})


# --- Serialization ---


def test_to_json_round_trips_through_json():
    _, report = run_report()
    data = json.loads(report.to_json())
    assert data["run_id"] == "run-1"
    assert data["status"] == "error"
    assert data["summary"] == {"total": 3, "passed": 0, "failed": 1, "errors": 1, "skipped": 1}
    assert data["test_cases"][0]["assertions"][1] == {
        "assertion": "Nullability",
        "passed": False,
        "message": 'Field "id" should not be null.',
        "failed_indices": [],
        "details": {},
    }


def test_summary_lists_failures():
    _, report = run_report()
    text = report.summary()
    assert "Posts <API>: ERROR" in text
    assert 'Nullability: Field "id" should not be null.' in text
    assert "Error: Connection failed: refused" in text
    assert "Skipped: Not executed" in text


def test_save_json_and_html(tmp_path):
    reporter, report = run_report()
    json_path = reporter.save_json(tmp_path / "out" / "run.json")
    html_path = reporter.save_html(tmp_path / "out" / "run.html")
    assert json.loads(json_path.read_text())["run_id"] == report.run_id
    html = html_path.read_text()
    assert "<!DOCTYPE html>" in html
    assert "gets a post" in html


def test_html_is_autoescaped():
    _, report = run_report()
    html = render_html(report)
    assert "Posts &lt;API&gt;" in html
    assert "Posts <API>" not in html
    assert "Field &#34;id&#34; should not be null." in html
