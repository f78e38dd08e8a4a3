import asyncio
import json
import textwrap

import pytest

from roboot.reporting import CaseStatus, RunStatus
from roboot.runner import SelectionError, SuiteRunner, build_request, interpolate_value, select_value
from roboot.schema_parsing import validate_suite_yaml
from roboot.scripts import SuiteContext
from roboot.transport import HTTPError, HTTPResponse


def make_suite(yaml_text, source_dir=None):
    suite, result = validate_suite_yaml(textwrap.dedent(yaml_text), source_dir=source_dir)
    assert result.is_valid, str(result)
    return suite


POSTS_SUITE = """
    name: Posts
    url: "{{env.BASE}}/posts"
    env:
      BASE: https://api.example.com
    headers:
      - key: Accept
        value: application/json
    test_cases:
      - description: list posts
        expected_results:
          - assertion: Array Validation
            inputs: {minLength: 1}
          - assertion: Required Fields
            inputs: [id, title]
      - description: first post
        select: "$[0]"
        expected_results:
          - assertion: Number Field Validation
            inputs: [id]
"""


# --- interpolate_value / select_value ---


def test_interpolate_prefers_suite_env(monkeypatch):
    monkeypatch.setenv("TOKEN", "from-os")
    assert interpolate_value("Bearer {{env.TOKEN}}", {"TOKEN": "abc"}) == "Bearer abc"
    assert interpolate_value("Bearer {{env.TOKEN}}", {}) == "Bearer from-os"
    assert interpolate_value("{{env.NOT_SET_ANYWHERE}}", {}) == "{{env.NOT_SET_ANYWHERE}}"
    assert interpolate_value({"a": ["{{env.X}}"]}, {"X": 1}) == {"a": ["1"]}
    assert interpolate_value(5, {}) == 5


def test_select_value():
    data = {"data": {"items": [{"id": 1}, {"id": 2}]}}
    assert select_value(data, None) is data
    assert select_value(data, "$.data.items[0]") == {"id": 1}
    assert select_value(data, "$.data.items[*].id") == [1, 2]
    with pytest.raises(SelectionError):
        select_value(data, "$.missing")


# --- build_request ---


def test_build_request_for_get_has_no_body():
    suite = make_suite(POSTS_SUITE)
    context = SuiteContext(headers={"Accept": "application/json"}, data={"x": 1})
    request = build_request(suite, suite.test_cases[0], context)
    assert request.method == "GET"
    assert request.url == "https://api.example.com/posts"
    assert request.headers == {"Accept": "application/json"}
    assert request.json_body is None


def test_build_request_merges_context_data_and_body():
    suite = make_suite("""
        name: Create
        url: https://api.example.com/posts
        method: POST
        env:
          AUTHOR: ada
        test_cases:
          - description: create
            parameters:
              - key: body
                value: '{"title": "Hi", "author": "{{env.AUTHOR}}"}'
            query:
              - key: notify
                value: true
            expected_results: []
    """)
    context = SuiteContext(data={"tenant": "acme", "title": "default"})
    request = build_request(suite, suite.test_cases[0], context)
    assert request.json_body == {"tenant": "acme", "title": "Hi", "author": "ada"}
    assert request.params == {"notify": "True"}
    assert context.data == {"tenant": "acme", "title": "default"}


# --- SuiteRunner ---


@pytest.mark.asyncio
async def test_runner_evaluates_each_case(fake_transport):
    transport = fake_transport([
        [{"id": 1, "title": "a"}, {"id": 2}],
        [{"id": "x", "title": "a"}],
    ])
    reporter = await SuiteRunner(make_suite(POSTS_SUITE), transport=transport).run()
    report = reporter.report

    assert len(transport.requests) == 2
    assert transport.requests[0].headers == {"Accept": "application/json"}

    first, second = report.test_cases
    assert first.status is CaseStatus.FAILED
    assert [a.passed for a in first.assertions] == [True, False]
    assert first.assertions[1].failed_indices == [1]
    assert first.http_status == 200

    assert second.status is CaseStatus.FAILED
    assert second.assertions[0].message == 'Field "id" is not a number.'

    assert report.status is RunStatus.FAILED
    assert report.failed_cases == 2


@pytest.mark.asyncio
async def test_runner_passes_when_all_assertions_pass(fake_transport):
    transport = fake_transport([[{"id": 1, "title": "a"}], [{"id": 1}]])
    reporter = await SuiteRunner(make_suite(POSTS_SUITE), transport=transport).run()
    assert reporter.report.status is RunStatus.PASSED
    assert reporter.report.passed_cases == 2


@pytest.mark.asyncio
async def test_transport_error_marks_case_as_error(fake_transport):
    transport = fake_transport([
        HTTPError.timeout_error("Request timed out after 30000ms"),
        [{"id": 1}],
    ])
    reporter = await SuiteRunner(make_suite(POSTS_SUITE), transport=transport).run()
    first, second = reporter.report.test_cases
    assert first.status is CaseStatus.ERROR
    assert first.error_message == "Request timed out after 30000ms"
    assert second.status is CaseStatus.PASSED
    assert reporter.report.status is RunStatus.ERROR


@pytest.mark.asyncio
async def test_select_without_match_marks_case_as_error(fake_transport):
    transport = fake_transport([[{"id": 1, "title": "a"}], []])
    reporter = await SuiteRunner(make_suite(POSTS_SUITE), transport=transport).run()
    second = reporter.report.test_cases[1]
    assert second.status is CaseStatus.ERROR
    assert "matched nothing" in second.error_message


@pytest.mark.asyncio
async def test_non_2xx_responses_are_still_evaluated(fake_transport):
    suite = make_suite("""
        name: Errors
        url: https://api.example.com/posts/999
        test_cases:
          - description: not found
            expected_results:
              - assertion: Error Messaging
                inputs: {messageContains: not found}
    """)
    transport = fake_transport([HTTPResponse(status=404, body={"error": "Post not found"})])
    reporter = await SuiteRunner(suite, transport=transport).run()
    [case] = reporter.report.test_cases
    assert case.status is CaseStatus.PASSED
    assert case.http_status == 404


@pytest.mark.asyncio
async def test_strict_kinds_override(fake_transport):
    suite = make_suite("""
        name: Unknown
        url: https://api.example.com
        test_cases:
          - description: bogus
            expected_results:
              - assertion: Bogus
    """)
    lenient = await SuiteRunner(suite, transport=fake_transport([{}])).run()
    strict = await SuiteRunner(suite, transport=fake_transport([{}]), strict_kinds=True).run()
    assert lenient.report.status is RunStatus.PASSED
    assert strict.report.status is RunStatus.FAILED


@pytest.mark.asyncio
async def test_pre_script_context_reaches_requests(tmp_path, fake_transport):
    (tmp_path / "login.py").write_text(textwrap.dedent("""
        def pre_suite(context):
            headers = dict(context.headers, Authorization="Bearer t0k3n")
            return {"headers": headers, "data": {"session": "s1"}}
    """))
    (tmp_path / "check_title.py").write_text(textwrap.dedent("""
        def validate(record, config):
            ok = record.get("title", "").startswith(config["prefix"])
            return {"status": ok, "error": "" if ok else "bad title"}
    """))
    suite = make_suite("""
        name: Scripted
        url: https://api.example.com/posts
        method: POST
        suite_pre_script: login.py
        test_cases:
          - description: create
            parameters:
              - key: body
                value: '{"title": "Hello"}'
            expected_results:
              - assertion: Custom
                inputs: {path: check_title.py, prefix: He}
    """, source_dir=tmp_path)
    transport = fake_transport([{"title": "Hello"}])
    reporter = await SuiteRunner(suite, transport=transport).run()

    [request] = transport.requests
    assert request.headers["Authorization"] == "Bearer t0k3n"
    assert request.json_body == {"session": "s1", "title": "Hello"}
    assert reporter.report.status is RunStatus.PASSED


@pytest.mark.asyncio
async def test_malformed_pre_script_result_does_not_abort_run(tmp_path, fake_transport):
    (tmp_path / "bad_login.py").write_text(textwrap.dedent("""
        def pre_suite(context):
            return {"data": "oops"}
    """))
    suite = make_suite("""
        name: Scripted
        url: https://api.example.com/posts
        suite_pre_script: bad_login.py
        headers:
          - key: Accept
            value: application/json
        test_cases:
          - description: list
            expected_results:
              - assertion: Required Fields
                inputs: [id]
    """, source_dir=tmp_path)
    transport = fake_transport([{"id": 1}])
    reporter = await SuiteRunner(suite, transport=transport).run()

    [request] = transport.requests
    assert request.headers == {"Accept": "application/json"}
    assert reporter.report.status is RunStatus.PASSED


@pytest.mark.asyncio
async def test_case_callback_and_provided_transport_lifecycle(fake_transport):
    seen = []
    transport = fake_transport([[{"id": 1, "title": "a"}], [{"id": 1}]])
    runner = SuiteRunner(
        make_suite(POSTS_SUITE),
        transport=transport,
        on_case=lambda index, case, results, error: seen.append((index, error)),
    )
    await runner.run()
    assert seen == [(0, None), (1, None)]
    assert transport.connects == 1
    assert transport.disconnects == 0


def test_report_is_json_serializable(fake_transport):
    transport = fake_transport([[{"id": 1, "title": "a"}], [{"id": 1}]])
    reporter = asyncio.run(SuiteRunner(make_suite(POSTS_SUITE), transport=transport).run())
    data = json.loads(reporter.report.to_json())
    assert data["summary"]["passed"] == 2
    assert data["test_cases"][0]["request"]["url"] == "https://api.example.com/posts"
