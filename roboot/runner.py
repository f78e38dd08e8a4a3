"""
Suite runner.

Executes a parsed Suite: runs the pre-suite script, sends one request per
test case, selects the value under test, evaluates the expected results
and records everything in a Reporter. Test cases run sequentially.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Callable, Mapping

from jsonpath_ng import parse as parse_jsonpath

from .assertions import AssertionEngine, AssertionResult
from .reporting import Reporter
from .schema_parsing import KeyValue, Suite, TestCase
from .scripts import SuiteContext, headers_to_dict, run_post_suite, run_pre_suite
from .transport import BaseTransport, HTTPRequest, HTTPResponse, HTTPTransport

logger = logging.getLogger(__name__)

ENV_PATTERN = re.compile(r"\{\{env\.(\w+)\}\}")
BODY_PARAMETER = "body"
BODYLESS_METHODS = {"GET", "HEAD", "OPTIONS"}

# Called after each test case with (index, test case, results or None, error or None)
CaseCallback = Callable[[int, TestCase, "list[AssertionResult] | None", "str | None"], None]


class SelectionError(Exception):
    """A test case's ``select`` path matched nothing in the response."""


def interpolate_value(value: Any, env: Mapping[str, Any]) -> Any:
    """
    Interpolate ``{{env.NAME}}`` templates in a value.

    Names are looked up in ``env`` first, then in the process environment.
    Unknown names are left as-is.
    """
    if isinstance(value, str):
        def replace_env(match):
            var_name = match.group(1)
            if var_name in env:
                return str(env[var_name])
            return os.environ.get(var_name, match.group(0))
        return ENV_PATTERN.sub(replace_env, value)
    elif isinstance(value, dict):
        return {k: interpolate_value(v, env) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_value(v, env) for v in value]
    return value


def select_value(data: Any, path: str | None) -> Any:
    """
    Apply a JSONPath to a response body.

    One match yields its value, several yield a list of values.

    Raises:
        SelectionError: If the path matches nothing
    """
    if not path:
        return data
    matches = [match.value for match in parse_jsonpath(path).find(data)]
    if not matches:
        raise SelectionError(f"Select path '{path}' matched nothing in the response")
    if len(matches) == 1:
        return matches[0]
    return matches


def build_request(suite: Suite, case: TestCase, context: SuiteContext) -> HTTPRequest:
    """
    Build the request for one test case.

    Headers come from the suite context, query parameters from the case.
    Methods that carry a body send the context data merged with the case's
    ``body`` parameter.
    """
    method = suite.method.value
    params = {
        q.key: str(interpolate_value(q.value, suite.env))
        for q in case.query
        if q.value is not None
    }

    body = None
    if method not in BODYLESS_METHODS:
        body = dict(context.data or {})
        body.update(_case_body(case, suite.env))

    return HTTPRequest(
        method=method,
        url=interpolate_value(suite.url, suite.env),
        headers=dict(context.headers),
        params=params,
        json_body=body,
        timeout_ms=suite.timeout_ms,
    )


def _case_body(case: TestCase, env: Mapping[str, Any]) -> dict[str, Any]:
    raw = case.parameter(BODY_PARAMETER)
    if raw is None or raw == "":
        return {}
    if isinstance(raw, str):
        # Validation already checked this decodes to an object
        raw = json.loads(interpolate_value(raw, env))
    return interpolate_value(dict(raw), env)


class SuiteRunner:
    """
    Runs a suite against its target and builds the run report.

    Example:
        suite, result = load_suite("posts.ibgroboot.yaml")
        runner = SuiteRunner(suite)
        reporter = await runner.run()
        print(reporter.report.summary())
    """

    def __init__(
        self,
        suite: Suite,
        transport: BaseTransport | None = None,
        strict_kinds: bool | None = None,
        on_case: CaseCallback | None = None,
    ):
        """
        Args:
            suite: The parsed suite to run
            transport: Transport to send requests with (an HTTPTransport if omitted)
            strict_kinds: Override the suite's strict_kinds setting
            on_case: Optional callback invoked after each test case
        """
        self.suite = suite
        self.transport = transport
        self.on_case = on_case
        self.engine = AssertionEngine(
            base_dir=suite.source_dir,
            strict_kinds=suite.strict_kinds if strict_kinds is None else strict_kinds,
        )

    def initial_context(self) -> SuiteContext:
        headers = [
            KeyValue(h.key, interpolate_value(h.value, self.suite.env))
            for h in self.suite.headers
        ]
        return SuiteContext(headers=headers_to_dict(headers))

    async def run(self) -> Reporter:
        """Execute every test case and return the reporter with results."""
        suite = self.suite
        reporter = Reporter.from_suite(suite)
        reporter.start_run()
        logger.info("Running suite %r (%d test cases)", suite.name, len(suite.test_cases))

        context = self.initial_context()
        if suite.suite_pre_script:
            context = await run_pre_suite(suite.suite_pre_script, context, suite.source_dir)

        transport = self.transport or HTTPTransport()
        owns_transport = self.transport is None
        try:
            if not transport.is_connected:
                await transport.connect()
            for index, case in enumerate(suite.test_cases):
                await self._run_case(transport, reporter, index, case, context)
        finally:
            if owns_transport:
                await transport.disconnect()

        if suite.suite_post_script:
            await run_post_suite(suite.suite_post_script, context, suite.source_dir)

        report = reporter.finish_run()
        logger.info("Suite %r finished: %s", suite.name, report.status.value)
        return reporter

    async def _run_case(
        self,
        transport: BaseTransport,
        reporter: Reporter,
        index: int,
        case: TestCase,
        context: SuiteContext,
    ) -> None:
        request = build_request(self.suite, case, context)
        reporter.start_case(index, request=request.to_dict())
        logger.debug("Test case %d: %s", index, case.description)

        response: HTTPResponse = await transport.send(request)
        if not response.success:
            message = response.error.message if response.error else "Unknown error"
            logger.warning("Test case %d request failed: %s", index, message)
            reporter.fail_case_error(index, message)
            self._notify(index, case, None, message)
            return

        try:
            value = select_value(response.body, case.select)
        except SelectionError as e:
            reporter.fail_case_error(index, str(e), http_status=response.status)
            self._notify(index, case, None, str(e))
            return

        results = await self.engine.run(value, case.expected_results)
        reporter.complete_case(index, results, http_status=response.status)
        self._notify(index, case, results, None)

    def _notify(
        self,
        index: int,
        case: TestCase,
        results: list[AssertionResult] | None,
        error: str | None,
    ) -> None:
        if self.on_case:
            self.on_case(index, case, results, error)


async def run_suite(
    suite: Suite,
    transport: BaseTransport | None = None,
    strict_kinds: bool | None = None,
) -> Reporter:
    """Convenience wrapper around SuiteRunner.run()."""
    return await SuiteRunner(suite, transport=transport, strict_kinds=strict_kinds).run()
