"""
roboot - Declarative HTTP API Testing Tool

This package runs YAML test suites against HTTP endpoints and evaluates
declarative assertions on the responses.

Subpackages:
    - schema_parsing: Parse and validate ``.ibgroboot.yaml`` suite files
    - transport: HTTP transport layer (aiohttp)
    - assertions: Assertion engine for response validation
    - reporting: Run reports and result tracking

Usage:
    from roboot import load_suite, SuiteRunner

    suite, result = load_suite("suites/posts.ibgroboot.yaml")
    reporter = asyncio.run(SuiteRunner(suite).run())
    print(reporter.report.summary())

    # Or evaluate assertions directly
    from roboot import AssertionEngine

    engine = AssertionEngine()
    results = engine.run_sync({"id": 1}, [
        {"assertion": "Required Fields", "inputs": ["id", "name"]},
    ])
"""

__version__ = "0.1.0"

# Re-export schema_parsing for convenience
from .schema_parsing import (
    # Loader functions
    load_suite,
    validate_suite_yaml,
    # Models
    Suite,
    TestCase,
    KeyValue,
    HttpMethod,
    # Validation
    ValidationResult,
    ValidationError,
    SuiteValidator,
)

# Re-export transport for convenience
from .transport import (
    BaseTransport,
    HTTPTransport,
    HTTPError,
    HTTPRequest,
    HTTPResponse,
)

# Re-export assertions for convenience
from .assertions import (
    # Models
    AssertionKind,
    AssertionResult,
    AssertionSpec,
    Scope,
    # Errors
    RobootError,
    ConfigShapeError,
    EvaluationError,
    CustomCheckContractError,
    # Engine
    AssertionEngine,
    CustomCheckBridge,
    run_assertions,
    run_assertions_sync,
)

# Re-export reporting for convenience
from .reporting import (
    RunReport,
    RunStatus,
    TestCaseRecord,
    CaseStatus,
    Reporter,
)

# Runner
from .runner import SuiteRunner, run_suite
from .scripts import SuiteContext

__all__ = [
    # Package info
    "__version__",
    # Schema parsing
    "load_suite",
    "validate_suite_yaml",
    "Suite",
    "TestCase",
    "KeyValue",
    "HttpMethod",
    "ValidationResult",
    "ValidationError",
    "SuiteValidator",
    # Transport
    "BaseTransport",
    "HTTPTransport",
    "HTTPError",
    "HTTPRequest",
    "HTTPResponse",
    # Assertions
    "AssertionKind",
    "AssertionResult",
    "AssertionSpec",
    "Scope",
    "RobootError",
    "ConfigShapeError",
    "EvaluationError",
    "CustomCheckContractError",
    "AssertionEngine",
    "CustomCheckBridge",
    "run_assertions",
    "run_assertions_sync",
    # Reporting
    "RunReport",
    "RunStatus",
    "TestCaseRecord",
    "CaseStatus",
    "Reporter",
    # Runner
    "SuiteRunner",
    "run_suite",
    "SuiteContext",
]
