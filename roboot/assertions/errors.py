"""
Exception taxonomy for the assertion engine.

None of these escape ``AssertionEngine.run``: the runner converts each
one into a failed ``AssertionResult`` for the spec that raised it.
"""

from __future__ import annotations


class RobootError(Exception):
    """Base class for all roboot errors."""


class ConfigShapeError(RobootError):
    """Assertion inputs are missing required keys or have the wrong shape."""

    def __init__(self, kind: str, message: str):
        self.kind = kind
        super().__init__(f"Invalid inputs for \"{kind}\": {message}")


class EvaluationError(RobootError):
    """A rule raised while evaluating a record (e.g. a malformed pattern)."""


class CustomCheckContractError(RobootError):
    """A custom validator module broke the ``validate`` contract."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)
