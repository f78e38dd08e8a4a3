"""
Assertion engine for evaluating declarative checks on response bodies.

This module provides the core dispatch logic: for every assertion spec it
decides whether the check applies to the whole collection or to each of
its elements, runs the matching evaluator, and folds the outcome into one
AssertionResult.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, Union

from .catalog import CATALOG, classify
from .custom import CustomCheckBridge
from .errors import ConfigShapeError, EvaluationError
from .inputs import parse_inputs
from .models import (
    ArrayInputs,
    AssertionKind,
    AssertionResult,
    AssertionSpec,
    Scope,
    Verdict,
)
from .rules import duplicate_positions

logger = logging.getLogger(__name__)

SpecLike = Union[AssertionSpec, Mapping[str, Any]]


class AssertionEngine:
    """
    Engine for running assertion specs on response data.

    A response is either a single record (a mapping) or a collection
    (a list). Against a collection, "Array Validation" checks the list
    itself and every other kind is applied to each element, producing a
    single result that names the failing indices.

    Example:
        engine = AssertionEngine()
        results = await engine.run(
            [{"id": 1}, {"id": "x"}],
            [{"assertion": "Number Field Validation", "inputs": ["id"]}],
        )
        results[0].passed          # False
        results[0].failed_indices  # [1]
    """

    def __init__(
        self,
        base_dir: str | Path | None = None,
        strict_kinds: bool = False,
        bridge: CustomCheckBridge | None = None,
    ):
        """
        Args:
            base_dir: Directory custom validator paths are resolved against
            strict_kinds: Fail unrecognized kinds instead of skipping them
            bridge: Custom check bridge (built from base_dir if omitted)
        """
        self.strict_kinds = strict_kinds
        self.bridge = bridge or CustomCheckBridge(base_dir)

    # ─────────────────────────────────────────────────────────────────────
    # Runner
    # ─────────────────────────────────────────────────────────────────────

    async def run(self, response_data: Any, specs: Iterable[SpecLike]) -> list[AssertionResult]:
        """
        Evaluate every spec against the response, in order.

        Always returns exactly one result per spec. A spec that cannot be
        evaluated produces a failed result instead of raising.
        """
        results: list[AssertionResult] = []
        for raw in specs:
            results.append(await self._run_one(response_data, raw))
        return results

    def run_sync(self, response_data: Any, specs: Iterable[SpecLike]) -> list[AssertionResult]:
        """Blocking wrapper around ``run`` for callers outside an event loop."""
        return asyncio.run(self.run(response_data, specs))

    async def _run_one(self, response_data: Any, raw: SpecLike) -> AssertionResult:
        name = _spec_name(raw)
        try:
            spec = raw if isinstance(raw, AssertionSpec) else AssertionSpec.from_dict(raw)
            if not spec.is_known:
                return AssertionResult.from_verdict(name, self._unrecognized(name))

            verdict = await self.dispatch(response_data, spec)
            if not verdict.passed:
                logger.debug("Assertion %r failed: %s", name, verdict.message)
            return AssertionResult.from_verdict(name, verdict)

        except ConfigShapeError as e:
            return AssertionResult.failed_result(
                name, str(e), details={"error_type": type(e).__name__}
            )
        except Exception as e:
            logger.debug("Assertion %r raised %s: %s", name, type(e).__name__, e)
            return AssertionResult.failed_result(
                name,
                f'Error during assertion "{name}": {e}',
                details={"error_type": type(e).__name__},
            )

    async def dispatch(self, response_data: Any, spec: AssertionSpec) -> Verdict:
        """Route one spec to the array evaluator, the fan-out or the item evaluator."""
        if isinstance(response_data, (list, tuple)):
            if self.classify(spec.kind) is Scope.ARRAY:
                return self.evaluate_array(spec.kind, response_data, spec.inputs)
            return await self.fan_out(spec.kind, response_data, spec.inputs)

        record = response_data if isinstance(response_data, Mapping) else {"value": response_data}
        return await self.evaluate_item(spec.kind, record, spec.inputs)

    def classify(self, kind: AssertionKind | str) -> Scope:
        return classify(kind)

    # ─────────────────────────────────────────────────────────────────────
    # Evaluators
    # ─────────────────────────────────────────────────────────────────────

    async def evaluate_item(
        self,
        kind: AssertionKind | str,
        record: Mapping[str, Any],
        inputs: Any,
    ) -> Verdict:
        """
        Evaluate one kind against one record.

        ``inputs`` may be the normalized payload or the raw decoded value.

        Raises:
            ConfigShapeError: if raw inputs do not fit the kind
            EvaluationError: if the rule itself fails (e.g. a bad pattern)
        """
        known = AssertionKind.lookup(kind)
        if known is None:
            return self._unrecognized(str(kind))

        payload = _ensure_payload(known, inputs)
        if known is AssertionKind.CUSTOM:
            return await self.bridge.evaluate(record, payload)

        rule = CATALOG[known].rule
        try:
            return rule(record, payload)
        except ConfigShapeError:
            raise
        except Exception as e:
            raise EvaluationError(f"{type(e).__name__}: {e}") from e

    def evaluate_array(
        self,
        kind: AssertionKind | str,
        collection: Sequence[Any],
        inputs: Any,
    ) -> Verdict:
        """Evaluate an array-level kind against the collection itself."""
        known = AssertionKind.lookup(kind)
        if known is not AssertionKind.ARRAY:
            return self._unrecognized(str(kind), level="array-level ")

        payload: ArrayInputs = _ensure_payload(known, inputs)
        length = len(collection)
        if payload.min_length is not None and length < payload.min_length:
            return Verdict.fail(
                f"Array length is below minimum {payload.min_length}. Actual length = {length}"
            )
        if payload.max_length is not None and length > payload.max_length:
            return Verdict.fail(
                f"Array length exceeds maximum {payload.max_length}. Actual length = {length}"
            )
        if payload.enforce_unique:
            duplicates = duplicate_positions(collection)
            if duplicates:
                return Verdict(
                    False,
                    "Array contains duplicate elements at index "
                    f"[{', '.join(str(i) for i in duplicates)}].",
                    tuple(duplicates),
                )
        return Verdict.ok()

    async def fan_out(
        self,
        kind: AssertionKind | str,
        collection: Sequence[Any],
        inputs: Any,
    ) -> Verdict:
        """
        Apply an item-level kind to every element of a collection.

        Non-mapping elements are wrapped as ``{"value": element}``. The
        outcome is a single verdict listing every failing index.
        """
        failed: list[int] = []
        reasons: list[str] = []

        for index, element in enumerate(collection):
            record = element if isinstance(element, Mapping) else {"value": element}
            verdict = await self.evaluate_item(kind, record, inputs)
            if not verdict.passed:
                failed.append(index)
                reasons.append(f"Index {index}: {verdict.message}")

        if not failed:
            return Verdict.ok()

        return Verdict(
            False,
            f"Item(s) at index [{', '.join(str(i) for i in failed)}] failed. "
            f"Reasons: {' | '.join(reasons)}",
            tuple(failed),
        )

    def _unrecognized(self, name: str, level: str = "") -> Verdict:
        if self.strict_kinds:
            return Verdict.fail(f'Unrecognized {level}assertion type: "{name}".')
        return Verdict(True, f'Unrecognized {level}assertion type: "{name}". Skipping.')


def _ensure_payload(kind: AssertionKind, inputs: Any) -> Any:
    """Normalize raw inputs; pass already-normalized payloads through."""
    if inputs is None or isinstance(inputs, (Mapping, list, tuple, str)):
        return parse_inputs(kind, inputs)
    return inputs


def _spec_name(raw: Any) -> str:
    if isinstance(raw, AssertionSpec):
        return raw.name
    if isinstance(raw, Mapping):
        return str(raw.get("assertion", raw.get("kind")))
    return repr(raw)


# Convenience functions for quick evaluation
async def run_assertions(
    response_data: Any,
    specs: Iterable[SpecLike],
    base_dir: str | Path | None = None,
    strict_kinds: bool = False,
) -> list[AssertionResult]:
    """Evaluate specs against a response with a default engine."""
    engine = AssertionEngine(base_dir=base_dir, strict_kinds=strict_kinds)
    return await engine.run(response_data, specs)


def run_assertions_sync(
    response_data: Any,
    specs: Iterable[SpecLike],
    base_dir: str | Path | None = None,
    strict_kinds: bool = False,
) -> list[AssertionResult]:
    """Blocking variant of ``run_assertions``."""
    engine = AssertionEngine(base_dir=base_dir, strict_kinds=strict_kinds)
    return engine.run_sync(response_data, specs)
