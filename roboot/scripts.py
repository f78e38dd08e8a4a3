"""
Suite pre/post scripts.

A pre-suite script runs once before any test case and may return new
headers and body data for every request of the run. A post-suite script
runs once after the last test case. State flows through an explicit
SuiteContext value; scripts never mutate shared globals.

Script modules are referenced like custom validators (see
``roboot.plugins``) and expose one of:
    - ``pre_suite(context)`` / ``post_suite(context)``
    - ``main(context)``
Functions may be sync or async.
"""

from __future__ import annotations

import copy
import inspect
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Mapping

from .plugins import resolve_module

logger = logging.getLogger(__name__)

PRE_ENTRY_POINTS = ("pre_suite", "main")
POST_ENTRY_POINTS = ("post_suite", "main")


@dataclass(frozen=True)
class SuiteContext:
    """Headers and body data shared by every request of a run."""
    headers: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] | None = None

    def copy(self) -> SuiteContext:
        return replace(self, headers=dict(self.headers), data=copy.deepcopy(self.data))


async def run_pre_suite(
    reference: str,
    context: SuiteContext,
    base_dir: str | Path | None = None,
) -> SuiteContext:
    """
    Run a pre-suite script and return the context for the run.

    The script receives a copy of ``context``. If it returns nothing, or
    fails, the original context is returned unchanged.
    """
    try:
        entry = _entry_point(reference, PRE_ENTRY_POINTS, base_dir)
        outcome = entry(context.copy())
        if inspect.isawaitable(outcome):
            outcome = await outcome
        updated = _merge_outcome(context, outcome)
    except Exception as e:
        logger.warning("Pre-suite script %r failed: %s: %s", reference, type(e).__name__, e)
        return context

    logger.info("Pre-suite script %r completed", reference)
    return updated


async def run_post_suite(
    reference: str,
    context: SuiteContext,
    base_dir: str | Path | None = None,
) -> None:
    """Run a post-suite script; failures are logged, not raised."""
    try:
        entry = _entry_point(reference, POST_ENTRY_POINTS, base_dir)
        outcome = entry(context.copy())
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as e:
        logger.warning("Post-suite script %r failed: %s: %s", reference, type(e).__name__, e)
        return
    logger.info("Post-suite script %r completed", reference)


def _entry_point(
    reference: str,
    names: tuple[str, ...],
    base_dir: str | Path | None,
) -> Callable[..., Any]:
    module = resolve_module(reference, base_dir)
    for name in names:
        entry = getattr(module, name, None)
        if callable(entry):
            return entry
    raise AttributeError(f"script exports none of: {', '.join(names)}")


def _merge_outcome(context: SuiteContext, outcome: Any) -> SuiteContext:
    if outcome is None:
        return context
    if isinstance(outcome, SuiteContext):
        return outcome
    if not isinstance(outcome, Mapping):
        logger.warning(
            "Pre-suite script returned %s; expected a SuiteContext or a mapping",
            type(outcome).__name__,
        )
        return context

    headers = context.headers
    if outcome.get("headers"):
        if not isinstance(outcome["headers"], (Mapping, list, tuple)):
            raise TypeError(
                f"'headers' must be a mapping or a list of key/value items, "
                f"got {type(outcome['headers']).__name__}"
            )
        headers = headers_to_dict(outcome["headers"])
    data = context.data
    if outcome.get("data"):
        if not isinstance(outcome["data"], Mapping):
            raise TypeError(f"'data' must be a mapping, got {type(outcome['data']).__name__}")
        data = dict(outcome["data"])
    return SuiteContext(headers=headers, data=data)


def headers_to_dict(headers: Any) -> dict[str, str]:
    """Accept a mapping or a list of ``{key, value}`` items."""
    if isinstance(headers, Mapping):
        return {str(k): str(v) for k, v in headers.items()}
    result: dict[str, str] = {}
    for item in headers or []:
        key = item.get("key") if isinstance(item, Mapping) else getattr(item, "key", None)
        value = item.get("value") if isinstance(item, Mapping) else getattr(item, "value", None)
        if key is not None:
            result[str(key)] = "" if value is None else str(value)
    return result
