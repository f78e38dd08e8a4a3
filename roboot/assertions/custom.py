"""
Custom check bridge.

Delegates a "Custom" assertion to a user-supplied module exposing
``validate(record, config)``. The callable may return its outcome directly
or as an awaitable, and the outcome must be a mapping of the form
``{"status": bool, "error": str}``.
"""

from __future__ import annotations

import copy
import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from ..plugins import resolve_module
from .errors import CustomCheckContractError
from .models import CustomInputs, Verdict

logger = logging.getLogger(__name__)

VALIDATE_EXPORT = "validate"
DEFAULT_FAILURE_MESSAGE = "Custom assertion script failed."


class CustomCheckBridge:
    """
    Resolves and invokes custom validators.

    Example:
        bridge = CustomCheckBridge(base_dir="suites/")
        verdict = await bridge.evaluate(
            {"title": "Body"},
            CustomInputs(path="checks/title.py", config={"minWords": 1}),
        )
    """

    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir) if base_dir is not None else None

    async def evaluate(self, record: Mapping[str, Any], inputs: CustomInputs) -> Verdict:
        """Run the validator for one record; never raises."""
        try:
            validate = self.resolve(inputs.path)
            outcome = validate(record, copy.deepcopy(inputs.config))
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return self._to_verdict(inputs.path, outcome)
        except CustomCheckContractError as e:
            logger.debug("Custom check contract error for %s: %s", inputs.path, e)
            return Verdict.fail(str(e))
        except Exception as e:
            logger.debug("Custom check %s raised %s", inputs.path, type(e).__name__)
            return Verdict.fail(f"Error running custom assertion script: {type(e).__name__}: {e}")

    def resolve(self, path: str) -> Callable[..., Any]:
        """
        Find the ``validate`` callable for a module reference.

        Raises:
            CustomCheckContractError: if the module or its export is unusable
        """
        try:
            module = resolve_module(path, self.base_dir)
        except ModuleNotFoundError as e:
            raise CustomCheckContractError(path, f"Custom script not found: {e}") from e

        if not hasattr(module, VALIDATE_EXPORT):
            raise CustomCheckContractError(
                path, f"Custom script '{path}' does not export a 'validate' function."
            )

        validate = getattr(module, VALIDATE_EXPORT)
        if not callable(validate):
            raise CustomCheckContractError(
                path,
                f"Custom script '{path}' exports 'validate' but it is not callable "
                f"(got {type(validate).__name__}).",
            )
        return validate

    def _to_verdict(self, path: str, outcome: Any) -> Verdict:
        if (
            not isinstance(outcome, Mapping)
            or not isinstance(outcome.get("status"), bool)
            or not isinstance(outcome.get("error"), str)
        ):
            raise CustomCheckContractError(
                path,
                "Custom script returned invalid structure. "
                'Must be {"status": bool, "error": str}.',
            )

        if outcome["status"]:
            return Verdict.ok()
        return Verdict.fail(outcome["error"] or DEFAULT_FAILURE_MESSAGE)
