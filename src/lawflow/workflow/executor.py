"""Run a single workflow step.

pending -> skipped                     (conditions not met)
pending -> failed                      (condition evaluation raised)
pending -> dispatched -> success|failed

Nothing raised by the condition evaluator or the dispatcher escapes
`run_step`; failures and timeouts are reported as a failed StepOutcome.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from .actions import ActionDispatcher
from .conditions import conditions_met
from .models import StepOutcome, StepResult, WorkflowStep

logger = logging.getLogger(__name__)

DEFAULT_ACTION_TIMEOUT_SECONDS = 30.0
CONDITIONS_NOT_MET = "Conditions not met"


class StepExecutor:
    def __init__(
        self,
        dispatcher: ActionDispatcher,
        *,
        action_timeout_seconds: float = DEFAULT_ACTION_TIMEOUT_SECONDS,
        warn_on_unknown_operator: bool = True,
    ) -> None:
        if action_timeout_seconds <= 0:
            raise ValueError("action_timeout_seconds must be positive")
        self._dispatcher = dispatcher
        self._timeout = action_timeout_seconds
        self._warn_unknown = warn_on_unknown_operator

    def run_step(self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str) -> StepOutcome:
        log_extra = {"step_id": step.id, "action": step.action, "tenant_id": tenant_id}

        try:
            met = conditions_met(step.conditions, payload, warn_unknown=self._warn_unknown)
        except Exception as e:
            error = str(e) or "Unknown error"
            logger.warning("Condition evaluation failed", extra={**log_extra, "error": error})
            return StepOutcome(
                step_id=step.id, action=step.action, result=StepResult.FAILED, message=error
            )

        if not met:
            logger.info("Step skipped", extra=log_extra)
            return StepOutcome(
                step_id=step.id,
                action=step.action,
                result=StepResult.SKIPPED,
                message=CONDITIONS_NOT_MET,
            )

        if step.delay is not None:
            # Delay is scheduling metadata only: dispatch happens now. Deferring
            # belongs to a caller that queues the run, not to this executor.
            logger.info(
                "Step delay recorded but not enforced",
                extra={**log_extra, "delay_seconds": step.delay.total_seconds()},
            )

        error = self._dispatch_with_timeout(step, payload, tenant_id)
        if error is not None:
            logger.warning("Step failed", extra={**log_extra, "error": error})
            return StepOutcome(
                step_id=step.id, action=step.action, result=StepResult.FAILED, message=error
            )

        logger.info("Step succeeded", extra=log_extra)
        return StepOutcome(step_id=step.id, action=step.action, result=StepResult.SUCCESS)

    def _dispatch_with_timeout(
        self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str
    ) -> str | None:
        """Return None on success, otherwise the failure message."""

        errors: list[BaseException] = []

        def _target() -> None:
            try:
                self._dispatcher.dispatch(step, payload, tenant_id)
            except Exception as e:
                errors.append(e)

        # A timed-out call cannot be killed; the daemon thread is abandoned and
        # any late side effect is the collaborator's to de-duplicate.
        worker = threading.Thread(target=_target, name=f"workflow-step-{step.id}", daemon=True)
        worker.start()
        worker.join(self._timeout)

        if worker.is_alive():
            return f"Action timed out after {self._timeout:g}s"
        if errors:
            return str(errors[0]) or "Unknown error"
        return None
