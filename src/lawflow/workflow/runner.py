from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .errors import NotFoundError
from .events import TriggerEvent
from .executor import StepExecutor
from .models import RunResult, StepOutcome
from .store import WorkflowRepository

logger = logging.getLogger(__name__)


class WorkflowRunner:
    """Execute a tenant's workflow for one triggering event.

    Best-effort, not transactional: every step runs in declaration order and a
    failed step does not stop the ones after it.
    """

    def __init__(self, repository: WorkflowRepository, executor: StepExecutor) -> None:
        self._repository = repository
        self._executor = executor

    def execute(self, workflow_id: str, payload: Mapping[str, Any], tenant_id: str) -> RunResult:
        """Run every step of the workflow and return the aggregated result.

        Raises:
            NotFoundError: The workflow is missing or owned by another tenant.
                Nothing runs and the usage counters are left alone.
        """

        workflow = self._repository.load_workflow_definition(workflow_id, tenant_id)
        if workflow is None:
            logger.warning(
                "Workflow not found for tenant",
                extra={"workflow_id": workflow_id, "tenant_id": tenant_id},
            )
            raise NotFoundError(workflow_id, tenant_id)

        logger.info(
            "Executing workflow",
            extra={"workflow_id": workflow_id, "tenant_id": tenant_id, "steps": len(workflow.steps)},
        )

        outcomes: list[StepOutcome] = []
        for step in workflow.steps:
            outcomes.append(self._executor.run_step(step, payload, tenant_id))

        self._repository.increment_workflow_stats(workflow_id)

        result = RunResult(workflow_id=workflow_id, executed_steps=tuple(outcomes))
        logger.info(
            "Workflow executed",
            extra={
                "workflow_id": workflow_id,
                "tenant_id": tenant_id,
                "success": result.success,
                "failed_steps": len(result.errors),
            },
        )
        return result

    def process_event(self, event: TriggerEvent, tenant_id: str) -> list[RunResult]:
        """Run every active workflow of the tenant subscribed to the event kind."""

        workflows = self._repository.find_by_trigger(tenant_id, event.type)
        logger.info(
            "Processing trigger event",
            extra={"event_type": event.type.value, "tenant_id": tenant_id, "matches": len(workflows)},
        )
        results: list[RunResult] = []
        for workflow in workflows:
            try:
                results.append(self.execute(workflow.id, event.payload, tenant_id))
            except NotFoundError:
                # Deleted between lookup and execution.
                logger.info(
                    "Workflow vanished before execution",
                    extra={"workflow_id": workflow.id, "tenant_id": tenant_id},
                )
        return results
