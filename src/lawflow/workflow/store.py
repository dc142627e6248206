"""JSON-file persistence for workflow definitions.

One lock guards every read-modify-write, so usage counters are incremented
atomically for all callers sharing a store instance. Multiple processes
writing the same file need a real database (UPDATE ... SET n = n + 1).
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from .events import TriggerKind
from .models import WorkflowDefinition

logger = logging.getLogger(__name__)


class WorkflowAlreadyExists(ValueError):
    pass


class WorkflowRepository(Protocol):
    """What the runner needs from persistence."""

    def load_workflow_definition(
        self, workflow_id: str, tenant_id: str
    ) -> WorkflowDefinition | None: ...

    def increment_workflow_stats(self, workflow_id: str) -> None: ...

    def find_by_trigger(self, tenant_id: str, trigger: TriggerKind) -> list[WorkflowDefinition]: ...


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class WorkflowStore:
    path: Path

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def _load_unlocked(self) -> list[WorkflowDefinition]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(
                "Workflow state file is not valid JSON; treating as empty",
                extra={"path": str(self.path)},
            )
            return []
        if not isinstance(raw, list):
            return []

        workflows: list[WorkflowDefinition] = []
        for item in raw:
            try:
                workflows.append(WorkflowDefinition.model_validate(item))
            except ValidationError:
                logger.warning(
                    "Skipping invalid workflow record",
                    extra={
                        "path": str(self.path),
                        "workflow_id": item.get("id") if isinstance(item, dict) else None,
                    },
                )
        return workflows

    def _save_unlocked(self, workflows: list[WorkflowDefinition]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [w.model_dump(mode="json") for w in workflows]
        self.path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def list(self, tenant_id: str | None = None) -> list[WorkflowDefinition]:
        with self._lock:
            workflows = self._load_unlocked()
        if tenant_id is None:
            return workflows
        return [w for w in workflows if w.tenant_id == tenant_id]

    def get(self, workflow_id: str) -> WorkflowDefinition | None:
        with self._lock:
            for workflow in self._load_unlocked():
                if workflow.id == workflow_id:
                    return workflow
            return None

    def load_workflow_definition(
        self, workflow_id: str, tenant_id: str
    ) -> WorkflowDefinition | None:
        """Tenant-scoped lookup; another tenant's workflow reads as missing."""

        workflow = self.get(workflow_id)
        if workflow is None or workflow.tenant_id != tenant_id:
            return None
        return workflow

    def find_by_trigger(self, tenant_id: str, trigger: TriggerKind) -> list[WorkflowDefinition]:
        return [
            w
            for w in self.list(tenant_id)
            if w.is_active and w.trigger is not None and w.trigger == trigger
        ]

    def create(self, workflow: WorkflowDefinition) -> WorkflowDefinition:
        with self._lock:
            workflows = self._load_unlocked()
            if any(w.id == workflow.id for w in workflows):
                raise WorkflowAlreadyExists(f"Workflow already exists: {workflow.id}")
            workflows.append(workflow)
            self._save_unlocked(workflows)
            return workflow

    def save(self, workflow: WorkflowDefinition) -> WorkflowDefinition:
        """Insert or replace by id. Usage counters are preserved on replace."""

        with self._lock:
            workflows = self._load_unlocked()
            for idx, existing in enumerate(workflows):
                if existing.id != workflow.id:
                    continue
                merged = workflow.model_copy(
                    update={
                        "times_triggered": existing.times_triggered,
                        "last_triggered_at": existing.last_triggered_at,
                        "created_at": existing.created_at,
                        "updated_at": _utc_now(),
                    }
                )
                workflows[idx] = merged
                self._save_unlocked(workflows)
                return merged
            workflows.append(workflow)
            self._save_unlocked(workflows)
            return workflow

    def delete(self, workflow_id: str, tenant_id: str) -> bool:
        with self._lock:
            workflows = self._load_unlocked()
            kept = [w for w in workflows if not (w.id == workflow_id and w.tenant_id == tenant_id)]
            if len(kept) == len(workflows):
                return False
            self._save_unlocked(kept)
            return True

    def increment_workflow_stats(self, workflow_id: str, now: datetime | None = None) -> None:
        with self._lock:
            workflows = self._load_unlocked()
            for idx, workflow in enumerate(workflows):
                if workflow.id != workflow_id:
                    continue
                workflows[idx] = workflow.model_copy(
                    update={
                        "times_triggered": workflow.times_triggered + 1,
                        "last_triggered_at": now or _utc_now(),
                    }
                )
                self._save_unlocked(workflows)
                return
        logger.warning(
            "Workflow disappeared before its stats could be updated",
            extra={"workflow_id": workflow_id},
        )
