from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal, Protocol

from .conditions import to_number
from .errors import ActionError
from .models import ActionKind, WorkflowStep

logger = logging.getLogger(__name__)

NotificationChannel = Literal["email", "sms"]
TaskPriority = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]

TASK_PRIORITIES: frozenset[str] = frozenset({"LOW", "MEDIUM", "HIGH", "URGENT"})
AUTOMATION_SOURCE = "workflow_automation"


@dataclass(frozen=True, slots=True)
class TaskFields:
    """Task record produced by the `create_task` action."""

    title: str
    description: str
    priority: TaskPriority
    assignee_id: str | None = None
    due_date: datetime | None = None
    is_ai_generated: bool = True
    ai_source: str = AUTOMATION_SOURCE


@dataclass(frozen=True, slots=True)
class JobFields:
    """Analysis job produced by the `run_ai_analysis` action."""

    type: str
    input: dict[str, object]
    entity_type: str | None = None
    entity_id: str | None = None
    status: str = "PENDING"


class NotificationSender(Protocol):
    def send_notification(self, channel: NotificationChannel, config: dict[str, Any]) -> None: ...

    def notify_team(self, tenant_id: str, config: dict[str, Any]) -> None: ...


class TaskStore(Protocol):
    def create_task(self, tenant_id: str, fields: TaskFields) -> str: ...


class EntityStore(Protocol):
    def update_entity_status(self, entity_id: str, new_status: str) -> None: ...


class JobQueue(Protocol):
    def enqueue_analysis_job(self, tenant_id: str, fields: JobFields) -> str: ...


class AssignmentService(Protocol):
    def assign_user(
        self, tenant_id: str, config: dict[str, Any], payload: Mapping[str, Any]
    ) -> None: ...


class DocumentService(Protocol):
    def create_document(
        self, tenant_id: str, config: dict[str, Any], payload: Mapping[str, Any]
    ) -> str: ...


class ReminderScheduler(Protocol):
    def schedule_reminder(
        self, tenant_id: str, config: dict[str, Any], payload: Mapping[str, Any]
    ) -> str: ...


class WebhookClient(Protocol):
    def post(self, url: str, body: dict[str, Any], headers: dict[str, str] | None = None) -> None: ...


@dataclass(slots=True)
class Collaborators:
    """External services the actions delegate to.

    Any of them may be left out; a step whose action needs a missing
    collaborator fails with an ActionError instead of crashing the run.
    """

    notifications: NotificationSender | None = None
    tasks: TaskStore | None = None
    entities: EntityStore | None = None
    jobs: JobQueue | None = None
    assignments: AssignmentService | None = None
    documents: DocumentService | None = None
    reminders: ReminderScheduler | None = None
    webhooks: WebhookClient | None = None


Handler = Callable[[WorkflowStep, Mapping[str, Any], str], None]


class ActionDispatcher:
    """Maps each ActionKind to the collaborator call that performs it."""

    def __init__(self, collaborators: Collaborators) -> None:
        self._collaborators = collaborators
        self._handlers: dict[ActionKind, Handler] = {
            ActionKind.SEND_EMAIL: self._send_email,
            ActionKind.SEND_SMS: self._send_sms,
            ActionKind.CREATE_TASK: self._create_task,
            ActionKind.ASSIGN_USER: self._assign_user,
            ActionKind.UPDATE_STATUS: self._update_status,
            ActionKind.CREATE_DOCUMENT: self._create_document,
            ActionKind.SCHEDULE_REMINDER: self._schedule_reminder,
            ActionKind.NOTIFY_TEAM: self._notify_team,
            ActionKind.RUN_AI_ANALYSIS: self._run_ai_analysis,
            ActionKind.WEBHOOK: self._webhook,
        }
        missing = set(ActionKind) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for actions: {sorted(k.value for k in missing)}")

    def dispatch(self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str) -> None:
        kind = step.action_kind
        if kind is None:
            logger.info(
                "Unknown action; nothing to do",
                extra={"step_id": step.id, "action": step.action, "tenant_id": tenant_id},
            )
            return

        try:
            self._handlers[kind](step, payload, tenant_id)
        except ActionError:
            raise
        except Exception as e:
            raise ActionError(str(e) or type(e).__name__, action=step.action, step_id=step.id) from e

    def _require(self, step: WorkflowStep, name: str) -> Any:
        collaborator = getattr(self._collaborators, name)
        if collaborator is None:
            raise ActionError(
                f"No {name} collaborator configured for action {step.action!r}",
                action=step.action,
                step_id=step.id,
            )
        return collaborator

    def _send_email(self, step: WorkflowStep, _payload: Mapping[str, Any], _tenant_id: str) -> None:
        sender: NotificationSender = self._require(step, "notifications")
        sender.send_notification("email", dict(step.config))

    def _send_sms(self, step: WorkflowStep, _payload: Mapping[str, Any], _tenant_id: str) -> None:
        sender: NotificationSender = self._require(step, "notifications")
        sender.send_notification("sms", dict(step.config))

    def _notify_team(self, step: WorkflowStep, _payload: Mapping[str, Any], tenant_id: str) -> None:
        sender: NotificationSender = self._require(step, "notifications")
        sender.notify_team(tenant_id, dict(step.config))

    def _create_task(self, step: WorkflowStep, _payload: Mapping[str, Any], tenant_id: str) -> None:
        store: TaskStore = self._require(step, "tasks")
        fields = task_fields_from_config(step)
        task_id = store.create_task(tenant_id, fields)
        logger.info(
            "Task created by workflow",
            extra={"step_id": step.id, "tenant_id": tenant_id, "task_id": task_id},
        )

    def _update_status(self, step: WorkflowStep, payload: Mapping[str, Any], _tenant_id: str) -> None:
        entity_field = str(step.config.get("entityField") or "caseId")
        entity_id = payload.get(entity_field)
        if not entity_id:
            logger.info(
                "No entity id in payload; status left unchanged",
                extra={"step_id": step.id, "entity_field": entity_field},
            )
            return

        new_status = step.config.get("newStatus")
        if not new_status:
            raise ActionError(
                "update_status requires config.newStatus", action=step.action, step_id=step.id
            )

        store: EntityStore = self._require(step, "entities")
        store.update_entity_status(str(entity_id), str(new_status))

    def _run_ai_analysis(self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str) -> None:
        queue: JobQueue = self._require(step, "jobs")
        entity_type = step.config.get("entityType")
        entity_id = step.config.get("entityId")
        fields = JobFields(
            type=str(step.config.get("analysisType") or "DOCUMENT_ANALYSIS"),
            input=dict(payload),
            entity_type=str(entity_type) if entity_type is not None else None,
            entity_id=str(entity_id) if entity_id is not None else None,
        )
        job_id = queue.enqueue_analysis_job(tenant_id, fields)
        logger.info(
            "Analysis job queued by workflow",
            extra={"step_id": step.id, "tenant_id": tenant_id, "job_id": job_id},
        )

    def _assign_user(self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str) -> None:
        service: AssignmentService = self._require(step, "assignments")
        service.assign_user(tenant_id, dict(step.config), payload)

    def _create_document(self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str) -> None:
        service: DocumentService = self._require(step, "documents")
        service.create_document(tenant_id, dict(step.config), payload)

    def _schedule_reminder(self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str) -> None:
        scheduler: ReminderScheduler = self._require(step, "reminders")
        scheduler.schedule_reminder(tenant_id, dict(step.config), payload)

    def _webhook(self, step: WorkflowStep, payload: Mapping[str, Any], tenant_id: str) -> None:
        url = step.config.get("url")
        if not isinstance(url, str) or not url.strip():
            raise ActionError("webhook requires config.url", action=step.action, step_id=step.id)

        client: WebhookClient = self._require(step, "webhooks")
        headers_raw = step.config.get("headers")
        headers = (
            {str(k): str(v) for k, v in headers_raw.items()}
            if isinstance(headers_raw, Mapping)
            else None
        )
        client.post(
            url.strip(),
            {
                "tenantId": tenant_id,
                "stepId": step.id,
                "action": step.action,
                "payload": dict(payload),
            },
            headers,
        )


def task_fields_from_config(step: WorkflowStep, *, now: datetime | None = None) -> TaskFields:
    config = step.config

    priority = str(config.get("priority") or "MEDIUM").upper()
    if priority not in TASK_PRIORITIES:
        raise ActionError(
            f"Invalid task priority: {config.get('priority')!r}",
            action=step.action,
            step_id=step.id,
        )

    due_date: datetime | None = None
    due_days_raw = config.get("dueDays")
    if due_days_raw:
        due_days = to_number(due_days_raw)
        if not math.isfinite(due_days):
            raise ActionError(
                f"Invalid dueDays: {due_days_raw!r}", action=step.action, step_id=step.id
            )
        due_date = (now or datetime.now(tz=UTC)) + timedelta(days=due_days)

    assignee = config.get("assigneeId")
    return TaskFields(
        title=str(config.get("title") or "Automated Task"),
        description=str(config.get("description") or ""),
        priority=priority,  # type: ignore[arg-type]
        assignee_id=str(assignee) if assignee else None,
        due_date=due_date,
    )
