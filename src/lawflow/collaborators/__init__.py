"""Local-first implementations of the collaborators used by workflow actions."""

from __future__ import annotations

from pathlib import Path

from lawflow.collaborators.notifications import LoggingNotificationSender
from lawflow.collaborators.records import (
    JsonRecordStore,
    LocalAssignmentService,
    LocalDocumentService,
    LocalEntityStore,
    LocalJobQueue,
    LocalReminderScheduler,
    LocalTaskStore,
)
from lawflow.collaborators.webhook import RequestsWebhookClient
from lawflow.workflow.actions import Collaborators

__all__ = [
    "JsonRecordStore",
    "LocalAssignmentService",
    "LocalDocumentService",
    "LocalEntityStore",
    "LocalJobQueue",
    "LocalReminderScheduler",
    "LocalTaskStore",
    "LoggingNotificationSender",
    "RequestsWebhookClient",
    "build_local_collaborators",
]


def build_local_collaborators(state_path: Path) -> Collaborators:
    """Wire every collaborator to a JSON collection under `state_path`."""

    return Collaborators(
        notifications=LoggingNotificationSender(),
        tasks=LocalTaskStore(JsonRecordStore(state_path / "tasks.json")),
        entities=LocalEntityStore(JsonRecordStore(state_path / "case_statuses.json")),
        jobs=LocalJobQueue(JsonRecordStore(state_path / "ai_jobs.json")),
        assignments=LocalAssignmentService(JsonRecordStore(state_path / "assignments.json")),
        documents=LocalDocumentService(JsonRecordStore(state_path / "documents.json")),
        reminders=LocalReminderScheduler(JsonRecordStore(state_path / "reminders.json")),
        webhooks=RequestsWebhookClient(),
    )
