"""Test configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from lawflow.core.config import EngineConfig, LawflowConfig, LLMConfig, StoreConfig
from lawflow.workflow.actions import (
    ActionDispatcher,
    AssignmentService,
    Collaborators,
    DocumentService,
    EntityStore,
    JobQueue,
    NotificationSender,
    ReminderScheduler,
    TaskStore,
    WebhookClient,
)
from lawflow.workflow.executor import StepExecutor
from lawflow.workflow.models import WorkflowDefinition, WorkflowStep
from lawflow.workflow.runner import WorkflowRunner
from lawflow.workflow.store import WorkflowStore

TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Provide a temporary state directory."""
    state_dir = tmp_path / "lawflow_state"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def store(temp_state_dir: Path) -> WorkflowStore:
    return WorkflowStore(temp_state_dir / "workflows.json")


@pytest.fixture
def collaborators() -> Collaborators:
    """Collaborators that record calls instead of doing work."""
    tasks = Mock(spec=TaskStore)
    tasks.create_task.return_value = "task-1"
    jobs = Mock(spec=JobQueue)
    jobs.enqueue_analysis_job.return_value = "job-1"
    documents = Mock(spec=DocumentService)
    documents.create_document.return_value = "doc-1"
    reminders = Mock(spec=ReminderScheduler)
    reminders.schedule_reminder.return_value = "reminder-1"
    return Collaborators(
        notifications=Mock(spec=NotificationSender),
        tasks=tasks,
        entities=Mock(spec=EntityStore),
        jobs=jobs,
        assignments=Mock(spec=AssignmentService),
        documents=documents,
        reminders=reminders,
        webhooks=Mock(spec=WebhookClient),
    )


@pytest.fixture
def dispatcher(collaborators: Collaborators) -> ActionDispatcher:
    return ActionDispatcher(collaborators)


@pytest.fixture
def runner(store: WorkflowStore, dispatcher: ActionDispatcher) -> WorkflowRunner:
    return WorkflowRunner(store, StepExecutor(dispatcher, action_timeout_seconds=2.0))


@pytest.fixture
def make_workflow(store: WorkflowStore) -> Callable[..., WorkflowDefinition]:
    """Persist a workflow built from step dicts and return it."""

    def _make(
        *steps: dict[str, Any],
        workflow_id: str = "wf-1",
        tenant_id: str = TENANT_A,
        **fields: Any,
    ) -> WorkflowDefinition:
        definition = WorkflowDefinition(
            id=workflow_id,
            tenant_id=tenant_id,
            name=fields.pop("name", f"Workflow {workflow_id}"),
            steps=[WorkflowStep.model_validate(s) for s in steps],
            **fields,
        )
        return store.create(definition)

    return _make


@pytest.fixture
def lawflow_config(temp_state_dir: Path) -> LawflowConfig:
    """Provide a test configuration with no LLM credentials."""
    return LawflowConfig(
        log_level="DEBUG",
        llm=LLMConfig(provider="openai", openai_api_key=None, anthropic_api_key=None),
        engine=EngineConfig(action_timeout_seconds=2.0),
        store=StoreConfig(state_path=temp_state_dir),
    )
