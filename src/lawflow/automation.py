"""Wiring of the workflow engine from configuration."""

import logging
from collections.abc import Mapping
from typing import Any

from lawflow.collaborators import build_local_collaborators
from lawflow.core.config import LawflowConfig
from lawflow.llm.factory import LLMFactory
from lawflow.llm.provider import LLMProvider
from lawflow.workflow.actions import ActionDispatcher, Collaborators
from lawflow.workflow.events import TriggerEvent
from lawflow.workflow.executor import StepExecutor
from lawflow.workflow.models import RunResult
from lawflow.workflow.runner import WorkflowRunner
from lawflow.workflow.store import WorkflowStore

logger = logging.getLogger(__name__)


class WorkflowAutomation:
    """Entry point tying the store, collaborators and runner together.

    Callers (API routes, CLI commands) react to domain events by calling
    `execute` or `process_event`; everything else is plumbing.
    """

    def __init__(
        self,
        config: LawflowConfig | None = None,
        *,
        collaborators: Collaborators | None = None,
        store: WorkflowStore | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration object. If None, loads from environment.
            collaborators: Overrides the local JSON-file collaborators.
            store: Overrides the JSON-file workflow store.
        """
        self.config = config or LawflowConfig()

        self.store = store or WorkflowStore(self.config.store.workflows_file)
        self.collaborators = collaborators or build_local_collaborators(
            self.config.store.state_path
        )
        executor = StepExecutor(
            ActionDispatcher(self.collaborators),
            action_timeout_seconds=self.config.engine.action_timeout_seconds,
            warn_on_unknown_operator=self.config.engine.warn_on_unknown_operator,
        )
        self.runner = WorkflowRunner(self.store, executor)
        self._llm: LLMProvider | None = None

        logger.info(
            "Workflow automation initialized",
            extra={"workflows_file": str(self.config.store.workflows_file)},
        )

    @property
    def llm(self) -> LLMProvider:
        """LLM provider for the AI helpers, created on first use.

        Raises:
            ValueError: If the configured provider has no API key.
        """
        if self._llm is None:
            self._llm = LLMFactory.create(self.config.llm)
        return self._llm

    def execute(self, workflow_id: str, payload: Mapping[str, Any], tenant_id: str) -> RunResult:
        return self.runner.execute(workflow_id, payload, tenant_id)

    def process_event(self, event: TriggerEvent, tenant_id: str) -> list[RunResult]:
        return self.runner.process_event(event, tenant_id)
