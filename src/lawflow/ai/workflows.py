"""AI-assisted workflow design.

Prompt builders only: each helper frames a request, asks the provider for a
JSON object and validates it into a typed result. Nothing here runs a
workflow.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lawflow.ai.completion import AIResponseError, generate_json_completion
from lawflow.llm.provider import LLMProvider
from lawflow.workflow.errors import NotFoundError
from lawflow.workflow.events import TriggerKind
from lawflow.workflow.models import WorkflowDefinition, WorkflowStep
from lawflow.workflow.store import WorkflowStore

logger = logging.getLogger(__name__)

ClientType = Literal["lead", "active", "past"]


class WorkflowSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    steps: list[WorkflowStep] = Field(default_factory=list)
    estimated_time_saved: str = Field(default="", validation_alias="estimatedTimesSaved")
    best_practices: list[str] = Field(default_factory=list, validation_alias="bestPractices")

    @field_validator("steps", mode="before")
    @classmethod
    def _number_unnamed_steps(cls, value: Any) -> Any:
        # Models often omit step ids; give them stable positional ones.
        if not isinstance(value, list):
            return value
        numbered: list[Any] = []
        for idx, step in enumerate(value, start=1):
            if isinstance(step, dict) and not step.get("id"):
                step = {**step, "id": f"step-{idx}"}
            numbered.append(step)
        return numbered

    def to_definition(
        self, *, workflow_id: str, tenant_id: str, trigger: TriggerKind
    ) -> WorkflowDefinition:
        """Accept the suggestion as a tenant workflow."""

        return WorkflowDefinition(
            id=workflow_id,
            tenant_id=tenant_id,
            name=self.name,
            description=self.description,
            trigger=trigger,
            steps=list(self.steps),
        )


class EfficiencyReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    efficiency: float = 0.0
    bottlenecks: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    average_execution_time: float = Field(default=0.0, validation_alias="averageExecutionTime")
    success_rate: float = Field(default=0.0, validation_alias="successRate")


class NurturingEmail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: int
    subject: str
    body_template: str = Field(validation_alias="bodyTemplate")
    purpose: str = ""


class NurturingSms(BaseModel):
    day: int
    message: str


class NurturingSequence(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    emails: list[NurturingEmail] = Field(default_factory=list)
    sms_messages: list[NurturingSms] | None = Field(default=None, validation_alias="smsMessages")


M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], data: dict[str, Any]) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise AIResponseError(f"Model reply did not match {model.__name__}: {e}") from e


def suggest_workflow(
    provider: LLMProvider,
    trigger: TriggerKind,
    *,
    organization_type: str | None = None,
    practice_areas: list[str] | None = None,
    existing_workflows: list[str] | None = None,
) -> WorkflowSuggestion:
    lines = [
        "Suggest an automated workflow for a law firm:",
        "",
        f"Trigger: {trigger.value}",
    ]
    if organization_type:
        lines.append(f"Firm Type: {organization_type}")
    if practice_areas:
        lines.append(f"Practice Areas: {', '.join(practice_areas)}")
    if existing_workflows:
        lines.append(f"Existing Workflows: {', '.join(existing_workflows)}")
    lines += [
        "",
        "Design an efficient workflow with appropriate steps, delays, and conditions.",
        'Return keys: name, description, steps, estimatedTimesSaved, bestPractices. Each step has '
        '"id", "action" (one of send_email, send_sms, create_task, assign_user, update_status, '
        "create_document, schedule_reminder, notify_team, run_ai_analysis, webhook), "
        '"config", optional "conditions" ({field, operator, value} with operator one of equals, '
        'not_equals, contains, greater_than, less_than) and optional "delay" ({amount, unit} with '
        "unit one of minutes, hours, days).",
    ]

    data = generate_json_completion(
        provider,
        "\n".join(lines),
        "You are a legal operations expert. Design efficient workflows for law firm automation.",
    )
    suggestion = _validate(WorkflowSuggestion, data)
    logger.info(
        "Workflow suggested",
        extra={"trigger": trigger.value, "steps": len(suggestion.steps)},
    )
    return suggestion


def analyze_workflow_efficiency(
    provider: LLMProvider, store: WorkflowStore, workflow_id: str, tenant_id: str
) -> EfficiencyReport:
    workflow = store.load_workflow_definition(workflow_id, tenant_id)
    if workflow is None:
        raise NotFoundError(workflow_id, tenant_id)

    steps_json = json.dumps(
        [s.model_dump(mode="json", exclude_none=True) for s in workflow.steps], ensure_ascii=False
    )
    prompt = "\n".join(
        [
            "Analyze this workflow for efficiency:",
            "",
            f"Workflow Name: {workflow.name}",
            f"Times Triggered: {workflow.times_triggered}",
            f"Steps: {steps_json}",
            "",
            "Identify bottlenecks and suggest improvements.",
            "Return keys: efficiency, bottlenecks, suggestions, averageExecutionTime, successRate.",
        ]
    )
    data = generate_json_completion(
        provider,
        prompt,
        "You are a process optimization expert. Analyze workflow efficiency and suggest improvements.",
        temperature=0.3,
    )
    return _validate(EfficiencyReport, data)


_NURTURING_FOCUS: dict[str, str] = {
    "lead": "focus on conversion",
    "active": "focus on satisfaction and referrals",
    "past": "focus on re-engagement",
}


def generate_nurturing_sequence(
    provider: LLMProvider, client_type: ClientType, practice_area: str
) -> NurturingSequence:
    prompt = "\n".join(
        [
            "Create a client nurturing email sequence:",
            "",
            f"Client Type: {client_type}",
            f"Practice Area: {practice_area}",
            "",
            "Design a sequence of emails (and optional SMS) to nurture the relationship.",
            f"For this client type: {_NURTURING_FOCUS[client_type]}.",
            "Return keys: name, emails ({day, subject, bodyTemplate, purpose}), "
            "smsMessages ({day, message}).",
        ]
    )
    data = generate_json_completion(
        provider,
        prompt,
        "You are a legal marketing expert. Create effective client nurturing sequences.",
    )
    return _validate(NurturingSequence, data)
