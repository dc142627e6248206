"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lawflow.workflow.events import TriggerKind
from lawflow.workflow.models import RunResult, WorkflowStep


class ApiWorkflowCreate(BaseModel):
    id: str | None = None
    name: str = Field(min_length=1)
    description: str = ""
    trigger: TriggerKind | None = None
    is_active: bool = True
    steps: list[WorkflowStep] = Field(default_factory=list)


class ExecuteRequest(BaseModel):
    payload: dict[str, Any] = Field(default_factory=dict)


class EventRequest(BaseModel):
    type: TriggerKind
    payload: dict[str, Any] = Field(default_factory=dict)


class SuggestWorkflowRequest(BaseModel):
    trigger: TriggerKind
    organization_type: str | None = None
    practice_areas: list[str] = Field(default_factory=list)
    existing_workflows: list[str] = Field(default_factory=list)


class ApiStepOutcome(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    step_id: str
    action: str
    result: str
    message: str | None = None


class ApiRunResult(BaseModel):
    """Run result in the camelCase shape clients already consume."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    workflow_id: str
    success: bool
    executed_steps: list[ApiStepOutcome]
    errors: list[str]

    @classmethod
    def from_result(cls, result: RunResult) -> ApiRunResult:
        return cls(
            workflow_id=result.workflow_id,
            success=result.success,
            executed_steps=[
                ApiStepOutcome(
                    step_id=s.step_id, action=s.action, result=s.result.value, message=s.message
                )
                for s in result.executed_steps
            ],
            errors=list(result.errors),
        )
