"""Workflow definitions and run results.

Definitions are pydantic models because they are persisted and accepted over
the API. Run results are frozen dataclasses: created once per execution and
handed back to the caller, who decides whether to keep them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .events import TriggerKind


class ActionKind(str, Enum):
    SEND_EMAIL = "send_email"
    SEND_SMS = "send_sms"
    CREATE_TASK = "create_task"
    ASSIGN_USER = "assign_user"
    UPDATE_STATUS = "update_status"
    CREATE_DOCUMENT = "create_document"
    SCHEDULE_REMINDER = "schedule_reminder"
    NOTIFY_TEAM = "notify_team"
    RUN_AI_ANALYSIS = "run_ai_analysis"
    WEBHOOK = "webhook"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class StepResult(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


_SECONDS_PER_UNIT: dict[str, int] = {
    "minutes": 60,
    "hours": 60 * 60,
    "days": 24 * 60 * 60,
}


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class Condition(BaseModel):
    """A single test over the triggering event payload.

    `operator` stays a plain string so that stored workflows using an operator
    this version does not know still load; the evaluator decides what to do.
    """

    field: str = Field(min_length=1)
    operator: str
    value: Any = None


class Delay(BaseModel):
    amount: float = Field(ge=0)
    unit: Literal["minutes", "hours", "days"]

    def total_seconds(self) -> float:
        return self.amount * _SECONDS_PER_UNIT[self.unit]

    def as_timedelta(self) -> timedelta:
        return timedelta(seconds=self.total_seconds())


class WorkflowStep(BaseModel):
    """One configured action within a workflow.

    `config` is an opaque bag interpreted by the action handler. `action` is
    a plain string for the same reason as `Condition.operator`: unknown kinds
    load and dispatch as logged no-ops.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    action: str
    config: dict[str, Any] = Field(default_factory=dict)
    conditions: list[Condition] = Field(default_factory=list)
    delay: Delay | None = None

    @property
    def action_kind(self) -> ActionKind | None:
        try:
            return ActionKind(self.action)
        except ValueError:
            return None


class WorkflowDefinition(BaseModel):
    """A tenant-owned, ordered list of steps reacting to one trigger."""

    id: str = Field(min_length=1)
    tenant_id: str = Field(min_length=1)
    name: str
    description: str = Field(default="")
    trigger: TriggerKind | None = Field(default=None)
    is_active: bool = Field(default=True)
    steps: list[WorkflowStep] = Field(default_factory=list)

    # Usage counters. Only the store mutates these, atomically.
    times_triggered: int = Field(default=0, ge=0)
    last_triggered_at: datetime | None = Field(default=None)

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    @model_validator(mode="after")
    def _require_unique_step_ids(self) -> WorkflowDefinition:
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                raise ValueError(f"Duplicate step id in workflow: {step.id!r}")
            seen.add(step.id)
        return self


@dataclass(frozen=True, slots=True)
class StepOutcome:
    step_id: str
    action: str
    result: StepResult
    message: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "stepId": self.step_id,
            "action": self.action,
            "result": self.result.value,
        }
        if self.message is not None:
            out["message"] = self.message
        return out


@dataclass(frozen=True, slots=True)
class RunResult:
    """Aggregate outcome of one workflow execution."""

    workflow_id: str
    executed_steps: tuple[StepOutcome, ...]

    @property
    def success(self) -> bool:
        return all(s.result is not StepResult.FAILED for s in self.executed_steps)

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(
            s.message or "Unknown error"
            for s in self.executed_steps
            if s.result is StepResult.FAILED
        )

    def to_json(self) -> dict[str, object]:
        return {
            "workflowId": self.workflow_id,
            "success": self.success,
            "executedSteps": [s.to_json() for s in self.executed_steps],
            "errors": list(self.errors),
        }
