"""Workflow automation engine.

This package provides:
- Trigger events (domain signals with a payload)
- Conditions evaluated against the event payload
- An action dispatcher delegating to external collaborators
- A step executor and a workflow runner producing per-step results

Execution is best-effort and strictly sequential within a workflow.
"""

from lawflow.workflow.actions import ActionDispatcher, Collaborators, JobFields, TaskFields
from lawflow.workflow.conditions import conditions_met, evaluate
from lawflow.workflow.errors import ActionError, NotFoundError, WorkflowError
from lawflow.workflow.events import TriggerEvent, TriggerKind
from lawflow.workflow.executor import StepExecutor
from lawflow.workflow.models import (
    ActionKind,
    Condition,
    ConditionOperator,
    Delay,
    RunResult,
    StepOutcome,
    StepResult,
    WorkflowDefinition,
    WorkflowStep,
)
from lawflow.workflow.runner import WorkflowRunner
from lawflow.workflow.store import WorkflowAlreadyExists, WorkflowStore

__all__ = [
    "ActionDispatcher",
    "ActionError",
    "ActionKind",
    "Collaborators",
    "Condition",
    "ConditionOperator",
    "Delay",
    "JobFields",
    "NotFoundError",
    "RunResult",
    "StepExecutor",
    "StepOutcome",
    "StepResult",
    "TaskFields",
    "TriggerEvent",
    "TriggerKind",
    "WorkflowAlreadyExists",
    "WorkflowDefinition",
    "WorkflowError",
    "WorkflowRunner",
    "WorkflowStep",
    "WorkflowStore",
    "conditions_met",
    "evaluate",
]
