"""Unit tests for workflow execution and event fan-out."""

import json
import threading
from collections.abc import Callable
from unittest.mock import Mock

import pytest

from lawflow.workflow.actions import Collaborators
from lawflow.workflow.errors import NotFoundError
from lawflow.workflow.events import TriggerEvent, TriggerKind
from lawflow.workflow.models import StepResult, WorkflowDefinition
from lawflow.workflow.runner import WorkflowRunner
from lawflow.workflow.store import WorkflowStore

TENANT_A = "tenant-a"
TENANT_B = "tenant-b"

MakeWorkflow = Callable[..., WorkflowDefinition]


def test_single_create_task_step(
    runner: WorkflowRunner, make_workflow: MakeWorkflow, collaborators: Collaborators
) -> None:
    make_workflow({"id": "s1", "action": "create_task"})

    result = runner.execute("wf-1", {}, TENANT_A)

    assert result.success is True
    assert [s.result for s in result.executed_steps] == [StepResult.SUCCESS]
    assert result.errors == ()
    collaborators.tasks.create_task.assert_called_once()  # type: ignore[union-attr]


def test_unmet_condition_skips_and_still_succeeds(
    runner: WorkflowRunner, make_workflow: MakeWorkflow, collaborators: Collaborators
) -> None:
    make_workflow(
        {
            "id": "s1",
            "action": "send_email",
            "conditions": [{"field": "amount", "operator": "greater_than", "value": 1000}],
        }
    )

    result = runner.execute("wf-1", {"amount": 500}, TENANT_A)

    assert result.success is True
    outcome = result.executed_steps[0]
    assert outcome.result is StepResult.SKIPPED
    assert outcome.message == "Conditions not met"
    collaborators.notifications.send_notification.assert_not_called()  # type: ignore[union-attr]


def test_amount_beyond_float_range_still_runs(
    runner: WorkflowRunner,
    make_workflow: MakeWorkflow,
    store: WorkflowStore,
    collaborators: Collaborators,
) -> None:
    make_workflow(
        {
            "id": "big-case",
            "action": "create_task",
            "conditions": [{"field": "amount", "operator": "greater_than", "value": 1000}],
        }
    )
    payload = json.loads('{"amount": 1' + "0" * 400 + "}")

    result = runner.execute("wf-1", payload, TENANT_A)

    assert result.success is True
    assert [s.result for s in result.executed_steps] == [StepResult.SUCCESS]
    collaborators.tasks.create_task.assert_called_once()  # type: ignore[union-attr]
    assert store.get("wf-1").times_triggered == 1  # type: ignore[union-attr]


def test_failed_step_does_not_stop_later_steps(
    runner: WorkflowRunner, make_workflow: MakeWorkflow, collaborators: Collaborators
) -> None:
    collaborators.notifications.send_notification.side_effect = RuntimeError("SMTP down")  # type: ignore[union-attr]
    make_workflow(
        {"id": "email", "action": "send_email"},
        {"id": "task", "action": "create_task"},
    )

    result = runner.execute("wf-1", {}, TENANT_A)

    assert result.success is False
    assert [s.result for s in result.executed_steps] == [StepResult.FAILED, StepResult.SUCCESS]
    assert result.errors == ("SMTP down",)
    collaborators.tasks.create_task.assert_called_once()  # type: ignore[union-attr]


def test_outcomes_keep_declaration_order(
    runner: WorkflowRunner, make_workflow: MakeWorkflow
) -> None:
    make_workflow(
        {
            "id": "skip-me",
            "action": "create_task",
            "conditions": [{"field": "status", "operator": "equals", "value": "closed"}],
        },
        {"id": "fail-me", "action": "webhook"},
        {"id": "do-me", "action": "notify_team"},
    )

    result = runner.execute("wf-1", {"status": "open"}, TENANT_A)

    assert [(s.step_id, s.result) for s in result.executed_steps] == [
        ("skip-me", StepResult.SKIPPED),
        ("fail-me", StepResult.FAILED),
        ("do-me", StepResult.SUCCESS),
    ]
    assert result.to_json()["errors"] == ["webhook requires config.url"]


def test_other_tenant_cannot_execute(
    runner: WorkflowRunner,
    make_workflow: MakeWorkflow,
    store: WorkflowStore,
    collaborators: Collaborators,
) -> None:
    make_workflow({"id": "s1", "action": "create_task"}, tenant_id=TENANT_A)

    with pytest.raises(NotFoundError) as excinfo:
        runner.execute("wf-1", {}, TENANT_B)

    assert str(excinfo.value) == "Workflow not found or access denied"
    collaborators.tasks.create_task.assert_not_called()  # type: ignore[union-attr]
    stored = store.get("wf-1")
    assert stored is not None
    assert stored.times_triggered == 0
    assert stored.last_triggered_at is None


def test_missing_workflow_reads_like_foreign_one(runner: WorkflowRunner) -> None:
    with pytest.raises(NotFoundError, match="Workflow not found or access denied"):
        runner.execute("nope", {}, TENANT_A)


def test_counters_updated_once_per_execution(
    runner: WorkflowRunner, make_workflow: MakeWorkflow, store: WorkflowStore
) -> None:
    make_workflow(
        {"id": "a", "action": "create_task"},
        {"id": "b", "action": "webhook"},
        {"id": "c", "action": "notify_team"},
    )

    runner.execute("wf-1", {}, TENANT_A)

    stored = store.get("wf-1")
    assert stored is not None
    assert stored.times_triggered == 1
    assert stored.last_triggered_at is not None


def test_empty_workflow_still_counts(
    runner: WorkflowRunner, make_workflow: MakeWorkflow, store: WorkflowStore
) -> None:
    make_workflow()

    result = runner.execute("wf-1", {}, TENANT_A)

    assert result.success is True
    assert result.executed_steps == ()
    assert store.get("wf-1").times_triggered == 1  # type: ignore[union-attr]


@pytest.mark.parametrize("callers", [2, 8])
def test_concurrent_executions_increment_exactly(
    runner: WorkflowRunner, make_workflow: MakeWorkflow, store: WorkflowStore, callers: int
) -> None:
    make_workflow({"id": "s1", "action": "create_task"})
    barrier = threading.Barrier(callers)
    failures: list[BaseException] = []

    def _run() -> None:
        barrier.wait()
        try:
            runner.execute("wf-1", {}, TENANT_A)
        except BaseException as e:  # pragma: no cover - surfaced by the assert below
            failures.append(e)

    threads = [threading.Thread(target=_run) for _ in range(callers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert failures == []
    assert store.get("wf-1").times_triggered == callers  # type: ignore[union-attr]


def test_process_event_runs_matching_active_workflows(
    runner: WorkflowRunner, make_workflow: MakeWorkflow, collaborators: Collaborators
) -> None:
    step = {"id": "s1", "action": "create_task"}
    make_workflow(step, workflow_id="intake", trigger=TriggerKind.NEW_CLIENT)
    make_workflow(step, workflow_id="paused", trigger=TriggerKind.NEW_CLIENT, is_active=False)
    make_workflow(step, workflow_id="other-kind", trigger=TriggerKind.CASE_STATUS_CHANGE)
    make_workflow(step, workflow_id="no-trigger")
    make_workflow(step, workflow_id="foreign", tenant_id=TENANT_B, trigger=TriggerKind.NEW_CLIENT)

    results = runner.process_event(
        TriggerEvent(type=TriggerKind.NEW_CLIENT, payload={"leadId": "l-1"}), TENANT_A
    )

    assert [r.workflow_id for r in results] == ["intake"]
    collaborators.tasks.create_task.assert_called_once()  # type: ignore[union-attr]


def test_process_event_without_matches_is_empty(runner: WorkflowRunner) -> None:
    assert runner.process_event(TriggerEvent(type=TriggerKind.NEW_CASE), TENANT_A) == []


def test_process_event_skips_workflow_deleted_mid_flight(make_workflow: MakeWorkflow) -> None:
    workflow = make_workflow(trigger=TriggerKind.CASE_STATUS_CHANGE)
    repository = Mock()
    repository.find_by_trigger.return_value = [workflow]
    repository.load_workflow_definition.return_value = None
    executor = Mock()

    runner = WorkflowRunner(repository, executor)
    results = runner.process_event(TriggerEvent(type=TriggerKind.CASE_STATUS_CHANGE), TENANT_A)

    assert results == []
    repository.increment_workflow_stats.assert_not_called()
