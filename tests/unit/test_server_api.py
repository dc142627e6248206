from __future__ import annotations

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from lawflow.ai.completion import AIResponseError
from lawflow.ai.workflows import WorkflowSuggestion
from lawflow.automation import WorkflowAutomation
from lawflow.core.config import LawflowConfig, LLMConfig
from lawflow.server import app as app_module
from lawflow.server.app import create_app
from lawflow.workflow.actions import Collaborators

TENANT_HEADERS = {"X-Tenant-Id": "tenant-a"}

INTAKE = {
    "id": "intake",
    "name": "New client intake",
    "trigger": "new_client",
    "steps": [
        {"id": "welcome", "action": "send_email", "config": {"template": "welcome"}},
        {
            "id": "big-matter",
            "action": "create_task",
            "config": {"title": "Partner review"},
            "conditions": [{"field": "amount", "operator": "greater_than", "value": 10000}],
        },
    ],
}


@pytest.fixture
def automation(lawflow_config: LawflowConfig, collaborators: Collaborators) -> WorkflowAutomation:
    return WorkflowAutomation(lawflow_config, collaborators=collaborators)


@pytest.fixture
def client(automation: WorkflowAutomation) -> TestClient:
    return TestClient(create_app(automation))


def test_health(client: TestClient) -> None:
    body = client.get("/api/v1/health").json()
    assert body["status"] == "ok"
    assert "version" in body


def test_tenant_header_is_required(client: TestClient) -> None:
    resp = client.get("/api/v1/workflows")
    assert resp.status_code == 400
    assert "X-Tenant-Id" in resp.json()["detail"]


def test_create_list_get_delete(client: TestClient) -> None:
    created = client.post("/api/v1/workflows", json=INTAKE, headers=TENANT_HEADERS)
    assert created.status_code == 201
    assert created.json()["tenant_id"] == "tenant-a"

    listed = client.get("/api/v1/workflows", headers=TENANT_HEADERS).json()
    assert [w["id"] for w in listed] == ["intake"]
    assert client.get("/api/v1/workflows", headers={"X-Tenant-Id": "tenant-b"}).json() == []

    assert client.get("/api/v1/workflows/intake", headers=TENANT_HEADERS).status_code == 200
    foreign = client.get("/api/v1/workflows/intake", headers={"X-Tenant-Id": "tenant-b"})
    assert foreign.status_code == 404

    assert client.delete("/api/v1/workflows/intake", headers=TENANT_HEADERS).status_code == 204
    assert client.delete("/api/v1/workflows/intake", headers=TENANT_HEADERS).status_code == 404


def test_create_rejects_duplicates_and_bad_steps(client: TestClient) -> None:
    assert client.post("/api/v1/workflows", json=INTAKE, headers=TENANT_HEADERS).status_code == 201
    dup = client.post("/api/v1/workflows", json=INTAKE, headers=TENANT_HEADERS)
    assert dup.status_code == 409

    bad = {
        "name": "Dup steps",
        "steps": [{"id": "a", "action": "send_sms"}, {"id": "a", "action": "send_sms"}],
    }
    assert client.post("/api/v1/workflows", json=bad, headers=TENANT_HEADERS).status_code == 422


def test_execute_returns_camel_case_result(client: TestClient, collaborators: Collaborators) -> None:
    client.post("/api/v1/workflows", json=INTAKE, headers=TENANT_HEADERS)

    resp = client.post(
        "/api/v1/workflows/intake/execute",
        json={"payload": {"amount": 500}},
        headers=TENANT_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json() == {
        "workflowId": "intake",
        "success": True,
        "executedSteps": [
            {"stepId": "welcome", "action": "send_email", "result": "success", "message": None},
            {
                "stepId": "big-matter",
                "action": "create_task",
                "result": "skipped",
                "message": "Conditions not met",
            },
        ],
        "errors": [],
    }
    collaborators.tasks.create_task.assert_not_called()  # type: ignore[union-attr]


def test_execute_for_other_tenant_is_404(client: TestClient, collaborators: Collaborators) -> None:
    client.post("/api/v1/workflows", json=INTAKE, headers=TENANT_HEADERS)

    resp = client.post(
        "/api/v1/workflows/intake/execute", json={}, headers={"X-Tenant-Id": "tenant-b"}
    )

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Workflow not found or access denied"
    collaborators.notifications.send_notification.assert_not_called()  # type: ignore[union-attr]


def test_event_fans_out_to_subscribed_workflows(client: TestClient) -> None:
    client.post("/api/v1/workflows", json=INTAKE, headers=TENANT_HEADERS)

    resp = client.post(
        "/api/v1/events",
        json={"type": "new_client", "payload": {"amount": 25000}},
        headers=TENANT_HEADERS,
    )

    assert resp.status_code == 200
    [run] = resp.json()
    assert run["workflowId"] == "intake"
    assert [s["result"] for s in run["executedSteps"]] == ["success", "success"]

    other = client.post("/api/v1/events", json={"type": "new_case"}, headers=TENANT_HEADERS)
    assert other.json() == []


def test_event_rejects_unknown_type(client: TestClient) -> None:
    resp = client.post("/api/v1/events", json={"type": "lunch_ordered"}, headers=TENANT_HEADERS)
    assert resp.status_code == 422


def test_suggest_requires_llm_credentials(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/ai/workflows/suggest", json={"trigger": "new_client"}, headers=TENANT_HEADERS
    )
    assert resp.status_code == 409


def test_suggest_uses_provider(
    lawflow_config: LawflowConfig,
    collaborators: Collaborators,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    config = lawflow_config.model_copy(
        update={"llm": LLMConfig(provider="openai", openai_api_key="sk-test")}
    )
    automation = WorkflowAutomation(config, collaborators=collaborators)
    automation._llm = Mock()
    suggest = Mock(return_value=WorkflowSuggestion(name="Intake", steps=[]))
    monkeypatch.setattr(app_module, "suggest_workflow", suggest)
    client = TestClient(create_app(automation))

    resp = client.post(
        "/api/v1/ai/workflows/suggest",
        json={"trigger": "new_client", "practice_areas": ["Family Law"]},
        headers=TENANT_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["name"] == "Intake"
    assert suggest.call_args.kwargs["practice_areas"] == ["Family Law"]

    suggest.side_effect = AIResponseError("Model reply did not contain a JSON object")
    failed = client.post(
        "/api/v1/ai/workflows/suggest", json={"trigger": "new_client"}, headers=TENANT_HEADERS
    )
    assert failed.status_code == 502
