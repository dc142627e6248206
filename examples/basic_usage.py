#!/usr/bin/env python3
"""Programmatic workflow example.

This demonstrates using the engine components directly:

* load settings from `.env`
* store a tenant workflow reacting to `new_client`
* feed a trigger event through it and print the per-step results

Everything is persisted under the configured state directory
(`lawflow_state/` by default).
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from lawflow.automation import WorkflowAutomation
from lawflow.core.config import LawflowConfig
from lawflow.workflow import (
    TriggerEvent,
    TriggerKind,
    WorkflowAlreadyExists,
    WorkflowDefinition,
)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a sample intake workflow.")
    parser.add_argument("--tenant", default="demo-firm", help="Tenant id owning the workflow")
    parser.add_argument("--amount", type=float, default=25000, help="Matter value in the event")
    return parser.parse_args(argv)


def _intake_workflow(tenant_id: str) -> WorkflowDefinition:
    return WorkflowDefinition.model_validate(
        {
            "id": "demo-intake",
            "tenant_id": tenant_id,
            "name": "New client intake",
            "trigger": "new_client",
            "steps": [
                {"id": "welcome", "action": "send_email", "config": {"template": "welcome"}},
                {
                    "id": "partner-review",
                    "action": "create_task",
                    "config": {"title": "Partner review", "priority": "HIGH", "dueDays": 2},
                    "conditions": [
                        {"field": "amount", "operator": "greater_than", "value": 10000}
                    ],
                },
                {
                    "id": "follow-up",
                    "action": "schedule_reminder",
                    "config": {"message": "Check engagement letter was signed"},
                    "delay": {"amount": 3, "unit": "days"},
                },
            ],
        }
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = LawflowConfig()
    config.setup_logging()

    automation = WorkflowAutomation(config)
    try:
        automation.store.create(_intake_workflow(args.tenant))
    except WorkflowAlreadyExists:
        pass

    event = TriggerEvent(
        type=TriggerKind.NEW_CLIENT,
        payload={"clientId": "client-42", "amount": args.amount},
    )
    for result in automation.process_event(event, args.tenant):
        print(json.dumps(result.to_json(), indent=2))

    print(f"State directory: {config.store.state_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
