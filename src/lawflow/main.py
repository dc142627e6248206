"""CLI entrypoint for lawflow.

Exit codes:
  0  success
  1  unexpected failure
  2  configuration or input error
  3  workflow not found for the tenant
  4  workflow ran but at least one step failed
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lawflow import __version__
from lawflow.automation import WorkflowAutomation
from lawflow.core.config import LawflowConfig
from lawflow.workflow.errors import NotFoundError
from lawflow.workflow.events import TriggerEvent, TriggerKind
from lawflow.workflow.models import RunResult, WorkflowDefinition
from lawflow.workflow.store import WorkflowAlreadyExists

logger = logging.getLogger(__name__)


def _load_payload(raw: str | None, path: Path | None) -> dict[str, Any]:
    if path is not None:
        raw = path.read_text(encoding="utf-8")
    if raw is None or not raw.strip():
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Payload must be a JSON object")
    return data


def _print_result(result: RunResult) -> None:
    print(json.dumps(result.to_json(), indent=2, ensure_ascii=False))


def _add_payload_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--payload", default=None, help="Event payload as a JSON object")
    parser.add_argument(
        "--payload-file",
        type=Path,
        default=None,
        help="Read the event payload from a JSON file (overrides --payload)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lawflow",
        description="Rule-based workflow automation for legal practices",
    )
    parser.add_argument("--version", action="version", version=f"lawflow {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_workflow = subparsers.add_parser(
        "import-workflow", help="Store a workflow definition from a JSON file"
    )
    import_workflow.add_argument("--file", type=Path, required=True, help="Workflow JSON file")
    import_workflow.add_argument(
        "--tenant",
        default=None,
        help="Owning tenant (overrides tenant_id in the file)",
    )
    import_workflow.add_argument(
        "--replace",
        action="store_true",
        help="Replace an existing workflow with the same id (usage counters are kept)",
    )

    list_workflows = subparsers.add_parser("list-workflows", help="List a tenant's workflows")
    list_workflows.add_argument("--tenant", required=True, help="Tenant id")

    run_workflow = subparsers.add_parser("run-workflow", help="Execute one workflow")
    run_workflow.add_argument("--workflow-id", required=True, help="Workflow id")
    run_workflow.add_argument("--tenant", required=True, help="Tenant id")
    _add_payload_args(run_workflow)

    trigger_event = subparsers.add_parser(
        "trigger-event", help="Run every active workflow subscribed to an event"
    )
    trigger_event.add_argument(
        "--type",
        required=True,
        choices=[k.value for k in TriggerKind],
        help="Event kind",
    )
    trigger_event.add_argument("--tenant", required=True, help="Tenant id")
    _add_payload_args(trigger_event)

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default=None, help="Bind address (default from settings)")
    serve.add_argument("--port", type=int, default=None, help="Port (default from settings)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = LawflowConfig()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    config.setup_logging()

    try:
        if args.command == "serve":
            import uvicorn

            from lawflow.server.app import create_app
            from lawflow.server.config import ServerSettings

            settings = ServerSettings()
            uvicorn.run(
                create_app(WorkflowAutomation(config)),
                host=args.host or settings.host,
                port=args.port or settings.port,
                log_level=config.log_level.lower(),
            )
            return 0

        automation = WorkflowAutomation(config)

        if args.command == "import-workflow":
            raw = json.loads(args.file.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("Workflow file must contain a JSON object")
            if args.tenant:
                raw["tenant_id"] = args.tenant
            definition = WorkflowDefinition.model_validate(raw)
            if args.replace:
                stored = automation.store.save(definition)
            else:
                stored = automation.store.create(definition)
            logger.info(
                "Workflow stored",
                extra={"workflow_id": stored.id, "tenant_id": stored.tenant_id},
            )
            print(f"Stored workflow {stored.id}: {stored.name} ({len(stored.steps)} steps)")
            return 0

        if args.command == "list-workflows":
            for workflow in automation.store.list(args.tenant):
                trigger = workflow.trigger.value if workflow.trigger else "-"
                state = "active" if workflow.is_active else "inactive"
                print(
                    f"{workflow.id}\t{workflow.name}\ttrigger={trigger}\t{state}\t"
                    f"triggered={workflow.times_triggered}"
                )
            return 0

        if args.command == "run-workflow":
            payload = _load_payload(args.payload, args.payload_file)
            result = automation.execute(args.workflow_id, payload, args.tenant)
            _print_result(result)
            return 0 if result.success else 4

        if args.command == "trigger-event":
            payload = _load_payload(args.payload, args.payload_file)
            event = TriggerEvent(type=TriggerKind(args.type), payload=payload)
            results = automation.process_event(event, args.tenant)
            print(json.dumps([r.to_json() for r in results], indent=2, ensure_ascii=False))
            return 0 if all(r.success for r in results) else 4

        parser.error(f"Unknown command: {args.command}")
        return 2

    except NotFoundError as e:
        print(str(e), file=sys.stderr)
        return 3

    except WorkflowAlreadyExists as e:
        print(f"{e} (use --replace to overwrite)", file=sys.stderr)
        return 2

    except (ValidationError, ValueError) as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1
