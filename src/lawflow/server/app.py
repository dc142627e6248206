"""FastAPI app factory.

Endpoints are thin wrappers over the workflow engine. Every
route is tenant-scoped through the `X-Tenant-Id` header; authentication is
the job of whatever sits in front of this app.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from lawflow import __version__
from lawflow.ai.completion import AIResponseError
from lawflow.ai.workflows import WorkflowSuggestion, suggest_workflow
from lawflow.automation import WorkflowAutomation
from lawflow.server.config import ServerSettings
from lawflow.server.models import (
    ApiRunResult,
    ApiWorkflowCreate,
    EventRequest,
    ExecuteRequest,
    SuggestWorkflowRequest,
)
from lawflow.workflow.errors import NotFoundError
from lawflow.workflow.events import TriggerEvent
from lawflow.workflow.models import WorkflowDefinition
from lawflow.workflow.store import WorkflowAlreadyExists

logger = logging.getLogger(__name__)


def _tenant_id(x_tenant_id: Annotated[str | None, Header()] = None) -> str:
    if x_tenant_id is None or not x_tenant_id.strip():
        raise HTTPException(status_code=400, detail="X-Tenant-Id header is required")
    return x_tenant_id.strip()


TenantId = Annotated[str, Depends(_tenant_id)]


def _automation(request: Request) -> WorkflowAutomation:
    return request.app.state.automation


Automation = Annotated[WorkflowAutomation, Depends(_automation)]


def create_app(automation: WorkflowAutomation | None = None) -> FastAPI:
    settings = ServerSettings()

    app = FastAPI(
        title="lawflow",
        version=__version__,
        description="REST API over the lawflow workflow automation engine.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.automation = automation or WorkflowAutomation()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.get("/api/v1/workflows", response_model=list[WorkflowDefinition])
    def list_workflows(tenant_id: TenantId, engine: Automation) -> list[WorkflowDefinition]:
        return engine.store.list(tenant_id)

    @app.post("/api/v1/workflows", response_model=WorkflowDefinition, status_code=201)
    def create_workflow(
        req: ApiWorkflowCreate, tenant_id: TenantId, engine: Automation
    ) -> WorkflowDefinition:
        try:
            definition = WorkflowDefinition(
                id=req.id or uuid.uuid4().hex,
                tenant_id=tenant_id,
                name=req.name,
                description=req.description,
                trigger=req.trigger,
                is_active=req.is_active,
                steps=req.steps,
            )
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        try:
            return engine.store.create(definition)
        except WorkflowAlreadyExists as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

    @app.get("/api/v1/workflows/{workflow_id}", response_model=WorkflowDefinition)
    def get_workflow(workflow_id: str, tenant_id: TenantId, engine: Automation) -> WorkflowDefinition:
        workflow = engine.store.load_workflow_definition(workflow_id, tenant_id)
        if workflow is None:
            raise HTTPException(status_code=404, detail="Workflow not found")
        return workflow

    @app.delete("/api/v1/workflows/{workflow_id}", status_code=204)
    def delete_workflow(workflow_id: str, tenant_id: TenantId, engine: Automation) -> None:
        if not engine.store.delete(workflow_id, tenant_id):
            raise HTTPException(status_code=404, detail="Workflow not found")

    @app.post("/api/v1/workflows/{workflow_id}/execute", response_model=ApiRunResult)
    def execute_workflow(
        workflow_id: str, req: ExecuteRequest, tenant_id: TenantId, engine: Automation
    ) -> ApiRunResult:
        try:
            result = engine.execute(workflow_id, req.payload, tenant_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        return ApiRunResult.from_result(result)

    @app.post("/api/v1/events", response_model=list[ApiRunResult])
    def trigger_event(req: EventRequest, tenant_id: TenantId, engine: Automation) -> list[ApiRunResult]:
        results = engine.process_event(TriggerEvent(type=req.type, payload=req.payload), tenant_id)
        return [ApiRunResult.from_result(r) for r in results]

    @app.post("/api/v1/ai/workflows/suggest", response_model=WorkflowSuggestion)
    def suggest(req: SuggestWorkflowRequest, tenant_id: TenantId, engine: Automation) -> Any:
        if not engine.config.llm.is_configured:
            raise HTTPException(
                status_code=409,
                detail=f"No API key configured for LLM provider {engine.config.llm.provider!r}",
            )
        existing = req.existing_workflows or [w.name for w in engine.store.list(tenant_id)]
        try:
            return suggest_workflow(
                engine.llm,
                req.trigger,
                organization_type=req.organization_type,
                practice_areas=req.practice_areas,
                existing_workflows=existing,
            )
        except AIResponseError as e:
            logger.warning("Workflow suggestion failed", extra={"tenant_id": tenant_id})
            raise HTTPException(status_code=502, detail=str(e)) from e

    return app
