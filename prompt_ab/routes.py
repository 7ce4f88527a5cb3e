"""
API Routes for the prompt A/B test service.

Hook routes exist only while at least one experiment is active: an idle
plugin registers nothing, so hosts get a 404 instead of a silent no-op.
"""
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from ddtrace import tracer

from prompt_ab.config import config
from prompt_ab.hooks import (
    PromptAbTestPlugin,
    PromptBuildEvent,
    SessionEndEvent,
    parse_event,
)
from prompt_ab.metrics import emit_metric
from prompt_ab.models import (
    HealthResponse,
    PromptBuildContext,
    PromptBuildResponse,
    RenderRequest,
    RenderResponse,
    SessionEndContext,
    SessionEndResponse,
    StartupResponse,
)
from prompt_ab.prompts import apply_overlay, load_prompt_with_vars


def init_routes(plugin: Optional[PromptAbTestPlugin], app_start_time: float) -> APIRouter:
    """Initialize routes with dependencies."""
    router = APIRouter()

    @router.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check. 'idle' is a normal state, not a failure."""
        uptime = int(time.time() - app_start_time)
        emit_metric("gauge", "app.uptime.seconds", uptime)
        emit_metric("increment", "app.health.checks.total")

        return HealthResponse(
            status="healthy" if plugin else "idle",
            service=config.DD_SERVICE,
            version=config.DD_VERSION,
            active_experiments=plugin.experiment_ids if plugin else [],
            uptime_seconds=uptime
        )

    @router.get("/experiments")
    async def list_experiments():
        """Active experiments as configured, camelCase keys."""
        if not plugin:
            return []
        return [
            e.model_dump(by_alias=True, exclude_none=True)
            for e in plugin.experiments
        ]

    @router.post("/prompt/render", response_model=RenderResponse)
    async def render_prompt(req: RenderRequest, request: Request):
        """Render the default prompt (or the supplied one) with the session's overlay applied."""
        base_prompt = req.base_prompt
        if base_prompt is None:
            base_prompt = load_prompt_with_vars(
                "default-system",
                {"assistantName": "Assistant", "serviceName": config.APP_NAME},
            )

        overlay = plugin.before_prompt_build(req) if plugin else None
        return RenderResponse(
            system_prompt=apply_overlay(base_prompt, overlay),
            modified=overlay is not None
        )

    if plugin is None:
        return router

    def _prompt_build(context: PromptBuildContext, request_id: str) -> PromptBuildResponse:
        with tracer.trace("hook.before_prompt_build", service=config.DD_SERVICE) as span:
            span.set_tag("request_id", request_id)
            overlay = plugin.before_prompt_build(context)
            span.set_tag("modified", overlay is not None)

        return PromptBuildResponse(
            modified=overlay is not None,
            overlay=overlay.to_payload() if overlay is not None else None
        )

    def _session_end(context: SessionEndContext, request_id: str) -> SessionEndResponse:
        with tracer.trace("hook.agent_end", service=config.DD_SERVICE) as span:
            span.set_tag("request_id", request_id)
            line = plugin.agent_end(context)
            span.set_tag("reported", line is not None)

        return SessionEndResponse(reported=line is not None)

    @router.post("/hooks/before_prompt_build", response_model=PromptBuildResponse)
    async def before_prompt_build(context: PromptBuildContext, request: Request):
        """Resolve the session's variants and return the composed overlay."""
        request_id = getattr(request.state, 'request_id', str(uuid.uuid4()))
        return _prompt_build(context, request_id)

    @router.post("/hooks/agent_end", response_model=SessionEndResponse)
    async def agent_end(context: SessionEndContext, request: Request):
        """Log the session's resolved assignments."""
        request_id = getattr(request.state, 'request_id', str(uuid.uuid4()))
        return _session_end(context, request_id)

    @router.post("/hooks/events")
    async def hook_event(request: Request, payload: Dict[str, Any] = Body(...)):
        """Single entry point taking any hook event, routed on its kind."""
        request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
        try:
            event = parse_event(payload)
        except ValidationError as e:
            raise RequestValidationError(e.errors())

        if isinstance(event, PromptBuildEvent):
            return _prompt_build(event.context, request_id)
        if isinstance(event, SessionEndEvent):
            return _session_end(event.context, request_id)

        plugin.dispatch(event)
        return StartupResponse(experiments=len(plugin.experiments))

    return router
