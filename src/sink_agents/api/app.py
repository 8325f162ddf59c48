"""
FastAPI surface of one agent service.

``POST /agent/run`` starts a fresh run, or resumes an approval-gated session
when both correlation headers are present. Run failures are reported in the
body with HTTP 200; only upstream errors raised before a session exists
surface as HTTP 502.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse

from sink_agents.agents.base import AgentDeps
from sink_agents.agents.registry import build_agent
from sink_agents.config import Settings, get_settings
from sink_agents.errors import ConfigurationError, UpstreamError
from sink_agents.schemas.results import RunResult

logger = logging.getLogger(__name__)

SESSION_HEADER = "x-opensink-session-id"
REQUEST_HEADER = "x-opensink-request-id"


def create_app(
    agent_name: str,
    deps: AgentDeps | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or (deps.settings if deps is not None else get_settings())

    missing = settings.missing_required_runtime_fields(agent_name)
    if missing:
        raise ConfigurationError(f"Missing required environment values: {', '.join(missing)}")

    agent = build_agent(agent_name, deps or AgentDeps.from_settings(settings))

    app = FastAPI(
        title=f"{agent_name} agent",
        version="0.1.0",
        description="Agent service that records its runs as OpenSink sessions",
    )
    app.state.agent = agent

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error("Upstream failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content=RunResult.failed(str(exc)).to_payload())

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/agent/run")
    async def run_agent(
        x_opensink_session_id: str | None = Header(default=None),
        x_opensink_request_id: str | None = Header(default=None),
    ) -> dict:
        result = await agent.run(session_id=x_opensink_session_id, request_id=x_opensink_request_id)
        return result.to_payload()

    return app
