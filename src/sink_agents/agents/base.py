from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from sink_agents.config import Settings
from sink_agents.errors import UpstreamError
from sink_agents.schemas.opensink import ActivityType, SessionStatus
from sink_agents.schemas.results import AGENT_DISABLED, RUN_IN_PROGRESS, RunResult
from sink_agents.services.apify_client import ApifyClient
from sink_agents.services.llm_client import LLMClient
from sink_agents.services.newsapi_client import NewsAPIClient
from sink_agents.services.opensink_client import OpenSinkClient

logger = logging.getLogger(__name__)


def describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}" for error in exc.errors()
    )


@dataclass
class AgentDeps:
    settings: Settings
    opensink: OpenSinkClient
    llm: LLMClient
    news: NewsAPIClient | None = None
    scraper: ApifyClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AgentDeps":
        return cls(
            settings=settings,
            opensink=OpenSinkClient(settings),
            llm=LLMClient(settings),
            news=NewsAPIClient(settings),
            scraper=ApifyClient(settings),
        )


class BaseAgent:
    name: str = ""

    def __init__(self, deps: AgentDeps) -> None:
        self.deps = deps
        self.settings = deps.settings
        self.opensink = deps.opensink
        self.agent_id = deps.settings.agent_id_for(self.name)
        self._run_lock = asyncio.Lock()
        self._workflow: Any = None

    # -- hooks ---------------------------------------------------------------

    def parse_config(self, value: dict[str, Any]) -> Any:
        raise NotImplementedError

    def validate_config(self, config: Any) -> str | None:
        return None

    def initial_session_state(self, config: Any) -> dict[str, Any] | None:
        return None

    def build_workflow(self) -> Any:
        raise NotImplementedError

    def build_result(self, final_state: dict[str, Any]) -> RunResult:
        raise NotImplementedError

    async def continue_session(self, session_id: str, request_id: str) -> RunResult:
        logger.warning("%s has no continuation path; starting a fresh run", self.name)
        return await self._fresh_run_guarded()

    # -- run lifecycle -------------------------------------------------------

    @property
    def workflow(self) -> Any:
        if self._workflow is None:
            self._workflow = self.build_workflow()
        return self._workflow

    async def run(self, session_id: str | None = None, request_id: str | None = None) -> RunResult:
        logger.info("Running %s (session=%s request=%s)", self.name, session_id, request_id)
        if session_id and request_id:
            return await self.continue_session(session_id, request_id)
        if session_id or request_id:
            logger.warning(
                "Only one correlation header was sent (session=%s request=%s); starting a fresh run",
                session_id,
                request_id,
            )
        return await self._fresh_run_guarded()

    async def _fresh_run_guarded(self) -> RunResult:
        if self.settings.allow_concurrent_runs:
            return await self.run_fresh()
        if self._run_lock.locked():
            logger.warning("%s run already in progress, rejecting overlapping run", self.name)
            return RunResult.failed(RUN_IN_PROGRESS)
        async with self._run_lock:
            return await self.run_fresh()

    async def run_fresh(self) -> RunResult:
        active = await self.opensink.get_active_config(self.agent_id)
        try:
            config = self.parse_config(active.value)
        except ValidationError as exc:
            reason = f"Invalid agent configuration: {describe_validation_error(exc)}"
            logger.warning("Rejected configuration for %s: %s", self.name, reason)
            return RunResult.failed(reason)
        logger.info("Got config for %s: %s", self.name, config)

        if not config.enabled:
            logger.info("Agent %s is disabled, skipping run", self.name)
            return RunResult.failed(AGENT_DISABLED)

        problem = self.validate_config(config)
        if problem:
            logger.warning("Invalid configuration for %s: %s", self.name, problem)
            return RunResult.failed(problem)

        session = await self.opensink.create_session(
            self.agent_id,
            SessionStatus.RUNNING,
            state=self.initial_session_state(config),
            metadata={"started_at": datetime.now(timezone.utc).isoformat()},
        )
        logger.info("Started session %s for %s", session.id, self.name)

        final_state = await self.workflow.ainvoke({"session_id": session.id, "config": config, "failure": None})
        failure = final_state.get("failure")
        if failure:
            return RunResult.failed(failure["reason"])
        return self.build_result(final_state)

    # -- shared nodes and helpers -------------------------------------------

    async def mark_failed(self, state: dict[str, Any]) -> dict[str, Any]:
        failure = state.get("failure") or {"stage": "unknown", "reason": "unknown error"}
        logger.error("Session %s failed at %s: %s", state.get("session_id"), failure["stage"], failure["reason"])
        try:
            await self.opensink.update_session(
                state["session_id"],
                status=SessionStatus.FAILED,
                error_message=failure["reason"],
            )
        except UpstreamError as exc:
            # The stage failure stays the reported reason.
            logger.error("Could not mark session %s as failed: %s", state.get("session_id"), exc)
        return {}

    async def log(
        self,
        session_id: str,
        message: str,
        activity_type: ActivityType = ActivityType.MESSAGE,
    ) -> None:
        logger.info("[%s] %s", self.name, message)
        await self.opensink.log_activity(session_id, self.agent_id, message, activity_type=activity_type)
