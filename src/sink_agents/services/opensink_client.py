from __future__ import annotations

import logging
from typing import Any

import httpx

from sink_agents.config import Settings
from sink_agents.errors import OpenSinkError
from sink_agents.schemas.opensink import (
    ActiveConfig,
    ActivitySource,
    ActivityType,
    InputRequest,
    Session,
    SessionStatus,
    SinkItem,
    SinkItemsResult,
    serialize_sink_items,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:300]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


def _unwrap(body: Any) -> Any:
    # Responses may arrive enveloped as {"data": ...}.
    if isinstance(body, dict) and "data" in body and set(body) <= {"data", "meta"}:
        return body["data"]
    return body


class OpenSinkClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.opensink_url,
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
            headers={
                "Authorization": f"Bearer {self.settings.opensink_api_key}",
                "Content-Type": "application/json",
            },
            transport=self.transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | list[dict[str, Any]] | None = None,
    ) -> Any:
        url = f"{API_PREFIX}{path}"
        async with self._client() as client:
            try:
                response = await client.request(method, url, json=payload)
            except httpx.HTTPError as exc:
                raise OpenSinkError(f"OpenSink {method} {path} failed: {exc}") from exc

        if response.is_error:
            raise OpenSinkError(
                f"OpenSink {method} {path} returned {response.status_code}: {_error_detail(response)}"
            )
        if not response.content:
            return {}
        return _unwrap(response.json())

    async def get_active_config(self, agent_id: str) -> ActiveConfig:
        body = await self._request("GET", f"/agents/{agent_id}/configurations/active")
        return ActiveConfig.model_validate(body)

    async def create_session(
        self,
        agent_id: str,
        status: SessionStatus,
        state: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Session:
        payload: dict[str, Any] = {"agent_id": agent_id, "status": status.value}
        if state is not None:
            payload["state"] = state
        if metadata is not None:
            payload["metadata"] = metadata
        body = await self._request("POST", "/agent-sessions", payload)
        return Session.model_validate(body)

    async def update_session(
        self,
        session_id: str,
        status: SessionStatus | None = None,
        state: dict[str, Any] | None = None,
        error_message: str | None = None,
    ) -> None:
        payload: dict[str, Any] = {}
        if status is not None:
            payload["status"] = status.value
        if state is not None:
            payload["state"] = state
        if error_message is not None:
            payload["error_message"] = error_message
        await self._request("PATCH", f"/agent-sessions/{session_id}", payload)

    async def get_session(self, session_id: str) -> Session:
        body = await self._request("GET", f"/agent-sessions/{session_id}")
        return Session.model_validate(body)

    async def create_activity(
        self,
        session_id: str,
        agent_id: str,
        activity_type: ActivityType,
        source: ActivitySource,
        message: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        body: dict[str, Any] = {
            "session_id": session_id,
            "agent_id": agent_id,
            "type": activity_type.value,
            "source": source.value,
        }
        if message is not None:
            body["message"] = message
        if payload is not None:
            body["payload"] = payload
        await self._request("POST", "/agent-session-activities", body)

    async def log_activity(
        self,
        session_id: str,
        agent_id: str,
        message: str,
        activity_type: ActivityType = ActivityType.MESSAGE,
        payload: dict[str, Any] | None = None,
    ) -> None:
        try:
            await self.create_activity(
                session_id,
                agent_id,
                activity_type,
                ActivitySource.AGENT,
                message=message,
                payload=payload,
            )
        except Exception as exc:
            logger.warning("Failed to log activity for session %s: %s", session_id, exc)

    async def create_input_request(
        self,
        session_id: str,
        agent_id: str,
        key: str,
        title: str,
        message: str,
        schema: dict[str, Any],
    ) -> InputRequest:
        body = await self._request(
            "POST",
            "/agent-session-input-requests",
            {
                "session_id": session_id,
                "agent_id": agent_id,
                "key": key,
                "title": title,
                "message": message,
                "schema": schema,
            },
        )
        return InputRequest.model_validate(body)

    async def get_input_request(self, request_id: str) -> InputRequest:
        body = await self._request("GET", f"/agent-session-input-requests/{request_id}")
        return InputRequest.model_validate(body)

    async def create_sink_items(self, items: list[SinkItem]) -> SinkItemsResult:
        body = await self._request("POST", "/sink-items/bulk", {"items": serialize_sink_items(items)})
        return SinkItemsResult.model_validate(body)
