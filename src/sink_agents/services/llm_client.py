from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from sink_agents.config import Settings
from sink_agents.errors import LanguageModelError

logger = logging.getLogger(__name__)


class LLMClient:
    """Chat completions constrained by a strict JSON schema response format."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    def build_payload(
        self,
        system: str,
        user: str,
        schema_name: str,
        schema: dict[str, Any],
        model: str | None = None,
    ) -> dict[str, Any]:
        return {
            "model": model or self.settings.openai_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "strict": True, "schema": schema},
            },
        }

    async def complete_json(
        self,
        system: str,
        user: str,
        schema_name: str,
        schema: dict[str, Any],
        fallback: str,
        model: str | None = None,
    ) -> dict[str, Any]:
        payload = self.build_payload(system, user, schema_name, schema, model=model)
        headers = {
            "Authorization": f"Bearer {self.settings.openai_api_key}",
            "Content-Type": "application/json",
        }

        timeout = httpx.Timeout(self.settings.request_timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.settings.openai_base_url}/chat/completions",
                    headers=headers,
                    json=payload,
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise LanguageModelError(f"Completion request for {schema_name} failed: {exc}") from exc

        message = response.json()["choices"][0]["message"]
        if message.get("refusal"):
            raise LanguageModelError(f"Model declined {schema_name}: {message['refusal']}")

        content = message.get("content") or fallback
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            raise LanguageModelError(f"Model returned invalid JSON for {schema_name}: {exc}") from exc

        logger.debug("Completion %s returned keys %s", schema_name, list(result))
        return result
