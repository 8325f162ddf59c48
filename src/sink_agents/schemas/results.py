from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

AGENT_DISABLED = "Agent is disabled"
NO_RESPONSE_FOUND = "No response found"
RUN_IN_PROGRESS = "Agent run already in progress"


class RunResult(BaseModel):
    """In-band outcome of one run; failures are reported here, not via HTTP status."""

    model_config = ConfigDict(extra="allow")

    success: bool
    reason: str | None = None

    @classmethod
    def ok(cls, **payload: Any) -> "RunResult":
        return cls(success=True, **payload)

    @classmethod
    def failed(cls, reason: str) -> "RunResult":
        return cls(success=False, reason=reason)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
