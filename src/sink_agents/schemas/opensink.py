from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ActivityType(str, Enum):
    MESSAGE = "message"
    STATE_UPDATED = "state_updated"
    SINK_ITEM_CREATED = "sink_item_created"


class ActivitySource(str, Enum):
    AGENT = "agent"


class ActiveConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    value: dict[str, Any] = Field(default_factory=dict)


class Session(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    agent_id: str | None = None
    status: str | None = None
    state: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None

    @property
    def state_or_empty(self) -> dict[str, Any]:
        return dict(self.state or {})


class InputRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    session_id: str | None = None
    key: str | None = None
    json_schema: dict[str, Any] = Field(default_factory=dict, alias="schema")
    response: dict[str, Any] | None = None


class SinkItemResource(BaseModel):
    type: Literal["link"] = "link"
    label: str
    url: str


class SinkItem(BaseModel):
    sink_id: str
    title: str
    body: str
    url: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    resources: list[SinkItemResource] | None = None


class SinkItemsResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    created: list[dict[str, Any]] = Field(default_factory=list)


def serialize_sink_items(items: list[SinkItem]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", exclude_none=True) for item in items]
