"""
Shared fixtures for the agent tests.

The fakes stand in for the four outside services an agent talks to. They
record every call so tests can assert on what was persisted, and they can
be told to fail a specific call to exercise the failure paths.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from sink_agents.agents.base import AgentDeps
from sink_agents.config import Settings
from sink_agents.errors import OpenSinkError
from sink_agents.schemas.config import TweetFilters
from sink_agents.schemas.news import RawArticle
from sink_agents.schemas.opensink import (
    ActiveConfig,
    ActivityType,
    InputRequest,
    Session,
    SessionStatus,
    SinkItem,
    SinkItemsResult,
)
from sink_agents.schemas.tweets import ApifyTweet


class FakeOpenSink:
    def __init__(self) -> None:
        self.config_value: dict[str, Any] = {"enabled": True}
        self.stored_session_state: dict[str, Any] = {}
        self.input_response: dict[str, Any] | None = None
        self.fail_sink_writes = False

        self.created_sessions: list[dict[str, Any]] = []
        self.updates: list[dict[str, Any]] = []
        self.activities: list[tuple[str, ActivityType]] = []
        self.input_requests: list[dict[str, Any]] = []
        self.sink_batches: list[list[SinkItem]] = []

    async def get_active_config(self, agent_id: str) -> ActiveConfig:
        return ActiveConfig(id="config-1", value=self.config_value)

    async def create_session(
        self,
        agent_id: str,
        status: SessionStatus,
        state: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Session:
        self.created_sessions.append({"agent_id": agent_id, "status": status, "state": state, "metadata": metadata})
        return Session(id="session-1", agent_id=agent_id, status=status.value, state=state, metadata=metadata)

    async def update_session(
        self,
        session_id: str,
        status: SessionStatus | None = None,
        state: dict[str, Any] | None = None,
        error_message: str | None = None,
    ) -> None:
        self.updates.append(
            {"session_id": session_id, "status": status, "state": state, "error_message": error_message}
        )

    async def get_session(self, session_id: str) -> Session:
        return Session(id=session_id, status="running", state=self.stored_session_state)

    async def log_activity(
        self,
        session_id: str,
        agent_id: str,
        message: str,
        activity_type: ActivityType = ActivityType.MESSAGE,
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.activities.append((message, activity_type))

    async def create_input_request(self, **kwargs: Any) -> InputRequest:
        self.input_requests.append(kwargs)
        return InputRequest(id="request-1", session_id=kwargs["session_id"], key=kwargs["key"], schema=kwargs["schema"])

    async def get_input_request(self, request_id: str) -> InputRequest:
        return InputRequest(id=request_id, session_id="session-1", key="trade_approval", response=self.input_response)

    async def create_sink_items(self, items: list[SinkItem]) -> SinkItemsResult:
        if self.fail_sink_writes:
            raise OpenSinkError("OpenSink POST /sink-items/bulk returned 500: boom")
        self.sink_batches.append(list(items))
        return SinkItemsResult(created=[{"id": f"item-{index}"} for index, _ in enumerate(items)])

    @property
    def statuses(self) -> list[SessionStatus]:
        return [update["status"] for update in self.updates if update["status"] is not None]

    @property
    def sink_items(self) -> list[SinkItem]:
        return [item for batch in self.sink_batches for item in batch]


class FakeLLM:
    """Answers by schema name; an Exception value is raised instead of returned."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[str] = []

    async def complete_json(
        self,
        system: str,
        user: str,
        schema_name: str,
        schema: dict[str, Any],
        fallback: str,
        model: str | None = None,
    ) -> dict[str, Any]:
        self.calls.append(schema_name)
        value = self.responses.get(schema_name)
        if isinstance(value, Exception):
            raise value
        if value is None:
            return json.loads(fallback)
        return value


class FakeNews:
    def __init__(self) -> None:
        self.articles: list[RawArticle] = []
        self.error: Exception | None = None

    async def fetch_financial_news(self, now: Any = None) -> list[RawArticle]:
        if self.error is not None:
            raise self.error
        return list(self.articles)


class FakeScraper:
    def __init__(self) -> None:
        self.tweets: list[ApifyTweet] = []
        self.calls: list[tuple[list[str], int, TweetFilters | None]] = []

    async def scrape_tweets(
        self,
        keywords: list[str],
        max_items: int,
        filters: TweetFilters | None = None,
    ) -> list[ApifyTweet]:
        self.calls.append((keywords, max_items, filters))
        return list(self.tweets)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        opensink_api_key="test-opensink-key",
        openai_api_key="test-openai-key",
        newsapi_key="test-news-key",
        apify_api_token="test-apify-token",
    )


@pytest.fixture
def opensink() -> FakeOpenSink:
    return FakeOpenSink()


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def news() -> FakeNews:
    return FakeNews()


@pytest.fixture
def scraper() -> FakeScraper:
    return FakeScraper()


@pytest.fixture
def deps(
    settings: Settings,
    opensink: FakeOpenSink,
    llm: FakeLLM,
    news: FakeNews,
    scraper: FakeScraper,
) -> AgentDeps:
    return AgentDeps(settings=settings, opensink=opensink, llm=llm, news=news, scraper=scraper)


@pytest.fixture
def raw_articles() -> list[RawArticle]:
    return [
        RawArticle.model_validate(
            {
                "title": f"Markets move on story {index}",
                "description": f"Description {index}",
                "url": f"https://news.example.com/{index}",
                "publishedAt": "2026-10-16T10:00:00Z",
            }
        )
        for index in range(3)
    ]


@pytest.fixture
def selected_articles() -> list[dict[str, Any]]:
    return [
        {
            "title": "Fed holds rates steady",
            "url": "https://news.example.com/fed",
            "summary": "The central bank kept rates unchanged.",
            "category": "policy",
        },
        {
            "title": "Chipmaker beats earnings",
            "url": "https://news.example.com/chips",
            "summary": "Revenue grew on data center demand.",
            "category": "earnings",
        },
    ]
