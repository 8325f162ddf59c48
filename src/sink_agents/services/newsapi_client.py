from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

import httpx

from sink_agents.config import Settings
from sink_agents.errors import NewsSourceError
from sink_agents.schemas.news import RawArticle

logger = logging.getLogger(__name__)


def yesterday(now: datetime | None = None) -> date:
    current = now or datetime.now(timezone.utc)
    return (current - timedelta(days=1)).date()


class NewsAPIClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    def build_params(self, now: datetime | None = None) -> dict[str, Any]:
        return {
            "q": self.settings.news_query,
            "from": yesterday(now).isoformat(),
            "sortBy": "publishedAt",
            "pageSize": self.settings.news_page_size,
            "apiKey": self.settings.newsapi_key or "",
        }

    async def fetch_financial_news(self, now: datetime | None = None) -> list[RawArticle]:
        timeout = httpx.Timeout(self.settings.request_timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.settings.newsapi_base_url}/v2/everything",
                    params=self.build_params(now),
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise NewsSourceError(f"News API request failed: {exc}") from exc

        data = response.json()
        articles = [RawArticle.model_validate(item) for item in data.get("articles") or []]
        logger.info("Fetched %s articles from the news API", len(articles))
        return articles
