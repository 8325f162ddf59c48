from __future__ import annotations

import logging
from typing import Any

import httpx

from sink_agents.config import Settings
from sink_agents.errors import ScraperError
from sink_agents.schemas.config import TweetFilters
from sink_agents.schemas.tweets import ApifyTweet

logger = logging.getLogger(__name__)

_PENDING_STATUSES = {"READY", "RUNNING"}


def build_search_terms(keywords: list[str], filters: TweetFilters | None = None) -> list[str]:
    terms: list[str] = []
    for keyword in keywords:
        term = keyword
        if filters is not None:
            if filters.min_likes:
                term += f" min_faves:{filters.min_likes}"
            if filters.min_retweets:
                term += f" min_retweets:{filters.min_retweets}"
            if filters.min_replies:
                term += f" min_replies:{filters.min_replies}"
            if filters.only_verified:
                term += " filter:verified"
        terms.append(term)
    return terms


class ApifyClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        # Each poll blocks server-side for up to apify_wait_seconds.
        timeout = httpx.Timeout(self.settings.request_timeout_seconds + self.settings.apify_wait_seconds)
        return httpx.AsyncClient(
            base_url=f"{self.settings.apify_base_url}/v2",
            timeout=timeout,
            headers={"Authorization": f"Bearer {self.settings.apify_api_token}"},
            transport=self.transport,
        )

    async def scrape_tweets(
        self,
        keywords: list[str],
        max_items: int,
        filters: TweetFilters | None = None,
    ) -> list[ApifyTweet]:
        search_terms = build_search_terms(keywords, filters)
        logger.info(
            "Starting tweet scraper with %s search terms, max_items=%s: %s",
            len(search_terms),
            max_items,
            search_terms,
        )
        actor_input = {
            "searchTerms": search_terms,
            "maxItems": max_items,
            "sort": "Latest",
            "tweetLanguage": "en",
        }

        async with self._client() as client:
            try:
                run = await self._start_run(client, actor_input)
                run = await self._wait_for_run(client, run)
                items = await self._list_dataset_items(client, str(run["defaultDatasetId"]))
            except httpx.HTTPError as exc:
                raise ScraperError(f"Apify request failed: {exc}") from exc

        return [ApifyTweet.model_validate(item) for item in items if isinstance(item, dict)]

    async def _start_run(self, client: httpx.AsyncClient, actor_input: dict[str, Any]) -> dict[str, Any]:
        actor_id = self.settings.apify_actor.replace("/", "~")
        response = await client.post(
            f"/acts/{actor_id}/runs",
            params={"waitForFinish": self.settings.apify_wait_seconds},
            json=actor_input,
        )
        response.raise_for_status()
        return response.json()["data"]

    async def _wait_for_run(self, client: httpx.AsyncClient, run: dict[str, Any]) -> dict[str, Any]:
        polls = 0
        while run.get("status") in _PENDING_STATUSES:
            if polls >= self.settings.apify_max_polls:
                raise ScraperError(f"Apify run {run.get('id')} did not finish after {polls} polls")
            polls += 1
            response = await client.get(
                f"/actor-runs/{run['id']}",
                params={"waitForFinish": self.settings.apify_wait_seconds},
            )
            response.raise_for_status()
            run = response.json()["data"]

        if run.get("status") != "SUCCEEDED":
            raise ScraperError(f"Apify run {run.get('id')} finished with status {run.get('status')}")
        return run

    async def _list_dataset_items(self, client: httpx.AsyncClient, dataset_id: str) -> list[Any]:
        response = await client.get(f"/datasets/{dataset_id}/items", params={"format": "json", "clean": "true"})
        response.raise_for_status()
        items = response.json()
        logger.info("Fetched %s items from dataset %s", len(items), dataset_id)
        return items
