from __future__ import annotations

import logging
from typing import Any

from langgraph.graph import StateGraph

from sink_agents.agents.base import BaseAgent
from sink_agents.graph.stages import FAIL_NODE, chain_stages, stage
from sink_agents.graph.state import FinanceNewsState
from sink_agents.schemas.config import NewsAgentConfig
from sink_agents.schemas.news import RawArticle, parse_articles, serialize_models
from sink_agents.schemas.opensink import ActivityType, SessionStatus
from sink_agents.schemas.results import RunResult
from sink_agents.services.analysis import select_top_articles
from sink_agents.services.reports import format_news_digest
from sink_agents.services.sink_items import article_items

logger = logging.getLogger(__name__)


class FinanceNewsAgent(BaseAgent):
    """Picks the most important financial news of the last day and files it in the news sink."""

    name = "finance-news"

    def parse_config(self, value: dict[str, Any]) -> NewsAgentConfig:
        return NewsAgentConfig.model_validate(value)

    def build_workflow(self) -> Any:
        graph = StateGraph(FinanceNewsState)
        graph.add_node("fetch_news", self.fetch_news)
        graph.add_node("select_articles", self.select_articles)
        graph.add_node("store_articles", self.store_articles)
        graph.add_node("complete", self.complete)
        graph.add_node(FAIL_NODE, self.mark_failed)
        chain_stages(graph, ["fetch_news", "select_articles", "store_articles", "complete"])
        return graph.compile()

    @stage("fetch_news")
    async def fetch_news(self, state: FinanceNewsState) -> FinanceNewsState:
        await self.log(state["session_id"], "Fetching financial news from NewsAPI...")
        articles = await self.deps.news.fetch_financial_news()
        return {"raw_articles": [article.model_dump(mode="json", by_alias=True) for article in articles]}

    @stage("select_articles")
    async def select_articles(self, state: FinanceNewsState) -> FinanceNewsState:
        session_id = state["session_id"]
        raw_articles = [RawArticle.model_validate(item) for item in state.get("raw_articles", [])]
        count = state["config"].items_to_fetch

        await self.log(
            session_id,
            f"Found {len(raw_articles)} articles. Analyzing with AI to select top {count}...",
        )
        selected = await select_top_articles(self.deps.llm, raw_articles, count)
        await self.log(session_id, f"Selected {len(selected)} most important articles")

        articles = serialize_models(selected)
        await self.log(
            session_id,
            "Updated session state with selected articles",
            activity_type=ActivityType.STATE_UPDATED,
        )
        await self.opensink.update_session(session_id, state={"articles": articles})
        return {"articles": articles}

    @stage("store_articles")
    async def store_articles(self, state: FinanceNewsState) -> FinanceNewsState:
        articles = parse_articles(state.get("articles"))
        result = await self.opensink.create_sink_items(article_items(self.settings.news_sink_id, articles))
        await self.log(
            state["session_id"],
            f"Created {len(result.created)} news items in sink",
            activity_type=ActivityType.SINK_ITEM_CREATED,
        )
        return {"sink_result": result.model_dump(mode="json")}

    @stage("complete")
    async def complete(self, state: FinanceNewsState) -> FinanceNewsState:
        await self.opensink.update_session(state["session_id"], status=SessionStatus.COMPLETED)
        return {}

    def build_result(self, final_state: dict[str, Any]) -> RunResult:
        articles = final_state.get("articles", [])
        return RunResult.ok(
            session_id=final_state["session_id"],
            count=len(articles),
            articles=articles,
            digest=format_news_digest(parse_articles(articles)),
            opensink=final_state.get("sink_result", {}),
        )
