from __future__ import annotations

import asyncio
import logging
from typing import Any

from sink_agents.schemas.config import MarketingAgentConfig
from sink_agents.schemas.extraction import (
    COMMENT_OPPORTUNITIES_SCHEMA,
    NEWS_SCHEMA,
    TOOLS_SCHEMA,
    TRADES_SCHEMA,
    TRENDS_SCHEMA,
    TUTORIALS_SCHEMA,
)
from sink_agents.schemas.marketing import AnalysisResult, CommentOpportunity, NewTool, Trend, TutorialIdea
from sink_agents.schemas.news import RawArticle, SelectedArticle, Trade
from sink_agents.schemas.tweets import NormalizedTweet
from sink_agents.services import prompts
from sink_agents.services.llm_client import LLMClient
from sink_agents.services.tweets import format_tweets_for_prompt, rank_by_engagement

logger = logging.getLogger(__name__)

_EMPTY_ITEMS = '{"items":[]}'


async def select_top_articles(llm: LLMClient, articles: list[RawArticle], count: int) -> list[SelectedArticle]:
    result = await llm.complete_json(
        system=prompts.news_selection_prompt(count),
        user=prompts.format_articles_for_prompt(articles),
        schema_name="news_response",
        schema=NEWS_SCHEMA,
        fallback='{"articles":[]}',
    )
    return [SelectedArticle.model_validate(item) for item in result.get("articles", [])]


async def propose_trades(llm: LLMClient, articles: list[SelectedArticle]) -> list[Trade]:
    result = await llm.complete_json(
        system=prompts.TRADE_PROPOSAL_PROMPT,
        user=prompts.trade_proposal_user_prompt(articles),
        schema_name="trades_response",
        schema=TRADES_SCHEMA,
        fallback='{"trades":[]}',
    )
    return [Trade.model_validate(item) for item in result.get("trades", [])]


class TwitterAnalyzer:
    """Runs the four focused analyses over one batch of tweets."""

    def __init__(self, llm: LLMClient, config: MarketingAgentConfig, model: str | None = None) -> None:
        self.llm = llm
        self.config = config
        self.model = model

    async def _items(self, system: str, user: str, schema_name: str, schema: dict[str, Any]) -> list[dict[str, Any]]:
        result = await self.llm.complete_json(
            system=system,
            user=user,
            schema_name=schema_name,
            schema=schema,
            fallback=_EMPTY_ITEMS,
            model=self.model,
        )
        return list(result.get("items", []))

    async def comment_opportunities(self, tweets: list[NormalizedTweet]) -> list[CommentOpportunity]:
        items = await self._items(
            prompts.comment_opportunities_prompt(self.config),
            f"Find the best comment opportunities from these {len(tweets)} tweets:\n\n"
            f"{format_tweets_for_prompt(tweets)}",
            "comment_opportunities",
            COMMENT_OPPORTUNITIES_SCHEMA,
        )
        return [CommentOpportunity.model_validate(item) for item in items]

    async def trends(self, tweets: list[NormalizedTweet]) -> list[Trend]:
        items = await self._items(
            prompts.trends_prompt(self.config),
            f"Identify the key trends from these {len(tweets)} tweets:\n\n{format_tweets_for_prompt(tweets)}",
            "trends",
            TRENDS_SCHEMA,
        )
        return [Trend.model_validate(item) for item in items]

    async def tools(self, tweets: list[NormalizedTweet]) -> list[NewTool]:
        items = await self._items(
            prompts.tools_prompt(self.config),
            f"Find new tools and products mentioned in these {len(tweets)} tweets:\n\n"
            f"{format_tweets_for_prompt(tweets)}",
            "tools",
            TOOLS_SCHEMA,
        )
        return [NewTool.model_validate(item) for item in items]

    async def tutorials(self, tweets: list[NormalizedTweet]) -> list[TutorialIdea]:
        items = await self._items(
            prompts.tutorials_prompt(self.config),
            f"Generate tutorial ideas based on these {len(tweets)} tweets:\n\n{format_tweets_for_prompt(tweets)}",
            "tutorials",
            TUTORIALS_SCHEMA,
        )
        return [TutorialIdea.model_validate(item) for item in items]

    async def analyze(self, tweets: list[NormalizedTweet]) -> AnalysisResult:
        ranked = rank_by_engagement(tweets)
        sinks = self.config.sinks
        logger.info("Running focused analyses in parallel on %s tweets", len(ranked))

        async def skipped() -> list[Any]:
            return []

        tasks = [
            asyncio.ensure_future(analysis)
            for analysis in (
                self.comment_opportunities(ranked) if sinks and sinks.opportunities else skipped(),
                self.trends(ranked) if sinks and sinks.trends else skipped(),
                self.tools(ranked) if sinks and sinks.tools else skipped(),
                self.tutorials(ranked) if sinks and sinks.tutorials else skipped(),
            )
        ]
        # Fail-fast: the first analysis to raise fails the whole batch and stops the rest.
        try:
            opportunities, trends, tools, tutorials = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            raise

        analysis = AnalysisResult(
            comment_opportunities=opportunities,
            trends=trends,
            new_tools=tools,
            tutorial_ideas=tutorials,
            run_summary=(
                f"Analyzed {len(ranked)} tweets. Found {len(opportunities)} comment opportunities, "
                f"{len(trends)} trends, {len(tools)} new tools, and {len(tutorials)} "
                "tutorial ideas."
            ),
        )
        logger.info("Analysis complete: %s", analysis.counts())
        return analysis
