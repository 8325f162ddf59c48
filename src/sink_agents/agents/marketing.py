from __future__ import annotations

import logging
from typing import Any

from langgraph.graph import END, StateGraph

from sink_agents.agents.base import BaseAgent
from sink_agents.graph.stages import FAIL_NODE, next_or_fail, stage
from sink_agents.graph.state import MarketingState
from sink_agents.schemas.config import MarketingAgentConfig
from sink_agents.schemas.marketing import AnalysisResult
from sink_agents.schemas.news import serialize_models
from sink_agents.schemas.opensink import ActivityType, SessionStatus, SinkItem
from sink_agents.schemas.results import RunResult
from sink_agents.schemas.tweets import NormalizedTweet
from sink_agents.services.analysis import TwitterAnalyzer
from sink_agents.services.reports import format_marketing_report
from sink_agents.services.sink_items import opportunity_items, trend_items, tool_items, tutorial_items
from sink_agents.services.tweets import normalize_tweets

logger = logging.getLogger(__name__)

NO_TWEETS_REASON = "No relevant tweets found for the given keywords."


class MarketingAgent(BaseAgent):
    """Scrapes tweets for the configured keywords and turns them into marketing intel."""

    name = "marketing"

    def parse_config(self, value: dict[str, Any]) -> MarketingAgentConfig:
        return MarketingAgentConfig.model_validate(value)

    def validate_config(self, config: MarketingAgentConfig) -> str | None:
        return config.validation_error()

    def build_workflow(self) -> Any:
        graph = StateGraph(MarketingState)
        graph.add_node("scrape_tweets", self.scrape_tweets)
        graph.add_node("finish_empty", self.finish_empty)
        graph.add_node("analyze", self.analyze)
        graph.add_node("store_results", self.store_results)
        graph.add_node("complete", self.complete)
        graph.add_node(FAIL_NODE, self.mark_failed)

        graph.set_entry_point("scrape_tweets")
        graph.add_conditional_edges(
            "scrape_tweets",
            self.route_after_scrape,
            {"analyze": "analyze", "finish_empty": "finish_empty", FAIL_NODE: FAIL_NODE},
        )
        graph.add_conditional_edges("finish_empty", next_or_fail(END), {END: END, FAIL_NODE: FAIL_NODE})
        graph.add_conditional_edges("analyze", next_or_fail("store_results"), {"store_results": "store_results", FAIL_NODE: FAIL_NODE})
        graph.add_conditional_edges("store_results", next_or_fail("complete"), {"complete": "complete", FAIL_NODE: FAIL_NODE})
        graph.add_conditional_edges("complete", next_or_fail(END), {END: END, FAIL_NODE: FAIL_NODE})
        graph.add_edge(FAIL_NODE, END)
        return graph.compile()

    @staticmethod
    def route_after_scrape(state: MarketingState) -> str:
        if state.get("failure"):
            return FAIL_NODE
        return "analyze" if state.get("tweets") else "finish_empty"

    @stage("scrape_tweets")
    async def scrape_tweets(self, state: MarketingState) -> MarketingState:
        session_id = state["session_id"]
        config = state["config"]
        keywords = config.keywords
        max_items = config.tweets_to_fetch

        await self.log(
            session_id,
            f"Scraping Twitter via Apify for {len(keywords)} keywords (max {max_items} tweets)...",
        )
        await self.opensink.update_session(
            session_id,
            state={"phase": "scraping", "keywords": keywords, "max_items": max_items},
        )

        raw = await self.deps.scraper.scrape_tweets(keywords, max_items, config.filters)
        min_followers = config.filters.min_author_followers if config.filters else None
        tweets = normalize_tweets(raw, min_followers)

        await self.log(
            session_id,
            f"Scraped {len(raw)} raw tweets, {len(tweets)} after filtering retweets and noise.",
        )
        return {"raw_tweet_count": len(raw), "tweets": serialize_models(tweets)}

    @stage("finish_empty")
    async def finish_empty(self, state: MarketingState) -> MarketingState:
        await self.opensink.update_session(
            state["session_id"],
            status=SessionStatus.COMPLETED,
            state={"phase": "completed", "reason": "no_tweets_found"},
        )
        return {}

    @stage("analyze")
    async def analyze(self, state: MarketingState) -> MarketingState:
        session_id = state["session_id"]
        tweets = [NormalizedTweet.model_validate(item) for item in state.get("tweets", [])]

        await self.opensink.update_session(session_id, state={"phase": "analyzing", "tweets_to_analyze": len(tweets)})
        await self.log(session_id, f"Analyzing {len(tweets)} tweets with {self.settings.openai_analysis_model}...")

        analyzer = TwitterAnalyzer(self.deps.llm, state["config"], model=self.settings.openai_analysis_model)
        analysis = await analyzer.analyze(tweets)

        counts = analysis.counts()
        await self.log(
            session_id,
            f"Analysis complete. Found {counts['comment_opportunities']} comment opportunities, "
            f"{counts['trends']} trends, {counts['new_tools']} new tools, "
            f"{counts['tutorial_ideas']} tutorial ideas.",
        )
        return {"analysis": analysis.model_dump(mode="json")}

    @stage("store_results")
    async def store_results(self, state: MarketingState) -> MarketingState:
        session_id = state["session_id"]
        config = state["config"]
        analysis = AnalysisResult.model_validate(state["analysis"])

        await self.opensink.update_session(
            session_id,
            state={"phase": "storing_results", "tweets_analyzed": len(state.get("tweets", [])), **analysis.counts()},
        )
        await self.log(
            session_id,
            "Updated session state with analysis counts",
            activity_type=ActivityType.STATE_UPDATED,
        )

        sinks = config.sinks
        batches: list[tuple[str, list[SinkItem]]] = []
        if analysis.comment_opportunities and sinks.opportunities:
            batches.append(
                ("comment opportunity", opportunity_items(sinks.opportunities, analysis.comment_opportunities))
            )
        if analysis.trends and sinks.trends:
            batches.append(("trend", trend_items(sinks.trends, analysis.trends, config.company_name)))
        if analysis.new_tools and sinks.tools:
            batches.append(("new tool", tool_items(sinks.tools, analysis.new_tools)))
        if analysis.tutorial_ideas and sinks.tutorials:
            batches.append(("tutorial idea", tutorial_items(sinks.tutorials, analysis.tutorial_ideas)))

        for label, items in batches:
            logger.debug("Creating %s %s items", len(items), label)
            result = await self.opensink.create_sink_items(items)
            await self.log(
                session_id,
                f"Created {len(result.created)} {label} items",
                activity_type=ActivityType.SINK_ITEM_CREATED,
            )
        return {}

    @stage("complete")
    async def complete(self, state: MarketingState) -> MarketingState:
        session_id = state["session_id"]
        analysis = AnalysisResult.model_validate(state["analysis"])
        report = format_marketing_report(analysis, state["config"].company_name)
        await self.log(session_id, "Generated marketing intel report")

        await self.opensink.update_session(
            session_id,
            status=SessionStatus.COMPLETED,
            state={"phase": "completed", **self._stats(state, analysis)},
        )
        return {"report": report}

    @staticmethod
    def _stats(state: dict[str, Any], analysis: AnalysisResult) -> dict[str, int]:
        return {
            "tweets_scraped": state.get("raw_tweet_count", 0),
            "tweets_analyzed": len(state.get("tweets", [])),
            **analysis.counts(),
        }

    def build_result(self, final_state: dict[str, Any]) -> RunResult:
        if not final_state.get("tweets"):
            return RunResult.ok(session_id=final_state["session_id"], reason=NO_TWEETS_REASON)

        analysis = AnalysisResult.model_validate(final_state["analysis"])
        return RunResult.ok(
            session_id=final_state["session_id"],
            stats=self._stats(final_state, analysis),
            analysis=final_state["analysis"],
            report=final_state.get("report", ""),
        )
