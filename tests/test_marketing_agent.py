import asyncio
from typing import Any

from sink_agents.agents.base import AgentDeps
from sink_agents.agents.marketing import NO_TWEETS_REASON
from sink_agents.agents.registry import build_agent
from sink_agents.errors import LanguageModelError
from sink_agents.schemas.opensink import SessionStatus
from sink_agents.schemas.tweets import ApifyTweet

TREND = {
    "theme": "Agent memory",
    "tweet_count": 4,
    "evidence_tweets": [{"text": "memory is hard", "url": "https://x.com/a/1", "author": "alice"}],
    "why_trending": "New launches",
    "sentiment": "debate",
    "company_relevance": "Sessions are durable memory",
}

TOOL = {
    "name": "StateKit",
    "description": "Durable agent state",
    "url": "https://statekit.dev",
    "relationship": "competitor",
    "company_relevance": "Overlaps with sessions",
    "source_tweets": [{"url": "https://x.com/b/2", "author": "bob"}],
}


def _config(**overrides: Any) -> dict[str, Any]:
    value: dict[str, Any] = {
        "enabled": True,
        "keywords": ["ai agents", "langgraph"],
        "maxItems": 60,
        "companyName": "OpenSink",
        "companyWebsite": "https://opensink.com",
        "companyDescription": "Sessions and sinks for agents",
        "founderName": "Sam",
        "founderContext": "Builds agent infrastructure",
        "sinks": {"trends": "trend-sink", "tools": "tool-sink"},
        "filters": {"minLikes": 3},
    }
    value.update(overrides)
    return value


def _tweets() -> list[ApifyTweet]:
    payloads = [
        {"type": "tweet", "id": "1", "text": "Agents keep forgetting everything between runs", "likeCount": 40},
        {"type": "tweet", "id": "2", "text": "Just shipped durable state for our agent stack", "likeCount": 12},
        {"type": "tweet", "id": "3", "text": "RT this is a retweet of something long enough", "isRetweet": True},
    ]
    return [ApifyTweet.model_validate(payload) for payload in payloads]


def test_invalid_config_fails_before_session(deps: AgentDeps, opensink, scraper) -> None:
    opensink.config_value = _config(keywords=[])

    result = asyncio.run(build_agent("marketing", deps).run())

    assert result.success is False
    assert "No keywords configured" in (result.reason or "")
    assert opensink.created_sessions == []
    assert scraper.calls == []


def test_no_tweets_completes_without_analysis(deps: AgentDeps, opensink, scraper, llm) -> None:
    opensink.config_value = _config()

    payload = asyncio.run(build_agent("marketing", deps).run()).to_payload()

    assert payload == {"success": True, "session_id": "session-1", "reason": NO_TWEETS_REASON}
    assert opensink.statuses == [SessionStatus.COMPLETED]
    assert opensink.updates[-1]["state"] == {"phase": "completed", "reason": "no_tweets_found"}
    assert llm.calls == []
    assert scraper.calls[0][:2] == (["ai agents", "langgraph"], 60)
    assert scraper.calls[0][2].min_likes == 3


def test_marketing_run_analyzes_and_stores_configured_categories(
    deps: AgentDeps,
    opensink,
    scraper,
    llm,
) -> None:
    opensink.config_value = _config()
    scraper.tweets = _tweets()
    llm.responses["trends"] = {"items": [TREND]}
    llm.responses["tools"] = {"items": [TOOL]}

    payload = asyncio.run(build_agent("marketing", deps).run()).to_payload()

    assert payload["success"] is True
    assert payload["stats"] == {
        "tweets_scraped": 3,
        "tweets_analyzed": 2,
        "comment_opportunities": 0,
        "trends": 1,
        "new_tools": 1,
        "tutorial_ideas": 0,
    }
    assert "--- OPENSINK MARKETING INTEL ---" in payload["report"]
    assert "StateKit - Durable agent state" in payload["report"]

    assert sorted(llm.calls) == ["tools", "trends"]
    assert [[item.sink_id for item in batch] for batch in opensink.sink_batches] == [["trend-sink"], ["tool-sink"]]

    assert opensink.statuses == [SessionStatus.COMPLETED]
    phases = [update["state"]["phase"] for update in opensink.updates if update["state"]]
    assert phases == ["scraping", "analyzing", "storing_results", "completed"]


def test_failed_analysis_fails_run_without_sink_writes(deps: AgentDeps, opensink, scraper, llm) -> None:
    opensink.config_value = _config()
    scraper.tweets = _tweets()
    llm.responses["trends"] = {"items": [TREND]}
    llm.responses["tools"] = LanguageModelError("Model declined tools: policy")

    result = asyncio.run(build_agent("marketing", deps).run())

    assert result.success is False
    assert result.reason == "Model declined tools: policy"
    assert opensink.statuses == [SessionStatus.FAILED]
    assert opensink.sink_batches == []


def test_null_company_field_fails_validation_without_session(deps: AgentDeps, opensink, scraper) -> None:
    opensink.config_value = _config(companyName=None)

    result = asyncio.run(build_agent("marketing", deps).run())

    assert result.success is False
    assert "Missing required config fields" in (result.reason or "")
    assert opensink.created_sessions == []
    assert scraper.calls == []
