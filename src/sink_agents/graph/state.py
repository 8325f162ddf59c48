from __future__ import annotations

from typing import Any, TypedDict

from sink_agents.schemas.config import MarketingAgentConfig, NewsAgentConfig


class StageFailure(TypedDict):
    stage: str
    reason: str


class PipelineState(TypedDict, total=False):
    session_id: str
    failure: StageFailure | None


class FinanceNewsState(PipelineState, total=False):
    config: NewsAgentConfig
    raw_articles: list[dict[str, Any]]
    articles: list[dict[str, Any]]
    sink_result: dict[str, Any]


class TradingState(PipelineState, total=False):
    config: NewsAgentConfig
    raw_articles: list[dict[str, Any]]
    articles: list[dict[str, Any]]
    proposed_trades: list[dict[str, Any]]
    input_request_id: str


class MarketingState(PipelineState, total=False):
    config: MarketingAgentConfig
    raw_tweet_count: int
    tweets: list[dict[str, Any]]
    analysis: dict[str, Any]
    report: str


class TradeApprovalState(PipelineState, total=False):
    request_id: str
    session_state: dict[str, Any]
    response: dict[str, Any] | None
    approved_trades: list[dict[str, Any]]
    rejected_trades: list[dict[str, Any]]
    executed_trades: list[dict[str, Any]]
    notes: str | None
    outcome: str
