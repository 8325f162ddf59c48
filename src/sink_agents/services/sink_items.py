from __future__ import annotations

from typing import Any

from sink_agents.schemas.marketing import CommentOpportunity, NewTool, Trend, TutorialIdea
from sink_agents.schemas.news import ExecutedTrade, SelectedArticle
from sink_agents.schemas.opensink import SinkItem, SinkItemResource
from sink_agents.services.reports import format_count, format_evidence

OPPORTUNITY_TITLE_LIMIT = 80


def article_items(sink_id: str, articles: list[SelectedArticle]) -> list[SinkItem]:
    return [
        SinkItem(
            sink_id=sink_id,
            title=article.title,
            body=article.summary,
            url=article.url,
            fields={"category": article.category},
        )
        for article in articles
    ]


def executed_trade_items(sink_id: str, trades: list[ExecutedTrade], notes: str | None = None) -> list[SinkItem]:
    items: list[SinkItem] = []
    for trade in trades:
        fields: dict[str, Any] = {
            "symbol": trade.symbol,
            "action": trade.action,
            "quantity": trade.quantity,
            "executed_at": trade.executed_at,
        }
        if notes:
            fields["approval_notes"] = notes
        items.append(SinkItem(sink_id=sink_id, title=trade.label, body=trade.reason, fields=fields))
    return items


def opportunity_items(sink_id: str, opportunities: list[CommentOpportunity]) -> list[SinkItem]:
    return [
        SinkItem(
            sink_id=sink_id,
            title=f"@{opp.author}: {opp.tweet_text[:OPPORTUNITY_TITLE_LIMIT]}...",
            body=f"Why: {opp.why_comment}\n\nDraft comment:\n{opp.draft_comment}",
            url=opp.tweet_url,
            fields={
                "author": opp.author,
                "author_followers": opp.author_followers,
                "engagement_score": opp.engagement_score,
                "draft_comment": opp.draft_comment,
            },
            resources=[
                SinkItemResource(label="View Tweet", url=opp.tweet_url),
                SinkItemResource(label=f"{opp.author}'s Profile", url=f"https://twitter.com/{opp.author}"),
            ],
        )
        for opp in opportunities
    ]


def trend_items(sink_id: str, trends: list[Trend], company_name: str) -> list[SinkItem]:
    return [
        SinkItem(
            sink_id=sink_id,
            title=f"{trend.theme} [{trend.sentiment}] (~{format_count(trend.tweet_count)} tweets)",
            body=(
                f"Why trending: {trend.why_trending}\n\n"
                f"Evidence: {format_evidence(trend)}\n\n"
                f"{company_name} relevance: {trend.company_relevance}"
            ),
            fields={
                "sentiment": trend.sentiment,
                "tweet_count": trend.tweet_count,
                "why_trending": trend.why_trending,
                "company_relevance": trend.company_relevance,
            },
            resources=[
                SinkItemResource(label=f"{evidence.author}'s Tweet", url=evidence.url)
                for evidence in trend.evidence_tweets
            ],
        )
        for trend in trends
    ]


def tool_items(sink_id: str, tools: list[NewTool]) -> list[SinkItem]:
    return [
        SinkItem(
            sink_id=sink_id,
            title=tool.name,
            body=f"{tool.description}\n{tool.company_relevance}",
            url=tool.url,
            fields={
                "relationship": tool.relationship,
                "company_relevance": tool.company_relevance,
            },
            resources=[
                SinkItemResource(label=f"{source.author}'s Tweet", url=source.url)
                for source in tool.source_tweets
            ],
        )
        for tool in tools
    ]


def tutorial_items(sink_id: str, ideas: list[TutorialIdea]) -> list[SinkItem]:
    items: list[SinkItem] = []
    for idea in ideas:
        outline = "\n".join(f"- {step}" for step in idea.outline)
        items.append(
            SinkItem(
                sink_id=sink_id,
                title=idea.title,
                body=(
                    f"{idea.the_hook}\n\n"
                    f"Demand ({format_count(idea.tweet_count)} tweets): {idea.demand_signal}\n\n"
                    f"Outline:\n{outline}"
                ),
                fields={
                    "effort": idea.effort,
                    "the_hook": idea.the_hook,
                    "demand_signal": idea.demand_signal,
                    "tweet_count": idea.tweet_count,
                },
                resources=[
                    SinkItemResource(label=f"{source.author}: {source.relevance}", url=source.url)
                    for source in idea.source_tweets
                ],
            )
        )
    return items
