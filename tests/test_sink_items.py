from sink_agents.schemas.marketing import CommentOpportunity, Trend
from sink_agents.schemas.news import ExecutedTrade, SelectedArticle
from sink_agents.schemas.opensink import serialize_sink_items
from sink_agents.services.sink_items import (
    article_items,
    executed_trade_items,
    opportunity_items,
    trend_items,
)


def test_article_items_carry_category_field() -> None:
    article = SelectedArticle(title="Fed holds", url="https://n.example/1", summary="Rates unchanged.", category="policy")

    [item] = article_items("news-sink", [article])
    assert item.sink_id == "news-sink"
    assert item.title == "Fed holds"
    assert item.body == "Rates unchanged."
    assert item.url == "https://n.example/1"
    assert item.fields == {"category": "policy"}


def test_executed_trade_items_include_notes_only_when_given() -> None:
    trade = ExecutedTrade(
        symbol="AAPL",
        action="buy",
        quantity=10,
        reason="Strong demand",
        approval_key="trade_0",
        executed_at="2026-10-17T14:30:00+00:00",
    )

    [with_notes] = executed_trade_items("trades-sink", [trade], notes="Small size please")
    [without_notes] = executed_trade_items("trades-sink", [trade])

    assert with_notes.title == "BUY 10 AAPL"
    assert with_notes.body == "Strong demand"
    assert with_notes.fields["approval_notes"] == "Small size please"
    assert with_notes.fields["executed_at"] == "2026-10-17T14:30:00+00:00"
    assert "approval_notes" not in without_notes.fields


def test_opportunity_items_link_tweet_and_profile() -> None:
    opportunity = CommentOpportunity(
        tweet_text="a" * 120,
        tweet_url="https://x.com/dev/status/1",
        author="dev",
        author_followers=5400,
        why_comment="Exact audience",
        draft_comment="We hit this too.",
        engagement_score=88,
    )

    [item] = opportunity_items("opps", [opportunity])
    assert item.title == "@dev: " + "a" * 80 + "..."
    assert item.body == "Why: Exact audience\n\nDraft comment:\nWe hit this too."
    assert [resource.url for resource in item.resources or []] == [
        "https://x.com/dev/status/1",
        "https://twitter.com/dev",
    ]


def test_trend_items_have_one_resource_per_evidence_tweet() -> None:
    trend = Trend.model_validate(
        {
            "theme": "Agent memory",
            "tweet_count": 12,
            "evidence_tweets": [
                {"text": "one", "url": "https://x.com/a/1", "author": "alice"},
                {"text": "two", "url": "https://x.com/b/2", "author": "bob"},
            ],
            "why_trending": "New releases",
            "sentiment": "hype",
            "company_relevance": "Sessions are memory",
        }
    )

    [item] = trend_items("trends", [trend], "OpenSink")
    assert item.title == "Agent memory [hype] (~12 tweets)"
    assert "OpenSink relevance: Sessions are memory" in item.body
    assert len(item.resources or []) == 2


def test_serialize_sink_items_omits_unset_optionals() -> None:
    article = SelectedArticle(title="t", url="https://n.example/1", summary="s", category="other")
    trade = ExecutedTrade(symbol="X", action="sell", quantity=1, reason="r", executed_at="now")

    payload = serialize_sink_items(article_items("news", [article]) + executed_trade_items("trades", [trade]))
    assert "resources" not in payload[0]
    assert "url" not in payload[1]
    assert payload[1]["fields"]["quantity"] == 1.0
