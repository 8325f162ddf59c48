"""Strict JSON schemas handed to the language model as response formats."""

from __future__ import annotations

from typing import Any

ARTICLE_CATEGORIES = ["stocks", "crypto", "economy", "earnings", "markets", "policy", "commodities", "other"]


def _object(properties: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
        **extra,
    }


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _number(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}


def _enum(values: list[str], description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "string", "enum": values}
    if description:
        schema["description"] = description
    return schema


def _array(items: dict[str, Any], description: str) -> dict[str, Any]:
    return {"type": "array", "items": items, "description": description}


NEWS_SCHEMA = _object(
    {
        "articles": _array(
            _object(
                {
                    "title": _string("Original article title"),
                    "url": _string("Original article URL"),
                    "summary": _string("Brief 1-2 sentence summary of the article"),
                    "category": _enum(ARTICLE_CATEGORIES),
                }
            ),
            "The selected articles",
        )
    }
)

TRADES_SCHEMA = _object(
    {
        "trades": _array(
            _object(
                {
                    "symbol": _string("Stock/crypto symbol (e.g., AAPL, BTC)"),
                    "action": _enum(["buy", "sell"], "Trade action"),
                    "quantity": _number("Number of shares/units"),
                    "reason": _string("Brief explanation for the trade based on the news"),
                }
            ),
            "Proposed trades",
        )
    }
)

COMMENT_OPPORTUNITIES_SCHEMA = _object(
    {
        "items": _array(
            _object(
                {
                    "tweet_text": _string("Truncated tweet text (max 200 chars)"),
                    "tweet_url": _string("URL to the tweet"),
                    "author": _string("Twitter handle of the author"),
                    "author_followers": _number("Follower count of the author"),
                    "why_comment": _string("Why this is a high-impact opportunity worth commenting on"),
                    "draft_comment": _string("A ready-to-use draft comment (edited by a human before posting)"),
                    "engagement_score": _number("Combined engagement (likes + retweets + replies)"),
                }
            ),
            "Only the top 3-5 opportunities. Return fewer if there are not enough high-quality matches.",
        )
    }
)

TRENDS_SCHEMA = _object(
    {
        "items": _array(
            _object(
                {
                    "theme": _string("Clear trend name (tool, technology, technique, or topic)"),
                    "tweet_count": _number("Approximate number of tweets in the dataset discussing this trend"),
                    "evidence_tweets": _array(
                        _object(
                            {
                                "text": _string("Tweet snippet as evidence (max 100 chars)"),
                                "url": _string("URL to the tweet"),
                                "author": _string("Twitter handle of the author"),
                            }
                        ),
                        "3-5 example tweets showing this trend",
                    ),
                    "why_trending": _string("Why is this trending now? What triggered it?"),
                    "sentiment": _enum(["hype", "frustration", "curiosity", "fatigue", "debate"], "Overall sentiment"),
                    "company_relevance": _string("How this relates to the company; be honest when it does not"),
                }
            ),
            "Only 2-4 real trends backed by many tweets. Return fewer or zero if no real trends exist.",
        )
    }
)

TOOLS_SCHEMA = _object(
    {
        "items": _array(
            _object(
                {
                    "name": _string("Product or tool name"),
                    "description": _string("What it does in one line"),
                    "url": _string("Link to the tool/product website or repo"),
                    "relationship": _enum(
                        ["competitor", "potential_partner", "complementary", "irrelevant"],
                        "Relationship to the company",
                    ),
                    "company_relevance": _string("One line on how it relates to the company space"),
                    "source_tweets": _array(
                        _object(
                            {
                                "url": _string("URL to the tweet that mentioned this tool"),
                                "author": _string("Twitter handle of the author"),
                            }
                        ),
                        "Tweets that mentioned this tool/company",
                    ),
                }
            ),
            "New products, tools, launches, or repos mentioned.",
        )
    }
)

TUTORIALS_SCHEMA = _object(
    {
        "items": _array(
            _object(
                {
                    "title": _string("Very specific tutorial title with a concrete outcome"),
                    "the_hook": _string("One sentence that would make a developer click"),
                    "demand_signal": _string("What evidence shows people actually want this"),
                    "tweet_count": _number("Approximate number of tweets showing demand for this topic"),
                    "source_tweets": _array(
                        _object(
                            {
                                "url": _string("URL to the tweet"),
                                "author": _string("Twitter handle"),
                                "relevance": _string("How this tweet shows demand"),
                            }
                        ),
                        "3-5 tweets proving demand for this tutorial",
                    ),
                    "outline": _array({"type": "string"}, "4-6 specific steps with concrete details"),
                    "effort": _enum(["quick", "medium", "deep"], "quick (2-3hr), medium (half day), deep (full day+)"),
                }
            ),
            "Only 2-3 specific, concrete tutorial ideas with proven demand. Return fewer or zero if nothing qualifies.",
        )
    }
)
