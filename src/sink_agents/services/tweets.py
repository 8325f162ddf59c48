from __future__ import annotations

import logging

from sink_agents.schemas.tweets import ApifyTweet, NormalizedTweet

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 20
MAX_ANALYZED_TWEETS = 150
PROMPT_TEXT_LIMIT = 500


def filter_tweets(raw: list[ApifyTweet], min_author_followers: int | None = None) -> list[ApifyTweet]:
    retweets = short_text = wrong_type = low_followers = 0

    kept: list[ApifyTweet] = []
    for tweet in raw:
        if tweet.is_retweet:
            retweets += 1
            continue
        if not tweet.text or len(tweet.text.strip()) < MIN_TEXT_LENGTH:
            short_text += 1
            continue
        if tweet.type != "tweet":
            wrong_type += 1
            continue
        if min_author_followers and tweet.author_followers < min_author_followers:
            low_followers += 1
            continue
        kept.append(tweet)

    logger.info(
        "Filtered out %s retweets, %s short/empty, %s wrong type, %s low followers; %s remaining",
        retweets,
        short_text,
        wrong_type,
        low_followers,
        len(kept),
    )

    unique: dict[str | None, ApifyTweet] = {}
    for tweet in kept:
        unique.setdefault(tweet.id, tweet)

    logger.info("After deduplication: %s unique tweets", len(unique))
    return list(unique.values())


def normalize_tweets(raw: list[ApifyTweet], min_author_followers: int | None = None) -> list[NormalizedTweet]:
    return [
        NormalizedTweet(
            id=tweet.id or "",
            text=tweet.text or "",
            author=(tweet.author.user_name if tweet.author else None) or "unknown",
            author_followers=tweet.author_followers,
            likes=tweet.like_count or 0,
            retweets=tweet.retweet_count or 0,
            replies=tweet.reply_count or 0,
            url=tweet.url or "",
            created_at=tweet.created_at or "",
        )
        for tweet in filter_tweets(raw, min_author_followers)
    ]


def rank_by_engagement(tweets: list[NormalizedTweet], limit: int = MAX_ANALYZED_TWEETS) -> list[NormalizedTweet]:
    return sorted(tweets, key=lambda tweet: tweet.engagement, reverse=True)[:limit]


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_tweets_for_prompt(tweets: list[NormalizedTweet]) -> str:
    blocks = []
    for index, tweet in enumerate(tweets, start=1):
        blocks.append(
            f"{index}. @{tweet.author} ({tweet.author_followers:,} followers) [engagement: {tweet.engagement}]\n"
            f"URL: {tweet.url}\n"
            f"Posted: {tweet.created_at}\n"
            f'"{_truncate(tweet.text, PROMPT_TEXT_LIMIT)}"'
        )
    return "\n\n".join(blocks)
