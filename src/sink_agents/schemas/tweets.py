from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _ApifyModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ApifyAuthor(_ApifyModel):
    user_name: str | None = None
    name: str | None = None
    url: str | None = None
    is_verified: bool = False
    is_blue_verified: bool = False
    followers: int | None = None


class ApifyTweet(_ApifyModel):
    """One dataset item of the tweet scraper actor."""

    type: str | None = None
    id: str | None = None
    url: str | None = None
    text: str | None = None
    retweet_count: int | None = None
    reply_count: int | None = None
    like_count: int | None = None
    quote_count: int | None = None
    created_at: str | None = None
    lang: str | None = None
    is_retweet: bool = False
    is_reply: bool = False
    author: ApifyAuthor | None = None

    @property
    def author_followers(self) -> int:
        if self.author is None:
            return 0
        return self.author.followers or 0


class NormalizedTweet(BaseModel):
    id: str
    text: str
    author: str
    author_followers: int
    likes: int
    retweets: int
    replies: int
    url: str
    created_at: str

    @property
    def engagement(self) -> int:
        return self.likes + self.retweets + self.replies
