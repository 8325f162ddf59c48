from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_NEW_ITEMS_COUNT = 10
DEFAULT_MAX_TWEETS = 200


class _StoredConfig(BaseModel):
    """Configuration values are stored as camelCase JSON by the session store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # A null stored value falls back to the field default.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class NewsAgentConfig(_StoredConfig):
    enabled: bool = False
    new_items_count: int = 0

    @property
    def items_to_fetch(self) -> int:
        return self.new_items_count or DEFAULT_NEW_ITEMS_COUNT


class SinkIds(_StoredConfig):
    opportunities: str | None = None
    trends: str | None = None
    tools: str | None = None
    tutorials: str | None = None

    def any_configured(self) -> bool:
        return any((self.opportunities, self.trends, self.tools, self.tutorials))


class TweetFilters(_StoredConfig):
    min_likes: int | None = None
    min_retweets: int | None = None
    min_replies: int | None = None
    min_author_followers: int | None = None
    only_verified: bool = False


class MarketingAgentConfig(_StoredConfig):
    enabled: bool = False
    keywords: list[str] = []
    max_items: int = 0

    company_name: str = ""
    company_website: str = ""
    company_description: str = ""
    founder_name: str = ""
    founder_context: str = ""

    sinks: SinkIds | None = None
    custom_instructions: str | None = None
    filters: TweetFilters | None = None

    @property
    def tweets_to_fetch(self) -> int:
        return self.max_items or DEFAULT_MAX_TWEETS

    def validation_error(self) -> str | None:
        if not self.keywords:
            return "No keywords configured. Set keywords in the OpenSink agent configuration."

        if not (self.company_name and self.company_description and self.founder_name and self.founder_context):
            return "Missing required config fields: companyName, companyDescription, founderName, founderContext"

        if self.sinks is None or not self.sinks.any_configured():
            return "No sink IDs configured. Set at least one sink ID in the OpenSink agent configuration."

        return None
