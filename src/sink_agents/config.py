from __future__ import annotations

import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

AGENT_NAMES = ("finance-news", "trading", "marketing")


class Settings(BaseSettings):
    opensink_api_key: str | None = None
    opensink_url: str = "https://api.opensink.com"

    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_analysis_model: str = "gpt-4o"

    newsapi_key: str | None = None
    newsapi_base_url: str = "https://newsapi.org"
    news_query: str = "finance OR stock OR market"
    news_page_size: int = 50

    apify_api_token: str | None = None
    apify_base_url: str = "https://api.apify.com"
    apify_actor: str = "apidojo/twitter-scraper-lite"
    apify_wait_seconds: int = 60
    apify_max_polls: int = 30

    finance_news_agent_id: str = "019c164c-ae84-759f-a6dc-6e28b107096b"
    trading_agent_id: str = "019c1b31-257a-7356-963c-7f68da740677"
    marketing_agent_id: str = "019c5475-f425-757d-aca6-89d24a171310"
    news_sink_id: str = "019c05ce-5daf-72c9-bc1e-cb778bc40816"
    trades_sink_id: str = "019c1b5e-3541-76ed-bd07-73a17acf7f14"

    host: str = "0.0.0.0"
    port: int = 3001
    request_timeout_seconds: int = 60
    allow_concurrent_runs: bool = True
    log_level: str = "INFO"

    langsmith_api_key: str | None = None
    langsmith_project: str = "sink-agents"
    langsmith_tracing: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def agent_id_for(self, agent_name: str) -> str:
        return {
            "finance-news": self.finance_news_agent_id,
            "trading": self.trading_agent_id,
            "marketing": self.marketing_agent_id,
        }[agent_name]

    def missing_required_runtime_fields(self, agent_name: str) -> list[str]:
        missing: list[str] = []

        if not (self.opensink_api_key or "").strip():
            missing.append("OPENSINK_API_KEY")
        if not (self.openai_api_key or "").strip():
            missing.append("OPENAI_API_KEY")

        if agent_name == "marketing":
            if not (self.apify_api_token or "").strip():
                missing.append("APIFY_API_TOKEN")
        elif not (self.newsapi_key or "").strip():
            missing.append("NEWSAPI_KEY")

        return missing


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_langsmith_env(settings: Settings) -> None:
    if settings.langsmith_api_key:
        os.environ["LANGSMITH_API_KEY"] = settings.langsmith_api_key
    os.environ["LANGSMITH_PROJECT"] = settings.langsmith_project
    os.environ["LANGSMITH_TRACING"] = "true" if settings.langsmith_tracing else "false"
