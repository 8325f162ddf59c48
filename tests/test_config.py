import pytest

from sink_agents.config import Settings
from sink_agents.schemas.config import MarketingAgentConfig, NewsAgentConfig


def _settings(**values: str) -> Settings:
    return Settings(_env_file=None, **values)


def test_missing_required_runtime_fields_depends_on_agent(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENSINK_API_KEY", "OPENAI_API_KEY", "NEWSAPI_KEY", "APIFY_API_TOKEN"):
        monkeypatch.delenv(name, raising=False)

    settings = _settings(opensink_api_key="k", openai_api_key=" ")

    assert settings.missing_required_runtime_fields("finance-news") == ["OPENAI_API_KEY", "NEWSAPI_KEY"]
    assert settings.missing_required_runtime_fields("trading") == ["OPENAI_API_KEY", "NEWSAPI_KEY"]
    assert settings.missing_required_runtime_fields("marketing") == ["OPENAI_API_KEY", "APIFY_API_TOKEN"]


def test_agent_id_for_maps_each_agent(settings: Settings) -> None:
    ids = {name: settings.agent_id_for(name) for name in ("finance-news", "trading", "marketing")}
    assert len(set(ids.values())) == 3


def test_news_config_defaults_item_count() -> None:
    assert NewsAgentConfig.model_validate({"enabled": True}).items_to_fetch == 10
    assert NewsAgentConfig.model_validate({"enabled": True, "newItemsCount": 4}).items_to_fetch == 4
    assert NewsAgentConfig.model_validate({}).enabled is False


def _marketing(**overrides: object) -> MarketingAgentConfig:
    value = {
        "enabled": True,
        "keywords": ["ai agents"],
        "companyName": "OpenSink",
        "companyWebsite": "https://opensink.com",
        "companyDescription": "Sessions for agents",
        "founderName": "Sam",
        "founderContext": "Builds agent infra",
        "sinks": {"trends": "trend-sink"},
    }
    value.update(overrides)
    return MarketingAgentConfig.model_validate(value)


def test_marketing_config_validation_order() -> None:
    assert _marketing().validation_error() is None
    assert _marketing().tweets_to_fetch == 200
    assert _marketing(maxItems=40).tweets_to_fetch == 40

    assert "No keywords configured" in (_marketing(keywords=[]).validation_error() or "")
    assert "Missing required config fields" in (_marketing(founderName="").validation_error() or "")
    assert "No sink IDs configured" in (_marketing(sinks={}).validation_error() or "")
    assert "No sink IDs configured" in (_marketing(sinks=None).validation_error() or "")


def test_marketing_config_reads_filters() -> None:
    config = _marketing(filters={"minLikes": 5, "minAuthorFollowers": 1000, "onlyVerified": True})

    assert config.filters is not None
    assert config.filters.min_likes == 5
    assert config.filters.min_author_followers == 1000
    assert config.filters.only_verified is True
