from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ArticleCategory = Literal["stocks", "crypto", "economy", "earnings", "markets", "policy", "commodities", "other"]
TradeAction = Literal["buy", "sell"]


def format_quantity(quantity: float) -> str:
    if float(quantity).is_integer():
        return str(int(quantity))
    return repr(float(quantity))


class RawArticle(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    title: str | None = None
    description: str | None = None
    url: str | None = None
    published_at: str | None = None


class SelectedArticle(BaseModel):
    title: str
    url: str
    summary: str
    category: ArticleCategory


class Trade(BaseModel):
    symbol: str
    action: TradeAction
    quantity: float
    reason: str
    approval_key: str | None = None

    @property
    def label(self) -> str:
        return f"{self.action.upper()} {format_quantity(self.quantity)} {self.symbol}"


class ExecutedTrade(Trade):
    executed_at: str
    status: str = "executed"


def serialize_models(items: list[BaseModel]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


def parse_articles(payload: list[dict[str, Any]] | None) -> list[SelectedArticle]:
    if not payload:
        return []
    return [SelectedArticle.model_validate(item) for item in payload]


def parse_trades(payload: list[dict[str, Any]] | None) -> list[Trade]:
    if not payload:
        return []
    return [Trade.model_validate(item) for item in payload]
