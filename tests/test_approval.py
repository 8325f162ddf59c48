from datetime import datetime, timezone
from itertools import combinations

import pytest

from sink_agents.schemas.news import Trade
from sink_agents.services.approval import (
    approval_notes,
    assign_approval_keys,
    build_trade_approval_schema,
    execute_trades,
    partition_trades,
)


def _trades() -> list[Trade]:
    return assign_approval_keys(
        [
            Trade(symbol="AAPL", action="buy", quantity=10, reason="Strong iPhone demand"),
            Trade(symbol="TSLA", action="sell", quantity=5, reason="Delivery miss"),
            Trade(symbol="NVDA", action="buy", quantity=2.5, reason="Data center growth"),
        ]
    )


def test_assign_approval_keys_uses_proposal_position() -> None:
    trades = _trades()
    assert [trade.approval_key for trade in trades] == ["trade_0", "trade_1", "trade_2"]
    assert trades[2].label == "BUY 2.5 NVDA"


def test_build_trade_approval_schema_describes_each_trade() -> None:
    schema = build_trade_approval_schema(_trades())

    assert schema["type"] == "object"
    assert schema["required"] == ["trade_0", "trade_1", "trade_2"]
    assert "notes" in schema["properties"]
    assert "notes" not in schema["required"]

    first = schema["properties"]["trade_0"]
    assert first["title"] == "BUY 10 AAPL"
    assert first["description"] == "Strong iPhone demand"
    assert first["required"] == ["approved"]
    assert first["properties"]["symbol"]["const"] == "AAPL"
    assert first["properties"]["symbol"]["readOnly"] is True
    assert first["properties"]["approved"] == {
        "type": "boolean",
        "title": "Approve this trade",
        "default": False,
    }


def test_build_trade_approval_schema_rejects_unkeyed_trades() -> None:
    with pytest.raises(ValueError):
        build_trade_approval_schema([Trade(symbol="AAPL", action="buy", quantity=1, reason="r")])


def test_partition_trades_is_an_exact_split() -> None:
    trades = _trades()
    response = {
        "trade_0": {"approved": True},
        "trade_1": {"approved": False},
        "notes": "Go easy on tech",
    }

    approved, rejected = partition_trades(trades, response)
    assert [trade.symbol for trade in approved] == ["AAPL"]
    assert [trade.symbol for trade in rejected] == ["TSLA", "NVDA"]
    assert len(approved) + len(rejected) == len(trades)


def test_partition_trades_treats_malformed_decisions_as_rejected() -> None:
    trades = _trades()
    response = {"trade_0": True, "trade_1": {"approved": True}, "trade_2": {}}

    approved, rejected = partition_trades(trades, response)
    assert [trade.symbol for trade in approved] == ["TSLA"]
    assert len(rejected) == 2


def test_approval_notes_ignores_blank_values() -> None:
    assert approval_notes({"notes": "Hold off on TSLA"}) == "Hold off on TSLA"
    assert approval_notes({"notes": ""}) is None
    assert approval_notes({}) is None


def test_execute_trades_stamps_time_and_status() -> None:
    now = datetime(2026, 10, 17, 14, 30, tzinfo=timezone.utc)

    executed = execute_trades(_trades()[:2], now=now)
    assert [trade.symbol for trade in executed] == ["AAPL", "TSLA"]
    assert all(trade.status == "executed" for trade in executed)
    assert executed[0].executed_at == "2026-10-17T14:30:00+00:00"
    assert executed[0].approval_key == "trade_0"


def test_partition_trades_covers_every_subset_of_approvals() -> None:
    trades = _trades()
    keys = [trade.approval_key for trade in trades]

    for size in range(len(keys) + 1):
        for chosen in combinations(keys, size):
            response = {key: {"approved": key in chosen} for key in keys}
            approved, rejected = partition_trades(trades, response)

            assert {trade.approval_key for trade in approved} == set(chosen)
            assert {trade.approval_key for trade in rejected} == set(keys) - set(chosen)


def test_trade_label_keeps_full_quantity_precision() -> None:
    assert Trade(symbol="SHIB", action="buy", quantity=1500000, reason="r").label == "BUY 1500000 SHIB"
    assert Trade(symbol="BTC", action="sell", quantity=0.12345678, reason="r").label == "SELL 0.12345678 BTC"

    [keyed] = assign_approval_keys([Trade(symbol="BTC", action="buy", quantity=0.12345678, reason="r")])
    schema = build_trade_approval_schema([keyed])
    assert schema["properties"]["trade_0"]["title"] == "BUY 0.12345678 BTC"
