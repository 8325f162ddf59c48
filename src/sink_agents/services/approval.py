"""
Human approval gate for proposed trades.

Each trade is stamped with an approval key when it is proposed. The key is
stored with the trade in session state and used both for the approval schema
property and for the lookup in the recorded response, so the correlation
never depends on recomputing list positions on the continuation call.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sink_agents.schemas.news import ExecutedTrade, Trade

APPROVAL_REQUEST_KEY = "trade_approval"
NOTES_FIELD = "notes"


def assign_approval_keys(trades: list[Trade]) -> list[Trade]:
    return [
        trade.model_copy(update={"approval_key": f"trade_{index}"})
        for index, trade in enumerate(trades)
    ]


def build_trade_approval_schema(trades: list[Trade]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []

    for trade in trades:
        key = trade.approval_key
        if key is None:
            raise ValueError(f"Trade {trade.label} has no approval key")
        required.append(key)
        properties[key] = {
            "type": "object",
            "title": trade.label,
            "description": trade.reason,
            "properties": {
                "symbol": {"type": "string", "const": trade.symbol, "default": trade.symbol, "readOnly": True},
                "action": {"type": "string", "const": trade.action, "default": trade.action, "readOnly": True},
                "quantity": {"type": "number", "const": trade.quantity, "default": trade.quantity, "readOnly": True},
                "approved": {"type": "boolean", "title": "Approve this trade", "default": False},
            },
            "required": ["approved"],
        }

    properties[NOTES_FIELD] = {
        "type": "string",
        "title": "Notes",
        "description": "Optional notes or instructions",
    }

    return {"type": "object", "properties": properties, "required": required}


def partition_trades(trades: list[Trade], response: dict[str, Any]) -> tuple[list[Trade], list[Trade]]:
    approved: list[Trade] = []
    rejected: list[Trade] = []
    for trade in trades:
        decision = response.get(trade.approval_key or "")
        if isinstance(decision, dict) and decision.get("approved"):
            approved.append(trade)
        else:
            rejected.append(trade)
    return approved, rejected


def approval_notes(response: dict[str, Any]) -> str | None:
    notes = response.get(NOTES_FIELD)
    return str(notes) if notes else None


def execute_trades(trades: list[Trade], now: datetime | None = None) -> list[ExecutedTrade]:
    """Simulated execution: no order reaches a venue."""
    executed_at = (now or datetime.now(timezone.utc)).isoformat()
    return [
        ExecutedTrade(**trade.model_dump(), executed_at=executed_at, status="executed")
        for trade in trades
    ]
