"""
Stage plumbing shared by the agent workflows.

A stage either returns its state update or an explicit failure record; it
never lets an exception unwind through the graph. Conditional edges send a
failed stage to the terminal ``fail`` node, which owns the decision of what
to persist about the failed run.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable

from langgraph.graph import END, StateGraph
from langsmith import traceable

logger = logging.getLogger(__name__)

FAIL_NODE = "fail"

StageFunc = Callable[[Any, dict[str, Any]], Awaitable[dict[str, Any]]]


def stage(name: str) -> Callable[[StageFunc], StageFunc]:
    def decorator(func: StageFunc) -> StageFunc:
        @functools.wraps(func)
        async def wrapper(self: Any, state: dict[str, Any]) -> dict[str, Any]:
            try:
                return await func(self, state)
            except Exception as exc:
                logger.error("Stage %s failed for session %s: %s", name, state.get("session_id"), exc, exc_info=True)
                return {"failure": {"stage": name, "reason": str(exc)}}

        return traceable(name=name)(wrapper)

    return decorator


def next_or_fail(next_node: str) -> Callable[[dict[str, Any]], str]:
    def route(state: dict[str, Any]) -> str:
        return FAIL_NODE if state.get("failure") else next_node

    return route


def chain_stages(graph: StateGraph, nodes: list[str]) -> None:
    """Wire nodes in order, diverting to the fail node after any failed stage."""
    graph.set_entry_point(nodes[0])
    for current, following in zip(nodes, [*nodes[1:], END]):
        graph.add_conditional_edges(
            current,
            next_or_fail(following),
            {following: following, FAIL_NODE: FAIL_NODE},
        )
    graph.add_edge(FAIL_NODE, END)
