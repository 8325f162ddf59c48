from __future__ import annotations

import logging
from typing import Any

from langgraph.graph import END, StateGraph

from sink_agents.agents.base import BaseAgent
from sink_agents.graph.stages import FAIL_NODE, chain_stages, next_or_fail, stage
from sink_agents.graph.state import TradeApprovalState, TradingState
from sink_agents.schemas.config import NewsAgentConfig
from sink_agents.schemas.news import (
    ExecutedTrade,
    RawArticle,
    parse_articles,
    parse_trades,
    serialize_models,
)
from sink_agents.schemas.opensink import SessionStatus
from sink_agents.schemas.results import NO_RESPONSE_FOUND, RunResult
from sink_agents.services.analysis import propose_trades, select_top_articles
from sink_agents.services.approval import (
    APPROVAL_REQUEST_KEY,
    approval_notes,
    assign_approval_keys,
    build_trade_approval_schema,
    execute_trades,
    partition_trades,
)
from sink_agents.services.sink_items import article_items, executed_trade_items

logger = logging.getLogger(__name__)

AWAITING_APPROVAL = "awaiting_approval"


class TradingAgent(BaseAgent):
    """
    Proposes trades from the day's financial news and executes the ones a human approves.

    A fresh run ends with the session still running and an input request
    waiting for a decision. The follow-up call carries the session and
    request ids and resumes through the approval workflow.
    """

    name = "trading"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._approval_workflow: Any = None

    def parse_config(self, value: dict[str, Any]) -> NewsAgentConfig:
        return NewsAgentConfig.model_validate(value)

    def initial_session_state(self, config: NewsAgentConfig) -> dict[str, Any]:
        return {"phase": "analyzing_news"}

    # -- proposal workflow ---------------------------------------------------

    def build_workflow(self) -> Any:
        graph = StateGraph(TradingState)
        graph.add_node("fetch_news", self.fetch_news)
        graph.add_node("select_articles", self.select_articles)
        graph.add_node("propose_trades", self.propose)
        graph.add_node("request_approval", self.request_approval)
        graph.add_node("store_articles", self.store_articles)
        graph.add_node(FAIL_NODE, self.mark_failed)
        chain_stages(graph, ["fetch_news", "select_articles", "propose_trades", "request_approval", "store_articles"])
        return graph.compile()

    @stage("fetch_news")
    async def fetch_news(self, state: TradingState) -> TradingState:
        logger.info("Fetching top %s financial news...", state["config"].items_to_fetch)
        articles = await self.deps.news.fetch_financial_news()
        return {"raw_articles": [article.model_dump(mode="json", by_alias=True) for article in articles]}

    @stage("select_articles")
    async def select_articles(self, state: TradingState) -> TradingState:
        raw_articles = [RawArticle.model_validate(item) for item in state.get("raw_articles", [])]
        selected = await select_top_articles(self.deps.llm, raw_articles, state["config"].items_to_fetch)
        logger.info("Selected %s top articles out of %s", len(selected), len(raw_articles))

        articles = serialize_models(selected)
        await self.opensink.update_session(
            state["session_id"],
            state={"phase": "proposing_trades", "articles": articles},
        )
        return {"articles": articles}

    @stage("propose_trades")
    async def propose(self, state: TradingState) -> TradingState:
        articles = state.get("articles", [])
        trades = assign_approval_keys(await propose_trades(self.deps.llm, parse_articles(articles)))
        logger.info("Proposed %s trades", len(trades))
        for index, trade in enumerate(trades, start=1):
            logger.info("  %s. %s - %s", index, trade.label, trade.reason)

        proposed = serialize_models(trades)
        await self.opensink.update_session(
            state["session_id"],
            state={"phase": AWAITING_APPROVAL, "articles": articles, "proposed_trades": proposed},
        )
        return {"proposed_trades": proposed}

    @stage("request_approval")
    async def request_approval(self, state: TradingState) -> TradingState:
        trades = parse_trades(state.get("proposed_trades"))
        request = await self.opensink.create_input_request(
            session_id=state["session_id"],
            agent_id=self.agent_id,
            key=APPROVAL_REQUEST_KEY,
            title=f"Approve {len(trades)} proposed trades",
            message="Please review each proposed trade and approve or reject individually.",
            schema=build_trade_approval_schema(trades),
        )
        logger.info("Created input request %s - waiting for approval", request.id)
        return {"input_request_id": request.id}

    @stage("store_articles")
    async def store_articles(self, state: TradingState) -> TradingState:
        items = article_items(self.settings.news_sink_id, parse_articles(state.get("articles")))
        await self.opensink.create_sink_items(items)
        logger.info("Created %s news items in the news sink", len(items))
        return {}

    def build_result(self, final_state: dict[str, Any]) -> RunResult:
        return RunResult.ok(
            session_id=final_state["session_id"],
            input_request_id=final_state.get("input_request_id"),
            articles=final_state.get("articles", []),
            proposed_trades=final_state.get("proposed_trades", []),
            status=AWAITING_APPROVAL,
        )

    # -- approval workflow ---------------------------------------------------

    @property
    def approval_workflow(self) -> Any:
        if self._approval_workflow is None:
            self._approval_workflow = self.build_approval_workflow()
        return self._approval_workflow

    def build_approval_workflow(self) -> Any:
        graph = StateGraph(TradeApprovalState)
        graph.add_node("load_decision", self.load_decision)
        graph.add_node("record_rejection", self.record_rejection)
        graph.add_node("execute_trades", self.execute_approved)
        graph.add_node("store_trades", self.store_trades)
        graph.add_node(FAIL_NODE, self.mark_failed)

        graph.set_entry_point("load_decision")
        graph.add_conditional_edges(
            "load_decision",
            self.route_decision,
            {"record_rejection": "record_rejection", "execute_trades": "execute_trades", END: END, FAIL_NODE: FAIL_NODE},
        )
        graph.add_conditional_edges("record_rejection", next_or_fail(END), {END: END, FAIL_NODE: FAIL_NODE})
        graph.add_conditional_edges(
            "execute_trades",
            next_or_fail("store_trades"),
            {"store_trades": "store_trades", FAIL_NODE: FAIL_NODE},
        )
        graph.add_conditional_edges("store_trades", next_or_fail(END), {END: END, FAIL_NODE: FAIL_NODE})
        graph.add_edge(FAIL_NODE, END)
        return graph.compile()

    @staticmethod
    def route_decision(state: TradeApprovalState) -> str:
        if state.get("failure"):
            return FAIL_NODE
        if state.get("response") is None:
            return END
        if not state.get("approved_trades"):
            return "record_rejection"
        return "execute_trades"

    async def continue_session(self, session_id: str, request_id: str) -> RunResult:
        logger.info("Continuing workflow - session %s, request %s", session_id, request_id)
        final_state = await self.approval_workflow.ainvoke(
            {"session_id": session_id, "request_id": request_id, "failure": None}
        )

        failure = final_state.get("failure")
        if failure:
            return RunResult.failed(failure["reason"])
        if final_state.get("response") is None:
            return RunResult.failed(NO_RESPONSE_FOUND)

        rejected = final_state.get("rejected_trades", [])
        notes = final_state.get("notes")
        if final_state.get("outcome") == "rejected":
            return RunResult.ok(status="rejected", rejected_count=len(rejected), rejected_trades=rejected, notes=notes)

        executed = final_state.get("executed_trades", [])
        return RunResult.ok(
            status="executed",
            executed_count=len(executed),
            rejected_count=len(rejected),
            trades=executed,
            rejected_trades=rejected,
            notes=notes,
        )

    @stage("load_decision")
    async def load_decision(self, state: TradeApprovalState) -> TradeApprovalState:
        session = await self.opensink.get_session(state["session_id"])
        request = await self.opensink.get_input_request(state["request_id"])
        if request.response is None:
            logger.warning("Input request %s has no response yet", state["request_id"])
            return {"response": None}

        trades = parse_trades(session.state_or_empty.get("proposed_trades"))
        approved, rejected = partition_trades(trades, request.response)
        logger.info("%s trades approved, %s rejected", len(approved), len(rejected))
        return {
            "session_state": session.state_or_empty,
            "response": request.response,
            "approved_trades": serialize_models(approved),
            "rejected_trades": serialize_models(rejected),
            "notes": approval_notes(request.response),
        }

    @stage("record_rejection")
    async def record_rejection(self, state: TradeApprovalState) -> TradeApprovalState:
        logger.info("No trades were approved")
        await self.opensink.update_session(
            state["session_id"],
            status=SessionStatus.COMPLETED,
            state={
                **state.get("session_state", {}),
                "phase": "rejected",
                "rejected_trades": state.get("rejected_trades", []),
                "notes": state.get("notes"),
            },
        )
        return {"outcome": "rejected"}

    @stage("execute_trades")
    async def execute_approved(self, state: TradeApprovalState) -> TradeApprovalState:
        await self.opensink.update_session(
            state["session_id"],
            state={**state.get("session_state", {}), "phase": "executing_trades"},
        )
        executed = execute_trades(parse_trades(state.get("approved_trades")))
        for index, trade in enumerate(executed, start=1):
            logger.info("  %s. %s - EXECUTED", index, trade.label)
        return {"executed_trades": serialize_models(executed)}

    @stage("store_trades")
    async def store_trades(self, state: TradeApprovalState) -> TradeApprovalState:
        executed = [ExecutedTrade.model_validate(item) for item in state.get("executed_trades", [])]
        await self.opensink.create_sink_items(
            executed_trade_items(self.settings.trades_sink_id, executed, notes=state.get("notes"))
        )
        await self.opensink.update_session(
            state["session_id"],
            status=SessionStatus.COMPLETED,
            state={
                **state.get("session_state", {}),
                "phase": "completed",
                "executed_trades": state.get("executed_trades", []),
                "rejected_trades": state.get("rejected_trades", []),
                "notes": state.get("notes"),
            },
        )
        return {"outcome": "completed"}
