from __future__ import annotations

from sink_agents.agents.base import AgentDeps, BaseAgent
from sink_agents.agents.finance_news import FinanceNewsAgent
from sink_agents.agents.marketing import MarketingAgent
from sink_agents.agents.trading import TradingAgent

AGENT_CLASSES: dict[str, type[BaseAgent]] = {
    FinanceNewsAgent.name: FinanceNewsAgent,
    TradingAgent.name: TradingAgent,
    MarketingAgent.name: MarketingAgent,
}


def build_agent(agent_name: str, deps: AgentDeps) -> BaseAgent:
    try:
        agent_class = AGENT_CLASSES[agent_name]
    except KeyError as exc:
        known = ", ".join(sorted(AGENT_CLASSES))
        raise ValueError(f"Unknown agent '{agent_name}'. Known agents: {known}") from exc
    return agent_class(deps)
