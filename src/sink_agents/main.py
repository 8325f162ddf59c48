from __future__ import annotations

import argparse
import asyncio
import json
import logging

import uvicorn

from sink_agents.agents.base import AgentDeps
from sink_agents.agents.registry import build_agent
from sink_agents.api.app import create_app
from sink_agents.config import AGENT_NAMES, configure_langsmith_env, get_settings
from sink_agents.logging import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="OpenSink example agents")
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Serve one agent over HTTP")
    serve_parser.add_argument("agent", choices=AGENT_NAMES)
    serve_parser.add_argument("--host", default=None, help="Listen host (defaults to HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Listen port (defaults to PORT)")
    serve_parser.add_argument("--verbose", action="store_true", help="Enable debug logs")

    run_parser = subparsers.add_parser("run", help="Run one agent once and print the result")
    run_parser.add_argument("agent", choices=AGENT_NAMES)
    run_parser.add_argument("--session-id", default=None, help="Session to continue after approval")
    run_parser.add_argument("--request-id", default=None, help="Input request holding the approval")
    run_parser.add_argument("--verbose", action="store_true", help="Enable debug logs")

    return parser


def check_settings(agent_name: str) -> bool:
    missing = get_settings().missing_required_runtime_fields(agent_name)
    if missing:
        joined = ", ".join(missing)
        logger.error("Configuration error: missing required .env values: %s", joined)
        print(f"Configuration error: missing required .env values: {joined}")
        return False
    return True


async def run_once(args: argparse.Namespace) -> int:
    settings = get_settings()
    agent = build_agent(args.agent, AgentDeps.from_settings(settings))
    result = await agent.run(session_id=args.session_id, request_id=args.request_id)
    print(json.dumps(result.to_payload(), indent=2))
    return 0 if result.success else 1


def serve(args: argparse.Namespace) -> None:
    settings = get_settings()
    app = create_app(args.agent, settings=settings)
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Serving %s agent on http://%s:%s", args.agent, host, port)
    uvicorn.run(app, host=host, port=port, log_level="debug" if args.verbose else "info")


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command not in {"serve", "run"}:
        parser.print_help()
        return

    settings = get_settings()
    setup_logging(verbose=bool(args.verbose), level=settings.log_level)
    configure_langsmith_env(settings)

    if not check_settings(args.agent):
        raise SystemExit(2)

    if args.command == "serve":
        serve(args)
        return

    raise SystemExit(asyncio.run(run_once(args)))


if __name__ == "__main__":
    main()
