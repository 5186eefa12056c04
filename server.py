"""Run the chat gateway HTTP server."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

import uvicorn

from chat_gateway import ChatConfig
from chat_gateway.api import create_app
from chat_gateway.utils import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None, config: Optional[ChatConfig] = None) -> argparse.Namespace:
    defaults = config or ChatConfig()
    parser = argparse.ArgumentParser(description="Proxy chat messages to Gemini with in-memory sessions.")
    parser.add_argument("--host", default="0.0.0.0", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=defaults.port, help="Port to bind (env PORT).")
    parser.add_argument("--log_dir", default=defaults.log_dir, help="Directory for application logs.")
    parser.add_argument("--model", default=defaults.llm.model, help="Gemini model name.")
    parser.add_argument(
        "--request_timeout",
        type=int,
        default=defaults.llm.request_timeout,
        help="Timeout for provider calls (seconds).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    config = ChatConfig.from_env()
    args = parse_args(argv, config)
    config.port = args.port
    config.log_dir = args.log_dir
    config.llm.model = args.model
    config.llm.request_timeout = args.request_timeout

    setup_logging(config.log_dir, logging.INFO)
    app = create_app(config)
    logger.info("Middleware server running on port %d", config.port)
    logger.info("API endpoint: http://localhost:%d/api/chat", config.port)
    uvicorn.run(app, host=args.host, port=config.port)


if __name__ == "__main__":
    main()
