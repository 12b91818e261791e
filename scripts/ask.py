"""
Smoke test of the full query path: retrieve, then stream the answer to stdout.

Example:
    python -m scripts.ask --question "Who won the 2023 drivers' championship?"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List

from f1gpt.config import load_settings, setup_logging
from f1gpt.models.schemas import TextMessage
from f1gpt.rag.pipeline import ChatService
from f1gpt.services import build_services


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ask one question through the RAG pipeline.")
    parser.add_argument("--question", "-q", required=True, help="Question to ask")
    parser.add_argument("--show-context", action="store_true", help="Print the retrieved context first")
    return parser.parse_args(argv)


async def ask(service: ChatService, question: str, show_context: bool = False) -> None:
    messages = [TextMessage(role="user", content=question)]
    prepared = await asyncio.to_thread(service.prepare, messages)
    if show_context:
        print("=== Context ===")
        print(prepared.context or "<empty>")
        print("=== Answer ===")

    tokens = await service.stream_answer(messages, prepared)
    async for token in tokens:
        print(token, end="", flush=True)
    print()


def main(argv: List[str] | None = None) -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args(argv)

    try:
        services = build_services(load_settings())
        asyncio.run(ask(services.chat_service(logger_=logger), args.question, args.show_context))
    except Exception:
        logger.exception("Ask failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
