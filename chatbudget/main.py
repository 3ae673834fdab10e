"""
chatbudget entry point.

Loads settings, prints the connection header and runs one budgeted turn
over a small sample conversation.

Run directly:
    python -m chatbudget
    # or
    chatbudget

Environment variables:
    AZURE_OPENAI_*        — see chatbudget.settings
    CHATBUDGET_SETTINGS   — Path to the settings JSON (default: appsettings.json)
    CHATBUDGET_LOG_LEVEL  — Logging level: DEBUG/INFO/WARNING (default: INFO)
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from chatbudget.context import Message
from chatbudget.diagnostics import ConsoleDiagnostics
from chatbudget.errors import ChatBudgetError, ConfigurationError
from chatbudget.llm.client import ChatClient
from chatbudget.llm.prompts import SAMPLE_HISTORY, SAMPLE_SYSTEM_PROMPT, SAMPLE_USER_TURN
from chatbudget.orchestrator import TurnRunner
from chatbudget.settings import load_settings
from chatbudget.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger with a readable format."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def sample_conversation() -> list[Message]:
    """System prompt plus a short prior exchange."""
    history = [Message(role="system", content=SAMPLE_SYSTEM_PROMPT)]
    history.extend(Message(role=role, content=content) for role, content in SAMPLE_HISTORY)
    return history


async def run(settings_path: str | None = None) -> int:
    diagnostics = ConsoleDiagnostics()

    try:
        settings = load_settings(settings_path)
        tokenizer = Tokenizer(settings.tokenizer_encoding)
    except ConfigurationError as exc:
        diagnostics.failure(f"Configuration error: {exc.message}")
        logger.error("%s", exc.user_hint)
        return 1
    except ChatBudgetError as exc:
        diagnostics.failure(f"Startup failed: {exc.message}")
        logger.error("%s", exc.user_hint)
        return 1

    budget = settings.budget()
    diagnostics.settings_header(settings, budget)

    runner = TurnRunner(
        client=ChatClient(settings),
        tokenizer=tokenizer,
        budget=budget,
        diagnostics=diagnostics,
        temperature=settings.temperature,
    )

    diagnostics.console.rule("Chat Completion (with history management)")
    result = await runner.run_turn(
        sample_conversation(), Message(role="user", content=SAMPLE_USER_TURN)
    )
    logger.info(
        "Turn finished: ok=%s trimmed=%s summarized=%s over_budget=%s",
        result.reply.ok,
        result.trimmed,
        result.summarized,
        result.over_budget,
    )
    return 0


def main() -> None:
    """Console entry point."""
    setup_logging(os.environ.get("CHATBUDGET_LOG_LEVEL", "INFO"))
    sys.exit(asyncio.run(run(os.environ.get("CHATBUDGET_SETTINGS"))))


if __name__ == "__main__":
    main()
