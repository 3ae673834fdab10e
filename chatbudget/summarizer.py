"""
Summarization fallback — collapses older history into one synthetic
assistant message via a secondary model call.

Failures never propagate: the caller falls back to the trimmed history.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from chatbudget.context import Message
from chatbudget.llm.client import ChatClient
from chatbudget.llm.prompts import (
    SUMMARY_MAX_TOKENS,
    SUMMARY_PREFIX,
    SUMMARY_SYSTEM_PROMPT,
    TRANSCRIPT_SEPARATOR,
)

logger = logging.getLogger(__name__)


def build_summary_request(older: Sequence[Message]) -> list[Message]:
    """System instruction plus the transcript of ``older`` as one user message."""
    transcript = TRANSCRIPT_SEPARATOR.join(f"{m.role.upper()}: {m.content}" for m in older)
    return [
        Message(role="system", content=SUMMARY_SYSTEM_PROMPT),
        Message(role="user", content=transcript),
    ]


class Summarizer:
    """Summarizes a contiguous run of older messages."""

    def __init__(self, client: ChatClient, max_tokens: int = SUMMARY_MAX_TOKENS) -> None:
        self._client = client
        self._max_tokens = max_tokens

    async def summarize(self, older: Sequence[Message]) -> Optional[Message]:
        """
        Compress ``older`` into a single summary message.

        Args:
            older: Messages to compress, oldest first.

        Returns:
            An assistant Message prefixed with the summary marker, or None if
            there was nothing to summarize or the request failed.
        """
        if not older:
            return None

        try:
            result = await self._client.complete(
                build_summary_request(older),
                temperature=0.0,
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            logger.warning("Summarization request raised; continuing without summary: %s", exc)
            return None

        if not result.ok:
            logger.warning(
                "Summarization failed (%s): %s", result.error_kind.value, result.error
            )
            return None

        text = result.content.strip()
        if not text:
            logger.warning("Summarization returned empty content")
            return None

        logger.info("Summarized %d message(s) into %d chars", len(older), len(text))
        return Message(role="assistant", content=SUMMARY_PREFIX + text)
