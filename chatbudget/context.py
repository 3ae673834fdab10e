"""
Context window management — keeps a conversation within a prompt token
budget while preserving the system message and the latest turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Protocol, Sequence, get_args

logger = logging.getLogger(__name__)

Role = Literal["system", "user", "assistant"]
ROLES: tuple[str, ...] = get_args(Role)

# Approximates the JSON/role framing the tokenizer does not see. Tunable.
PER_MESSAGE_OVERHEAD = 6

MIN_REPLY_RESERVE = 16


class TokenCounter(Protocol):
    def count(self, text: str | None) -> int: ...


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role!r}")

    def to_dict(self) -> dict:
        """Wire format for the chat completions API."""
        return {"role": self.role, "content": self.content}


Conversation = list[Message]


@dataclass(frozen=True)
class Budget:
    """Context window split between the outgoing prompt and the reply."""

    max_context_tokens: int
    reply_reserve: int

    @classmethod
    def create(cls, max_context_tokens: int, reply_reserve: int) -> "Budget":
        """Build a budget, clamping a reply reserve that would swallow the window."""
        if reply_reserve >= max_context_tokens:
            clamped = max(MIN_REPLY_RESERVE, max_context_tokens // 4)
            logger.warning(
                "Reply reserve %d >= context window %d; clamping to %d",
                reply_reserve,
                max_context_tokens,
                clamped,
            )
            reply_reserve = clamped
        return cls(max_context_tokens=max_context_tokens, reply_reserve=reply_reserve)

    @property
    def prompt_budget(self) -> int:
        return max(0, self.max_context_tokens - self.reply_reserve)


def count_tokens_for_messages(messages: Sequence[Message], tokenizer: TokenCounter) -> int:
    """Token cost of a message list: overhead + role + content, per message."""
    return sum(
        PER_MESSAGE_OVERHEAD + tokenizer.count(m.role) + tokenizer.count(m.content)
        for m in messages
    )


def trim_to_budget(
    messages: Sequence[Message],
    budget: int,
    tokenizer: TokenCounter,
) -> tuple[Conversation, bool]:
    """
    Drop the oldest non-system messages until the sequence fits ``budget``.

    Index 0 (the system message) is pinned and at least two messages always
    remain, so the result may still be over budget. Returns a new list and
    whether anything was removed.
    """
    trimmed = list(messages)
    total = count_tokens_for_messages(trimmed, tokenizer)
    removed = 0
    while total > budget and len(trimmed) > 2:
        total -= count_tokens_for_messages([trimmed.pop(1)], tokenizer)
        removed += 1

    if removed:
        logger.debug("Trimmed %d message(s) to fit budget=%d", removed, budget)
    return trimmed, removed > 0
