"""
Per-turn orchestration.

One turn: append the user message, trim to the prompt budget, fall back to
summarizing older history if trimming is not enough, then dispatch. The
caller's conversation is never modified; all work happens on a copy.

Usage:
    runner = TurnRunner(client, tokenizer, settings.budget(), ConsoleDiagnostics())
    result = await runner.run_turn(history, Message("user", "Hi"))
    history = result.conversation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from chatbudget.context import (
    Budget,
    Conversation,
    Message,
    TokenCounter,
    count_tokens_for_messages,
    trim_to_budget,
)
from chatbudget.diagnostics import Diagnostics, NullDiagnostics
from chatbudget.llm.client import ChatClient, CompletionResult
from chatbudget.summarizer import Summarizer

logger = logging.getLogger(__name__)

# Most recent messages kept verbatim when older history is summarized.
RECENT_TURNS_KEPT = 4


@dataclass
class TurnResult:
    """Outcome of one chat turn."""

    messages: Conversation
    prompt_tokens: int
    prompt_budget: int
    reply: CompletionResult
    trimmed: bool = False
    summarized: bool = False
    conversation: Conversation = field(default_factory=list)

    @property
    def over_budget(self) -> bool:
        """The dispatched prompt was estimated to exceed the budget."""
        return self.prompt_tokens > self.prompt_budget


class TurnRunner:
    """Runs budgeted chat turns against one deployment."""

    def __init__(
        self,
        client: ChatClient,
        tokenizer: TokenCounter,
        budget: Budget,
        diagnostics: Optional[Diagnostics] = None,
        temperature: float = 0.0,
        summarizer: Optional[Summarizer] = None,
    ) -> None:
        self.client = client
        self.tokenizer = tokenizer
        self.budget = budget
        self.diagnostics = diagnostics or NullDiagnostics()
        self.temperature = temperature
        self.summarizer = summarizer or Summarizer(client)

    async def fit(self, working: Sequence[Message]) -> tuple[Conversation, bool, bool]:
        """
        Bring ``working`` within the prompt budget as far as possible.

        Returns:
            (messages, trimmed, summarized). The messages may still exceed
            the budget when neither trimming nor summarizing was enough.
        """
        prompt_budget = self.budget.prompt_budget
        messages, trimmed = trim_to_budget(working, prompt_budget, self.tokenizer)

        if count_tokens_for_messages(messages, self.tokenizer) <= prompt_budget:
            return messages, trimmed, False

        older = list(working[1:-RECENT_TURNS_KEPT])
        recent = list(working[-RECENT_TURNS_KEPT:])
        logger.info(
            "Over budget after trimming; summarizing %d older message(s)", len(older)
        )
        summary = await self.summarizer.summarize(older)
        if summary is None:
            return messages, trimmed, False

        rebuilt = [working[0], summary, *recent]
        messages, _ = trim_to_budget(rebuilt, prompt_budget, self.tokenizer)
        summarized = summary in messages
        if not summarized:
            logger.warning(
                "Summary of %d message(s) was trimmed away; prompt is %d message(s)",
                len(older),
                len(messages),
            )
        return messages, True, summarized

    async def run_turn(
        self,
        conversation: Sequence[Message],
        user_message: Message,
    ) -> TurnResult:
        """
        Run one chat turn.

        Args:
            conversation: Existing history; index 0 is the system message.
            user_message: The new user turn.

        Returns:
            TurnResult with the dispatched messages and the reply. A failed
            dispatch is reported on ``reply`` rather than raised.
        """
        working = [*conversation, user_message]
        messages, trimmed, summarized = await self.fit(working)

        prompt_budget = self.budget.prompt_budget
        prompt_tokens = count_tokens_for_messages(messages, self.tokenizer)
        if prompt_tokens > prompt_budget:
            logger.warning(
                "Prompt still over budget: %d > %d tokens; sending anyway",
                prompt_tokens,
                prompt_budget,
            )
        self.diagnostics.token_counts(prompt_tokens, self.budget.reply_reserve, prompt_budget)

        reply = await self.client.complete(
            messages,
            temperature=self.temperature,
            max_tokens=self.budget.reply_reserve,
        )
        self.diagnostics.response(reply)

        final = list(messages)
        if reply.ok:
            final.append(Message(role="assistant", content=reply.content))
        else:
            self.diagnostics.failure(f"Chat call failed: {reply.error}")

        return TurnResult(
            messages=messages,
            prompt_tokens=prompt_tokens,
            prompt_budget=prompt_budget,
            reply=reply,
            trimmed=trimmed,
            summarized=summarized,
            conversation=final,
        )
