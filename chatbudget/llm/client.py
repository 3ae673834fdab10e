"""
Azure OpenAI chat-completions client.

Wraps the openai SDK and converts every outcome into a CompletionResult, so
callers branch on ``result.ok`` instead of catching exceptions.

Usage:
    client = ChatClient(settings)
    result = await client.complete(messages, temperature=0.0, max_tokens=1000)
    if result.ok:
        print(result.content)
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import openai

from chatbudget.context import Message
from chatbudget.settings import AzureOpenAISettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


class ErrorKind(enum.Enum):
    """Why a completion request produced no usable reply."""

    HTTP_STATUS = "http_status"
    NETWORK = "network"
    EMPTY_RESPONSE = "empty_response"
    UNEXPECTED = "unexpected"


@dataclass
class CompletionResult:
    """Outcome of one chat-completions request."""

    status_code: Optional[int] = None
    content: str = ""
    body: str = ""
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    error_kind: Optional[ErrorKind] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        """True if the request succeeded and returned a choice."""
        return self.error_kind is None

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        error: str,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> "CompletionResult":
        return cls(status_code=status_code, body=body, error_kind=kind, error=error)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ChatClient:
    """
    Chat-completions client for one Azure OpenAI deployment.

    The SDK client is created once and reused for every request. Pass
    ``client`` to supply a preconfigured (or fake) SDK client.
    """

    def __init__(self, settings: AzureOpenAISettings, client: Any = None) -> None:
        self._deployment = settings.deployment
        self._client = client or openai.AzureOpenAI(
            azure_endpoint=settings.endpoint,
            api_key=settings.api_key,
            api_version=settings.api_version,
        )
        logger.info(
            "ChatClient using endpoint=%s deployment=%s",
            settings.endpoint,
            settings.deployment,
        )

    async def complete(
        self,
        messages: Sequence[Message],
        temperature: float = 0.0,
        max_tokens: int = 1_000,
    ) -> CompletionResult:
        """
        Send a completion request.

        Args:
            messages: Conversation to send, oldest first.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in the reply.

        Returns:
            CompletionResult; failures are reported through ``error_kind``.
        """
        kwargs: dict[str, Any] = {
            "model": self._deployment,
            "messages": [m.to_dict() for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        def _sync_call():
            return self._client.chat.completions.create(**kwargs)

        loop = asyncio.get_event_loop()
        try:
            raw = await loop.run_in_executor(None, _sync_call)
        except openai.APIStatusError as exc:
            logger.warning("Chat completion failed with HTTP %s", exc.status_code)
            return CompletionResult.failure(
                ErrorKind.HTTP_STATUS,
                str(exc),
                status_code=exc.status_code,
                body=_error_body(exc),
            )
        except openai.APIConnectionError as exc:
            logger.warning("Chat completion network error: %s", exc)
            return CompletionResult.failure(ErrorKind.NETWORK, str(exc))
        except openai.OpenAIError as exc:
            logger.warning("Chat completion error: %s", exc)
            return CompletionResult.failure(ErrorKind.UNEXPECTED, str(exc))

        return _to_result(raw)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_result(raw: Any) -> CompletionResult:
    body = raw.model_dump_json(indent=2)
    if not raw.choices:
        return CompletionResult.failure(
            ErrorKind.EMPTY_RESPONSE, "Response contained no choices", status_code=200, body=body
        )

    usage = raw.usage
    return CompletionResult(
        status_code=200,
        content=raw.choices[0].message.content or "",
        body=body,
        prompt_tokens=usage.prompt_tokens if usage else None,
        completion_tokens=usage.completion_tokens if usage else None,
    )


def _error_body(exc: openai.APIStatusError) -> str:
    """Pretty-print the error body when it is JSON, raw text otherwise."""
    if exc.body is not None:
        try:
            return json.dumps(exc.body, indent=2)
        except (TypeError, ValueError):
            pass
    return exc.response.text
