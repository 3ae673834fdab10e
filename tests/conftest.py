"""
Shared fixtures for the chatbudget test suite.

Token counts come from a word-count tokenizer so budgets can be reasoned
about by hand; no tiktoken encoding download is needed.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from chatbudget.context import Message
from chatbudget.llm.client import CompletionResult, ErrorKind
from chatbudget.settings import AzureOpenAISettings


class WordTokenizer:
    """One token per whitespace-separated word."""

    def count(self, text):
        return len(text.split()) if text else 0


def words(n: int, word: str = "tok") -> str:
    return " ".join([word] * n)


def ok(content: str) -> CompletionResult:
    return CompletionResult(status_code=200, content=content, body='{"id": "chatcmpl-1"}')


def failed(kind: ErrorKind = ErrorKind.HTTP_STATUS, status_code: int | None = 500) -> CompletionResult:
    return CompletionResult.failure(kind, "boom", status_code=status_code)


@pytest.fixture
def tokenizer():
    return WordTokenizer()


@pytest.fixture
def settings():
    return AzureOpenAISettings(
        endpoint="https://example.openai.azure.com",
        deployment="gpt-4o",
        api_key="abcde-secret-key-vwxyz",
    )


@pytest.fixture
def system_message():
    return Message(role="system", content="You are a helpful assistant.")


@pytest.fixture
def chat_client():
    """Stand-in for ChatClient whose complete() is an AsyncMock."""
    client = AsyncMock()
    client.complete.return_value = ok("Hello!")
    return client
