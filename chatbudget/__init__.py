"""
chatbudget — keeps a chat conversation within a model's context window.

Exports:
    Message, Budget          — data model
    Tokenizer                — tiktoken-backed token counter
    trim_to_budget           — drop oldest turns to fit a budget
    Summarizer               — summarization fallback
    TurnRunner, TurnResult   — per-turn orchestration
"""

from chatbudget.context import (
    Budget,
    Message,
    count_tokens_for_messages,
    trim_to_budget,
)
from chatbudget.errors import ChatBudgetError, ConfigurationError, TokenizerUnavailableError
from chatbudget.orchestrator import TurnResult, TurnRunner
from chatbudget.settings import AzureOpenAISettings, load_settings
from chatbudget.summarizer import Summarizer
from chatbudget.tokenizer import Tokenizer

__version__ = "0.1.0"

__all__ = [
    "AzureOpenAISettings",
    "Budget",
    "ChatBudgetError",
    "ConfigurationError",
    "Message",
    "Summarizer",
    "Tokenizer",
    "TokenizerUnavailableError",
    "TurnResult",
    "TurnRunner",
    "count_tokens_for_messages",
    "load_settings",
    "trim_to_budget",
]
