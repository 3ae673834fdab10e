"""
Exception types for chatbudget.

Only pre-flight problems are raised. Budget overruns, summarization failures
and dispatch failures travel as result objects instead.
"""

from __future__ import annotations

from typing import Any, Optional


class ChatBudgetError(Exception):
    """Base class for all chatbudget errors."""

    def __init__(
        self,
        message: str,
        user_hint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.user_hint = user_hint or "An internal error occurred."
        self.details = details or {}


class ConfigurationError(ChatBudgetError):
    """Raised at startup when settings are missing or invalid."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(
            message,
            user_hint="Check appsettings.json and the AZURE_OPENAI_* environment variables.",
            details={"key": key} if key else None,
        )
        self.key = key


class TokenizerUnavailableError(ChatBudgetError):
    """Raised at startup when a known encoding cannot be loaded (e.g. download failed)."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            user_hint="tiktoken downloads encodings on first use; check network access "
            "or set TIKTOKEN_CACHE_DIR to a pre-populated cache.",
        )
