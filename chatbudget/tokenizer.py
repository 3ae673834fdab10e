"""
Token counting backed by tiktoken.

The encoding is resolved once, when the Tokenizer is built. An unknown
encoding name is a configuration problem and surfaces there, never on a
per-call basis.

Usage:
    tok = Tokenizer("o200k_base")
    tok.count("Hello there")  # -> 2
"""

from __future__ import annotations

import logging
from typing import Optional

import tiktoken

from chatbudget.errors import ConfigurationError, TokenizerUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "o200k_base"  # GPT-4o family


class Tokenizer:
    """Counts tokens for text under a fixed tiktoken encoding."""

    def __init__(self, encoding_name: str = DEFAULT_ENCODING) -> None:
        """
        Resolve the encoding.

        Args:
            encoding_name: tiktoken encoding name, e.g. "o200k_base" or "cl100k_base".

        Raises:
            ConfigurationError: If tiktoken does not know the encoding.
            TokenizerUnavailableError: If the encoding file cannot be fetched.
        """
        try:
            self._encoding = tiktoken.get_encoding(encoding_name)
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(
                f"Unknown tokenizer encoding: {encoding_name!r}",
                key="TokenizerEncoding",
            ) from exc
        except Exception as exc:
            raise TokenizerUnavailableError(
                f"Could not load tokenizer encoding {encoding_name!r}: {exc}"
            ) from exc

        self.encoding_name = encoding_name
        logger.debug("Tokenizer using encoding=%s", encoding_name)

    def count(self, text: Optional[str]) -> int:
        """
        Count tokens in a string.

        Special-token lookalikes such as "<|endoftext|>" are encoded as plain
        text so that arbitrary user content never raises.
        """
        if not text:
            return 0
        return len(self._encoding.encode(text, disallowed_special=()))

    def __repr__(self) -> str:
        return f"Tokenizer({self.encoding_name!r})"
