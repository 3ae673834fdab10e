"""
Azure OpenAI settings.

Values come from the "AzureOpenAi" section of an optional JSON file
(appsettings.json by default), overlaid by environment variables:

    AZURE_OPENAI_ENDPOINT                 (required)
    AZURE_OPENAI_DEPLOYMENT               (required)
    AZURE_OPENAI_API_KEY                  (required)
    AZURE_OPENAI_EMBEDDINGS_DEPLOYMENT
    AZURE_OPENAI_API_VERSION              (default: 2024-06-01)
    AZURE_OPENAI_MAX_CONTEXT_TOKENS       (default: 128000)
    AZURE_OPENAI_REPLY_MAX_TOKENS         (default: 1000)
    AZURE_OPENAI_TOKENIZER_ENCODING       (default: o200k_base)
    AZURE_OPENAI_TEMPERATURE              (default: 0.0)

Usage:
    settings = load_settings()
    budget = settings.budget()
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from chatbudget.context import Budget
from chatbudget.errors import ConfigurationError
from chatbudget.tokenizer import DEFAULT_ENCODING

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "appsettings.json"
SECTION = "AzureOpenAi"
DEFAULT_API_VERSION = "2024-06-01"

# JSON key -> environment variable
_ENV_KEYS = {
    "Endpoint": "AZURE_OPENAI_ENDPOINT",
    "Deployment": "AZURE_OPENAI_DEPLOYMENT",
    "EmbeddingsDeployment": "AZURE_OPENAI_EMBEDDINGS_DEPLOYMENT",
    "ApiKey": "AZURE_OPENAI_API_KEY",
    "ApiVersion": "AZURE_OPENAI_API_VERSION",
    "MaxContextTokens": "AZURE_OPENAI_MAX_CONTEXT_TOKENS",
    "ReplyMaxTokens": "AZURE_OPENAI_REPLY_MAX_TOKENS",
    "TokenizerEncoding": "AZURE_OPENAI_TOKENIZER_ENCODING",
    "Temperature": "AZURE_OPENAI_TEMPERATURE",
}

REQUIRED_KEYS = ("Endpoint", "Deployment", "ApiKey")


@dataclass(frozen=True)
class AzureOpenAISettings:
    """Connection and budgeting settings for one Azure OpenAI deployment."""

    endpoint: str
    deployment: str
    api_key: str
    embeddings_deployment: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    max_context_tokens: int = 128_000
    reply_max_tokens: int = 1_000
    tokenizer_encoding: str = DEFAULT_ENCODING
    temperature: float = 0.0

    def budget(self) -> Budget:
        """Prompt/reply split with the reply reserve clamped if needed."""
        return Budget.create(self.max_context_tokens, self.reply_max_tokens)

    def masked_api_key(self) -> str:
        """First and last five characters of the key, for console output."""
        key = self.api_key
        return f"{key[:5]}...{key[max(0, len(key) - 5):]}"


def load_settings(
    path: str | Path | None = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AzureOpenAISettings:
    """
    Load settings from a JSON file and environment variables.

    Args:
        path: Settings file. Defaults to ./appsettings.json; a missing
              default file is fine, a missing explicit path is not.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        AzureOpenAISettings.

    Raises:
        ConfigurationError: If a required value is missing or the file is invalid.
    """
    environ = os.environ if environ is None else environ
    raw = _read_section(path)

    for key, env_name in _ENV_KEYS.items():
        value = environ.get(env_name)
        if value:
            raw[key] = value

    for key in REQUIRED_KEYS:
        if not str(raw.get(key) or "").strip():
            raise ConfigurationError(f"Missing required setting {SECTION}:{key}", key=key)

    api_version = str(raw.get("ApiVersion") or "").strip() or DEFAULT_API_VERSION
    defaults = AzureOpenAISettings(endpoint="", deployment="", api_key="")

    settings = AzureOpenAISettings(
        endpoint=str(raw["Endpoint"]).strip().rstrip("/"),
        deployment=str(raw["Deployment"]).strip(),
        api_key=str(raw["ApiKey"]).strip(),
        embeddings_deployment=raw.get("EmbeddingsDeployment") or None,
        api_version=api_version,
        max_context_tokens=_parse_int(raw.get("MaxContextTokens"), defaults.max_context_tokens),
        reply_max_tokens=_parse_int(raw.get("ReplyMaxTokens"), defaults.reply_max_tokens),
        tokenizer_encoding=str(raw.get("TokenizerEncoding") or defaults.tokenizer_encoding),
        temperature=_parse_float(raw.get("Temperature"), defaults.temperature),
    )
    logger.info(
        "Settings loaded: deployment=%s api_version=%s max_context=%d reply_max=%d",
        settings.deployment,
        settings.api_version,
        settings.max_context_tokens,
        settings.reply_max_tokens,
    )
    return settings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _read_section(path: str | Path | None) -> dict[str, Any]:
    explicit = path is not None
    settings_file = Path(path) if explicit else Path(DEFAULT_SETTINGS_FILE)

    if not settings_file.exists():
        if explicit:
            raise ConfigurationError(f"Settings file not found: {settings_file}")
        logger.debug("No %s found; using environment only", settings_file)
        return {}

    try:
        with open(settings_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {settings_file}: {exc}") from exc

    section = data.get(SECTION, {}) if isinstance(data, dict) else {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{SECTION} in {settings_file} must be an object")
    return dict(section)


def _parse_int(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _parse_float(value: Any, fallback: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback
