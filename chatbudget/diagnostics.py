"""
Console diagnostics for chat turns.

The orchestrator reports through a Diagnostics sink handed to it, so
tests and embedders can swap the console for something else.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Optional, Protocol

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from chatbudget.context import Budget
    from chatbudget.llm.client import CompletionResult
    from chatbudget.settings import AzureOpenAISettings


class Diagnostics(Protocol):
    def settings_header(self, settings: "AzureOpenAISettings", budget: "Budget") -> None: ...

    def token_counts(self, prompt_tokens: int, reply_max_tokens: int, prompt_budget: int) -> None: ...

    def response(self, result: "CompletionResult") -> None: ...

    def failure(self, message: str) -> None: ...


class ConsoleDiagnostics:
    """Prints diagnostics to the terminal with rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def settings_header(self, settings: "AzureOpenAISettings", budget: "Budget") -> None:
        c = self.console
        c.print(f"[bold]Azure OpenAI Endpoint:[/bold] {escape(settings.endpoint)}")
        c.print(f"[bold]Azure OpenAI Deployment:[/bold] {escape(settings.deployment)}")
        c.print(f"[bold]Azure OpenAI ApiKey:[/bold] {escape(settings.masked_api_key())}")
        c.print(f"[bold]API Version:[/bold] {escape(settings.api_version)}")
        c.print(
            f"MaxContextTokens: {budget.max_context_tokens}  |  "
            f"ReplyMaxTokens: {budget.reply_reserve}"
        )
        c.print()

    def token_counts(self, prompt_tokens: int, reply_max_tokens: int, prompt_budget: int) -> None:
        style = "red" if prompt_tokens > prompt_budget else "green"
        self.console.print(
            f"[dim]\\[TokenCounts][/dim] [{style}]prompt≈{prompt_tokens}[/{style}]  "
            f"reply<= {reply_max_tokens}  (budget={prompt_budget})"
        )

    def response(self, result: "CompletionResult") -> None:
        status = result.status_code if result.status_code is not None else "-"
        style = "green" if result.ok else "red"
        self.console.print(f"[{style}]Status: {status}[/{style}]")
        if not result.ok and result.error:
            self.console.print(f"[red]{escape(result.error)}[/red]")
        if result.body:
            try:
                json.loads(result.body)
            except ValueError:
                self.console.print(escape(result.body))
            else:
                self.console.print_json(result.body)

    def failure(self, message: str) -> None:
        self.console.print(f"[bold red]{escape(message)}[/bold red]")


class NullDiagnostics:
    """Discards all diagnostics."""

    def settings_header(self, settings, budget) -> None:
        pass

    def token_counts(self, prompt_tokens, reply_max_tokens, prompt_budget) -> None:
        pass

    def response(self, result) -> None:
        pass

    def failure(self, message) -> None:
        pass
