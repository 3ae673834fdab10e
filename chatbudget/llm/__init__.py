"""
chatbudget/llm — chat-completions client and prompt text.

Exports:
    ChatClient        — Azure OpenAI chat-completions client
    CompletionResult  — result of one request
    ErrorKind         — failure classification
"""

from chatbudget.llm.client import ChatClient, CompletionResult, ErrorKind

__all__ = ["ChatClient", "CompletionResult", "ErrorKind"]
