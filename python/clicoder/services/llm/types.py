"""Shared type definitions for the LLM layer.

- LLMConfig: Finished provider configuration handed in by the config loader
- ChatMessage: One entry of the conversation history
- FileContext: A file attached to the conversation by the context collector
- ChatContext: History, optional system prompt and files for one generation call
- Turn: Provider-agnostic outgoing message built by prompt.build_messages
- LLMUsage: Token usage, total always derived locally
- LLMResponse: Normalized result of one generation call

All types are frozen. A ChatContext is passed by value per call and never
mutated by adapters.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for one provider adapter.

    Attributes:
        provider: Backend identifier ("openai", "anthropic", "gemini").
            Kept as a plain string so unknown identifiers reach the factory.
        api_key: Credential for the backend
        model: Model identifier (e.g., "gpt-4", "claude-3-sonnet-20240229")
        temperature: Sampling temperature, None uses the adapter default
        max_tokens: Maximum output tokens, None uses the adapter default
    """

    provider: str
    api_key: str
    model: str
    temperature: float | None = None
    max_tokens: int | None = None


@dataclass(frozen=True)
class ChatMessage:
    """A single message in a chat conversation."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class FileContext:
    """A file that is part of the conversation context.

    Attributes:
        path: File system path, used as the section label
        content: Raw file text
        kind: Entry kind as reported by the context collector
    """

    path: str
    content: str
    kind: str = "text"


@dataclass(frozen=True)
class ChatContext:
    """Context for one generation call.

    Attributes:
        system_prompt: Optional system instructions
        messages: Conversation history in order
        files: Files attached to the current user turn
    """

    system_prompt: str | None = None
    messages: tuple[ChatMessage, ...] = ()
    files: tuple[FileContext, ...] = ()


@dataclass(frozen=True)
class Turn:
    """Provider-agnostic outgoing message.

    Attributes:
        role: One of "system", "user", or "assistant"
        content: The text content of the turn
    """

    role: Role
    content: str


@dataclass(frozen=True)
class LLMUsage:
    """Token usage for one generation call.

    total_tokens is derived, never read from the backend.
    """

    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass(frozen=True)
class LLMResponse:
    """Normalized response from a provider adapter.

    Attributes:
        content: The generated text
        usage: Token usage
        model: Model that generated the response, as reported by the backend
    """

    content: str
    usage: LLMUsage
    model: str
