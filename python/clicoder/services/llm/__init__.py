"""LLM layer for provider-agnostic chat completion.

This module lets the CLI swap between OpenAI and Anthropic through one
contract. It includes:

- Provider adapters (async, one backend call per generation)
- A factory with pre-flight config validation
- A service façade owning the active adapter
- A typed error taxonomy for every failure

Usage:
    from clicoder.services.llm import ChatContext, LLMConfig, LLMService

    service = LLMService()
    service.initialize(LLMConfig(provider="openai", api_key="sk-...", model="gpt-4"))
    response = await service.generate_response("Hello!", ChatContext())

Rules:
- No retries or timeouts beyond the connect timeout inside this layer
- No environment or file access; configuration arrives finished
- No logging of prompts, file content or API keys
"""

from clicoder.services.llm.adapter import LLMProvider
from clicoder.services.llm.anthropic_adapter import AnthropicProvider
from clicoder.services.llm.errors import (
    InvalidConfigError,
    InvalidProviderError,
    InvalidResponseError,
    LLMError,
    LLMErrorClass,
    LLMErrorCode,
    NotInitializedError,
    ProviderAPIError,
    ProviderNotImplementedError,
    classify_provider_error,
)
from clicoder.services.llm.factory import LLMProviderFactory
from clicoder.services.llm.openai_adapter import OpenAIProvider
from clicoder.services.llm.prompt import (
    append_file_context,
    build_messages,
    format_file_context,
)
from clicoder.services.llm.service import LLMService
from clicoder.services.llm.types import (
    ChatContext,
    ChatMessage,
    FileContext,
    LLMConfig,
    LLMResponse,
    LLMUsage,
    Turn,
)

__all__ = [
    # Core types
    "LLMConfig",
    "ChatMessage",
    "FileContext",
    "ChatContext",
    "Turn",
    "LLMUsage",
    "LLMResponse",
    # Provider contract and adapters
    "LLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    # Factory and service
    "LLMProviderFactory",
    "LLMService",
    # Errors
    "LLMError",
    "LLMErrorCode",
    "LLMErrorClass",
    "InvalidProviderError",
    "ProviderNotImplementedError",
    "InvalidConfigError",
    "NotInitializedError",
    "InvalidResponseError",
    "ProviderAPIError",
    "classify_provider_error",
    # Prompt building
    "build_messages",
    "format_file_context",
    "append_file_context",
]
