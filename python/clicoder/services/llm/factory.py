"""Provider factory: backend identifier → adapter instance.

Distinguishes identifiers that are not recognized at all (InvalidProviderError)
from recognized backends that have no adapter yet (ProviderNotImplementedError).
Construction never performs I/O, so validate_provider_config can be used as a
pre-flight check before any network call.
"""

import httpx

from clicoder.logging import get_logger
from clicoder.services.llm.adapter import LLMProvider
from clicoder.services.llm.anthropic_adapter import AnthropicProvider
from clicoder.services.llm.errors import InvalidProviderError, ProviderNotImplementedError
from clicoder.services.llm.openai_adapter import OpenAIProvider
from clicoder.services.llm.types import LLMConfig

logger = get_logger(__name__)

# Recognized backend vocabulary, including backends without an adapter
KNOWN_PROVIDERS = frozenset({"openai", "anthropic", "gemini"})

_ADAPTERS: dict[str, type[LLMProvider]] = {
    OpenAIProvider.provider_id: OpenAIProvider,
    AnthropicProvider.provider_id: AnthropicProvider,
}


class LLMProviderFactory:
    """Builds provider adapters from an LLMConfig."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_s: float | None = None,
    ):
        """Initialize factory.

        Args:
            client: Shared httpx.AsyncClient handed to every adapter for
                connection pooling. None means each call opens its own client.
            timeout_s: Read timeout for backend calls. None means unbounded.
        """
        self._client = client
        self._timeout_s = timeout_s

    def create_provider(self, config: LLMConfig) -> LLMProvider:
        """Build the adapter for config.provider.

        Raises:
            InvalidProviderError: If the identifier is not recognized.
            ProviderNotImplementedError: If the backend has no adapter yet.
        """
        adapter_cls = _ADAPTERS.get(config.provider)
        if adapter_cls is None:
            if config.provider in KNOWN_PROVIDERS:
                raise ProviderNotImplementedError(config.provider)
            raise InvalidProviderError(config.provider)

        return adapter_cls(config, self._client, timeout_s=self._timeout_s)

    def get_supported_providers(self) -> frozenset[str]:
        """Identifiers that have a working adapter."""
        return frozenset(_ADAPTERS)

    def get_known_providers(self) -> frozenset[str]:
        """Every recognized identifier, buildable or not."""
        return KNOWN_PROVIDERS

    def create_validated_provider(self, config: LLMConfig) -> LLMProvider | None:
        """Build the adapter and return it only if it accepts config.

        Any failure along the way yields None.
        """
        try:
            provider = self.create_provider(config)
            if provider.validate_config(config):
                return provider
            error_type = None
        except Exception as e:
            error_type = type(e).__name__

        logger.debug(
            "llm.provider.config_rejected",
            provider=config.provider,
            error_type=error_type,
        )
        return None

    def validate_provider_config(self, config: LLMConfig) -> bool:
        """Construct the adapter and run its validation; failures become False."""
        return self.create_validated_provider(config) is not None
