"""LLM service: the stateful façade the chat session talks to.

Two states:
- uninitialized: no adapter; generate_response raises NotInitializedError
- ready: exactly one adapter plus the LLMConfig that produced it

The adapter and its config are stored as one immutable pair and replaced in a
single assignment, so a generate_response racing an initialize sees either the
old pairing or the new one. A failed initialize leaves the previous pair in
place.

The service is constructed explicitly by the application entry point and
passed to whatever needs it; there is no module-level instance.
"""

from dataclasses import dataclass

from clicoder.logging import get_logger
from clicoder.services.llm.adapter import LLMProvider
from clicoder.services.llm.errors import InvalidConfigError, NotInitializedError
from clicoder.services.llm.factory import LLMProviderFactory
from clicoder.services.llm.types import ChatContext, LLMConfig, LLMResponse

logger = get_logger(__name__)

# Returned by introspection while uninitialized
UNSET = "None"


@dataclass(frozen=True)
class _ActiveProvider:
    provider: LLMProvider
    config: LLMConfig


class LLMService:
    """Owns at most one active provider adapter."""

    def __init__(self, factory: LLMProviderFactory | None = None):
        self._factory = factory or LLMProviderFactory()
        self._active: _ActiveProvider | None = None

    def initialize(self, config: LLMConfig) -> None:
        """Validate config and swap in a fresh adapter.

        Raises:
            InvalidConfigError: If the factory rejects the config. The
                previously active adapter, if any, stays in place.
        """
        provider = self._factory.create_validated_provider(config)
        if provider is None:
            logger.warning(
                "llm.service.initialize_rejected",
                provider=config.provider,
                model_name=config.model,
            )
            raise InvalidConfigError(provider=config.provider)

        self._active = _ActiveProvider(provider=provider, config=config)
        logger.info(
            "llm.service.initialized",
            provider=config.provider,
            model_name=config.model,
        )

    async def generate_response(
        self, prompt: str, context: ChatContext | None = None
    ) -> LLMResponse:
        """Forward prompt and context to the active adapter.

        Raises:
            NotInitializedError: If initialize has not succeeded yet.
            LLMError: Whatever the adapter raises, unchanged.
        """
        active = self._active
        if active is None:
            raise NotInitializedError()

        if context is None:
            context = ChatContext()
        return await active.provider.generate_response(prompt, context)

    def get_provider_name(self) -> str:
        active = self._active
        return active.provider.name if active else UNSET

    def get_model_name(self) -> str:
        active = self._active
        return active.config.model if active else UNSET

    def is_initialized(self) -> bool:
        return self._active is not None
