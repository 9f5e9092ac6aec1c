"""Composition root for the LLM layer.

The chat session and the config-validation command both obtain their
LLMService here, so logging and the provider factory are configured from
settings in one place.

HTTP Client Lifecycle:
- Pass a shared httpx.AsyncClient for connection pooling across turns;
  the caller owns it and closes it at shutdown
- Without one, each backend call opens and closes its own client
"""

import httpx

from clicoder.config import Settings, get_settings
from clicoder.logging import configure_logging, get_logger
from clicoder.services.llm import LLMProviderFactory, LLMService

logger = get_logger(__name__)


def create_llm_service(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> LLMService:
    """Configure logging and build an LLMService.

    If the settings carry a complete LLM override, the service is initialized
    with it before being returned.

    Raises:
        InvalidConfigError: If the LLM override fails provider validation.
    """
    settings = settings or get_settings()
    configure_logging(json_format=settings.log_json, level=settings.log_level)

    factory = LLMProviderFactory(client, timeout_s=settings.llm_request_timeout_s)
    service = LLMService(factory)

    config = settings.llm_config()
    if config is not None:
        service.initialize(config)
    else:
        logger.info("llm.service.awaiting_config")

    return service
