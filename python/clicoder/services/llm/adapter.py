"""Provider contract for LLM adapters.

Rules:
- One adapter per backend, each constructed independently by the factory
- Exactly one backend call per generate_response, no retries inside adapters
- No logging of prompts, file content or API keys
- httpx failures are translated into ProviderAPIError at the adapter boundary;
  any other exception propagates unchanged

The base class carries no state. What adapters share lives in the stateless
helpers below and in prompt.py.
"""

import time
from abc import ABC, abstractmethod
from typing import ClassVar

import httpx

from clicoder.services.llm.errors import (
    LLMErrorClass,
    LLMErrorCode,
    ProviderAPIError,
    classify_provider_error,
)
from clicoder.services.llm.types import ChatContext, LLMConfig, LLMResponse

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4000

# Only connecting is bounded; read timeouts are the caller's policy
CONNECT_TIMEOUT_S = 10.0


class LLMProvider(ABC):
    """Interface every backend adapter honors."""

    provider_id: ClassVar[str]

    @property
    @abstractmethod
    def name(self) -> str:
        """Constant human-readable backend label."""

    @abstractmethod
    async def generate_response(self, prompt: str, context: ChatContext) -> LLMResponse:
        """Send prompt plus context to the backend and normalize the reply.

        Args:
            prompt: Current user message text.
            context: System prompt, history and files for this call.

        Returns:
            LLMResponse with locally computed token totals.

        Raises:
            ProviderAPIError: On backend HTTP or transport failure.
            InvalidResponseError: On a 2xx body that cannot be interpreted.
        """

    @abstractmethod
    def validate_config(self, config: LLMConfig) -> bool:
        """Check credential format and model allow-list. Never raises."""


def resolve_temperature(config: LLMConfig) -> float:
    return DEFAULT_TEMPERATURE if config.temperature is None else config.temperature


def resolve_max_tokens(config: LLMConfig) -> int:
    return DEFAULT_MAX_TOKENS if config.max_tokens is None else config.max_tokens


async def post_json(
    client: httpx.AsyncClient | None,
    url: str,
    *,
    headers: dict[str, str],
    body: dict,
    timeout_s: float | None,
) -> httpx.Response:
    """POST a JSON body and raise for non-2xx status.

    Uses the shared client when given, otherwise a client scoped to this call.

    Raises:
        httpx.HTTPStatusError: On non-2xx HTTP response.
        httpx.TransportError: On timeout or network failure.
    """
    timeout = httpx.Timeout(timeout_s, connect=CONNECT_TIMEOUT_S)
    if client is None:
        async with httpx.AsyncClient() as owned_client:
            response = await owned_client.post(url, headers=headers, json=body, timeout=timeout)
    else:
        response = await client.post(url, headers=headers, json=body, timeout=timeout)
    response.raise_for_status()
    return response


def _safe_parse_json(response: httpx.Response) -> dict | None:
    """Safely parse a JSON object from response, returning None on failure."""
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def to_provider_api_error(
    provider: str,
    code: LLMErrorCode,
    exc: httpx.HTTPError,
) -> ProviderAPIError:
    """Translate an httpx failure into a ProviderAPIError.

    The original exception is kept as details and should also be chained
    by the caller.
    """
    status_code = None
    body = None
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        body = _safe_parse_json(exc.response)

    error_class = classify_provider_error(provider, exc, body)

    error = (body or {}).get("error")
    if isinstance(error, dict) and error.get("message"):
        message = str(error["message"])
    elif status_code is not None:
        message = f"Provider returned HTTP {status_code}"
    elif error_class == LLMErrorClass.TIMEOUT:
        message = "Request timed out"
    else:
        message = f"Network error: {type(exc).__name__}"

    return ProviderAPIError(
        code,
        message,
        provider=provider,
        error_class=error_class,
        status_code=status_code,
        body=body,
        details=exc,
    )


def elapsed_ms(start: float) -> int:
    """Milliseconds since a time.monotonic() reading."""
    return int((time.monotonic() - start) * 1000)
