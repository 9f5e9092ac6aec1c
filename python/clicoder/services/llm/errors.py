"""LLM error taxonomy and provider error classification.

Every failure raised by the LLM layer is an LLMError subclass carrying an
LLMErrorCode. Backend request failures additionally carry a normalized
LLMErrorClass so callers can decide between aborting the turn, prompting for
a new key, or switching backend.

Error kinds:
- InvalidProviderError: backend identifier is not recognized
- ProviderNotImplementedError: identifier recognized, no adapter yet
- InvalidConfigError: factory validation rejected the config
- NotInitializedError: generate called before a successful initialize
- InvalidResponseError: backend returned a body we cannot interpret
- ProviderAPIError: backend transport signaled a request-level failure

Error classes (ProviderAPIError only):
- E_LLM_INVALID_KEY: Authentication failure (401/403)
- E_LLM_RATE_LIMIT: Rate limit exceeded (429)
- E_LLM_QUOTA_EXCEEDED: Account quota or credit exhausted
- E_LLM_CONTEXT_TOO_LARGE: Context length exceeded
- E_LLM_TIMEOUT: Request timed out
- E_LLM_PROVIDER_DOWN: Provider unavailable (5xx, network error)
- E_MODEL_NOT_AVAILABLE: Model not found or disabled
"""

from enum import Enum

import httpx


class LLMErrorCode(str, Enum):
    """Stable error codes surfaced to the CLI error handler."""

    INVALID_PROVIDER = "INVALID_PROVIDER"
    PROVIDER_NOT_IMPLEMENTED = "PROVIDER_NOT_IMPLEMENTED"
    INVALID_LLM_CONFIG = "INVALID_LLM_CONFIG"
    LLM_NOT_INITIALIZED = "LLM_NOT_INITIALIZED"
    LLM_NO_RESPONSE = "LLM_NO_RESPONSE"
    OPENAI_INVALID_RESPONSE = "OPENAI_INVALID_RESPONSE"
    OPENAI_API_ERROR = "OPENAI_API_ERROR"
    ANTHROPIC_INVALID_RESPONSE = "ANTHROPIC_INVALID_RESPONSE"
    ANTHROPIC_API_ERROR = "ANTHROPIC_API_ERROR"


class LLMErrorClass(str, Enum):
    """Normalized classification of backend request failures."""

    INVALID_KEY = "E_LLM_INVALID_KEY"
    RATE_LIMIT = "E_LLM_RATE_LIMIT"
    QUOTA_EXCEEDED = "E_LLM_QUOTA_EXCEEDED"
    CONTEXT_TOO_LARGE = "E_LLM_CONTEXT_TOO_LARGE"
    TIMEOUT = "E_LLM_TIMEOUT"
    PROVIDER_DOWN = "E_LLM_PROVIDER_DOWN"
    MODEL_NOT_AVAILABLE = "E_MODEL_NOT_AVAILABLE"


class LLMError(Exception):
    """Base exception for the LLM layer.

    Attributes:
        code: The error code enum value
        message: Human-readable error message
        provider: The backend identifier involved (if known)
        details: Structured detail, e.g. the original backend exception
    """

    def __init__(
        self,
        code: LLMErrorCode,
        message: str,
        provider: str | None = None,
        details: object = None,
    ):
        self.code = code
        self.message = message
        self.provider = provider
        self.details = details
        super().__init__(message)


class InvalidProviderError(LLMError):
    def __init__(self, provider: str):
        super().__init__(
            LLMErrorCode.INVALID_PROVIDER, f"Unknown provider: {provider}", provider=provider
        )


class ProviderNotImplementedError(LLMError):
    def __init__(self, provider: str):
        super().__init__(
            LLMErrorCode.PROVIDER_NOT_IMPLEMENTED,
            f"{provider.capitalize()} provider not yet implemented",
            provider=provider,
        )


class InvalidConfigError(LLMError):
    def __init__(self, provider: str | None = None, message: str = "Invalid LLM configuration"):
        super().__init__(LLMErrorCode.INVALID_LLM_CONFIG, message, provider=provider)


class NotInitializedError(LLMError):
    def __init__(self, message: str = "LLM service not initialized"):
        super().__init__(LLMErrorCode.LLM_NOT_INITIALIZED, message)


class InvalidResponseError(LLMError):
    """Backend answered 2xx with a body this layer cannot interpret."""


class ProviderAPIError(LLMError):
    """Backend request failed at the transport or HTTP level.

    Attributes:
        error_class: Normalized failure classification
        status_code: HTTP status code (None for transport failures)
        body: Parsed JSON error body (None if absent or unparseable)
    """

    def __init__(
        self,
        code: LLMErrorCode,
        message: str,
        *,
        provider: str,
        error_class: LLMErrorClass,
        status_code: int | None = None,
        body: dict | None = None,
        details: object = None,
    ):
        super().__init__(code, message, provider=provider, details=details)
        self.error_class = error_class
        self.status_code = status_code
        self.body = body


def classify_provider_error(
    provider: str,
    exception: httpx.HTTPError,
    json_body: dict | None = None,
) -> LLMErrorClass:
    """Classify a backend transport failure into a normalized error class.

    Args:
        provider: One of "openai", "anthropic"
        exception: The httpx exception raised for the request
        json_body: Parsed JSON error response (if available)

    Returns:
        The appropriate LLMErrorClass for this error.
    """
    if isinstance(exception, httpx.TimeoutException):
        return LLMErrorClass.TIMEOUT
    if not isinstance(exception, httpx.HTTPStatusError):
        return LLMErrorClass.PROVIDER_DOWN

    status_code = exception.response.status_code
    if provider == "openai":
        return _classify_openai_error(status_code, json_body)
    if provider == "anthropic":
        return _classify_anthropic_error(status_code, json_body)
    return LLMErrorClass.PROVIDER_DOWN


def _classify_openai_error(status_code: int, json_body: dict | None) -> LLMErrorClass:
    """Classify OpenAI-specific errors.

    - 401 or 403 → INVALID_KEY
    - 429 + error.code == "insufficient_quota" → QUOTA_EXCEEDED
    - 429 → RATE_LIMIT
    - 404 → MODEL_NOT_AVAILABLE
    - 400 + error.code == "context_length_exceeded" → CONTEXT_TOO_LARGE
    - 5xx → PROVIDER_DOWN
    """
    error = (json_body or {}).get("error") or {}
    error_code = error.get("code") or ""
    error_message = (error.get("message") or "").lower()

    if status_code in (401, 403):
        return LLMErrorClass.INVALID_KEY

    if status_code == 429:
        if error_code == "insufficient_quota":
            return LLMErrorClass.QUOTA_EXCEEDED
        return LLMErrorClass.RATE_LIMIT

    if status_code == 404:
        return LLMErrorClass.MODEL_NOT_AVAILABLE

    if status_code == 400:
        if error_code == "context_length_exceeded":
            return LLMErrorClass.CONTEXT_TOO_LARGE
        if "maximum context length" in error_message:
            return LLMErrorClass.CONTEXT_TOO_LARGE
        if "model" in error_message and "does not exist" in error_message:
            return LLMErrorClass.MODEL_NOT_AVAILABLE

    return LLMErrorClass.PROVIDER_DOWN


def _classify_anthropic_error(status_code: int, json_body: dict | None) -> LLMErrorClass:
    """Classify Anthropic-specific errors.

    - 401 or 403 → INVALID_KEY
    - 429 → RATE_LIMIT
    - 529 (overloaded_error) and other 5xx → PROVIDER_DOWN
    - 404 → MODEL_NOT_AVAILABLE
    - 400 + "too long" in message → CONTEXT_TOO_LARGE
    - 400 + "credit balance" in message → QUOTA_EXCEEDED
    """
    error = (json_body or {}).get("error") or {}
    error_type = error.get("type") or ""
    error_message = (error.get("message") or "").lower()

    if status_code in (401, 403):
        return LLMErrorClass.INVALID_KEY

    if status_code == 429:
        return LLMErrorClass.RATE_LIMIT

    if status_code == 404:
        return LLMErrorClass.MODEL_NOT_AVAILABLE

    if status_code == 400 and error_type == "invalid_request_error":
        if "too long" in error_message:
            return LLMErrorClass.CONTEXT_TOO_LARGE
        if "credit balance" in error_message:
            return LLMErrorClass.QUOTA_EXCEEDED

    return LLMErrorClass.PROVIDER_DOWN
