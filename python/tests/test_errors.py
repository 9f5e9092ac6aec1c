"""Tests for the LLM error taxonomy and provider error classification."""

import httpx
import pytest

from clicoder.services.llm import (
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

REQUEST = httpx.Request("POST", "https://example.test/v1")


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    response = httpx.Response(status_code, request=REQUEST)
    return httpx.HTTPStatusError("error", request=REQUEST, response=response)


class TestTaxonomy:
    @pytest.mark.parametrize(
        "error,code",
        [
            (InvalidProviderError("x"), LLMErrorCode.INVALID_PROVIDER),
            (ProviderNotImplementedError("gemini"), LLMErrorCode.PROVIDER_NOT_IMPLEMENTED),
            (InvalidConfigError(), LLMErrorCode.INVALID_LLM_CONFIG),
            (NotInitializedError(), LLMErrorCode.LLM_NOT_INITIALIZED),
        ],
    )
    def test_codes(self, error, code):
        assert isinstance(error, LLMError)
        assert error.code == code
        assert str(error) == error.message

    def test_codes_are_strings(self):
        assert InvalidConfigError().code == "INVALID_LLM_CONFIG"

    def test_invalid_response_carries_provider(self):
        error = InvalidResponseError(
            LLMErrorCode.ANTHROPIC_INVALID_RESPONSE, "Expected text response", provider="anthropic"
        )
        assert error.provider == "anthropic"
        assert error.details is None

    def test_api_error_keeps_original(self):
        original = _status_error(429)
        error = ProviderAPIError(
            LLMErrorCode.OPENAI_API_ERROR,
            "slow down",
            provider="openai",
            error_class=LLMErrorClass.RATE_LIMIT,
            status_code=429,
            details=original,
        )
        assert error.details is original
        assert error.error_class == LLMErrorClass.RATE_LIMIT


class TestClassifyProviderError:
    def test_timeout(self):
        exc = httpx.ReadTimeout("timed out", request=REQUEST)
        assert classify_provider_error("openai", exc) == LLMErrorClass.TIMEOUT

    def test_connect_timeout(self):
        exc = httpx.ConnectTimeout("timed out", request=REQUEST)
        assert classify_provider_error("anthropic", exc) == LLMErrorClass.TIMEOUT

    def test_network_error(self):
        exc = httpx.ConnectError("refused", request=REQUEST)
        assert classify_provider_error("openai", exc) == LLMErrorClass.PROVIDER_DOWN

    @pytest.mark.parametrize(
        "status,body,expected",
        [
            (401, None, LLMErrorClass.INVALID_KEY),
            (403, None, LLMErrorClass.INVALID_KEY),
            (429, {"error": {"code": "rate_limit_exceeded"}}, LLMErrorClass.RATE_LIMIT),
            (429, {"error": {"code": "insufficient_quota"}}, LLMErrorClass.QUOTA_EXCEEDED),
            (404, None, LLMErrorClass.MODEL_NOT_AVAILABLE),
            (400, {"error": {"code": "context_length_exceeded"}}, LLMErrorClass.CONTEXT_TOO_LARGE),
            (
                400,
                {"error": {"message": "The model `gpt-9` does not exist"}},
                LLMErrorClass.MODEL_NOT_AVAILABLE,
            ),
            (400, {"error": {"message": "bad request"}}, LLMErrorClass.PROVIDER_DOWN),
            (500, None, LLMErrorClass.PROVIDER_DOWN),
            (503, {"error": None}, LLMErrorClass.PROVIDER_DOWN),
        ],
    )
    def test_openai(self, status, body, expected):
        assert classify_provider_error("openai", _status_error(status), body) == expected

    @pytest.mark.parametrize(
        "status,body,expected",
        [
            (401, None, LLMErrorClass.INVALID_KEY),
            (429, None, LLMErrorClass.RATE_LIMIT),
            (404, None, LLMErrorClass.MODEL_NOT_AVAILABLE),
            (
                400,
                {"error": {"type": "invalid_request_error", "message": "prompt is too long"}},
                LLMErrorClass.CONTEXT_TOO_LARGE,
            ),
            (
                400,
                {"error": {"type": "invalid_request_error", "message": "credit balance is too low"}},
                LLMErrorClass.QUOTA_EXCEEDED,
            ),
            (529, {"error": {"type": "overloaded_error"}}, LLMErrorClass.PROVIDER_DOWN),
        ],
    )
    def test_anthropic(self, status, body, expected):
        assert classify_provider_error("anthropic", _status_error(status), body) == expected

    def test_unknown_provider(self):
        assert classify_provider_error("gemini", _status_error(401)) == LLMErrorClass.PROVIDER_DOWN
