"""Anthropic LLM adapter implementation.

- Endpoint: POST https://api.anthropic.com/v1/messages
- Headers: x-api-key: <key>, anthropic-version: 2023-06-01, Content-Type: application/json

Turn conversion:
- System prompt sent in the separate top-level "system" field, never in messages
- System-role history entries dropped; user/assistant forwarded in order
- File context appended to the final user turn

Request body:
{
  "model": "<model_name>",
  "max_tokens": 4000,
  "temperature": 0.7,
  "system": "<system_prompt>",
  "messages": [
    {"role": "user", "content": "..."},
    {"role": "assistant", "content": "..."}
  ]
}

Response:
{
  "id": "msg_...",
  "model": "claude-3-sonnet-20240229",
  "content": [{"type": "text", "text": "<output_text>"}],
  "usage": {"input_tokens": 100, "output_tokens": 50}
}

- content = content[0].text; a first block of any other type is an
  ANTHROPIC_INVALID_RESPONSE, never an empty string
- usage.prompt_tokens = input_tokens, usage.completion_tokens = output_tokens
"""

import time

import httpx

from clicoder.logging import get_logger
from clicoder.services.llm.adapter import (
    LLMProvider,
    elapsed_ms,
    post_json,
    resolve_max_tokens,
    resolve_temperature,
    to_provider_api_error,
)
from clicoder.services.llm.errors import InvalidResponseError, LLMErrorCode
from clicoder.services.llm.prompt import append_file_context
from clicoder.services.llm.types import ChatContext, LLMConfig, LLMResponse, LLMUsage
from clicoder.services.redact import safe_kv

logger = get_logger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_KEY_PREFIX = "sk-ant-"

ANTHROPIC_MODELS = frozenset(
    {
        "claude-opus-4-20250514",
        "claude-sonnet-4-20250514",
        "claude-3-7-sonnet-20250219",
        "claude-3-7-sonnet-latest",
        "claude-3-5-sonnet-20241022",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-20241022",
        "claude-3-5-haiku-latest",
        "claude-3-opus-20240229",
        "claude-3-sonnet-20240229",
        "claude-3-haiku-20240307",
    }
)


class AnthropicProvider(LLMProvider):
    """Anthropic messages adapter."""

    provider_id = "anthropic"

    def __init__(
        self,
        config: LLMConfig,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_s: float | None = None,
    ):
        self._config = config
        self._client = client
        self._timeout_s = timeout_s

    @property
    def name(self) -> str:
        return "Anthropic"

    async def generate_response(self, prompt: str, context: ChatContext) -> LLMResponse:
        body = self._build_request_body(prompt, context)
        log_fields = {
            "provider": self.provider_id,
            "model_name": self._config.model,
            "message_count": len(body["messages"]),
            "prompt_chars": len(prompt),
            "file_count": len(context.files),
            "has_system": "system" in body,
        }
        logger.info("llm.request.started", **safe_kv(**log_fields))

        start = time.monotonic()
        try:
            response = await post_json(
                self._client,
                ANTHROPIC_MESSAGES_URL,
                headers=self._build_headers(self._config.api_key),
                body=body,
                timeout_s=self._timeout_s,
            )
        except httpx.HTTPError as e:
            error = to_provider_api_error(self.provider_id, LLMErrorCode.ANTHROPIC_API_ERROR, e)
            logger.error(
                "llm.request.failed",
                **safe_kv(
                    **log_fields,
                    error_class=error.error_class.value,
                    status_code=error.status_code,
                    latency_ms=elapsed_ms(start),
                ),
            )
            raise error from e

        result = self._parse_response(response)
        logger.info(
            "llm.request.finished",
            **safe_kv(
                **log_fields,
                latency_ms=elapsed_ms(start),
                tokens_input=result.usage.prompt_tokens,
                tokens_output=result.usage.completion_tokens,
                tokens_total=result.usage.total_tokens,
            ),
        )
        return result

    def validate_config(self, config: LLMConfig) -> bool:
        if not isinstance(config.api_key, str) or not isinstance(config.model, str):
            return False
        if not config.api_key.startswith(ANTHROPIC_KEY_PREFIX):
            return False
        return config.model in ANTHROPIC_MODELS

    def _build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
            "Content-Type": "application/json",
        }

    def _build_request_body(self, prompt: str, context: ChatContext) -> dict:
        """Build request body with the system prompt as a separate field."""
        messages = [
            {"role": message.role, "content": message.content}
            for message in context.messages
            if message.role != "system"
        ]
        messages.append({"role": "user", "content": append_file_context(prompt, context.files)})

        body: dict = {
            "model": self._config.model,
            "max_tokens": resolve_max_tokens(self._config),
            "temperature": resolve_temperature(self._config),
            "messages": messages,
        }

        if context.system_prompt:
            body["system"] = context.system_prompt

        return body

    def _invalid_response(self, message: str) -> InvalidResponseError:
        return InvalidResponseError(
            LLMErrorCode.ANTHROPIC_INVALID_RESPONSE, message, provider=self.provider_id
        )

    def _parse_response(self, response: httpx.Response) -> LLMResponse:
        try:
            data = response.json()
        except ValueError as e:
            raise self._invalid_response("Anthropic response is not valid JSON") from e
        if not isinstance(data, dict):
            raise self._invalid_response("Anthropic response is not a JSON object")

        content_blocks = data.get("content") or []
        if not isinstance(content_blocks, list):
            raise self._invalid_response("Anthropic response content is not a list")
        if not content_blocks:
            raise self._invalid_response("Anthropic response has no content blocks")

        block = content_blocks[0]
        if not isinstance(block, dict) or block.get("type") != "text":
            raise self._invalid_response("Expected text response")
        text = block.get("text")
        if not isinstance(text, str):
            raise self._invalid_response("Anthropic text block has no text")

        usage_data = data.get("usage") or {}
        usage = LLMUsage(
            prompt_tokens=usage_data.get("input_tokens") or 0,
            completion_tokens=usage_data.get("output_tokens") or 0,
        )

        return LLMResponse(
            content=text,
            usage=usage,
            model=data.get("model") or self._config.model,
        )
