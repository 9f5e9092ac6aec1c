"""OpenAI LLM adapter implementation.

- Endpoint: POST https://api.openai.com/v1/chat/completions
- Headers: Authorization: Bearer <key>, Content-Type: application/json

Request body:
{
  "model": "<model_name>",
  "messages": [
    {"role": "system", "content": "..."},
    {"role": "user", "content": "..."},
    {"role": "assistant", "content": "..."},
    {"role": "user", "content": "<prompt + file context>"}
  ],
  "temperature": 0.7,
  "max_tokens": 4000
}

Response - extract:
{
  "model": "gpt-4-0613",
  "choices": [{"message": {"content": "<output_text>"}}],
  "usage": {"prompt_tokens": 100, "completion_tokens": 50, "total_tokens": 150}
}

- content = choices[0].message.content (missing or empty → LLM_NO_RESPONSE)
- usage = prompt_tokens / completion_tokens, missing fields count as 0;
  total_tokens from the body is ignored and recomputed
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
from clicoder.services.llm.prompt import append_file_context, build_messages
from clicoder.services.llm.types import ChatContext, LLMConfig, LLMResponse, LLMUsage, Turn
from clicoder.services.redact import safe_kv

logger = get_logger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_KEY_PREFIX = "sk-"

OPENAI_MODELS = frozenset(
    {
        "gpt-4",
        "gpt-4-turbo",
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-3.5-turbo",
    }
)


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions adapter.

    Places the system prompt as a leading system message and forwards
    history with roles unchanged.
    """

    provider_id = "openai"

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
        return "OpenAI"

    async def generate_response(self, prompt: str, context: ChatContext) -> LLMResponse:
        body = self._build_request_body(prompt, context)
        log_fields = {
            "provider": self.provider_id,
            "model_name": self._config.model,
            "message_count": len(body["messages"]),
            "prompt_chars": len(prompt),
            "file_count": len(context.files),
        }
        logger.info("llm.request.started", **safe_kv(**log_fields))

        start = time.monotonic()
        try:
            response = await post_json(
                self._client,
                OPENAI_CHAT_URL,
                headers=self._build_headers(self._config.api_key),
                body=body,
                timeout_s=self._timeout_s,
            )
        except httpx.HTTPError as e:
            error = to_provider_api_error(self.provider_id, LLMErrorCode.OPENAI_API_ERROR, e)
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
        if not config.api_key.startswith(OPENAI_KEY_PREFIX):
            return False
        return config.model in OPENAI_MODELS

    def _build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _build_request_body(self, prompt: str, context: ChatContext) -> dict:
        """Build request body, appending file context to the final user turn."""
        turns = build_messages(prompt, context)
        if context.files:
            last = turns[-1]
            turns[-1] = Turn(role=last.role, content=append_file_context(last.content, context.files))

        return {
            "model": self._config.model,
            "messages": [self._turn_to_message(turn) for turn in turns],
            "temperature": resolve_temperature(self._config),
            "max_tokens": resolve_max_tokens(self._config),
        }

    def _turn_to_message(self, turn: Turn) -> dict[str, str]:
        """OpenAI uses the same role names as our Turn type."""
        return {
            "role": turn.role,
            "content": turn.content,
        }

    def _invalid_response(self, message: str) -> InvalidResponseError:
        return InvalidResponseError(
            LLMErrorCode.OPENAI_INVALID_RESPONSE, message, provider=self.provider_id
        )

    def _parse_response(self, response: httpx.Response) -> LLMResponse:
        try:
            data = response.json()
        except ValueError as e:
            raise self._invalid_response("OpenAI response is not valid JSON") from e
        if not isinstance(data, dict):
            raise self._invalid_response("OpenAI response is not a JSON object")

        choices = data.get("choices") or []
        if not isinstance(choices, list):
            raise self._invalid_response("OpenAI response choices is not a list")
        message = {}
        if choices:
            choice = choices[0]
            if not isinstance(choice, dict):
                raise self._invalid_response("OpenAI choice is not an object")
            message = choice.get("message") or {}
            if not isinstance(message, dict):
                raise self._invalid_response("OpenAI choice message is not an object")

        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise self._invalid_response("OpenAI message content is not text")
        if not content:
            raise InvalidResponseError(
                LLMErrorCode.LLM_NO_RESPONSE,
                "No response from OpenAI",
                provider=self.provider_id,
            )

        usage_data = data.get("usage") or {}
        usage = LLMUsage(
            prompt_tokens=usage_data.get("prompt_tokens") or 0,
            completion_tokens=usage_data.get("completion_tokens") or 0,
        )

        return LLMResponse(
            content=content,
            usage=usage,
            model=data.get("model") or self._config.model,
        )
