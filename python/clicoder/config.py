"""Application settings loaded from environment variables.

Environment Configuration:
    CLI_CODER_ENV: Deployment environment (local | test | prod)
    CLI_CODER_LOG_JSON: Emit JSON logs instead of console logs (default false)
    CLI_CODER_LOG_LEVEL: Root log level (default INFO)

LLM Overrides (all optional; applied on top of the config file by the loader):
    LLM_PROVIDER: Backend identifier (openai | anthropic | gemini)
    LLM_API_KEY: Credential for the backend
    LLM_MODEL: Model identifier
    LLM_TEMPERATURE: Sampling temperature, 0 to 2
    LLM_MAX_TOKENS: Maximum output tokens, positive
    LLM_REQUEST_TIMEOUT_S: Read timeout for backend calls (unset = unbounded)

The LLM layer itself never reads these; the application entry point turns
them into an LLMConfig and an LLMProviderFactory.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from clicoder.services.llm.types import LLMConfig


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class Settings(BaseSettings):
    """Application configuration.

    Validation rules:
    - LLM_TEMPERATURE must be within 0..2 and LLM_MAX_TOKENS positive
    - LLM_PROVIDER, LLM_API_KEY and LLM_MODEL are set together or not at all
    """

    cli_coder_env: Environment = Field(default=Environment.LOCAL, alias="CLI_CODER_ENV")
    log_json: bool = Field(default=False, alias="CLI_CODER_LOG_JSON")
    log_level: str = Field(default="INFO", alias="CLI_CODER_LOG_LEVEL")

    llm_provider: str | None = Field(default=None, alias="LLM_PROVIDER")
    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")
    llm_model: str | None = Field(default=None, alias="LLM_MODEL")
    llm_temperature: float | None = Field(default=None, ge=0, le=2, alias="LLM_TEMPERATURE")
    llm_max_tokens: int | None = Field(default=None, gt=0, alias="LLM_MAX_TOKENS")
    llm_request_timeout_s: float | None = Field(default=None, gt=0, alias="LLM_REQUEST_TIMEOUT_S")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_llm_overrides(self) -> "Settings":
        """Reject a partially specified LLM override."""
        fields = {
            "LLM_PROVIDER": self.llm_provider,
            "LLM_API_KEY": self.llm_api_key,
            "LLM_MODEL": self.llm_model,
        }
        missing = [name for name, value in fields.items() if not value]
        if missing and len(missing) < len(fields):
            raise ValueError(f"Incomplete LLM settings, missing: {', '.join(missing)}")
        return self

    def llm_config(self) -> LLMConfig | None:
        """Build an LLMConfig from the overrides, or None if none are set."""
        if not (self.llm_provider and self.llm_api_key and self.llm_model):
            return None
        return LLMConfig(
            provider=self.llm_provider,
            api_key=self.llm_api_key,
            model=self.llm_model,
            temperature=self.llm_temperature,
            max_tokens=self.llm_max_tokens,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
