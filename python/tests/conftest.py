"""Pytest configuration and fixtures for cli-coder tests.

Test isolation strategy:
- No live provider calls; HTTP is mocked with respx
- CLI_CODER_ENV is forced to "test" so safe_kv violations raise
- Settings cache is cleared around every test
"""

import os
from collections.abc import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
import structlog

from clicoder.config import clear_settings_cache
from clicoder.services.llm import ChatContext, ChatMessage, FileContext, LLMConfig

os.environ["CLI_CODER_ENV"] = "test"


@pytest.fixture(autouse=True)
def _clear_settings() -> Generator[None, None, None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest_asyncio.fixture
async def httpx_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an httpx AsyncClient for testing, closed after the test."""
    client = httpx.AsyncClient()
    yield client
    await client.aclose()


@pytest.fixture
def openai_config() -> LLMConfig:
    return LLMConfig(provider="openai", api_key="sk-test123", model="gpt-4")


@pytest.fixture
def anthropic_config() -> LLMConfig:
    return LLMConfig(
        provider="anthropic",
        api_key="sk-ant-test123",
        model="claude-3-sonnet-20240229",
    )


@pytest.fixture
def chat_context() -> ChatContext:
    """Context with a system prompt, mixed-role history and one file."""
    return ChatContext(
        system_prompt="You are helpful.",
        messages=(
            ChatMessage(role="user", content="Previous message"),
            ChatMessage(role="system", content="Earlier instructions"),
            ChatMessage(role="assistant", content="Previous response"),
        ),
        files=(FileContext(path="/test/file.py", content="x = 1"),),
    )


@pytest.fixture
def log_sink():
    """Configure structlog to capture events into a list.

    Returns a list that will contain all emitted log event dicts.
    After the test, structlog is reset to normal.
    """
    events: list[dict] = []
    original_config = structlog.get_config()

    def capture_processor(logger, method_name, event_dict):
        event_dict["log_level"] = method_name
        events.append(event_dict.copy())
        raise structlog.DropEvent

    structlog.configure(
        processors=[capture_processor],
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    yield events

    structlog.configure(**original_config)
