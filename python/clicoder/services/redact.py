"""Log field guard for the LLM layer.

Prompts, chat history, attached file bodies and credentials must never reach a
log line. Events describe them by size instead (prompt_chars, file_count).

safe_kv checks the keyword arguments of a log call against FORBIDDEN_KEYS. A
key carrying one of REDACTED_SUFFIXES is treated as already reduced to a size
or digest and passes.
"""

import os

import structlog

FORBIDDEN_KEYS = frozenset(
    {
        "prompt",
        "content",
        "system_prompt",
        "api_key",
        "bearer",
        "token",
        "secret",
        "password",
        "file_content",
        "raw_body",
    }
)

REDACTED_SUFFIXES = ("_sha256", "_hash", "_length", "_chars")

# Environments where a violation is a programming error
STRICT_ENVIRONMENTS = ("local", "test")


def safe_kv(*, _env: str | None = None, **kwargs) -> dict:
    """Return kwargs unchanged once they are known to hold no forbidden key.

    Example:
        logger.info("llm.request.started", **safe_kv(provider="openai", prompt_chars=42))

    Args:
        _env: Environment name, overriding CLI_CODER_ENV. Used by tests.

    Raises:
        ValueError: On a forbidden key when running locally or under test.
            In prod a safe_kv_violation warning is logged and the fields pass
            through so the original event is not lost.
    """
    violations = [
        key
        for key in kwargs
        if key in FORBIDDEN_KEYS and not key.endswith(REDACTED_SUFFIXES)
    ]
    if not violations:
        return kwargs

    env = _env or os.environ.get("CLI_CODER_ENV", "local")
    if env in STRICT_ENVIRONMENTS:
        raise ValueError(f"Forbidden log keys without redacted suffix: {violations}")

    structlog.get_logger(__name__).warning("safe_kv_violation", forbidden_keys=violations)
    return kwargs
