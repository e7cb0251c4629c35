"""Configuration for language-model access.

Settings are pydantic models whose defaults are read from the environment
when an instance is created, so ``LLMSettings()`` picks up whatever the
process was started with:

    LLMGRAPH_ENDPOINT   chat-completion URL
    LLMGRAPH_API_KEY    bearer credential (falls back to OPENAI_API_KEY)
    LLMGRAPH_MODEL      model identifier
    LLMGRAPH_TIMEOUT    total request timeout in seconds

Invalid numeric values fall back to the built-in default.
"""

import os
from typing import Optional
from pydantic import BaseModel, Field, field_validator

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT = 60.0

ENV_PREFIX = "LLMGRAPH_"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class LLMSettings(BaseModel):
    """Endpoint, credential and model used to build LLM nodes.

    Attributes:
        endpoint: URL of the chat-completion endpoint
        api_key: Credential sent as ``Authorization: Bearer <api_key>``
        model: Model identifier placed in every request
        timeout: Total request timeout in seconds, enforced by the transport
    """
    endpoint: str = Field(default_factory=lambda: _env("ENDPOINT", DEFAULT_ENDPOINT))
    api_key: str = Field(
        default_factory=lambda: _env("API_KEY") or os.environ.get("OPENAI_API_KEY", ""),
        repr=False
    )
    model: str = Field(default_factory=lambda: _env("MODEL", DEFAULT_MODEL))
    timeout: float = Field(default_factory=lambda: _env_float("TIMEOUT", DEFAULT_TIMEOUT))

    model_config = {"validate_assignment": True}

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL: {value}")
        return value
