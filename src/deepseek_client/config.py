# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Client Configuration for the DeepSeek client

This module provides the configuration dataclass for the client, the API
variant enum and the endpoint constants used when building requests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.deepseek.com/"
BETA_BASE_URL = "https://api.deepseek.com/beta/"

CHAT_COMPLETIONS_PATH = "chat/completions"
FIM_COMPLETIONS_PATH = "completions"

# The FIM (beta) endpoint rejects larger completions
FIM_MAX_TOKENS = 4000

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class ApiType(Enum):
    """API variant that determines how requests are authenticated.

    - DEEPSEEK: Hosted DeepSeek API. Sends ``Authorization: Bearer <key>``.
    - AZURE: Azure-hosted deployment. Sends ``api-key: <key>``.
    - OLLAMA: Local OpenAI-compatible server. The key is optional and sent
      as a bearer token only when provided.
    """

    DEEPSEEK = "deepseek"
    AZURE = "azure"
    OLLAMA = "ollama"

    @property
    def requires_auth(self) -> bool:
        """Whether requests of this variant must carry an auth token."""
        return self is not ApiType.OLLAMA


@dataclass
class ClientConfig:
    """
    Configuration for the completion client.

    Only ``api_key`` is required for the hosted API; everything else has
    a default that targets https://api.deepseek.com.
    """

    # === Credentials & Endpoints ===

    api_key: str = ""
    """API key sent with every request."""

    base_url: str = DEFAULT_BASE_URL
    """Base URL for chat completions."""

    beta_base_url: str = BETA_BASE_URL
    """Base URL for beta endpoints (FIM completions)."""

    api_type: ApiType = ApiType.DEEPSEEK
    """API variant, controls the auth header."""

    # === Timeouts ===

    timeout: float = 120.0
    """Overall request timeout in seconds (read/write/pool)."""

    connect_timeout: float = 30.0
    """Connection establishment timeout in seconds."""

    # === Streaming ===

    require_stream_sentinel: bool = False
    """Treat a stream closed without [DONE] as IncompleteStreamError."""

    # === Request Validation ===

    fim_max_tokens: int = FIM_MAX_TOKENS
    """Upper bound accepted for FIM max_tokens."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if isinstance(self.api_type, str):
            self.api_type = ApiType(self.api_type)
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if not self.beta_base_url:
            raise ValueError("beta_base_url must not be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be positive")
        if self.fim_max_tokens < 1:
            raise ValueError("fim_max_tokens must be at least 1")

    @classmethod
    def from_env(cls, **overrides: object) -> ClientConfig:
        """
        Build a configuration from ``DEEPSEEK_*`` environment variables.

        Recognized variables:
            DEEPSEEK_API_KEY: API key (required unless passed as override)
            DEEPSEEK_BASE_URL: Base URL for chat completions
            DEEPSEEK_BETA_BASE_URL: Base URL for FIM completions
            DEEPSEEK_TIMEOUT: Request timeout in seconds
            DEEPSEEK_REQUIRE_STREAM_SENTINEL: "1"/"true" for strict streams

        Keyword overrides take precedence over the environment.

        Raises:
            ConfigurationError: If no API key is available or a numeric
                variable cannot be parsed.
        """
        values: dict[str, object] = {}

        api_key = os.environ.get("DEEPSEEK_API_KEY", "")
        if api_key:
            values["api_key"] = api_key
        base_url = os.environ.get("DEEPSEEK_BASE_URL")
        if base_url:
            values["base_url"] = base_url
        beta_base_url = os.environ.get("DEEPSEEK_BETA_BASE_URL")
        if beta_base_url:
            values["beta_base_url"] = beta_base_url

        timeout = os.environ.get("DEEPSEEK_TIMEOUT")
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"DEEPSEEK_TIMEOUT must be a number, got {timeout!r}"
                ) from e

        strict = os.environ.get("DEEPSEEK_REQUIRE_STREAM_SENTINEL")
        if strict:
            values["require_stream_sentinel"] = strict.strip().lower() in _TRUTHY

        values.update(overrides)

        try:
            config = cls(**values)  # type: ignore[arg-type]
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        if not config.api_key and config.api_type.requires_auth:
            raise ConfigurationError(
                "DEEPSEEK_API_KEY is not set and no api_key was provided"
            )
        return config


__all__ = [
    "BETA_BASE_URL",
    "CHAT_COMPLETIONS_PATH",
    "DEFAULT_BASE_URL",
    "FIM_COMPLETIONS_PATH",
    "FIM_MAX_TOKENS",
    "ApiType",
    "ClientConfig",
]
