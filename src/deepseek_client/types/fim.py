# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Fill-in-middle (FIM) completion request and response types.

FIM completions are served by the beta endpoint (``completions`` on
``beta_base_url``) and use the legacy text-completion response shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..exceptions import RequestBuildError
from .common import (
    Usage,
    drop_none,
    expect_mapping,
    list_field,
    optional_field,
    optional_usage,
)


@dataclass
class FIMCompletionRequest:
    """
    Request body for ``POST completions`` (beta).

    The model completes the text between ``prompt`` and ``suffix``.
    """

    model: str
    prompt: str
    suffix: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    echo: bool | None = None
    logprobs: int | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stop: str | list[str] | None = None
    stream: bool = False
    stream_options: dict[str, Any] | None = None

    def validate(self, max_tokens_limit: int | None = None) -> None:
        """
        Check fields that the API would reject.

        Args:
            max_tokens_limit: Upper bound for max_tokens, if any.

        Raises:
            RequestBuildError: On an empty model or a max_tokens value
                outside ``1..max_tokens_limit``.
        """
        if not self.model:
            raise RequestBuildError("model must not be empty")
        if self.max_tokens is not None:
            if self.max_tokens < 1:
                raise RequestBuildError("max_tokens must be at least 1")
            if max_tokens_limit is not None and self.max_tokens > max_tokens_limit:
                raise RequestBuildError(f"max tokens must be <= {max_tokens_limit}")

    def to_dict(self) -> dict[str, Any]:
        data = drop_none(
            {
                "model": self.model,
                "prompt": self.prompt,
                "suffix": self.suffix,
                "max_tokens": self.max_tokens,
                "temperature": self.temperature,
                "top_p": self.top_p,
                "echo": self.echo,
                "logprobs": self.logprobs,
                "frequency_penalty": self.frequency_penalty,
                "presence_penalty": self.presence_penalty,
                "stop": self.stop,
                "stream_options": self.stream_options if self.stream else None,
            }
        )
        if self.stream:
            data["stream"] = True
        return data


@dataclass
class FIMStreamCompletionRequest(FIMCompletionRequest):
    """FIM completion request that asks for an incremental response."""

    stream: bool = True


@dataclass(frozen=True)
class FIMChoice:
    """One text alternative; used both for full responses and stream frames."""

    index: int
    text: str = ""
    finish_reason: str | None = None
    logprobs: Mapping[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> FIMChoice:
        data = expect_mapping(data, "choice")
        return cls(
            index=optional_field(data, "index", int) or 0,
            text=optional_field(data, "text", str) or "",
            finish_reason=optional_field(data, "finish_reason", str),
            logprobs=optional_field(data, "logprobs", Mapping),
        )


@dataclass(frozen=True)
class FIMCompletionResponse:
    """Single-shot FIM completion response."""

    id: str
    model: str
    choices: tuple[FIMChoice, ...]
    created: int = 0
    object: str = "text_completion"
    usage: Usage | None = None

    @classmethod
    def from_dict(cls, data: Any) -> FIMCompletionResponse:
        data = expect_mapping(data, "response")
        return cls(
            id=optional_field(data, "id", str) or "",
            object=optional_field(data, "object", str) or "text_completion",
            created=optional_field(data, "created", int) or 0,
            model=optional_field(data, "model", str) or "",
            choices=tuple(FIMChoice.from_dict(raw) for raw in list_field(data, "choices")),
            usage=optional_usage(data),
        )

    @property
    def text(self) -> str:
        """Text of the first choice, or an empty string."""
        return self.choices[0].text if self.choices else ""


@dataclass(frozen=True)
class FIMCompletionChunk(FIMCompletionResponse):
    """One decoded ``data:`` frame of a FIM completion stream."""

    choices: tuple[FIMChoice, ...] = ()

    @property
    def finish_reason(self) -> str | None:
        """Finish reason of the first choice, if this frame carries one."""
        return self.choices[0].finish_reason if self.choices else None


__all__ = [
    "FIMChoice",
    "FIMCompletionChunk",
    "FIMCompletionRequest",
    "FIMCompletionResponse",
    "FIMStreamCompletionRequest",
]
