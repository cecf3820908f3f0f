# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Chat completion request and response types.

Requests serialize with ``to_dict()`` (None fields dropped). Responses
and streamed chunks are built with ``from_dict()`` from decoded JSON.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
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

CHAT_ROLES = frozenset({"system", "user", "assistant", "tool"})


@dataclass(frozen=True)
class FunctionCall:
    """Function name and JSON-encoded arguments chosen by the model."""

    name: str
    arguments: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> FunctionCall:
        data = expect_mapping(data, "function")
        return cls(
            name=optional_field(data, "name", str) or "",
            arguments=optional_field(data, "arguments", str) or "",
        )


@dataclass(frozen=True)
class ToolCall:
    """A complete tool call in a single-shot response message."""

    id: str
    function: FunctionCall
    type: str = "function"

    @classmethod
    def from_dict(cls, data: Any) -> ToolCall:
        data = expect_mapping(data, "tool_call")
        return cls(
            id=optional_field(data, "id", str) or "",
            type=optional_field(data, "type", str) or "function",
            function=FunctionCall.from_dict(data.get("function") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "function": {
                "name": self.function.name,
                "arguments": self.function.arguments,
            },
        }


@dataclass
class ChatMessage:
    """
    One message of a chat conversation.

    Attributes:
        role: One of "system", "user", "assistant", "tool"
        content: Message text
        name: Optional participant name
        reasoning_content: Reasoning text returned by reasoning models
        tool_calls: Tool calls made by an assistant message
        tool_call_id: For role="tool", the call this message answers
        prefix: For assistant prefix completion (beta)
    """

    role: str
    content: str = ""
    name: str | None = None
    reasoning_content: str | None = None
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None
    prefix: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data = drop_none(
            {
                "role": self.role,
                "content": self.content,
                "name": self.name,
                "tool_call_id": self.tool_call_id,
                "prefix": self.prefix,
            }
        )
        if self.tool_calls:
            data["tool_calls"] = [call.to_dict() for call in self.tool_calls]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> ChatMessage:
        data = expect_mapping(data, "message")
        tool_calls = [ToolCall.from_dict(raw) for raw in list_field(data, "tool_calls")]
        return cls(
            role=optional_field(data, "role", str) or "assistant",
            content=optional_field(data, "content", str) or "",
            name=optional_field(data, "name", str),
            reasoning_content=optional_field(data, "reasoning_content", str),
            tool_calls=tool_calls or None,
            tool_call_id=optional_field(data, "tool_call_id", str),
        )


@dataclass
class ChatCompletionRequest:
    """
    Request body for ``POST chat/completions``.

    ``messages`` accepts ChatMessage instances or plain dicts.
    """

    model: str
    messages: list[ChatMessage | dict[str, Any]]
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stop: str | list[str] | None = None
    response_format: dict[str, Any] | None = None
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None
    logprobs: bool | None = None
    top_logprobs: int | None = None
    stream: bool = False
    stream_options: dict[str, Any] | None = None

    def validate(self) -> None:
        """
        Check fields that the API would reject.

        Raises:
            RequestBuildError: On an empty model, no messages or an
                unknown message role.
        """
        if not self.model:
            raise RequestBuildError("model must not be empty")
        if not self.messages:
            raise RequestBuildError("messages must not be empty")
        for message in self.messages:
            role = message.role if isinstance(message, ChatMessage) else message.get("role")
            if role not in CHAT_ROLES:
                raise RequestBuildError(f"unknown message role: {role!r}")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise RequestBuildError("max_tokens must be at least 1")

    def to_dict(self) -> dict[str, Any]:
        data = drop_none(
            {
                "model": self.model,
                "messages": [
                    m.to_dict() if isinstance(m, ChatMessage) else dict(m)
                    for m in self.messages
                ],
                "max_tokens": self.max_tokens,
                "temperature": self.temperature,
                "top_p": self.top_p,
                "frequency_penalty": self.frequency_penalty,
                "presence_penalty": self.presence_penalty,
                "stop": self.stop,
                "response_format": self.response_format,
                "tools": self.tools,
                "tool_choice": self.tool_choice,
                "logprobs": self.logprobs,
                "top_logprobs": self.top_logprobs,
                "stream_options": self.stream_options if self.stream else None,
            }
        )
        if self.stream:
            data["stream"] = True
        return data


@dataclass
class StreamChatCompletionRequest(ChatCompletionRequest):
    """Chat completion request that asks for an incremental response."""

    stream: bool = True


@dataclass(frozen=True)
class Choice:
    """One completion alternative of a single-shot response."""

    index: int
    message: ChatMessage
    finish_reason: str | None = None
    logprobs: Mapping[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Choice:
        data = expect_mapping(data, "choice")
        return cls(
            index=optional_field(data, "index", int) or 0,
            message=ChatMessage.from_dict(data.get("message") or {}),
            finish_reason=optional_field(data, "finish_reason", str),
            logprobs=optional_field(data, "logprobs", Mapping),
        )


@dataclass(frozen=True)
class ChatCompletionResponse:
    """Single-shot chat completion response."""

    id: str
    model: str
    choices: tuple[Choice, ...]
    created: int = 0
    object: str = "chat.completion"
    usage: Usage | None = None
    system_fingerprint: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ChatCompletionResponse:
        data = expect_mapping(data, "response")
        return cls(
            id=optional_field(data, "id", str) or "",
            object=optional_field(data, "object", str) or "chat.completion",
            created=optional_field(data, "created", int) or 0,
            model=optional_field(data, "model", str) or "",
            choices=tuple(Choice.from_dict(raw) for raw in list_field(data, "choices")),
            usage=optional_usage(data),
            system_fingerprint=optional_field(data, "system_fingerprint", str),
        )

    @property
    def content(self) -> str:
        """Content of the first choice, or an empty string."""
        return self.choices[0].message.content if self.choices else ""


@dataclass(frozen=True)
class ToolCallDelta:
    """A fragment of a tool call; fragments with the same index concatenate."""

    index: int
    id: str | None = None
    type: str | None = None
    name: str | None = None
    arguments: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ToolCallDelta:
        data = expect_mapping(data, "tool_call")
        function = optional_field(data, "function", Mapping) or {}
        return cls(
            index=optional_field(data, "index", int) or 0,
            id=optional_field(data, "id", str),
            type=optional_field(data, "type", str),
            name=optional_field(function, "name", str),
            arguments=optional_field(function, "arguments", str),
        )


@dataclass(frozen=True)
class ChoiceDelta:
    """Role/content fragments carried by one streamed choice."""

    role: str | None = None
    content: str | None = None
    reasoning_content: str | None = None
    tool_calls: tuple[ToolCallDelta, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> ChoiceDelta:
        data = expect_mapping(data, "delta")
        return cls(
            role=optional_field(data, "role", str),
            content=optional_field(data, "content", str),
            reasoning_content=optional_field(data, "reasoning_content", str),
            tool_calls=tuple(
                ToolCallDelta.from_dict(raw) for raw in list_field(data, "tool_calls")
            ),
        )


@dataclass(frozen=True)
class StreamChoice:
    """One choice of a streamed chat chunk."""

    index: int
    delta: ChoiceDelta = field(default_factory=ChoiceDelta)
    finish_reason: str | None = None
    logprobs: Mapping[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> StreamChoice:
        data = expect_mapping(data, "choice")
        return cls(
            index=optional_field(data, "index", int) or 0,
            delta=ChoiceDelta.from_dict(data.get("delta") or {}),
            finish_reason=optional_field(data, "finish_reason", str),
            logprobs=optional_field(data, "logprobs", Mapping),
        )


@dataclass(frozen=True)
class ChatCompletionChunk:
    """
    One decoded ``data:`` frame of a chat completion stream.

    The final frame of a stream typically has empty ``choices`` and a
    populated ``usage`` when usage reporting was requested.
    """

    id: str
    model: str
    choices: tuple[StreamChoice, ...] = ()
    created: int = 0
    object: str = "chat.completion.chunk"
    usage: Usage | None = None
    system_fingerprint: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ChatCompletionChunk:
        data = expect_mapping(data, "chunk")
        return cls(
            id=optional_field(data, "id", str) or "",
            object=optional_field(data, "object", str) or "chat.completion.chunk",
            created=optional_field(data, "created", int) or 0,
            model=optional_field(data, "model", str) or "",
            choices=tuple(
                StreamChoice.from_dict(raw) for raw in list_field(data, "choices")
            ),
            usage=optional_usage(data),
            system_fingerprint=optional_field(data, "system_fingerprint", str),
        )

    @property
    def content(self) -> str:
        """Content fragment of the first choice, or an empty string."""
        if not self.choices:
            return ""
        return self.choices[0].delta.content or ""

    @property
    def finish_reason(self) -> str | None:
        """Finish reason of the first choice, if this frame carries one."""
        return self.choices[0].finish_reason if self.choices else None


__all__ = [
    "CHAT_ROLES",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatMessage",
    "Choice",
    "ChoiceDelta",
    "FunctionCall",
    "StreamChatCompletionRequest",
    "StreamChoice",
    "ToolCall",
    "ToolCallDelta",
]
