# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request and response types for the completion API.

Chat types:
    ChatCompletionRequest / StreamChatCompletionRequest: Request bodies
    ChatCompletionResponse: Single-shot response
    ChatCompletionChunk: One streamed delta event

FIM (fill-in-middle) types:
    FIMCompletionRequest / FIMStreamCompletionRequest: Request bodies
    FIMCompletionResponse: Single-shot response
    FIMCompletionChunk: One streamed delta event

Shared:
    Usage: Token usage accounting
"""

from .chat import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    Choice,
    ChoiceDelta,
    FunctionCall,
    StreamChatCompletionRequest,
    StreamChoice,
    ToolCall,
    ToolCallDelta,
)
from .common import Usage
from .fim import (
    FIMChoice,
    FIMCompletionChunk,
    FIMCompletionRequest,
    FIMCompletionResponse,
    FIMStreamCompletionRequest,
)

__all__ = [
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatMessage",
    "Choice",
    "ChoiceDelta",
    "FIMChoice",
    "FIMCompletionChunk",
    "FIMCompletionRequest",
    "FIMCompletionResponse",
    "FIMStreamCompletionRequest",
    "FunctionCall",
    "StreamChatCompletionRequest",
    "StreamChoice",
    "ToolCall",
    "ToolCallDelta",
    "Usage",
]
