# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""DeepSeek Client - Async client for the DeepSeek completion API.

This library sends chat and fill-in-middle (FIM) completion requests and
decodes streamed responses into typed deltas, releasing the underlying
connection on every exit path.

Key Features:
    - Single-shot and streamed chat completions
    - Single-shot and streamed FIM completions (beta endpoint)
    - Incremental server-sent event decoding over arbitrary chunk boundaries
    - Explicit cancellation tokens raced against every network read
    - Exactly-once release of the response body
    - Optional in-process or Prometheus stream metrics

Quick Start:
    >>> from deepseek_client import ChatMessage, Client, StreamChatCompletionRequest
    >>>
    >>> async with Client(api_key) as client:
    ...     request = StreamChatCompletionRequest(
    ...         model="deepseek-chat",
    ...         messages=[ChatMessage(role="user", content="Hello")],
    ...     )
    ...     async with await client.create_chat_completion_stream(request) as stream:
    ...         async for chunk in stream:
    ...             print(chunk.content, end="")

Main Exports:
    - Client: The API client
    - ClientConfig: Configuration options (see ClientConfig.from_env)
    - StreamDecoder: Stream session returned by streaming calls
    - CancellationToken: Cooperative cancellation for stream sessions
    - StreamMetrics: In-process stream metrics

Note: PrometheusStreamMetrics requires the 'prometheus' extra. Install with:
    pip install deepseek-client[prometheus]

Version: 1.0.0
"""

__version__ = "1.0.0"

from typing import TYPE_CHECKING, Any

from .cancellation import CancellationToken
from .client import Client
from .config import (
    BETA_BASE_URL,
    DEFAULT_BASE_URL,
    ApiType,
    ClientConfig,
)
from .exceptions import (
    APIError,
    ConfigurationError,
    DecodeError,
    DeepSeekError,
    IncompleteStreamError,
    RequestBuildError,
    StreamCancelledError,
    TransportError,
)
from .http import RequestBuilder
from .observability import StreamMetrics, StreamMetricsProtocol
from .protocols import PayloadDecoder, StreamingBodyProtocol
from .streaming import (
    ChatCompletionStream,
    FIMCompletionStream,
    FrameReader,
    StreamDecoder,
    StreamState,
)
from .types import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    FIMCompletionChunk,
    FIMCompletionRequest,
    FIMCompletionResponse,
    FIMStreamCompletionRequest,
    StreamChatCompletionRequest,
    ToolCall,
    Usage,
)

# Lazy import for optional Prometheus metrics
if TYPE_CHECKING:
    from .observability.prometheus import (
        PrometheusStreamMetrics,
        get_prometheus_stream_metrics,
        reset_prometheus_stream_metrics,
    )

__all__ = [
    "BETA_BASE_URL",
    "DEFAULT_BASE_URL",
    # Exceptions
    "APIError",
    # Configuration
    "ApiType",
    # Cancellation
    "CancellationToken",
    # Types
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    # Streaming
    "ChatCompletionStream",
    "ChatMessage",
    # Client
    "Client",
    "ClientConfig",
    "ConfigurationError",
    "DecodeError",
    "DeepSeekError",
    "FIMCompletionChunk",
    "FIMCompletionRequest",
    "FIMCompletionResponse",
    "FIMCompletionStream",
    "FIMStreamCompletionRequest",
    "FrameReader",
    "IncompleteStreamError",
    # Protocols
    "PayloadDecoder",
    "PrometheusStreamMetrics",  # Lazy loaded - requires prometheus extra
    "RequestBuildError",
    "RequestBuilder",
    "StreamCancelledError",
    "StreamChatCompletionRequest",
    "StreamDecoder",
    # Observability
    "StreamMetrics",
    "StreamMetricsProtocol",
    "StreamState",
    "StreamingBodyProtocol",
    "ToolCall",
    "TransportError",
    "Usage",
    "get_prometheus_stream_metrics",
    "reset_prometheus_stream_metrics",
]

_PROMETHEUS_EXPORTS = frozenset(
    {
        "PrometheusStreamMetrics",
        "get_prometheus_stream_metrics",
        "reset_prometheus_stream_metrics",
    }
)


def __getattr__(name: str) -> Any:
    """Lazy import for optional Prometheus metrics."""
    if name in _PROMETHEUS_EXPORTS:
        from .observability import prometheus

        return getattr(prometheus, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
