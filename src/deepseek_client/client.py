# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Async client for the DeepSeek completion API.

The client exposes four calls: single-shot and streamed chat completions,
and single-shot and streamed fill-in-middle (FIM) completions. Streamed
calls return a StreamDecoder once the server has answered with a success
status; error statuses raise APIError before any stream session exists.

Usage:
    async with Client(api_key) as client:
        request = StreamChatCompletionRequest(
            model="deepseek-chat",
            messages=[ChatMessage(role="user", content="Hi")],
        )
        stream = await client.create_chat_completion_stream(request)
        async with stream:
            async for chunk in stream:
                print(chunk.content, end="")
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, TypeVar

import httpx

from .cancellation import CancellationToken
from .config import CHAT_COMPLETIONS_PATH, FIM_COMPLETIONS_PATH, ClientConfig
from .exceptions import RequestBuildError, StreamCancelledError, TransportError
from .http.builder import RequestBuilder
from .http.errors import parse_api_error, read_api_error
from .observability.protocols import StreamMetricsProtocol
from .protocols.decoder import PayloadDecoder
from .streaming import ChatCompletionStream, FIMCompletionStream
from .streaming.decoder import StreamDecoder
from .streaming.payloads import decode_chat_chunk, decode_fim_chunk, decode_json_payload
from .types.chat import ChatCompletionRequest, ChatCompletionResponse
from .types.fim import FIMCompletionRequest, FIMCompletionResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Client:
    """
    Async completion client.

    Free of shared mutable state apart from the underlying
    ``httpx.AsyncClient`` connection pool, so one client can serve many
    concurrent calls and streams.

    Args:
        api_key: API key; overrides ``config.api_key`` when both are given
        config: Client configuration (defaults to ClientConfig())
        http_client: Externally managed ``httpx.AsyncClient``; it is not
            closed by ``aclose()``
        metrics: Optional sink for stream lifecycle metrics
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        metrics: StreamMetricsProtocol | None = None,
    ) -> None:
        if config is None:
            config = ClientConfig(api_key=api_key or "")
        elif api_key is not None:
            config = dataclasses.replace(config, api_key=api_key)
        self._config = config
        self._metrics = metrics
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout)
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def aclose(self) -> None:
        """Close the HTTP connection pool if this client created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # -- Chat completions --

    async def create_chat_completion(
        self, request: ChatCompletionRequest | None
    ) -> ChatCompletionResponse:
        """
        Send a chat completion request and return the full response.

        Raises:
            RequestBuildError: The request is None or invalid
            TransportError: The request could not be sent
            APIError: The API answered with status >= 400
            DecodeError: The response body is not a valid completion
        """
        request = _with_stream(request, False)
        request.validate()

        http_request = self._builder(
            self._config.base_url, CHAT_COMPLETIONS_PATH, request
        ).build()
        return await self._complete(
            http_request, ChatCompletionResponse.from_dict, "chat completion"
        )

    async def create_chat_completion_stream(
        self,
        request: ChatCompletionRequest | None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> ChatCompletionStream:
        """
        Send a chat completion request with ``stream=True``.

        The caller's request object is not modified.

        Args:
            request: Chat request (any ChatCompletionRequest)
            cancel_token: Optional token; cancelling it cancels the stream

        Returns:
            An open stream session yielding ChatCompletionChunk

        Raises:
            RequestBuildError: The request is None or invalid
            StreamCancelledError: cancel_token was already cancelled
            TransportError: The request could not be sent
            APIError: The API answered with status >= 400
        """
        streaming = _with_stream(request, True)
        streaming.validate()

        http_request = self._builder(
            self._config.base_url, CHAT_COMPLETIONS_PATH, streaming
        ).build_stream()
        return await self._open_stream(
            http_request, decode_chat_chunk, mode="chat", cancel_token=cancel_token
        )

    # -- FIM completions (beta) --

    async def create_fim_completion(
        self, request: FIMCompletionRequest | None
    ) -> FIMCompletionResponse:
        """
        Send a FIM completion request to the beta endpoint.

        Raises:
            RequestBuildError: The request is None, invalid, or asks for
                more than ``config.fim_max_tokens`` tokens
            TransportError: The request could not be sent
            APIError: The API answered with status >= 400
            DecodeError: The response body is not a valid completion
        """
        request = _with_stream(request, False)
        request.validate(max_tokens_limit=self._config.fim_max_tokens)

        http_request = self._builder(
            self._config.beta_base_url, FIM_COMPLETIONS_PATH, request
        ).build()
        return await self._complete(
            http_request, FIMCompletionResponse.from_dict, "FIM completion"
        )

    async def create_fim_stream_completion(
        self,
        request: FIMCompletionRequest | None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> FIMCompletionStream:
        """
        Send a FIM completion request with ``stream=True``.

        Returns:
            An open stream session yielding FIMCompletionChunk

        Raises:
            Same as create_chat_completion_stream(), plus RequestBuildError
            when max_tokens exceeds ``config.fim_max_tokens``
        """
        streaming = _with_stream(request, True)
        streaming.validate(max_tokens_limit=self._config.fim_max_tokens)

        http_request = self._builder(
            self._config.beta_base_url, FIM_COMPLETIONS_PATH, streaming
        ).build_stream()
        return await self._open_stream(
            http_request, decode_fim_chunk, mode="fim", cancel_token=cancel_token
        )

    # -- Internal dispatch --

    def _builder(self, base_url: str, path: str, body: Any) -> RequestBuilder:
        return (
            RequestBuilder(self._config.api_key)
            .set_base_url(base_url)
            .set_path(path)
            .set_body(body)
            .set_api_type(self._config.api_type)
        )

    async def _send(self, request: httpx.Request, *, stream: bool) -> httpx.Response:
        try:
            return await self._http.send(request, stream=stream)
        except (httpx.HTTPError, OSError) as e:
            raise TransportError(
                f"Error sending request: {type(e).__name__}: {e}"
            ) from e

    async def _complete(
        self,
        request: httpx.Request,
        build: Callable[[Any], T],
        kind: str,
    ) -> T:
        """Send a single-shot request and decode the JSON response."""
        response = await self._send(request, stream=False)
        if response.status_code >= 400:
            raise parse_api_error(
                response.status_code, response.text, response.reason_phrase
            )
        logger.debug(f"{kind} response received (status {response.status_code})")
        return decode_json_payload(response.content, build, kind)

    async def _open_stream(
        self,
        request: httpx.Request,
        decode: PayloadDecoder[T],
        *,
        mode: str,
        cancel_token: CancellationToken | None,
    ) -> StreamDecoder[T]:
        """Send a streaming request and wrap a successful response."""
        if cancel_token is not None and cancel_token.cancelled:
            raise StreamCancelledError(reason=cancel_token.reason)

        response = await self._send(request, stream=True)
        if response.status_code >= 400:
            raise await read_api_error(response)

        return StreamDecoder(
            response,
            decode,
            cancel_token=cancel_token,
            require_sentinel=self._config.require_stream_sentinel,
            status_code=response.status_code,
            mode=mode,
            metrics=self._metrics,
        )



def _with_stream(request: Any, stream: bool) -> Any:
    """
    Copy a request dataclass with ``stream`` set.

    Raises:
        RequestBuildError: If the request is None or not a request dataclass
    """
    if request is None:
        raise RequestBuildError("request cannot be None")
    try:
        return dataclasses.replace(request, stream=stream)
    except TypeError as e:
        raise RequestBuildError(
            f"request must be a completion request dataclass, got {type(request).__name__}"
        ) from e

__all__ = ["Client"]
