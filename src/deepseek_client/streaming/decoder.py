# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Stream decoder for server-sent completion deltas.

This module provides the StreamDecoder class, the stream session handed
to callers of the streaming client calls. It layers an event-stream state
machine on a FrameReader:

1. Lines starting with ``data:`` carry a payload; blank lines and any
   other content (comments, ``event:``/``id:`` fields, keep-alives) are
   skipped
2. The payload ``[DONE]`` ends the stream normally
3. Every other payload is decoded by a mode-specific PayloadDecoder

Key Design Decisions:
- One generic decoder for every completion mode, parameterized by the
  payload decoder
- Terminal states are sticky: once finished, failed or cancelled, every
  pull repeats the same outcome without touching the body again
- The body is released exactly once on every exit path, shielded from
  task cancellation
- Cancellation is explicit: each session owns a child CancellationToken
  that is raced against every read
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from enum import Enum
from types import TracebackType
from typing import Any, Generic, TypeVar

from ..cancellation import CancellationToken
from ..exceptions import (
    DecodeError,
    DeepSeekError,
    IncompleteStreamError,
    StreamCancelledError,
    TransportError,
)
from ..observability.protocols import StreamMetricsProtocol
from ..protocols.body import StreamingBodyProtocol
from ..protocols.decoder import PayloadDecoder
from .reader import EndOfStream, FrameReader

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class StreamState(Enum):
    """Lifecycle state of a stream session.

    - OPEN: Pulls read from the body.
    - FINISHED: ``[DONE]`` (or, in lenient mode, end of body) was seen.
      Every pull returns None.
    - FAILED: A transport or decode error occurred. Every pull raises it.
    - CANCELLED: The caller cancelled or closed the stream. Every pull
      raises StreamCancelledError.
    """

    OPEN = "open"
    FINISHED = "finished"
    FAILED = "failed"
    CANCELLED = "cancelled"


def extract_payload(line: str) -> str | None:
    """
    Return the payload of a ``data:`` line, or None for any other line.

    The marker is removed and surrounding whitespace stripped. A ``data:``
    line with nothing after the marker is treated like a blank line.
    """
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX) :].strip()
    return payload or None


class StreamDecoder(AsyncIterator[T], Generic[T]):
    """
    Pull-based decoder over an open streaming response.

    Usage:
        stream = await client.create_chat_completion_stream(request)
        async with stream:
            async for chunk in stream:
                print(chunk.content, end="")

    Or pull explicitly:
        async with stream:
            while (chunk := await stream.recv()) is not None:
                ...

    ``recv()`` returns None once the stream has finished, and keeps
    returning None on later calls. Errors are raised, and raised again
    (the same instance) on later calls.

    Note:
        Always use ``async with`` (or call ``aclose()``) so the response
        body is released when iteration stops early.
    """

    __slots__ = (
        "__weakref__",
        "_body",
        "_created_at",
        "_decode",
        "_error",
        "_events",
        "_metrics",
        "_mode",
        "_pulling",
        "_reader",
        "_released",
        "_require_sentinel",
        "_state",
        "_status_code",
        "_token",
    )

    def __init__(
        self,
        body: StreamingBodyProtocol,
        decode: PayloadDecoder[T],
        *,
        cancel_token: CancellationToken | None = None,
        require_sentinel: bool = False,
        status_code: int = 200,
        mode: str = "chat",
        metrics: StreamMetricsProtocol | None = None,
    ) -> None:
        """
        Initialize the stream session.

        Args:
            body: Open response body; released by this session
            decode: Payload decoder for this completion mode
            cancel_token: Caller's token; the session derives a child of it
            require_sentinel: Raise IncompleteStreamError if the body ends
                without ``[DONE]`` instead of finishing normally
            status_code: HTTP status of the response, for callers
            mode: Completion mode label for logs and metrics
            metrics: Optional metrics sink
        """
        self._body = body
        self._decode = decode
        self._reader = FrameReader(body.aiter_bytes())
        self._token = (
            cancel_token.child() if cancel_token is not None else CancellationToken()
        )
        self._require_sentinel = require_sentinel
        self._status_code = status_code
        self._mode = mode
        self._metrics = metrics

        self._state = StreamState.OPEN
        self._error: DeepSeekError | None = None
        self._released = False
        self._pulling = False
        self._events = 0
        self._created_at = time.monotonic()

        self._record("record_opened", mode)
        logger.debug(f"Opened {mode} stream (status {status_code})")

    # -- Public API --

    @property
    def state(self) -> StreamState:
        """Current lifecycle state."""
        return self._state

    @property
    def closed(self) -> bool:
        """Whether the session has left the OPEN state."""
        return self._state is not StreamState.OPEN

    @property
    def released(self) -> bool:
        """Whether the response body has been released."""
        return self._released

    @property
    def status_code(self) -> int:
        """HTTP status code of the streamed response."""
        return self._status_code

    @property
    def events_received(self) -> int:
        """Number of delta events delivered so far."""
        return self._events

    @property
    def mode(self) -> str:
        """Completion mode label ("chat" or "fim")."""
        return self._mode

    @property
    def cancel_token(self) -> CancellationToken:
        """The session's own cancellation token."""
        return self._token

    async def recv(self) -> T | None:
        """
        Pull the next delta event.

        Returns:
            The next decoded event, or None once the stream has finished

        Raises:
            TransportError: The connection failed while reading
            DecodeError: A ``data:`` payload could not be decoded
            IncompleteStreamError: The body ended without ``[DONE]``
                (only with require_sentinel=True)
            StreamCancelledError: The session was cancelled or closed
            RuntimeError: Another pull on this session is in progress
        """
        if self._state is not StreamState.OPEN:
            return self._replay()
        if self._pulling:
            raise RuntimeError("recv() called while another pull is in progress")
        if self._token.cancelled:
            await self._close_cancelled(self._cancellation_error())
            return self._replay()

        self._pulling = True
        try:
            return await self._pull()
        except asyncio.CancelledError:
            if self._state is StreamState.OPEN:
                await self._close_cancelled(
                    StreamCancelledError(reason="consuming task was cancelled")
                )
            raise
        finally:
            self._pulling = False

    def cancel(self, reason: str | None = None) -> None:
        """
        Cancel the session.

        The next pull (or the pull currently waiting on the network)
        observes the cancellation, releases the body and raises
        StreamCancelledError. No-op once the session is closed.

        Cancelling an idle session (here or through the caller's token)
        does not release the body by itself: the release happens on the
        next pull or on ``aclose()``. Callers not using ``async with``
        must still call ``aclose()``.
        """
        if self._state is StreamState.OPEN:
            self._token.cancel(reason or "cancelled by caller")

    async def aclose(self) -> None:
        """
        Close the session and release the response body.

        Idempotent. Closing an OPEN session moves it to CANCELLED. If a
        pull is in progress in another task, that pull is cancelled and
        performs the release.
        """
        if self._state is StreamState.OPEN:
            if self._pulling:
                self._token.cancel("stream closed")
                return
            if self._token.cancelled:
                await self._close_cancelled(self._cancellation_error())
            else:
                await self._close_cancelled(StreamCancelledError("Stream closed"))
            return
        await self._release()

    async def __aenter__(self) -> StreamDecoder[T]:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __aiter__(self) -> StreamDecoder[T]:
        """Return self as the async iterator."""
        return self

    async def __anext__(self) -> T:
        event = await self.recv()
        if event is None:
            raise StopAsyncIteration
        return event

    # -- State machine --

    async def _pull(self) -> T | None:
        """Read lines until one yields an event or a terminal state."""
        while True:
            try:
                line = await self._next_line()
            except EndOfStream:
                if self._require_sentinel:
                    await self._close_failed(IncompleteStreamError())
                    return self._replay()
                logger.debug(
                    f"{self._mode} stream body ended without {DONE_SENTINEL}, "
                    f"treating as finished"
                )
                await self._close_finished()
                return None
            except TransportError as e:
                await self._close_failed(e)
                raise
            except Exception as e:
                read_error = TransportError(f"Stream read failed: {type(e).__name__}: {e}")
                await self._close_failed(read_error)
                raise read_error from e

            if line is None:
                await self._close_cancelled(self._cancellation_error())
                return self._replay()

            payload = extract_payload(line)
            if payload is None:
                continue

            if payload == DONE_SENTINEL:
                await self._close_finished()
                return None

            try:
                event = self._decode(payload)
            except DecodeError as e:
                await self._close_failed(e)
                raise
            except Exception as e:
                decode_error = DecodeError(
                    f"Payload decoder failed: {type(e).__name__}: {e}", payload=payload
                )
                await self._close_failed(decode_error)
                raise decode_error from e

            self._events += 1
            self._record("record_event", self._mode)
            return event

    async def _next_line(self) -> str | None:
        """
        Read one line, racing the read against the cancellation token.

        Returns:
            The line, or None if the token fired first
        """
        read = asyncio.ensure_future(self._reader.next_line())
        cancelled = asyncio.ensure_future(self._token.wait())
        try:
            await asyncio.wait({read, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            await _discard(read, cancelled)
            raise

        if self._token.cancelled:
            await _discard(read, cancelled)
            return None

        await _discard(cancelled)
        return read.result()

    def _replay(self) -> T | None:
        """Repeat the terminal outcome of a closed session."""
        if self._error is not None:
            raise self._error
        return None

    def _cancellation_error(self) -> StreamCancelledError:
        return StreamCancelledError(reason=self._token.reason)

    async def _close_finished(self) -> None:
        self._state = StreamState.FINISHED
        duration = time.monotonic() - self._created_at
        logger.debug(
            f"{self._mode} stream finished: {self._events} events in {duration:.2f}s"
        )
        self._record("record_finished", self._mode, self._events, duration)
        await self._release()

    async def _close_failed(self, error: DeepSeekError) -> None:
        self._state = StreamState.FAILED
        self._error = error
        logger.warning(
            f"{self._mode} stream failed after {self._events} events: "
            f"{type(error).__name__}: {error}"
        )
        self._record("record_failed", self._mode, type(error).__name__)
        await self._release()

    async def _close_cancelled(self, error: StreamCancelledError) -> None:
        self._state = StreamState.CANCELLED
        self._error = error
        logger.debug(
            f"{self._mode} stream cancelled after {self._events} events "
            f"({self._reader.buffered} buffered bytes discarded): {error}"
        )
        self._record("record_cancelled", self._mode)
        await self._release()

    # -- Resource release --

    async def _release(self) -> None:
        """
        Release the response body exactly once.

        The close is shielded so a cancelled consumer still releases the
        connection. Failures are logged, not raised: the session has
        already reached its terminal state.
        """
        if self._released:
            return
        self._released = True
        self._token.detach()

        try:
            await asyncio.shield(self._close_body())
            logger.debug(f"Released {self._mode} stream body")
        except Exception as e:
            logger.warning(
                f"Failed to release {self._mode} stream body: {type(e).__name__}: {e}"
            )

    async def _close_body(self) -> None:
        try:
            await self._reader.aclose()
        except Exception as e:
            logger.debug(f"Error closing frame iterator: {type(e).__name__}: {e}")
        await self._body.aclose()

    def _record(self, method: str, *args: Any) -> None:
        """Forward a lifecycle event to the metrics sink, if any."""
        if self._metrics is None:
            return
        try:
            getattr(self._metrics, method)(*args)
        except Exception as metrics_err:
            logger.debug(f"Stream metrics {method} failed: {metrics_err}")


async def _discard(*tasks: asyncio.Future[Any]) -> None:
    """Cancel helper tasks and wait for them to settle."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "StreamDecoder",
    "StreamState",
    "extract_payload",
]
