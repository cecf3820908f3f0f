# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Line reader over a chunked byte stream.

HTTP chunk and TCP segment boundaries have no relation to line
boundaries: one read may carry half a line, several lines, or a line
split in the middle of a multi-byte UTF-8 character. FrameReader buffers
bytes across reads and only decodes complete lines.
"""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator

import httpx

from ..exceptions import TransportError

logger = logging.getLogger(__name__)

_LF = 0x0A
_TERMINATOR = re.compile(rb"[\r\n]")


class EndOfStream(Exception):
    """
    Raised by FrameReader.next_line() once the byte stream is exhausted.

    This is an ordinary termination signal, not a failure, and is
    therefore not part of the DeepSeekError hierarchy.
    """


class FrameReader:
    """
    Present an async byte iterator as a sequence of text lines.

    Lines are terminated by ``\\r\\n``, ``\\n`` or a lone ``\\r``, as in the
    event-stream format. A ``\\r`` at the end of the buffered bytes is held
    back until the next byte shows whether a ``\\n`` follows.
    A trailing line without terminator is returned before EndOfStream.

    Usage:
        reader = FrameReader(response.aiter_bytes())
        while True:
            try:
                line = await reader.next_line()
            except EndOfStream:
                break
    """

    __slots__ = ("_buffer", "_chunks", "_eof", "_error", "_scan_from")

    def __init__(self, chunks: AsyncIterator[bytes]) -> None:
        """
        Initialize the reader.

        Args:
            chunks: Async iterator yielding the body in arbitrary chunks
        """
        self._chunks = chunks
        self._buffer = bytearray()
        self._scan_from = 0
        self._eof = False
        self._error: TransportError | None = None

    @property
    def buffered(self) -> int:
        """Number of bytes received but not yet returned as lines."""
        return len(self._buffer)

    async def next_line(self) -> str:
        """
        Return the next complete line, terminator stripped.

        Returns:
            The decoded line (UTF-8, undecodable bytes replaced)

        Raises:
            EndOfStream: The byte stream ended and nothing is buffered
            TransportError: The underlying read failed; raised again on
                every later call
        """
        if self._error is not None:
            raise self._error

        while True:
            match = _TERMINATOR.search(self._buffer, self._scan_from)
            if match is not None:
                end = match.start()
                if self._buffer[end] == _LF:
                    return self._take(end, end + 1)
                if end + 1 < len(self._buffer):
                    skip = 2 if self._buffer[end + 1] == _LF else 1
                    return self._take(end, end + skip)
                if self._eof:
                    return self._take(end, end + 1)
                # Trailing CR: wait for the next byte before deciding
                self._scan_from = end
                await self._fill()
                continue

            if self._eof:
                if self._buffer:
                    return self._take(len(self._buffer), len(self._buffer))
                raise EndOfStream()

            # Bytes already scanned hold no terminator
            self._scan_from = len(self._buffer)
            await self._fill()

    async def _fill(self) -> None:
        """Append the next chunk to the buffer, or mark end of stream."""
        try:
            chunk = await self._chunks.__anext__()
        except StopAsyncIteration:
            self._eof = True
            return
        except (httpx.HTTPError, httpx.StreamError, OSError) as e:
            self._error = TransportError(
                f"Stream read failed: {type(e).__name__}: {e}"
            )
            logger.debug(f"Frame reader transport failure: {type(e).__name__}: {e}")
            raise self._error from e
        self._buffer.extend(chunk)

    async def aclose(self) -> None:
        """Close the underlying chunk iterator if it supports aclose()."""
        self._eof = True
        self._buffer.clear()
        self._scan_from = 0
        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            await aclose()

    def _take(self, end: int, consumed: int) -> str:
        """Remove ``consumed`` bytes from the buffer and decode the first ``end``."""
        raw = bytes(self._buffer[:end])
        del self._buffer[:consumed]
        self._scan_from = 0
        return raw.decode("utf-8", errors="replace")


__all__ = ["EndOfStream", "FrameReader"]
