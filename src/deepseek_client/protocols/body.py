# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for streamed response bodies."""

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class StreamingBodyProtocol(Protocol):
    """
    Protocol for an open, byte-readable, closable response body.

    ``httpx.Response`` obtained with ``send(..., stream=True)`` satisfies
    this protocol. Stream sessions read from ``aiter_bytes()`` exactly once
    and call ``aclose()`` exactly once.
    """

    def aiter_bytes(self) -> AsyncIterator[bytes]:
        """Iterate over the body as it arrives, in arbitrary-sized chunks."""
        ...

    async def aclose(self) -> None:
        """Release the underlying connection."""
        ...
