# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Explicit cancellation tokens for stream sessions.

A CancellationToken is handed to a stream session when it is created and
checked on every pull. Tokens form a tree: cancelling a parent cancels
every child attached to it, while cancelling a child leaves the parent
untouched. Each stream session derives its own child token, so closing
one stream never cancels its siblings.

Tokens are not thread-safe; cancel them from the event loop thread
(use ``loop.call_soon_threadsafe(token.cancel)`` from other threads).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

CancelCallback = Callable[["CancellationToken"], None]


class CancellationToken:
    """
    Cooperative cancellation signal.

    Usage:
        token = CancellationToken()
        stream = await client.create_chat_completion_stream(
            request, cancel_token=token
        )
        token.cancel_after(30.0)  # deadline

        async with stream:
            async for chunk in stream:
                ...
    """

    __slots__ = (
        "__weakref__",
        "_callbacks",
        "_event",
        "_parent",
        "_reason",
        "_timer",
    )

    def __init__(self, parent: CancellationToken | None = None) -> None:
        self._event = asyncio.Event()
        self._callbacks: list[CancelCallback] = []
        self._reason: str | None = None
        self._parent: CancellationToken | None = None
        self._timer: asyncio.TimerHandle | None = None

        if parent is not None:
            if parent.cancelled:
                self.cancel(parent.reason)
            else:
                self._parent = parent
                parent.add_callback(self._on_parent_cancelled)

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called on this token or an ancestor."""
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """The reason passed to cancel(), if any."""
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """
        Trigger cancellation.

        Idempotent: only the first call records a reason and runs callbacks.

        Args:
            reason: Optional human-readable reason, surfaced on
                StreamCancelledError.reason.
        """
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.debug(f"Cancellation callback failed: {type(e).__name__}: {e}")

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        await self._event.wait()

    def child(self) -> CancellationToken:
        """Create a token that is cancelled whenever this one is."""
        return CancellationToken(parent=self)

    def cancel_after(self, delay: float, reason: str | None = None) -> None:
        """
        Cancel the token after ``delay`` seconds.

        Must be called from a running event loop. A later call replaces
        the previous deadline.
        """
        if self.cancelled:
            return
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(
            delay, self.cancel, reason or f"deadline of {delay:.1f}s exceeded"
        )

    def add_callback(self, callback: CancelCallback) -> None:
        """Register a callback run once on cancellation (immediately if already cancelled)."""
        if self.cancelled:
            callback(self)
            return
        self._callbacks.append(callback)

    def remove_callback(self, callback: CancelCallback) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def detach(self) -> None:
        """
        Drop the link to the parent token.

        Called by stream sessions on release so a long-lived parent does
        not accumulate callbacks from finished streams.
        """
        if self._parent is not None:
            self._parent.remove_callback(self._on_parent_cancelled)
            self._parent = None
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_parent_cancelled(self, parent: CancellationToken) -> None:
        self._parent = None
        self.cancel(parent.reason)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancellationToken({state})"


__all__ = ["CancellationToken"]
