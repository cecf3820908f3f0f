# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for stream metrics sinks.

Stream sessions report their lifecycle to any object implementing
StreamMetricsProtocol, allowing in-memory counters, Prometheus, or a
custom backend to be plugged in without the decoder knowing which.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StreamMetricsProtocol(Protocol):
    """
    Protocol for stream lifecycle metrics.

    Every method receives the stream ``mode`` ("chat" or "fim") so sinks
    can break numbers down per completion mode. Calls happen on the hot
    path of a stream and must not block.

    Example:
        >>> class NullMetrics:
        ...     def record_opened(self, mode): pass
        ...     def record_event(self, mode): pass
        ...     def record_finished(self, mode, events, duration): pass
        ...     def record_failed(self, mode, error_type): pass
        ...     def record_cancelled(self, mode): pass
        >>>
        >>> isinstance(NullMetrics(), StreamMetricsProtocol)
        True
    """

    def record_opened(self, mode: str) -> None:
        """Record a new stream session."""
        ...

    def record_event(self, mode: str) -> None:
        """Record one decoded delta event."""
        ...

    def record_finished(self, mode: str, events: int, duration: float) -> None:
        """
        Record a stream that reached normal completion.

        Args:
            mode: Stream mode
            events: Number of delta events delivered
            duration: Seconds from session creation to completion
        """
        ...

    def record_failed(self, mode: str, error_type: str) -> None:
        """
        Record a stream that failed.

        Args:
            mode: Stream mode
            error_type: Exception class name (e.g. "DecodeError")
        """
        ...

    def record_cancelled(self, mode: str) -> None:
        """Record a stream cancelled or closed early by the caller."""
        ...


__all__ = ["StreamMetricsProtocol"]
