# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
In-process stream metrics.

StreamMetrics counts stream sessions and delivered delta events. It
implements StreamMetricsProtocol and can be passed to Client(metrics=...)
or directly to a StreamDecoder.

Usage:
    metrics = StreamMetrics()
    client = Client(api_key, metrics=metrics)

    ...

    stats = metrics.get_stats()
    print(stats["streams_finished"], stats["streams_per_mode"]["chat"])

Important Notes on Modes:
    The per-mode dictionaries are designed for CATEGORICAL mode names
    ("chat", "fim"). Do not use dynamic identifiers (request IDs,
    timestamps) as modes; set max_tracked_modes > 0 to cap growth.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# Default maximum tracked modes (0 = unlimited)
DEFAULT_MAX_TRACKED_MODES = 0


@dataclass
class StreamMetrics:
    """
    Stream session counters.

    Tracks:
    - Session lifecycle (opened, finished, failed, cancelled), in total
      and per mode
    - Delivered delta events, in total and per mode
    - Total wall-clock time and event count of finished streams
    - Failures broken down by exception class

    Thread Safety:
        Simple counter increments rely on the GIL. Dictionary updates use
        a threading.Lock for the get + increment + set pattern.

    Example:
        >>> metrics = StreamMetrics()
        >>> metrics.record_opened("chat")
        >>> metrics.record_event("chat")
        >>> metrics.record_finished("chat", events=1, duration=0.5)
        >>> metrics.get_completion_rate()
        1.0
    """

    # Session lifecycle counters
    streams_opened: int = 0
    streams_finished: int = 0
    streams_failed: int = 0
    streams_cancelled: int = 0

    # Event accounting
    events_decoded: int = 0
    total_stream_seconds: float = 0.0
    finished_stream_events: int = 0

    # Breakdowns
    _streams_per_mode: OrderedDict[str, dict[str, int]] = field(
        default_factory=OrderedDict, repr=False
    )
    _events_per_mode: OrderedDict[str, int] = field(
        default_factory=OrderedDict, repr=False
    )
    _failures_by_type: OrderedDict[str, int] = field(
        default_factory=OrderedDict, repr=False
    )

    # Maximum number of modes to track (0 = unlimited)
    max_tracked_modes: int = field(default=DEFAULT_MAX_TRACKED_MODES, repr=False)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_opened(self, mode: str) -> None:
        """Record a new stream session."""
        self.streams_opened += 1
        self._update_outcome(mode, "opened")

    def record_event(self, mode: str) -> None:
        """Record one decoded delta event."""
        self.events_decoded += 1
        self._update_counter(self._events_per_mode, mode, 1)

    def record_finished(self, mode: str, events: int, duration: float) -> None:
        """Record a stream that reached normal completion."""
        self.streams_finished += 1
        self.total_stream_seconds += duration
        self.finished_stream_events += events
        self._update_outcome(mode, "finished")

    def record_failed(self, mode: str, error_type: str) -> None:
        """Record a stream that failed with ``error_type``."""
        self.streams_failed += 1
        self._update_outcome(mode, "failed")
        self._update_counter(self._failures_by_type, error_type, 1)

    def record_cancelled(self, mode: str) -> None:
        """Record a stream cancelled or closed early."""
        self.streams_cancelled += 1
        self._update_outcome(mode, "cancelled")

    def get_completion_rate(self) -> float:
        """
        Proportion of closed streams that finished normally.

        Returns 1.0 if no stream has closed yet (optimistic default).
        """
        closed = self.streams_finished + self.streams_failed + self.streams_cancelled
        return self.streams_finished / closed if closed > 0 else 1.0

    def get_average_events_per_stream(self) -> float:
        """Mean number of events delivered by streams that finished normally."""
        if self.streams_finished == 0:
            return 0.0
        return self.finished_stream_events / self.streams_finished

    @property
    def active_streams(self) -> int:
        """Streams opened but not yet closed."""
        closed = self.streams_finished + self.streams_failed + self.streams_cancelled
        return max(self.streams_opened - closed, 0)

    def get_stats(self) -> dict[str, Any]:
        """
        Return metrics as a dictionary for JSON serialization.

        Returns:
            Dictionary containing all counters and derived values.
        """
        with self._lock:
            streams_per_mode = {
                mode: dict(outcomes) for mode, outcomes in self._streams_per_mode.items()
            }
            events_per_mode = dict(self._events_per_mode)
            failures_by_type = dict(self._failures_by_type)
        return {
            "streams_opened": self.streams_opened,
            "streams_finished": self.streams_finished,
            "streams_failed": self.streams_failed,
            "streams_cancelled": self.streams_cancelled,
            "active_streams": self.active_streams,
            "events_decoded": self.events_decoded,
            "total_stream_seconds": self.total_stream_seconds,
            "finished_stream_events": self.finished_stream_events,
            "average_events_per_stream": self.get_average_events_per_stream(),
            "completion_rate": self.get_completion_rate(),
            "streams_per_mode": streams_per_mode,
            "events_per_mode": events_per_mode,
            "failures_by_type": failures_by_type,
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.streams_opened = 0
        self.streams_finished = 0
        self.streams_failed = 0
        self.streams_cancelled = 0
        self.events_decoded = 0
        self.total_stream_seconds = 0.0
        self.finished_stream_events = 0

        with self._lock:
            self._streams_per_mode.clear()
            self._events_per_mode.clear()
            self._failures_by_type.clear()

    def _update_counter(
        self,
        counter_dict: OrderedDict[str, int],
        key: str,
        increment: int,
    ) -> None:
        """Thread-safe update of a keyed counter with LRU eviction."""
        with self._lock:
            counter_dict[key] = counter_dict.get(key, 0) + increment
            counter_dict.move_to_end(key)

            if self.max_tracked_modes > 0:
                while len(counter_dict) > self.max_tracked_modes:
                    oldest_key, _ = counter_dict.popitem(last=False)
                    logger.debug(f"LRU evicted stream metrics for: {oldest_key}")

    def _update_outcome(self, mode: str, outcome: str) -> None:
        """Thread-safe update of the per-mode lifecycle counts."""
        with self._lock:
            outcomes = self._streams_per_mode.setdefault(mode, {})
            outcomes[outcome] = outcomes.get(outcome, 0) + 1
            self._streams_per_mode.move_to_end(mode)

            if self.max_tracked_modes > 0:
                while len(self._streams_per_mode) > self.max_tracked_modes:
                    oldest_mode, _ = self._streams_per_mode.popitem(last=False)
                    logger.debug(f"LRU evicted stream lifecycle metrics for: {oldest_mode}")


__all__ = ["StreamMetrics"]
