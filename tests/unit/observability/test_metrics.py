# SPDX-License-Identifier: Apache-2.0
"""
Unit tests for the in-process stream metrics.

Tests cover:
- StreamMetrics: Counters for stream sessions and delivered events
- Derived values: completion rate and active streams
- Keyed counters with LRU eviction
"""

from __future__ import annotations

import json
import threading

import pytest

from deepseek_client.observability.metrics import StreamMetrics
from deepseek_client.observability.protocols import StreamMetricsProtocol


class TestStreamMetricsInitialization:
    """Test StreamMetrics initialization."""

    def test_all_counters_start_at_zero(self) -> None:
        """Verify all counters start at 0."""
        metrics = StreamMetrics()

        assert metrics.streams_opened == 0
        assert metrics.streams_finished == 0
        assert metrics.streams_failed == 0
        assert metrics.streams_cancelled == 0
        assert metrics.events_decoded == 0
        assert metrics.total_stream_seconds == 0.0

    def test_breakdowns_start_empty(self) -> None:
        """Verify keyed counters start empty."""
        metrics = StreamMetrics()

        assert metrics._events_per_mode == {}
        assert metrics._streams_per_mode == {}
        assert metrics._failures_by_type == {}

    def test_implements_protocol(self) -> None:
        """Verify StreamMetrics satisfies StreamMetricsProtocol."""
        assert isinstance(StreamMetrics(), StreamMetricsProtocol)


class TestStreamMetricsRecording:
    """Test the record_* methods."""

    @pytest.fixture
    def metrics(self) -> StreamMetrics:
        """Create a fresh StreamMetrics instance."""
        return StreamMetrics()

    def test_record_opened(self, metrics: StreamMetrics) -> None:
        metrics.record_opened("chat")
        metrics.record_opened("fim")

        assert metrics.streams_opened == 2
        assert metrics.active_streams == 2

    def test_record_event_per_mode(self, metrics: StreamMetrics) -> None:
        for _ in range(3):
            metrics.record_event("chat")
        metrics.record_event("fim")

        assert metrics.events_decoded == 4
        assert metrics.get_stats()["events_per_mode"] == {"chat": 3, "fim": 1}

    def test_record_finished_accumulates_duration(self, metrics: StreamMetrics) -> None:
        metrics.record_finished("chat", events=10, duration=1.5)
        metrics.record_finished("chat", events=2, duration=0.5)

        assert metrics.streams_finished == 2
        assert metrics.total_stream_seconds == pytest.approx(2.0)
        assert metrics.finished_stream_events == 12
        assert metrics.get_average_events_per_stream() == 6.0

    def test_record_failed_by_type(self, metrics: StreamMetrics) -> None:
        metrics.record_failed("chat", "DecodeError")
        metrics.record_failed("fim", "DecodeError")
        metrics.record_failed("chat", "TransportError")

        assert metrics.streams_failed == 3
        assert metrics.get_stats()["failures_by_type"] == {
            "DecodeError": 2,
            "TransportError": 1,
        }

    def test_record_cancelled(self, metrics: StreamMetrics) -> None:
        metrics.record_opened("chat")
        metrics.record_cancelled("chat")

        assert metrics.streams_cancelled == 1
        assert metrics.active_streams == 0

    def test_lifecycle_per_mode(self, metrics: StreamMetrics) -> None:
        metrics.record_opened("chat")
        metrics.record_opened("chat")
        metrics.record_opened("fim")
        metrics.record_finished("chat", events=3, duration=0.1)
        metrics.record_cancelled("chat")
        metrics.record_failed("fim", "TransportError")

        assert metrics.get_stats()["streams_per_mode"] == {
            "chat": {"opened": 2, "finished": 1, "cancelled": 1},
            "fim": {"opened": 1, "failed": 1},
        }


class TestStreamMetricsDerivedValues:
    """Test completion rate and active stream count."""

    def test_completion_rate_defaults_to_one(self) -> None:
        assert StreamMetrics().get_completion_rate() == 1.0

    def test_completion_rate(self) -> None:
        metrics = StreamMetrics()
        metrics.record_finished("chat", 1, 0.1)
        metrics.record_finished("chat", 1, 0.1)
        metrics.record_failed("chat", "DecodeError")
        metrics.record_cancelled("chat")

        assert metrics.get_completion_rate() == 0.5

    def test_average_events_without_finished_streams(self) -> None:
        assert StreamMetrics().get_average_events_per_stream() == 0.0

    def test_active_streams_never_negative(self) -> None:
        metrics = StreamMetrics()
        metrics.record_cancelled("chat")

        assert metrics.active_streams == 0


class TestStreamMetricsStats:
    """Test get_stats() and reset()."""

    def test_stats_are_json_serializable(self) -> None:
        metrics = StreamMetrics()
        metrics.record_opened("chat")
        metrics.record_event("chat")
        metrics.record_finished("chat", 1, 0.25)

        stats = json.loads(json.dumps(metrics.get_stats()))

        assert stats["streams_opened"] == 1
        assert stats["streams_finished"] == 1
        assert stats["events_decoded"] == 1
        assert stats["completion_rate"] == 1.0
        assert stats["active_streams"] == 0
        assert stats["total_stream_seconds"] == 0.25

    def test_stats_are_copies(self) -> None:
        metrics = StreamMetrics()
        metrics.record_event("chat")

        stats = metrics.get_stats()
        stats["events_per_mode"]["chat"] = 99

        assert metrics.get_stats()["events_per_mode"] == {"chat": 1}

    def test_reset(self) -> None:
        metrics = StreamMetrics()
        metrics.record_opened("chat")
        metrics.record_event("chat")
        metrics.record_failed("chat", "TransportError")

        metrics.reset()

        assert metrics.streams_opened == 0
        assert metrics.events_decoded == 0
        assert metrics.streams_failed == 0
        assert metrics.get_stats()["events_per_mode"] == {}
        assert metrics.get_stats()["failures_by_type"] == {}
        assert metrics.get_stats()["streams_per_mode"] == {}


class TestStreamMetricsLruEviction:
    """Test max_tracked_modes eviction."""

    def test_unlimited_by_default(self) -> None:
        metrics = StreamMetrics()
        for i in range(50):
            metrics.record_event(f"mode-{i}")

        assert len(metrics._events_per_mode) == 50

    def test_evicts_least_recently_used(self) -> None:
        metrics = StreamMetrics(max_tracked_modes=2)
        metrics.record_event("chat")
        metrics.record_event("fim")
        metrics.record_event("chat")
        metrics.record_event("other")

        assert list(metrics._events_per_mode) == ["chat", "other"]
        assert metrics.events_decoded == 4

    def test_lifecycle_modes_evicted(self) -> None:
        metrics = StreamMetrics(max_tracked_modes=1)
        metrics.record_opened("chat")
        metrics.record_opened("fim")

        assert metrics.get_stats()["streams_per_mode"] == {"fim": {"opened": 1}}
        assert metrics.streams_opened == 2


class TestStreamMetricsThreadSafety:
    """Test concurrent keyed counter updates."""

    def test_concurrent_record_event(self) -> None:
        metrics = StreamMetrics()

        def worker() -> None:
            for _ in range(1000):
                metrics.record_event("chat")

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert metrics.get_stats()["events_per_mode"] == {"chat": 4000}
