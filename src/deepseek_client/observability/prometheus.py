# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Prometheus stream metrics.

Requires the ``prometheus`` extra::

    pip install deepseek-client[prometheus]

This module is loaded lazily: ``from deepseek_client import
PrometheusStreamMetrics`` only imports prometheus_client when the name is
first accessed.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

METRIC_PREFIX = "deepseek"

# Stream durations, up to 20 minutes
STREAM_DURATION_BUCKETS = (0.5, 1, 2.5, 5, 10, 30, 60, 120, 300, 600, 1200)


class PrometheusStreamMetrics:
    """
    Prometheus Counter and Histogram metrics for stream sessions.

    Implements StreamMetricsProtocol.

    Metrics:
        - deepseek_stream_events_total{mode}: Delta events delivered
        - deepseek_streams_total{mode,outcome}: Sessions by outcome
          (opened, finished, failed, cancelled)
        - deepseek_stream_failures_total{mode,error_type}: Failures by class
        - deepseek_stream_duration_seconds{mode}: Duration of finished streams

    Usage:
        >>> prom_metrics = PrometheusStreamMetrics()
        >>> client = Client(api_key, metrics=prom_metrics)
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Initialize Prometheus stream metrics.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default registry.
        """
        self.stream_events = Counter(
            f"{METRIC_PREFIX}_stream_events_total",
            "Delta events delivered by stream sessions",
            ["mode"],
            registry=registry,
        )

        self.streams = Counter(
            f"{METRIC_PREFIX}_streams_total",
            "Stream sessions by outcome",
            ["mode", "outcome"],  # Values: opened, finished, failed, cancelled
            registry=registry,
        )

        self.stream_failures = Counter(
            f"{METRIC_PREFIX}_stream_failures_total",
            "Stream failures by error type",
            ["mode", "error_type"],
            registry=registry,
        )

        self.stream_duration_seconds = Histogram(
            f"{METRIC_PREFIX}_stream_duration_seconds",
            "Duration of streams that finished normally",
            ["mode"],
            buckets=STREAM_DURATION_BUCKETS,
            registry=registry,
        )

        logger.info("Prometheus stream metrics initialized")

    def record_opened(self, mode: str) -> None:
        self.streams.labels(mode=mode, outcome="opened").inc()

    def record_event(self, mode: str) -> None:
        self.stream_events.labels(mode=mode).inc()

    def record_finished(self, mode: str, events: int, duration: float) -> None:
        self.streams.labels(mode=mode, outcome="finished").inc()
        self.stream_duration_seconds.labels(mode=mode).observe(duration)

    def record_failed(self, mode: str, error_type: str) -> None:
        self.streams.labels(mode=mode, outcome="failed").inc()
        self.stream_failures.labels(mode=mode, error_type=error_type).inc()

    def record_cancelled(self, mode: str) -> None:
        self.streams.labels(mode=mode, outcome="cancelled").inc()


# Module-level singleton bound to the default registry
_prometheus_stream_metrics: PrometheusStreamMetrics | None = None
_prometheus_lock = threading.Lock()


def get_prometheus_stream_metrics() -> PrometheusStreamMetrics:
    """
    Get or create the Prometheus stream metrics singleton.

    Uses double-checked locking so concurrent first calls do not register
    the same collectors twice in the default registry.
    """
    global _prometheus_stream_metrics

    if _prometheus_stream_metrics is None:
        with _prometheus_lock:
            if _prometheus_stream_metrics is None:
                _prometheus_stream_metrics = PrometheusStreamMetrics()

    return _prometheus_stream_metrics


def reset_prometheus_stream_metrics() -> None:
    """Reset the Prometheus stream metrics singleton (mainly for testing)."""
    global _prometheus_stream_metrics
    _prometheus_stream_metrics = None


__all__ = [
    "METRIC_PREFIX",
    "STREAM_DURATION_BUCKETS",
    "PrometheusStreamMetrics",
    "get_prometheus_stream_metrics",
    "reset_prometheus_stream_metrics",
]
