# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for stream sessions.

Classes:
    StreamMetrics: In-process counters for stream sessions and events.
    PrometheusStreamMetrics: Prometheus metrics (requires the prometheus extra).

Protocols:
    StreamMetricsProtocol: Interface every metrics sink implements.

Functions:
    get_prometheus_stream_metrics: Get or create the Prometheus metrics singleton.
    reset_prometheus_stream_metrics: Reset the Prometheus metrics singleton.

The Prometheus names are loaded lazily so prometheus_client is only
imported when one of them is accessed.
"""

from typing import TYPE_CHECKING, Any

from .metrics import StreamMetrics
from .protocols import StreamMetricsProtocol

if TYPE_CHECKING:
    from .prometheus import (
        PrometheusStreamMetrics,
        get_prometheus_stream_metrics,
        reset_prometheus_stream_metrics,
    )

_PROMETHEUS_EXPORTS = frozenset(
    {
        "PrometheusStreamMetrics",
        "get_prometheus_stream_metrics",
        "reset_prometheus_stream_metrics",
    }
)

__all__ = [
    "PrometheusStreamMetrics",  # Lazy loaded - requires prometheus extra
    "StreamMetrics",
    "StreamMetricsProtocol",
    "get_prometheus_stream_metrics",
    "reset_prometheus_stream_metrics",
]


def __getattr__(name: str) -> Any:
    """Lazy import for optional Prometheus support."""
    if name in _PROMETHEUS_EXPORTS:
        from . import prometheus

        return getattr(prometheus, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
