# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Tests for lazy import patterns in __init__.py modules.

These tests cover the __getattr__ lazy import mechanisms used for the
optional Prometheus dependency, ensuring full coverage of the import guard
patterns.
"""

import pytest


class TestTopLevelLazyImports:
    """Test lazy imports from the top-level deepseek_client module."""

    def test_lazy_prometheus_metrics_import(self):
        """Cover __getattr__ lazy import of PrometheusStreamMetrics from top-level module."""
        pytest.importorskip("prometheus_client")
        from deepseek_client import PrometheusStreamMetrics

        assert PrometheusStreamMetrics is not None
        assert hasattr(PrometheusStreamMetrics, "record_event")

    def test_lazy_singleton_functions(self):
        """Cover __getattr__ lazy import of the singleton helpers."""
        pytest.importorskip("prometheus_client")
        from deepseek_client import (
            get_prometheus_stream_metrics,
            reset_prometheus_stream_metrics,
        )

        assert callable(get_prometheus_stream_metrics)
        assert callable(reset_prometheus_stream_metrics)

    def test_unknown_attribute_raises_attribute_error(self):
        """Cover AttributeError branch for non-existent attributes."""
        import deepseek_client

        with pytest.raises(AttributeError, match=r"has no attribute"):
            _ = deepseek_client.NonExistentAttribute

    def test_unknown_attribute_error_message_format(self):
        """Verify the error message format for unknown attributes."""
        import deepseek_client

        with pytest.raises(
            AttributeError,
            match=r"module 'deepseek_client' has no attribute 'FakeClass'",
        ):
            _ = deepseek_client.FakeClass

    def test_version(self):
        import deepseek_client

        assert deepseek_client.__version__ == "1.0.0"


class TestObservabilityLazyImports:
    """Test lazy imports from the observability submodule."""

    def test_lazy_prometheus_metrics_import(self):
        """Cover __getattr__ lazy import of PrometheusStreamMetrics."""
        pytest.importorskip("prometheus_client")
        from deepseek_client.observability import PrometheusStreamMetrics

        assert PrometheusStreamMetrics is not None

    def test_same_object_from_both_paths(self):
        """Top-level and submodule lazy imports resolve to the same class."""
        pytest.importorskip("prometheus_client")
        from deepseek_client import PrometheusStreamMetrics as top_level
        from deepseek_client.observability import PrometheusStreamMetrics as nested

        assert top_level is nested

    def test_unknown_attribute_error_message_format(self):
        """Verify the error message format for unknown attributes."""
        import deepseek_client.observability

        with pytest.raises(
            AttributeError,
            match=r"module 'deepseek_client.observability' has no attribute 'Nope'",
        ):
            _ = deepseek_client.observability.Nope

    def test_in_process_metrics_do_not_need_prometheus(self):
        """StreamMetrics is importable eagerly without the prometheus extra."""
        from deepseek_client.observability import StreamMetrics

        assert StreamMetrics().get_completion_rate() == 1.0
