"""Observability layer - logging and metrics."""

from aoc_notifier.observability.logging import setup_logging
from aoc_notifier.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
