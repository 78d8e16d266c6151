"""
Prometheus metrics for the notification dispatcher.

Defines metrics for:
- Delivery outcomes per pass (puzzle release, leaderboard update)
- Leaderboard fetches and cache lookups
- Retired destinations
- Run duration and last-run timestamp

The dispatcher runs as a one-shot cron job, so metrics are written to a
textfile for the node-exporter textfile collector instead of being
served over HTTP.
"""

import logging
import time

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    write_to_textfile,
)

logger = logging.getLogger(__name__)


class MetricsCollector:
    """
    Prometheus metrics collector for dispatch runs.

    Each collector owns its registry so that separate instances (tests,
    repeated runs in one process) never collide on metric names.

    Usage:
        metrics = MetricsCollector()
        metrics.record_delivery("leaderboard", "success")
        metrics.write_textfile("/var/lib/node_exporter/aoc_notifier.prom")
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """Initialize Prometheus metrics."""
        self.registry = registry or CollectorRegistry()

        self.deliveries = Counter(
            "aoc_notifier_deliveries_total",
            "Total delivery attempts by pass and outcome",
            ["pass_name", "outcome"],  # outcome: success, error, retired, dry_run
            registry=self.registry,
        )

        self.leaderboard_fetches = Counter(
            "aoc_notifier_leaderboard_fetches_total",
            "Total upstream leaderboard fetches",
            ["result"],  # success, error
            registry=self.registry,
        )

        self.cache_lookups = Counter(
            "aoc_notifier_cache_lookups_total",
            "Leaderboard cache lookups",
            ["result"],  # hit, miss
            registry=self.registry,
        )

        self.subscriptions_retired = Counter(
            "aoc_notifier_subscriptions_retired_total",
            "Subscriptions deleted because their destination is gone",
            registry=self.registry,
        )

        self.last_run_duration = Gauge(
            "aoc_notifier_last_run_duration_seconds",
            "Wall time of the most recent dispatch run",
            registry=self.registry,
        )

        self.last_run_timestamp = Gauge(
            "aoc_notifier_last_run_timestamp_seconds",
            "Unix time the most recent dispatch run finished",
            registry=self.registry,
        )

    def record_delivery(self, pass_name: str, outcome: str) -> None:
        """Record one delivery outcome for a dispatch pass."""
        self.deliveries.labels(pass_name=pass_name, outcome=outcome).inc()
        if outcome == "retired":
            self.subscriptions_retired.inc()

    def record_fetch(self, success: bool) -> None:
        """Record an upstream leaderboard fetch."""
        self.leaderboard_fetches.labels(
            result="success" if success else "error"
        ).inc()

    def record_cache_lookup(self, hit: bool) -> None:
        """Record a leaderboard cache hit or miss."""
        self.cache_lookups.labels(result="hit" if hit else "miss").inc()

    def record_run(self, duration_seconds: float) -> None:
        """Record completion of a dispatch run."""
        self.last_run_duration.set(duration_seconds)
        self.last_run_timestamp.set(time.time())

    def write_textfile(self, path: str) -> None:
        """
        Write all metrics to a Prometheus textfile.

        Failures are logged and swallowed; metrics must never fail a run.

        Args:
            path: Destination file (written atomically by prometheus_client)
        """
        try:
            write_to_textfile(path, self.registry)
            logger.debug("Metrics written to %s", path)
        except OSError as e:
            logger.warning("Failed to write metrics textfile %s: %s", path, e)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get or create the process-wide metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
