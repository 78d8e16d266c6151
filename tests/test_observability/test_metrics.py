"""Tests for the Prometheus metrics collector."""

from aoc_notifier.observability import MetricsCollector


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_separate_registries(self):
        a = MetricsCollector()
        b = MetricsCollector()
        a.record_fetch(True)

        assert a.registry.get_sample_value(
            "aoc_notifier_leaderboard_fetches_total", {"result": "success"}
        ) == 1.0
        assert b.registry.get_sample_value(
            "aoc_notifier_leaderboard_fetches_total", {"result": "success"}
        ) is None

    def test_retired_delivery_counts_retirement(self):
        metrics = MetricsCollector()
        metrics.record_delivery("leaderboard", "retired")
        metrics.record_delivery("leaderboard", "success")

        registry = metrics.registry
        assert registry.get_sample_value("aoc_notifier_subscriptions_retired_total") == 1.0
        assert registry.get_sample_value(
            "aoc_notifier_deliveries_total", {"pass_name": "leaderboard", "outcome": "success"}
        ) == 1.0

    def test_record_run(self):
        metrics = MetricsCollector()
        metrics.record_run(1.5)
        assert metrics.registry.get_sample_value("aoc_notifier_last_run_duration_seconds") == 1.5
        assert metrics.registry.get_sample_value("aoc_notifier_last_run_timestamp_seconds") > 0

    def test_write_textfile(self, tmp_path):
        metrics = MetricsCollector()
        metrics.record_cache_lookup(hit=True)
        path = tmp_path / "aoc_notifier.prom"

        metrics.write_textfile(str(path))

        assert 'aoc_notifier_cache_lookups_total{result="hit"} 1.0' in path.read_text()

    def test_write_textfile_failure_swallowed(self, tmp_path):
        metrics = MetricsCollector()
        metrics.write_textfile(str(tmp_path / "missing" / "dir" / "out.prom"))
