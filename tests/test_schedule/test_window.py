"""Tests for time window resolution and season predicates."""

from datetime import datetime, timezone

import pytest
from zoneinfo import ZoneInfo

from aoc_notifier.schedule import (
    SeasonConfig,
    is_leaderboard_season,
    is_puzzle_season,
    resolve_time_window,
    season_date_range,
)

NY = "America/New_York"


@pytest.fixture
def season() -> SeasonConfig:
    return SeasonConfig(month=12, start_day=1, end_day=12)


class TestResolveTimeWindow:
    """Tests for resolve_time_window."""

    def test_converts_to_civil_time(self, season):
        # 05:00 UTC on Dec 1 is midnight in New York
        now = datetime(2024, 12, 1, 5, 0, tzinfo=timezone.utc)
        window = resolve_time_window(now, NY, season)

        assert (window.hour, window.day, window.month, window.year) == (0, 1, 12, 2024)

    def test_previous_day_before_local_midnight(self, season):
        now = datetime(2024, 12, 1, 4, 59, tzinfo=timezone.utc)
        window = resolve_time_window(now, NY, season)

        assert (window.hour, window.day, window.month) == (23, 30, 11)

    def test_accepts_zoneinfo(self, season):
        now = datetime(2024, 7, 4, 16, 0, tzinfo=timezone.utc)
        window = resolve_time_window(now, ZoneInfo(NY), season)
        assert window.hour == 12

    def test_hour_override(self, season):
        now = datetime(2024, 12, 3, 20, 0, tzinfo=timezone.utc)
        window = resolve_time_window(now, NY, season, hour=7)

        assert window.hour == 7
        assert window.day == 3

    def test_day_override_implies_season_month(self, season):
        now = datetime(2024, 7, 4, 16, 0, tzinfo=timezone.utc)
        window = resolve_time_window(now, NY, season, day=5)

        assert window.day == 5
        assert window.month == 12
        assert window.puzzle_season()

    def test_naive_datetime_rejected(self, season):
        with pytest.raises(ValueError, match="timezone-aware"):
            resolve_time_window(datetime(2024, 12, 1, 0, 0), NY, season)

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_invalid_hour_override(self, season, hour):
        now = datetime(2024, 12, 1, 5, 0, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            resolve_time_window(now, NY, season, hour=hour)

    def test_invalid_day_override(self, season):
        now = datetime(2024, 12, 1, 5, 0, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            resolve_time_window(now, NY, season, day=0)


class TestSeasonPredicates:
    """Puzzle season is inclusive; leaderboard season runs one day longer."""

    @pytest.mark.parametrize("day,expected", [(1, True), (12, True), (13, False)])
    def test_puzzle_season(self, season, day, expected):
        assert is_puzzle_season(12, day, season) is expected

    @pytest.mark.parametrize("day,expected", [(1, True), (13, True), (14, False)])
    def test_leaderboard_season(self, season, day, expected):
        assert is_leaderboard_season(12, day, season) is expected

    def test_wrong_month(self, season):
        assert not is_puzzle_season(11, 5, season)
        assert not is_leaderboard_season(1, 1, season)

    def test_force_overrides_calendar(self, season):
        now = datetime(2024, 7, 4, 16, 0, tzinfo=timezone.utc)
        window = resolve_time_window(now, NY, season)

        assert not window.puzzle_season()
        assert window.puzzle_season(force=True)
        assert window.leaderboard_season(force=True)


class TestSeasonConfig:
    """Tests for SeasonConfig."""

    def test_defaults(self):
        config = SeasonConfig()
        assert (config.month, config.start_day, config.end_day) == (12, 1, 12)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SEASON_END_DAY", "25")
        assert SeasonConfig().end_day == 25

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            SeasonConfig(start_day=10, end_day=5)

    def test_date_range(self, season):
        assert season_date_range(season) == "Dec 1-12"
