"""Schedule: civil time window resolution and season predicates."""

from aoc_notifier.schedule.config import SeasonConfig
from aoc_notifier.schedule.window import (
    TimeWindow,
    is_leaderboard_season,
    is_puzzle_season,
    resolve_time_window,
    season_date_range,
)

__all__ = [
    "SeasonConfig",
    "TimeWindow",
    "is_leaderboard_season",
    "is_puzzle_season",
    "resolve_time_window",
    "season_date_range",
]
