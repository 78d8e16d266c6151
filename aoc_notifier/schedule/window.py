"""Time window resolution and season predicates.

Converts an instant into the civil ``(hour, day, month, year)`` tuple the
schedule is expressed in, and answers whether that date falls inside the
puzzle-release season. Everything here is a pure function of its inputs.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from aoc_notifier.schedule.config import SeasonConfig


@dataclass(frozen=True)
class TimeWindow:
    """The civil time a dispatch tick is bound to."""

    hour: int
    day: int
    month: int
    year: int
    season: SeasonConfig

    def puzzle_season(self, force: bool = False) -> bool:
        """True while new puzzles are being released."""
        return force or is_puzzle_season(self.month, self.day, self.season)

    def leaderboard_season(self, force: bool = False) -> bool:
        """True while leaderboard updates are meaningful (release days + 1)."""
        return force or is_leaderboard_season(self.month, self.day, self.season)


def is_puzzle_season(month: int, day: int, season: SeasonConfig) -> bool:
    """Check if a date is within the inclusive puzzle-release range."""
    return month == season.month and season.start_day <= day <= season.end_day


def is_leaderboard_season(month: int, day: int, season: SeasonConfig) -> bool:
    """Check if a date is within the release range extended by one day.

    The extra day allows a final read-out 24h after the last puzzle.
    """
    return month == season.month and season.start_day <= day <= season.end_day + 1


def resolve_time_window(
    now: datetime,
    tz: str | ZoneInfo,
    season: SeasonConfig | None = None,
    hour: int | None = None,
    day: int | None = None,
) -> TimeWindow:
    """
    Resolve the civil time window for a tick.

    Args:
        now: Timezone-aware current instant.
        tz: IANA zone name (or ZoneInfo) the schedule is defined in.
        season: Season configuration (default: from env).
        hour: Override for the hour of day (0-23).
        day: Override for the day of month; implies the season's month.

    Returns:
        TimeWindow with overrides applied.

    Raises:
        ValueError: If ``now`` is naive or an override is out of range.
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    if hour is not None and not 0 <= hour <= 23:
        raise ValueError(f"hour override must be 0-23, got {hour}")
    if day is not None and not 1 <= day <= 31:
        raise ValueError(f"day override must be 1-31, got {day}")

    season = season or SeasonConfig()
    zone = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)
    local = now.astimezone(zone)

    return TimeWindow(
        hour=local.hour if hour is None else hour,
        day=local.day if day is None else day,
        month=local.month if day is None else season.month,
        year=local.year,
        season=season,
    )


def season_date_range(season: SeasonConfig | None = None) -> str:
    """Human-readable puzzle range, e.g. ``"Dec 1-12"``."""
    season = season or SeasonConfig()
    return f"{calendar.month_abbr[season.month]} {season.start_day}-{season.end_day}"
