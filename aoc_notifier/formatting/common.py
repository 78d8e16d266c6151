"""Platform-neutral pieces shared by the Discord and Slack formatters."""

from aoc_notifier.leaderboard.schemas import Leaderboard

DEFAULT_USERNAME = "AoC Notifier"
NO_PARTICIPANTS = "No participants with stars yet!"

_MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def format_position(position: int) -> str:
    """Medal for the podium, plain ordinal otherwise."""
    return _MEDALS.get(position, f"{position}.")


def leaderboard_title(leaderboard: Leaderboard) -> str:
    return f"🎄 Advent of Code {leaderboard.event} Leaderboard"


def puzzle_title(day: int) -> str:
    return f"🎄 Day {day} is Live!"


def verification_title() -> str:
    return "🎄 Advent of Code Notifier - Test Message"


def puzzle_url(year: int, day: int) -> str:
    return f"https://adventofcode.com/{year}/day/{day}"


def participant_stats(leaderboard: Leaderboard) -> str:
    """``<active> active / <total> total participants``."""
    active = len(leaderboard.ranked_members())
    return f"{active} active / {leaderboard.total_members} total participants"
