"""Discord webhook payloads (``content`` + a single embed)."""

import logging
from datetime import datetime
from typing import Any

from aoc_notifier.formatting.common import (
    DEFAULT_USERNAME,
    NO_PARTICIPANTS,
    format_position,
    leaderboard_title,
    participant_stats,
    puzzle_title,
    puzzle_url,
    verification_title,
)
from aoc_notifier.leaderboard.schemas import TOP_N, Leaderboard
from aoc_notifier.subscriptions.validation import is_valid_role_id

logger = logging.getLogger(__name__)

COLOR_GREEN = 0x0F9D58
COLOR_GOLD = 0xFFFF66


def _mention(role_id: str | None) -> str | None:
    if not role_id:
        return None
    if not is_valid_role_id(role_id):
        logger.warning("Ignoring malformed Discord role id %r", role_id)
        return None
    return f"<@&{role_id}>"


def _envelope(embed: dict[str, Any], role_id: str | None, username: str) -> dict[str, Any]:
    payload: dict[str, Any] = {"embeds": [embed], "username": username}
    content = _mention(role_id)
    if content:
        payload["content"] = content
    return payload


def format_leaderboard(
    leaderboard: Leaderboard,
    now: datetime,
    role_id: str | None = None,
    join_code: str | None = None,
    username: str = DEFAULT_USERNAME,
) -> dict[str, Any]:
    """Build the leaderboard-update embed."""
    lines = [
        f"{format_position(rank)} **{member.display_name}** - "
        f"{member.local_score} pts (⭐ {member.stars})"
        for rank, member in enumerate(leaderboard.top(TOP_N), start=1)
    ]

    fields = [
        {"name": "📊 Stats", "value": participant_stats(leaderboard), "inline": True},
    ]
    if join_code:
        fields.append({"name": "🔗 Join Code", "value": f"`{join_code}`", "inline": True})

    embed = {
        "title": leaderboard_title(leaderboard),
        "description": "\n".join(lines) or NO_PARTICIPANTS,
        "color": COLOR_GREEN,
        "fields": fields,
        "footer": {"text": "Updated"},
        "timestamp": now.isoformat(),
    }
    return _envelope(embed, role_id, username)


def format_puzzle_release(
    day: int,
    year: int,
    now: datetime,
    role_id: str | None = None,
    username: str = DEFAULT_USERNAME,
) -> dict[str, Any]:
    """Build the new-puzzle announcement embed."""
    embed = {
        "title": puzzle_title(day),
        "description": (
            "A new Advent of Code puzzle has been released!\n\n"
            f"**[Click here to start Day {day}]({puzzle_url(year, day)})**\n\n"
            "Good luck and have fun! ⭐"
        ),
        "color": COLOR_GOLD,
        "footer": {"text": f"Advent of Code {year}"},
        "timestamp": now.isoformat(),
    }
    return _envelope(embed, role_id, username)


def format_test_message(now: datetime, username: str = DEFAULT_USERNAME) -> dict[str, Any]:
    """Fixed payload used to verify a webhook works."""
    embed = {
        "title": verification_title(),
        "description": (
            "Your webhook is configured correctly! "
            "You'll receive leaderboard updates at your scheduled times."
        ),
        "color": COLOR_GREEN,
        "timestamp": now.isoformat(),
    }
    return {"embeds": [embed], "username": username}
