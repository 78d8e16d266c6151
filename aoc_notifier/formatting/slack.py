"""Slack incoming-webhook payloads using Block Kit."""

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

ICON_EMOJI = ":christmas_tree:"
CHANNEL_PING = "<!channel>"


def _header(text: str) -> dict[str, Any]:
    return {"type": "header", "text": {"type": "plain_text", "text": text, "emoji": True}}


def _section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _context(*texts: str) -> dict[str, Any]:
    return {"type": "context", "elements": [{"type": "mrkdwn", "text": t} for t in texts]}


def _envelope(text: str, blocks: list[dict[str, Any]], ping_channel: bool, username: str) -> dict[str, Any]:
    # ``text`` is the notification fallback; the ping must live there to notify
    return {
        "text": f"{CHANNEL_PING} {text}" if ping_channel else text,
        "blocks": blocks,
        "username": username,
        "icon_emoji": ICON_EMOJI,
    }


def _slack_date(now: datetime) -> str:
    """Slack date token that renders in each reader's own timezone."""
    return f"<!date^{int(now.timestamp())}^{{date_short_pretty}} at {{time}}|{now.isoformat()}>"


def format_leaderboard(
    leaderboard: Leaderboard,
    now: datetime,
    ping_channel: bool = False,
    join_code: str | None = None,
    username: str = DEFAULT_USERNAME,
) -> dict[str, Any]:
    """Build the leaderboard-update message."""
    lines = [
        f"{format_position(rank)} *{member.display_name}* - "
        f"{member.local_score} pts (:star: {member.stars})"
        for rank, member in enumerate(leaderboard.top(TOP_N), start=1)
    ]

    context = [f"📊 {participant_stats(leaderboard)}"]
    if join_code:
        context.append(f"🔗 Join code: `{join_code}`")
    context.append(f"Updated: {_slack_date(now)}")

    blocks = [
        _header(leaderboard_title(leaderboard)),
        _section("\n".join(lines) or f"_{NO_PARTICIPANTS}_"),
        _context(*context),
    ]
    return _envelope(
        f"Advent of Code {leaderboard.event} Leaderboard Update",
        blocks,
        ping_channel,
        username,
    )


def format_puzzle_release(
    day: int,
    year: int,
    now: datetime,
    ping_channel: bool = False,
    username: str = DEFAULT_USERNAME,
) -> dict[str, Any]:
    """Build the new-puzzle announcement."""
    blocks = [
        _header(puzzle_title(day)),
        _section(
            "A new Advent of Code puzzle has been released!\n\n"
            f"*<{puzzle_url(year, day)}|Click here to start Day {day}>*\n\n"
            "Good luck and have fun! :star:"
        ),
        _context(f"Advent of Code {year}"),
    ]
    return _envelope(
        f"Day {day} of Advent of Code {year} is now live!",
        blocks,
        ping_channel,
        username,
    )


def format_test_message(now: datetime, username: str = DEFAULT_USERNAME) -> dict[str, Any]:
    """Fixed payload used to verify a webhook works."""
    blocks = [
        _header(verification_title()),
        _section(
            "Your webhook is configured correctly! "
            "You'll receive leaderboard updates at your scheduled times."
        ),
        _context(f"Sent {_slack_date(now)}"),
    ]
    return _envelope("Advent of Code Notifier - Test Message", blocks, False, username)
