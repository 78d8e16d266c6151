"""Message formatting for each destination type.

Callers only pass the subscription (or destination), the data, and the
current time; everything platform-specific lives in ``discord`` and
``slack``.
"""

from datetime import datetime
from typing import Any

from aoc_notifier.formatting import discord, slack
from aoc_notifier.formatting.common import DEFAULT_USERNAME, NO_PARTICIPANTS, format_position
from aoc_notifier.leaderboard.schemas import Leaderboard
from aoc_notifier.subscriptions.schemas import (
    Destination,
    DestinationType,
    DiscordDestination,
    SlackDestination,
    Subscription,
)


def render_leaderboard(
    subscription: Subscription,
    leaderboard: Leaderboard,
    now: datetime,
    username: str = DEFAULT_USERNAME,
) -> dict[str, Any]:
    """Leaderboard-update payload for a subscription's destination."""
    destination = subscription.destination
    if isinstance(destination, DiscordDestination):
        return discord.format_leaderboard(
            leaderboard, now,
            role_id=destination.role_id,
            join_code=subscription.join_code,
            username=username,
        )
    if isinstance(destination, SlackDestination):
        return slack.format_leaderboard(
            leaderboard, now,
            ping_channel=destination.ping_channel,
            join_code=subscription.join_code,
            username=username,
        )
    raise TypeError(f"Unsupported destination {destination!r}")


def render_puzzle_release(
    destination: Destination,
    day: int,
    year: int,
    now: datetime,
    username: str = DEFAULT_USERNAME,
) -> dict[str, Any]:
    """Puzzle-release payload for a destination."""
    if isinstance(destination, DiscordDestination):
        return discord.format_puzzle_release(
            day, year, now, role_id=destination.role_id, username=username,
        )
    if isinstance(destination, SlackDestination):
        return slack.format_puzzle_release(
            day, year, now, ping_channel=destination.ping_channel, username=username,
        )
    raise TypeError(f"Unsupported destination {destination!r}")


def render_test_message(
    destination_type: DestinationType,
    now: datetime,
    username: str = DEFAULT_USERNAME,
) -> dict[str, Any]:
    """Fixed self-describing payload for verifying a webhook."""
    if destination_type is DestinationType.DISCORD:
        return discord.format_test_message(now, username=username)
    if destination_type is DestinationType.SLACK:
        return slack.format_test_message(now, username=username)
    raise TypeError(f"Unsupported destination type {destination_type!r}")


def payload_title(payload: dict[str, Any]) -> str | None:
    """Extract the headline of a rendered payload, for logging."""
    embeds = payload.get("embeds")
    if embeds:
        return embeds[0].get("title")
    blocks = payload.get("blocks")
    if blocks and blocks[0].get("type") == "header":
        return blocks[0]["text"]["text"]
    return payload.get("text")


__all__ = [
    "DEFAULT_USERNAME",
    "NO_PARTICIPANTS",
    "format_position",
    "payload_title",
    "render_leaderboard",
    "render_puzzle_release",
    "render_test_message",
]
