"""Data models for webhook subscriptions.

A subscription's destination is a tagged variant: each destination type
carries only the options that make sense for it (a role to mention on
Discord, a channel-wide ping on Slack).
"""

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar


class DestinationType(str, enum.Enum):
    """Supported chat platforms."""

    DISCORD = "discord"
    SLACK = "slack"


@dataclass(frozen=True)
class DiscordDestination:
    """Discord webhook options.

    Attributes:
        role_id: Role snowflake to mention with each message, if any.
    """

    type: ClassVar[DestinationType] = DestinationType.DISCORD

    role_id: str | None = None


@dataclass(frozen=True)
class SlackDestination:
    """Slack incoming-webhook options.

    Attributes:
        ping_channel: Prefix messages with ``<!channel>``.
    """

    type: ClassVar[DestinationType] = DestinationType.SLACK

    ping_channel: bool = False


Destination = DiscordDestination | SlackDestination


def normalize_hours(hours: Iterable[int]) -> tuple[int, ...]:
    """
    Validate and canonicalize a set of delivery hours.

    Returns:
        Sorted tuple of distinct hours.

    Raises:
        ValueError: If empty, non-integer, or outside 0-23.
    """
    normalized: set[int] = set()
    for hour in hours:
        if isinstance(hour, bool) or not isinstance(hour, int):
            raise ValueError(f"Invalid hour {hour!r}: must be an integer")
        if not 0 <= hour <= 23:
            raise ValueError(f"Invalid hour {hour}: must be 0-23")
        normalized.add(hour)
    if not normalized:
        raise ValueError("A subscription needs at least one delivery hour")
    return tuple(sorted(normalized))


@dataclass(frozen=True)
class Subscription:
    """One destination's notification configuration.

    Attributes:
        id: Unique identifier.
        webhook_url: Destination endpoint (unique across subscriptions).
        destination: Platform-specific options.
        hours: Hours of day (civil time) to post leaderboard updates;
            always sorted and de-duplicated.
        leaderboard_url: Private leaderboard to track.
        join_code: Optional leaderboard join code shown in messages.
        puzzle_hour: Hour to announce new puzzles; None means disabled.
        created_at / updated_at: Record timestamps.
    """

    id: str
    webhook_url: str
    destination: Destination
    hours: tuple[int, ...]
    leaderboard_url: str
    join_code: str | None = None
    puzzle_hour: int | None = None
    created_at: datetime | None = field(default=None, compare=False)
    updated_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.destination, (DiscordDestination, SlackDestination)):
            raise ValueError(f"Unknown destination {self.destination!r}")
        object.__setattr__(self, "hours", normalize_hours(self.hours))
        if self.puzzle_hour is not None and not 0 <= self.puzzle_hour <= 23:
            raise ValueError(f"Invalid puzzle_hour {self.puzzle_hour}: must be 0-23")

    @property
    def destination_type(self) -> DestinationType:
        return self.destination.type

    def wants_update_at(self, hour: int) -> bool:
        """True if a leaderboard update is scheduled for ``hour``."""
        return hour in self.hours

    def wants_puzzle_at(self, hour: int) -> bool:
        """True if the puzzle announcement is scheduled for ``hour``."""
        return self.puzzle_hour is not None and self.puzzle_hour == hour
