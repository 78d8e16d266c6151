"""Schema definitions for Advent of Code private leaderboards.

Mirrors the JSON returned by the leaderboard API. Members are keyed by
their id as a string, exactly as the API returns them.
"""

from dataclasses import dataclass, field
from typing import Any

TOP_N = 15


@dataclass
class LeaderboardMember:
    """One participant in a private leaderboard.

    Attributes:
        id: AoC user id.
        name: Display name, or None for anonymous users.
        stars: Total stars collected this event.
        local_score: Score within this private leaderboard (used for ranking).
        global_score: Score on the global leaderboard.
        last_star_ts: Unix timestamp of the most recent star (0 if none).
        completion_day_level: Raw per-day completion data.
    """

    id: int
    name: str | None
    stars: int
    local_score: int
    global_score: int = 0
    last_star_ts: int = 0
    completion_day_level: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        """Name to render, handling anonymous users."""
        return self.name or f"(anonymous user #{self.id})"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeaderboardMember":
        return cls(
            id=int(data["id"]),
            name=data.get("name") or None,
            stars=int(data.get("stars") or 0),
            local_score=int(data.get("local_score") or 0),
            global_score=int(data.get("global_score") or 0),
            last_star_ts=int(data.get("last_star_ts") or 0),
            completion_day_level=dict(data.get("completion_day_level") or {}),
        )


@dataclass
class Leaderboard:
    """A parsed private leaderboard."""

    event: str
    owner_id: int
    members: dict[str, LeaderboardMember] = field(default_factory=dict)

    @property
    def total_members(self) -> int:
        """All registered members, regardless of stars."""
        return len(self.members)

    def ranked_members(self) -> list[LeaderboardMember]:
        """Members with at least one star, best first.

        Sorted by local score descending; equal scores fall back to member
        id ascending so the order never depends on API key order.
        """
        active = [m for m in self.members.values() if m.stars > 0]
        return sorted(active, key=lambda m: (-m.local_score, m.id))

    def top(self, n: int = TOP_N) -> list[LeaderboardMember]:
        """The first ``n`` ranked members."""
        return self.ranked_members()[:n]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Leaderboard":
        """
        Parse an API payload.

        Raises:
            KeyError, TypeError, ValueError: If the payload is malformed.
        """
        members = data["members"]
        if not isinstance(members, dict):
            raise TypeError("members must be an object")
        return cls(
            event=str(data["event"]),
            owner_id=int(data.get("owner_id") or 0),
            members={
                str(key): LeaderboardMember.from_dict(value)
                for key, value in members.items()
            },
        )
