"""Leaderboard URL validation.

Expected format::

    https://adventofcode.com/<YEAR>/leaderboard/private/view/<ID>?view_key=<KEY>
"""

import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from aoc_notifier.errors import ValidationError

AOC_HOST = "adventofcode.com"

_PATH_RE = re.compile(r"^/(\d{4})/leaderboard/private/view/(\d+)$")


@dataclass(frozen=True)
class LeaderboardRef:
    """A validated private-leaderboard reference."""

    year: int
    leaderboard_id: str
    view_key: str

    @property
    def json_url(self) -> str:
        """JSON API endpoint for this leaderboard (view key included)."""
        return (
            f"https://{AOC_HOST}/{self.year}/leaderboard/private/view/"
            f"{self.leaderboard_id}.json?view_key={self.view_key}"
        )


def parse_leaderboard_url(url: str) -> LeaderboardRef:
    """
    Validate a private leaderboard URL and extract its parts.

    Args:
        url: Leaderboard URL as entered by the subscriber.

    Returns:
        LeaderboardRef with year, id, and view key.

    Raises:
        ValidationError: If the host, path, or view_key is wrong.
    """
    try:
        parsed = urlsplit(url.strip())
    except (AttributeError, ValueError) as e:
        raise ValidationError("Invalid URL format") from e

    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValidationError("Invalid URL format")

    if parsed.hostname != AOC_HOST:
        raise ValidationError(f"URL must be from {AOC_HOST}")

    match = _PATH_RE.match(parsed.path)
    if not match:
        raise ValidationError("Invalid leaderboard URL path format")

    view_keys = parse_qs(parsed.query).get("view_key")
    if not view_keys or not view_keys[0]:
        raise ValidationError("URL must include a view_key parameter")

    year, leaderboard_id = match.groups()
    return LeaderboardRef(
        year=int(year),
        leaderboard_id=leaderboard_id,
        view_key=view_keys[0],
    )
