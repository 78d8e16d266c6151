"""Leaderboard fetcher for the Advent of Code private leaderboard API.

Validates the source URL before touching the network, retries only
transport failures, and reports every problem as a ``FetchResult`` error
instead of raising.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from aoc_notifier.errors import FetchError, ValidationError
from aoc_notifier.http.client import HTTPClient, HTTPClientError, RetryPolicy
from aoc_notifier.leaderboard.schemas import Leaderboard
from aoc_notifier.leaderboard.validation import parse_leaderboard_url

logger = logging.getLogger(__name__)

DEFAULT_FETCH_POLICY = RetryPolicy(max_attempts=3, delay_seconds=1.0, timeout_seconds=30.0)


@dataclass
class FetchResult:
    """Outcome of a leaderboard lookup: either data or an error."""

    leaderboard: Leaderboard | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    error: FetchError | ValidationError | None = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and self.leaderboard is not None


class LeaderboardFetcher:
    """Retrieves and parses private leaderboard JSON."""

    def __init__(
        self,
        user_agent: str,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_agent = user_agent
        self._policy = policy or DEFAULT_FETCH_POLICY
        self._sleep = sleep
        self._transport = transport

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def fetch(self, leaderboard_url: str) -> FetchResult:
        """
        Fetch and parse a leaderboard.

        Args:
            leaderboard_url: Subscriber-facing leaderboard URL.

        Returns:
            FetchResult with the parsed leaderboard, or an error.
        """
        try:
            ref = parse_leaderboard_url(leaderboard_url)
        except ValidationError as e:
            return FetchResult(error=e)

        try:
            async with HTTPClient(
                self._policy,
                headers={"User-Agent": self._user_agent, "Accept": "application/json"},
                sleep=self._sleep,
                transport=self._transport,
            ) as client:
                response = await client.get(ref.json_url)
        except HTTPClientError as e:
            logger.warning(
                "Leaderboard %s unreachable: %s", ref.leaderboard_id, e,
            )
            return FetchResult(error=FetchError(f"Failed to fetch leaderboard: {e}"))

        if not response.is_success:
            logger.warning(
                "Leaderboard %s returned %d", ref.leaderboard_id, response.status_code,
            )
            return FetchResult(
                error=FetchError(
                    f"Failed to fetch leaderboard: HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            # An expired or wrong view key redirects to an HTML login page
            return FetchResult(
                error=FetchError(
                    "Failed to fetch leaderboard: response was not JSON "
                    "(is the view_key still valid?)"
                )
            )

        try:
            leaderboard = Leaderboard.from_dict(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            return FetchResult(
                error=FetchError(f"Failed to fetch leaderboard: malformed payload ({e})")
            )

        return FetchResult(leaderboard=leaderboard, payload=payload)
