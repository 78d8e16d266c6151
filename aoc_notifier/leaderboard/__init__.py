"""Leaderboard retrieval with snapshot caching.

Components:
- LeaderboardRef / parse_leaderboard_url: Source URL validation
- Leaderboard / LeaderboardMember: Parsed API payload
- LeaderboardCacheStore: Snapshot store ABC (Postgres and in-memory)
- LeaderboardFetcher: HTTP retrieval with transport retries
- LeaderboardService: Cache + fetcher composition
"""

from aoc_notifier.leaderboard.cache import (
    CachedLeaderboard,
    InMemoryLeaderboardCache,
    LeaderboardCacheStore,
    PostgresLeaderboardCache,
)
from aoc_notifier.leaderboard.fetcher import FetchResult, LeaderboardFetcher
from aoc_notifier.leaderboard.schemas import TOP_N, Leaderboard, LeaderboardMember
from aoc_notifier.leaderboard.service import LeaderboardService
from aoc_notifier.leaderboard.validation import LeaderboardRef, parse_leaderboard_url

__all__ = [
    "CachedLeaderboard",
    "FetchResult",
    "InMemoryLeaderboardCache",
    "Leaderboard",
    "LeaderboardCacheStore",
    "LeaderboardFetcher",
    "LeaderboardMember",
    "LeaderboardRef",
    "LeaderboardService",
    "PostgresLeaderboardCache",
    "TOP_N",
    "parse_leaderboard_url",
]
