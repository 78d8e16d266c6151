"""Leaderboard snapshot cache stores.

A store holds at most one snapshot per view key; writes overwrite.
Freshness is decided by the caller (``LeaderboardService``), so ``get``
always returns the latest snapshot regardless of its age.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from aoc_notifier.storage.database import Database

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedLeaderboard:
    """A stored leaderboard payload and when it was fetched."""

    view_key: str
    payload: dict[str, Any]
    fetched_at: datetime

    def age_seconds(self, now: datetime) -> float:
        """Seconds elapsed since the snapshot was fetched."""
        return (now - self.fetched_at).total_seconds()


class LeaderboardCacheStore(ABC):
    """Abstract store for leaderboard snapshots."""

    @abstractmethod
    async def get(self, view_key: str) -> CachedLeaderboard | None:
        """Return the latest snapshot for a key, or None."""

    @abstractmethod
    async def put(
        self, view_key: str, payload: dict[str, Any], fetched_at: datetime
    ) -> None:
        """Insert or overwrite the snapshot for a key."""


class InMemoryLeaderboardCache(LeaderboardCacheStore):
    """Process-local store, used by test-send mode and tests."""

    def __init__(self) -> None:
        self._entries: dict[str, CachedLeaderboard] = {}

    async def get(self, view_key: str) -> CachedLeaderboard | None:
        return self._entries.get(view_key)

    async def put(
        self, view_key: str, payload: dict[str, Any], fetched_at: datetime
    ) -> None:
        self._entries[view_key] = CachedLeaderboard(view_key, payload, fetched_at)

    def __len__(self) -> int:
        return len(self._entries)


_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS leaderboard_cache (
    view_key    TEXT PRIMARY KEY,
    data        JSONB NOT NULL,
    fetched_at  TIMESTAMPTZ NOT NULL
);
"""

_UPSERT_SQL = """
INSERT INTO leaderboard_cache (view_key, data, fetched_at)
VALUES ($1, $2, $3)
ON CONFLICT (view_key) DO UPDATE SET
    data = EXCLUDED.data,
    fetched_at = EXCLUDED.fetched_at
"""


class PostgresLeaderboardCache(LeaderboardCacheStore):
    """Snapshot store backed by the ``leaderboard_cache`` table.

    Shared across cron invocations, so several runs inside the TTL window
    reuse one upstream fetch.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the leaderboard_cache table (idempotent)."""
        await self._db.execute(_CREATE_TABLE_SQL)
        logger.info("Leaderboard cache table ensured")

    async def get(self, view_key: str) -> CachedLeaderboard | None:
        row = await self._db.fetchrow(
            "SELECT view_key, data, fetched_at FROM leaderboard_cache WHERE view_key = $1",
            view_key,
        )
        if row is None:
            return None

        data = row["data"]
        if isinstance(data, str):
            data = json.loads(data)
        return CachedLeaderboard(
            view_key=row["view_key"],
            payload=data,
            fetched_at=row["fetched_at"],
        )

    async def put(
        self, view_key: str, payload: dict[str, Any], fetched_at: datetime
    ) -> None:
        await self._db.execute(_UPSERT_SQL, view_key, json.dumps(payload), fetched_at)
