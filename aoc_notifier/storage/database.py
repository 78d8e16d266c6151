"""
asyncpg pool wrapper shared by the repositories.

One pool per dispatch run. Sessions are pinned to UTC so that naive
timestamps never leak in from the server's local zone; every timestamp
the notifier writes is timezone-aware.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Any

import asyncpg

from aoc_notifier.config.settings import get_settings

logger = logging.getLogger(__name__)

APPLICATION_NAME = "aoc-notifier"


class Database:
    """
    Connection pool plus the four query helpers repositories need.

    Usage:
        async with Database() as db:
            subscriptions = await SubscriptionRepository(db).list_all()
    """

    def __init__(
        self,
        database_url: str | None = None,
        min_size: int | None = None,
        max_size: int | None = None,
    ):
        settings = get_settings()

        self._database_url = database_url or str(settings.database_url)
        self._min_size = min_size or settings.db_pool_min_size
        self._max_size = max(max_size or settings.db_pool_max_size, self._min_size)
        self._command_timeout = settings.db_command_timeout_seconds

        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """
        Open the pool.

        Raises:
            OSError / asyncpg.PostgresError: If the server is unreachable or
                rejects the credentials. A run cannot proceed without its
                subscriptions, so this is not retried.
        """
        try:
            self._pool = await asyncpg.create_pool(
                self._database_url,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
                server_settings={"application_name": APPLICATION_NAME, "timezone": "UTC"},
            )
        except (OSError, asyncpg.PostgresError) as e:
            logger.error("Could not open database pool: %s", e)
            raise
        logger.info("Database pool open (%d-%d connections)", self._min_size, self._max_size)

    async def close(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("Database pool closed")

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database not connected; call connect() first")
        return self._pool

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        async with self.pool.acquire() as conn:
            yield conn

    async def execute(self, query: str, *args: Any) -> str:
        """Run a statement; returns the status tag (e.g. ``"DELETE 1"``)."""
        async with self.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args)
