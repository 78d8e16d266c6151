"""Database repository for the subscriptions table.

The dispatcher only reads subscriptions and deletes those whose
destination has gone away; ``create`` exists for seeding and tests.
"""

import json
import logging
from typing import Any

from aoc_notifier.storage.database import Database
from aoc_notifier.subscriptions.schemas import (
    DestinationType,
    DiscordDestination,
    SlackDestination,
    Subscription,
)

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS subscriptions (
    id               TEXT PRIMARY KEY,
    webhook_url      TEXT NOT NULL UNIQUE,
    type             TEXT NOT NULL DEFAULT 'discord',
    role_id          TEXT,
    ping_channel     BOOLEAN,
    hours            INTEGER[] NOT NULL,
    leaderboard_url  TEXT NOT NULL,
    join_code        TEXT,
    puzzle_hour      INTEGER,
    created_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at       TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_subscriptions_leaderboard
    ON subscriptions(leaderboard_url);
"""

_INSERT_SQL = """
INSERT INTO subscriptions (
    id, webhook_url, type, role_id, ping_channel,
    hours, leaderboard_url, join_code, puzzle_hour
) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
RETURNING *
"""


def _parse_hours(raw: Any) -> list[int]:
    # Legacy rows stored hours as a JSON text array
    if isinstance(raw, str):
        raw = json.loads(raw)
    return [int(h) for h in raw or []]


def _record_to_subscription(record: Any) -> Subscription:
    """Convert an asyncpg Record to a Subscription."""
    dest_type = DestinationType(record["type"] or DestinationType.DISCORD.value)
    if dest_type is DestinationType.SLACK:
        destination = SlackDestination(ping_channel=bool(record["ping_channel"]))
    else:
        destination = DiscordDestination(role_id=record["role_id"] or None)

    puzzle_hour = record["puzzle_hour"]
    if puzzle_hour is not None and puzzle_hour < 0:
        puzzle_hour = None

    return Subscription(
        id=record["id"],
        webhook_url=record["webhook_url"],
        destination=destination,
        hours=_parse_hours(record["hours"]),
        leaderboard_url=record["leaderboard_url"],
        join_code=record["join_code"] or None,
        puzzle_hour=puzzle_hour,
        created_at=record["created_at"],
        updated_at=record["updated_at"],
    )


class SubscriptionRepository:
    """Read and retire operations for the subscriptions table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the subscriptions table and indexes (idempotent)."""
        await self._db.execute(_CREATE_TABLE_SQL)
        logger.info("Subscriptions table ensured")

    async def create(self, subscription: Subscription) -> Subscription:
        """Insert a subscription and return it with DB-assigned timestamps."""
        destination = subscription.destination
        row = await self._db.fetchrow(
            _INSERT_SQL,
            subscription.id,
            subscription.webhook_url,
            subscription.destination_type.value,
            destination.role_id if isinstance(destination, DiscordDestination) else None,
            destination.ping_channel if isinstance(destination, SlackDestination) else None,
            list(subscription.hours),
            subscription.leaderboard_url,
            subscription.join_code,
            subscription.puzzle_hour,
        )
        return _record_to_subscription(row)

    async def list_all(self) -> list[Subscription]:
        """
        Fetch every subscription, oldest first.

        Rows that violate the subscription invariants are skipped with a
        warning so one bad record cannot block every other destination.
        """
        rows = await self._db.fetch("SELECT * FROM subscriptions ORDER BY created_at, id")
        subscriptions: list[Subscription] = []
        for row in rows:
            try:
                subscriptions.append(_record_to_subscription(row))
            except (ValueError, TypeError) as e:
                logger.warning("Skipping invalid subscription %s: %s", row["id"], e)
        return subscriptions

    async def get_by_id(self, subscription_id: str) -> Subscription | None:
        """Fetch a single subscription by id."""
        row = await self._db.fetchrow(
            "SELECT * FROM subscriptions WHERE id = $1", subscription_id,
        )
        return _record_to_subscription(row) if row else None

    async def get_by_webhook_url(self, webhook_url: str) -> Subscription | None:
        """Fetch a single subscription by destination URL."""
        row = await self._db.fetchrow(
            "SELECT * FROM subscriptions WHERE webhook_url = $1", webhook_url,
        )
        return _record_to_subscription(row) if row else None

    async def delete_by_id(self, subscription_id: str) -> bool:
        """Delete a subscription. Returns True if a row was removed."""
        result = await self._db.execute(
            "DELETE FROM subscriptions WHERE id = $1", subscription_id,
        )
        return result == "DELETE 1"

    async def count(self) -> int:
        """Count total subscriptions."""
        return await self._db.fetchval("SELECT COUNT(*) FROM subscriptions") or 0
