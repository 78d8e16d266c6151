"""Audit log repository.

Append-only record of delivery outcomes, plus the ``stats`` counter table
that tracks how many notifications have been sent in total.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from aoc_notifier.audit.schemas import AuditEntry
from aoc_notifier.storage.database import Database

logger = logging.getLogger(__name__)

# No foreign key on subscription_id: entries outlive retired subscriptions.
_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS audit_log (
    id               TEXT PRIMARY KEY,
    subscription_id  TEXT,
    kind             TEXT NOT NULL,
    message          TEXT NOT NULL,
    created_at       TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_audit_log_subscription
    ON audit_log(subscription_id, created_at DESC);

CREATE TABLE IF NOT EXISTS stats (
    key         TEXT PRIMARY KEY,
    value       BIGINT NOT NULL DEFAULT 0,
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

_INCREMENT_STAT_SQL = """
INSERT INTO stats (key, value, updated_at)
VALUES ($1, $2, NOW())
ON CONFLICT (key) DO UPDATE SET
    value = stats.value + EXCLUDED.value,
    updated_at = NOW()
"""

NOTIFICATIONS_SENT_STAT = "notifications_sent"


def _row_to_entry(row: Any) -> AuditEntry:
    """Convert an asyncpg Record to an AuditEntry."""
    return AuditEntry(
        id=row["id"],
        subscription_id=row["subscription_id"],
        kind=row["kind"],
        message=row["message"],
        created_at=row["created_at"],
    )


class AuditLogRepository:
    """Append and query operations for the audit log."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the audit_log and stats tables (idempotent)."""
        await self._db.execute(_CREATE_TABLES_SQL)
        logger.info("Audit log tables ensured")

    async def append(
        self,
        subscription_id: str | None,
        kind: str,
        message: str,
        created_at: datetime | None = None,
    ) -> AuditEntry:
        """
        Record one outcome.

        Args:
            subscription_id: Subscription concerned, or None.
            kind: success, error, or destination_retired.
            message: Detail shown to operators.
            created_at: Timestamp (default: now UTC).

        Returns:
            The persisted entry.
        """
        entry = AuditEntry(
            subscription_id=subscription_id,
            kind=kind,
            message=message,
            created_at=created_at or datetime.now(timezone.utc),
        )
        await self._db.execute(
            """
            INSERT INTO audit_log (id, subscription_id, kind, message, created_at)
            VALUES ($1, $2, $3, $4, $5)
            """,
            entry.id,
            entry.subscription_id,
            entry.kind,
            entry.message,
            entry.created_at,
        )
        return entry

    async def increment_stat(self, key: str, amount: int = 1) -> None:
        """Add ``amount`` to a named counter in the stats table."""
        await self._db.execute(_INCREMENT_STAT_SQL, key, amount)

    async def get_recent(
        self,
        subscription_id: str | None = None,
        limit: int = 50,
    ) -> list[AuditEntry]:
        """Most recent entries, optionally for one subscription."""
        if subscription_id is not None:
            rows = await self._db.fetch(
                """
                SELECT * FROM audit_log WHERE subscription_id = $1
                ORDER BY created_at DESC LIMIT $2
                """,
                subscription_id, limit,
            )
        else:
            rows = await self._db.fetch(
                "SELECT * FROM audit_log ORDER BY created_at DESC LIMIT $1", limit,
            )
        return [_row_to_entry(row) for row in rows]
