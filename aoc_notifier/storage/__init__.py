"""Storage layer - PostgreSQL connection management."""

from aoc_notifier.storage.database import Database

__all__ = ["Database"]
