"""Tests for the Postgres leaderboard cache store with mocked Database."""

import json
from datetime import datetime, timezone

import pytest

from aoc_notifier.leaderboard import PostgresLeaderboardCache

FETCHED_AT = datetime(2024, 12, 5, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(mock_database):
    return PostgresLeaderboardCache(mock_database)


class TestPostgresLeaderboardCache:
    """Tests for PostgresLeaderboardCache."""

    @pytest.mark.asyncio
    async def test_create_table(self, store, mock_database):
        await store.create_table()
        sql = mock_database.execute.call_args[0][0]
        assert "CREATE TABLE IF NOT EXISTS leaderboard_cache" in sql

    @pytest.mark.asyncio
    async def test_get_missing(self, store, mock_database):
        mock_database.fetchrow.return_value = None
        assert await store.get("abc123") is None

    @pytest.mark.asyncio
    async def test_get_decodes_json_text(self, store, mock_database):
        mock_database.fetchrow.return_value = {
            "view_key": "abc123",
            "data": '{"event": "2024", "members": {}}',
            "fetched_at": FETCHED_AT,
        }

        cached = await store.get("abc123")

        assert cached.payload == {"event": "2024", "members": {}}
        assert cached.fetched_at == FETCHED_AT
        mock_database.fetchrow.assert_awaited_once()
        assert mock_database.fetchrow.call_args[0][1] == "abc123"

    @pytest.mark.asyncio
    async def test_put_upserts(self, store, mock_database):
        payload = {"event": "2024", "members": {}}

        await store.put("abc123", payload, FETCHED_AT)

        args = mock_database.execute.call_args[0]
        assert "ON CONFLICT (view_key) DO UPDATE" in args[0]
        assert args[1] == "abc123"
        assert json.loads(args[2]) == payload
        assert args[3] == FETCHED_AT
