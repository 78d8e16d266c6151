"""Tests for SubscriptionRepository with mocked Database."""

from datetime import datetime, timezone

import pytest

from aoc_notifier.subscriptions import (
    DiscordDestination,
    SlackDestination,
    SubscriptionRepository,
)
from aoc_notifier.subscriptions.repository import _record_to_subscription


@pytest.fixture
def repo(mock_database):
    return SubscriptionRepository(mock_database)


def _make_db_row(**overrides):
    """Create a mock asyncpg Record as a dict."""
    row = {
        "id": "sub-1",
        "webhook_url": "https://discord.com/api/webhooks/1/abc",
        "type": "discord",
        "role_id": "123456789012345678",
        "ping_channel": None,
        "hours": [18, 6, 18],
        "leaderboard_url": "https://adventofcode.com/2024/leaderboard/private/view/1?view_key=k",
        "join_code": "1-abcdef",
        "puzzle_hour": 0,
        "created_at": datetime(2024, 11, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 11, 2, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


class TestRecordToSubscription:
    """Test the module-level _record_to_subscription helper."""

    def test_discord_row(self):
        subscription = _record_to_subscription(_make_db_row())

        assert subscription.destination == DiscordDestination(role_id="123456789012345678")
        assert subscription.hours == (6, 18)
        assert subscription.puzzle_hour == 0
        assert subscription.join_code == "1-abcdef"

    def test_slack_row(self):
        subscription = _record_to_subscription(
            _make_db_row(type="slack", role_id=None, ping_channel=True)
        )
        assert subscription.destination == SlackDestination(ping_channel=True)

    @pytest.mark.parametrize("stored", [None, -1])
    def test_disabled_puzzle_hour(self, stored):
        subscription = _record_to_subscription(_make_db_row(puzzle_hour=stored))
        assert subscription.puzzle_hour is None

    def test_hours_as_json_text(self):
        subscription = _record_to_subscription(_make_db_row(hours="[9, 3]"))
        assert subscription.hours == (3, 9)

    def test_empty_strings_become_none(self):
        subscription = _record_to_subscription(_make_db_row(role_id="", join_code=""))
        assert subscription.destination.role_id is None
        assert subscription.join_code is None


class TestListAll:
    """Tests for list_all."""

    @pytest.mark.asyncio
    async def test_returns_subscriptions(self, repo, mock_database):
        mock_database.fetch.return_value = [_make_db_row(), _make_db_row(id="sub-2")]

        subscriptions = await repo.list_all()

        assert [s.id for s in subscriptions] == ["sub-1", "sub-2"]

    @pytest.mark.asyncio
    async def test_skips_invalid_rows(self, repo, mock_database):
        mock_database.fetch.return_value = [
            _make_db_row(id="bad", hours=[]),
            _make_db_row(id="worse", hours=[25]),
            _make_db_row(id="good"),
        ]

        subscriptions = await repo.list_all()

        assert [s.id for s in subscriptions] == ["good"]


class TestLookupsAndDelete:
    """Tests for single-row operations."""

    @pytest.mark.asyncio
    async def test_get_by_id(self, repo, mock_database):
        mock_database.fetchrow.return_value = _make_db_row()

        subscription = await repo.get_by_id("sub-1")

        assert subscription.id == "sub-1"
        assert mock_database.fetchrow.call_args[0][1] == "sub-1"

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, repo, mock_database):
        mock_database.fetchrow.return_value = None
        assert await repo.get_by_id("nope") is None

    @pytest.mark.asyncio
    async def test_get_by_webhook_url(self, repo, mock_database):
        mock_database.fetchrow.return_value = _make_db_row()

        subscription = await repo.get_by_webhook_url("https://discord.com/api/webhooks/1/abc")

        assert subscription is not None
        assert "webhook_url = $1" in mock_database.fetchrow.call_args[0][0]

    @pytest.mark.asyncio
    async def test_delete_by_id(self, repo, mock_database):
        mock_database.execute.return_value = "DELETE 1"
        assert await repo.delete_by_id("sub-1") is True

    @pytest.mark.asyncio
    async def test_delete_missing(self, repo, mock_database):
        mock_database.execute.return_value = "DELETE 0"
        assert await repo.delete_by_id("sub-1") is False

    @pytest.mark.asyncio
    async def test_create(self, repo, mock_database, make_subscription):
        mock_database.fetchrow.return_value = _make_db_row(
            role_id=None, hours=[18], puzzle_hour=None, join_code=None,
        )

        created = await repo.create(make_subscription(id="sub-1"))

        args = mock_database.fetchrow.call_args[0]
        assert "INSERT INTO subscriptions" in args[0]
        assert args[1] == "sub-1"
        assert args[3] == "discord"
        assert args[6] == [18]
        assert created.created_at is not None

    @pytest.mark.asyncio
    async def test_count(self, repo, mock_database):
        mock_database.fetchval.return_value = 4
        assert await repo.count() == 4
