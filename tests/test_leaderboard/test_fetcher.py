"""Tests for LeaderboardFetcher against a mocked AoC API."""

from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from aoc_notifier.errors import FetchError, ValidationError
from aoc_notifier.http.client import RetryPolicy
from aoc_notifier.leaderboard import LeaderboardFetcher

LEADERBOARD_URL = "https://adventofcode.com/2024/leaderboard/private/view/123456?view_key=abc123"
JSON_URL = "https://adventofcode.com/2024/leaderboard/private/view/123456.json?view_key=abc123"


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def fetcher(sleep) -> LeaderboardFetcher:
    return LeaderboardFetcher(
        "aoc-notifier-tests",
        policy=RetryPolicy(max_attempts=3, delay_seconds=1.0, timeout_seconds=5.0),
        sleep=sleep,
    )


class TestFetch:
    """Tests for LeaderboardFetcher.fetch."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, fetcher, leaderboard_payload):
        route = respx.get(JSON_URL).mock(
            return_value=httpx.Response(200, json=leaderboard_payload)
        )

        result = await fetcher.fetch(LEADERBOARD_URL)

        assert result.ok
        assert result.leaderboard.event == "2024"
        assert result.payload == leaderboard_payload
        assert not result.from_cache
        request = route.calls.last.request
        assert request.headers["User-Agent"] == "aoc-notifier-tests"

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_url_makes_no_request(self, fetcher):
        route = respx.get(url__startswith="https://").mock(return_value=httpx.Response(200))

        result = await fetcher.fetch("https://example.com/not-a-leaderboard")

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_status(self, fetcher, sleep):
        route = respx.get(JSON_URL).mock(return_value=httpx.Response(500))

        result = await fetcher.fetch(LEADERBOARD_URL)

        assert isinstance(result.error, FetchError)
        assert result.error.status_code == 500
        assert result.error.message == "Failed to fetch leaderboard: HTTP 500"
        # Status errors are not transport failures
        assert route.call_count == 1
        sleep.assert_not_called()

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_transport_failures(self, fetcher, sleep, leaderboard_payload):
        route = respx.get(JSON_URL).mock(
            side_effect=[
                httpx.ConnectError("refused"),
                httpx.ReadTimeout("slow"),
                httpx.Response(200, json=leaderboard_payload),
            ]
        )

        result = await fetcher.fetch(LEADERBOARD_URL)

        assert result.ok
        assert route.call_count == 3
        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.0)

    @pytest.mark.asyncio
    @respx.mock
    async def test_gives_up_after_max_attempts(self, fetcher):
        route = respx.get(JSON_URL).mock(side_effect=httpx.ConnectError("refused"))

        result = await fetcher.fetch(LEADERBOARD_URL)

        assert isinstance(result.error, FetchError)
        assert "Failed to fetch leaderboard" in result.error.message
        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_html_response(self, fetcher):
        respx.get(JSON_URL).mock(
            return_value=httpx.Response(200, text="<html>Log in</html>")
        )

        result = await fetcher.fetch(LEADERBOARD_URL)

        assert isinstance(result.error, FetchError)
        assert "not JSON" in result.error.message

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_payload(self, fetcher):
        respx.get(JSON_URL).mock(return_value=httpx.Response(200, json={"event": "2024"}))

        result = await fetcher.fetch(LEADERBOARD_URL)

        assert isinstance(result.error, FetchError)
        assert "malformed" in result.error.message
