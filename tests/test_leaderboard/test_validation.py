"""Tests for leaderboard URL validation."""

import pytest

from aoc_notifier.errors import ValidationError
from aoc_notifier.leaderboard import parse_leaderboard_url


class TestParseLeaderboardUrl:
    """Tests for parse_leaderboard_url."""

    def test_valid_url(self):
        ref = parse_leaderboard_url(
            "https://adventofcode.com/2024/leaderboard/private/view/123456?view_key=abc123"
        )

        assert ref.year == 2024
        assert ref.leaderboard_id == "123456"
        assert ref.view_key == "abc123"
        assert ref.json_url == (
            "https://adventofcode.com/2024/leaderboard/private/view/123456.json?view_key=abc123"
        )

    def test_surrounding_whitespace_ignored(self):
        ref = parse_leaderboard_url(
            "  https://adventofcode.com/2023/leaderboard/private/view/9?view_key=k  "
        )
        assert ref.year == 2023

    @pytest.mark.parametrize(
        "url,message",
        [
            ("not a url", "Invalid URL format"),
            ("https://example.com/2024/leaderboard/private/view/1?view_key=k",
             "URL must be from adventofcode.com"),
            ("https://adventofcode.com/2024/leaderboard/1?view_key=k",
             "Invalid leaderboard URL path format"),
            ("https://adventofcode.com/2024/leaderboard/private/view/1",
             "URL must include a view_key parameter"),
            ("https://adventofcode.com/2024/leaderboard/private/view/1?view_key=",
             "URL must include a view_key parameter"),
        ],
    )
    def test_invalid_urls(self, url, message):
        with pytest.raises(ValidationError) as exc_info:
            parse_leaderboard_url(url)
        assert exc_info.value.message == message
