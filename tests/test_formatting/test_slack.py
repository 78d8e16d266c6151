"""Tests for Slack Block Kit payload formatting."""

from datetime import datetime, timezone

from aoc_notifier.formatting import NO_PARTICIPANTS, payload_title, render_puzzle_release, render_test_message
from aoc_notifier.formatting import slack
from aoc_notifier.leaderboard import Leaderboard
from aoc_notifier.subscriptions import DestinationType, SlackDestination

NOW = datetime(2024, 12, 5, 23, 0, tzinfo=timezone.utc)


class TestFormatLeaderboard:
    """Tests for slack.format_leaderboard."""

    def test_blocks(self, leaderboard_payload):
        leaderboard = Leaderboard.from_dict(leaderboard_payload)

        payload = slack.format_leaderboard(leaderboard, NOW)

        header, section, context = payload["blocks"]
        assert header["type"] == "header"
        assert header["text"]["text"] == "🎄 Advent of Code 2024 Leaderboard"
        assert section["text"]["text"].split("\n") == [
            "🥇 *Bob* - 80 pts (:star: 5)",
            "🥈 *Alice* - 50 pts (:star: 3)",
        ]
        assert context["elements"][0]["text"] == "📊 2 active / 3 total participants"
        assert payload["text"] == "Advent of Code 2024 Leaderboard Update"
        assert payload["icon_emoji"] == ":christmas_tree:"

    def test_empty_placeholder(self):
        leaderboard = Leaderboard.from_dict({"event": "2024", "members": {}})

        section = slack.format_leaderboard(leaderboard, NOW)["blocks"][1]

        assert section["text"]["text"] == f"_{NO_PARTICIPANTS}_"

    def test_channel_ping(self, leaderboard_payload):
        leaderboard = Leaderboard.from_dict(leaderboard_payload)

        payload = slack.format_leaderboard(leaderboard, NOW, ping_channel=True)

        assert payload["text"].startswith("<!channel> ")

    def test_join_code_in_context(self, leaderboard_payload):
        leaderboard = Leaderboard.from_dict(leaderboard_payload)

        context = slack.format_leaderboard(leaderboard, NOW, join_code="1-abc")["blocks"][2]

        assert "`1-abc`" in context["elements"][1]["text"]

    def test_updated_uses_date_token(self, leaderboard_payload):
        leaderboard = Leaderboard.from_dict(leaderboard_payload)

        context = slack.format_leaderboard(leaderboard, NOW)["blocks"][2]

        assert f"<!date^{int(NOW.timestamp())}^" in context["elements"][-1]["text"]


class TestPuzzleAndTestMessages:
    """Tests for the fixed Slack messages."""

    def test_puzzle_release(self):
        payload = render_puzzle_release(SlackDestination(ping_channel=True), 3, 2024, NOW)

        assert payload["text"] == "<!channel> Day 3 of Advent of Code 2024 is now live!"
        assert "<https://adventofcode.com/2024/day/3|" in payload["blocks"][1]["text"]["text"]
        assert payload_title(payload) == "🎄 Day 3 is Live!"

    def test_test_message(self):
        payload = render_test_message(DestinationType.SLACK, NOW)
        assert payload["blocks"][0]["text"]["text"] == "🎄 Advent of Code Notifier - Test Message"
        assert not payload["text"].startswith("<!channel>")
