"""HTTP infrastructure shared by the leaderboard fetcher and delivery client."""

from aoc_notifier.http.client import HTTPClient, HTTPClientError, RetryPolicy

__all__ = ["HTTPClient", "HTTPClientError", "RetryPolicy"]
