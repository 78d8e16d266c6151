"""Dispatch configuration.

All settings can be overridden via ``DISPATCH_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aoc_notifier.http.client import RetryPolicy


class DispatchConfig(BaseSettings):
    """Configuration for a dispatch run."""

    model_config = SettingsConfigDict(
        env_prefix="DISPATCH_",
        case_sensitive=False,
        extra="ignore",
    )

    inter_delivery_delay_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Pause after each delivery to stay under webhook rate limits",
    )
    cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="Age below which a cached leaderboard is served without fetching",
    )
    fetch_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total leaderboard fetch attempts (transport failures only)",
    )
    fetch_retry_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Fixed pause between leaderboard fetch attempts",
    )
    fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout for leaderboard fetches",
    )
    delivery_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout for webhook POSTs",
    )
    updates_in_season_only: bool = Field(
        default=False,
        description="Only send leaderboard updates inside the extended season",
    )

    def fetch_policy(self) -> RetryPolicy:
        """Retry policy for leaderboard fetches."""
        return RetryPolicy(
            max_attempts=self.fetch_max_attempts,
            delay_seconds=self.fetch_retry_delay_seconds,
            timeout_seconds=self.fetch_timeout_seconds,
        )

    def delivery_policy(self) -> RetryPolicy:
        """Single-attempt policy for webhook POSTs."""
        return RetryPolicy(
            max_attempts=1,
            delay_seconds=0.0,
            timeout_seconds=self.delivery_timeout_seconds,
        )
