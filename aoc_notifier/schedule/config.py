"""Season configuration.

Controls which calendar window counts as the puzzle-release season. All
settings can be overridden via ``SEASON_*`` environment variables.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SeasonConfig(BaseSettings):
    """Calendar window during which puzzles are released."""

    model_config = SettingsConfigDict(
        env_prefix="SEASON_",
        case_sensitive=False,
        extra="ignore",
    )

    month: int = Field(
        default=12,
        ge=1,
        le=12,
        description="Month of the event (12 = December)",
    )
    start_day: int = Field(
        default=1,
        ge=1,
        le=31,
        description="First puzzle day (inclusive)",
    )
    end_day: int = Field(
        default=12,
        ge=1,
        le=31,
        description="Last puzzle day (inclusive)",
    )

    @model_validator(mode="after")
    def _check_range(self) -> "SeasonConfig":
        if self.end_day < self.start_day:
            raise ValueError("end_day must not be before start_day")
        return self
