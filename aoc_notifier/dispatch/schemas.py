"""Run options and results for the dispatch orchestrator."""

from dataclasses import dataclass, field

from aoc_notifier.schedule.window import TimeWindow


@dataclass(frozen=True)
class RunOptions:
    """Per-invocation flags.

    Attributes:
        hour: Override for the civil hour (0-23).
        day: Override for the day of month; implies the season month.
        force_active: Treat the date as in season for both passes.
        dry_run: Render and log only. No delivery, deletion, or audit writes.
        subscription_id: Restrict the run to one subscription.
        webhook_url: Restrict the run to one webhook URL.
        skip_cache: Bypass the leaderboard cache (TTL 0).
    """

    hour: int | None = None
    day: int | None = None
    force_active: bool = False
    dry_run: bool = False
    subscription_id: str | None = None
    webhook_url: str | None = None
    skip_cache: bool = False

    @property
    def has_filter(self) -> bool:
        return self.subscription_id is not None or self.webhook_url is not None


@dataclass
class PassStats:
    """Outcome counts for one pass (puzzle release or leaderboard update)."""

    sent: int = 0
    errors: int = 0
    retired: int = 0

    @property
    def total(self) -> int:
        return self.sent + self.errors + self.retired


@dataclass
class DispatchResult:
    """Summary of one dispatch run."""

    window: TimeWindow
    dry_run: bool = False
    puzzle: PassStats = field(default_factory=PassStats)
    leaderboard: PassStats = field(default_factory=PassStats)
    groups: int = 0
    fetches: int = 0
    cache_hits: int = 0
    rendered_titles: list[str] = field(default_factory=list)
    retired_ids: set[str] = field(default_factory=set)
    filter_matched: bool = True
    elapsed_seconds: float = 0.0

    @property
    def sent(self) -> int:
        return self.puzzle.sent + self.leaderboard.sent

    @property
    def errors(self) -> int:
        return self.puzzle.errors + self.leaderboard.errors

    @property
    def retired(self) -> int:
        return self.puzzle.retired + self.leaderboard.retired
