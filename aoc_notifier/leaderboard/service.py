"""Leaderboard service composing the snapshot cache and the fetcher."""

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from aoc_notifier.errors import ValidationError
from aoc_notifier.leaderboard.cache import LeaderboardCacheStore
from aoc_notifier.leaderboard.fetcher import FetchResult, LeaderboardFetcher
from aoc_notifier.leaderboard.schemas import Leaderboard
from aoc_notifier.leaderboard.validation import parse_leaderboard_url
from aoc_notifier.observability.metrics import MetricsCollector

logger = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaderboardService:
    """Cached access to leaderboards.

    A snapshot younger than ``ttl_seconds`` is served without a network
    call. A TTL of 0 makes every lookup a miss.
    """

    def __init__(
        self,
        cache: LeaderboardCacheStore,
        fetcher: LeaderboardFetcher,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
        metrics: MetricsCollector | None = None,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be non-negative")
        self._cache = cache
        self._fetcher = fetcher
        self._ttl = ttl_seconds
        self._clock = clock
        self._metrics = metrics

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    async def get_leaderboard(
        self,
        leaderboard_url: str,
        ttl_seconds: float | None = None,
    ) -> FetchResult:
        """
        Return a leaderboard from cache if fresh, otherwise fetch it.

        A successful fetch overwrites the cached snapshot before returning.

        Args:
            leaderboard_url: Subscriber-facing leaderboard URL.
            ttl_seconds: Per-call TTL override (0 bypasses the cache).

        Returns:
            FetchResult with data or an error; never raises. A failing
            cache store degrades to an uncached fetch.
        """
        try:
            ref = parse_leaderboard_url(leaderboard_url)
        except ValidationError as e:
            return FetchResult(error=e)

        ttl = self._ttl if ttl_seconds is None else ttl_seconds

        try:
            cached = await self._cache.get(ref.view_key)
        except Exception as e:
            logger.warning(
                "Leaderboard cache read failed, fetching instead",
                leaderboard_id=ref.leaderboard_id,
                error=str(e),
            )
            cached = None

        if cached is not None:
            age = cached.age_seconds(self._clock())
            if age < ttl:
                try:
                    leaderboard = Leaderboard.from_dict(cached.payload)
                except (KeyError, TypeError, ValueError, AttributeError):
                    logger.warning(
                        "Discarding unreadable cached leaderboard",
                        leaderboard_id=ref.leaderboard_id,
                    )
                else:
                    logger.info(
                        "Leaderboard cache hit",
                        leaderboard_id=ref.leaderboard_id,
                        age_seconds=round(age),
                    )
                    self._record_cache(hit=True)
                    return FetchResult(
                        leaderboard=leaderboard,
                        payload=cached.payload,
                        from_cache=True,
                    )

        self._record_cache(hit=False)
        logger.info("Fetching fresh leaderboard", leaderboard_id=ref.leaderboard_id)
        result = await self._fetcher.fetch(leaderboard_url)
        if self._metrics is not None:
            self._metrics.record_fetch(result.ok)

        if result.ok:
            try:
                await self._cache.put(ref.view_key, result.payload, self._clock())
            except Exception as e:
                logger.warning(
                    "Leaderboard cache write failed",
                    leaderboard_id=ref.leaderboard_id,
                    error=str(e),
                )

        return result

    def _record_cache(self, hit: bool) -> None:
        if self._metrics is not None:
            self._metrics.record_cache_lookup(hit)
