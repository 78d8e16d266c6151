"""Dispatch orchestrator for scheduled notifications.

One run corresponds to one hourly tick:
1. Resolves the civil time window (with optional hour/day overrides)
2. Loads subscriptions and applies the single-subscription filter
3. Puzzle pass: sends release notices to subscriptions whose puzzle hour matches
4. Leaderboard pass: groups due subscriptions by leaderboard URL, fetches
   each leaderboard once (through the cache), and delivers per subscription
5. Retires subscriptions whose destination has been deleted

Designed for external cron scheduling: ``0 * * * * aoc-notifier run``
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from aoc_notifier.audit.repository import NOTIFICATIONS_SENT_STAT, AuditLogRepository
from aoc_notifier.config.settings import Settings, get_settings
from aoc_notifier.delivery.client import DeliveryClient
from aoc_notifier.delivery.schemas import DeliveryOutcome
from aoc_notifier.dispatch.config import DispatchConfig
from aoc_notifier.dispatch.schemas import DispatchResult, PassStats, RunOptions
from aoc_notifier.errors import PermanentDeliveryFailure, ValidationError
from aoc_notifier.formatting import (
    DEFAULT_USERNAME,
    payload_title,
    render_leaderboard,
    render_puzzle_release,
)
from aoc_notifier.leaderboard.cache import (
    InMemoryLeaderboardCache,
    LeaderboardCacheStore,
    PostgresLeaderboardCache,
)
from aoc_notifier.leaderboard.fetcher import LeaderboardFetcher
from aoc_notifier.leaderboard.service import LeaderboardService
from aoc_notifier.observability.logging import run_context
from aoc_notifier.observability.metrics import MetricsCollector
from aoc_notifier.schedule.config import SeasonConfig
from aoc_notifier.schedule.window import TimeWindow, resolve_time_window, season_date_range
from aoc_notifier.storage.database import Database
from aoc_notifier.subscriptions.repository import SubscriptionRepository
from aoc_notifier.subscriptions.schemas import (
    DestinationType,
    DiscordDestination,
    SlackDestination,
    Subscription,
)

logger = structlog.get_logger(__name__)

PUZZLE_PASS = "puzzle"
LEADERBOARD_PASS = "leaderboard"

_SUCCESS_MESSAGES = {
    PUZZLE_PASS: "Puzzle release notification sent",
    LEADERBOARD_PASS: "Leaderboard update sent",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationDispatcher:
    """Runs one scheduled tick across all subscriptions.

    Holds only its collaborators; every per-run value lives in the
    ``DispatchResult`` returned by ``run``.
    """

    def __init__(
        self,
        subscriptions: SubscriptionRepository,
        audit: AuditLogRepository,
        leaderboards: LeaderboardService,
        delivery: DeliveryClient,
        timezone_name: str = "America/New_York",
        season: SeasonConfig | None = None,
        config: DispatchConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        metrics: MetricsCollector | None = None,
        username: str = DEFAULT_USERNAME,
    ) -> None:
        self._subscriptions = subscriptions
        self._audit = audit
        self._leaderboards = leaderboards
        self._delivery = delivery
        self._timezone = timezone_name
        self._season = season or SeasonConfig()
        self._config = config or DispatchConfig()
        self._clock = clock
        self._sleep = sleep
        self._metrics = metrics
        self._username = username

    async def run(self, options: RunOptions | None = None) -> DispatchResult:
        """
        Execute one dispatch tick.

        Args:
            options: Overrides and flags for this run.

        Returns:
            DispatchResult with per-pass counts and rendered titles.

        Raises:
            Exception: If subscriptions cannot be loaded from the store.
        """
        options = options or RunOptions()
        start_time = time.monotonic()
        now = self._clock()
        window = resolve_time_window(
            now, self._timezone, self._season, hour=options.hour, day=options.day,
        )
        result = DispatchResult(window=window, dry_run=options.dry_run)

        with run_context(run_hour=window.hour, run_day=window.day, dry_run=options.dry_run):
            try:
                self._log_banner(window, options)
                await self._dispatch(window, now, options, result)
            finally:
                result.elapsed_seconds = time.monotonic() - start_time
                if self._metrics is not None:
                    self._metrics.record_run(result.elapsed_seconds)
                logger.info(
                    "Dispatch run finished",
                    puzzle_sent=result.puzzle.sent,
                    leaderboard_sent=result.leaderboard.sent,
                    errors=result.errors,
                    retired=result.retired,
                    groups=result.groups,
                    fetches=result.fetches,
                    elapsed_seconds=round(result.elapsed_seconds, 2),
                )

        return result

    async def _dispatch(
        self,
        window: TimeWindow,
        now: datetime,
        options: RunOptions,
        result: DispatchResult,
    ) -> None:
        subscriptions = tuple(await self._subscriptions.list_all())
        logger.info("Loaded subscriptions", count=len(subscriptions))

        if options.has_filter:
            subscriptions = tuple(
                s for s in subscriptions
                if (options.subscription_id is None or s.id == options.subscription_id)
                and (options.webhook_url is None or s.webhook_url == options.webhook_url)
            )
            if not subscriptions:
                logger.warning(
                    "No subscription matches the filter",
                    subscription_id=options.subscription_id,
                    webhook_url=options.webhook_url,
                )
                result.filter_matched = False
                return

        if window.puzzle_season(options.force_active):
            puzzle_due = tuple(s for s in subscriptions if s.wants_puzzle_at(window.hour))
            if puzzle_due:
                logger.info("Sending puzzle release notifications", count=len(puzzle_due))
            for subscription in puzzle_due:
                await self._process_puzzle(subscription, window, now, options, result)

        if self._config.updates_in_season_only and not window.leaderboard_season(
            options.force_active
        ):
            logger.info("Outside leaderboard season, skipping updates")
            return

        update_due = tuple(
            s for s in subscriptions
            if s.wants_update_at(window.hour) and s.id not in result.retired_ids
        )
        if not update_due:
            if result.puzzle.total == 0:
                logger.info("Nothing due this hour")
            return

        groups: dict[str, list[Subscription]] = {}
        for subscription in update_due:
            groups.setdefault(subscription.leaderboard_url, []).append(subscription)
        result.groups = len(groups)
        logger.info(
            "Sending leaderboard updates",
            subscriptions=len(update_due),
            groups=len(groups),
        )

        for leaderboard_url, members in tuple(groups.items()):
            await self._process_group(leaderboard_url, tuple(members), now, options, result)

    async def _process_puzzle(
        self,
        subscription: Subscription,
        window: TimeWindow,
        now: datetime,
        options: RunOptions,
        result: DispatchResult,
    ) -> None:
        try:
            payload = render_puzzle_release(
                subscription.destination, window.day, window.year, now,
                username=self._username,
            )
            await self._send(subscription, payload, PUZZLE_PASS, result.puzzle, options, result)
        except Exception as e:
            logger.exception(
                "Unexpected error sending puzzle notification",
                subscription_id=subscription.id,
            )
            self._record_error(PUZZLE_PASS, result.puzzle)
            await self._append_audit(options, subscription.id, "error", f"Unexpected error: {e}")

    async def _process_group(
        self,
        leaderboard_url: str,
        members: tuple[Subscription, ...],
        now: datetime,
        options: RunOptions,
        result: DispatchResult,
    ) -> None:
        try:
            await self._deliver_group(leaderboard_url, members, now, options, result)
        except Exception as e:
            logger.exception(
                "Unexpected error processing leaderboard group",
                leaderboard_url=leaderboard_url,
                subscriptions=len(members),
            )
            for subscription in members:
                self._record_error(LEADERBOARD_PASS, result.leaderboard)
                await self._append_audit(
                    options, subscription.id, "error", f"Unexpected error: {e}",
                )

    async def _deliver_group(
        self,
        leaderboard_url: str,
        members: tuple[Subscription, ...],
        now: datetime,
        options: RunOptions,
        result: DispatchResult,
    ) -> None:
        fetch = await self._leaderboards.get_leaderboard(
            leaderboard_url,
            ttl_seconds=0 if options.skip_cache else None,
        )
        if fetch.from_cache:
            result.cache_hits += 1
        elif not isinstance(fetch.error, ValidationError):
            result.fetches += 1

        if not fetch.ok:
            message = fetch.error.message if fetch.error else "Leaderboard unavailable"
            logger.error(
                "Leaderboard unavailable for group",
                leaderboard_url=leaderboard_url,
                subscriptions=len(members),
                error=message,
            )
            for subscription in members:
                self._record_error(LEADERBOARD_PASS, result.leaderboard)
                await self._append_audit(options, subscription.id, "error", message)
            return

        for subscription in members:
            try:
                payload = render_leaderboard(
                    subscription, fetch.leaderboard, now, username=self._username,
                )
                await self._send(
                    subscription, payload, LEADERBOARD_PASS, result.leaderboard, options, result,
                )
            except Exception as e:
                logger.exception(
                    "Unexpected error sending leaderboard update",
                    subscription_id=subscription.id,
                )
                self._record_error(LEADERBOARD_PASS, result.leaderboard)
                await self._append_audit(
                    options, subscription.id, "error", f"Unexpected error: {e}",
                )

    async def _send(
        self,
        subscription: Subscription,
        payload: dict[str, Any],
        pass_name: str,
        stats: PassStats,
        options: RunOptions,
        result: DispatchResult,
    ) -> None:
        """Deliver one payload (or log it in dry-run) and handle the outcome."""
        title = payload_title(payload) or ""
        result.rendered_titles.append(title)

        if options.dry_run:
            logger.info(
                "Dry run, not delivering",
                subscription_id=subscription.id,
                destination=subscription.destination_type.value,
                pass_name=pass_name,
                title=title,
            )
            stats.sent += 1
            if self._metrics is not None:
                self._metrics.record_delivery(pass_name, "dry_run")
            return

        outcome = await self._delivery.deliver(
            subscription.webhook_url, payload, subscription.destination_type,
        )
        if self._config.inter_delivery_delay_seconds > 0:
            await self._sleep(self._config.inter_delivery_delay_seconds)
        await self._handle_outcome(subscription, outcome, pass_name, stats, options, result)

    async def _handle_outcome(
        self,
        subscription: Subscription,
        outcome: DeliveryOutcome,
        pass_name: str,
        stats: PassStats,
        options: RunOptions,
        result: DispatchResult,
    ) -> None:
        error = outcome.as_error()
        if error is None:
            stats.sent += 1
            logger.info(
                "Delivered notification",
                subscription_id=subscription.id,
                pass_name=pass_name,
            )
            if self._metrics is not None:
                self._metrics.record_delivery(pass_name, "success")
            await self._append_audit(
                options, subscription.id, "success", _SUCCESS_MESSAGES[pass_name],
            )
            await self._increment_sent()
            return

        if isinstance(error, PermanentDeliveryFailure):
            deleted = await self._subscriptions.delete_by_id(subscription.id)
            stats.retired += 1
            result.retired_ids.add(subscription.id)
            logger.warning(
                "Destination gone, subscription retired",
                subscription_id=subscription.id,
                deleted=deleted,
                status_code=error.status_code,
            )
            if self._metrics is not None:
                self._metrics.record_delivery(pass_name, "retired")
            await self._append_audit(
                options, subscription.id, "destination_retired", error.message,
            )
            return

        logger.warning(
            "Delivery failed, will retry next tick",
            subscription_id=subscription.id,
            pass_name=pass_name,
            error_type=type(error).__name__,
            status_code=error.status_code,
            error=error.message,
        )
        self._record_error(pass_name, stats)
        await self._append_audit(options, subscription.id, "error", error.message)

    def _record_error(self, pass_name: str, stats: PassStats) -> None:
        stats.errors += 1
        if self._metrics is not None:
            self._metrics.record_delivery(pass_name, "error")

    async def _append_audit(
        self,
        options: RunOptions,
        subscription_id: str | None,
        kind: str,
        message: str,
    ) -> None:
        if options.dry_run:
            return
        try:
            await self._audit.append(subscription_id, kind, message, created_at=self._clock())
        except Exception:
            logger.exception("Failed to write audit entry", subscription_id=subscription_id, kind=kind)

    async def _increment_sent(self) -> None:
        try:
            await self._audit.increment_stat(NOTIFICATIONS_SENT_STAT)
        except Exception:
            logger.exception("Failed to increment notification counter")

    def _log_banner(self, window: TimeWindow, options: RunOptions) -> None:
        logger.info(
            "Dispatch run starting",
            date=f"{window.year}-{window.month:02d}-{window.day:02d}",
            hour=window.hour,
            timezone=self._timezone,
            season=season_date_range(self._season),
            puzzle_season=window.puzzle_season(options.force_active),
            leaderboard_season=window.leaderboard_season(options.force_active),
            hour_override=options.hour,
            day_override=options.day,
            force_active=options.force_active,
            skip_cache=options.skip_cache,
        )


def build_dispatcher(
    database: Database,
    settings: Settings | None = None,
    config: DispatchConfig | None = None,
    season: SeasonConfig | None = None,
    metrics: MetricsCollector | None = None,
) -> NotificationDispatcher:
    """
    Wire a dispatcher against a connected database.

    Args:
        database: Connected Database instance (caller manages lifecycle).
        settings: Application settings (default: from env).
        config: Dispatch configuration (default: from env).
        season: Season configuration (default: from env).
        metrics: Optional metrics collector.

    Returns:
        NotificationDispatcher backed by Postgres stores.
    """
    settings = settings or get_settings()
    config = config or DispatchConfig()

    fetcher = LeaderboardFetcher(settings.user_agent, policy=config.fetch_policy())
    leaderboards = LeaderboardService(
        PostgresLeaderboardCache(database),
        fetcher,
        ttl_seconds=config.cache_ttl_seconds,
        metrics=metrics,
    )
    delivery = DeliveryClient(policy=config.delivery_policy(), username=settings.bot_username)

    return NotificationDispatcher(
        subscriptions=SubscriptionRepository(database),
        audit=AuditLogRepository(database),
        leaderboards=leaderboards,
        delivery=delivery,
        timezone_name=settings.timezone,
        season=season,
        config=config,
        metrics=metrics,
        username=settings.bot_username,
    )


async def send_direct(
    webhook_url: str,
    destination_type: DestinationType,
    leaderboard_url: str | None = None,
    settings: Settings | None = None,
    config: DispatchConfig | None = None,
    cache: LeaderboardCacheStore | None = None,
    now: datetime | None = None,
) -> DeliveryOutcome:
    """
    Send to a webhook without touching the subscription store.

    Without ``leaderboard_url`` the fixed test message is sent. With one,
    the leaderboard is fetched fresh and rendered as a regular update.

    Raises:
        FetchError: If the leaderboard could not be fetched.
        ValidationError: If the leaderboard URL is malformed.
    """
    settings = settings or get_settings()
    config = config or DispatchConfig()
    now = now or _utcnow()
    delivery = DeliveryClient(policy=config.delivery_policy(), username=settings.bot_username)

    if leaderboard_url is None:
        return await delivery.deliver_test(webhook_url, destination_type, now=now)

    leaderboards = LeaderboardService(
        cache or InMemoryLeaderboardCache(),
        LeaderboardFetcher(settings.user_agent, policy=config.fetch_policy()),
        ttl_seconds=0,
    )
    fetch = await leaderboards.get_leaderboard(leaderboard_url)
    if not fetch.ok:
        raise fetch.error

    destination = (
        DiscordDestination() if destination_type is DestinationType.DISCORD
        else SlackDestination()
    )
    subscription = Subscription(
        id="direct",
        webhook_url=webhook_url,
        destination=destination,
        hours=(0,),
        leaderboard_url=leaderboard_url,
    )
    payload = render_leaderboard(subscription, fetch.leaderboard, now, username=settings.bot_username)
    return await delivery.deliver(webhook_url, payload, destination_type)
