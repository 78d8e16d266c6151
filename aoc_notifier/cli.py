"""
Command-line interface for aoc-notifier.

Provides the hourly dispatch command, a direct webhook check, and
database setup.

Usage:
    aoc-notifier run                 # Run one scheduled tick
    aoc-notifier test-send --url URL # Send a test message to a webhook
    aoc-notifier init-db             # Initialize database
    aoc-notifier list-subscriptions  # Show stored subscriptions
"""

import asyncio
import sys

import click

from aoc_notifier.config.settings import get_settings
from aoc_notifier.observability.logging import setup_logging
from aoc_notifier.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """AoC Notifier - Advent of Code leaderboard webhooks for Discord and Slack."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--hour", type=click.IntRange(0, 23), default=None,
              help="Override the current hour (0-23)")
@click.option("--day", type=click.IntRange(1, 25), default=None,
              help="Override the current day (implies the season month)")
@click.option("--dry-run", is_flag=True, help="Render and log only, send nothing")
@click.option("--force-active", is_flag=True, help="Treat the date as in season")
@click.option("--subscription-id", default=None, help="Only process this subscription")
@click.option("--webhook-url", default=None, help="Only process the subscription with this webhook URL")
@click.option("--skip-cache", is_flag=True, help="Ignore cached leaderboards and fetch fresh data")
def run(
    hour: int | None,
    day: int | None,
    dry_run: bool,
    force_active: bool,
    subscription_id: str | None,
    webhook_url: str | None,
    skip_cache: bool,
) -> None:
    """Run one dispatch tick.

    Sends puzzle release notifications and leaderboard updates to every
    subscription due at the current hour.

    Designed for cron scheduling: 0 * * * * aoc-notifier run

    Example:
        aoc-notifier run                                   # Current hour
        aoc-notifier run --dry-run --hour 0 --day 1 --force-active
        aoc-notifier run --subscription-id abc123 --dry-run
    """
    from aoc_notifier.dispatch.schemas import RunOptions
    from aoc_notifier.dispatch.service import build_dispatcher
    from aoc_notifier.schedule.window import season_date_range
    from aoc_notifier.storage.database import Database

    settings = get_settings()
    metrics = get_metrics()
    options = RunOptions(
        hour=hour,
        day=day,
        force_active=force_active,
        dry_run=dry_run,
        subscription_id=subscription_id,
        webhook_url=webhook_url,
        skip_cache=skip_cache,
    )

    async def _run():
        db = Database()
        await db.connect()

        try:
            dispatcher = build_dispatcher(db, settings=settings, metrics=metrics)
            return await dispatcher.run(options)
        finally:
            await db.close()

    result = asyncio.run(_run())

    if settings.metrics_textfile_path:
        metrics.write_textfile(settings.metrics_textfile_path)

    window = result.window
    if not result.filter_matched:
        click.echo(click.style("No subscription matches the given filter", fg="yellow"))
        return

    title = "Dispatch Results"
    if result.dry_run:
        title += " (dry run)"
    click.echo(f"\n{title} ({window.year}-{window.month:02d}-{window.day:02d} {window.hour:02d}:00):")
    click.echo(f"  Season:               {season_date_range(window.season)}")
    if window.puzzle_season(force_active):
        click.echo(f"  Puzzle notifications: {result.puzzle.sent} sent, {result.puzzle.errors} errors")
    click.echo(f"  Leaderboard updates:  {result.leaderboard.sent} sent, {result.leaderboard.errors} errors")
    click.echo(f"  Leaderboards:         {result.groups} ({result.fetches} fetched, {result.cache_hits} cached)")
    click.echo(f"  Retired destinations: {result.retired}")
    click.echo(f"  Elapsed:              {result.elapsed_seconds:.2f}s")

    if result.dry_run and result.rendered_titles:
        click.echo("\nRendered:")
        for rendered in result.rendered_titles:
            click.echo(f"  - {rendered}")


@main.command("test-send")
@click.option("--url", "webhook_url", required=True, help="Webhook URL to send to")
@click.option("--type", "destination_type", type=click.Choice(["discord", "slack"]),
              default="discord", show_default=True, help="Destination platform")
@click.option("--leaderboard-url", default=None,
              help="Send a real leaderboard update for this leaderboard instead of the test message")
def test_send(webhook_url: str, destination_type: str, leaderboard_url: str | None) -> None:
    """Send directly to a webhook, bypassing the subscription store."""
    from aoc_notifier.dispatch.service import send_direct
    from aoc_notifier.errors import NotifierError
    from aoc_notifier.subscriptions.schemas import DestinationType

    if leaderboard_url:
        click.echo(f"Fetching leaderboard: {leaderboard_url}")

    try:
        outcome = asyncio.run(
            send_direct(webhook_url, DestinationType(destination_type), leaderboard_url)
        )
    except NotifierError as e:
        click.echo(click.style(f"Error fetching leaderboard: {e.message}", fg="red"))
        sys.exit(1)

    if outcome.ok:
        click.echo(click.style("Message sent successfully", fg="green"))
    else:
        click.echo(click.style(f"Failed to send: {outcome.message}", fg="red"))
        sys.exit(1)


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    from aoc_notifier.audit.repository import AuditLogRepository
    from aoc_notifier.leaderboard.cache import PostgresLeaderboardCache
    from aoc_notifier.storage.database import Database
    from aoc_notifier.subscriptions.repository import SubscriptionRepository

    async def _run():
        db = Database()
        await db.connect()

        try:
            await SubscriptionRepository(db).create_table()
            await PostgresLeaderboardCache(db).create_table()
            await AuditLogRepository(db).create_table()
        finally:
            await db.close()

    asyncio.run(_run())
    click.echo("Database initialized successfully")


@main.command("list-subscriptions")
def list_subscriptions() -> None:
    """List stored subscriptions."""
    from aoc_notifier.errors import ValidationError
    from aoc_notifier.leaderboard.validation import parse_leaderboard_url
    from aoc_notifier.storage.database import Database
    from aoc_notifier.subscriptions.repository import SubscriptionRepository

    async def _run():
        db = Database()
        await db.connect()

        try:
            return await SubscriptionRepository(db).list_all()
        finally:
            await db.close()

    subscriptions = asyncio.run(_run())
    if not subscriptions:
        click.echo("No subscriptions found")
        return

    click.echo(f"\n{'ID':<38} {'Type':<8} {'Hours':<20} {'Puzzle':<7} Leaderboard")
    click.echo("-" * 90)
    for sub in subscriptions:
        try:
            leaderboard_id = parse_leaderboard_url(sub.leaderboard_url).leaderboard_id
        except ValidationError:
            leaderboard_id = click.style("invalid", fg="red")
        hours = ",".join(str(h) for h in sub.hours)
        puzzle = "-" if sub.puzzle_hour is None else str(sub.puzzle_hour)
        click.echo(
            f"{sub.id:<38} {sub.destination_type.value:<8} {hours:<20} {puzzle:<7} {leaderboard_id}"
        )
    click.echo(f"\n{len(subscriptions)} subscription(s)")


if __name__ == "__main__":
    main()
