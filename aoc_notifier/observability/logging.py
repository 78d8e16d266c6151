"""
Structured logging configuration using structlog.

JSON lines in production (the job runs under cron and its output is
shipped as-is), a coloured console renderer everywhere else. Webhook
URLs carry their credentials in the path and leaderboard URLs carry the
view key in the query, so any URL-valued field is redacted before it
reaches a renderer.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from aoc_notifier.config.settings import get_settings
from aoc_notifier.http.client import redact_url

SECRET_URL_FIELDS = frozenset({"url", "webhook_url", "leaderboard_url"})


def redact_secret_urls(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """structlog processor masking webhook tokens and view keys."""
    for key in SECRET_URL_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = redact_url(value)
    return event_dict


def setup_logging() -> None:
    """
    Configure structlog and the stdlib root logger.

    Call once per process, before the first log line. The level comes
    from ``LOG_LEVEL`` (the CLI's ``--debug`` flag overrides it).
    """
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secret_urls,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    # httpx logs every request line (webhook URL included) at INFO
    for noisy in ("httpx", "httpcore", "asyncio", "asyncpg"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@contextmanager
def run_context(**fields: Any) -> Iterator[None]:
    """
    Bind fields to every log line emitted inside the block.

    Any context left over from a previous run is dropped on entry, and
    the bound fields are cleared on exit even if the block raises.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()
