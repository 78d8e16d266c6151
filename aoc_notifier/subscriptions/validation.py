"""Destination URL and option validation."""

import re
from urllib.parse import urlsplit

from aoc_notifier.errors import ValidationError
from aoc_notifier.subscriptions.schemas import DestinationType

DISCORD_HOSTS = frozenset({"discord.com", "discordapp.com", "ptb.discord.com", "canary.discord.com"})
SLACK_HOST = "hooks.slack.com"

_DISCORD_PATH_RE = re.compile(r"^/api/webhooks/\d+/[\w-]+$")
_SLACK_PATH_RE = re.compile(r"^/(services|triggers|workflows)/[\w/-]+$")
_SNOWFLAKE_RE = re.compile(r"^\d{17,19}$")


def validate_webhook_url(url: str, destination_type: DestinationType) -> None:
    """
    Check a webhook URL against the platform's known shape.

    Raises:
        ValidationError: If the URL does not belong to the platform.
    """
    try:
        parsed = urlsplit(url.strip())
    except (AttributeError, ValueError) as e:
        raise ValidationError("Invalid URL format") from e

    if parsed.scheme != "https" or not parsed.hostname:
        raise ValidationError("Webhook URL must be an https URL")

    if destination_type is DestinationType.DISCORD:
        if parsed.hostname not in DISCORD_HOSTS:
            raise ValidationError("URL must be from discord.com or discordapp.com")
        if not _DISCORD_PATH_RE.match(parsed.path):
            raise ValidationError("Invalid Discord webhook URL format")
    elif destination_type is DestinationType.SLACK:
        if parsed.hostname != SLACK_HOST:
            raise ValidationError(f"URL must be from {SLACK_HOST}")
        if not _SLACK_PATH_RE.match(parsed.path):
            raise ValidationError("Invalid Slack webhook URL format")
    else:
        raise ValidationError(f"Unsupported destination type {destination_type!r}")


def is_valid_role_id(role_id: str) -> bool:
    """Discord role ids are 17-19 digit snowflakes."""
    return bool(_SNOWFLAKE_RE.match(role_id))
