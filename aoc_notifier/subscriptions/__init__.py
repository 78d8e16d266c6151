"""Subscriptions: webhook destinations and their schedules."""

from aoc_notifier.subscriptions.repository import SubscriptionRepository
from aoc_notifier.subscriptions.schemas import (
    Destination,
    DestinationType,
    DiscordDestination,
    SlackDestination,
    Subscription,
    normalize_hours,
)
from aoc_notifier.subscriptions.validation import is_valid_role_id, validate_webhook_url

__all__ = [
    "Destination",
    "DestinationType",
    "DiscordDestination",
    "SlackDestination",
    "Subscription",
    "SubscriptionRepository",
    "is_valid_role_id",
    "normalize_hours",
    "validate_webhook_url",
]
