"""Delivery: webhook POSTs with success / transient / permanent classification."""

from aoc_notifier.delivery.client import DeliveryClient, classify_response
from aoc_notifier.delivery.schemas import DeliveryOutcome, DeliveryStatus

__all__ = [
    "DeliveryClient",
    "DeliveryOutcome",
    "DeliveryStatus",
    "classify_response",
]
