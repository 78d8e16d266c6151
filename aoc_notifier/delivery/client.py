"""Webhook delivery with outcome classification.

Posts JSON payloads to Discord and Slack webhooks and sorts every result
into success, transient failure, or permanent failure. Permanent failure
means the webhook has been deleted on the platform side; it is the only
outcome that retires a subscription.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

import httpx

from aoc_notifier.errors import ValidationError
from aoc_notifier.formatting import DEFAULT_USERNAME, render_test_message
from aoc_notifier.http.client import HTTPClient, HTTPClientError, RetryPolicy, redact_url
from aoc_notifier.delivery.schemas import DeliveryOutcome
from aoc_notifier.subscriptions.schemas import DestinationType
from aoc_notifier.subscriptions.validation import validate_webhook_url

logger = logging.getLogger(__name__)

# Webhook POSTs are not idempotent; a retried timeout could post twice.
DEFAULT_DELIVERY_POLICY = RetryPolicy(max_attempts=1, delay_seconds=0.0, timeout_seconds=30.0)

_GONE_STATUSES: dict[DestinationType, frozenset[int]] = {
    DestinationType.DISCORD: frozenset({404}),
    DestinationType.SLACK: frozenset({404, 410}),
}

_PLATFORM_NAMES = {
    DestinationType.DISCORD: "Discord",
    DestinationType.SLACK: "Slack",
}


def classify_response(status_code: int, destination_type: DestinationType) -> DeliveryOutcome:
    """
    Map an HTTP status to a delivery outcome.

    - 2xx: success
    - 404 (and 410 for Slack): permanent failure, destination gone
    - anything else: transient failure
    """
    if 200 <= status_code < 300:
        return DeliveryOutcome.success(status_code)
    if status_code in _GONE_STATUSES[destination_type]:
        return DeliveryOutcome.permanent("Webhook not found (deleted)", status_code)
    return DeliveryOutcome.transient(
        f"{_PLATFORM_NAMES[destination_type]} API error: HTTP {status_code}",
        status_code,
    )


class DeliveryClient:
    """Sends rendered payloads to webhook endpoints.

    Creates a short-lived ``HTTPClient`` per delivery (no pooling), the
    same way the fetcher does.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
        username: str = DEFAULT_USERNAME,
    ) -> None:
        self._policy = policy or DEFAULT_DELIVERY_POLICY
        self._sleep = sleep
        self._transport = transport
        self._username = username

    async def deliver(
        self,
        url: str,
        payload: dict[str, Any],
        destination_type: DestinationType,
    ) -> DeliveryOutcome:
        """
        POST a payload and classify the result. Never raises.

        Args:
            url: Webhook endpoint.
            payload: Rendered message body.
            destination_type: Platform, used for URL checks and classification.

        Returns:
            DeliveryOutcome.
        """
        try:
            validate_webhook_url(url, destination_type)
        except ValidationError as e:
            logger.warning("Refusing to deliver to invalid webhook URL: %s", e.message)
            return DeliveryOutcome.transient(f"Invalid webhook URL: {e.message}")

        try:
            async with HTTPClient(
                self._policy,
                sleep=self._sleep,
                transport=self._transport,
            ) as client:
                response = await client.post(url, json_body=payload)
        except HTTPClientError as e:
            logger.warning("Webhook %s unreachable: %s", redact_url(url), e)
            return DeliveryOutcome.transient(f"Failed to send webhook: {e}")

        outcome = classify_response(response.status_code, destination_type)
        if not outcome.ok:
            logger.warning(
                "Webhook %s returned %d (%s)",
                redact_url(url), response.status_code, outcome.status.value,
            )
        return outcome

    async def deliver_test(
        self,
        url: str,
        destination_type: DestinationType,
        now: datetime | None = None,
    ) -> DeliveryOutcome:
        """Send the fixed test message to verify a webhook."""
        payload = render_test_message(
            destination_type,
            now or datetime.now(timezone.utc),
            username=self._username,
        )
        return await self.deliver(url, payload, destination_type)
