"""
HTTP infrastructure layer with an explicit retry policy.

Provides:
- RetryPolicy: Linear retry configuration (attempts, delay, timeout)
- HTTPClient: Async HTTP client that retries transport failures only

Well-formed responses are always returned to the caller, whatever their
status code. Deciding what a 404 or a 500 means is domain logic that lives
in the fetcher and the delivery client.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.ReadError,
    httpx.RemoteProtocolError,
)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Linear retry configuration for HTTP requests.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        delay_seconds: Fixed pause between attempts
        timeout_seconds: Per-request timeout
    """

    max_attempts: int = 3
    delay_seconds: float = 1.0
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    def is_retryable_exception(self, exc: Exception) -> bool:
        """
        Check if an exception should trigger a retry.

        Only transport-level failures are retried: timeouts, connection
        errors, and broken reads.
        """
        return isinstance(exc, RETRYABLE_EXCEPTIONS)


class HTTPClientError(Exception):
    """Raised when a request could not be completed at the transport level."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class HTTPClient:
    """
    Async HTTP client with linear retry on transport failures.

    Example:
        policy = RetryPolicy(max_attempts=3, delay_seconds=1.0)
        async with HTTPClient(policy) as client:
            response = await client.get("https://adventofcode.com/...")
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        headers: dict[str, str] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            policy: Retry behaviour. Uses defaults if None.
            headers: Headers sent with every request.
            sleep: Coroutine used between attempts (injectable for tests).
            transport: Optional httpx transport (for tests).
        """
        self.policy = policy or RetryPolicy()
        self._headers = dict(headers) if headers else {}
        self._sleep = sleep
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPClient":
        """Enter async context manager, create client."""
        self._client = httpx.AsyncClient(
            timeout=self.policy.timeout_seconds,
            headers=self._headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager, close client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Perform GET request with retry logic.

        Raises:
            HTTPClientError: After all attempts failed at the transport level
        """
        return await self._request_with_retry("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Perform POST request with a JSON body and retry logic.

        Raises:
            HTTPClientError: After all attempts failed at the transport level
        """
        return await self._request_with_retry(
            "POST", url, json_body=json_body, headers=headers
        )

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        if not self._client:
            raise RuntimeError("HTTPClient must be used as async context manager")

        max_attempts = self.policy.max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                return await self._client.request(
                    method,
                    url,
                    params=params,
                    headers=headers,
                    json=json_body,
                )
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                if not self.policy.is_retryable_exception(e):
                    raise HTTPClientError(
                        f"{type(e).__name__}: {e}", attempts=attempt
                    ) from e

                if attempt < max_attempts:
                    logger.warning(
                        "Retryable error %s for %s, attempt %d/%d, retrying in %.2fs",
                        type(e).__name__, redact_url(url), attempt, max_attempts,
                        self.policy.delay_seconds,
                    )
                    await self._sleep(self.policy.delay_seconds)
                    continue

                raise HTTPClientError(
                    f"Request failed after {attempt} attempts: {type(e).__name__}: {e}",
                    attempts=attempt,
                ) from e

        # Unreachable: the loop either returns or raises
        raise HTTPClientError(f"Request failed after {max_attempts} attempts")


def redact_url(url: str) -> str:
    """Strip the query string and webhook token from a URL before logging it."""
    base = url.split("?", 1)[0]
    if "/webhooks/" in base or "hooks.slack.com" in base:
        return base.rsplit("/", 1)[0] + "/***"
    return base
