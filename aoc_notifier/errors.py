"""Exception taxonomy for the notification dispatcher.

The fetcher and delivery client return these as values rather than
raising them across component boundaries, so one failing leaderboard or
destination never aborts a run.
"""


class NotifierError(Exception):
    """Base exception for notifier errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(NotifierError):
    """A leaderboard or webhook URL is malformed. Raised before any network call."""


class FetchError(NotifierError):
    """Leaderboard retrieval failed (after transport retries, if any)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeliveryError(NotifierError):
    """Base class for failed webhook deliveries."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientDeliveryFailure(DeliveryError):
    """Destination rejected the message or was unreachable; try again next tick."""


class PermanentDeliveryFailure(DeliveryError):
    """Destination no longer exists; the subscription should be retired."""
