"""Delivery outcome types."""

import enum
from dataclasses import dataclass

from aoc_notifier.errors import (
    DeliveryError,
    PermanentDeliveryFailure,
    TransientDeliveryFailure,
)


class DeliveryStatus(str, enum.Enum):
    """Classified result of one delivery attempt."""

    SUCCESS = "success"
    TRANSIENT_FAILURE = "transient_failure"
    PERMANENT_FAILURE = "permanent_failure"


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of posting one payload to one destination.

    Attributes:
        status: Classification driving what the dispatcher does next.
        message: Human-readable detail (empty on success).
        status_code: HTTP status, if a response was received.
    """

    status: DeliveryStatus
    message: str = ""
    status_code: int | None = None

    @classmethod
    def success(cls, status_code: int | None = None) -> "DeliveryOutcome":
        return cls(DeliveryStatus.SUCCESS, "", status_code)

    @classmethod
    def transient(cls, message: str, status_code: int | None = None) -> "DeliveryOutcome":
        return cls(DeliveryStatus.TRANSIENT_FAILURE, message, status_code)

    @classmethod
    def permanent(cls, message: str, status_code: int | None = None) -> "DeliveryOutcome":
        return cls(DeliveryStatus.PERMANENT_FAILURE, message, status_code)

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.SUCCESS

    @property
    def destination_gone(self) -> bool:
        return self.status is DeliveryStatus.PERMANENT_FAILURE

    def as_error(self) -> DeliveryError | None:
        """The failure as an exception instance (None on success)."""
        if self.status is DeliveryStatus.PERMANENT_FAILURE:
            return PermanentDeliveryFailure(self.message, self.status_code)
        if self.status is DeliveryStatus.TRANSIENT_FAILURE:
            return TransientDeliveryFailure(self.message, self.status_code)
        return None
