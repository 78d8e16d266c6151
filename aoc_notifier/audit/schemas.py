"""Schema definitions for audit log records.

Maps 1:1 to the ``audit_log`` table. One entry is written per delivery
outcome outside dry-run mode.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

AuditKind = Literal["success", "error", "destination_retired"]

VALID_AUDIT_KINDS: frozenset[str] = frozenset({
    "success",
    "error",
    "destination_retired",
})


@dataclass
class AuditEntry:
    """A persisted audit record.

    Attributes:
        id: UUID4 identifier.
        subscription_id: Subscription the entry concerns (None for run-level entries).
        kind: Outcome category.
        message: Human-readable detail.
        created_at: When the outcome was recorded.
    """

    subscription_id: str | None
    kind: str
    message: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        if self.kind not in VALID_AUDIT_KINDS:
            raise ValueError(
                f"Invalid kind {self.kind!r}. "
                f"Must be one of: {sorted(VALID_AUDIT_KINDS)}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "subscription_id": self.subscription_id,
            "kind": self.kind,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
        }
