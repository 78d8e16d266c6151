"""Audit log: persisted record of delivery outcomes."""

from aoc_notifier.audit.repository import NOTIFICATIONS_SENT_STAT, AuditLogRepository
from aoc_notifier.audit.schemas import VALID_AUDIT_KINDS, AuditEntry, AuditKind

__all__ = [
    "AuditEntry",
    "AuditKind",
    "AuditLogRepository",
    "NOTIFICATIONS_SENT_STAT",
    "VALID_AUDIT_KINDS",
]
