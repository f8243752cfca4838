from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    """Entity kinds that receive human-readable sequential codes."""

    COMPANY = "company"
    EMPLOYEE = "employee"
    PROJECT = "project"
    WORKPLACE = "workplace"

    @property
    def default_prefix(self) -> str:
        return _PREFIXES[self]


_PREFIXES = {
    EntityKind.COMPANY: "COM",
    EntityKind.EMPLOYEE: "EMP",
    EntityKind.PROJECT: "PRO",
    EntityKind.WORKPLACE: "LOC",
}


class HourBucket(str, Enum):
    """Classification bucket for a single minute of work."""

    DAY = "day"
    EVENING = "evening"
    NIGHT = "night"


class AuditAction(str, Enum):
    """Actions recorded in the time entry audit trail."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportGrouping(str, Enum):
    """Dimension an hours report sums over."""

    EMPLOYEE = "employee"
    PROJECT = "project"
    WORKPLACE = "workplace"

    @property
    def column(self) -> str:
        return f"{self.value}_id"
