from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AuditAction, ReportGrouping


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one persisted calendar-day segment of worked time."""

    entry_id: int
    company_id: int
    employee_id: int
    project_id: int
    workplace_id: int
    entry_date: date
    time_in: datetime
    time_out: datetime
    total_hours: float
    day_hours: float
    evening_hours: float
    night_hours: float
    notes: Optional[str] = None
    is_full_day: bool = False
    is_approved: Optional[bool] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


def snapshot(entry: TimeEntry) -> dict[str, Any]:
    """Audit-log representation of an entry."""
    return asdict(entry)


@dataclass(frozen=True)
class AuditLogEntry:
    audit_id: int
    entry_id: int
    action: AuditAction
    changed_by: Optional[int]
    old_values: Optional[dict[str, Any]]
    new_values: Optional[dict[str, Any]]
    created_at: datetime


@dataclass(frozen=True)
class CalendarDay:
    """Read-model: one day of an employee's month view."""

    day: date
    total_hours: float
    entry_count: int
    entries: tuple[TimeEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EntryPage:
    items: tuple[TimeEntry, ...]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass(frozen=True)
class HoursTotal:
    """Read-model: summed hours of one employee, project or workplace."""

    grouping: ReportGrouping
    group_id: int
    entry_count: int
    total_hours: float
    day_hours: float
    evening_hours: float
    night_hours: float
