from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, TypeVar


class RecordedInterval(Protocol):
    entry_id: int
    company_id: int
    employee_id: int
    time_in: datetime
    time_out: datetime
    deleted_at: Optional[datetime]


T = TypeVar("T", bound=RecordedInterval)


def intervals_conflict(
    time_in: datetime,
    time_out: datetime,
    existing_in: datetime,
    existing_out: datetime,
) -> bool:
    starts_inside = existing_in <= time_in < existing_out
    ends_inside = existing_in < time_out <= existing_out
    contains = time_in <= existing_in and time_out >= existing_out
    return starts_inside or ends_inside or contains


def find_conflict(
    subject_id: int,
    time_in: datetime,
    time_out: datetime,
    scope_id: int,
    existing: Iterable[T],
    exclude_id: Optional[int] = None,
) -> Optional[T]:
    """First recorded interval the candidate collides with, if any.

    ``existing`` is the comparison set chosen by the caller (normally the
    employee's entries dated on the candidate's start date).
    """
    for item in existing:
        if item.employee_id != subject_id or item.company_id != scope_id:
            continue
        if exclude_id is not None and item.entry_id == exclude_id:
            continue
        if item.deleted_at is not None:
            continue
        if intervals_conflict(time_in, time_out, item.time_in, item.time_out):
            return item
    return None


def has_conflict(
    subject_id: int,
    time_in: datetime,
    time_out: datetime,
    scope_id: int,
    existing: Iterable[RecordedInterval],
    exclude_id: Optional[int] = None,
) -> bool:
    return find_conflict(subject_id, time_in, time_out, scope_id, existing, exclude_id) is not None
