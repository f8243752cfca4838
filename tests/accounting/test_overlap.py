from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pytest

from src.timetrack_system.timetrack_system.accounting.overlap import find_conflict, has_conflict, intervals_conflict


@dataclass
class Recorded:
    entry_id: int
    time_in: datetime
    time_out: datetime
    employee_id: int = 7
    company_id: int = 1
    deleted_at: Optional[datetime] = None


def h(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 4, 2, hour, minute)


EXISTING = Recorded(entry_id=1, time_in=h(11), time_out=h(13))


def test_candidate_ending_inside_existing_conflicts():
    assert has_conflict(7, h(9), h(12), 1, [EXISTING])


@pytest.mark.parametrize(
    "time_in,time_out",
    [
        (h(12), h(14)),  # starts inside
        (h(10), h(12)),  # ends inside
        (h(10), h(14)),  # contains
        (h(11, 30), h(12, 30)),  # contained
        (h(11), h(13)),  # identical
    ],
)
def test_conflicting_shapes(time_in, time_out):
    assert intervals_conflict(time_in, time_out, EXISTING.time_in, EXISTING.time_out)


@pytest.mark.parametrize(
    "time_in,time_out",
    [
        (h(9), h(11)),  # touches start
        (h(13), h(15)),  # touches end
        (h(7), h(8)),
    ],
)
def test_adjacent_or_disjoint_do_not_conflict(time_in, time_out):
    assert not has_conflict(7, time_in, time_out, 1, [EXISTING])


def test_excluded_entry_is_ignored():
    assert not has_conflict(7, h(11), h(12), 1, [EXISTING], exclude_id=1)


def test_other_employee_and_company_are_ignored():
    others = [
        Recorded(entry_id=2, time_in=h(11), time_out=h(13), employee_id=8),
        Recorded(entry_id=3, time_in=h(11), time_out=h(13), company_id=2),
    ]

    assert not has_conflict(7, h(9), h(12), 1, others)


def test_deleted_entries_are_ignored():
    deleted = Recorded(entry_id=4, time_in=h(11), time_out=h(13), deleted_at=h(15))

    assert not has_conflict(7, h(9), h(12), 1, [deleted])


def test_find_conflict_returns_first_clash():
    later = Recorded(entry_id=5, time_in=h(14), time_out=h(16))

    clash = find_conflict(7, h(12), h(15), 1, [EXISTING, later])

    assert clash is EXISTING
