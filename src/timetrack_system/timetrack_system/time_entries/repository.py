from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..accounting.model import ClassifiedSegment
from ..core.enums import ReportGrouping
from .model import AuditLogEntry, HoursTotal, TimeEntry


class TimeEntryRepository(Protocol):
    """Time entries and their audit trail.

    Every write also appends its audit row in the same transaction, so an entry
    change is never persisted without its history.
    """

    def get_by_id(self, entry_id: int, company_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_for_employee_on_dates(
        self, *, company_id: int, employee_id: int, dates: Sequence[date]
    ) -> Sequence[TimeEntry]:
        """Live (not deleted) entries whose entry_date is one of ``dates``."""

        raise NotImplementedError

    def list_for_employee(
        self,
        *,
        company_id: int,
        employee_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        project_id: Optional[int] = None,
        workplace_id: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def list_for_company(self, *, company_id: int, offset: int, limit: int) -> Sequence[TimeEntry]:
        """Live entries of every employee, newest first."""

        raise NotImplementedError

    def count_for_company(self, company_id: int) -> int:
        raise NotImplementedError

    def sum_hours(
        self,
        *,
        company_id: int,
        grouping: ReportGrouping,
        start_date: date,
        end_date: date,
        employee_ids: Sequence[int] = (),
        project_ids: Sequence[int] = (),
        workplace_ids: Sequence[int] = (),
    ) -> Sequence[HoursTotal]:
        """Hour sums of live entries per group, ordered by group id.

        An empty id filter means "no filter" for that dimension.
        """

        raise NotImplementedError

    def create_segments(
        self,
        *,
        company_id: int,
        employee_id: int,
        project_id: int,
        workplace_id: int,
        segments: Sequence[ClassifiedSegment],
        notes: Optional[str] = None,
        is_full_day: bool = False,
        created_by: Optional[int] = None,
    ) -> list[TimeEntry]:
        """Insert all segments and one ``created`` audit row each; entries in segment order."""

        raise NotImplementedError

    def update_entry(self, entry: TimeEntry, *, previous: TimeEntry, changed_by: Optional[int]) -> bool:
        raise NotImplementedError

    def soft_delete(self, entry: TimeEntry, *, deleted_at: datetime, changed_by: Optional[int]) -> bool:
        raise NotImplementedError

    def set_approval(
        self,
        *,
        entry_id: int,
        company_id: int,
        approve: bool,
        approved_by: Optional[int],
        approved_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def list_audit(self, entry_id: int) -> Sequence[AuditLogEntry]:
        raise NotImplementedError
