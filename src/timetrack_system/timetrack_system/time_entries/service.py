from __future__ import annotations

import calendar
import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Sequence

from ..accounting.classifier.base import HourClassifier
from ..accounting.model import RawInterval, round_hours
from ..accounting.overlap import find_conflict
from ..accounting.splitter import DEFAULT_CLASSIFIER, needs_splitting, split
from ..common.datetime_utils import dates_between, now_local, to_local, truncate_to_millis
from ..common.validators import require_flag, require_max_length
from ..core.constants import DEFAULT_PAGE_LIMIT, DEFAULT_TIMEZONE, MAX_NOTES_LENGTH, MAX_PAGE_LIMIT
from ..core.enums import ReportGrouping
from ..core.exceptions import ConflictError, EntryLockedError, InvalidIntervalError, NotFoundError, ValidationError
from ..working_hours.service import WorkingHoursService
from .locks import EntryLock
from .model import AuditLogEntry, CalendarDay, EntryPage, HoursTotal, TimeEntry
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset({"project_id", "workplace_id", "time_in", "time_out", "notes"})


class TimeEntryService:
    """Records worked intervals: overlap gate, midnight split, hour classification.

    All datetimes are handled as naive tenant-local wall-clock values; aware
    inputs are converted into ``timezone`` first.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        working_hours: WorkingHoursService,
        locks: EntryLock,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        overlap_span_all_days: bool = False,
        classifier: Optional[HourClassifier] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._entries = entries
        self._working_hours = working_hours
        self._locks = locks
        self._timezone = timezone
        self._span_all_days = bool(overlap_span_all_days)
        self._classifier = classifier or DEFAULT_CLASSIFIER
        self._clock = clock or (lambda: now_local(self._timezone))

    def _local(self, value: datetime) -> datetime:
        return truncate_to_millis(to_local(value, self._timezone))

    def _validate_interval(self, time_in: datetime, time_out: datetime, now: datetime) -> None:
        if time_out <= time_in:
            raise InvalidIntervalError("Time out must be after time in")
        if time_in > now:
            raise InvalidIntervalError("Cannot create entries for future dates")

    def _lookup_dates(self, time_in: datetime, time_out: datetime) -> list[date]:
        if self._span_all_days:
            return dates_between(time_in, time_out)
        return [time_in.date()]

    def record(
        self,
        *,
        company_id: int,
        employee_id: int,
        project_id: int,
        workplace_id: int,
        time_in: datetime,
        time_out: datetime,
        notes: Optional[str] = None,
        is_full_day: bool = False,
        now: Optional[datetime] = None,
    ) -> list[TimeEntry]:
        time_in = self._local(time_in)
        time_out = self._local(time_out)
        now = self._local(now) if now else self._clock()
        self._validate_interval(time_in, time_out, now)
        require_max_length(notes, "notes", MAX_NOTES_LENGTH)
        require_flag(is_full_day, "is_full_day")

        config = self._working_hours.get_config(company_id)
        lookup_dates = self._lookup_dates(time_in, time_out)
        if needs_splitting(time_in, time_out) and not self._span_all_days:
            logger.warning(
                "Entry %s..%s for employee %s spans midnight; overlap is only checked against %s",
                time_in,
                time_out,
                employee_id,
                time_in.date(),
            )

        with self._locks.hold(company_id, employee_id, lookup_dates):
            existing = self._entries.list_for_employee_on_dates(
                company_id=company_id, employee_id=employee_id, dates=lookup_dates
            )
            clash = find_conflict(employee_id, time_in, time_out, company_id, existing)
            if clash is not None:
                logger.info("Rejected entry for employee %s: overlaps entry %s", employee_id, clash.entry_id)
                raise ConflictError("Time entry overlaps with existing entry")

            segments = split(
                RawInterval(subject_id=employee_id, scope_id=company_id, time_in=time_in, time_out=time_out),
                config,
                self._classifier,
            )
            created = self._entries.create_segments(
                company_id=company_id,
                employee_id=employee_id,
                project_id=project_id,
                workplace_id=workplace_id,
                segments=segments,
                notes=notes,
                is_full_day=is_full_day,
                created_by=employee_id,
            )

        logger.info("Recorded %d segment(s) for employee %s", len(created), employee_id)
        return created

    def _get_editable(self, entry_id: int, company_id: int, employee_id: int) -> TimeEntry:
        entry = self._entries.get_by_id(entry_id, company_id)
        if entry is None or entry.is_deleted or entry.employee_id != employee_id:
            raise NotFoundError("Time entry not found")
        if entry.is_approved is True:
            raise EntryLockedError("Cannot change an approved time entry")
        return entry

    def update(
        self,
        *,
        entry_id: int,
        company_id: int,
        employee_id: int,
        changes: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> TimeEntry:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        entry = self._get_editable(entry_id, company_id, employee_id)
        notes = changes.get("notes", entry.notes)
        require_max_length(notes, "notes", MAX_NOTES_LENGTH)
        updated = replace(
            entry,
            project_id=int(changes.get("project_id", entry.project_id)),
            workplace_id=int(changes.get("workplace_id", entry.workplace_id)),
            notes=notes,
        )

        if "time_in" in changes or "time_out" in changes:
            time_in = self._local(changes.get("time_in", entry.time_in))
            time_out = self._local(changes.get("time_out", entry.time_out))
            now = self._local(now) if now else self._clock()
            self._validate_interval(time_in, time_out, now)
            if needs_splitting(time_in, time_out):
                raise InvalidIntervalError("An updated entry must stay within one calendar day")

            config = self._working_hours.get_config(company_id)
            with self._locks.hold(company_id, employee_id, [time_in.date()]):
                existing = self._entries.list_for_employee_on_dates(
                    company_id=company_id, employee_id=employee_id, dates=[time_in.date()]
                )
                if find_conflict(employee_id, time_in, time_out, company_id, existing, exclude_id=entry.entry_id):
                    raise ConflictError("Time entry overlaps with existing entry")

                hours = self._classifier.classify(time_in, time_out, config)
                updated = replace(
                    updated,
                    entry_date=time_in.date(),
                    time_in=time_in,
                    time_out=time_out,
                    total_hours=hours.total_hours,
                    day_hours=hours.day_hours,
                    evening_hours=hours.evening_hours,
                    night_hours=hours.night_hours,
                )
                self._save(updated, entry, employee_id)
        else:
            self._save(updated, entry, employee_id)
        return updated

    def _save(self, entry: TimeEntry, previous: TimeEntry, changed_by: Optional[int]) -> None:
        if not self._entries.update_entry(entry, previous=previous, changed_by=changed_by):
            raise NotFoundError("Time entry not found")

    def delete(self, *, entry_id: int, company_id: int, employee_id: int, now: Optional[datetime] = None) -> None:
        entry = self._get_editable(entry_id, company_id, employee_id)
        deleted_at = self._local(now) if now else self._clock()
        if not self._entries.soft_delete(entry, deleted_at=deleted_at, changed_by=employee_id):
            raise NotFoundError("Time entry not found")

    def set_approval(
        self,
        *,
        entry_id: int,
        company_id: int,
        approve: bool,
        approved_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> None:
        approved_at = self._local(now) if now else self._clock()
        ok = self._entries.set_approval(
            entry_id=entry_id,
            company_id=company_id,
            approve=require_flag(approve, "approve"),
            approved_by=approved_by,
            approved_at=approved_at,
        )
        if not ok:
            raise NotFoundError("Time entry not found")

    def list_entries(
        self,
        *,
        company_id: int,
        employee_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        project_id: Optional[int] = None,
        workplace_id: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        if start and end and end < start:
            raise ValidationError("End date must not be before start date")
        return self._entries.list_for_employee(
            company_id=company_id,
            employee_id=employee_id,
            start_date=start,
            end_date=end,
            project_id=project_id,
            workplace_id=workplace_id,
        )

    def list_company_entries(self, *, company_id: int, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> EntryPage:
        """One page of every employee's live entries, newest first."""
        if page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= limit <= MAX_PAGE_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_LIMIT}")

        items = self._entries.list_for_company(company_id=company_id, offset=(page - 1) * limit, limit=limit)
        total = self._entries.count_for_company(company_id)
        return EntryPage(items=tuple(items), total=total, page=page, limit=limit)

    def hours_report(
        self,
        *,
        company_id: int,
        grouping: str,
        start: date,
        end: date,
        employee_ids: Sequence[int] = (),
        project_ids: Sequence[int] = (),
        workplace_ids: Sequence[int] = (),
    ) -> Sequence[HoursTotal]:
        """Sum total/day/evening/night hours per employee, project or workplace.

        Only live entries whose ``entry_date`` falls in ``start..end`` (inclusive)
        count; a night shift split at midnight therefore lands in both days.
        """
        try:
            group = ReportGrouping(grouping)
        except ValueError:
            choices = ", ".join(g.value for g in ReportGrouping)
            raise ValidationError(f"report_type must be one of: {choices}")
        if end < start:
            raise ValidationError("End date must not be before start date")

        return self._entries.sum_hours(
            company_id=company_id,
            grouping=group,
            start_date=start,
            end_date=end,
            employee_ids=tuple(employee_ids),
            project_ids=tuple(project_ids),
            workplace_ids=tuple(workplace_ids),
        )

    def calendar_month(self, *, company_id: int, employee_id: int, year: int, month: int) -> list[CalendarDay]:
        if not date.min.year <= int(year) <= date.max.year:
            raise ValidationError(f"Year must be between {date.min.year} and {date.max.year}")
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        last_day = calendar.monthrange(int(year), int(month))[1]
        entries = self._entries.list_for_employee(
            company_id=company_id,
            employee_id=employee_id,
            start_date=date(int(year), int(month), 1),
            end_date=date(int(year), int(month), last_day),
        )

        by_day: dict[date, list[TimeEntry]] = {}
        for e in sorted(entries, key=lambda e: e.time_in):
            by_day.setdefault(e.entry_date, []).append(e)

        return [
            CalendarDay(
                day=day,
                total_hours=round_hours(sum((Decimal(str(e.total_hours)) for e in items), Decimal(0))),
                entry_count=len(items),
                entries=tuple(items),
            )
            for day, items in sorted(by_day.items())
        ]

    def audit_log(self, *, entry_id: int, company_id: int) -> Sequence[AuditLogEntry]:
        if self._entries.get_by_id(entry_id, company_id) is None:
            raise NotFoundError("Time entry not found")
        return self._entries.list_audit(entry_id)
