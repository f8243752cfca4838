from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..accounting.model import ClassifiedSegment
from ..core.enums import AuditAction, ReportGrouping
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, normalize_hours, to_json
from .model import AuditLogEntry, HoursTotal, TimeEntry, snapshot
from .repository import TimeEntryRepository

_ENTRY_COLUMNS = """
    entry_id, company_id, employee_id, project_id, workplace_id, entry_date, time_in, time_out,
    total_hours, day_hours, evening_hours, night_hours, notes, is_full_day, is_approved,
    approved_by, approved_at, deleted_at
"""


def _to_entry(r: dict) -> TimeEntry:
    approved = r.get("is_approved")
    return TimeEntry(
        entry_id=int(r["entry_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        project_id=int(r["project_id"]),
        workplace_id=int(r["workplace_id"]),
        entry_date=r["entry_date"],
        time_in=r["time_in"],
        time_out=r["time_out"],
        total_hours=normalize_hours(r["total_hours"]),
        day_hours=normalize_hours(r["day_hours"]),
        evening_hours=normalize_hours(r["evening_hours"]),
        night_hours=normalize_hours(r["night_hours"]),
        notes=r.get("notes"),
        is_full_day=bool(r.get("is_full_day")),
        is_approved=None if approved is None else bool(approved),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        deleted_at=r.get("deleted_at"),
    )


def _in_clause(column: str, ids: Sequence[int]) -> tuple[str, list[int]]:
    if not ids:
        return "", []
    return f" AND {column} IN ({','.join(['%s'] * len(ids))})", [int(i) for i in ids]


def _insert_audit(
    cur,
    *,
    entry_id: int,
    action: AuditAction,
    changed_by: Optional[int],
    old_values: Optional[dict[str, Any]] = None,
    new_values: Optional[dict[str, Any]] = None,
) -> None:
    cur.execute(
        """
        INSERT INTO time_entry_audit_logs(entry_id, action, changed_by, old_values, new_values)
        VALUES(%s,%s,%s,%s,%s)
        """,
        (int(entry_id), action.value, changed_by, to_json(old_values), to_json(new_values)),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int, company_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM time_entries WHERE entry_id=%s AND company_id=%s",
                (int(entry_id), int(company_id)),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_employee_on_dates(
        self, *, company_id: int, employee_id: int, dates: Sequence[date]
    ) -> Sequence[TimeEntry]:
        if not dates:
            return []
        placeholders = ",".join(["%s"] * len(dates))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM time_entries
                WHERE company_id=%s AND employee_id=%s AND deleted_at IS NULL
                  AND entry_date IN ({placeholders})
                ORDER BY time_in
                """,
                (int(company_id), int(employee_id), *dates),
            )
            return [_to_entry(r) for r in fetchall(cur)]

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
        sql = f"""
            SELECT {_ENTRY_COLUMNS}
            FROM time_entries
            WHERE company_id=%s AND employee_id=%s AND deleted_at IS NULL
        """
        params: list[Any] = [int(company_id), int(employee_id)]
        if start_date:
            sql += " AND entry_date >= %s"
            params.append(start_date)
        if end_date:
            sql += " AND entry_date <= %s"
            params.append(end_date)
        if project_id is not None:
            sql += " AND project_id = %s"
            params.append(int(project_id))
        if workplace_id is not None:
            sql += " AND workplace_id = %s"
            params.append(int(workplace_id))
        sql += " ORDER BY entry_date, time_in"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_company(self, *, company_id: int, offset: int, limit: int) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM time_entries
                WHERE company_id=%s AND deleted_at IS NULL
                ORDER BY entry_date DESC, time_in DESC, entry_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(company_id), int(limit), int(offset)),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def count_for_company(self, company_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM time_entries WHERE company_id=%s AND deleted_at IS NULL",
                (int(company_id),),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

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
        column = grouping.column
        sql = f"""
            SELECT {column} AS group_id, COUNT(*) AS entry_count,
                   SUM(total_hours) AS total_hours, SUM(day_hours) AS day_hours,
                   SUM(evening_hours) AS evening_hours, SUM(night_hours) AS night_hours
            FROM time_entries
            WHERE company_id=%s AND deleted_at IS NULL AND entry_date BETWEEN %s AND %s
        """
        params: list[Any] = [int(company_id), start_date, end_date]
        for filter_column, ids in (
            ("employee_id", employee_ids),
            ("project_id", project_ids),
            ("workplace_id", workplace_ids),
        ):
            clause, values = _in_clause(filter_column, ids)
            sql += clause
            params.extend(values)
        sql += f" GROUP BY {column} ORDER BY {column}"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                HoursTotal(
                    grouping=grouping,
                    group_id=int(r["group_id"]),
                    entry_count=int(r["entry_count"]),
                    total_hours=normalize_hours(r["total_hours"]),
                    day_hours=normalize_hours(r["day_hours"]),
                    evening_hours=normalize_hours(r["evening_hours"]),
                    night_hours=normalize_hours(r["night_hours"]),
                )
                for r in fetchall(cur)
            ]

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
        created: list[TimeEntry] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for seg in segments:
                cur.execute(
                    """
                    INSERT INTO time_entries(
                        company_id, employee_id, project_id, workplace_id, entry_date, time_in, time_out,
                        total_hours, day_hours, evening_hours, night_hours, notes, is_full_day
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(company_id),
                        int(employee_id),
                        int(project_id),
                        int(workplace_id),
                        seg.calendar_date,
                        seg.time_in,
                        seg.time_out,
                        seg.total_hours,
                        seg.day_hours,
                        seg.evening_hours,
                        seg.night_hours,
                        notes,
                        1 if is_full_day else 0,
                    ),
                )
                entry = TimeEntry(
                    entry_id=int(cur.lastrowid),
                    company_id=int(company_id),
                    employee_id=int(employee_id),
                    project_id=int(project_id),
                    workplace_id=int(workplace_id),
                    entry_date=seg.calendar_date,
                    time_in=seg.time_in,
                    time_out=seg.time_out,
                    total_hours=seg.total_hours,
                    day_hours=seg.day_hours,
                    evening_hours=seg.evening_hours,
                    night_hours=seg.night_hours,
                    notes=notes,
                    is_full_day=is_full_day,
                )
                _insert_audit(
                    cur,
                    entry_id=entry.entry_id,
                    action=AuditAction.CREATED,
                    changed_by=created_by,
                    new_values=snapshot(entry),
                )
                created.append(entry)
        return created

    def update_entry(self, entry: TimeEntry, *, previous: TimeEntry, changed_by: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET project_id=%s, workplace_id=%s, entry_date=%s, time_in=%s, time_out=%s,
                    total_hours=%s, day_hours=%s, evening_hours=%s, night_hours=%s, notes=%s
                WHERE entry_id=%s AND company_id=%s AND deleted_at IS NULL
                """,
                (
                    entry.project_id,
                    entry.workplace_id,
                    entry.entry_date,
                    entry.time_in,
                    entry.time_out,
                    entry.total_hours,
                    entry.day_hours,
                    entry.evening_hours,
                    entry.night_hours,
                    entry.notes,
                    entry.entry_id,
                    entry.company_id,
                ),
            )
            if cur.rowcount <= 0:
                return False
            _insert_audit(
                cur,
                entry_id=entry.entry_id,
                action=AuditAction.UPDATED,
                changed_by=changed_by,
                old_values=snapshot(previous),
                new_values=snapshot(entry),
            )
            return True

    def soft_delete(self, entry: TimeEntry, *, deleted_at: datetime, changed_by: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries SET deleted_at=%s
                WHERE entry_id=%s AND company_id=%s AND deleted_at IS NULL
                """,
                (deleted_at, entry.entry_id, entry.company_id),
            )
            if cur.rowcount <= 0:
                return False
            _insert_audit(
                cur,
                entry_id=entry.entry_id,
                action=AuditAction.DELETED,
                changed_by=changed_by,
                old_values=snapshot(entry),
            )
            return True

    def set_approval(
        self,
        *,
        entry_id: int,
        company_id: int,
        approve: bool,
        approved_by: Optional[int],
        approved_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET is_approved=%s, approved_by=%s, approved_at=%s
                WHERE entry_id=%s AND company_id=%s AND deleted_at IS NULL
                """,
                (1 if approve else 0, approved_by, approved_at, int(entry_id), int(company_id)),
            )
            if cur.rowcount <= 0:
                return False
            _insert_audit(
                cur,
                entry_id=entry_id,
                action=AuditAction.APPROVED if approve else AuditAction.REJECTED,
                changed_by=approved_by,
                new_values={"is_approved": bool(approve)},
            )
            return True

    def list_audit(self, entry_id: int) -> Sequence[AuditLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, entry_id, action, changed_by, old_values, new_values, created_at
                FROM time_entry_audit_logs
                WHERE entry_id=%s
                ORDER BY created_at, audit_id
                """,
                (int(entry_id),),
            )
            return [
                AuditLogEntry(
                    audit_id=int(r["audit_id"]),
                    entry_id=int(r["entry_id"]),
                    action=AuditAction(r["action"]),
                    changed_by=r.get("changed_by"),
                    old_values=from_json(r.get("old_values")),
                    new_values=from_json(r.get("new_values")),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
