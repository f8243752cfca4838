from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

import pytest

from src.timetrack_system.timetrack_system.accounting.model import ClassifiedSegment, round_hours
from src.timetrack_system.timetrack_system.container import Container, assemble
from src.timetrack_system.timetrack_system.core.enums import AuditAction, ReportGrouping
from src.timetrack_system.timetrack_system.organizations.model import Company, Employee, Project, Workplace
from src.timetrack_system.timetrack_system.sequences.memory_sequence_repository import InMemorySequenceRepository
from src.timetrack_system.timetrack_system.time_entries.locks import InMemoryEntryLock
from src.timetrack_system.timetrack_system.time_entries.model import AuditLogEntry, HoursTotal, TimeEntry, snapshot
from src.timetrack_system.timetrack_system.working_hours.model import BoundaryConfig


class InMemoryWorkingHours:
    def __init__(self):
        self.by_company: dict[int, BoundaryConfig] = {}

    def get_for_company(self, company_id: int) -> Optional[BoundaryConfig]:
        return self.by_company.get(company_id)

    def upsert(self, company_id: int, config: BoundaryConfig) -> None:
        self.by_company[company_id] = config


class InMemoryOrganizations:
    def __init__(self):
        self.companies: dict[int, Company] = {}
        self.employees: dict[int, Employee] = {}
        self.projects: dict[int, Project] = {}
        self.workplaces: dict[int, Workplace] = {}
        self._id = 0

    def _next_id(self) -> int:
        self._id += 1
        return self._id

    @staticmethod
    def _scoped(table: dict, company_id: int, entity_id: int):
        entity = table.get(entity_id)
        if entity is None or entity.company_id != company_id:
            return None
        return entity

    def create_company(self, *, company_code, name, email, phone, address) -> int:
        company_id = self._next_id()
        self.companies[company_id] = Company(company_id, company_code, name, email, phone, address)
        return company_id

    def get_company(self, company_id: int) -> Optional[Company]:
        return self.companies.get(company_id)

    def list_companies(self) -> Sequence[Company]:
        return list(self.companies.values())

    def update_company(self, company: Company) -> bool:
        if company.company_id not in self.companies:
            return False
        self.companies[company.company_id] = company
        return True

    def create_employee(self, *, company_id, employee_code, first_name, last_name, email, hire_date, phone) -> int:
        employee_id = self._next_id()
        self.employees[employee_id] = Employee(
            employee_id, company_id, employee_code, first_name, last_name, email, hire_date, phone
        )
        return employee_id

    def get_employee(self, company_id: int, employee_id: int) -> Optional[Employee]:
        return self._scoped(self.employees, company_id, employee_id)

    def list_employees(self, company_id: int) -> Sequence[Employee]:
        return [e for e in self.employees.values() if e.company_id == company_id]

    def update_employee(self, employee: Employee) -> bool:
        if self.get_employee(employee.company_id, employee.employee_id) is None:
            return False
        self.employees[employee.employee_id] = employee
        return True

    def create_project(self, *, company_id, project_code, name, description) -> int:
        project_id = self._next_id()
        self.projects[project_id] = Project(project_id, company_id, project_code, name, description)
        return project_id

    def get_project(self, company_id: int, project_id: int) -> Optional[Project]:
        return self._scoped(self.projects, company_id, project_id)

    def list_projects(self, company_id: int) -> Sequence[Project]:
        return [p for p in self.projects.values() if p.company_id == company_id]

    def update_project(self, project: Project) -> bool:
        if self.get_project(project.company_id, project.project_id) is None:
            return False
        self.projects[project.project_id] = project
        return True

    def create_workplace(self, *, company_id, workplace_code, name, location) -> int:
        workplace_id = self._next_id()
        self.workplaces[workplace_id] = Workplace(workplace_id, company_id, workplace_code, name, location)
        return workplace_id

    def get_workplace(self, company_id: int, workplace_id: int) -> Optional[Workplace]:
        return self._scoped(self.workplaces, company_id, workplace_id)

    def list_workplaces(self, company_id: int) -> Sequence[Workplace]:
        return [w for w in self.workplaces.values() if w.company_id == company_id]

    def update_workplace(self, workplace: Workplace) -> bool:
        if self.get_workplace(workplace.company_id, workplace.workplace_id) is None:
            return False
        self.workplaces[workplace.workplace_id] = workplace
        return True


class InMemoryTimeEntries:
    def __init__(self):
        self.rows: dict[int, TimeEntry] = {}
        self.audits: list[AuditLogEntry] = []
        self._id = 0

    def _audit(
        self,
        entry_id: int,
        action: AuditAction,
        changed_by: Optional[int],
        old_values: Optional[dict[str, Any]] = None,
        new_values: Optional[dict[str, Any]] = None,
    ) -> None:
        self.audits.append(
            AuditLogEntry(
                len(self.audits) + 1, entry_id, action, changed_by, old_values, new_values, datetime(2025, 1, 1)
            )
        )

    def _live(self, company_id: int):
        return [e for e in self.rows.values() if e.company_id == company_id and not e.is_deleted]

    def get_by_id(self, entry_id: int, company_id: int) -> Optional[TimeEntry]:
        entry = self.rows.get(entry_id)
        if entry is None or entry.company_id != company_id:
            return None
        return entry

    def list_for_employee_on_dates(self, *, company_id: int, employee_id: int, dates: Sequence[date]):
        wanted = set(dates)
        return [e for e in self._live(company_id) if e.employee_id == employee_id and e.entry_date in wanted]

    def list_for_employee(
        self, *, company_id: int, employee_id: int, start_date=None, end_date=None, project_id=None, workplace_id=None
    ):
        items = [e for e in self._live(company_id) if e.employee_id == employee_id]
        if start_date:
            items = [e for e in items if e.entry_date >= start_date]
        if end_date:
            items = [e for e in items if e.entry_date <= end_date]
        if project_id is not None:
            items = [e for e in items if e.project_id == project_id]
        if workplace_id is not None:
            items = [e for e in items if e.workplace_id == workplace_id]
        return sorted(items, key=lambda e: e.time_in)

    def list_for_company(self, *, company_id: int, offset: int, limit: int):
        items = sorted(self._live(company_id), key=lambda e: (e.entry_date, e.time_in, e.entry_id), reverse=True)
        return items[offset : offset + limit]

    def count_for_company(self, company_id: int) -> int:
        return len(self._live(company_id))

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
    ):
        groups: dict[int, list[TimeEntry]] = {}
        for e in self._live(company_id):
            if not start_date <= e.entry_date <= end_date:
                continue
            if (employee_ids and e.employee_id not in employee_ids) or (
                project_ids and e.project_id not in project_ids
            ) or (workplace_ids and e.workplace_id not in workplace_ids):
                continue
            groups.setdefault(getattr(e, grouping.column), []).append(e)

        def total(items, attr):
            return round_hours(sum((Decimal(str(getattr(e, attr))) for e in items), Decimal(0)))

        return [
            HoursTotal(
                grouping=grouping,
                group_id=group_id,
                entry_count=len(items),
                total_hours=total(items, "total_hours"),
                day_hours=total(items, "day_hours"),
                evening_hours=total(items, "evening_hours"),
                night_hours=total(items, "night_hours"),
            )
            for group_id, items in sorted(groups.items())
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
        created = []
        for seg in segments:
            self._id += 1
            entry = TimeEntry(
                entry_id=self._id,
                company_id=company_id,
                employee_id=employee_id,
                project_id=project_id,
                workplace_id=workplace_id,
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
            self.rows[entry.entry_id] = entry
            self._audit(entry.entry_id, AuditAction.CREATED, created_by, new_values=snapshot(entry))
            created.append(entry)
        return created

    def update_entry(self, entry: TimeEntry, *, previous: TimeEntry, changed_by: Optional[int]) -> bool:
        if entry.entry_id not in self.rows:
            return False
        self.rows[entry.entry_id] = entry
        self._audit(entry.entry_id, AuditAction.UPDATED, changed_by, snapshot(previous), snapshot(entry))
        return True

    def soft_delete(self, entry: TimeEntry, *, deleted_at: datetime, changed_by: Optional[int]) -> bool:
        current = self.get_by_id(entry.entry_id, entry.company_id)
        if current is None or current.is_deleted:
            return False
        self.rows[entry.entry_id] = replace(current, deleted_at=deleted_at)
        self._audit(entry.entry_id, AuditAction.DELETED, changed_by, old_values=snapshot(entry))
        return True

    def set_approval(self, *, entry_id, company_id, approve, approved_by, approved_at) -> bool:
        entry = self.get_by_id(entry_id, company_id)
        if entry is None or entry.is_deleted:
            return False
        self.rows[entry_id] = replace(entry, is_approved=approve, approved_by=approved_by, approved_at=approved_at)
        action = AuditAction.APPROVED if approve else AuditAction.REJECTED
        self._audit(entry_id, action, approved_by, new_values={"is_approved": approve})
        return True

    def list_audit(self, entry_id: int) -> Sequence[AuditLogEntry]:
        return [a for a in self.audits if a.entry_id == entry_id]


def build_memory_container(*, overlap_span_all_days: bool = False) -> Container:
    return assemble(
        conn=None,
        organizations_repo=InMemoryOrganizations(),
        working_hours_repo=InMemoryWorkingHours(),
        sequences_repo=InMemorySequenceRepository(),
        time_entries_repo=InMemoryTimeEntries(),
        entry_lock=InMemoryEntryLock(timeout_seconds=2),
        timezone="UTC",
        overlap_span_all_days=overlap_span_all_days,
    )


@pytest.fixture
def working_hours_repo() -> InMemoryWorkingHours:
    return InMemoryWorkingHours()


@pytest.fixture
def time_entries_repo() -> InMemoryTimeEntries:
    return InMemoryTimeEntries()


@pytest.fixture
def memory_container() -> Container:
    return build_memory_container()


@pytest.fixture
def client(monkeypatch, memory_container):
    from src.timetrack_system.timetrack_system.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=memory_container)
    return app.test_client()
