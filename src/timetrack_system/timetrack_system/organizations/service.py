from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from ..common.validators import (
    optional_text,
    require_email,
    require_flag,
    require_min_length,
    require_non_empty,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..sequences.service import SequenceService
from ..working_hours.service import WorkingHoursService
from .model import Company, Employee, Project, Workplace
from .repository import OrganizationRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _hire_date(value: Any) -> date:
    if not isinstance(value, date):
        raise ValidationError("hire_date must be a date")
    return value


_COMPANY_FIELDS: Mapping[str, Callable[[Any], Any]] = {
    "name": lambda v: require_min_length(v, "Company name", 2),
    "email": require_email,
    "phone": lambda v: optional_text(v, "phone"),
    "address": lambda v: optional_text(v, "address"),
    "is_active": lambda v: require_flag(v, "is_active"),
}
_EMPLOYEE_FIELDS: Mapping[str, Callable[[Any], Any]] = {
    "first_name": lambda v: require_non_empty(v, "First name"),
    "last_name": lambda v: require_non_empty(v, "Last name"),
    "email": require_email,
    "phone": lambda v: optional_text(v, "phone"),
    "hire_date": _hire_date,
    "is_active": lambda v: require_flag(v, "is_active"),
}
_PROJECT_FIELDS: Mapping[str, Callable[[Any], Any]] = {
    "name": lambda v: require_min_length(v, "Project name", 2),
    "description": lambda v: optional_text(v, "description"),
    "is_active": lambda v: require_flag(v, "is_active"),
}
_WORKPLACE_FIELDS: Mapping[str, Callable[[Any], Any]] = {
    "name": lambda v: require_min_length(v, "Workplace name", 2),
    "location": lambda v: optional_text(v, "location"),
    "is_active": lambda v: require_flag(v, "is_active"),
}


def _apply_changes(entity: T, changes: Mapping[str, Any], fields: Mapping[str, Callable[[Any], Any]]) -> T:
    unknown = set(changes) - set(fields)
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
    return replace(entity, **{name: fields[name](value) for name, value in changes.items()})


class OrganizationService:
    """Creates tenant-scoped entities, each stamped with its sequential code.

    Entities are never removed: "delete" clears ``is_active`` so historical time
    entries keep their references. ``require_*`` lookups are scoped by company,
    so an id belonging to another tenant is reported as not found.
    """

    def __init__(
        self,
        orgs: OrganizationRepository,
        sequences: SequenceService,
        working_hours: WorkingHoursService,
    ):
        self._orgs = orgs
        self._sequences = sequences
        self._working_hours = working_hours

    def require_company(self, company_id: int) -> Company:
        company = self._orgs.get_company(int(company_id))
        if company is None:
            raise NotFoundError("Company not found")
        return company

    def require_employee(self, company_id: int, employee_id: int, *, active: bool = False) -> Employee:
        employee = self._orgs.get_employee(int(company_id), int(employee_id))
        if employee is None:
            raise NotFoundError("Employee not found")
        if active and not employee.is_active:
            raise ValidationError(f"Employee {employee.employee_code} is inactive")
        return employee

    def require_project(self, company_id: int, project_id: int, *, active: bool = False) -> Project:
        project = self._orgs.get_project(int(company_id), int(project_id))
        if project is None:
            raise NotFoundError("Project not found")
        if active and not project.is_active:
            raise ValidationError(f"Project {project.project_code} is inactive")
        return project

    def require_workplace(self, company_id: int, workplace_id: int, *, active: bool = False) -> Workplace:
        workplace = self._orgs.get_workplace(int(company_id), int(workplace_id))
        if workplace is None:
            raise NotFoundError("Workplace not found")
        if active and not workplace.is_active:
            raise ValidationError(f"Workplace {workplace.workplace_code} is inactive")
        return workplace

    # -- companies

    def create_company(
        self, *, name: str, email: str, phone: Optional[str] = None, address: Optional[str] = None
    ) -> Company:
        name = require_min_length(name, "Company name", 2)
        email = require_email(email)
        phone = optional_text(phone, "phone")
        address = optional_text(address, "address")

        code = self._sequences.next_company_code()
        company_id = self._orgs.create_company(
            company_code=code, name=name, email=email, phone=phone, address=address
        )
        self._working_hours.provision_default(company_id)
        logger.info("Provisioned company %s (%s)", code, company_id)
        return Company(
            company_id=company_id,
            company_code=code,
            name=name,
            email=email,
            phone=phone,
            address=address,
        )

    def list_companies(self) -> Sequence[Company]:
        return self._orgs.list_companies()

    def update_company(self, company_id: int, changes: Mapping[str, Any]) -> Company:
        updated = _apply_changes(self.require_company(company_id), changes, _COMPANY_FIELDS)
        if not self._orgs.update_company(updated):
            raise NotFoundError("Company not found")
        return updated

    def deactivate_company(self, company_id: int) -> Company:
        company = self.update_company(company_id, {"is_active": False})
        logger.info("Deactivated company %s", company.company_code)
        return company

    # -- employees

    def create_employee(
        self,
        *,
        company_id: int,
        first_name: str,
        last_name: str,
        email: str,
        hire_date: date,
        phone: Optional[str] = None,
    ) -> Employee:
        self.require_company(company_id)
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        email = require_email(email)
        phone = optional_text(phone, "phone")

        code = self._sequences.next_employee_code(company_id)
        employee_id = self._orgs.create_employee(
            company_id=int(company_id),
            employee_code=code,
            first_name=first_name,
            last_name=last_name,
            email=email,
            hire_date=hire_date,
            phone=phone,
        )
        return Employee(
            employee_id=employee_id,
            company_id=int(company_id),
            employee_code=code,
            first_name=first_name,
            last_name=last_name,
            email=email,
            hire_date=hire_date,
            phone=phone,
        )

    def list_employees(self, company_id: int) -> Sequence[Employee]:
        self.require_company(company_id)
        return self._orgs.list_employees(int(company_id))

    def update_employee(self, company_id: int, employee_id: int, changes: Mapping[str, Any]) -> Employee:
        updated = _apply_changes(self.require_employee(company_id, employee_id), changes, _EMPLOYEE_FIELDS)
        if not self._orgs.update_employee(updated):
            raise NotFoundError("Employee not found")
        return updated

    def deactivate_employee(self, company_id: int, employee_id: int) -> Employee:
        return self.update_employee(company_id, employee_id, {"is_active": False})

    # -- projects

    def create_project(self, *, company_id: int, name: str, description: Optional[str] = None) -> Project:
        self.require_company(company_id)
        name = require_min_length(name, "Project name", 2)
        description = optional_text(description, "description")

        code = self._sequences.next_project_code(company_id)
        project_id = self._orgs.create_project(
            company_id=int(company_id), project_code=code, name=name, description=description
        )
        return Project(
            project_id=project_id,
            company_id=int(company_id),
            project_code=code,
            name=name,
            description=description,
        )

    def list_projects(self, company_id: int) -> Sequence[Project]:
        self.require_company(company_id)
        return self._orgs.list_projects(int(company_id))

    def update_project(self, company_id: int, project_id: int, changes: Mapping[str, Any]) -> Project:
        updated = _apply_changes(self.require_project(company_id, project_id), changes, _PROJECT_FIELDS)
        if not self._orgs.update_project(updated):
            raise NotFoundError("Project not found")
        return updated

    def deactivate_project(self, company_id: int, project_id: int) -> Project:
        return self.update_project(company_id, project_id, {"is_active": False})

    # -- workplaces

    def create_workplace(self, *, company_id: int, name: str, location: Optional[str] = None) -> Workplace:
        self.require_company(company_id)
        name = require_min_length(name, "Workplace name", 2)
        location = optional_text(location, "location")

        code = self._sequences.next_workplace_code(company_id)
        workplace_id = self._orgs.create_workplace(
            company_id=int(company_id), workplace_code=code, name=name, location=location
        )
        return Workplace(
            workplace_id=workplace_id,
            company_id=int(company_id),
            workplace_code=code,
            name=name,
            location=location,
        )

    def list_workplaces(self, company_id: int) -> Sequence[Workplace]:
        self.require_company(company_id)
        return self._orgs.list_workplaces(int(company_id))

    def update_workplace(self, company_id: int, workplace_id: int, changes: Mapping[str, Any]) -> Workplace:
        updated = _apply_changes(self.require_workplace(company_id, workplace_id), changes, _WORKPLACE_FIELDS)
        if not self._orgs.update_workplace(updated):
            raise NotFoundError("Workplace not found")
        return updated

    def deactivate_workplace(self, company_id: int, workplace_id: int) -> Workplace:
        return self.update_workplace(company_id, workplace_id, {"is_active": False})
