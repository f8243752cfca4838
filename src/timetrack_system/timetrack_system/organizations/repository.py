from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Company, Employee, Project, Workplace


class OrganizationRepository(Protocol):
    """Tenant entities. Every lookup below the company is scoped by ``company_id``.

    The ``update_*`` methods persist every mutable column of the given entity
    (``is_active`` included) and return ``False`` when no row matched.
    """

    def create_company(
        self, *, company_code: str, name: str, email: str, phone: Optional[str], address: Optional[str]
    ) -> int:
        raise NotImplementedError

    def get_company(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def list_companies(self) -> Sequence[Company]:
        raise NotImplementedError

    def update_company(self, company: Company) -> bool:
        raise NotImplementedError

    def create_employee(
        self,
        *,
        company_id: int,
        employee_code: str,
        first_name: str,
        last_name: str,
        email: str,
        hire_date: date,
        phone: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_employee(self, company_id: int, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_employees(self, company_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def update_employee(self, employee: Employee) -> bool:
        raise NotImplementedError

    def create_project(self, *, company_id: int, project_code: str, name: str, description: Optional[str]) -> int:
        raise NotImplementedError

    def get_project(self, company_id: int, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def list_projects(self, company_id: int) -> Sequence[Project]:
        raise NotImplementedError

    def update_project(self, project: Project) -> bool:
        raise NotImplementedError

    def create_workplace(self, *, company_id: int, workplace_code: str, name: str, location: Optional[str]) -> int:
        raise NotImplementedError

    def get_workplace(self, company_id: int, workplace_id: int) -> Optional[Workplace]:
        raise NotImplementedError

    def list_workplaces(self, company_id: int) -> Sequence[Workplace]:
        raise NotImplementedError

    def update_workplace(self, workplace: Workplace) -> bool:
        raise NotImplementedError
