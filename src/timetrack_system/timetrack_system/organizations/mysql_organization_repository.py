from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Company, Employee, Project, Workplace
from .repository import OrganizationRepository

_COMPANY_COLUMNS = "company_id, company_code, name, email, phone, address, is_active"
_EMPLOYEE_COLUMNS = (
    "employee_id, company_id, employee_code, first_name, last_name, email, phone, hire_date, is_active"
)
_PROJECT_COLUMNS = "project_id, company_id, project_code, name, description, is_active"
_WORKPLACE_COLUMNS = "workplace_id, company_id, workplace_code, name, location, is_active"


def _to_company(r: dict) -> Company:
    return Company(
        company_id=int(r["company_id"]),
        company_code=r["company_code"],
        name=r["name"],
        email=r["email"],
        phone=r.get("phone"),
        address=r.get("address"),
        is_active=bool(r.get("is_active", 1)),
    )


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        hire_date=r["hire_date"],
        phone=r.get("phone"),
        is_active=bool(r.get("is_active", 1)),
    )


def _to_project(r: dict) -> Project:
    return Project(
        project_id=int(r["project_id"]),
        company_id=int(r["company_id"]),
        project_code=r["project_code"],
        name=r["name"],
        description=r.get("description"),
        is_active=bool(r.get("is_active", 1)),
    )


def _to_workplace(r: dict) -> Workplace:
    return Workplace(
        workplace_id=int(r["workplace_id"]),
        company_id=int(r["company_id"]),
        workplace_code=r["workplace_code"],
        name=r["name"],
        location=r.get("location"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_company(
        self, *, company_code: str, name: str, email: str, phone: Optional[str], address: Optional[str]
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO companies(company_code, name, email, phone, address)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (company_code, name, email, phone, address),
            )
            return int(cur.lastrowid)

    def get_company(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE company_id=%s", (int(company_id),))
            r = fetchone(cur)
            return _to_company(r) if r else None

    def list_companies(self) -> Sequence[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COMPANY_COLUMNS} FROM companies ORDER BY company_code")
            return [_to_company(r) for r in fetchall(cur)]

    def update_company(self, company: Company) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE companies
                SET name=%s, email=%s, phone=%s, address=%s, is_active=%s
                WHERE company_id=%s
                """,
                (
                    company.name,
                    company.email,
                    company.phone,
                    company.address,
                    1 if company.is_active else 0,
                    company.company_id,
                ),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(company_id, employee_code, first_name, last_name, email, phone, hire_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(company_id), employee_code, first_name, last_name, email, phone, hire_date),
            )
            return int(cur.lastrowid)

    def get_employee(self, company_id: int, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s AND company_id=%s",
                (int(employee_id), int(company_id)),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_employees(self, company_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees
                WHERE company_id=%s
                ORDER BY employee_code
                """,
                (int(company_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def update_employee(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET first_name=%s, last_name=%s, email=%s, phone=%s, hire_date=%s, is_active=%s
                WHERE employee_id=%s AND company_id=%s
                """,
                (
                    employee.first_name,
                    employee.last_name,
                    employee.email,
                    employee.phone,
                    employee.hire_date,
                    1 if employee.is_active else 0,
                    employee.employee_id,
                    employee.company_id,
                ),
            )
            return cur.rowcount > 0

    def create_project(self, *, company_id: int, project_code: str, name: str, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO projects(company_id, project_code, name, description) VALUES(%s,%s,%s,%s)",
                (int(company_id), project_code, name, description),
            )
            return int(cur.lastrowid)

    def get_project(self, company_id: int, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE project_id=%s AND company_id=%s",
                (int(project_id), int(company_id)),
            )
            r = fetchone(cur)
            return _to_project(r) if r else None

    def list_projects(self, company_id: int) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE company_id=%s ORDER BY name",
                (int(company_id),),
            )
            return [_to_project(r) for r in fetchall(cur)]

    def update_project(self, project: Project) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE projects SET name=%s, description=%s, is_active=%s WHERE project_id=%s AND company_id=%s",
                (
                    project.name,
                    project.description,
                    1 if project.is_active else 0,
                    project.project_id,
                    project.company_id,
                ),
            )
            return cur.rowcount > 0

    def create_workplace(self, *, company_id: int, workplace_code: str, name: str, location: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO workplaces(company_id, workplace_code, name, location) VALUES(%s,%s,%s,%s)",
                (int(company_id), workplace_code, name, location),
            )
            return int(cur.lastrowid)

    def get_workplace(self, company_id: int, workplace_id: int) -> Optional[Workplace]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_WORKPLACE_COLUMNS} FROM workplaces WHERE workplace_id=%s AND company_id=%s",
                (int(workplace_id), int(company_id)),
            )
            r = fetchone(cur)
            return _to_workplace(r) if r else None

    def list_workplaces(self, company_id: int) -> Sequence[Workplace]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_WORKPLACE_COLUMNS} FROM workplaces WHERE company_id=%s ORDER BY name",
                (int(company_id),),
            )
            return [_to_workplace(r) for r in fetchall(cur)]

    def update_workplace(self, workplace: Workplace) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE workplaces SET name=%s, location=%s, is_active=%s WHERE workplace_id=%s AND company_id=%s",
                (
                    workplace.name,
                    workplace.location,
                    1 if workplace.is_active else 0,
                    workplace.workplace_id,
                    workplace.company_id,
                ),
            )
            return cur.rowcount > 0
