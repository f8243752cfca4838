from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Company:
    """Domain entity: a tenant."""

    company_id: int
    company_code: str
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Employee:
    employee_id: int
    company_id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    hire_date: date
    phone: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Project:
    project_id: int
    company_id: int
    project_code: str
    name: str
    description: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Workplace:
    workplace_id: int
    company_id: int
    workplace_code: str
    name: str
    location: Optional[str] = None
    is_active: bool = True
