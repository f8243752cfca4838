from __future__ import annotations

from datetime import date

import pytest

from src.timetrack_system.timetrack_system.core.exceptions import NotFoundError, ValidationError
from src.timetrack_system.timetrack_system.working_hours.model import BoundaryConfig


@pytest.fixture
def orgs(memory_container):
    return memory_container.organization_service


def test_company_gets_global_code_and_default_hours(orgs, memory_container):
    first = orgs.create_company(name="Acme Oy", email="hr@acme.test")
    second = orgs.create_company(name="Globex", email="office@globex.test", phone="  ")

    assert (first.company_code, second.company_code) == ("COM001", "COM002")
    assert second.phone is None
    assert memory_container.working_hours_repo.get_for_company(first.company_id) == BoundaryConfig.default()


def test_entity_codes_are_per_tenant(orgs):
    acme = orgs.create_company(name="Acme Oy", email="hr@acme.test")
    globex = orgs.create_company(name="Globex", email="office@globex.test")

    a1 = orgs.create_employee(
        company_id=acme.company_id, first_name="Aino", last_name="Virta", email="aino@acme.test", hire_date=date(2024, 1, 8)
    )
    a2 = orgs.create_employee(
        company_id=acme.company_id, first_name="Eero", last_name="Koski", email="eero@acme.test", hire_date=date(2024, 2, 1)
    )
    g1 = orgs.create_employee(
        company_id=globex.company_id, first_name="Sam", last_name="Lee", email="sam@globex.test", hire_date=date(2023, 5, 2)
    )

    assert [a1.employee_code, a2.employee_code, g1.employee_code] == ["EMP001", "EMP002", "EMP001"]
    assert a1.full_name == "Aino Virta"
    assert [e.employee_code for e in orgs.list_employees(acme.company_id)] == ["EMP001", "EMP002"]


def test_projects_and_workplaces(orgs):
    acme = orgs.create_company(name="Acme Oy", email="hr@acme.test")

    project = orgs.create_project(company_id=acme.company_id, name="Harbour crane", description="")
    workplace = orgs.create_workplace(company_id=acme.company_id, name="Dock 4", location="Helsinki")

    assert project.project_code == "PRO001"
    assert project.description is None
    assert workplace.workplace_code == "LOC001"
    assert orgs.list_workplaces(acme.company_id) == [workplace]


@pytest.mark.parametrize(
    "name,email",
    [
        ("A", "hr@acme.test"),
        ("Acme", "not-an-email"),
        ("Acme", ""),
    ],
)
def test_company_validation(orgs, name, email):
    with pytest.raises(ValidationError):
        orgs.create_company(name=name, email=email)

    assert orgs.list_companies() == []


def test_unknown_company(orgs):
    with pytest.raises(NotFoundError):
        orgs.create_project(company_id=404, name="Ghost")
    with pytest.raises(NotFoundError):
        orgs.list_employees(404)


def test_failed_validation_does_not_consume_a_code(orgs):
    acme = orgs.create_company(name="Acme Oy", email="hr@acme.test")

    with pytest.raises(ValidationError):
        orgs.create_project(company_id=acme.company_id, name="X")

    assert orgs.create_project(company_id=acme.company_id, name="Real one").project_code == "PRO001"


@pytest.fixture
def two_tenants(orgs):
    acme = orgs.create_company(name="Acme Oy", email="hr@acme.test")
    globex = orgs.create_company(name="Globex", email="office@globex.test")
    employee = orgs.create_employee(
        company_id=acme.company_id, first_name="Aino", last_name="Virta", email="aino@acme.test", hire_date=date(2024, 1, 8)
    )
    project = orgs.create_project(company_id=acme.company_id, name="Harbour crane")
    workplace = orgs.create_workplace(company_id=acme.company_id, name="Dock 4")
    return acme, globex, employee, project, workplace


def test_lookups_are_scoped_to_the_tenant(orgs, two_tenants):
    acme, globex, employee, project, workplace = two_tenants

    assert orgs.require_employee(acme.company_id, employee.employee_id) == employee
    assert orgs.require_project(acme.company_id, project.project_id) == project
    assert orgs.require_workplace(acme.company_id, workplace.workplace_id) == workplace

    with pytest.raises(NotFoundError):
        orgs.require_employee(globex.company_id, employee.employee_id)
    with pytest.raises(NotFoundError):
        orgs.require_project(globex.company_id, project.project_id)
    with pytest.raises(NotFoundError):
        orgs.require_workplace(globex.company_id, workplace.workplace_id)
    with pytest.raises(NotFoundError):
        orgs.require_employee(acme.company_id, 999)


def test_deactivated_entities_stay_listed_but_not_assignable(orgs, two_tenants):
    acme, _, employee, project, _ = two_tenants

    orgs.deactivate_project(acme.company_id, project.project_id)
    orgs.deactivate_employee(acme.company_id, employee.employee_id)

    assert [p.is_active for p in orgs.list_projects(acme.company_id)] == [False]
    assert orgs.require_project(acme.company_id, project.project_id).is_active is False
    with pytest.raises(ValidationError):
        orgs.require_project(acme.company_id, project.project_id, active=True)
    with pytest.raises(ValidationError):
        orgs.require_employee(acme.company_id, employee.employee_id, active=True)


def test_update_employee(orgs, two_tenants):
    acme, _, employee, _, _ = two_tenants

    changes = {"last_name": " Koski ", "phone": "+358 40 123", "hire_date": date(2024, 2, 1)}

    updated = orgs.update_employee(acme.company_id, employee.employee_id, changes)

    assert (updated.full_name, updated.phone, updated.hire_date) == ("Aino Koski", "+358 40 123", date(2024, 2, 1))
    assert updated.employee_code == employee.employee_code
    assert orgs.require_employee(acme.company_id, employee.employee_id) == updated


@pytest.mark.parametrize(
    "changes",
    [
        {"employee_code": "EMP999"},
        {"first_name": 42},
        {"first_name": "  "},
        {"email": "nope"},
        {"is_active": "false"},
        {"hire_date": "2024-01-01"},
    ],
)
def test_update_employee_validation(orgs, two_tenants, changes):
    acme, _, employee, _, _ = two_tenants

    with pytest.raises(ValidationError):
        orgs.update_employee(acme.company_id, employee.employee_id, changes)

    assert orgs.require_employee(acme.company_id, employee.employee_id) == employee


def test_update_and_deactivate_company(orgs, two_tenants):
    acme = two_tenants[0]

    renamed = orgs.update_company(acme.company_id, {"name": "Acme Group", "address": ""})
    closed = orgs.deactivate_company(acme.company_id)

    assert (renamed.name, renamed.address, renamed.company_code) == ("Acme Group", None, "COM001")
    assert closed.is_active is False
    assert orgs.require_company(acme.company_id).is_active is False


def test_update_project_and_workplace(orgs, two_tenants):
    acme, _, _, project, workplace = two_tenants

    project = orgs.update_project(acme.company_id, project.project_id, {"description": "STS crane 3"})
    workplace = orgs.update_workplace(acme.company_id, workplace.workplace_id, {"name": "Dock 5", "is_active": False})

    assert project.description == "STS crane 3"
    assert (workplace.name, workplace.is_active) == ("Dock 5", False)
    with pytest.raises(ValidationError):
        orgs.update_project(acme.company_id, project.project_id, {"name": "X"})


@pytest.mark.parametrize("kwargs", [{"name": 12345}, {"phone": 358401234}, {"address": ["Main st"]}])
def test_create_company_rejects_non_text(orgs, kwargs):
    fields = {"name": "Acme Oy", "email": "hr@acme.test", **kwargs}

    with pytest.raises(ValidationError):
        orgs.create_company(**fields)

    assert orgs.list_companies() == []
