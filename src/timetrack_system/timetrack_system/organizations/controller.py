from __future__ import annotations

from dataclasses import asdict

from flask import Flask

from ..common.http import as_date, json_body, ok, require_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    orgs = container.organization_service

    company_url = "/api/companies/<int:company_id>"

    # -- companies

    @app.route("/api/companies", methods=["GET"], endpoint="list_companies")
    def list_companies():
        return ok([asdict(c) for c in orgs.list_companies()])

    @app.route("/api/companies", methods=["POST"], endpoint="create_company")
    def create_company():
        body = json_body()
        company = orgs.create_company(
            name=require_field(body, "name"),
            email=require_field(body, "email"),
            phone=body.get("phone"),
            address=body.get("address"),
        )
        return ok(asdict(company), status=201, message="Company created successfully")

    @app.route(company_url, methods=["GET"], endpoint="get_company")
    def get_company(company_id: int):
        return ok(asdict(orgs.require_company(company_id)))

    @app.route(company_url, methods=["PATCH"], endpoint="update_company")
    def update_company(company_id: int):
        company = orgs.update_company(company_id, json_body())
        return ok(asdict(company), message="Company updated successfully")

    @app.route(company_url, methods=["DELETE"], endpoint="deactivate_company")
    def deactivate_company(company_id: int):
        orgs.deactivate_company(company_id)
        return ok(message="Company deactivated successfully")

    # -- employees

    @app.route(f"{company_url}/employees", methods=["GET"], endpoint="list_employees")
    def list_employees(company_id: int):
        return ok([_employee_json(e) for e in orgs.list_employees(company_id)])

    @app.route(f"{company_url}/employees", methods=["POST"], endpoint="create_employee")
    def create_employee(company_id: int):
        body = json_body()
        employee = orgs.create_employee(
            company_id=company_id,
            first_name=require_field(body, "first_name"),
            last_name=require_field(body, "last_name"),
            email=require_field(body, "email"),
            hire_date=as_date(require_field(body, "hire_date"), "hire_date"),
            phone=body.get("phone"),
        )
        return ok(_employee_json(employee), status=201, message="Employee created successfully")

    @app.route(f"{company_url}/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    def get_employee(company_id: int, employee_id: int):
        orgs.require_company(company_id)
        return ok(_employee_json(orgs.require_employee(company_id, employee_id)))

    @app.route(f"{company_url}/employees/<int:employee_id>", methods=["PATCH"], endpoint="update_employee")
    def update_employee(company_id: int, employee_id: int):
        orgs.require_company(company_id)
        changes = dict(json_body())
        if "hire_date" in changes:
            changes["hire_date"] = as_date(changes["hire_date"], "hire_date")
        employee = orgs.update_employee(company_id, employee_id, changes)
        return ok(_employee_json(employee), message="Employee updated successfully")

    @app.route(f"{company_url}/employees/<int:employee_id>", methods=["DELETE"], endpoint="deactivate_employee")
    def deactivate_employee(company_id: int, employee_id: int):
        orgs.require_company(company_id)
        orgs.deactivate_employee(company_id, employee_id)
        return ok(message="Employee deactivated successfully")

    # -- projects

    @app.route(f"{company_url}/projects", methods=["GET"], endpoint="list_projects")
    def list_projects(company_id: int):
        return ok([asdict(p) for p in orgs.list_projects(company_id)])

    @app.route(f"{company_url}/projects", methods=["POST"], endpoint="create_project")
    def create_project(company_id: int):
        body = json_body()
        project = orgs.create_project(
            company_id=company_id,
            name=require_field(body, "name"),
            description=body.get("description"),
        )
        return ok(asdict(project), status=201, message="Project created successfully")

    @app.route(f"{company_url}/projects/<int:project_id>", methods=["GET"], endpoint="get_project")
    def get_project(company_id: int, project_id: int):
        orgs.require_company(company_id)
        return ok(asdict(orgs.require_project(company_id, project_id)))

    @app.route(f"{company_url}/projects/<int:project_id>", methods=["PATCH"], endpoint="update_project")
    def update_project(company_id: int, project_id: int):
        orgs.require_company(company_id)
        project = orgs.update_project(company_id, project_id, json_body())
        return ok(asdict(project), message="Project updated successfully")

    @app.route(f"{company_url}/projects/<int:project_id>", methods=["DELETE"], endpoint="deactivate_project")
    def deactivate_project(company_id: int, project_id: int):
        orgs.require_company(company_id)
        orgs.deactivate_project(company_id, project_id)
        return ok(message="Project deactivated successfully")

    # -- workplaces

    @app.route(f"{company_url}/workplaces", methods=["GET"], endpoint="list_workplaces")
    def list_workplaces(company_id: int):
        return ok([asdict(w) for w in orgs.list_workplaces(company_id)])

    @app.route(f"{company_url}/workplaces", methods=["POST"], endpoint="create_workplace")
    def create_workplace(company_id: int):
        body = json_body()
        workplace = orgs.create_workplace(
            company_id=company_id,
            name=require_field(body, "name"),
            location=body.get("location"),
        )
        return ok(asdict(workplace), status=201, message="Workplace created successfully")

    @app.route(f"{company_url}/workplaces/<int:workplace_id>", methods=["GET"], endpoint="get_workplace")
    def get_workplace(company_id: int, workplace_id: int):
        orgs.require_company(company_id)
        return ok(asdict(orgs.require_workplace(company_id, workplace_id)))

    @app.route(f"{company_url}/workplaces/<int:workplace_id>", methods=["PATCH"], endpoint="update_workplace")
    def update_workplace(company_id: int, workplace_id: int):
        orgs.require_company(company_id)
        workplace = orgs.update_workplace(company_id, workplace_id, json_body())
        return ok(asdict(workplace), message="Workplace updated successfully")

    @app.route(f"{company_url}/workplaces/<int:workplace_id>", methods=["DELETE"], endpoint="deactivate_workplace")
    def deactivate_workplace(company_id: int, workplace_id: int):
        orgs.require_company(company_id)
        orgs.deactivate_workplace(company_id, workplace_id)
        return ok(message="Workplace deactivated successfully")


def _employee_json(e) -> dict:
    data = asdict(e)
    data["hire_date"] = e.hire_date.strftime("%Y-%m-%d")
    data["full_name"] = e.full_name
    return data
