from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/companies/<int:company_id>/working-hours", methods=["GET"], endpoint="get_working_hours")
    def get_working_hours(company_id: int):
        container.organization_service.require_company(company_id)
        config = container.working_hours_service.get_config(company_id)
        return ok(config.to_dict())

    @app.route("/api/companies/<int:company_id>/working-hours", methods=["PUT"], endpoint="update_working_hours")
    def update_working_hours(company_id: int):
        container.organization_service.require_company(company_id)
        config = container.working_hours_service.update_config(company_id, json_body())
        return ok(config.to_dict(), message="Working hours updated successfully")
