from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.http import as_date, as_datetime, as_int, as_int_list, iso, json_body, ok, require_field
from ..common.validators import require_flag, require_text
from ..container import Container
from ..core.constants import DEFAULT_PAGE_LIMIT
from .model import AuditLogEntry, CalendarDay, HoursTotal, TimeEntry


def _entry_json(e: TimeEntry) -> dict:
    return {
        "id": e.entry_id,
        "company_id": e.company_id,
        "employee_id": e.employee_id,
        "project_id": e.project_id,
        "workplace_id": e.workplace_id,
        "entry_date": e.entry_date.strftime("%Y-%m-%d"),
        "time_in": iso(e.time_in),
        "time_out": iso(e.time_out),
        "total_hours": e.total_hours,
        "day_hours": e.day_hours,
        "evening_hours": e.evening_hours,
        "night_hours": e.night_hours,
        "notes": e.notes,
        "is_full_day": e.is_full_day,
        "is_approved": e.is_approved,
    }


def _calendar_json(d: CalendarDay) -> dict:
    return {
        "date": d.day.strftime("%Y-%m-%d"),
        "total_hours": d.total_hours,
        "entry_count": d.entry_count,
        "entries": [_entry_json(e) for e in d.entries],
    }


def _audit_json(a: AuditLogEntry) -> dict:
    return {
        "id": a.audit_id,
        "entry_id": a.entry_id,
        "action": a.action.value,
        "changed_by": a.changed_by,
        "old_values": a.old_values,
        "new_values": a.new_values,
        "created_at": iso(a.created_at),
    }


def _hours_json(h: HoursTotal) -> dict:
    return {
        f"{h.grouping.value}_id": h.group_id,
        "entry_count": h.entry_count,
        "total_hours": h.total_hours,
        "day_hours": h.day_hours,
        "evening_hours": h.evening_hours,
        "night_hours": h.night_hours,
    }


def _optional_arg(name: str) -> Optional[int]:
    value = request.args.get(name)
    return as_int(value, name) if value else None


def register(app: Flask, container: Container) -> None:
    entries = container.time_entry_service
    orgs = container.organization_service

    base = "/api/companies/<int:company_id>/employees/<int:employee_id>"

    @app.route(f"{base}/time-entries", methods=["GET"], endpoint="list_time_entries")
    def list_time_entries(company_id: int, employee_id: int):
        orgs.require_company(company_id)
        orgs.require_employee(company_id, employee_id)
        start = request.args.get("start_date")
        end = request.args.get("end_date")
        rows = entries.list_entries(
            company_id=company_id,
            employee_id=employee_id,
            start=as_date(start, "start_date") if start else None,
            end=as_date(end, "end_date") if end else None,
            project_id=_optional_arg("project_id"),
            workplace_id=_optional_arg("workplace_id"),
        )
        return ok([_entry_json(e) for e in rows])

    @app.route(f"{base}/time-entries", methods=["POST"], endpoint="create_time_entry")
    def create_time_entry(company_id: int, employee_id: int):
        orgs.require_company(company_id)
        orgs.require_employee(company_id, employee_id, active=True)
        body = json_body()
        project_id = as_int(require_field(body, "project_id"), "project_id")
        workplace_id = as_int(require_field(body, "workplace_id"), "workplace_id")
        orgs.require_project(company_id, project_id, active=True)
        orgs.require_workplace(company_id, workplace_id, active=True)

        created = entries.record(
            company_id=company_id,
            employee_id=employee_id,
            project_id=project_id,
            workplace_id=workplace_id,
            time_in=as_datetime(require_field(body, "time_in"), "time_in"),
            time_out=as_datetime(require_field(body, "time_out"), "time_out"),
            notes=body.get("notes"),
            is_full_day=require_flag(body.get("is_full_day", False), "is_full_day"),
        )
        message = (
            f"Time entry split into {len(created)} entries across days"
            if len(created) > 1
            else "Time entry created successfully"
        )
        return ok([_entry_json(e) for e in created], status=201, message=message)

    @app.route(f"{base}/time-entries/<int:entry_id>", methods=["PATCH"], endpoint="update_time_entry")
    def update_time_entry(company_id: int, employee_id: int, entry_id: int):
        orgs.require_company(company_id)
        orgs.require_employee(company_id, employee_id)
        changes = dict(json_body())
        for key in ("time_in", "time_out"):
            if key in changes:
                changes[key] = as_datetime(changes[key], key)
        if "project_id" in changes:
            changes["project_id"] = as_int(changes["project_id"], "project_id")
            orgs.require_project(company_id, changes["project_id"], active=True)
        if "workplace_id" in changes:
            changes["workplace_id"] = as_int(changes["workplace_id"], "workplace_id")
            orgs.require_workplace(company_id, changes["workplace_id"], active=True)
        updated = entries.update(entry_id=entry_id, company_id=company_id, employee_id=employee_id, changes=changes)
        return ok(_entry_json(updated), message="Time entry updated successfully")

    @app.route(f"{base}/time-entries/<int:entry_id>", methods=["DELETE"], endpoint="delete_time_entry")
    def delete_time_entry(company_id: int, employee_id: int, entry_id: int):
        entries.delete(entry_id=entry_id, company_id=company_id, employee_id=employee_id)
        return ok(message="Time entry deleted successfully")

    @app.route(f"{base}/calendar/<int:year>/<int:month>", methods=["GET"], endpoint="employee_calendar")
    def employee_calendar(company_id: int, employee_id: int, year: int, month: int):
        orgs.require_company(company_id)
        orgs.require_employee(company_id, employee_id)
        days = entries.calendar_month(company_id=company_id, employee_id=employee_id, year=year, month=month)
        return ok({"days": [_calendar_json(d) for d in days]})

    @app.route("/api/companies/<int:company_id>/time-entries", methods=["GET"], endpoint="list_company_time_entries")
    def list_company_time_entries(company_id: int):
        orgs.require_company(company_id)
        result = entries.list_company_entries(
            company_id=company_id,
            page=as_int(request.args.get("page", 1), "page"),
            limit=as_int(request.args.get("limit", DEFAULT_PAGE_LIMIT), "limit"),
        )
        return ok(
            [_entry_json(e) for e in result.items],
            pagination={"page": result.page, "limit": result.limit, "total": result.total, "pages": result.pages},
        )

    @app.route(
        "/api/companies/<int:company_id>/time-entries/<int:entry_id>/approval",
        methods=["PATCH"],
        endpoint="approve_time_entry",
    )
    def approve_time_entry(company_id: int, entry_id: int):
        body = json_body()
        approve = require_flag(body.get("approve"), "approve")
        approved_by = body.get("approved_by")
        entries.set_approval(
            entry_id=entry_id,
            company_id=company_id,
            approve=approve,
            approved_by=as_int(approved_by, "approved_by") if approved_by is not None else None,
        )
        return ok(message=f"Time entry {'approved' if approve else 'rejected'} successfully")

    @app.route(
        "/api/companies/<int:company_id>/time-entries/<int:entry_id>/audit-log",
        methods=["GET"],
        endpoint="time_entry_audit_log",
    )
    def time_entry_audit_log(company_id: int, entry_id: int):
        logs = entries.audit_log(entry_id=entry_id, company_id=company_id)
        return ok([_audit_json(a) for a in logs])

    @app.route("/api/companies/<int:company_id>/reports/generate", methods=["POST"], endpoint="generate_report")
    def generate_report(company_id: int):
        orgs.require_company(company_id)
        body = json_body()
        report_type = require_text(require_field(body, "report_type"), "report_type")
        totals = entries.hours_report(
            company_id=company_id,
            grouping=report_type,
            start=as_date(require_field(body, "start_date"), "start_date"),
            end=as_date(require_field(body, "end_date"), "end_date"),
            employee_ids=as_int_list(body.get("employee_ids"), "employee_ids"),
            project_ids=as_int_list(body.get("project_ids"), "project_ids"),
            workplace_ids=as_int_list(body.get("workplace_ids"), "workplace_ids"),
        )
        return ok([_hours_json(h) for h in totals], report_type=report_type)
