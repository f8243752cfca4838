"""JSON envelope and error mapping shared by the feature controllers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    ConflictError,
    ContentionError,
    DomainError,
    EntryLockedError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date, parse_iso_datetime

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int, str], ...] = (
    (ValidationError, 400, "BAD_REQUEST"),
    (NotFoundError, 404, "NOT_FOUND"),
    (EntryLockedError, 403, "FORBIDDEN"),
    (ConflictError, 409, "CONFLICT"),
    (ContentionError, 503, "CONTENTION"),
)


def ok(data: Any = None, *, status: int = 200, message: Optional[str] = None, **extra: Any):
    payload: dict[str, Any] = {"success": True, "data": data}
    if message:
        payload["message"] = message
    payload.update(extra)
    return jsonify(payload), status


def fail(status: int, code: str, message: str):
    return jsonify({"success": False, "error": {"code": code, "message": message}}), status


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def require_field(body: dict[str, Any], name: str) -> Any:
    value = body.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required")
    return value


def as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def as_int_list(value: Any, name: str) -> list[int]:
    """Optional JSON array of ids; missing or ``null`` means an empty list."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{name} must be a list of integers")
    return [as_int(v, name) for v in value]


def as_datetime(value: Any, name: str) -> datetime:
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{name}: invalid datetime format")


def as_date(value: Any, name: str) -> date:
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{name}: invalid date format (YYYY-MM-DD)")


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="milliseconds") if value else None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        for error_type, status, code in _STATUS_BY_ERROR:
            if isinstance(err, error_type):
                return fail(status, code, str(err))
        return fail(400, "BAD_REQUEST", str(err))

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        code = (err.name or "ERROR").upper().replace(" ", "_")
        return fail(err.code or 500, code, err.description or err.name)

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unexpected error")
        message = str(err) if app.config.get("DEBUG") else "Internal server error"
        return fail(500, "INTERNAL_ERROR", message)
