from __future__ import annotations

import re
from datetime import datetime, time
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d):([0-5]\d)$")


def require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def optional_text(value: Any, field_name: str) -> Optional[str]:
    """Blank or missing text becomes ``None``; anything else must be a string."""
    if value is None:
        return None
    return require_text(value, field_name).strip() or None


def require_flag(value: Any, field_name: str) -> bool:
    # Only JSON true/false; strings such as "false" are rejected.
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    value = require_text(value, field_name)
    if not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if value is None:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    value = require_text(value, field_name)
    if len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value.strip()


def require_max_length(value: Any, field_name: str, max_len: int) -> Optional[str]:
    if value is None:
        return None
    if len(require_text(value, field_name)) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_email(value: Any, field_name: str = "email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"Invalid {field_name} address")
    return value


def parse_clock_time(value: str, field_name: str) -> time:
    """Parse a strict ``HH:MM:SS`` wall-clock marker."""
    if not isinstance(value, str) or not _CLOCK_RE.match(value.strip()):
        raise ValidationError(f"{field_name}: invalid time format (HH:mm:ss)")
    return datetime.strptime(value.strip(), "%H:%M:%S").time()
