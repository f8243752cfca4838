from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

END_OF_DAY = time(23, 59, 59, 999000)
BOUNDARY_STEP = timedelta(milliseconds=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing ``Z`` means UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def get_zone(tz_name: str) -> tzinfo:
    """Resolve a zone name; UTC does not need the system tz database."""
    if tz_name.upper() in {"UTC", "Z", "ETC/UTC"}:
        return timezone.utc
    return ZoneInfo(tz_name)


def to_local(value: datetime, tz_name: str) -> datetime:
    """Return the naive wall-clock time of ``value`` in the tenant zone.

    Naive values are assumed to already be tenant-local.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(get_zone(tz_name)).replace(tzinfo=None)


def now_local(tz_name: str) -> datetime:
    """Current tenant-local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(get_zone(tz_name)).replace(tzinfo=None)


def end_of_day(value: datetime) -> datetime:
    """Last representable instant (millisecond resolution) of ``value``'s day."""
    return datetime.combine(value.date(), END_OF_DAY, tzinfo=value.tzinfo)


def dates_between(start: datetime, end: datetime) -> list[date]:
    """Calendar dates touched by ``[start, end]`` in order."""
    current = start.date()
    last = end.date()
    out: list[date] = []
    while current <= last:
        out.append(current)
        current += timedelta(days=1)
    return out


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision (stored columns are DATETIME(3))."""
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)
