from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from ..core.enums import HourBucket

_TWO_PLACES = Decimal("0.01")
_MICROSECONDS_PER_HOUR = Decimal(3600 * 10**6)


def round_hours(value: Decimal) -> float:
    """Round to two decimals, halves away from zero."""
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def duration_hours(delta: timedelta) -> float:
    micros = (delta.days * 86400 + delta.seconds) * 10**6 + delta.microseconds
    return round_hours(Decimal(micros) / _MICROSECONDS_PER_HOUR)


@dataclass(frozen=True)
class HourBreakdown:
    total_hours: float
    day_hours: float
    evening_hours: float
    night_hours: float

    @classmethod
    def zero(cls) -> "HourBreakdown":
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_minute_counts(cls, duration: timedelta, counts: Mapping[HourBucket, int]) -> "HourBreakdown":
        return cls(
            total_hours=duration_hours(duration),
            day_hours=round_hours(Decimal(counts.get(HourBucket.DAY, 0)) / 60),
            evening_hours=round_hours(Decimal(counts.get(HourBucket.EVENING, 0)) / 60),
            night_hours=round_hours(Decimal(counts.get(HourBucket.NIGHT, 0)) / 60),
        )


@dataclass(frozen=True)
class RawInterval:
    """A validated clock-in/clock-out pair for one employee in one company."""

    subject_id: int
    scope_id: int
    time_in: datetime
    time_out: datetime


@dataclass(frozen=True)
class ClassifiedSegment:
    """One calendar-day piece of a recorded interval, stored verbatim as a row."""

    calendar_date: date
    time_in: datetime
    time_out: datetime
    total_hours: float
    day_hours: float
    evening_hours: float
    night_hours: float

    @property
    def breakdown(self) -> HourBreakdown:
        return HourBreakdown(self.total_hours, self.day_hours, self.evening_hours, self.night_hours)
