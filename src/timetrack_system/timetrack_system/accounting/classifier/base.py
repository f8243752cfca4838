from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Mapping

from ...core.enums import HourBucket
from ...core.exceptions import InvalidIntervalError
from ...working_hours.model import BoundaryConfig, in_range
from ..model import HourBreakdown


def bucket_for(minute: int, config: BoundaryConfig) -> HourBucket:
    """Day is checked first, then evening; every other minute is night."""
    if in_range(minute, *config.day_range):
        return HourBucket.DAY
    if in_range(minute, *config.evening_range):
        return HourBucket.EVENING
    return HourBucket.NIGHT


class HourClassifier(ABC):
    """Strategy Pattern: how the minutes of a same-day interval are counted."""

    def classify(self, time_in: datetime, time_out: datetime, config: BoundaryConfig) -> HourBreakdown:
        if time_out < time_in:
            raise InvalidIntervalError("Time out must not be before time in")
        if time_in.date() != time_out.date():
            raise InvalidIntervalError("Hour classification needs both ends on the same calendar day")
        if time_out == time_in:
            return HourBreakdown.zero()

        counts = self.count_minutes(time_in, time_out, config)
        return HourBreakdown.from_minute_counts(time_out - time_in, counts)

    @abstractmethod
    def count_minutes(self, time_in: datetime, time_out: datetime, config: BoundaryConfig) -> Mapping[HourBucket, int]:
        raise NotImplementedError
