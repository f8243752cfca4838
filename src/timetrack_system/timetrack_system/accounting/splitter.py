"""Decompose an interval into per-calendar-day classified segments."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import BOUNDARY_STEP, end_of_day, truncate_to_millis
from ..core.exceptions import InvalidIntervalError
from ..working_hours.model import BoundaryConfig
from .classifier.base import HourClassifier
from .classifier.minute_table import MinuteTableClassifier
from .model import ClassifiedSegment, HourBreakdown, RawInterval

DEFAULT_CLASSIFIER: HourClassifier = MinuteTableClassifier()


def classify(
    time_in: datetime,
    time_out: datetime,
    config: BoundaryConfig,
    classifier: Optional[HourClassifier] = None,
) -> HourBreakdown:
    return (classifier or DEFAULT_CLASSIFIER).classify(time_in, time_out, config)


def needs_splitting(time_in: datetime, time_out: datetime) -> bool:
    return time_in.date() != time_out.date()


def split(
    interval: RawInterval,
    config: BoundaryConfig,
    classifier: Optional[HourClassifier] = None,
) -> list[ClassifiedSegment]:
    """Split ``interval`` at every midnight and classify each piece.

    Segments end at 23:59:59.999 and the next one starts at the following
    midnight, so together they cover the interval without gap or overlap.
    Each segment is dated by its own start.
    """
    classifier = classifier or DEFAULT_CLASSIFIER
    cursor = truncate_to_millis(interval.time_in)
    final = truncate_to_millis(interval.time_out)
    if final <= cursor:
        raise InvalidIntervalError("Time out must be after time in")

    segments: list[ClassifiedSegment] = []
    while cursor < final:
        boundary = end_of_day(cursor)
        segment_end = final if final <= boundary else boundary

        hours = classifier.classify(cursor, segment_end, config)
        segments.append(
            ClassifiedSegment(
                calendar_date=cursor.date(),
                time_in=cursor,
                time_out=segment_end,
                total_hours=hours.total_hours,
                day_hours=hours.day_hours,
                evening_hours=hours.evening_hours,
                night_hours=hours.night_hours,
            )
        )

        if segment_end == boundary and final > boundary:
            cursor = boundary + BOUNDARY_STEP
        else:
            break

    return segments
