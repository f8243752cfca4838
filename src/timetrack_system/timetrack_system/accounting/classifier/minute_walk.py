from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Mapping

from ...core.enums import HourBucket
from ...working_hours.model import BoundaryConfig
from .base import HourClassifier, bucket_for

_ONE_MINUTE = timedelta(minutes=1)


class MinuteWalkClassifier(HourClassifier):
    """Reference rule: step through the interval one minute at a time."""

    def count_minutes(self, time_in: datetime, time_out: datetime, config: BoundaryConfig) -> Mapping[HourBucket, int]:
        counts: Counter[HourBucket] = Counter()
        current = time_in
        while current < time_out:
            counts[bucket_for(current.hour * 60 + current.minute, config)] += 1
            current += _ONE_MINUTE
        return counts
