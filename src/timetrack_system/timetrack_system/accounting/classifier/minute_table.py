from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Mapping

from ...core.constants import MINUTES_PER_DAY
from ...core.enums import HourBucket
from ...working_hours.model import BoundaryConfig
from .base import HourClassifier, bucket_for

_ONE_MINUTE = timedelta(minutes=1)


@lru_cache(maxsize=256)
def bucket_table(config: BoundaryConfig) -> tuple[HourBucket, ...]:
    """Bucket of every minute of the clock for ``config``."""
    return tuple(bucket_for(minute, config) for minute in range(MINUTES_PER_DAY))


class MinuteTableClassifier(HourClassifier):
    """Counts the same sample minutes as the walk, read from a per-config table.

    The walk samples ``time_in + k minutes`` for every ``k`` that stays before
    ``time_out``; on a single day those are the consecutive clock minutes
    starting at ``time_in``'s minute.
    """

    def count_minutes(self, time_in: datetime, time_out: datetime, config: BoundaryConfig) -> Mapping[HourBucket, int]:
        duration = time_out - time_in
        samples = -(-duration // _ONE_MINUTE)
        first = time_in.hour * 60 + time_in.minute
        return Counter(bucket_table(config)[first : first + samples])
