from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.timetrack_system.timetrack_system.accounting.model import RawInterval
from src.timetrack_system.timetrack_system.accounting.splitter import needs_splitting, split
from src.timetrack_system.timetrack_system.common.datetime_utils import END_OF_DAY, truncate_to_millis
from src.timetrack_system.timetrack_system.core.exceptions import InvalidIntervalError
from src.timetrack_system.timetrack_system.working_hours.model import BoundaryConfig

DEFAULT = BoundaryConfig.default()
ONE_MS = timedelta(milliseconds=1)


def interval(time_in: datetime, time_out: datetime) -> RawInterval:
    return RawInterval(subject_id=7, scope_id=1, time_in=time_in, time_out=time_out)


def test_night_shift_is_split_at_midnight():
    segments = split(interval(datetime(2025, 5, 1, 22), datetime(2025, 5, 2, 7)), DEFAULT)

    assert len(segments) == 2
    first, second = segments

    assert first.calendar_date == date(2025, 5, 1)
    assert first.time_in == datetime(2025, 5, 1, 22)
    assert first.time_out == datetime.combine(date(2025, 5, 1), END_OF_DAY)
    assert first.night_hours == 2.0
    assert first.total_hours == 2.0

    assert second.calendar_date == date(2025, 5, 2)
    assert second.time_in == datetime(2025, 5, 2, 0)
    assert second.time_out == datetime(2025, 5, 2, 7)
    assert second.night_hours == 6.0
    assert second.day_hours == 1.0

    assert first.total_hours + second.total_hours == pytest.approx(9.0, abs=0.01)


def test_same_day_interval_is_one_segment():
    segments = split(interval(datetime(2025, 5, 1, 9), datetime(2025, 5, 1, 17, 30)), DEFAULT)

    assert len(segments) == 1
    assert segments[0].breakdown.day_hours == 8.5


def test_ending_exactly_at_midnight_gives_no_empty_segment():
    segments = split(interval(datetime(2025, 5, 1, 20), datetime(2025, 5, 2, 0)), DEFAULT)

    assert len(segments) == 1
    assert segments[0].calendar_date == date(2025, 5, 1)
    assert segments[0].evening_hours == 2.0
    assert segments[0].night_hours == 2.0


def test_multi_day_interval_has_a_full_middle_day():
    segments = split(interval(datetime(2025, 5, 1, 18), datetime(2025, 5, 3, 6)), DEFAULT)

    assert [s.calendar_date for s in segments] == [date(2025, 5, 1), date(2025, 5, 2), date(2025, 5, 3)]
    middle = segments[1]
    assert middle.total_hours == 24.0
    assert (middle.day_hours, middle.evening_hours, middle.night_hours) == (12.0, 4.0, 8.0)


@pytest.mark.parametrize(
    "time_in,time_out",
    [
        (datetime(2025, 5, 1, 10), datetime(2025, 5, 1, 10)),
        (datetime(2025, 5, 1, 10), datetime(2025, 5, 1, 9)),
    ],
)
def test_empty_or_reversed_interval_is_rejected(time_in, time_out):
    with pytest.raises(InvalidIntervalError):
        split(interval(time_in, time_out), DEFAULT)


def test_needs_splitting():
    assert needs_splitting(datetime(2025, 5, 1, 22), datetime(2025, 5, 2, 1))
    assert not needs_splitting(datetime(2025, 5, 1, 8), datetime(2025, 5, 1, 23, 59))


@settings(max_examples=200, deadline=None)
@given(
    start=st.datetimes(min_value=datetime(2025, 1, 1), max_value=datetime(2025, 1, 10)),
    length_ms=st.integers(min_value=1, max_value=4 * 24 * 3600 * 1000),
)
def test_segments_partition_the_interval(start, length_ms):
    time_in = truncate_to_millis(start)
    time_out = time_in + timedelta(milliseconds=length_ms)

    segments = split(interval(time_in, time_out), DEFAULT)

    assert segments[0].time_in == time_in
    last_end = segments[-1].time_out
    assert last_end == time_out or (last_end + ONE_MS == time_out and time_out.time() == time(0))

    for prev, nxt in zip(segments, segments[1:]):
        assert prev.time_out.time() == END_OF_DAY
        assert nxt.time_in == prev.time_out + ONE_MS
        assert nxt.time_in.time() == time(0)

    for seg in segments:
        assert seg.time_in <= seg.time_out
        assert seg.time_in.date() == seg.time_out.date() == seg.calendar_date

    parent_hours = (time_out - time_in) / timedelta(hours=1)
    assert abs(sum(s.total_hours for s in segments) - parent_hours) <= 0.005 * (len(segments) + 1)
