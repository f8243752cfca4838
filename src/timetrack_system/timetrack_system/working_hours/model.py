from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core import constants

FIELD_NAMES = (
    "day_start",
    "day_end",
    "evening_start",
    "evening_end",
    "night_start",
    "night_end",
)


def minute_of(value: time) -> int:
    """Minute offset from midnight in ``[0, 1440)``; seconds are ignored."""
    return value.hour * 60 + value.minute


def in_range(minute: int, start: int, end: int) -> bool:
    """Membership in ``[start, end)``, wrapping past midnight when ``start > end``."""
    if start <= end:
        return start <= minute < end
    return minute >= start or minute < end


@dataclass(frozen=True)
class BoundaryConfig:
    """Per-tenant day/evening/night clock windows.

    Only the day and evening windows take part in classification; night is
    whatever neither of them claims. The night markers are kept as metadata.
    """

    day_start: time
    day_end: time
    evening_start: time
    evening_end: time
    night_start: time
    night_end: time

    @classmethod
    def default(cls) -> "BoundaryConfig":
        return cls(
            day_start=constants.DEFAULT_DAY_START,
            day_end=constants.DEFAULT_DAY_END,
            evening_start=constants.DEFAULT_EVENING_START,
            evening_end=constants.DEFAULT_EVENING_END,
            night_start=constants.DEFAULT_NIGHT_START,
            night_end=constants.DEFAULT_NIGHT_END,
        )

    @property
    def day_range(self) -> tuple[int, int]:
        return minute_of(self.day_start), minute_of(self.day_end)

    @property
    def evening_range(self) -> tuple[int, int]:
        return minute_of(self.evening_start), minute_of(self.evening_end)

    @property
    def night_range(self) -> tuple[int, int]:
        return minute_of(self.night_start), minute_of(self.night_end)

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name).strftime("%H:%M:%S") for name in FIELD_NAMES}
