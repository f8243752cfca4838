"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

MINUTES_PER_DAY = 1440
CODE_PAD_WIDTH = 3
MAX_NOTES_LENGTH = 500
DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 200

DEFAULT_DAY_START = time(6, 0, 0)
DEFAULT_DAY_END = time(18, 0, 0)
DEFAULT_EVENING_START = time(18, 0, 0)
DEFAULT_EVENING_END = time(22, 0, 0)
DEFAULT_NIGHT_START = time(22, 0, 0)
DEFAULT_NIGHT_END = time(6, 0, 0)

DEFAULT_SEQUENCE_MAX_RETRIES = 3
DEFAULT_LOCK_TIMEOUT_SECONDS = 10
DEFAULT_TIMEZONE = "UTC"
