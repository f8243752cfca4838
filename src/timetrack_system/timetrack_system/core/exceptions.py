class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidIntervalError(ValidationError):
    """Raised when an interval is empty, reversed, in the future or crosses a day it must not."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist for the tenant."""


class ConflictError(DomainError):
    """Raised when a time entry overlaps an already recorded one."""


class EntryLockedError(DomainError):
    """Raised when an approved time entry is edited or deleted."""


class ContentionError(DomainError):
    """Raised when a serialized unit of work could not be completed under contention."""


class AllocationContentionError(ContentionError):
    """Raised when a sequence increment could not be committed."""


class EntryLockTimeoutError(ContentionError):
    """Raised when the per employee/day lock could not be acquired in time."""
