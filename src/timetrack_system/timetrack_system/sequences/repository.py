from __future__ import annotations

from typing import Optional, Protocol

from .model import SequenceScope


class SequenceRepository(Protocol):
    def increment(self, scope: SequenceScope, prefix: str) -> int:
        """Atomically create-if-missing, add one and commit; return the new value.

        Must raise ``AllocationContentionError`` when the unit could not be
        committed, and never return a value that was not committed.
        """

        raise NotImplementedError

    def current_value(self, scope: SequenceScope) -> Optional[int]:
        raise NotImplementedError
