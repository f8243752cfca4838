from __future__ import annotations

import threading
from typing import Optional

from .model import SequenceScope
from .repository import SequenceRepository


class InMemorySequenceRepository(SequenceRepository):
    """Process-local counters guarded by one lock per scope.

    Used for single-process deployments and tests; different scopes never
    wait on each other.
    """

    def __init__(self):
        self._values: dict[SequenceScope, int] = {}
        self._prefixes: dict[SequenceScope, str] = {}
        self._locks: dict[SequenceScope, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, scope: SequenceScope) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(scope)
            if lock is None:
                lock = self._locks[scope] = threading.Lock()
            return lock

    def increment(self, scope: SequenceScope, prefix: str) -> int:
        with self._lock_for(scope):
            self._prefixes.setdefault(scope, prefix)
            value = self._values.get(scope, 0) + 1
            self._values[scope] = value
            return value

    def current_value(self, scope: SequenceScope) -> Optional[int]:
        with self._lock_for(scope):
            return self._values.get(scope)
