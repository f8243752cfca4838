"""Serialize check-then-insert of time entries per employee and calendar day."""

from __future__ import annotations

import hashlib
import threading
from contextlib import contextmanager
from datetime import date
from typing import ContextManager, Iterable, Iterator, Protocol

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import EntryLockTimeoutError
from ..database.connection import DatabaseConnection


def lock_name(company_id: int, employee_id: int, day: date) -> str:
    # MySQL caps user lock names at 64 characters.
    raw = f"{int(company_id)}:{int(employee_id)}:{day.isoformat()}"
    return "te:" + hashlib.sha1(raw.encode("utf-8")).hexdigest()


class EntryLock(Protocol):
    def hold(self, company_id: int, employee_id: int, dates: Iterable[date]) -> ContextManager[None]:
        raise NotImplementedError


class _Slot:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class InMemoryEntryLock(EntryLock):
    """Process-local locks, kept only while some thread holds or waits for them."""

    def __init__(self, *, timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._timeout = float(timeout_seconds)
        self._slots: dict[str, _Slot] = {}
        self._registry_lock = threading.Lock()

    def active_count(self) -> int:
        """Number of lock names currently held or waited on."""
        with self._registry_lock:
            return len(self._slots)

    def _checkout(self, name: str) -> _Slot:
        with self._registry_lock:
            slot = self._slots.get(name)
            if slot is None:
                slot = self._slots[name] = _Slot()
            slot.users += 1
            return slot

    def _checkin(self, name: str, slot: _Slot) -> None:
        with self._registry_lock:
            slot.users -= 1
            if slot.users == 0:
                del self._slots[name]

    @contextmanager
    def hold(self, company_id: int, employee_id: int, dates: Iterable[date]) -> Iterator[None]:
        names = sorted({lock_name(company_id, employee_id, d) for d in dates})
        acquired: list[tuple[str, _Slot]] = []
        try:
            for name in names:
                slot = self._checkout(name)
                if not slot.lock.acquire(timeout=self._timeout):
                    self._checkin(name, slot)
                    raise EntryLockTimeoutError(f"Timed out waiting for entries of employee {employee_id}")
                acquired.append((name, slot))
            yield
        finally:
            for name, slot in reversed(acquired):
                slot.lock.release()
                self._checkin(name, slot)


class MySQLEntryLock(EntryLock):
    """Named user locks (GET_LOCK) held on a dedicated connection."""

    def __init__(self, conn_factory: DatabaseConnection, *, timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._conn_factory = conn_factory
        self._timeout = int(timeout_seconds)

    @contextmanager
    def hold(self, company_id: int, employee_id: int, dates: Iterable[date]) -> Iterator[None]:
        names = sorted({lock_name(company_id, employee_id, d) for d in dates})
        conn = self._conn_factory.connect()
        cur = conn.cursor()
        acquired: list[str] = []
        try:
            for name in names:
                cur.execute("SELECT GET_LOCK(%s, %s)", (name, self._timeout))
                (ok,) = cur.fetchone()
                if ok != 1:
                    raise EntryLockTimeoutError(f"Timed out waiting for entries of employee {employee_id}")
                acquired.append(name)
            yield
        finally:
            for name in reversed(acquired):
                cur.execute("SELECT RELEASE_LOCK(%s)", (name,))
                cur.fetchone()
            cur.close()
            conn.close()
