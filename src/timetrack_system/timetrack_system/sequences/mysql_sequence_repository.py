from __future__ import annotations

from typing import Optional

from mysql.connector.errors import DatabaseError

from ..core.exceptions import AllocationContentionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_contention_error
from .model import GlobalScope, SequenceScope
from .repository import SequenceRepository

# Row key used for GlobalScope; company ids start at 1.
_GLOBAL_COMPANY_ID = 0


def _storage_key(scope: SequenceScope) -> tuple[int, str]:
    company_id = _GLOBAL_COMPANY_ID if isinstance(scope, GlobalScope) else int(scope.tenant_id)
    return company_id, scope.entity_kind.value


class MySQLSequenceRepository(SequenceRepository):
    """Pessimistic row lock held for the whole read-increment-write."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def increment(self, scope: SequenceScope, prefix: str) -> int:
        company_id, kind = _storage_key(scope)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT IGNORE INTO entity_code_counters(company_id, entity_kind, prefix, current_value)
                    VALUES(%s,%s,%s,0)
                    """,
                    (company_id, kind, prefix),
                )
                cur.execute(
                    """
                    SELECT current_value
                    FROM entity_code_counters
                    WHERE company_id=%s AND entity_kind=%s
                    FOR UPDATE
                    """,
                    (company_id, kind),
                )
                row = fetchone(cur)
                next_value = int(row["current_value"]) + 1
                cur.execute(
                    """
                    UPDATE entity_code_counters
                    SET current_value=%s
                    WHERE company_id=%s AND entity_kind=%s
                    """,
                    (next_value, company_id, kind),
                )
            # db_cursor has committed at this point; a failed commit raises above.
            return next_value
        except DatabaseError as e:
            if is_contention_error(e):
                raise AllocationContentionError(f"Sequence {kind} for scope {company_id} is contended") from e
            raise

    def current_value(self, scope: SequenceScope) -> Optional[int]:
        company_id, kind = _storage_key(scope)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT current_value
                FROM entity_code_counters
                WHERE company_id=%s AND entity_kind=%s
                """,
                (company_id, kind),
            )
            row = fetchone(cur)
            return int(row["current_value"]) if row else None
