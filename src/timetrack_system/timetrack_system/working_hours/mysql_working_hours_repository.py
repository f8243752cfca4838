from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import BoundaryConfig
from .repository import WorkingHoursRepository


class MySQLWorkingHoursRepository(WorkingHoursRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_company(self, company_id: int) -> Optional[BoundaryConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT day_start_time, day_end_time, evening_start_time, evening_end_time,
                       night_start_time, night_end_time
                FROM working_hour_types
                WHERE company_id=%s
                """,
                (int(company_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return BoundaryConfig(
                day_start=normalize_mysql_time(r["day_start_time"]),
                day_end=normalize_mysql_time(r["day_end_time"]),
                evening_start=normalize_mysql_time(r["evening_start_time"]),
                evening_end=normalize_mysql_time(r["evening_end_time"]),
                night_start=normalize_mysql_time(r["night_start_time"]),
                night_end=normalize_mysql_time(r["night_end_time"]),
            )

    def upsert(self, company_id: int, config: BoundaryConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO working_hour_types(
                    company_id, day_start_time, day_end_time, evening_start_time,
                    evening_end_time, night_start_time, night_end_time
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    day_start_time=VALUES(day_start_time),
                    day_end_time=VALUES(day_end_time),
                    evening_start_time=VALUES(evening_start_time),
                    evening_end_time=VALUES(evening_end_time),
                    night_start_time=VALUES(night_start_time),
                    night_end_time=VALUES(night_end_time)
                """,
                (
                    int(company_id),
                    config.day_start,
                    config.day_end,
                    config.evening_start,
                    config.evening_end,
                    config.night_start,
                    config.night_end,
                ),
            )
