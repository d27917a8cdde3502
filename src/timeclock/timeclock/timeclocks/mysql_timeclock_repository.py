from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_db_datetime,
    in_clause,
    to_db_datetime,
)
from .model import ClockEntry
from .repository import TimeclockRepository

_COLUMNS = "timeclock_id, employee_id, entry_time, exit_time, is_late, latitude, longitude, created_at"


def _to_entry(r: dict) -> ClockEntry:
    return ClockEntry(
        entry_id=int(r["timeclock_id"]),
        employee_id=int(r["employee_id"]),
        entry_time=from_db_datetime(r.get("entry_time")),
        exit_time=from_db_datetime(r.get("exit_time")),
        is_late=bool(r["is_late"]),
        latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
        longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
        created_at=from_db_datetime(r["created_at"]),
    )


class MySQLTimeclockRepository(TimeclockRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[ClockEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timeclocks WHERE timeclock_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_employee(self, employee_id: int, *, limit: int = 100) -> Sequence[ClockEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timeclocks
                WHERE employee_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_employees(self, employee_ids: Sequence[int], *, limit: int = 500) -> Sequence[ClockEntry]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timeclocks
                WHERE employee_id IN ({in_clause(ids)})
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (*ids, int(limit)),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_employee_between(self, employee_id: int, start: datetime, end: datetime) -> Sequence[ClockEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timeclocks
                WHERE employee_id=%s AND created_at >= %s AND created_at < %s
                ORDER BY created_at ASC
                """,
                (int(employee_id), to_db_datetime(start), to_db_datetime(end)),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def get_open_for_employee(self, employee_id: int) -> Optional[ClockEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timeclocks
                WHERE employee_id=%s AND entry_time IS NOT NULL AND exit_time IS NULL
                ORDER BY entry_time DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_open(self) -> Sequence[ClockEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timeclocks
                WHERE exit_time IS NULL AND entry_time IS NOT NULL
                ORDER BY employee_id, entry_time
                """
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def create_entry(
        self,
        *,
        employee_id: int,
        entry_time: datetime,
        is_late: bool,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> int:
        at = to_db_datetime(entry_time)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timeclocks(employee_id, entry_time, is_late, latitude, longitude, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), at, int(is_late), latitude, longitude, at),
            )
            return int(cur.lastrowid)

    def close_entry(self, *, entry_id: int, exit_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE timeclocks SET exit_time=%s WHERE timeclock_id=%s AND exit_time IS NULL",
                (to_db_datetime(exit_time), int(entry_id)),
            )
            return cur.rowcount > 0

    def correct_entry(self, *, entry_id: int, entry_time: datetime, exit_time: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE timeclocks SET entry_time=%s, exit_time=%s WHERE timeclock_id=%s",
                (to_db_datetime(entry_time), to_db_datetime(exit_time), int(entry_id)),
            )
            return cur.rowcount > 0
