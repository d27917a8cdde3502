from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ScheduleSlot
from .repository import ScheduleRepository


def _to_slot(r: dict) -> ScheduleSlot:
    return ScheduleSlot(
        employee_id=int(r["employee_id"]),
        day_of_week=Weekday(int(r["day_of_week"])),
        entry_slot=int(r["entry_slot"]),
        entry_time=str(r["entry_time"]),
        is_work_day=bool(r["is_work_day"]),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(self, employee_id: int) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, day_of_week, entry_slot, entry_time, is_work_day
                FROM schedules
                WHERE employee_id=%s
                ORDER BY day_of_week, entry_slot
                """,
                (int(employee_id),),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def list_active_for_day(self, day_of_week: Weekday) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sc.employee_id, sc.day_of_week, sc.entry_slot, sc.entry_time, sc.is_work_day
                FROM schedules sc
                JOIN employees e ON e.employee_id = sc.employee_id
                WHERE sc.day_of_week=%s AND sc.is_work_day=1 AND e.is_active=1
                ORDER BY sc.employee_id, sc.entry_slot
                """,
                (int(day_of_week),),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def get_slot(self, *, employee_id: int, day_of_week: Weekday, entry_slot: int) -> Optional[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, day_of_week, entry_slot, entry_time, is_work_day
                FROM schedules
                WHERE employee_id=%s AND day_of_week=%s AND entry_slot=%s
                """,
                (int(employee_id), int(day_of_week), int(entry_slot)),
            )
            r = fetchone(cur)
            return _to_slot(r) if r else None

    def replace_for_employee(self, employee_id: int, slots: Sequence[ScheduleSlot]) -> None:
        # One transaction: readers never see a half-written week.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE employee_id=%s", (int(employee_id),))
            if slots:
                cur.executemany(
                    """
                    INSERT INTO schedules(employee_id, day_of_week, entry_slot, entry_time, is_work_day)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    [
                        (int(employee_id), int(s.day_of_week), int(s.entry_slot), s.entry_time, int(s.is_work_day))
                        for s in slots
                    ],
                )
