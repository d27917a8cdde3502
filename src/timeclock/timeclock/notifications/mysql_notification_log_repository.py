from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Sequence, Set

import mysql.connector

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, is_duplicate_key, to_db_datetime
from .repository import NotificationLogRepository

logger = logging.getLogger(__name__)


class MySQLNotificationLogRepository(NotificationLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, *, employee_id: int, entry_time: str, schedule_date: date, entry_slot: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM notification_logs
                WHERE employee_id=%s AND entry_time=%s AND schedule_date=%s AND entry_slot=%s
                LIMIT 1
                """,
                (int(employee_id), entry_time, schedule_date, int(entry_slot)),
            )
            return fetchone(cur) is not None

    def list_notified_employee_ids(
        self,
        employee_ids: Sequence[int],
        *,
        entry_time: str,
        schedule_date: date,
        entry_slot: int,
    ) -> Set[int]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return set()

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DISTINCT employee_id
                FROM notification_logs
                WHERE entry_time=%s AND schedule_date=%s AND entry_slot=%s
                  AND employee_id IN ({in_clause(ids)})
                """,
                (entry_time, schedule_date, int(entry_slot), *ids),
            )
            return {int(r["employee_id"]) for r in fetchall(cur)}

    def record(
        self,
        *,
        employee_id: int,
        entry_time: str,
        schedule_date: date,
        entry_slot: int,
        notified_at: datetime,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO notification_logs(employee_id, entry_time, schedule_date, entry_slot, notified_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), entry_time, schedule_date, int(entry_slot), to_db_datetime(notified_at)),
                )
            return True
        except mysql.connector.IntegrityError as exc:
            if not is_duplicate_key(exc):
                raise
            logger.info(
                "Reminder %s/%s slot %s for employee %s already logged",
                schedule_date, entry_time, entry_slot, employee_id,
            )
            return False
