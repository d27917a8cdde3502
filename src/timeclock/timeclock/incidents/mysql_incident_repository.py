from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import IncidentStatus, IncidentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, in_clause
from .model import Incident
from .repository import IncidentRepository

_COLUMNS = "incident_id, employee_id, timeclock_id, type, reason, status, created_at"


def _to_incident(r: dict) -> Incident:
    return Incident(
        incident_id=int(r["incident_id"]),
        employee_id=int(r["employee_id"]),
        timeclock_id=int(r["timeclock_id"]) if r.get("timeclock_id") is not None else None,
        type=IncidentType(r["type"]),
        reason=r["reason"],
        status=IncidentStatus(r["status"]),
        created_at=from_db_datetime(r["created_at"]),
    )


class MySQLIncidentRepository(IncidentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        type: IncidentType,
        reason: str,
        timeclock_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO incidents(employee_id, timeclock_id, type, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,UTC_TIMESTAMP())
                """,
                (int(employee_id), timeclock_id, type.value, reason, IncidentStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, incident_id: int) -> Optional[Incident]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM incidents WHERE incident_id=%s", (int(incident_id),))
            r = fetchone(cur)
            return _to_incident(r) if r else None

    def list_for_employees(self, employee_ids: Sequence[int]) -> Sequence[Incident]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM incidents
                WHERE employee_id IN ({in_clause(ids)})
                ORDER BY created_at DESC
                """,
                tuple(ids),
            )
            return [_to_incident(r) for r in fetchall(cur)]

    def update_status(self, *, incident_id: int, status: IncidentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE incidents SET status=%s WHERE incident_id=%s", (status.value, int(incident_id)))
            return cur.rowcount > 0
