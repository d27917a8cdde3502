from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, restaurant_id, name, username, password_hash, phone, late_grace_minutes, is_active"


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        restaurant_id=int(r["restaurant_id"]),
        name=r["name"],
        username=r["username"],
        password_hash=r["password_hash"],
        phone=r.get("phone"),
        late_grace_minutes=int(r.get("late_grace_minutes") or 0),
        is_active=bool(r["is_active"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_username(self, username: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE username=%s", (username,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_by_restaurant(self, restaurant_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE restaurant_id=%s ORDER BY name",
                (int(restaurant_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        restaurant_id: int,
        name: str,
        username: str,
        password_hash: str,
        phone: Optional[str],
        late_grace_minutes: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(restaurant_id, name, username, password_hash, phone, late_grace_minutes, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (int(restaurant_id), name, username, password_hash, phone, int(late_grace_minutes)),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        username: str,
        phone: Optional[str],
        late_grace_minutes: int,
        password_hash: Optional[str] = None,
    ) -> bool:
        sets = ["name=%s", "username=%s", "phone=%s", "late_grace_minutes=%s"]
        params: list[object] = [name, username, phone, int(late_grace_minutes)]
        if password_hash:
            sets.append("password_hash=%s")
            params.append(password_hash)
        params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {', '.join(sets)} WHERE employee_id=%s", tuple(params))
            return cur.rowcount > 0
