from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import PushSubscription
from .repository import PushSubscriptionRepository


class MySQLPushSubscriptionRepository(PushSubscriptionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(self, employee_id: int) -> Sequence[PushSubscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, endpoint, p256dh, auth
                FROM push_subscriptions
                WHERE employee_id=%s
                ORDER BY subscription_id
                """,
                (int(employee_id),),
            )
            return [
                PushSubscription(
                    employee_id=int(r["employee_id"]),
                    endpoint=r["endpoint"],
                    p256dh=r["p256dh"],
                    auth=r["auth"],
                )
                for r in fetchall(cur)
            ]

    def upsert(self, *, employee_id: int, endpoint: str, p256dh: str, auth: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO push_subscriptions(employee_id, endpoint, p256dh, auth)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE employee_id=VALUES(employee_id), p256dh=VALUES(p256dh), auth=VALUES(auth)
                """,
                (int(employee_id), endpoint, p256dh, auth),
            )

    def delete_by_endpoint(self, endpoint: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM push_subscriptions WHERE endpoint=%s", (endpoint,))
            return cur.rowcount > 0
