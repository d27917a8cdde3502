from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Restaurant
from .repository import RestaurantRepository

_COLUMNS = "restaurant_id, name, address, latitude, longitude, radius_meters, admin_username"


def _to_restaurant(r: dict) -> Restaurant:
    return Restaurant(
        restaurant_id=int(r["restaurant_id"]),
        name=r["name"],
        address=r.get("address"),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_meters=int(r["radius_meters"]),
        admin_username=r["admin_username"],
    )


class MySQLRestaurantRepository(RestaurantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, restaurant_id: int) -> Optional[Restaurant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM restaurants WHERE restaurant_id=%s", (int(restaurant_id),))
            r = fetchone(cur)
            return _to_restaurant(r) if r else None

    def get_by_admin(self, admin_username: str) -> Optional[Restaurant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM restaurants WHERE admin_username=%s", (admin_username,))
            r = fetchone(cur)
            return _to_restaurant(r) if r else None

    def upsert_for_admin(
        self,
        *,
        admin_username: str,
        name: str,
        address: Optional[str],
        latitude: float,
        longitude: float,
        radius_meters: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO restaurants(name, address, latitude, longitude, radius_meters, admin_username)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), address=VALUES(address), latitude=VALUES(latitude),
                    longitude=VALUES(longitude), radius_meters=VALUES(radius_meters)
                """,
                (name, address, latitude, longitude, int(radius_meters), admin_username),
            )

            # On update lastrowid can be 0; fetch restaurant_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute("SELECT restaurant_id FROM restaurants WHERE admin_username=%s", (admin_username,))
            r = fetchone(cur)
            return int(r["restaurant_id"]) if r else 0
