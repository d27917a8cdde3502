from __future__ import annotations

from typing import Optional, Protocol

from .model import Restaurant


class RestaurantRepository(Protocol):
    def get_by_id(self, restaurant_id: int) -> Optional[Restaurant]:
        raise NotImplementedError

    def get_by_admin(self, admin_username: str) -> Optional[Restaurant]:
        raise NotImplementedError

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
        """Create or update the admin's restaurant.

        Returns restaurant_id.
        """

        raise NotImplementedError
