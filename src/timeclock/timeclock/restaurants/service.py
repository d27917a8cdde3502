from __future__ import annotations

from typing import Optional

from ..common.validators import optional_str, require_coordinates, require_int_range, require_non_empty
from ..core.constants import DEFAULT_RADIUS_METERS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Restaurant
from .repository import RestaurantRepository


class RestaurantService:
    def __init__(self, restaurants: RestaurantRepository):
        self._restaurants = restaurants

    def get_for_admin(self, *, admin_username: str) -> Optional[Restaurant]:
        return self._restaurants.get_by_admin(admin_username)

    def require_for_admin(self, *, admin_username: str) -> Restaurant:
        restaurant = self._restaurants.get_by_admin(admin_username)
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def get_by_id(self, restaurant_id: int) -> Restaurant:
        restaurant = self._restaurants.get_by_id(int(restaurant_id))
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def upsert(
        self,
        *,
        current_role: Role,
        admin_username: str,
        name: str,
        address: Optional[str],
        latitude,
        longitude,
        radius_meters=DEFAULT_RADIUS_METERS,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        name = require_non_empty(name, "Restaurant name")
        lat, lng = require_coordinates(latitude, longitude)
        radius = require_int_range(radius_meters, "Radius", low=10, high=5000)

        return self._restaurants.upsert_for_admin(
            admin_username=admin_username,
            name=name,
            address=optional_str(address),
            latitude=lat,
            longitude=lng,
            radius_meters=radius,
        )
