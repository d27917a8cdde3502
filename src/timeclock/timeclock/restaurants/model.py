from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Restaurant:
    """Domain entity: a restaurant and the geofence used for clock-in."""

    restaurant_id: int
    name: str
    latitude: float
    longitude: float
    radius_meters: int
    admin_username: str
    address: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.restaurant_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radiusMeters": self.radius_meters,
        }
