from __future__ import annotations

import pytest

from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.timeclock.timeclock.restaurants.model import Restaurant
from src.timeclock.timeclock.restaurants.service import RestaurantService


class FakeRestaurants:
    def __init__(self):
        self.by_admin: dict[str, Restaurant] = {}

    def get_by_id(self, restaurant_id):
        return next((r for r in self.by_admin.values() if r.restaurant_id == restaurant_id), None)

    def get_by_admin(self, admin_username):
        return self.by_admin.get(admin_username)

    def upsert_for_admin(self, *, admin_username, name, address, latitude, longitude, radius_meters):
        existing = self.by_admin.get(admin_username)
        restaurant_id = existing.restaurant_id if existing else len(self.by_admin) + 1
        self.by_admin[admin_username] = Restaurant(
            restaurant_id=restaurant_id,
            name=name,
            latitude=latitude,
            longitude=longitude,
            radius_meters=radius_meters,
            admin_username=admin_username,
            address=address,
        )
        return restaurant_id


def _upsert(svc, **overrides):
    kwargs = dict(
        current_role=Role.ADMIN,
        admin_username="admin",
        name="Casa Pepe",
        address="  ",
        latitude="40.4168",
        longitude="-3.7038",
        radius_meters=150,
    )
    kwargs.update(overrides)
    return svc.upsert(**kwargs)


def test_upsert_creates_then_updates_same_restaurant():
    svc = RestaurantService(FakeRestaurants())

    first = _upsert(svc)
    second = _upsert(svc, name="Casa Pepe II", radius_meters=200)

    assert first == second
    restaurant = svc.require_for_admin(admin_username="admin")
    assert (restaurant.name, restaurant.radius_meters, restaurant.address) == ("Casa Pepe II", 200, None)
    assert restaurant.latitude == pytest.approx(40.4168)


@pytest.mark.parametrize(
    "overrides,error",
    [
        ({"current_role": Role.EMPLOYEE}, AuthorizationError),
        ({"name": ""}, ValidationError),
        ({"latitude": 91}, ValidationError),
        ({"radius_meters": 5}, ValidationError),
        ({"radius_meters": "wide"}, ValidationError),
    ],
)
def test_upsert_validations(overrides, error):
    with pytest.raises(error):
        _upsert(RestaurantService(FakeRestaurants()), **overrides)


def test_missing_restaurant():
    svc = RestaurantService(FakeRestaurants())

    assert svc.get_for_admin(admin_username="admin") is None
    with pytest.raises(NotFoundError):
        svc.require_for_admin(admin_username="admin")
    with pytest.raises(NotFoundError):
        svc.get_by_id(1)
