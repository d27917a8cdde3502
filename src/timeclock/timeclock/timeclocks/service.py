from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import local_day_bounds, local_instant, now_utc, to_local, weekday_index
from ..common.geo import distance_meters
from ..common.validators import require_coordinates
from ..core.constants import DEFAULT_TIME_ZONE, NON_WORKING_ENTRY_TIME
from ..core.enums import Role, Weekday
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..restaurants.repository import RestaurantRepository
from ..schedules.model import ScheduleSlot
from ..schedules.repository import ScheduleRepository
from .model import ClockEntry
from .repository import TimeclockRepository

logger = logging.getLogger(__name__)


class ClockService:
    """Use case: clock in / clock out at the restaurant, plus admin corrections."""

    def __init__(
        self,
        timeclocks: TimeclockRepository,
        employees: EmployeeRepository,
        restaurants: RestaurantRepository,
        schedules: ScheduleRepository,
        *,
        time_zone: str = DEFAULT_TIME_ZONE,
    ):
        self._timeclocks = timeclocks
        self._employees = employees
        self._restaurants = restaurants
        self._schedules = schedules
        self._time_zone = time_zone

    def _get_active_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")
        return employee

    def _require_on_site(self, employee: Employee, latitude, longitude) -> tuple[float, float]:
        lat, lng = require_coordinates(latitude, longitude)
        restaurant = self._restaurants.get_by_id(employee.restaurant_id)
        if not restaurant:
            raise NotFoundError("Restaurant not found")

        distance = distance_meters(restaurant.latitude, restaurant.longitude, lat, lng)
        if distance > restaurant.radius_meters:
            logger.info(
                "Rejected clock event for employee %s: %.0fm from restaurant (radius %sm)",
                employee.employee_id, distance, restaurant.radius_meters,
            )
            raise ValidationError("You are not at the restaurant location")
        return lat, lng

    def _applicable_slot(self, employee_id: int, now: datetime) -> Optional[ScheduleSlot]:
        today = to_local(now, self._time_zone).date()
        start, end = local_day_bounds(today, self._time_zone)
        todays = self._timeclocks.list_for_employee_between(employee_id, start, end)

        # A closed entry earlier today means this is the second shift.
        entry_slot = 2 if any(e.exit_time for e in todays) else 1
        return self._schedules.get_slot(
            employee_id=employee_id,
            day_of_week=Weekday(weekday_index(today)),
            entry_slot=entry_slot,
        )

    def _is_late(self, employee: Employee, slot: Optional[ScheduleSlot], now: datetime) -> bool:
        if not slot or not slot.is_work_day or slot.entry_time == NON_WORKING_ENTRY_TIME:
            return False
        minutes = slot.entry_minutes
        if minutes is None:
            return False

        today = to_local(now, self._time_zone).date()
        scheduled = local_instant(today, minutes, self._time_zone)
        return now > scheduled + timedelta(minutes=employee.late_grace_minutes)

    def clock_in(self, employee_id: int, *, latitude, longitude, now: datetime | None = None) -> ClockEntry:
        now = now or now_utc()
        employee = self._get_active_employee(employee_id)
        lat, lng = self._require_on_site(employee, latitude, longitude)

        if self._timeclocks.get_open_for_employee(employee.employee_id):
            raise ValidationError("You must clock out before clocking in again")

        slot = self._applicable_slot(employee.employee_id, now)
        is_late = self._is_late(employee, slot, now)

        entry_id = self._timeclocks.create_entry(
            employee_id=employee.employee_id,
            entry_time=now,
            is_late=is_late,
            latitude=lat,
            longitude=lng,
        )
        logger.info("Employee %s clocked in (entry %s, late=%s)", employee.employee_id, entry_id, is_late)
        return ClockEntry(
            entry_id=entry_id,
            employee_id=employee.employee_id,
            entry_time=now,
            exit_time=None,
            created_at=now,
            is_late=is_late,
            latitude=lat,
            longitude=lng,
        )

    def clock_out(self, employee_id: int, *, latitude, longitude, now: datetime | None = None) -> None:
        now = now or now_utc()
        employee = self._get_active_employee(employee_id)
        self._require_on_site(employee, latitude, longitude)

        entry = self._timeclocks.get_open_for_employee(employee.employee_id)
        if not entry:
            raise ValidationError("No active timeclock entry found")

        if not self._timeclocks.close_entry(entry_id=entry.entry_id, exit_time=now):
            raise ValidationError("No active timeclock entry found")
        logger.info("Employee %s clocked out (entry %s)", employee.employee_id, entry.entry_id)

    def list_for_employee(self, employee_id: int, *, limit: int = 100) -> Sequence[ClockEntry]:
        return self._timeclocks.list_for_employee(int(employee_id), limit=limit)

    def list_for_restaurant(self, restaurant_id: int) -> Sequence[ClockEntry]:
        ids = [e.employee_id for e in self._employees.list_by_restaurant(int(restaurant_id))]
        return self._timeclocks.list_for_employees(ids)

    def correct_entry(
        self,
        *,
        current_role: Role,
        entry_id: int,
        entry_time: datetime,
        exit_time: Optional[datetime],
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        if not self._timeclocks.get_by_id(int(entry_id)):
            raise NotFoundError("Timeclock entry not found")
        if exit_time is not None and exit_time <= entry_time:
            raise ValidationError("Exit time must be after entry time")

        self._timeclocks.correct_entry(entry_id=int(entry_id), entry_time=entry_time, exit_time=exit_time)
