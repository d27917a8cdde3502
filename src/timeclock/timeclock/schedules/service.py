from __future__ import annotations

from typing import Mapping

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import WeeklySchedule
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def get_weekly(self, employee_id: int) -> WeeklySchedule:
        return WeeklySchedule.from_slots(self._schedules.list_for_employee(int(employee_id)))

    def replace_weekly(self, *, current_role: Role, employee_id: int, payload: Mapping) -> WeeklySchedule:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        weekly = WeeklySchedule.from_payload(payload)
        self._schedules.replace_for_employee(int(employee_id), weekly.to_slots(int(employee_id)))
        return weekly
