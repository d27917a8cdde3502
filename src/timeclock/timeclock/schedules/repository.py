from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import ScheduleSlot


class ScheduleRepository(Protocol):
    def list_for_employee(self, employee_id: int) -> Sequence[ScheduleSlot]:
        raise NotImplementedError

    def list_active_for_day(self, day_of_week: Weekday) -> Sequence[ScheduleSlot]:
        """All work-day slots for a weekday, across employees."""

        raise NotImplementedError

    def get_slot(self, *, employee_id: int, day_of_week: Weekday, entry_slot: int) -> Optional[ScheduleSlot]:
        raise NotImplementedError

    def replace_for_employee(self, employee_id: int, slots: Sequence[ScheduleSlot]) -> None:
        """Delete every slot of the employee, then insert the given ones."""

        raise NotImplementedError
