from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import ClockEntry


class TimeclockRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[ClockEntry]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, limit: int = 100) -> Sequence[ClockEntry]:
        raise NotImplementedError

    def list_for_employees(self, employee_ids: Sequence[int], *, limit: int = 500) -> Sequence[ClockEntry]:
        """Scoped listing for a restaurant's employees (empty input -> empty result)."""

        raise NotImplementedError

    def list_for_employee_between(self, employee_id: int, start: datetime, end: datetime) -> Sequence[ClockEntry]:
        """Entries whose created_at falls in [start, end)."""

        raise NotImplementedError

    def get_open_for_employee(self, employee_id: int) -> Optional[ClockEntry]:
        raise NotImplementedError

    def list_open(self) -> Sequence[ClockEntry]:
        """Every open entry, across all employees."""

        raise NotImplementedError

    def create_entry(
        self,
        *,
        employee_id: int,
        entry_time: datetime,
        is_late: bool,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> int:
        raise NotImplementedError

    def close_entry(self, *, entry_id: int, exit_time: datetime) -> bool:
        raise NotImplementedError

    def correct_entry(self, *, entry_id: int, entry_time: datetime, exit_time: Optional[datetime]) -> bool:
        """Admin-only override of both timestamps."""

        raise NotImplementedError
