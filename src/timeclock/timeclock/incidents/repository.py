from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import IncidentStatus, IncidentType
from .model import Incident


class IncidentRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        type: IncidentType,
        reason: str,
        timeclock_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, incident_id: int) -> Optional[Incident]:
        raise NotImplementedError

    def list_for_employees(self, employee_ids: Sequence[int]) -> Sequence[Incident]:
        raise NotImplementedError

    def update_status(self, *, incident_id: int, status: IncidentStatus) -> bool:
        raise NotImplementedError
