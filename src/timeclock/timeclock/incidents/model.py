from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import IncidentStatus, IncidentType


@dataclass(frozen=True)
class Incident:
    incident_id: int
    employee_id: int
    type: IncidentType
    reason: str
    status: IncidentStatus
    created_at: datetime
    timeclock_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.incident_id,
            "employeeId": self.employee_id,
            "timeclockId": self.timeclock_id,
            "type": self.type.value,
            "reason": self.reason,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }
