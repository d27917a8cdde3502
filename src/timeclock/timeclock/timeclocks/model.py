from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ClockEntry:
    """Domain entity: one clock-in attempt, closed by clock-out."""

    entry_id: int
    employee_id: int
    entry_time: Optional[datetime]
    exit_time: Optional[datetime]
    created_at: datetime
    is_late: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.entry_time is not None and self.exit_time is None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "employeeId": self.employee_id,
            "entryTime": self.entry_time.isoformat() if self.entry_time else None,
            "exitTime": self.exit_time.isoformat() if self.exit_time else None,
            "isLate": self.is_late,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "createdAt": self.created_at.isoformat(),
        }
