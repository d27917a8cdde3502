from __future__ import annotations

from enum import Enum, IntEnum


class Role(str, Enum):
    """Session role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class Weekday(IntEnum):
    """Day of week as stored in schedules (0 = Sunday)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def key(self) -> str:
        return self.name.lower()

    @classmethod
    def from_key(cls, key: str) -> "Weekday":
        return cls[key.strip().upper()]


class IncidentType(str, Enum):
    LATE_ARRIVAL = "late_arrival"
    EARLY_EXIT = "early_exit"
    OTHER = "other"


class IncidentStatus(str, Enum):
    """Review workflow state of an incident."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReminderType(str, Enum):
    ENTRY_LEAD = "entry_lead"
    ENTRY = "entry"
    EXIT = "exit"
