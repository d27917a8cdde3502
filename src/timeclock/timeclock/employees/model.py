from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: Plain data object (no DB access code here).
    """

    employee_id: int
    restaurant_id: int
    name: str
    username: str
    password_hash: str
    late_grace_minutes: int = 5
    phone: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "restaurantId": self.restaurant_id,
            "name": self.name,
            "username": self.username,
            "phone": self.phone,
            "lateGraceMinutes": self.late_grace_minutes,
            "isActive": self.is_active,
        }
