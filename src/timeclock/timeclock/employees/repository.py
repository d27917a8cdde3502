from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_restaurant(self, restaurant_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        restaurant_id: int,
        name: str,
        username: str,
        password_hash: str,
        phone: Optional[str],
        late_grace_minutes: int,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        username: str,
        phone: Optional[str],
        late_grace_minutes: int,
        password_hash: Optional[str] = None,
    ) -> bool:
        """Update profile fields; password only when a new hash is given."""

        raise NotImplementedError
