from __future__ import annotations

import hmac
from typing import Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_str, require_int_range, require_min_length, require_non_empty
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, MAX_LATE_GRACE_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..schedules.model import WeeklySchedule
from ..schedules.repository import ScheduleRepository
from .model import Employee
from .repository import EmployeeRepository


class AuthService:
    """Use case: authenticate admins (configured credentials) and employees."""

    def __init__(self, employees: EmployeeRepository, *, admin_username: str, admin_password: str):
        self._employees = employees
        self._admin_username = admin_username
        self._admin_password = admin_password

    def authenticate_admin(self, username: str, password: str) -> str:
        if not self._admin_password:
            raise AuthenticationError("Admin login is not configured")
        ok_user = hmac.compare_digest((username or "").encode(), self._admin_username.encode())
        ok_pass = hmac.compare_digest((password or "").encode(), self._admin_password.encode())
        if not (ok_user and ok_pass):
            raise AuthenticationError("Invalid admin credentials")
        return self._admin_username

    def authenticate_employee(self, username: str, password: str) -> Employee:
        employee = self._employees.get_by_username((username or "").strip())
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. legacy or corrupted hash values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return employee


class EmployeeService:
    """Use case: manage employees and their weekly schedule (admin)."""

    def __init__(self, employees: EmployeeRepository, schedules: ScheduleRepository):
        self._employees = employees
        self._schedules = schedules

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_for_restaurant(self, restaurant_id: int) -> Sequence[Employee]:
        return self._employees.list_by_restaurant(int(restaurant_id))

    def create_employee(
        self,
        *,
        current_role: Role,
        restaurant_id: int,
        name: str,
        username: str,
        password: str,
        phone: Optional[str] = None,
        late_grace_minutes=DEFAULT_LATE_GRACE_MINUTES,
        schedule: Optional[Mapping] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        name = require_non_empty(name, "Name")
        username = require_min_length(require_non_empty(username, "Username"), "Username", 3)
        require_min_length(password, "Password", 6)
        grace = require_int_range(late_grace_minutes, "Late grace minutes", low=0, high=MAX_LATE_GRACE_MINUTES)
        weekly = WeeklySchedule.from_payload(schedule or {})

        if self._employees.get_by_username(username):
            raise ValidationError("Username already exists")

        employee_id = self._employees.create(
            restaurant_id=int(restaurant_id),
            name=name,
            username=username,
            password_hash=generate_password_hash(password),
            phone=optional_str(phone),
            late_grace_minutes=grace,
        )
        self._schedules.replace_for_employee(employee_id, weekly.to_slots(employee_id))
        return employee_id

    def update_employee(
        self,
        *,
        current_role: Role,
        restaurant_id: int,
        employee_id: int,
        name: str,
        username: str,
        password: Optional[str] = None,
        phone: Optional[str] = None,
        late_grace_minutes=DEFAULT_LATE_GRACE_MINUTES,
        schedule: Optional[Mapping] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        employee = self.get(employee_id)
        if employee.restaurant_id != int(restaurant_id):
            raise AuthorizationError("Employee belongs to another restaurant")

        name = require_non_empty(name, "Name")
        username = require_min_length(require_non_empty(username, "Username"), "Username", 3)
        grace = require_int_range(late_grace_minutes, "Late grace minutes", low=0, high=MAX_LATE_GRACE_MINUTES)
        password_hash = None
        if password:
            require_min_length(password, "Password", 6)
            password_hash = generate_password_hash(password)
        weekly = WeeklySchedule.from_payload(schedule or {})

        other = self._employees.get_by_username(username)
        if other and other.employee_id != employee.employee_id:
            raise ValidationError("Username already exists")

        self._employees.update(
            employee_id=employee.employee_id,
            name=name,
            username=username,
            phone=optional_str(phone),
            late_grace_minutes=grace,
            password_hash=password_hash,
        )
        self._schedules.replace_for_employee(employee.employee_id, weekly.to_slots(employee.employee_id))
