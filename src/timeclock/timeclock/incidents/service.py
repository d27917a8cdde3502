from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import IncidentStatus, IncidentType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Incident
from .repository import IncidentRepository


class IncidentService:
    def __init__(self, incidents: IncidentRepository, employees: EmployeeRepository):
        self._incidents = incidents
        self._employees = employees

    @staticmethod
    def _parse_type(value: str) -> IncidentType:
        try:
            return IncidentType(str(value or "").strip())
        except ValueError:
            raise ValidationError("Invalid incident type")

    @staticmethod
    def _parse_status(value: str) -> IncidentStatus:
        try:
            return IncidentStatus(str(value or "").strip())
        except ValueError:
            raise ValidationError("Invalid incident status")

    def create(self, *, employee_id: int, type: str, reason: str, timeclock_id: Optional[int] = None) -> int:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        return self._incidents.create(
            employee_id=int(employee_id),
            type=self._parse_type(type),
            reason=require_non_empty(reason, "Reason"),
            timeclock_id=int(timeclock_id) if timeclock_id else None,
        )

    def list_for_restaurant(self, *, current_role: Role, restaurant_id: int) -> Sequence[Incident]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        ids = [e.employee_id for e in self._employees.list_by_restaurant(int(restaurant_id))]
        return self._incidents.list_for_employees(ids)

    def list_for_employee(self, employee_id: int) -> Sequence[Incident]:
        return self._incidents.list_for_employees([int(employee_id)])

    def update_status(self, *, current_role: Role, restaurant_id: int, incident_id: int, status: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        new_status = self._parse_status(status)
        incident = self._incidents.get_by_id(int(incident_id))
        if not incident:
            raise NotFoundError("Incident not found")

        employee = self._employees.get_by_id(incident.employee_id)
        if not employee or employee.restaurant_id != int(restaurant_id):
            raise AuthorizationError("Incident belongs to another restaurant")

        self._incidents.update_status(incident_id=incident.incident_id, status=new_status)
