from __future__ import annotations

from dataclasses import replace

import pytest
from werkzeug.security import generate_password_hash

from src.timeclock.timeclock.core.enums import Role, Weekday
from src.timeclock.timeclock.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.timeclock.timeclock.employees.model import Employee
from src.timeclock.timeclock.employees.service import AuthService, EmployeeService


class FakeEmployeesRepo:
    def __init__(self):
        self.rows: dict[int, Employee] = {}
        self._next_id = 1

    def get_by_id(self, employee_id):
        return self.rows.get(int(employee_id))

    def get_by_username(self, username):
        return next((e for e in self.rows.values() if e.username == username), None)

    def list_by_restaurant(self, restaurant_id):
        return [e for e in self.rows.values() if e.restaurant_id == restaurant_id]

    def create(self, *, restaurant_id, name, username, password_hash, phone, late_grace_minutes):
        employee_id = self._next_id
        self._next_id += 1
        self.rows[employee_id] = Employee(
            employee_id=employee_id,
            restaurant_id=restaurant_id,
            name=name,
            username=username,
            password_hash=password_hash,
            phone=phone,
            late_grace_minutes=late_grace_minutes,
        )
        return employee_id

    def update(self, *, employee_id, name, username, phone, late_grace_minutes, password_hash=None):
        e = self.rows[employee_id]
        self.rows[employee_id] = replace(
            e,
            name=name,
            username=username,
            phone=phone,
            late_grace_minutes=late_grace_minutes,
            password_hash=password_hash or e.password_hash,
        )
        return True


class FakeSchedulesRepo:
    def __init__(self):
        self.replaced = {}

    def replace_for_employee(self, employee_id, slots):
        self.replaced[employee_id] = list(slots)


def _create(svc, **overrides):
    kwargs = dict(
        current_role=Role.ADMIN,
        restaurant_id=1,
        name="Ana",
        username="ana",
        password="secret1",
        schedule={"monday": "09:00"},
    )
    kwargs.update(overrides)
    return svc.create_employee(**kwargs)


def test_create_employee_hashes_password_and_stores_schedule():
    employees, schedules = FakeEmployeesRepo(), FakeSchedulesRepo()
    svc = EmployeeService(employees, schedules)

    employee_id = _create(svc)

    stored = employees.get_by_id(employee_id)
    assert stored.password_hash != "secret1"
    monday = [s for s in schedules.replaced[employee_id] if s.day_of_week == Weekday.MONDAY]
    assert [(s.entry_time, s.is_work_day) for s in monday] == [("09:00", True)]


def test_create_employee_validations():
    svc = EmployeeService(FakeEmployeesRepo(), FakeSchedulesRepo())

    with pytest.raises(AuthorizationError):
        _create(svc, current_role=Role.EMPLOYEE)
    with pytest.raises(ValidationError):
        _create(svc, password="123")
    with pytest.raises(ValidationError):
        _create(svc, late_grace_minutes=-1)

    _create(svc)
    with pytest.raises(ValidationError, match="Username already exists"):
        _create(svc)


def test_update_employee_keeps_password_when_blank_and_is_restaurant_scoped():
    employees, schedules = FakeEmployeesRepo(), FakeSchedulesRepo()
    svc = EmployeeService(employees, schedules)
    employee_id = _create(svc)
    old_hash = employees.get_by_id(employee_id).password_hash

    with pytest.raises(AuthorizationError):
        svc.update_employee(
            current_role=Role.ADMIN, restaurant_id=2, employee_id=employee_id, name="Ana", username="ana"
        )

    svc.update_employee(
        current_role=Role.ADMIN,
        restaurant_id=1,
        employee_id=employee_id,
        name="Ana María",
        username="ana",
        late_grace_minutes=10,
        schedule={},
    )
    updated = employees.get_by_id(employee_id)
    assert (updated.name, updated.late_grace_minutes, updated.password_hash) == ("Ana María", 10, old_hash)
    assert all(not s.is_work_day for s in schedules.replaced[employee_id])


def test_authenticate_employee():
    employees = FakeEmployeesRepo()
    employees.create(
        restaurant_id=1,
        name="Luis",
        username="luis",
        password_hash=generate_password_hash("hunter22"),
        phone=None,
        late_grace_minutes=5,
    )
    auth = AuthService(employees, admin_username="admin", admin_password="pw")

    assert auth.authenticate_employee("luis", "hunter22").name == "Luis"
    with pytest.raises(AuthenticationError):
        auth.authenticate_employee("luis", "wrong")
    with pytest.raises(AuthenticationError):
        auth.authenticate_employee("nobody", "hunter22")


def test_authenticate_admin_uses_configured_credentials():
    auth = AuthService(FakeEmployeesRepo(), admin_username="boss", admin_password="pw")

    assert auth.authenticate_admin("boss", "pw") == "boss"
    with pytest.raises(AuthenticationError):
        auth.authenticate_admin("boss", "nope")
    with pytest.raises(AuthenticationError):
        AuthService(FakeEmployeesRepo(), admin_username="boss", admin_password="").authenticate_admin("boss", "")
