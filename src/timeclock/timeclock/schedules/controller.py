from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_role, employee_required, json_body
from ..container import Container
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    def _require_own_employee(employee_id: int) -> None:
        restaurant = container.restaurant_service.require_for_admin(admin_username=session["admin_username"])
        employee = container.employee_service.get(employee_id)
        if employee.restaurant_id != restaurant.restaurant_id:
            raise AuthorizationError("Employee belongs to another restaurant")

    @app.route("/api/admin/employees/<int:employee_id>/schedule", methods=["GET"], endpoint="get_employee_schedule")
    @admin_required
    def get_employee_schedule(employee_id: int):
        _require_own_employee(employee_id)
        return jsonify(container.schedule_service.get_weekly(employee_id).to_dict())

    @app.route("/api/admin/employees/<int:employee_id>/schedule", methods=["PUT"], endpoint="replace_employee_schedule")
    @admin_required
    def replace_employee_schedule(employee_id: int):
        _require_own_employee(employee_id)
        weekly = container.schedule_service.replace_weekly(
            current_role=current_role(),
            employee_id=employee_id,
            payload=json_body(),
        )
        return jsonify(weekly.to_dict())

    @app.route("/api/employee/schedule", methods=["GET"], endpoint="my_schedule")
    @employee_required
    def my_schedule():
        return jsonify(container.schedule_service.get_weekly(int(session["employee_id"])).to_dict())
