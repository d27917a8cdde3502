from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_role, json_body
from ..container import Container
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    def _admin_restaurant_id() -> int:
        restaurant = container.restaurant_service.require_for_admin(admin_username=session["admin_username"])
        return restaurant.restaurant_id

    @app.route("/api/auth/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = json_body()
        username = container.auth_service.authenticate_admin(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["role"] = Role.ADMIN.value
        session["admin_username"] = username
        return jsonify({"success": True, "role": Role.ADMIN.value, "username": username})

    @app.route("/api/auth/employee/login", methods=["POST"], endpoint="employee_login")
    def employee_login():
        data = json_body()
        employee = container.auth_service.authenticate_employee(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["role"] = Role.EMPLOYEE.value
        session["employee_id"] = employee.employee_id
        session["restaurant_id"] = employee.restaurant_id
        session["name"] = employee.name
        return jsonify({"success": True, "role": Role.EMPLOYEE.value, "employee": employee.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    def me():
        if "role" not in session:
            return jsonify({"authenticated": False})
        if session["role"] == Role.ADMIN.value:
            return jsonify({"authenticated": True, "role": Role.ADMIN.value, "username": session["admin_username"]})
        employee = container.employee_service.get(int(session["employee_id"]))
        return jsonify({"authenticated": True, "role": Role.EMPLOYEE.value, "employee": employee.to_dict()})

    @app.route("/api/admin/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        employees = container.employee_service.list_for_restaurant(_admin_restaurant_id())
        return jsonify([e.to_dict() for e in employees])

    @app.route("/api/admin/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        data = json_body()
        employee_id = container.employee_service.create_employee(
            current_role=current_role(),
            restaurant_id=_admin_restaurant_id(),
            name=data.get("name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            phone=data.get("phone"),
            late_grace_minutes=data.get("lateGraceMinutes", DEFAULT_LATE_GRACE_MINUTES),
            schedule=data.get("schedule"),
        )
        return jsonify({"success": True, "id": employee_id}), 201

    @app.route("/api/admin/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @admin_required
    def update_employee(employee_id: int):
        data = json_body()
        container.employee_service.update_employee(
            current_role=current_role(),
            restaurant_id=_admin_restaurant_id(),
            employee_id=employee_id,
            name=data.get("name", ""),
            username=data.get("username", ""),
            password=data.get("password"),
            phone=data.get("phone"),
            late_grace_minutes=data.get("lateGraceMinutes", DEFAULT_LATE_GRACE_MINUTES),
            schedule=data.get("schedule"),
        )
        return jsonify({"success": True})

    @app.route("/api/admin/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @admin_required
    def get_employee(employee_id: int):
        employee = container.employee_service.get(employee_id)
        if employee.restaurant_id != _admin_restaurant_id():
            raise AuthorizationError("Employee belongs to another restaurant")
        return jsonify(employee.to_dict())
