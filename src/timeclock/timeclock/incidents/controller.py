from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_role, employee_required, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employee/incidents", methods=["POST"], endpoint="create_incident")
    @employee_required
    def create_incident():
        data = json_body()
        incident_id = container.incident_service.create(
            employee_id=int(session["employee_id"]),
            type=data.get("type", ""),
            reason=data.get("reason", ""),
            timeclock_id=data.get("timeclockId"),
        )
        return jsonify({"success": True, "id": incident_id}), 201

    @app.route("/api/employee/incidents", methods=["GET"], endpoint="my_incidents")
    @employee_required
    def my_incidents():
        incidents = container.incident_service.list_for_employee(int(session["employee_id"]))
        return jsonify([i.to_dict() for i in incidents])

    @app.route("/api/admin/incidents", methods=["GET"], endpoint="admin_incidents")
    @admin_required
    def admin_incidents():
        restaurant = container.restaurant_service.require_for_admin(admin_username=session["admin_username"])
        incidents = container.incident_service.list_for_restaurant(
            current_role=current_role(),
            restaurant_id=restaurant.restaurant_id,
        )
        return jsonify([i.to_dict() for i in incidents])

    @app.route("/api/admin/incidents/<int:incident_id>/status", methods=["PUT", "POST"], endpoint="update_incident_status")
    @admin_required
    def update_incident_status(incident_id: int):
        restaurant = container.restaurant_service.require_for_admin(admin_username=session["admin_username"])
        container.incident_service.update_status(
            current_role=current_role(),
            restaurant_id=restaurant.restaurant_id,
            incident_id=incident_id,
            status=json_body().get("status", ""),
        )
        return jsonify({"success": True})
