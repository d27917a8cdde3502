from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_role, employee_required, json_body
from ..container import Container
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _parse_instant(value: Optional[str], field_name: str) -> Optional[datetime]:
        if not value:
            return None
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO date-time")
        # Naive input is restaurant wall-clock time.
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=ZoneInfo(container.time_zone))
        return parsed

    @app.route("/api/employee/clock-in", methods=["POST"], endpoint="clock_in")
    @employee_required
    def clock_in():
        data = json_body()
        entry = container.clock_service.clock_in(
            int(session["employee_id"]),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        message = "Clocked in (late)" if entry.is_late else "Clocked in"
        return jsonify({"success": True, "message": message, "entry": entry.to_dict()}), 201

    @app.route("/api/employee/clock-out", methods=["POST"], endpoint="clock_out")
    @employee_required
    def clock_out():
        data = json_body()
        container.clock_service.clock_out(
            int(session["employee_id"]),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return jsonify({"success": True, "message": "Clocked out"})

    @app.route("/api/employee/timeclocks", methods=["GET"], endpoint="my_timeclocks")
    @employee_required
    def my_timeclocks():
        limit = request.args.get("limit", default=100, type=int)
        entries = container.clock_service.list_for_employee(int(session["employee_id"]), limit=limit)
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/admin/timeclocks", methods=["GET"], endpoint="admin_timeclocks")
    @admin_required
    def admin_timeclocks():
        restaurant = container.restaurant_service.require_for_admin(admin_username=session["admin_username"])
        entries = container.clock_service.list_for_restaurant(restaurant.restaurant_id)
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/admin/timeclocks/<int:entry_id>", methods=["PUT"], endpoint="correct_timeclock")
    @admin_required
    def correct_timeclock(entry_id: int):
        restaurant = container.restaurant_service.require_for_admin(admin_username=session["admin_username"])
        entry = container.timeclocks_repo.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Timeclock entry not found")
        employee = container.employee_service.get(entry.employee_id)
        if employee.restaurant_id != restaurant.restaurant_id:
            raise AuthorizationError("Entry belongs to another restaurant")

        data = json_body()
        entry_time = _parse_instant(data.get("entryTime"), "entryTime")
        if entry_time is None:
            raise ValidationError("entryTime is required")

        container.clock_service.correct_entry(
            current_role=current_role(),
            entry_id=entry_id,
            entry_time=entry_time,
            exit_time=_parse_instant(data.get("exitTime"), "exitTime"),
        )
        return jsonify({"success": True})
