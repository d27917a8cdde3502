from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_role, json_body
from ..container import Container
from ..core.constants import DEFAULT_RADIUS_METERS


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/restaurant", methods=["GET"], endpoint="get_restaurant")
    @admin_required
    def get_restaurant():
        restaurant = container.restaurant_service.get_for_admin(admin_username=session["admin_username"])
        return jsonify(restaurant.to_dict() if restaurant else None)

    @app.route("/api/admin/restaurant", methods=["PUT", "POST"], endpoint="upsert_restaurant")
    @admin_required
    def upsert_restaurant():
        data = json_body()
        restaurant_id = container.restaurant_service.upsert(
            current_role=current_role(),
            admin_username=session["admin_username"],
            name=data.get("name", ""),
            address=data.get("address"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius_meters=data.get("radiusMeters", DEFAULT_RADIUS_METERS),
        )
        return jsonify({"success": True, "id": restaurant_id})
