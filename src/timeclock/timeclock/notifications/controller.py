from __future__ import annotations

import hmac
import logging

from flask import Flask, jsonify, request, session

from ..common.web import employee_required, error_response, json_body
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _cron_authorized() -> bool:
        secret = container.cron_secret
        if not secret:
            return True
        if request.headers.get("X-Vercel-Cron"):
            return True

        bearer = request.headers.get("Authorization", "")
        if bearer.startswith("Bearer ") and hmac.compare_digest(bearer[len("Bearer "):].encode(), secret.encode()):
            return True
        header = request.headers.get("X-Cron-Secret", "")
        return bool(header) and hmac.compare_digest(header.encode(), secret.encode())

    @app.route("/api/cron/notifications", methods=["GET", "POST"], endpoint="cron_notifications")
    def cron_notifications():
        if not _cron_authorized():
            return error_response("Unauthorized", 401)

        try:
            result = container.notification_engine.check_and_send_notifications()
        except Exception:
            logger.exception("Cron notification check failed")
            return error_response("Failed to run notifications", 500)

        return jsonify({
            "success": True,
            "entrySent": result.entry_sent,
            "exitSent": result.exit_sent,
            "skipped": result.skipped,
        })

    @app.route("/api/push/vapid-public-key", methods=["GET"], endpoint="vapid_public_key")
    def vapid_public_key():
        key = container.push_subscription_service.public_key
        if not key:
            return error_response("Push notifications are not configured", 503)
        return jsonify({"publicKey": key})

    @app.route("/api/push/subscribe", methods=["POST"], endpoint="push_subscribe")
    @employee_required
    def push_subscribe():
        data = json_body()
        container.push_subscription_service.subscribe(
            employee_id=int(session["employee_id"]),
            subscription=data.get("subscription") or data,
        )
        return jsonify({"success": True}), 201

    @app.route("/api/push/unsubscribe", methods=["POST"], endpoint="push_unsubscribe")
    @employee_required
    def push_unsubscribe():
        removed = container.push_subscription_service.unsubscribe(endpoint=json_body().get("endpoint"))
        return jsonify({"success": True, "removed": removed})
