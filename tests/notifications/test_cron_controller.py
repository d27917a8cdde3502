from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from src.timeclock.timeclock.common.web import register_error_handlers
from src.timeclock.timeclock.notifications.controller import register
from src.timeclock.timeclock.notifications.model import NotificationRunResult


class FakeEngine:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    def check_and_send_notifications(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return NotificationRunResult(entry_sent=2, exit_sent=1)


class FakePushService:
    public_key = "public-key"

    def __init__(self):
        self.subscribed = []

    def subscribe(self, *, employee_id, subscription):
        self.subscribed.append((employee_id, subscription))


def make_client(*, secret="s3cret", engine=None):
    app = Flask(__name__)
    app.secret_key = "test"
    container = SimpleNamespace(
        cron_secret=secret,
        notification_engine=engine or FakeEngine(),
        push_subscription_service=FakePushService(),
    )
    register_error_handlers(app)
    register(app, container)
    return app.test_client(), container


def test_cron_requires_secret():
    client, container = make_client()

    resp = client.get("/api/cron/notifications")
    assert resp.status_code == 401
    assert container.notification_engine.calls == 0


@pytest.mark.parametrize(
    "headers",
    [
        {"Authorization": "Bearer s3cret"},
        {"X-Cron-Secret": "s3cret"},
        {"X-Vercel-Cron": "1"},
    ],
)
def test_cron_accepts_any_supported_credential(headers):
    client, container = make_client()

    resp = client.post("/api/cron/notifications", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    assert resp.get_json()["entrySent"] == 2
    assert container.notification_engine.calls == 1


def test_cron_rejects_wrong_secret():
    client, _ = make_client()

    assert client.get("/api/cron/notifications", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_cron_open_when_no_secret_configured():
    client, _ = make_client(secret="")

    assert client.get("/api/cron/notifications").status_code == 200


def test_cron_failure_returns_500():
    client, _ = make_client(engine=FakeEngine(RuntimeError("db exploded")))

    resp = client.get("/api/cron/notifications", headers={"X-Cron-Secret": "s3cret"})
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Failed to run notifications"
    assert b"db exploded" not in resp.data


def test_vapid_public_key_is_public():
    client, _ = make_client()

    assert client.get("/api/push/vapid-public-key").get_json() == {"publicKey": "public-key"}


def test_subscribe_requires_employee_session():
    client, container = make_client()

    assert client.post("/api/push/subscribe", json={"endpoint": "https://x"}).status_code == 401

    with client.session_transaction() as sess:
        sess["role"] = "employee"
        sess["employee_id"] = 3
    resp = client.post("/api/push/subscribe", json={"subscription": {"endpoint": "https://push.example/1"}})
    assert resp.status_code == 201
    assert container.push_subscription_service.subscribed == [(3, {"endpoint": "https://push.example/1"})]
