from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
import requests
from pywebpush import WebPushException

from src.timeclock.timeclock.core.exceptions import DeliveryError
from src.timeclock.timeclock.notifications.delivery import PushDeliveryAdapter, VapidConfig, build_payload
from src.timeclock.timeclock.notifications.model import PushSubscription

SUBSCRIPTION = PushSubscription(employee_id=7, endpoint="https://push.example/abc", p256dh="key", auth="secret")
VAPID = VapidConfig(public_key="pub", private_key="priv", subject="mailto:ops@example.com")


class RecordingSender:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error


def test_build_payload_shape():
    payload = build_payload("Title", "Body", {"url": "/employee/dashboard"})
    assert payload == {
        "title": "Title",
        "body": "Body",
        "icon": "/icon.svg",
        "badge": "/icon.svg",
        "tag": "timeclock-notification",
        "data": {"url": "/employee/dashboard"},
    }


def test_deliver_passes_subscription_and_vapid_claims():
    sender = RecordingSender()
    adapter = PushDeliveryAdapter(VAPID, sender=sender)

    adapter.deliver(SUBSCRIPTION, "Title", "Body", {"entryTime": "09:00"})

    call = sender.calls[0]
    assert call["subscription_info"] == {"endpoint": SUBSCRIPTION.endpoint, "keys": {"p256dh": "key", "auth": "secret"}}
    assert call["vapid_private_key"] == "priv"
    assert call["vapid_claims"] == {"sub": "mailto:ops@example.com"}
    assert json.loads(call["data"])["data"] == {"entryTime": "09:00"}


def test_deliver_without_keys_fails_without_sending():
    sender = RecordingSender()
    adapter = PushDeliveryAdapter(VapidConfig(), sender=sender)

    with pytest.raises(DeliveryError) as exc:
        adapter.deliver(SUBSCRIPTION, "Title", "Body")
    assert exc.value.status_code is None
    assert sender.calls == []


@pytest.mark.parametrize("status,gone", [(410, True), (404, True), (429, False), (500, False)])
def test_push_service_status_maps_to_gone(status, gone):
    error = WebPushException("rejected", response=SimpleNamespace(status_code=status))
    adapter = PushDeliveryAdapter(VAPID, sender=RecordingSender(error))

    with pytest.raises(DeliveryError) as exc:
        adapter.deliver(SUBSCRIPTION, "Title", "Body")
    assert exc.value.status_code == status
    assert exc.value.is_gone is gone


def test_malformed_key_error_is_wrapped_as_transient():
    adapter = PushDeliveryAdapter(VAPID, sender=RecordingSender(ValueError("Could not deserialize key data")))

    with pytest.raises(DeliveryError) as exc:
        adapter.deliver(SUBSCRIPTION, "Title", "Body")
    assert exc.value.status_code is None
    assert exc.value.is_gone is False
    assert isinstance(exc.value.__cause__, ValueError)


def test_adapter_reports_configuration():
    assert PushDeliveryAdapter(VAPID).is_configured is True
    assert PushDeliveryAdapter(VapidConfig(public_key="pub")).is_configured is False


def test_network_error_is_transient():
    adapter = PushDeliveryAdapter(VAPID, sender=RecordingSender(requests.ConnectionError("down")))

    with pytest.raises(DeliveryError) as exc:
        adapter.deliver(SUBSCRIPTION, "Title", "Body")
    assert exc.value.is_gone is False
