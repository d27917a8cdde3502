from __future__ import annotations

from datetime import date, datetime, timezone

from src.timeclock.timeclock.core.enums import Weekday
from src.timeclock.timeclock.core.exceptions import DeliveryError
from src.timeclock.timeclock.notifications.delivery import PushDeliveryAdapter, VapidConfig
from src.timeclock.timeclock.notifications.engine import NotificationEngine
from src.timeclock.timeclock.notifications.model import NotificationOptions, PushSubscription
from src.timeclock.timeclock.schedules.model import ScheduleSlot
from src.timeclock.timeclock.timeclocks.model import ClockEntry

MONDAY = date(2026, 3, 2)  # CET, UTC+1


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeScheduleRepo:
    def __init__(self, slots):
        self._slots = list(slots)

    def list_active_for_day(self, day_of_week):
        return [s for s in self._slots if s.day_of_week == day_of_week]


class FakeTimeclockRepo:
    def __init__(self, entries=()):
        self.entries = list(entries)

    def list_for_employee_between(self, employee_id, start, end):
        return [e for e in self.entries if e.employee_id == employee_id and start <= e.created_at < end]

    def list_open(self):
        return [e for e in self.entries if e.is_open]


class FakeLogRepo:
    def __init__(self):
        self.keys = set()

    def exists(self, *, employee_id, entry_time, schedule_date, entry_slot):
        return (employee_id, entry_time, schedule_date, entry_slot) in self.keys

    def list_notified_employee_ids(self, employee_ids, *, entry_time, schedule_date, entry_slot):
        return {i for i in employee_ids if (i, entry_time, schedule_date, entry_slot) in self.keys}

    def record(self, *, employee_id, entry_time, schedule_date, entry_slot, notified_at):
        key = (employee_id, entry_time, schedule_date, entry_slot)
        if key in self.keys:
            return False
        self.keys.add(key)
        return True


class FakeSubscriptionRepo:
    def __init__(self, subscriptions=()):
        self.by_endpoint = {s.endpoint: s for s in subscriptions}
        self.fail_for = set()

    def list_for_employee(self, employee_id):
        if employee_id in self.fail_for:
            raise RuntimeError("storage hiccup")
        return [s for s in self.by_endpoint.values() if s.employee_id == employee_id]

    def delete_by_endpoint(self, endpoint):
        return self.by_endpoint.pop(endpoint, None) is not None


class FakeDelivery:
    is_configured = True

    def __init__(self):
        self.sent = []
        self.errors = {}

    def deliver(self, subscription, title, body, data=None):
        if subscription.endpoint in self.errors:
            raise self.errors[subscription.endpoint]
        self.sent.append((subscription.endpoint, title, body, data))


def sub(employee_id: int, name: str = "a") -> PushSubscription:
    return PushSubscription(
        employee_id=employee_id,
        endpoint=f"https://push.example/{employee_id}/{name}",
        p256dh="p256dh",
        auth="auth",
    )


def slot(employee_id: int, entry_time: str = "09:00", *, day=Weekday.MONDAY, entry_slot=1, is_work_day=True):
    return ScheduleSlot(
        employee_id=employee_id,
        day_of_week=day,
        entry_slot=entry_slot,
        entry_time=entry_time,
        is_work_day=is_work_day,
    )


def open_entry(employee_id: int, at: datetime, entry_id: int = 1) -> ClockEntry:
    return ClockEntry(entry_id=entry_id, employee_id=employee_id, entry_time=at, exit_time=None, created_at=at)


def build(slots=(), entries=(), subscriptions=(), health_check=None, delivery=None):
    logs = FakeLogRepo()
    subs = FakeSubscriptionRepo(subscriptions)
    delivery = delivery or FakeDelivery()
    engine = NotificationEngine(
        FakeScheduleRepo(slots),
        FakeTimeclockRepo(entries),
        logs,
        subs,
        delivery,
        options=NotificationOptions(time_zone="Europe/Madrid", lead_minutes=5, lookback_minutes=65),
        health_check=health_check,
    )
    return engine, logs, subs, delivery


def test_monday_morning_lead_then_on_time_reminder():
    engine, logs, _, delivery = build(slots=[slot(1)], subscriptions=[sub(1)])

    result = engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, 55))
    assert result.entry_sent == 1
    _, title, body, data = delivery.sent[0]
    assert title == "⏰ Your shift starts soon"
    assert "5 minutes" in body and "09:00" in body
    assert data["reminderType"] == "entry_lead"
    assert logs.keys == {(1, "08:55", MONDAY, 1)}

    # 08:56: lead already logged, on-time instant not reached yet.
    assert engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, 56)).entry_sent == 0
    assert len(delivery.sent) == 1

    result = engine.check_and_send_notifications(now=utc(2026, 3, 2, 8, 0))
    assert result.entry_sent == 1
    assert delivery.sent[1][1] == "⏰ Time to clock in"
    assert delivery.sent[1][3]["entrySlot"] == 1
    assert (1, "09:00", MONDAY, 1) in logs.keys


def test_repeated_runs_deliver_once():
    engine, logs, _, delivery = build(slots=[slot(1)], subscriptions=[sub(1)])

    for minute in range(0, 10):
        engine.check_and_send_notifications(now=utc(2026, 3, 2, 8, minute))

    # Lead (08:55) and on-time (09:00), both caught up by the first run.
    assert len(delivery.sent) == 2
    assert logs.keys == {(1, "08:55", MONDAY, 1), (1, "09:00", MONDAY, 1)}


def test_no_entry_reminder_while_clocked_in():
    engine, logs, _, delivery = build(
        slots=[slot(1)],
        entries=[open_entry(1, utc(2026, 3, 2, 7, 50))],
        subscriptions=[sub(1)],
    )

    result = engine.check_and_send_notifications(now=utc(2026, 3, 2, 8, 0))
    assert result.entry_sent == 0
    assert delivery.sent == []
    assert logs.keys == set()


def test_inactive_day_never_reminds():
    engine, _, _, delivery = build(slots=[slot(1, is_work_day=False)], subscriptions=[sub(1)])

    assert engine.check_and_send_notifications(now=utc(2026, 3, 2, 8, 0)).total_sent == 0
    assert delivery.sent == []


def test_unparsable_entry_time_is_skipped():
    engine, _, _, delivery = build(slots=[slot(1, "nine"), slot(2)], subscriptions=[sub(1), sub(2)])

    assert engine.check_and_send_notifications(now=utc(2026, 3, 2, 8, 0)).entry_sent == 2
    assert {endpoint for endpoint, *_ in delivery.sent} == {sub(2).endpoint}


def test_lookback_bound_stops_backfill():
    engine, _, _, delivery = build(slots=[slot(1)], subscriptions=[sub(1)])

    # 10:06 local: 09:00 is 66 minutes old.
    assert engine.check_and_send_notifications(now=utc(2026, 3, 2, 9, 6)).total_sent == 0
    assert delivery.sent == []


def test_call_overrides_lead_minutes():
    engine, logs, _, _ = build(slots=[slot(1)], subscriptions=[sub(1)])

    engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, 50), lead_minutes=10)
    assert logs.keys == {(1, "08:50", MONDAY, 1)}


def test_no_subscriptions_is_not_logged():
    engine, logs, _, delivery = build(slots=[slot(1)])

    assert engine.check_and_send_notifications(now=utc(2026, 3, 2, 8, 0)).total_sent == 0
    assert logs.keys == set()
    assert delivery.sent == []


def test_gone_subscription_is_deleted_and_siblings_still_receive():
    first, second, third = sub(1, "a"), sub(1, "b"), sub(1, "c")
    engine, logs, subs, delivery = build(slots=[slot(1)], subscriptions=[first, second, third])
    delivery.errors[first.endpoint] = DeliveryError("gone", status_code=410)
    delivery.errors[second.endpoint] = DeliveryError("boom", status_code=503)

    engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, 55))

    assert first.endpoint not in subs.by_endpoint
    assert second.endpoint in subs.by_endpoint
    assert [endpoint for endpoint, *_ in delivery.sent] == [third.endpoint]
    assert logs.keys == {(1, "08:55", MONDAY, 1)}


def test_unexpected_delivery_error_does_not_skip_siblings_or_log():
    bad, good = sub(1, "bad"), sub(1, "good")
    engine, logs, subs, delivery = build(slots=[slot(1)], subscriptions=[bad, good])
    delivery.errors[bad.endpoint] = ValueError("Could not deserialize key data")

    for minute in range(55, 60):
        engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, minute))

    assert [endpoint for endpoint, *_ in delivery.sent] == [good.endpoint]
    assert bad.endpoint in subs.by_endpoint
    assert logs.keys == {(1, "08:55", MONDAY, 1)}


def test_malformed_keys_through_push_adapter_deliver_once():
    bad, good = sub(1, "bad"), sub(1, "good")
    delivered = []

    def sender(*, subscription_info, **kwargs):
        if subscription_info["endpoint"] == bad.endpoint:
            raise ValueError("Could not deserialize key data")
        delivered.append(subscription_info["endpoint"])

    adapter = PushDeliveryAdapter(VapidConfig(public_key="pub", private_key="priv"), sender=sender)
    engine, logs, _, _ = build(slots=[slot(1)], subscriptions=[bad, good], delivery=adapter)

    for minute in range(55, 60):
        engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, minute))

    assert delivered == [good.endpoint]
    assert logs.keys == {(1, "08:55", MONDAY, 1)}


def test_missing_vapid_keys_skip_run_without_consuming_reminders():
    calls = []
    engine, logs, _, _ = build(
        slots=[slot(1)],
        subscriptions=[sub(1)],
        delivery=PushDeliveryAdapter(VapidConfig(), sender=lambda **kwargs: calls.append(kwargs)),
    )

    result = engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, 55))
    assert result.skipped is True
    assert result.total_sent == 0
    assert calls == []
    assert logs.keys == set()


def test_failure_for_one_employee_does_not_stop_others():
    engine, logs, subs, delivery = build(slots=[slot(1), slot(2)], subscriptions=[sub(1), sub(2)])
    subs.fail_for.add(1)

    assert engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, 55)).entry_sent == 1
    assert logs.keys == {(2, "08:55", MONDAY, 1)}


def test_storage_unavailable_skips_run():
    engine, logs, _, delivery = build(slots=[slot(1)], subscriptions=[sub(1)], health_check=lambda: False)

    result = engine.check_and_send_notifications(now=utc(2026, 3, 2, 7, 55))
    assert result.skipped is True
    assert delivery.sent == []
    assert logs.keys == set()


def test_exit_reminders_for_employees_clocked_in_today():
    engine, logs, _, delivery = build(
        entries=[
            open_entry(1, utc(2026, 3, 2, 8, 0), entry_id=1),
            # Forgot to clock out yesterday: not this afternoon's concern.
            open_entry(2, utc(2026, 3, 1, 8, 0), entry_id=2),
        ],
        subscriptions=[sub(1), sub(2)],
    )

    result = engine.check_and_send_notifications(now=utc(2026, 3, 2, 15, 0))  # 16:00 local
    assert result.exit_sent == 2
    assert logs.keys == {(1, "15:30", MONDAY, 0), (1, "16:00", MONDAY, 0)}
    assert {data["reminderType"] for *_, data in delivery.sent} == {"exit"}

    assert engine.check_and_send_notifications(now=utc(2026, 3, 2, 15, 1)).exit_sent == 0


def test_exit_wave_wraps_past_midnight():
    engine, logs, _, _ = build(
        entries=[open_entry(1, utc(2026, 3, 2, 21, 0))],  # 22:00 local Monday
        subscriptions=[sub(1)],
    )

    # 00:00 local Tuesday.
    result = engine.check_and_send_notifications(now=utc(2026, 3, 2, 23, 0))
    assert result.exit_sent == 3
    assert logs.keys == {
        (1, "00:00", MONDAY, 0),
        (1, "23:00", MONDAY, 0),
        (1, "23:30", MONDAY, 0),
    }
