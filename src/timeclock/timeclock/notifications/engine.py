"""Entry/exit reminder decision engine.

Runs once per scheduler tick. For every reminder instant that is due (see
`slots`), the engine checks the notification log, delivers to every push
subscription of the employee and logs the reminder once. Delivery errors are
isolated per subscription, processing errors per employee. Runs are skipped while storage
is unavailable or VAPID keys are missing. A duplicate send
can only happen when two runs overlap between the log check and the insert.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..common.datetime_utils import LocalParts, date_key, local_day_bounds, local_parts, now_utc, weekday_index
from ..core.constants import EXIT_REMINDER_SLOT
from ..core.enums import Weekday
from ..core.exceptions import DeliveryError
from ..schedules.model import ScheduleSlot
from ..schedules.repository import ScheduleRepository
from ..timeclocks.model import ClockEntry
from ..timeclocks.repository import TimeclockRepository
from . import messages
from .delivery import PushDeliveryAdapter
from .model import EntryReminderCandidate, NotificationOptions, NotificationRunResult, PushSubscription, ReminderMessage
from .repository import NotificationLogRepository, PushSubscriptionRepository
from .slots import exit_reminder_date, matching_entry_candidates, matching_exit_slots

logger = logging.getLogger(__name__)


class NotificationEngine:
    def __init__(
        self,
        schedules: ScheduleRepository,
        timeclocks: TimeclockRepository,
        logs: NotificationLogRepository,
        subscriptions: PushSubscriptionRepository,
        delivery: PushDeliveryAdapter,
        *,
        options: Optional[NotificationOptions] = None,
        health_check: Optional[Callable[[], bool]] = None,
    ):
        self._schedules = schedules
        self._timeclocks = timeclocks
        self._logs = logs
        self._subscriptions = subscriptions
        self._delivery = delivery
        self._options = options or NotificationOptions()
        self._health_check = health_check

    def check_and_send_notifications(
        self,
        *,
        time_zone: Optional[str] = None,
        lead_minutes: Optional[int] = None,
        lookback_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> NotificationRunResult:
        if self._health_check is not None and not self._health_check():
            logger.warning("Storage unavailable, skipping notification run")
            return NotificationRunResult(skipped=True)
        if not self._delivery.is_configured:
            # Due reminders stay unlogged until keys are configured.
            logger.warning("Push delivery not configured, skipping notification run")
            return NotificationRunResult(skipped=True)

        options = self._options.override(
            time_zone=time_zone,
            lead_minutes=lead_minutes,
            lookback_minutes=lookback_minutes,
        )
        now = now or now_utc()
        local = local_parts(now, options.time_zone)

        result = NotificationRunResult()
        result.entry_sent = self._send_entry_reminders(now, local, options)
        result.exit_sent = self._send_exit_reminders(now, local, options)

        if result.total_sent:
            logger.info(
                "Notification run at %s %02d:%02d: %d entry, %d exit reminders",
                date_key(now, options.time_zone), local.hour, local.minute, result.entry_sent, result.exit_sent,
            )
        return result

    # ------------------------------------------------------------------
    # Entry reminders
    # ------------------------------------------------------------------

    def _send_entry_reminders(self, now: datetime, local: LocalParts, options: NotificationOptions) -> int:
        today = local.date
        current = local.minutes
        slots = self._schedules.list_active_for_day(Weekday(weekday_index(today)))

        clocked_in: Dict[int, bool] = {}
        sent = 0
        for slot in slots:
            if not slot.is_work_day:
                continue
            entry_minutes = slot.entry_minutes
            if entry_minutes is None:
                logger.warning(
                    "Unparsable entry time %r for employee %s (day %s, slot %s)",
                    slot.entry_time, slot.employee_id, slot.day_of_week.key, slot.entry_slot,
                )
                continue

            candidates = matching_entry_candidates(
                entry_minutes,
                current,
                lead_minutes=options.lead_minutes,
                lookback_minutes=options.lookback_minutes,
            )
            if not candidates:
                continue

            try:
                if slot.employee_id not in clocked_in:
                    clocked_in[slot.employee_id] = self._has_open_entry_on(slot.employee_id, today, options.time_zone)
                if clocked_in[slot.employee_id]:
                    continue

                for candidate in candidates:
                    if self._send_entry_candidate(slot, candidate, today, now, options):
                        sent += 1
            except Exception:
                logger.exception("Entry reminder processing failed for employee %s", slot.employee_id)
        return sent

    def _has_open_entry_on(self, employee_id: int, day: date, time_zone: str) -> bool:
        start, end = local_day_bounds(day, time_zone)
        return any(e.is_open for e in self._timeclocks.list_for_employee_between(employee_id, start, end))

    def _send_entry_candidate(
        self,
        slot: ScheduleSlot,
        candidate: EntryReminderCandidate,
        today: date,
        now: datetime,
        options: NotificationOptions,
    ) -> bool:
        label = candidate.label
        if self._logs.exists(
            employee_id=slot.employee_id,
            entry_time=label,
            schedule_date=today,
            entry_slot=slot.entry_slot,
        ):
            return False

        subscriptions = self._subscriptions.list_for_employee(slot.employee_id)
        if not subscriptions:
            # Not logged: a later run inside the window can still deliver.
            logger.debug("Employee %s has no push subscriptions", slot.employee_id)
            return False

        message = messages.entry_reminder(
            entry_time=slot.entry_time,
            entry_slot=slot.entry_slot,
            is_lead_reminder=candidate.is_lead_reminder,
            lead_minutes=options.lead_minutes,
        )
        self._deliver_all(slot.employee_id, subscriptions, message)
        self._record(slot.employee_id, label, today, slot.entry_slot, now)
        return True

    # ------------------------------------------------------------------
    # Exit reminders
    # ------------------------------------------------------------------

    def _send_exit_reminders(self, now: datetime, local: LocalParts, options: NotificationOptions) -> int:
        current = local.minutes
        slots = matching_exit_slots(current, waves=options.exit_waves, lookback_minutes=options.lookback_minutes)
        if not slots:
            return 0

        open_by_employee: Dict[int, List[ClockEntry]] = defaultdict(list)
        for entry in self._timeclocks.list_open():
            if entry.is_open:
                open_by_employee[entry.employee_id].append(entry)
        if not open_by_employee:
            return 0

        today = local.date
        sent = 0
        for slot in slots:
            reminder_date = exit_reminder_date(today, slot, current)
            reminder_key = reminder_date.isoformat()
            candidates = sorted(
                employee_id
                for employee_id, entries in open_by_employee.items()
                if any(date_key(e.entry_time, options.time_zone) == reminder_key for e in entries)
            )
            if not candidates:
                continue

            notified = self._logs.list_notified_employee_ids(
                candidates,
                entry_time=slot.label,
                schedule_date=reminder_date,
                entry_slot=EXIT_REMINDER_SLOT,
            )
            message = messages.exit_reminder(label=slot.label)
            for employee_id in candidates:
                if employee_id in notified:
                    continue
                try:
                    subscriptions = self._subscriptions.list_for_employee(employee_id)
                    if not subscriptions:
                        continue
                    self._deliver_all(employee_id, subscriptions, message)
                    self._record(employee_id, slot.label, reminder_date, EXIT_REMINDER_SLOT, now)
                    sent += 1
                except Exception:
                    logger.exception("Exit reminder processing failed for employee %s", employee_id)
        return sent

    # ------------------------------------------------------------------
    # Delivery + log
    # ------------------------------------------------------------------

    def _deliver_all(self, employee_id: int, subscriptions: Sequence[PushSubscription], message: ReminderMessage) -> None:
        for subscription in subscriptions:
            try:
                self._delivery.deliver(subscription, message.title, message.body, message.data)
            except DeliveryError as exc:
                if exc.is_gone:
                    logger.info(
                        "Push endpoint gone (status %s) for employee %s, removing subscription",
                        exc.status_code, employee_id,
                    )
                    self._subscriptions.delete_by_endpoint(subscription.endpoint)
                else:
                    logger.warning(
                        "Push delivery failed for employee %s (status %s): %s",
                        employee_id, exc.status_code, exc,
                    )
            except Exception:
                logger.exception("Push delivery crashed for employee %s", employee_id)

    def _record(self, employee_id: int, label: str, schedule_date: date, entry_slot: int, now: datetime) -> None:
        self._logs.record(
            employee_id=employee_id,
            entry_time=label,
            schedule_date=schedule_date,
            entry_slot=entry_slot,
            notified_at=now,
        )
