from __future__ import annotations

from ..core.constants import DASHBOARD_URL
from ..core.enums import ReminderType
from .model import ReminderMessage


def entry_reminder(*, entry_time: str, entry_slot: int, is_lead_reminder: bool, lead_minutes: int) -> ReminderMessage:
    reminder_type = ReminderType.ENTRY_LEAD if is_lead_reminder else ReminderType.ENTRY
    if is_lead_reminder:
        title = "⏰ Your shift starts soon"
        body = f"{lead_minutes} minutes until your entry time ({entry_time})"
    else:
        title = "⏰ Time to clock in"
        body = f"It's time to clock in now ({entry_time})"

    return ReminderMessage(
        title=title,
        body=body,
        data={
            "url": DASHBOARD_URL,
            "entryTime": entry_time,
            "entrySlot": entry_slot,
            "reminderType": reminder_type.value,
        },
    )


def exit_reminder(*, label: str) -> ReminderMessage:
    return ReminderMessage(
        title="🕒 Remember to clock out",
        body="You are still clocked in. Remember to clock out when your shift ends.",
        data={"url": DASHBOARD_URL, "entryTime": label, "reminderType": ReminderType.EXIT.value},
    )
