from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from ..common.datetime_utils import format_hhmm
from ..core.constants import DEFAULT_LEAD_MINUTES, DEFAULT_LOOKBACK_MINUTES, DEFAULT_TIME_ZONE


@dataclass(frozen=True)
class PushSubscription:
    employee_id: int
    endpoint: str
    p256dh: str
    auth: str

    def to_subscription_info(self) -> dict:
        return {"endpoint": self.endpoint, "keys": {"p256dh": self.p256dh, "auth": self.auth}}


@dataclass(frozen=True)
class ReminderWave:
    """Exit reminder burst: start, then `repeat_count` more every `interval_minutes`."""

    start_time: str
    interval_minutes: int
    repeat_count: int


@dataclass(frozen=True)
class EntryReminderCandidate:
    # Minutes relative to the schedule day's midnight; negative when a lead
    # reminder falls on the previous evening.
    offset_minutes: int
    is_lead_reminder: bool

    @property
    def label(self) -> str:
        return format_hhmm(self.offset_minutes)


@dataclass(frozen=True, order=True)
class ExitReminderSlot:
    minute_of_day: int
    # -1 when the wave rolled past midnight: the reminder belongs to the
    # civil day before the instant.
    date_offset: int = 0

    @property
    def label(self) -> str:
        return format_hhmm(self.minute_of_day)


DEFAULT_EXIT_WAVES: Tuple[ReminderWave, ...] = (
    ReminderWave(start_time="15:30", interval_minutes=30, repeat_count=3),
    ReminderWave(start_time="22:30", interval_minutes=30, repeat_count=3),
)


@dataclass(frozen=True)
class NotificationOptions:
    time_zone: str = DEFAULT_TIME_ZONE
    lead_minutes: int = DEFAULT_LEAD_MINUTES
    lookback_minutes: int = DEFAULT_LOOKBACK_MINUTES
    exit_waves: Tuple[ReminderWave, ...] = DEFAULT_EXIT_WAVES

    def override(
        self,
        *,
        time_zone: Optional[str] = None,
        lead_minutes: Optional[int] = None,
        lookback_minutes: Optional[int] = None,
    ) -> "NotificationOptions":
        return replace(
            self,
            time_zone=time_zone or self.time_zone,
            lead_minutes=self.lead_minutes if lead_minutes is None else int(lead_minutes),
            lookback_minutes=self.lookback_minutes if lookback_minutes is None else int(lookback_minutes),
        )


@dataclass(frozen=True)
class ReminderMessage:
    title: str
    body: str
    data: dict = field(default_factory=dict)


@dataclass
class NotificationRunResult:
    entry_sent: int = 0
    exit_sent: int = 0
    skipped: bool = False

    @property
    def total_sent(self) -> int:
        return self.entry_sent + self.exit_sent
