from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from ..core.constants import MINUTES_PER_DAY

_HHMM_RE = re.compile(r"^(\d{1,2})(?::(\d{1,2}))?$")


@dataclass(frozen=True)
class LocalParts:
    year: int
    month: int
    day: int
    hour: int
    minute: int

    @property
    def date(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def minutes(self) -> int:
        return minutes_of_day(self.hour, self.minute)


def now_utc() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def _as_aware(instant: datetime) -> datetime:
    # Naive datetimes from the DB driver are stored as UTC.
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def to_local(instant: datetime, time_zone: str) -> datetime:
    return _as_aware(instant).astimezone(ZoneInfo(time_zone))


def local_parts(instant: datetime, time_zone: str) -> LocalParts:
    """Civil date/time of an absolute instant in an IANA timezone."""
    local = to_local(instant, time_zone)
    return LocalParts(local.year, local.month, local.day, local.hour, local.minute)


def date_key(instant: datetime, time_zone: str) -> str:
    """Stable "YYYY-MM-DD" day identifier, independent of server-local time."""
    return to_local(instant, time_zone).strftime("%Y-%m-%d")


def local_day_bounds(day: date, time_zone: str) -> Tuple[datetime, datetime]:
    """Aware [start, end) of a civil day, expressed in UTC."""
    tz = ZoneInfo(time_zone)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_instant(day: date, minutes: int, time_zone: str) -> datetime:
    """Aware instant for a civil date plus minute-of-day."""
    return datetime.combine(day, time(minutes // 60, minutes % 60), tzinfo=ZoneInfo(time_zone))


def weekday_index(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return day.isoweekday() % 7


def minutes_of_day(hour: int, minute: int) -> int:
    return wrap_minutes(hour * 60 + minute)


def wrap_minutes(value: int) -> int:
    return value % MINUTES_PER_DAY


def wrapped_forward_diff(current: int, target: int) -> int:
    """Minutes elapsed from target to current, going forward through midnight."""
    return wrap_minutes(current - target)


def parse_hhmm(value: Optional[str]) -> Optional[int]:
    """Parse a schedule time into minutes-of-day.

    Accepts "HH:MM", a bare hour ("9") and "." as separator ("9.30").
    Returns None for anything else.
    """

    if value is None:
        return None
    text = str(value).strip().replace(".", ":")
    m = _HHMM_RE.match(text)
    if not m:
        return None
    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def format_hhmm(minutes: int) -> str:
    minutes = wrap_minutes(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
