from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..core.constants import NON_WORKING_ENTRY_TIME
from ..core.enums import Weekday
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ScheduleSlot:
    """One expected entry for (employee, weekday, slot)."""

    employee_id: int
    day_of_week: Weekday
    entry_slot: int
    entry_time: str
    is_work_day: bool = True

    @property
    def entry_minutes(self) -> Optional[int]:
        """Minutes-of-day of entry_time, or None when it cannot be parsed."""
        return parse_hhmm(self.entry_time)


@dataclass(frozen=True)
class DaySchedule:
    entry1: Optional[str] = None
    entry2: Optional[str] = None
    is_active: bool = False

    def to_dict(self) -> dict:
        return {"entry1": self.entry1 or "", "entry2": self.entry2 or "", "isActive": self.is_active}


DayPayload = Union[str, Mapping[str, object], None]


def _normalize_time(value: object, day: Weekday) -> Optional[str]:
    text = str(value or "").strip()
    if not text:
        return None
    minutes = parse_hhmm(text)
    if minutes is None:
        raise ValidationError(f"Invalid entry time for {day.key}: {text!r}")
    return format_hhmm(minutes)


@dataclass(frozen=True)
class WeeklySchedule:
    """Exactly one DaySchedule per Weekday."""

    days: Dict[Weekday, DaySchedule] = field(default_factory=lambda: {d: DaySchedule() for d in Weekday})

    def day(self, weekday: Weekday) -> DaySchedule:
        return self.days.get(weekday, DaySchedule())

    @classmethod
    def from_payload(cls, payload: Mapping[str, DayPayload]) -> "WeeklySchedule":
        """Build from the admin form shape.

        Each day is either a plain "HH:MM" string (first entry only, active when
        non-empty) or a mapping with entry1/entry2/isActive. Unknown day keys are
        ignored; missing days are non-working.
        """

        days = {d: DaySchedule() for d in Weekday}
        for key, raw in (payload or {}).items():
            try:
                weekday = Weekday.from_key(key)
            except KeyError:
                continue

            if raw is None or isinstance(raw, str):
                entry1 = _normalize_time(raw, weekday)
                days[weekday] = DaySchedule(entry1=entry1, is_active=entry1 is not None)
                continue

            is_active = bool(raw.get("isActive", raw.get("is_active", False)))
            if not is_active:
                continue
            entry1 = _normalize_time(raw.get("entry1"), weekday)
            entry2 = _normalize_time(raw.get("entry2"), weekday)
            days[weekday] = DaySchedule(entry1=entry1, entry2=entry2, is_active=True)
        return cls(days=days)

    @classmethod
    def from_slots(cls, slots: Iterable[ScheduleSlot]) -> "WeeklySchedule":
        entries: Dict[Weekday, Dict[str, object]] = {}
        for slot in slots:
            day = entries.setdefault(slot.day_of_week, {"entry1": None, "entry2": None, "is_active": slot.is_work_day})
            if not slot.is_work_day:
                day["is_active"] = False
            elif slot.entry_slot == 2:
                day["entry2"] = slot.entry_time
            else:
                day["entry1"] = slot.entry_time

        days = {d: DaySchedule() for d in Weekday}
        for weekday, e in entries.items():
            days[weekday] = DaySchedule(entry1=e["entry1"], entry2=e["entry2"], is_active=bool(e["is_active"]))
        return cls(days=days)

    def to_slots(self, employee_id: int) -> List[ScheduleSlot]:
        slots: List[ScheduleSlot] = []
        for weekday in Weekday:
            day = self.day(weekday)
            if not day.is_active or not (day.entry1 or day.entry2):
                slots.append(
                    ScheduleSlot(
                        employee_id=employee_id,
                        day_of_week=weekday,
                        entry_slot=1,
                        entry_time=NON_WORKING_ENTRY_TIME,
                        is_work_day=False,
                    )
                )
                continue
            for entry_slot, entry_time in ((1, day.entry1), (2, day.entry2)):
                if entry_time:
                    slots.append(
                        ScheduleSlot(
                            employee_id=employee_id,
                            day_of_week=weekday,
                            entry_slot=entry_slot,
                            entry_time=entry_time,
                        )
                    )
        return slots

    def to_dict(self) -> dict:
        return {d.key: self.day(d).to_dict() for d in Weekday}
