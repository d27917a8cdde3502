"""Reminder slot generation.

Pure functions: given a scheduled entry time or the exit wave configuration,
and the current minute-of-day, decide which reminder instants are due. The
lookback window lets a late or missed run still pick up instants it did not
observe, without unbounded catch-up.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, List, Set

from ..common.datetime_utils import parse_hhmm, wrap_minutes, wrapped_forward_diff
from ..core.constants import MINUTES_PER_DAY
from .model import EntryReminderCandidate, ExitReminderSlot, ReminderWave

logger = logging.getLogger(__name__)


def _clamp_lookback(lookback_minutes: int) -> int:
    return max(0, min(int(lookback_minutes), MINUTES_PER_DAY - 1))


def entry_candidates(entry_minutes: int, lead_minutes: int) -> List[EntryReminderCandidate]:
    """Lead reminder at T - lead plus the on-time reminder at T.

    With a zero lead both instants coincide and only the on-time one is kept.
    """

    lead = max(0, int(lead_minutes))
    candidates = []
    if lead > 0:
        candidates.append(EntryReminderCandidate(offset_minutes=entry_minutes - lead, is_lead_reminder=True))
    candidates.append(EntryReminderCandidate(offset_minutes=entry_minutes, is_lead_reminder=False))
    return candidates


def matching_entry_candidates(
    entry_minutes: int,
    current_minutes: int,
    *,
    lead_minutes: int,
    lookback_minutes: int,
) -> List[EntryReminderCandidate]:
    """Candidates already reached today and at most `lookback_minutes` old.

    Entry reminders are tied to today's schedule, so an instant later in the
    day (negative elapsed time) is never due.
    """

    lookback = _clamp_lookback(lookback_minutes)
    return [
        c
        for c in entry_candidates(entry_minutes, lead_minutes)
        if 0 <= current_minutes - c.offset_minutes <= lookback
    ]


def expand_waves(waves: Iterable[ReminderWave]) -> Set[ExitReminderSlot]:
    slots: Set[ExitReminderSlot] = set()
    for wave in waves:
        start = parse_hhmm(wave.start_time)
        if start is None:
            logger.warning("Ignoring exit reminder wave with invalid start %r", wave.start_time)
            continue

        for k in range(max(0, int(wave.repeat_count)) + 1):
            raw = start + k * int(wave.interval_minutes)
            slots.add(ExitReminderSlot(minute_of_day=wrap_minutes(raw), date_offset=-(raw // MINUTES_PER_DAY)))
    return slots


def matching_exit_slots(
    current_minutes: int,
    *,
    waves: Iterable[ReminderWave],
    lookback_minutes: int,
) -> List[ExitReminderSlot]:
    lookback = _clamp_lookback(lookback_minutes)
    return sorted(
        s for s in expand_waves(waves) if wrapped_forward_diff(current_minutes, s.minute_of_day) <= lookback
    )


def exit_reminder_date(today: date, slot: ExitReminderSlot, current_minutes: int) -> date:
    """Civil date an exit reminder is attributed to.

    A slot later in the day than "now" can only have matched by wrapping past
    midnight, so its instant happened yesterday; the wave's own offset then
    moves it back to the day the wave started.
    """

    instant_shift = -1 if current_minutes < slot.minute_of_day else 0
    return today + timedelta(days=instant_shift + slot.date_offset)
