from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.timeclock.timeclock.common.datetime_utils import (
    date_key,
    format_hhmm,
    local_day_bounds,
    local_parts,
    parse_hhmm,
    to_local,
    weekday_index,
    wrapped_forward_diff,
)
from src.timeclock.timeclock.common.geo import distance_meters


@pytest.mark.parametrize(
    "value,expected",
    [
        ("09:00", 540),
        ("9:5", 545),
        ("9", 540),
        ("9.30", 570),
        (" 23:59 ", 1439),
        ("00:00", 0),
    ],
)
def test_parse_hhmm_accepts_loose_formats(value, expected):
    assert parse_hhmm(value) == expected


@pytest.mark.parametrize("value", ["", "24:00", "12:60", "abc", "9:00am", None])
def test_parse_hhmm_rejects_garbage(value):
    assert parse_hhmm(value) is None


def test_format_hhmm_wraps_negative_minutes():
    assert format_hhmm(-5) == "23:55"
    assert format_hhmm(1440 + 30) == "00:30"


def test_wrapped_forward_diff_crosses_midnight():
    assert wrapped_forward_diff(5, 1435) == 10
    assert wrapped_forward_diff(540, 540) == 0
    # A target 4 minutes ahead wraps to almost a full day.
    assert wrapped_forward_diff(536, 540) == 1436


def test_weekday_index_starts_on_sunday():
    assert weekday_index(date(2026, 3, 1)) == 0  # Sunday
    assert weekday_index(date(2026, 3, 2)) == 1  # Monday
    assert weekday_index(date(2026, 3, 7)) == 6  # Saturday


def test_to_local_uses_timezone_offset():
    local = to_local(datetime(2026, 7, 1, 22, 30, tzinfo=timezone.utc), "Europe/Madrid")
    # CEST is UTC+2, so this is already the next civil day.
    assert local.date() == date(2026, 7, 2)
    assert (local.hour, local.minute) == (0, 30)


def test_to_local_treats_naive_as_utc():
    local = to_local(datetime(2026, 1, 15, 8, 0), "Europe/Madrid")
    assert (local.hour, local.minute) == (9, 0)


def test_local_day_bounds_are_utc():
    start, end = local_day_bounds(date(2026, 1, 15), "Europe/Madrid")
    assert start == datetime(2026, 1, 14, 23, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 1, 15, 23, 0, tzinfo=timezone.utc)


def test_distance_meters_small_offsets():
    assert distance_meters(40.4168, -3.7038, 40.4168, -3.7038) == pytest.approx(0.0)
    # ~0.001 degrees of latitude is ~111 m.
    assert distance_meters(40.4168, -3.7038, 40.4178, -3.7038) == pytest.approx(111, abs=2)


def test_local_parts_across_dst_change():
    # Europe/Madrid switches to CEST at 01:00 UTC on 2026-03-29.
    before = local_parts(datetime(2026, 3, 29, 0, 30, tzinfo=timezone.utc), "Europe/Madrid")
    after = local_parts(datetime(2026, 3, 29, 1, 30, tzinfo=timezone.utc), "Europe/Madrid")

    assert (before.hour, before.minute) == (1, 30)
    assert (after.hour, after.minute) == (3, 30)
    assert after.minutes == 210
    assert after.date == date(2026, 3, 29)


def test_date_key_is_local_day():
    instant = datetime(2026, 1, 15, 23, 30, tzinfo=timezone.utc)

    assert date_key(instant, "Europe/Madrid") == "2026-01-16"
    assert date_key(instant, "America/New_York") == "2026-01-15"
