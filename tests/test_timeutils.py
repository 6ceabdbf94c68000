from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from gps_trips.timeutils import format_time, parse_timestamp, tzinfo_from_name

EXPECTED = datetime(2024, 5, 1, 10, 0, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "text",
    [
        "2024-05-01T10:00:00Z",
        "2024-05-01T10:00:00+00:00",
        "2024-05-01 10:00:00",
        "2024-05-01 18:00:00+08:00",
        "  2024-05-01T10:00:00Z  ",
        "@1714557600",
        "Wed, 01 May 2024 10:00:00 +0000",
        "2024/05/01 10:00:00",
        "2024/05/01 10:00",
        "05/01/2024 10:00",
        "01.05.2024 10:00:00",
    ],
)
def test_parse_timestamp_formats(text):
    assert parse_timestamp(text) == EXPECTED


def test_parse_timestamp_date_only():
    assert parse_timestamp("2024-05-01") == datetime(2024, 5, 1, tzinfo=UTC)


def test_naive_timestamp_uses_tz_name():
    dt = parse_timestamp("2024-05-01 18:00:00", "Asia/Manila")
    assert dt == EXPECTED
    assert dt.tzinfo is UTC


def test_offset_is_normalized_to_utc():
    dt = parse_timestamp("2024-05-01T12:00:00+02:00", "Asia/Manila")
    assert dt == EXPECTED
    assert dt.tzinfo is UTC


def test_slash_date_is_day_first_when_month_is_impossible():
    assert parse_timestamp("25/12/2024 08:30") == datetime(2024, 12, 25, 8, 30, tzinfo=UTC)


def test_fallback_formats_use_tz_name():
    assert parse_timestamp("01.05.2024 12:00", "Europe/Berlin") == EXPECTED


def test_naive_times_across_spring_forward_are_real_elapsed_time():
    before = parse_timestamp("2024-03-31 01:50:00", "Europe/Berlin")
    after = parse_timestamp("2024-03-31 03:10:00", "Europe/Berlin")
    assert after - before == timedelta(minutes=20)


def test_naive_times_across_fall_back_are_real_elapsed_time():
    # 01:50 is still CEST (23:50Z the day before), 03:10 is already CET (02:10Z)
    before = parse_timestamp("2024-10-27 01:50:00", "Europe/Berlin")
    after = parse_timestamp("2024-10-27 03:10:00", "Europe/Berlin")
    assert after - before == timedelta(hours=2, minutes=20)


@pytest.mark.parametrize(
    "text",
    ["", "   ", "yesterday-ish", "2024-13-01T00:00:00Z", "@abc", "@inf", "12:00", "31/31/2024 10:00", "2024/05/01T10:00"],
)
def test_parse_timestamp_rejects(text):
    with pytest.raises(ValueError):
        parse_timestamp(text)


def test_format_time_renders_offset():
    dt = datetime(2024, 5, 1, 12, 0, 0, 500000, tzinfo=timezone(timedelta(hours=2)))
    assert format_time(dt) == "2024-05-01T10:00:00+00:00"
    assert format_time(dt, "Asia/Manila") == "2024-05-01T18:00:00+08:00"


def test_invalid_tz_name():
    with pytest.raises(ValueError):
        tzinfo_from_name("Not/AZone")
