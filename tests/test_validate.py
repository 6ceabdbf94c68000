from __future__ import annotations

from datetime import UTC, datetime

import pytest

from gps_trips.models import ColumnMap, Point, RawRow, RejectReason, RejectRecord, TripParams
from gps_trips.validate import RecordValidator, parse_coordinate, validate_row

COLS = ColumnMap(device_id=0, lat=1, lon=2, timestamp=3)


def _row(*fields: str, line_no: int = 2) -> RawRow:
    return RawRow(fields=tuple(fields), line_no=line_no)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("14.5995", 14.5995),
        ("-120.9842", -120.9842),
        ("14,5995", 14.5995),
        ("-14,5995", -14.5995),
        (" 14.5 ", 14.5),
        ("1 4.5", 14.5),
        ("90", 90.0),
        ("+1.5", 1.5),
        (".5", 0.5),
        ("1e1", 10.0),
    ],
)
def test_parse_coordinate_accepts(text, expected):
    assert parse_coordinate(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "abc", "NaN", "nan", "inf", "-Infinity", "1,2,3", "1.2.3", "1e400", "0x10", "1_000"])
def test_parse_coordinate_rejects(text):
    with pytest.raises(ValueError):
        parse_coordinate(text)


@pytest.mark.parametrize("fields", [(), ("", "", "", ""), ("  ", "\t", "", " ")])
def test_blank_row_is_skipped(fields):
    assert validate_row(_row(*fields), COLS) is None


def test_valid_row():
    res = validate_row(_row("  dev1 ", "14.5995", "120.9842", "2025-01-01T08:00:00Z", line_no=7), COLS)
    assert res == Point(
        device_id="dev1",
        lat=14.5995,
        lon=120.9842,
        timestamp=datetime(2025, 1, 1, 8, tzinfo=UTC),
        seq=7,
    )


@pytest.mark.parametrize(
    "fields, reason",
    [
        (("", "14.5", "121.0", "2025-01-01T08:00:00Z"), RejectReason.EMPTY_DEVICE_ID),
        (("   ", "abc", "121.0", "bad"), RejectReason.EMPTY_DEVICE_ID),
        (("dev1", "abc", "121.0", "2025-01-01T08:00:00Z"), RejectReason.NON_NUMERIC_COORDS),
        (("dev1", "14.5", "", "bad"), RejectReason.NON_NUMERIC_COORDS),
        (("dev1", "NaN", "121.0", "2025-01-01T08:00:00Z"), RejectReason.NON_NUMERIC_COORDS),
        (("dev1", "95", "121.0", "2025-01-01T08:00:00Z"), RejectReason.COORDS_OUT_OF_RANGE),
        (("dev1", "14.5", "-180.5", "bad"), RejectReason.COORDS_OUT_OF_RANGE),
        (("dev1", "14.5", "121.0", "not-a-time"), RejectReason.INVALID_TIMESTAMP),
        (("dev1", "14.5", "121.0", ""), RejectReason.INVALID_TIMESTAMP),
        (("dev1", "14.5"), RejectReason.NON_NUMERIC_COORDS),
    ],
)
def test_reject_reasons_first_failure_wins(fields, reason):
    res = validate_row(_row(*fields, line_no=12), COLS)
    assert isinstance(res, RejectRecord)
    assert res.reason == reason
    assert res.line_no == 12
    assert res.raw_fields == fields


def test_boundaries_are_inclusive():
    res = validate_row(_row("d", "-90", "180", "2025-01-01T08:00:00Z"), COLS)
    assert isinstance(res, Point)
    assert (res.lat, res.lon) == (-90.0, 180.0)


def test_column_order_follows_mapping():
    cols = ColumnMap(device_id=3, lat=0, lon=1, timestamp=2)
    res = validate_row(_row("14.5", "121.0", "2025-01-01T08:00:00Z", "dev9"), cols)
    assert isinstance(res, Point)
    assert res.device_id == "dev9"


def test_revalidating_rendered_point_is_idempotent():
    first = validate_row(_row("dev1", "14,5995", "120.98421234", "2025-01-01 16:00:00+08:00"), COLS)
    assert isinstance(first, Point)
    rendered = (first.device_id, repr(first.lat), repr(first.lon), first.timestamp.isoformat())
    again = validate_row(_row(*rendered), COLS)
    assert again == first


def test_record_validator():
    v = RecordValidator(COLS, TripParams(tz_name="Asia/Manila"))
    res = v.validate(["dev1", "14.5", "121.0", "2025-01-01 16:00:00"], 3)
    assert isinstance(res, Point)
    assert res.timestamp == datetime(2025, 1, 1, 8, tzinfo=UTC)
    assert v.validate(["", "", "", ""], 4) is None


def test_record_validator_rejects_bad_timezone():
    with pytest.raises(ValueError):
        RecordValidator(COLS, TripParams(tz_name="Mars/Olympus"))
