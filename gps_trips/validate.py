"""Row validation: raw CSV fields -> Point, or a RejectRecord explaining why not."""

from __future__ import annotations

import math
import re
from typing import Sequence

from gps_trips.models import (
    DEFAULT_TZ,
    ColumnMap,
    ColumnRole,
    Point,
    RawRow,
    RejectReason,
    RejectRecord,
    TripParams,
)
from gps_trips.timeutils import parse_timestamp, tzinfo_from_name

_COMMA_DECIMAL = re.compile(r"-?\d+,\d+", re.ASCII)
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_coordinate(text: str) -> float:
    """Parse a latitude/longitude value.

    Spaces are ignored and a single comma decimal separator is accepted
    ("14,5995" -> 14.5995). NaN, Infinity and overflowing values are rejected.

    Raises:
        ValueError: If the text is not a finite decimal number.
    """

    s = text.strip().replace(" ", "")
    if _COMMA_DECIMAL.fullmatch(s):
        s = s.replace(",", ".")
    if not _DECIMAL.fullmatch(s):
        raise ValueError(f"非数字坐标：{text!r}")
    value = float(s)
    if not math.isfinite(value):
        raise ValueError(f"坐标溢出：{text!r}")
    return value


def is_blank(fields: Sequence[str]) -> bool:
    """True if every field is empty or whitespace (also for a zero-length row)."""

    return all(not f.strip() for f in fields)


def validate_row(row: RawRow, columns: ColumnMap, tz_name: str = DEFAULT_TZ) -> Point | RejectRecord | None:
    """Validate one data row.

    Checks run in a fixed order and the first failure wins:
    blank row (skipped, returns None), empty device id, non-numeric
    coordinates, out-of-range coordinates, unparsable timestamp.

    Args:
        row: Raw CSV record.
        columns: Resolved header mapping.
        tz_name: Timezone for timestamps without an offset.

    Returns:
        Point on success, RejectRecord on a recoverable failure, None for blank rows.
    """

    fields = row.fields
    if is_blank(fields):
        return None

    device_id = columns.pick(fields, ColumnRole.DEVICE_ID).strip()
    if not device_id:
        return RejectRecord(row.line_no, RejectReason.EMPTY_DEVICE_ID, fields)

    try:
        lat = parse_coordinate(columns.pick(fields, ColumnRole.LAT))
        lon = parse_coordinate(columns.pick(fields, ColumnRole.LON))
    except ValueError:
        return RejectRecord(row.line_no, RejectReason.NON_NUMERIC_COORDS, fields)

    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return RejectRecord(row.line_no, RejectReason.COORDS_OUT_OF_RANGE, fields)

    try:
        ts = parse_timestamp(columns.pick(fields, ColumnRole.TIMESTAMP), tz_name)
    except ValueError:
        return RejectRecord(row.line_no, RejectReason.INVALID_TIMESTAMP, fields)

    return Point(device_id=device_id, lat=lat, lon=lon, timestamp=ts, seq=row.line_no)


class RecordValidator:
    """Validator bound to one input header and one parameter set."""

    def __init__(self, columns: ColumnMap, params: TripParams | None = None) -> None:
        self._columns = columns
        self._params = params or TripParams()
        # fail fast on a bad timezone instead of rejecting every naive timestamp
        tzinfo_from_name(self._params.tz_name)

    @property
    def columns(self) -> ColumnMap:
        return self._columns

    def validate(self, raw_fields: Sequence[str], line_no: int) -> Point | RejectRecord | None:
        return validate_row(RawRow(tuple(raw_fields), line_no), self._columns, self._params.tz_name)
