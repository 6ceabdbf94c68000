"""Data models for device points, rejects and trips."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Final


DEFAULT_MAX_GAP_SECONDS: Final[float] = 25 * 60.0
DEFAULT_MAX_JUMP_KM: Final[float] = 2.0
DEFAULT_TZ: Final[str] = "UTC"


@dataclass(frozen=True, slots=True)
class RawRow:
    """One CSV record as read from disk.

    Attributes:
        fields: Original string values, in column order.
        line_no: 1-based record number (the header is line 1).
    """

    fields: tuple[str, ...]
    line_no: int


class ColumnRole(StrEnum):
    """Logical columns the input table must provide."""

    DEVICE_ID = "device_id"
    LAT = "lat"
    LON = "lon"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Fixed positional mapping from logical column to field index."""

    device_id: int
    lat: int
    lon: int
    timestamp: int

    def pick(self, fields: tuple[str, ...], role: ColumnRole) -> str:
        """Return the raw value of a role; missing trailing fields read as ""."""

        idx = getattr(self, role.value)
        return fields[idx] if idx < len(fields) else ""


@dataclass(frozen=True, slots=True)
class Point:
    """A validated GPS fix.

    Attributes:
        device_id: Trimmed, non-empty device identifier.
        lat: Latitude in decimal degrees, within [-90, 90].
        lon: Longitude in decimal degrees, within [-180, 180].
        timestamp: Aware instant, normalized to UTC.
        seq: Arrival index in the input; only used to keep sorting stable.
    """

    device_id: str
    lat: float
    lon: float
    timestamp: datetime
    seq: int = 0


class RejectReason(StrEnum):
    """Why a data row was dropped during validation."""

    EMPTY_DEVICE_ID = "empty device_id"
    NON_NUMERIC_COORDS = "non-numeric lat/lon"
    COORDS_OUT_OF_RANGE = "coords out of range"
    INVALID_TIMESTAMP = "invalid timestamp"


@dataclass(frozen=True, slots=True)
class RejectRecord:
    """A dropped row with enough context to diagnose it."""

    line_no: int
    reason: RejectReason
    raw_fields: tuple[str, ...]

    def to_log_line(self) -> str:
        """Render as `line=<n>\\treason=<reason>\\trow=<fields>`."""

        return f"line={self.line_no}\treason={self.reason}\trow={','.join(self.raw_fields)}"


@dataclass(frozen=True, slots=True)
class DeviceTrack:
    """All points of one device, ascending by timestamp (stable for ties)."""

    device_id: str
    points: tuple[Point, ...]


@dataclass(frozen=True, slots=True)
class Trip:
    """A contiguous, non-empty run of one device's ordered points."""

    device_id: str
    points: tuple[Point, ...]

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]


@dataclass(frozen=True, slots=True)
class TripStats:
    """Kinematic summary of one trip.

    Note:
        Values are full precision. Rounding for display happens when the
        GeoJSON properties are built.
    """

    point_count: int
    total_distance_km: float
    duration_min: float
    avg_speed_kmh: float
    max_speed_kmh: float
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True, slots=True)
class TripParams:
    """Parameters controlling validation and trip segmentation."""

    # A pause strictly longer than this between consecutive fixes starts a new trip.
    max_gap_seconds: float = DEFAULT_MAX_GAP_SECONDS
    # A jump strictly longer than this between consecutive fixes starts a new trip.
    max_jump_km: float = DEFAULT_MAX_JUMP_KM
    # Used for naive timestamps and for rendering start/end times.
    tz_name: str = DEFAULT_TZ
