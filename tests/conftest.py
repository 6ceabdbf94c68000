from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from gps_trips.geo import EARTH_RADIUS_KM
from gps_trips.models import Point

T0 = datetime(2025, 1, 1, 8, 0, 0, tzinfo=UTC)

# degrees of latitude spanning exactly 1 km along a meridian
KM_IN_LAT_DEG = 180.0 / (math.pi * EARTH_RADIUS_KM)


def mk_point(device_id: str, minutes: float, lat: float = 14.5, lon: float = 121.0, seq: int = 0) -> Point:
    return Point(device_id=device_id, lat=lat, lon=lon, timestamp=T0 + timedelta(minutes=minutes), seq=seq)


@pytest.fixture
def write_csv(tmp_path: Path):
    def _write(text: str, name: str = "points.csv") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write
