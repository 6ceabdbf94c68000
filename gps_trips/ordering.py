"""Group validated points per device and order them by time."""

from __future__ import annotations

import re
from typing import Iterable

from gps_trips.models import DeviceTrack, Point

_DIGITS = re.compile(r"(\d+)", re.ASCII)


def natural_key(device_id: str) -> tuple[list[int | str], str]:
    """Natural, case-insensitive sort key ("dev2" < "dev10", "Dev1" ~ "dev1").

    The exact string is appended as a last tiebreak so the order is deterministic.
    """

    # re.split with a capture group alternates text/digits, so types line up position-wise
    parts: list[int | str] = [int(t) if i % 2 else t.lower() for i, t in enumerate(_DIGITS.split(device_id))]
    return parts, device_id


def group_by_device(points: Iterable[Point]) -> dict[str, DeviceTrack]:
    """Group points by exact device_id and stable-sort each group by timestamp.

    Args:
        points: Valid points in arrival order.

    Returns:
        device_id -> DeviceTrack. Grouping is case-sensitive.
    """

    groups: dict[str, list[Point]] = {}
    for p in points:
        groups.setdefault(p.device_id, []).append(p)

    # list.sort is stable: equal timestamps keep arrival order
    return {
        dev: DeviceTrack(device_id=dev, points=tuple(sorted(pts, key=lambda p: p.timestamp)))
        for dev, pts in groups.items()
    }


def ordered_tracks(points: Iterable[Point]) -> list[DeviceTrack]:
    """Device tracks in natural case-insensitive device order."""

    tracks = group_by_device(points)
    return [tracks[dev] for dev in sorted(tracks, key=natural_key)]
