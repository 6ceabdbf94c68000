"""Trip segmentation and per-trip statistics."""

from __future__ import annotations

from typing import Iterable, Sequence

from gps_trips.geo import point_distance_km
from gps_trips.models import DeviceTrack, Point, Trip, TripParams, TripStats


def is_gap(prev: Point, curr: Point, params: TripParams) -> bool:
    """True if the step prev -> curr breaks a trip (time or distance gap)."""

    dt_s = (curr.timestamp - prev.timestamp).total_seconds()
    if dt_s > params.max_gap_seconds:
        return True
    return point_distance_km(prev, curr) > params.max_jump_km


def segment_track(track: DeviceTrack, params: TripParams) -> list[Trip]:
    """Split one device's ordered points into trips.

    The first point opens a trip. Every following point is compared with the
    last point of the current trip: on a gap the current trip is sealed and the
    point opens a new one, otherwise it is appended.

    Args:
        track: Device points sorted by timestamp.
        params: Gap thresholds.

    Returns:
        Trips in time order. An empty track yields no trips.
    """

    if not track.points:
        return []

    trips: list[Trip] = []
    current: list[Point] = [track.points[0]]
    for curr in track.points[1:]:
        if is_gap(current[-1], curr, params):
            trips.append(Trip(device_id=track.device_id, points=tuple(current)))
            current = [curr]
        else:
            current.append(curr)

    trips.append(Trip(device_id=track.device_id, points=tuple(current)))
    return trips


class TripSegmenter:
    """Segmenter bound to one parameter set."""

    def __init__(self, params: TripParams | None = None) -> None:
        self.params = params or TripParams()

    def segment(self, track: DeviceTrack) -> list[Trip]:
        return segment_track(track, self.params)


def split_trips(tracks: Iterable[DeviceTrack], params: TripParams) -> list[Trip]:
    """Segment every track and concatenate the trips in track order."""

    segmenter = TripSegmenter(params)
    trips: list[Trip] = []
    for track in tracks:
        trips.extend(segmenter.segment(track))
    return trips


def compute_trip_stats(points: Sequence[Point]) -> TripStats:
    """Compute distance, duration and speeds of an ordered run of points.

    Segments with zero elapsed time add their distance but are left out of the
    max speed. All values are returned at full precision.

    Raises:
        ValueError: If points is empty.
    """

    if not points:
        raise ValueError("trip has no points")

    total_km = 0.0
    max_kmh = 0.0
    for p0, p1 in zip(points, points[1:]):
        d_km = point_distance_km(p0, p1)
        total_km += d_km
        dt_s = (p1.timestamp - p0.timestamp).total_seconds()
        if dt_s > 0:
            max_kmh = max(max_kmh, d_km / (dt_s / 3600.0))

    first, last = points[0], points[-1]
    duration_min = max(0.0, (last.timestamp - first.timestamp).total_seconds() / 60.0)
    avg_kmh = total_km / (duration_min / 60.0) if duration_min > 0 else 0.0

    return TripStats(
        point_count=len(points),
        total_distance_km=total_km,
        duration_min=duration_min,
        avg_speed_kmh=avg_kmh,
        max_speed_kmh=max_kmh,
        start_time=first.timestamp,
        end_time=last.timestamp,
    )
