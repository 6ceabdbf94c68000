"""GeoJSON FeatureCollection export (one styled LineString per trip)."""

from __future__ import annotations

import colorsys
import json
from typing import Any, Callable, Sequence

from gps_trips.models import DEFAULT_TZ, Trip
from gps_trips.timeutils import format_time
from gps_trips.trips import compute_trip_stats

# (index, total) -> "#RRGGBB"
ColorFn = Callable[[int, int], str]

STROKE_WIDTH = 3
STROKE_OPACITY = 1.0


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL (hue in degrees, saturation/lightness in percent) to "#RRGGBB"."""

    h = (h % 360.0) / 360.0
    s = min(1.0, max(0.0, s / 100.0))
    l = min(1.0, max(0.0, l / 100.0))
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return "#{:02X}{:02X}{:02X}".format(*(int(v * 255 + 0.5) for v in (r, g, b)))


def hue_color(index: int, total: int) -> str:
    """Evenly spaced hues over [0, 360), saturation 70%, lightness 50%."""

    return hsl_to_hex(index / max(1, total) * 360.0, 70.0, 50.0)


def trip_feature(trip: Trip, trip_id: str, stroke: str, tz_name: str = DEFAULT_TZ) -> dict[str, Any]:
    """Build one Feature: stats rounded for display plus simplestyle stroke hints."""

    stats = compute_trip_stats(trip.points)
    return {
        "type": "Feature",
        "properties": {
            "trip_id": trip_id,
            "device_id": trip.device_id,
            "point_count": stats.point_count,
            "total_distance_km": round(stats.total_distance_km, 3),
            "duration_min": round(stats.duration_min, 1),
            "avg_speed_kmh": round(stats.avg_speed_kmh, 2),
            "max_speed_kmh": round(stats.max_speed_kmh, 2),
            "start_time": format_time(stats.start_time, tz_name),
            "end_time": format_time(stats.end_time, tz_name),
            "stroke": stroke,
            "stroke-width": STROKE_WIDTH,
            "stroke-opacity": STROKE_OPACITY,
        },
        "geometry": {
            "type": "LineString",
            "coordinates": [[round(p.lon, 6), round(p.lat, 6)] for p in trip.points],
        },
    }


def build_feature_collection(
    trips: Sequence[Trip],
    color_fn: ColorFn = hue_color,
    tz_name: str = DEFAULT_TZ,
) -> dict[str, Any]:
    """Assemble the FeatureCollection.

    Args:
        trips: Trips in emission order (device natural order, then time).
        color_fn: Stroke color for (index, total).
        tz_name: Timezone used to render start/end times.

    Returns:
        {"type": "FeatureCollection", "features": [...]} with trip ids
        "trip_1", "trip_2", ... in emission order.
    """

    total = len(trips)
    features = [
        trip_feature(trip, f"trip_{i + 1}", color_fn(i, total), tz_name)
        for i, trip in enumerate(trips)
    ]
    return {"type": "FeatureCollection", "features": features}


def dump_feature_collection(fc: dict[str, Any]) -> str:
    """Pretty-printed JSON; key order follows insertion order."""

    return json.dumps(fc, ensure_ascii=False, indent=2) + "\n"
