from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Device:
    device_id: str
    lat: float
    lon: float


FIELDNAMES = ["device_id", "lat", "lon", "timestamp"]

# A few broken rows so the reject log has something to show
MALFORMED = [
    {"device_id": "", "lat": "14.5995", "lon": "120.9842", "timestamp": "2025-01-01T08:00:00Z"},
    {"device_id": "dev1", "lat": "abc", "lon": "120.9842", "timestamp": "2025-01-01T08:00:00Z"},
    {"device_id": "dev1", "lat": "95.0", "lon": "120.9842", "timestamp": "2025-01-01T08:00:00Z"},
    {"device_id": "dev2", "lat": "14.5995", "lon": "120.9842", "timestamp": "not-a-time"},
]


def generate_points(
    *,
    rows: int,
    seed: int,
    start: datetime,
    devices: list[Device],
    malformed: bool = True,
) -> list[dict[str, str]]:
    """Generate fake device rows: short drives, long pauses and occasional jumps."""

    rng = random.Random(seed)
    out: list[dict[str, str]] = []

    per_device = max(1, rows // max(1, len(devices)))
    for dev in devices:
        lat, lon = dev.lat, dev.lon
        cur = start.replace(tzinfo=UTC)
        heading = rng.uniform(0, 2 * math.pi)
        for _ in range(per_device):
            r = rng.random()
            if r < 0.05:
                # parked: 30-90 minutes without a fix
                cur = cur + timedelta(minutes=rng.uniform(30, 90))
            elif r < 0.08:
                # GPS jump of several km
                lat += rng.uniform(0.03, 0.06)
                cur = cur + timedelta(seconds=rng.uniform(20, 60))
            else:
                heading += rng.uniform(-0.4, 0.4)
                step = rng.uniform(0.0005, 0.003)  # roughly 50-300 m
                lat += step * math.cos(heading)
                lon += step * math.sin(heading)
                cur = cur + timedelta(seconds=rng.uniform(20, 120))
            out.append(
                {
                    "device_id": dev.device_id,
                    "lat": f"{lat:.6f}",
                    "lon": f"{lon:.6f}",
                    "timestamp": cur.isoformat(timespec="seconds").replace("+00:00", "Z"),
                }
            )

    # Devices report out of order in real exports
    rng.shuffle(out)
    if malformed:
        for row in MALFORMED:
            out.insert(rng.randrange(len(out) + 1), dict(row))
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake points.csv for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="data/points.csv", help="Output CSV path")
    p.add_argument("--rows", type=int, default=600, help="Number of rows (split across devices)")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2025-01-01 08:00:00", help="Start time in UTC")
    p.add_argument("--no-malformed", action="store_true", help="Do not inject invalid rows")
    args = p.parse_args()

    devices = [
        Device("dev1", 14.5995000, 120.9842000),
        Device("dev2", 14.6760000, 121.0437000),
        Device("Dev10", 14.5547000, 121.0244000),
    ]
    rows = generate_points(
        rows=args.rows,
        seed=args.seed,
        start=datetime.fromisoformat(args.start),
        devices=devices,
        malformed=not args.no_malformed,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
