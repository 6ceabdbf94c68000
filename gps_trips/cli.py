"""Command-line interface for gps_trips.

Run:
    python -m gps_trips split --csv data/points.csv --out data/trips.geojson
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

from gps_trips.csv_io import load_points
from gps_trips.errors import TripSplitError
from gps_trips.models import DEFAULT_MAX_GAP_SECONDS, DEFAULT_MAX_JUMP_KM, DEFAULT_TZ, TripParams
from gps_trips.ordering import ordered_tracks
from gps_trips.pipeline import process_file


def _params(args: argparse.Namespace) -> TripParams:
    return TripParams(
        max_gap_seconds=float(getattr(args, "max_gap_seconds", DEFAULT_MAX_GAP_SECONDS)),
        max_jump_km=float(getattr(args, "max_jump_km", DEFAULT_MAX_JUMP_KM)),
        tz_name=args.tz,
    )


def _cmd_split(args: argparse.Namespace) -> int:
    result = process_file(args.csv, args.out, args.rejects, _params(args))
    s = result.summary
    print(f"rows={s.rows_total}, parsed={s.rows_parsed}, rejected={s.rows_rejected}, blank={s.rows_blank}")
    if s.rows_rejected:
        print(f"剔除明细已写入：{args.rejects}")
    print(f"OK: wrote {len(result.trips)} trip(s) to {args.out}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    loaded = load_points(args.csv, _params(args))
    summary = loaded.summary
    tracks = ordered_tracks(loaded.points)

    print("### CSV字段")
    print(", ".join(summary.fieldnames))
    print(f"delimiter={summary.delimiter!r}")
    print()

    print("### 行数")
    print(
        f"total_rows={summary.rows_total}, parsed={summary.rows_parsed}, "
        f"rejected={summary.rows_rejected}, blank={summary.rows_blank}"
    )
    print()

    if summary.reject_counts:
        print("### 剔除原因")
        for reason, n in sorted(summary.reject_counts.items()):
            print(f"{reason}: {n}")
        print()

    print("### 设备")
    print(f"devices={len(tracks)}")
    for t in tracks:
        print(f"{t.device_id}: points={len(t.points)}")
    print()

    if args.json:
        payload = asdict(summary) | {
            "fieldnames": list(summary.fieldnames),
            "devices": {t.device_id: len(t.points) for t in tracks},
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="gps_trips")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_split = sub.add_parser("split", help="切分行程并导出 trips.geojson 与 rejects.log")
    p_split.add_argument("--csv", type=str, default="data/points.csv", help="输入CSV路径")
    p_split.add_argument("--out", type=str, default="data/trips.geojson", help="输出GeoJSON路径")
    p_split.add_argument("--rejects", type=str, default="data/rejects.log", help="剔除行日志路径")
    p_split.add_argument(
        "--max-gap-seconds",
        type=float,
        default=DEFAULT_MAX_GAP_SECONDS,
        help="相邻两点时间间隔超过该值（秒）则切分新行程（默认1500，即25分钟）",
    )
    p_split.add_argument(
        "--max-jump-km",
        type=float,
        default=DEFAULT_MAX_JUMP_KM,
        help="相邻两点距离超过该值（公里）则切分新行程（默认2.0）",
    )
    p_split.add_argument(
        "--tz",
        type=str,
        default=DEFAULT_TZ,
        help="时区（IANA）：无时区的时间按此解释，start_time/end_time 也按此输出",
    )
    p_split.set_defaults(func=_cmd_split)

    p_check = sub.add_parser("check", help="只校验输入（表头映射/行数/剔除原因），不写任何文件")
    p_check.add_argument("--csv", type=str, default="data/points.csv", help="输入CSV路径")
    p_check.add_argument("--tz", type=str, default=DEFAULT_TZ, help="时区（IANA）")
    p_check.add_argument("--json", action="store_true", help="额外输出JSON（便于后处理）")
    p_check.set_defaults(func=_cmd_check)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint. Fatal input/output errors exit with 1."""

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except (TripSplitError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
