"""End-to-end batch pass: CSV -> trips -> GeoJSON + reject log."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gps_trips.csv_io import CsvSummary, load_points, render_rejects_log
from gps_trips.errors import OutputError
from gps_trips.geojson import ColorFn, build_feature_collection, dump_feature_collection, hue_color
from gps_trips.models import RejectRecord, Trip, TripParams
from gps_trips.ordering import ordered_tracks
from gps_trips.trips import split_trips

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Everything one pass produces, kept in memory until written."""

    summary: CsvSummary
    rejects: list[RejectRecord]
    trips: list[Trip]
    feature_collection: dict[str, Any]

    @property
    def devices(self) -> int:
        return len({t.device_id for t in self.trips})


def run_pipeline(
    csv_path: str | Path,
    params: TripParams | None = None,
    color_fn: ColorFn = hue_color,
) -> PipelineResult:
    """Validate, order, segment and export in memory. Nothing is written.

    Raises:
        InputFileError: Input missing/unreadable/empty.
        MissingColumnError: Header lacks a required column.
    """

    params = params or TripParams()
    loaded = load_points(csv_path, params)
    tracks = ordered_tracks(loaded.points)
    trips = split_trips(tracks, params)
    fc = build_feature_collection(trips, color_fn=color_fn, tz_name=params.tz_name)
    logger.info(
        "points=%s rejects=%s devices=%s trips=%s",
        len(loaded.points),
        len(loaded.rejects),
        len(tracks),
        len(trips),
    )
    return PipelineResult(summary=loaded.summary, rejects=loaded.rejects, trips=trips, feature_collection=fc)


def write_outputs(result: PipelineResult, geojson_path: str | Path, rejects_path: str | Path) -> None:
    """Write the GeoJSON document and the reject log.

    Both files are staged as "*.tmp" siblings first and renamed into place only
    once every file was written. If a rename fails, files already renamed are
    restored to their previous content (or removed if they did not exist), so
    a failure never leaves one new output next to one old output.

    Raises:
        OutputError: If a destination cannot be created or written.
    """

    targets = [
        (Path(geojson_path), dump_feature_collection(result.feature_collection)),
        (Path(rejects_path), render_rejects_log(result.rejects)),
    ]
    staged: list[tuple[Path, Path]] = []
    published: list[tuple[Path, bytes | None]] = []
    try:
        for path, text in targets:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            staged.append((tmp, path))
            tmp.write_text(text, encoding="utf-8")
        for tmp, path in staged:
            previous = path.read_bytes() if path.is_file() else None
            tmp.replace(path)
            published.append((path, previous))
    except OSError as exc:
        _roll_back(staged, published)
        raise OutputError(f"无法写入输出文件：{exc}") from exc
    logger.debug("wrote %s and %s", geojson_path, rejects_path)


def _roll_back(staged: list[tuple[Path, Path]], published: list[tuple[Path, bytes | None]]) -> None:
    for tmp, _ in staged:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
    for path, previous in published:
        with contextlib.suppress(OSError):
            if previous is None:
                path.unlink(missing_ok=True)
            else:
                path.write_bytes(previous)
        logger.debug("restored %s", path)


def process_file(
    csv_path: str | Path,
    geojson_path: str | Path,
    rejects_path: str | Path,
    params: TripParams | None = None,
) -> PipelineResult:
    """run_pipeline + write_outputs."""

    result = run_pipeline(csv_path, params)
    write_outputs(result, geojson_path, rejects_path)
    return result
