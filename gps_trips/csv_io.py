"""CSV input utilities for device point exports."""

from __future__ import annotations

import csv
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Mapping, Sequence

from gps_trips.errors import InputFileError, MissingColumnError
from gps_trips.models import ColumnMap, ColumnRole, Point, RawRow, RejectRecord, TripParams
from gps_trips.validate import RecordValidator, is_blank

logger = logging.getLogger(__name__)

DELIMITER_CANDIDATES: Final[tuple[str, ...]] = (",", ";", "\t", "|")

HEADER_ALIASES: Final[Mapping[str, ColumnRole]] = {
    "device_id": ColumnRole.DEVICE_ID,
    "deviceid": ColumnRole.DEVICE_ID,
    "id": ColumnRole.DEVICE_ID,
    "lat": ColumnRole.LAT,
    "latitude": ColumnRole.LAT,
    "lon": ColumnRole.LON,
    "lng": ColumnRole.LON,
    "longitude": ColumnRole.LON,
    "timestamp": ColumnRole.TIMESTAMP,
    "time": ColumnRole.TIMESTAMP,
    "datetime": ColumnRole.TIMESTAMP,
    "ts": ColumnRole.TIMESTAMP,
}


@dataclass(frozen=True, slots=True)
class Table:
    """Header information plus all data records of an input file."""

    delimiter: str
    fieldnames: Sequence[str]
    columns: ColumnMap
    rows: Sequence[RawRow]


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_rejected: int
    rows_blank: int
    delimiter: str
    fieldnames: Sequence[str]
    reject_counts: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LoadResult:
    points: list[Point]
    rejects: list[RejectRecord]
    summary: CsvSummary


def detect_delimiter(header_line: str) -> str:
    """Pick the most frequent candidate delimiter in the header line.

    Ties and absence fall back to the earliest candidate, i.e. ",".
    """

    best, best_count = ",", 0
    for d in DELIMITER_CANDIDATES:
        n = header_line.count(d)
        if n > best_count:
            best, best_count = d, n
    return best


def normalize_header_name(name: str) -> str:
    """Lower-case, trim and collapse inner whitespace to "_"."""

    return re.sub(r"\s+", "_", name.strip().lower())


def resolve_header(fieldnames: Sequence[str]) -> ColumnMap:
    """Resolve header names to a fixed positional mapping.

    If several columns match the same role, the last one wins.

    Raises:
        MissingColumnError: If any required role has no matching column.
    """

    found: dict[ColumnRole, int] = {}
    for idx, name in enumerate(fieldnames):
        role = HEADER_ALIASES.get(normalize_header_name(name))
        if role is not None:
            found[role] = idx

    missing = [role.value for role in ColumnRole if role not in found]
    if missing:
        raise MissingColumnError(missing, list(fieldnames))
    return ColumnMap(
        device_id=found[ColumnRole.DEVICE_ID],
        lat=found[ColumnRole.LAT],
        lon=found[ColumnRole.LON],
        timestamp=found[ColumnRole.TIMESTAMP],
    )


def read_table(csv_path: str | Path) -> Table:
    """Read the header and every data record of a delimited text file.

    Args:
        csv_path: Input path. The delimiter is detected from the header line.

    Returns:
        Table whose rows carry 1-based record numbers (header = 1).

    Raises:
        InputFileError: If the file is missing, unreadable or empty.
        MissingColumnError: If the header lacks a required column.
    """

    p = Path(csv_path)
    try:
        # utf-8-sig drops a leading BOM so the first header name still matches
        with p.open("r", encoding="utf-8-sig", newline="") as f:
            header_line = f.readline()
            if not header_line:
                raise InputFileError(f"输入文件为空：{p}")

            delimiter = detect_delimiter(header_line)
            fieldnames = next(csv.reader([header_line], delimiter=delimiter), [])
            columns = resolve_header(fieldnames)

            reader = csv.reader(f, delimiter=delimiter)
            rows = [RawRow(fields=tuple(r), line_no=n) for n, r in enumerate(reader, start=2)]
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise InputFileError(f"无法读取输入文件：{p}（{exc}）") from exc

    return Table(delimiter=delimiter, fieldnames=tuple(fieldnames), columns=columns, rows=rows)


def load_points(csv_path: str | Path, params: TripParams | None = None) -> LoadResult:
    """Load and validate all rows into memory.

    Args:
        csv_path: Path to the input CSV.
        params: Validation parameters (timezone for naive timestamps).

    Returns:
        LoadResult with valid points in arrival order, rejects and a summary.
    """

    table = read_table(csv_path)
    validator = RecordValidator(table.columns, params)

    points: list[Point] = []
    rejects: list[RejectRecord] = []
    blank = 0
    for row in table.rows:
        if is_blank(row.fields):
            blank += 1
            continue
        res = validator.validate(row.fields, row.line_no)
        if isinstance(res, Point):
            points.append(res)
        elif res is not None:
            rejects.append(res)

    counts = Counter(str(r.reason) for r in rejects)
    summary = CsvSummary(
        rows_total=len(table.rows) - blank,
        rows_parsed=len(points),
        rows_rejected=len(rejects),
        rows_blank=blank,
        delimiter=table.delimiter,
        fieldnames=table.fieldnames,
        reject_counts=dict(counts),
    )
    if rejects:
        logger.warning("CSV中有 %s 行校验失败已剔除：%s", len(rejects), dict(counts))
    return LoadResult(points=points, rejects=rejects, summary=summary)


def render_rejects_log(rejects: Sequence[RejectRecord]) -> str:
    """One tab-separated line per reject, newline terminated."""

    return "".join(r.to_log_line() + "\n" for r in rejects)
