from __future__ import annotations

import json

from gps_trips.cli import main

CSV_TEXT = (
    "device_id,lat,lon,timestamp\n"
    "dev1,14.5,121.0,2025-01-01T08:00:00Z\n"
    "dev1,14.5005,121.0,2025-01-01T08:05:00Z\n"
    "dev1,abc,121.0,2025-01-01T08:06:00Z\n"
    "dev1,14.5,121.0,2025-01-01T10:00:00Z\n"
)


def test_split_command(write_csv, tmp_path, capsys):
    out = tmp_path / "data" / "trips.geojson"
    rejects = tmp_path / "data" / "rejects.log"
    code = main(["split", "--csv", str(write_csv(CSV_TEXT)), "--out", str(out), "--rejects", str(rejects)])

    assert code == 0
    stdout = capsys.readouterr().out
    assert f"OK: wrote 2 trip(s) to {out}" in stdout
    assert len(json.loads(out.read_text(encoding="utf-8"))["features"]) == 2
    assert "reason=non-numeric lat/lon" in rejects.read_text(encoding="utf-8")


def test_split_thresholds_from_flags(write_csv, tmp_path, capsys):
    out = tmp_path / "trips.geojson"
    code = main(
        [
            "split",
            "--csv",
            str(write_csv(CSV_TEXT)),
            "--out",
            str(out),
            "--rejects",
            str(tmp_path / "rejects.log"),
            "--max-gap-seconds",
            "10000",
        ]
    )
    assert code == 0
    assert "OK: wrote 1 trip(s)" in capsys.readouterr().out


def test_split_missing_input_exits_1(tmp_path, capsys):
    out = tmp_path / "trips.geojson"
    code = main(["split", "--csv", str(tmp_path / "nope.csv"), "--out", str(out), "--rejects", str(tmp_path / "r.log")])
    assert code == 1
    assert capsys.readouterr().err.startswith("ERROR:")
    assert not out.exists()


def test_split_missing_header_exits_1(write_csv, tmp_path, capsys):
    code = main(
        [
            "split",
            "--csv",
            str(write_csv("device,lat,lon,timestamp\n")),
            "--out",
            str(tmp_path / "t.geojson"),
            "--rejects",
            str(tmp_path / "r.log"),
        ]
    )
    assert code == 1
    assert "device_id" in capsys.readouterr().err


def test_bad_timezone_exits_1(write_csv, tmp_path, capsys):
    code = main(["check", "--csv", str(write_csv(CSV_TEXT)), "--tz", "Nowhere/Land"])
    assert code == 1
    assert "ERROR:" in capsys.readouterr().err


def test_check_command_json(write_csv, capsys):
    code = main(["check", "--csv", str(write_csv(CSV_TEXT)), "--json"])
    assert code == 0
    out = capsys.readouterr().out
    assert "dev1: points=3" in out
    payload = json.loads(out[out.index("\n{") + 1 :])
    assert payload["rows_total"] == 4
    assert payload["rows_rejected"] == 1
    assert payload["reject_counts"] == {"non-numeric lat/lon": 1}
    assert payload["devices"] == {"dev1": 3}
