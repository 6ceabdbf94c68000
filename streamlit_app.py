from __future__ import annotations

from pathlib import Path
from typing import Any

import streamlit as st

from gps_trips.errors import TripSplitError
from gps_trips.geojson import dump_feature_collection
from gps_trips.models import DEFAULT_MAX_GAP_SECONDS, DEFAULT_MAX_JUMP_KM, DEFAULT_TZ, TripParams
from gps_trips.pipeline import PipelineResult, run_pipeline


def _hhmm(minutes: float) -> str:
    m = int(round(max(0.0, minutes)))
    return f"{m // 60:02d}:{m % 60:02d}"


def _trip_rows(result: PipelineResult) -> list[dict[str, Any]]:
    """Flatten feature properties for the trips table."""

    rows: list[dict[str, Any]] = []
    for feat in result.feature_collection["features"]:
        props = feat["properties"]
        rows.append(
            {
                "trip_id": props["trip_id"],
                "device_id": props["device_id"],
                "points": props["point_count"],
                "distance_km": props["total_distance_km"],
                "duration": _hhmm(props["duration_min"]),
                "avg_kmh": props["avg_speed_kmh"],
                "max_kmh": props["max_speed_kmh"],
                "start_time": props["start_time"],
                "end_time": props["end_time"],
                "color": props["stroke"],
            }
        )
    return rows


def _reject_rows(result: PipelineResult) -> list[dict[str, Any]]:
    return [{"line": r.line_no, "reason": str(r.reason), "row": ",".join(r.raw_fields)} for r in result.rejects]


@st.cache_data(show_spinner=False)
def _run(csv_path: str, max_gap_seconds: float, max_jump_km: float, tz_name: str, mtime: float) -> PipelineResult:
    _ = mtime  # part of cache key so updated files reload automatically
    params = TripParams(max_gap_seconds=max_gap_seconds, max_jump_km=max_jump_km, tz_name=tz_name)
    return run_pipeline(csv_path, params)


def main() -> None:
    st.set_page_config(page_title="GPS 行程切分", layout="wide")
    st.title("GPS 行程切分：按设备/时间切分行程并导出 GeoJSON")

    with st.sidebar:
        st.subheader("数据与时区")
        csv_path = st.text_input("points.csv 路径", value="data/points.csv")
        tz_name = st.text_input("时区（IANA）", value=DEFAULT_TZ)

        st.subheader("切分阈值")
        max_gap_seconds = st.number_input(
            "max_gap_seconds（默认 1500s）", value=DEFAULT_MAX_GAP_SECONDS, step=60.0
        )
        max_jump_km = st.number_input("max_jump_km（默认 2.0km）", value=DEFAULT_MAX_JUMP_KM, step=0.5)

    p = Path(csv_path)
    if not p.exists():
        st.error(f"找不到文件：{csv_path!r}")
        return

    try:
        result = _run(csv_path, float(max_gap_seconds), float(max_jump_km), tz_name, p.stat().st_mtime)
    except (TripSplitError, ValueError) as exc:
        st.error(str(exc))
        return

    s = result.summary
    st.subheader("汇总")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("行程数", str(len(result.trips)))
    c2.metric("设备数", str(result.devices))
    c3.metric("有效点", str(s.rows_parsed))
    c4.metric("剔除行", str(s.rows_rejected))

    st.download_button(
        "下载 trips.geojson",
        data=dump_feature_collection(result.feature_collection),
        file_name="trips.geojson",
        mime="application/geo+json",
        type="primary",
    )

    st.subheader("行程明细")
    st.dataframe(_trip_rows(result), use_container_width=True, height=520)

    with st.expander(f"剔除明细（{s.rows_rejected} 行）", expanded=False):
        if s.reject_counts:
            st.write(dict(s.reject_counts))
        st.dataframe(_reject_rows(result), use_container_width=True, height=360)

    st.caption(
        f"说明：相邻两点间隔超过 {max_gap_seconds:.0f}s 或距离超过 {max_jump_km:.1f}km 即切分新行程；"
        "行程按设备（自然序、忽略大小写）再按时间排列编号。"
    )


if __name__ == "__main__":
    main()
