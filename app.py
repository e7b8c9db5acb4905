"""Streamlit app for matching locations to the regions that contain them."""
from __future__ import annotations

from typing import Dict, List, Sequence

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

from components import render_column_mapping, render_region_card, sidebar_region_filter
from geom import Coordinate, Polygon
from region import Location, MatchResult, Region, match_locations_to_regions
from storage import (
    load_locations,
    load_regions,
    locations_from_frame,
    membership_frame,
    read_csv,
    results_to_frame,
    results_to_json,
    write_csv,
)
from validation import ClosurePolicy, validate_locations, validate_regions

st.set_page_config(page_title="ロケーション・リージョン照合", layout="wide")
st.title("🗺️ ロケーション・リージョン照合アプリ")


def init_session_state() -> None:
    """Ensure session_state holds persistent data structures."""

    if "regions" not in st.session_state:
        st.session_state["regions"] = []
    if "locations" not in st.session_state:
        st.session_state["locations"] = []
    if "results" not in st.session_state:
        st.session_state["results"] = []
    if "column_mapping" not in st.session_state:
        st.session_state["column_mapping"] = {}


def _ring(*pairs: tuple) -> Polygon:
    return Polygon([Coordinate(float(lon), float(lat)) for lon, lat in pairs])


def create_demo_data() -> tuple[List[Location], List[Region]]:
    """Return a small demo dataset to drive the matching workflow."""

    regions = [
        Region("Square", [_ring((0, 0), (0, 1), (1, 1), (1, 0), (0, 0))]),
        Region(
            "Islands",
            [
                _ring((2, 2), (2, 3), (3, 3), (3, 2), (2, 2)),
                _ring((4, 0), (4, 1), (5, 1), (5, 0), (4, 0)),
            ],
        ),
        Region("Empty", [_ring((-5, -5), (-5, -4), (-4, -4), (-5, -5))]),
    ]
    locations = [
        Location("A", Coordinate(0.5, 0.5)),
        Location("B", Coordinate(2.0, 2.0)),
        Location("C", Coordinate(4.5, 0.5)),
        Location("D", Coordinate(1.0, 0.5)),
        Location("E", Coordinate(10.0, 10.0)),
    ]
    return validate_locations(locations), validate_regions(regions)


def filter_results(results: Sequence[MatchResult], selected: Sequence[str]) -> List[MatchResult]:
    """Keep results whose region is selected, in their original order."""

    wanted = set(selected)
    return [result for result in results if result.region in wanted]


def render_inputs() -> None:
    """Render region/location upload, demo loading, and the match button."""

    st.subheader("入力データ")
    allow_unclosed = st.checkbox("閉じていないポリゴンを警告のみで許可する", value=False)
    closure = ClosurePolicy.WARN if allow_unclosed else ClosurePolicy.ERROR

    regions_file = st.file_uploader("リージョン JSON", type=["json"])
    if regions_file is not None:
        try:
            st.session_state["regions"] = load_regions(regions_file, closure=closure)
        except Exception as exc:  # pragma: no cover - Streamlit runtime feedback
            st.error(f"リージョン読み込みエラー: {exc}")
        else:
            st.success(f"{len(st.session_state['regions'])} 件のリージョンを読み込みました。")

    locations_file = st.file_uploader("ロケーション JSON / CSV", type=["json", "csv"])
    if locations_file is not None:
        if locations_file.name.lower().endswith(".csv"):
            render_csv_import(locations_file)
        else:
            try:
                st.session_state["locations"] = load_locations(locations_file)
            except Exception as exc:  # pragma: no cover - Streamlit runtime feedback
                st.error(f"ロケーション読み込みエラー: {exc}")
            else:
                st.success(f"{len(st.session_state['locations'])} 件のロケーションを読み込みました。")

    if st.button("デモ用データで試す"):
        locations, regions = create_demo_data()
        st.session_state["locations"] = locations
        st.session_state["regions"] = regions
        st.info("デモデータをロードしました。")

    regions = st.session_state["regions"]
    locations = st.session_state["locations"]
    if not regions or not locations:
        st.warning("リージョンとロケーションを読み込むか、デモデータを使用してください。")
        return

    if st.button("照合を実行"):
        st.session_state["results"] = match_locations_to_regions(locations, regions)
        st.success("照合が完了しました。")


def render_csv_import(uploaded_file) -> None:
    """Map CSV columns onto location fields and load them."""

    try:
        dataframe = read_csv(uploaded_file)
    except Exception as exc:  # pragma: no cover - Streamlit runtime feedback
        st.error(f"読み込みエラー: {exc}")
        return

    st.dataframe(dataframe.head())
    with st.form("column_mapping_form"):
        st.markdown("#### 列名マッピング")
        mapping: Dict[str, str] = render_column_mapping(
            dataframe, st.session_state["column_mapping"]
        )
        submitted = st.form_submit_button("ロケーションとして取り込む")

    if submitted:
        st.session_state["column_mapping"] = mapping
        try:
            st.session_state["locations"] = locations_from_frame(dataframe, mapping)
        except ValueError as exc:
            st.error(f"マッピングエラー: {exc}")
            return
        st.success(f"{len(st.session_state['locations'])} 件のロケーションを取り込みました。")


def render_map(regions: Sequence[Region], locations: Sequence[Location], selected: Sequence[str]) -> None:
    """Plot the selected regions' polygons and every location."""

    fig, ax = plt.subplots(figsize=(8, 6))
    colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    wanted = set(selected)

    for index, region in enumerate(r for r in regions if r.name in wanted):
        color = colors[index % len(colors)]
        for ring_index, polygon in enumerate(region.polygons):
            lons = [vertex.longitude for vertex in polygon]
            lats = [vertex.latitude for vertex in polygon]
            ax.fill(lons, lats, color=color, alpha=0.25, label=region.name if ring_index == 0 else None)
            ax.plot(lons, lats, color=color, linewidth=1)

    if locations:
        ax.scatter(
            [location.coordinate.longitude for location in locations],
            [location.coordinate.latitude for location in locations],
            c="black",
            marker="o",
            s=12,
        )
        for location in locations:
            ax.annotate(location.name, location.coordinate.as_pair(), fontsize=8)

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal", adjustable="datalim")
    if wanted:
        ax.legend()
    ax.set_title("Regions and Locations")

    st.pyplot(fig)
    plt.close(fig)


def render_results(selected: Sequence[str]) -> None:
    """Render summary table, region cards, map, and download button."""

    results: List[MatchResult] = st.session_state["results"]
    if not results:
        st.info("照合結果がありません。照合を実行してください。")
        return

    shown = filter_results(results, selected)
    if not shown:
        st.warning("選択されたフィルタに一致するリージョンがありません。")
        return

    st.subheader("照合結果")
    summary: pd.DataFrame = results_to_frame(shown)
    st.dataframe(summary)

    location_count = len(st.session_state["locations"])
    for result in shown:
        render_region_card(result, location_count)

    render_map(st.session_state["regions"], st.session_state["locations"], selected)

    st.download_button(
        label="照合結果JSONをダウンロード",
        data=results_to_json(results),
        file_name="results.json",
        mime="application/json",
    )

    pairs = membership_frame(shown)
    st.markdown("#### リージョン・ロケーション対応表")
    st.dataframe(pairs)
    st.download_button(
        label="対応表CSVをダウンロード",
        data=write_csv(pairs),
        file_name="region_locations.csv",
        mime="text/csv",
    )


def main() -> None:
    """Application entry point."""

    init_session_state()
    selected = sidebar_region_filter(st.session_state["results"])
    render_inputs()
    render_results(selected)


if __name__ == "__main__":
    main()
