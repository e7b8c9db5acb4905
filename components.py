"""Reusable Streamlit UI components."""
from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd
import streamlit as st

from region import MatchResult


def sidebar_region_filter(results: Sequence[MatchResult]) -> List[str]:
    """Render the sidebar region filter and return the selected region names."""

    if not results:
        st.sidebar.info("マッチングを実行するとフィルタが利用できます。")
        return []

    st.sidebar.header("フィルタ")
    options = [result.region for result in results]
    selected = st.sidebar.multiselect("Region", options, default=options)
    only_matched = st.sidebar.checkbox("一致のあるリージョンのみ", value=False)

    if only_matched:
        matched = {result.region for result in results if result.matched_locations}
        selected = [name for name in selected if name in matched]
    return selected


def render_region_card(result: MatchResult, location_count: int) -> None:
    """Display a summary card for one region with its matched locations."""

    with st.container():
        st.markdown(f"#### {result.region}")
        col_matched, col_ratio = st.columns(2)
        col_matched.metric("一致", len(result.matched_locations))
        ratio = len(result.matched_locations) / location_count * 100 if location_count else 0.0
        col_ratio.metric("割合", f"{ratio:.1f}%")

        if result.matched_locations:
            st.write(", ".join(result.matched_locations))
        else:
            st.caption("このリージョンに含まれるロケーションはありません。")


def render_column_mapping(df: pd.DataFrame, defaults: Dict[str, str]) -> Dict[str, str]:
    """Render select boxes mapping CSV columns onto name/longitude/latitude."""

    mapping: Dict[str, str] = {}
    columns = df.columns.tolist()
    for target in ("name", "longitude", "latitude"):
        default = defaults.get(target)
        if default not in columns:
            default = columns[0]
        mapping[target] = st.selectbox(
            f"{target} 列", columns, index=columns.index(default), key=f"map_{target}"
        )
    return mapping
