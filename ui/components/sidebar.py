"""Sidebar component for focos filter controls."""

import streamlit as st

from focos.models import SATELLITE_CODES, satellite_label
from state import app_state


def render_sidebar() -> bool:
    """Render the filter controls; returns True when "Apply filters" was clicked."""
    st.header("Filters")
    f = app_state.filters

    st.subheader("Date range")
    start = st.date_input("Start date", value=f.start_date, max_value=f.end_date, key="start_date")
    end = st.date_input("End date", value=f.end_date, min_value=start, key="end_date")

    st.subheader("Satellite")
    satellite = st.selectbox(
        "Satellite",
        options=SATELLITE_CODES,
        index=SATELLITE_CODES.index(f.satellite),
        format_func=satellite_label,
        key="satellite",
    )

    app_state.update_filters(start, end, satellite)

    st.divider()
    loading = app_state.fetch_state.loading
    return st.button(
        "Loading..." if loading else "Apply filters",
        disabled=loading,
        type="primary",
    )
