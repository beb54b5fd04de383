"""Pivot table and chart over the current dataset."""

import streamlit as st

from focos.pivot import AGGREGATORS, PivotSettings, flatten_for_chart, pivot_dataset, records_to_frame
from state import app_state


def _fields(records) -> list[str]:
    seen: dict[str, None] = {}
    for record in records:
        for key in record:
            seen.setdefault(key, None)
    return list(seen)


def render_pivot_view() -> None:
    records = app_state.fetch_state.dataset
    if st.button("Reset pivot settings"):
        app_state.reset_pivot()

    if not records:
        st.info("No focos for the selected filters.")
        return

    fields = _fields(records)
    current = app_state.pivot
    cols = st.columns(4)
    rows = cols[0].multiselect("Rows", fields, default=[k for k in current.rows if k in fields])
    column_fields = [k for k in fields if k not in rows]
    columns = cols[1].multiselect(
        "Columns", column_fields, default=[k for k in current.cols if k in column_fields]
    )
    aggregators = list(AGGREGATORS)
    aggregator = cols[2].selectbox(
        "Aggregator", aggregators, index=aggregators.index(current.aggregator_name)
    )
    value_default = current.vals[0] if current.vals and current.vals[0] in fields else fields[0]
    value = cols[3].selectbox("Value", fields, index=fields.index(value_default))
    app_state.set_pivot(
        PivotSettings(rows=tuple(rows), cols=tuple(columns), vals=(value,), aggregator_name=aggregator)
    )

    table = pivot_dataset(records, app_state.pivot)
    st.caption(f"{len(records)} focos")
    st.dataframe(table, use_container_width=True)
    if not table.empty:
        st.bar_chart(flatten_for_chart(table))

    with st.expander("Records"):
        st.dataframe(records_to_frame(records), use_container_width=True)
