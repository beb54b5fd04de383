"""Streamlit page: BDQueimadas focos pivot table."""

import streamlit as st

from components.sidebar import render_sidebar
from components.pivot_view import render_pivot_view
from state import app_state


def main() -> None:
    """Main application entry point."""
    st.set_page_config(page_title="Focos data", layout="wide")
    app_state.initialize()

    st.title("Focos data")

    with st.sidebar:
        apply_clicked = render_sidebar()

    if apply_clicked or app_state.needs_fetch():
        with st.spinner("Loading focos data..."):
            app_state.refresh()

    fetch_state = app_state.fetch_state
    if fetch_state.error:
        st.error(fetch_state.error)

    render_pivot_view()


if __name__ == "__main__":
    main()
