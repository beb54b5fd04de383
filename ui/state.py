"""Centralized state manager for the Streamlit focos page.

Wraps st.session_state with typed dataclasses so components never touch raw
keys. The fetch lifecycle itself lives in ``FetchOrchestrator``; this module
only keeps it alive across reruns next to the filter and pivot selections.

Usage
-----
    from state import app_state

    app_state.initialize()
    if app_state.needs_fetch():
        app_state.refresh()
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import streamlit as st

from focos.config import settings as focos_settings
from focos.models import FetchQuery, default_query
from focos.orchestrator import FetchOrchestrator, FetchState
from focos.pivot import DEFAULT_PIVOT_SETTINGS, PivotSettings


@dataclass
class FilterState:
    start_date: date
    end_date: date
    satellite: str

    @classmethod
    def initial(cls, today: date | None = None) -> "FilterState":
        query = default_query(today, satellite=focos_settings.default_satellite)
        return cls(query.start_date, query.end_date, query.satellite)

    def to_query(self) -> FetchQuery:
        return FetchQuery(self.start_date, self.end_date, self.satellite)


class AppState:
    """Typed façade over ``st.session_state``."""

    def __init__(self) -> None:
        self.filters = FilterState.initial()
        self.pivot = DEFAULT_PIVOT_SETTINGS
        self.orchestrator = FetchOrchestrator()

    def initialize(self) -> None:
        """Restore from ``st.session_state`` or bootstrap on first run."""
        if "_state_initialized" not in st.session_state:
            # The module-level instance is shared by sessions; start this one clean.
            self.filters = FilterState.initial()
            self.pivot = DEFAULT_PIVOT_SETTINGS
            self.orchestrator = FetchOrchestrator()
            self._persist()
            st.session_state._state_initialized = True
        else:
            self._restore()

    @property
    def fetch_state(self) -> FetchState:
        return self.orchestrator.state

    def update_filters(self, start_date: date, end_date: date, satellite: str) -> None:
        self.filters = FilterState(start_date, end_date, satellite)
        self._persist()

    def needs_fetch(self) -> bool:
        """True on first load and whenever the filters differ from the last request."""
        return self.fetch_state.query != self.filters.to_query()

    def refresh(self) -> FetchState:
        return self.orchestrator.fetch(self.filters.to_query())

    def set_pivot(self, pivot: PivotSettings) -> None:
        self.pivot = pivot
        self._persist()

    def reset_pivot(self) -> None:
        self.set_pivot(DEFAULT_PIVOT_SETTINGS)

    def _persist(self) -> None:
        s = st.session_state
        s.filter_start_date = self.filters.start_date
        s.filter_end_date = self.filters.end_date
        s.filter_satellite = self.filters.satellite
        s.pivot_settings = self.pivot
        s.fetch_orchestrator = self.orchestrator

    def _restore(self) -> None:
        s = st.session_state
        initial = FilterState.initial()
        self.filters = FilterState(
            start_date=s.get("filter_start_date", initial.start_date),
            end_date=s.get("filter_end_date", initial.end_date),
            satellite=s.get("filter_satellite", initial.satellite),
        )
        self.pivot = s.get("pivot_settings", DEFAULT_PIVOT_SETTINGS)
        self.orchestrator = s.get("fetch_orchestrator") or FetchOrchestrator()


app_state = AppState()
