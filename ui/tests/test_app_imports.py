import importlib

from focos.orchestrator import FetchOrchestrator, FetchStatus
from focos.pivot import DEFAULT_PIVOT_SETTINGS


def test_streamlit_page_exposes_main() -> None:
    app_module = importlib.import_module("app")
    assert callable(app_module.main)


def test_page_components_import() -> None:
    pivot_view = importlib.import_module("components.pivot_view")
    sidebar = importlib.import_module("components.sidebar")

    assert callable(pivot_view.render_pivot_view)
    assert callable(sidebar.render_sidebar)


def test_module_state_starts_idle_with_default_pivot() -> None:
    state_module = importlib.import_module("state")

    assert isinstance(state_module.app_state.orchestrator, FetchOrchestrator)
    assert state_module.app_state.pivot == DEFAULT_PIVOT_SETTINGS
    assert state_module.app_state.fetch_state.status is FetchStatus.IDLE
