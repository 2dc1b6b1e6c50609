"""
Embedscape: Text Embeddings Visualizer
Main Streamlit application.

Run with: streamlit run app.py
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import streamlit as st

from embedscape.core.workspace import Workspace
from embedscape.loaders.owners import load_owner_directory
from embedscape.visualization.colors import ColorMap
from embedscape.visualization.renderer import InteractiveRenderer
from embedscape.ui import (
    AppState,
    init_session_state,
    inject_styles,
    render_header,
    render_error,
    sidebar,
    main_view,
    details,
    docs,
)
import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Page Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="Embedscape",
    page_icon="✨",
    layout="wide",
    initial_sidebar_state="expanded"
)

inject_styles()
init_session_state()


# -----------------------------------------------------------------------------
# Session objects - one workspace and renderer per browser session
# -----------------------------------------------------------------------------

@st.cache_resource(show_spinner=False)
def get_executor() -> ThreadPoolExecutor:
    """One worker pool for the whole server, shared by every session."""
    return ThreadPoolExecutor(max_workers=config.REQUEST_WORKERS, thread_name_prefix="embedscape")


def get_workspace() -> Workspace:
    if st.session_state.workspace is None:
        st.session_state.workspace = Workspace(executor=get_executor())
    return st.session_state.workspace


def get_renderer(ws: Workspace) -> InteractiveRenderer:
    if st.session_state.renderer is None:
        owners = load_owner_directory()
        st.session_state.renderer = InteractiveRenderer(
            ws.controller,
            color_map=ColorMap(owners.colors) if owners.colors else None,
            owner_names=owners.names,
            mode_3d=st.session_state.view_3d,
        )
    return st.session_state.renderer


# -----------------------------------------------------------------------------
# Main Application
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    render_header()

    ws = get_workspace()
    renderer = get_renderer(ws)

    main_view.collect_pending()

    tab_explore, tab_methodology = st.tabs(["🔍 Explore", "📚 Methodology"])

    with tab_explore:
        sidebar.render_sidebar(ws, renderer)

        if st.session_state.current_source == config.SOURCE_INPUTS:
            main_view.render_inputs(ws)
        else:
            main_view.render_source_actions(ws)

        if AppState.has_error():
            render_error(st.session_state.last_error)

        col_viz, col_details = st.columns([3, 1])

        with col_viz:
            st.markdown("### Embedding Space")
            main_view.render_visualization(ws, renderer)

        with col_details:
            details.render_point_details(renderer)

    with tab_methodology:
        docs.render_methodology_tab()

    main_view.schedule_poll()


if __name__ == "__main__":
    main()
