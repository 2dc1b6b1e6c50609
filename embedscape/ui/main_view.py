"""Main view UI components (text inputs, batch actions, visualization)."""

import logging
import time
from typing import TYPE_CHECKING

import streamlit as st

from embedscape.ui.state import AppState
import config

if TYPE_CHECKING:
    from embedscape.core.workspace import Workspace
    from embedscape.visualization.renderer import InteractiveRenderer

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5  # Seconds between reruns while a request is in flight


def render_inputs(ws: "Workspace") -> None:
    """Render the editable list of texts and the visualize button."""
    for i, value in enumerate(list(st.session_state.inputs)):
        col1, col2 = st.columns([5, 1])
        with col1:
            new_value = st.text_input(
                f"Text {i + 1}",
                value=value,
                placeholder=f"Enter text {i + 1}",
                key=f"input_{i}_{len(st.session_state.inputs)}",
                label_visibility="collapsed",
            )
            if new_value != value:
                AppState.set_input(i, new_value)
        with col2:
            if st.button("Remove", key=f"remove_{i}", use_container_width=True):
                AppState.remove_input(i)
                st.rerun()

    if st.button("Add Input", use_container_width=True):
        AppState.add_input()
        st.rerun()

    busy = AppState.has_pending() or ws.is_busy
    label = "Fetching Embeddings..." if busy else "Visualize Embeddings"
    if st.button(label, type="primary", disabled=busy, use_container_width=True):
        _submit_texts(ws, AppState.filled_inputs())


def _submit_texts(ws: "Workspace", texts: list[str]) -> None:
    """Start an embedding request in the background."""
    n_components = config.N_COMPONENTS_3D if AppState.is_3d_view() else config.N_COMPONENTS_2D
    try:
        AppState.set_pending(ws.submit_texts(texts, n_components=n_components))
    except ValueError as e:
        AppState.set_error(str(e))
        return
    except RuntimeError as e:
        logger.warning(f"Visualize ignored: {e}")
        return

    AppState.clear_error()
    st.rerun()


def render_source_actions(ws: "Workspace") -> None:
    """Render the load action for file-based sources."""
    source = st.session_state.current_source
    busy = AppState.has_pending() or ws.is_busy

    if source == config.SOURCE_POINTS_FILE:
        st.markdown(f"Precomputed points from `{config.POINTS_FILE_PATH.name}`")
        if st.button("Load Points", type="primary", disabled=busy, use_container_width=True):
            _run_blocking(ws.load_points, "Loading points...")
    elif source == config.SOURCE_TEXTS_CSV:
        st.markdown(f"Embed every row of `{config.TEXTS_CSV_PATH.name}`")
        if st.button("Embed CSV", type="primary", disabled=busy, use_container_width=True):
            n_components = config.N_COMPONENTS_3D if AppState.is_3d_view() else config.N_COMPONENTS_2D
            _run_blocking(lambda: ws.visualize_texts_csv(n_components=n_components), "Embedding texts...")


def _run_blocking(action, message: str) -> None:
    try:
        with st.spinner(message):
            action()
        AppState.clear_error()
    except (ValueError, OSError, RuntimeError) as e:
        logger.exception("Batch action failed")
        AppState.set_error(str(e))


def collect_pending() -> None:
    """Collect the result of a finished background request."""
    pending = st.session_state.pending
    if pending is None or not pending.done():
        return

    AppState.set_pending(None)
    error = pending.exception()
    if error is not None:
        AppState.set_error(f"Visualization failed: {error}")


def schedule_poll() -> None:
    """Rerun shortly while a request is in flight; call after the page is drawn."""
    if not AppState.has_pending():
        return

    st.info("Fetching embeddings... the previous points stay interactive.")
    time.sleep(POLL_INTERVAL)
    st.rerun()


def render_visualization(ws: "Workspace", renderer: "InteractiveRenderer") -> None:
    """Render the point cloud."""
    if ws.store.current is None:
        st.markdown("*Add some texts and press **Visualize Embeddings** to see them here.*")
        return

    # One script run is one rendered frame
    renderer.on_frame()
    fig = renderer.render()

    if renderer.mode_3d:
        st.plotly_chart(fig, use_container_width=True, key="points_3d")
        return

    event = st.plotly_chart(
        fig,
        use_container_width=True,
        key="points_2d",
        on_select="rerun",
        selection_mode="points",
    )
    _apply_selection(renderer, event)


def _apply_selection(renderer: "InteractiveRenderer", event) -> None:
    """Pin labels on clicked points; everything else is unhovered."""
    if not event or "selection" not in event:
        return

    selected = set()
    for point in event["selection"].get("points", []):
        customdata = point.get("customdata")
        if isinstance(customdata, list):
            customdata = customdata[0] if customdata else None
        if customdata is not None:
            selected.add(int(customdata))

    before = set(renderer.hovered_indices())
    if selected == before:
        return

    for index in before - selected:
        renderer.hover_exit(index)
    for index in selected - before:
        renderer.hover_enter(index)
    st.rerun()
