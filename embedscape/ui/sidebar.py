"""Sidebar UI components for Embedscape."""

import logging
from typing import TYPE_CHECKING

import streamlit as st

from embedscape.ui.state import AppState
from embedscape.ui.styles import render_caption
import config

if TYPE_CHECKING:
    from embedscape.core.workspace import Workspace
    from embedscape.visualization.renderer import InteractiveRenderer

logger = logging.getLogger(__name__)


def render_sidebar(ws: "Workspace", renderer: "InteractiveRenderer") -> None:
    """Render the complete sidebar."""
    with st.sidebar:
        render_source_switcher()
        st.markdown("---")
        render_view_controls(ws)
        st.markdown("---")
        render_view_toggle(renderer)
        st.markdown("---")
        render_batch_info(ws)


def render_source_switcher() -> None:
    """Render batch source selector radio buttons."""
    st.markdown("### Source")

    available = []
    for key, cfg in config.AVAILABLE_SOURCES.items():
        try:
            if cfg["data_check"]():
                available.append((key, cfg["label"]))
        except OSError as e:
            logger.debug(f"Source {key} check failed: {e}")

    valid_keys = [k for k, _ in available]
    current = st.session_state.current_source
    if current not in valid_keys:
        current = valid_keys[0]
        st.session_state.current_source = current

    labels = dict(available)
    selected = st.radio(
        "Load points from:",
        valid_keys,
        format_func=lambda x: labels[x],
        index=valid_keys.index(current),
        key="source_radio",
        help=config.AVAILABLE_SOURCES[current]["description"],
    )

    if selected != current:
        st.session_state.current_source = selected
        st.rerun()


def render_view_controls(ws: "Workspace") -> None:
    """Render the display count and spacing sliders."""
    st.markdown("### View")
    controller = ws.controller
    n_points = ws.store.n_points

    if n_points > 1:
        count = st.slider(
            "Number of points:",
            min_value=1,
            max_value=n_points,
            value=controller.display_count,
            key=f"display_count_{ws.store.current.batch_id}",
        )
        if count != controller.display_count:
            controller.set_display_count(count)
    render_caption(f"Showing {controller.display_count if n_points else 0} of {n_points} points")

    scale = st.slider(
        "Spacing factor:",
        min_value=config.SCALE_FACTOR_MIN,
        max_value=config.SCALE_FACTOR_MAX,
        value=float(min(max(controller.scale_factor, config.SCALE_FACTOR_MIN), config.SCALE_FACTOR_MAX)),
        step=config.SCALE_FACTOR_STEP,
        key="scale_factor_slider",
    )
    controller.set_scale_factor(scale)
    render_caption(f"Spacing factor: {controller.scale_factor:.1f}")


def render_view_toggle(renderer: "InteractiveRenderer") -> None:
    """Render 2D/3D view toggle and camera reset."""
    st.markdown("### View Mode")

    view_3d = st.toggle(
        "3D View",
        value=st.session_state.view_3d,
        help="Switch between the 2D plane and the 3D scene"
    )
    if view_3d != st.session_state.view_3d:
        st.session_state.view_3d = view_3d
        renderer.set_mode_3d(view_3d)

    if view_3d:
        render_camera_controls(renderer)


def render_camera_controls(renderer: "InteractiveRenderer") -> None:
    """Nudge the 3D camera: arrows orbit or pan, plus zoom and reset."""
    mode = st.radio("Arrows", ["Orbit", "Pan"], horizontal=True, key="camera_drag_mode")
    button = "left" if mode == "Orbit" else "right"
    step = config.CAMERA_DRAG_STEP

    moves = {
        "◀": (-step, 0),
        "▲": (0, step),
        "▼": (0, -step),
        "▶": (step, 0),
    }
    for col, (label, (dx, dy)) in zip(st.columns(len(moves)), moves.items()):
        with col:
            if st.button(label, key=f"camera_{label}", use_container_width=True):
                renderer.drag_camera(dx, dy, button)

    col_in, col_out, col_reset = st.columns(3)
    with col_in:
        if st.button("Zoom in", use_container_width=True):
            renderer.zoom_camera(-config.CAMERA_WHEEL_STEP)
    with col_out:
        if st.button("Zoom out", use_container_width=True):
            renderer.zoom_camera(config.CAMERA_WHEEL_STEP)
    with col_reset:
        if st.button("Reset", use_container_width=True):
            renderer.reset_camera()


def render_batch_info(ws: "Workspace") -> None:
    """Render info about the visible batch."""
    st.markdown("### Batch Info")
    batch = ws.store.current
    if batch is None:
        st.markdown("*No points loaded yet*")
        return

    st.markdown(f"**Points:** {len(batch):,}")
    st.markdown(f"**Dimensions:** {batch.dimensions}D")

    if ws.projector is not None:
        ratios = ws.projector.explained_variance_ratio
        explained = ", ".join(f"{r * 100:.1f}%" for r in ratios)
        st.markdown(f"**Explained variance:** {explained}")
