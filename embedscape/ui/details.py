"""Details panel for pinned points."""

import html
from typing import TYPE_CHECKING

import streamlit as st

if TYPE_CHECKING:
    from embedscape.visualization.renderer import InteractiveRenderer


def render_point_details(renderer: "InteractiveRenderer") -> None:
    """Render cards for the points whose labels are pinned."""
    st.markdown("### Pinned Points")

    points = renderer.controller.visible_points()
    pinned = [i for i in renderer.hovered_indices() if i < len(points)]

    if not pinned:
        st.markdown("*Hover a point to see its text. Click points in 2D view to pin them here.*")
        return

    for index in pinned:
        point = points[index]
        owner = renderer.owner_names.get(point.owner_id, point.owner_id) if point.owner_id else "Unknown"
        st.markdown(f"""
        <div class="es-card">
            <div class="es-card-owner">#{index + 1} · {html.escape(str(owner))}</div>
            <div class="es-card-text">{html.escape(point.source_text)}</div>
        </div>
        """, unsafe_allow_html=True)
