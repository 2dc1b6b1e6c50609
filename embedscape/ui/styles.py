"""
Theme constants and CSS injection for Embedscape.
"""

import html

import streamlit as st
from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Central theme configuration."""
    primary_start: str = "#8884d8"
    primary_end: str = "#82ca9d"

    bg_dark: str = "#000000"
    bg_medium: str = "#0b0b14"
    bg_card: str = "rgba(30, 30, 46, 0.8)"

    text_primary: str = "#e2e8f0"
    text_secondary: str = "#94a3b8"
    text_muted: str = "#cbd5e1"

    border_subtle: str = "rgba(136, 132, 216, 0.3)"


THEME = Theme()


def get_css() -> str:
    """Generate CSS using theme constants."""
    return f"""
<style>
    [data-testid="stAppViewContainer"] {{
        background: linear-gradient(180deg, {THEME.bg_dark} 0%, {THEME.bg_medium} 100%);
    }}

    .es-header {{
        font-family: 'JetBrains Mono', 'Fira Code', 'SF Mono', monospace;
        background: linear-gradient(90deg, {THEME.primary_start} 0%, {THEME.primary_end} 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        background-clip: text;
        font-size: 2.5rem;
        font-weight: 700;
        margin-bottom: 0;
    }}

    .es-subheader {{
        color: {THEME.text_secondary};
        font-size: 1rem;
        margin-top: 0.25rem;
    }}

    .es-card {{
        background: {THEME.bg_card};
        border: 1px solid {THEME.border_subtle};
        border-radius: 12px;
        padding: 1rem 1.25rem;
        margin: 0.75rem 0;
    }}

    .es-card-owner {{
        color: {THEME.primary_start};
        font-size: 0.85rem;
        font-weight: 600;
        margin-bottom: 0.5rem;
    }}

    .es-card-text {{
        color: {THEME.text_muted};
        font-size: 0.95rem;
        line-height: 1.6;
        white-space: pre-wrap;
        max-height: 300px;
        overflow-y: auto;
    }}

    .es-caption {{
        color: {THEME.text_secondary};
        font-size: 0.8rem;
        text-align: center;
    }}

    .es-error {{
        background: rgba(239, 68, 68, 0.1);
        border: 1px solid rgba(239, 68, 68, 0.3);
        border-radius: 8px;
        padding: 1rem;
        color: #fca5a5;
        margin: 0.5rem 0;
        font-size: 0.9rem;
    }}
</style>
"""


def inject_styles() -> None:
    """Inject CSS styles into the Streamlit app."""
    st.markdown(get_css(), unsafe_allow_html=True)


def render_header() -> None:
    """Render the styled application header."""
    st.markdown('<h1 class="es-header">Embedscape</h1>', unsafe_allow_html=True)
    st.markdown('<p class="es-subheader">Text Embeddings Visualizer</p>', unsafe_allow_html=True)


def render_error(message: str) -> None:
    """Render a styled error message."""
    st.markdown(f'<div class="es-error">{html.escape(message)}</div>', unsafe_allow_html=True)


def render_caption(message: str) -> None:
    st.markdown(f'<p class="es-caption">{html.escape(message)}</p>', unsafe_allow_html=True)
