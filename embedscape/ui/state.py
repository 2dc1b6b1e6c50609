"""
Centralized session state management for Embedscape.
Provides typed accessors and clear state transition methods.
"""

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, List, Optional

import streamlit as st

import config


@dataclass
class StateDefaults:
    """Default values for all session state variables."""
    inputs: List[str] = field(default_factory=lambda: [""])
    current_source: str = config.DEFAULT_SOURCE
    workspace: Optional[Any] = None
    renderer: Optional[Any] = None
    pending: Optional[Future] = None
    view_3d: bool = False
    last_error: Optional[str] = None


class AppState:
    """
    Wrapper around Streamlit session state with type hints and defaults.
    Provides clear API for state transitions.
    """

    @classmethod
    def init(cls, default_source: str = config.DEFAULT_SOURCE) -> None:
        """Initialize all session state with defaults."""
        defaults = StateDefaults(current_source=default_source)
        for field_name in defaults.__dataclass_fields__:
            if field_name not in st.session_state:
                st.session_state[field_name] = getattr(defaults, field_name)

    # Text inputs

    @classmethod
    def add_input(cls) -> None:
        st.session_state.inputs = st.session_state.inputs + [""]

    @classmethod
    def remove_input(cls, index: int) -> None:
        inputs = [t for i, t in enumerate(st.session_state.inputs) if i != index]
        st.session_state.inputs = inputs or [""]

    @classmethod
    def set_input(cls, index: int, value: str) -> None:
        inputs = list(st.session_state.inputs)
        inputs[index] = value
        st.session_state.inputs = inputs

    @staticmethod
    def filled_inputs() -> List[str]:
        """Inputs with text, in order."""
        return [t for t in st.session_state.inputs if t.strip()]

    # Requests

    @classmethod
    def set_pending(cls, future: Optional[Future]) -> None:
        st.session_state.pending = future

    @staticmethod
    def has_pending() -> bool:
        pending = st.session_state.get("pending")
        return pending is not None and not pending.done()

    @classmethod
    def set_error(cls, message: str) -> None:
        """Record an error for display."""
        st.session_state.last_error = message

    @classmethod
    def clear_error(cls) -> None:
        st.session_state.last_error = None

    @staticmethod
    def has_error() -> bool:
        return st.session_state.get("last_error") is not None

    @staticmethod
    def is_3d_view() -> bool:
        return st.session_state.get("view_3d", False)


def init_session_state(default_source: str = config.DEFAULT_SOURCE) -> None:
    """Convenience function to initialize session state."""
    AppState.init(default_source)
