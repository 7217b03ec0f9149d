"""
Session state management for the dashboard.
Provides utilities for managing page-scoped state.
"""

__all__ = ['get_page_state', 'update_page_state', 'get_add_anime_state', 'update_add_anime_state', 'clear_add_anime_state']

import streamlit as st
from typing import Dict, Any
from animedash.state.anime_state import AddAnimeState


def get_page_state(page_name: str) -> Dict[str, Any]:
    """Get state for a specific page.

    Args:
        page_name: Name of the page to get state for

    Returns:
        Dictionary containing the page's state
    """
    key = f"state_{page_name}"
    if key not in st.session_state:
        st.session_state[key] = {}
    return st.session_state[key]


def update_page_state(page_name: str, state: Any) -> None:
    """Update state for a specific page.

    Args:
        page_name: Name of the page to update state for
        state: New state to set
    """
    key = f"state_{page_name}"
    st.session_state[key] = state


def get_add_anime_state() -> AddAnimeState:
    """Get add-anime state, creating a fresh draft on first access.

    The draft object is kept as-is so the form controller can keep working on
    the same instance across reruns.
    """
    state = get_page_state("add_anime")
    if "add_anime" not in state:
        state["add_anime"] = AddAnimeState()
    return state["add_anime"]


def update_add_anime_state(add_anime: AddAnimeState) -> None:
    """Update add-anime state.

    This is the ONLY way the draft should be replaced between reruns.
    """
    state = get_page_state("add_anime")
    state["add_anime"] = add_anime
    update_page_state("add_anime", state)


def clear_add_anime_state() -> None:
    """Discard the draft (cancel or successful submit)."""
    update_page_state("add_anime", {"add_anime": AddAnimeState()})
