"""
Sidebar helpers for the write gate: sign-in status and logout button.
"""

import streamlit as st

from .authentication import (
    check_authentication,
    initialize_session_state,
    logout_user,
    render_login_form,
)


def add_logout_button():
    """
    Add the signed-in status and a logout button to the sidebar.
    """
    with st.sidebar:
        if check_authentication():
            st.caption(f"✏️ Editing enabled ({st.session_state.get('email', '')})")
            if st.button("Sign out", key="sidebar_logout"):
                logout_user()
                st.rerun()
        else:
            st.caption("👀 Browsing only")


def render_auth_prompt():
    """
    Show the sign-in form when a protected action asked for it.
    """
    if st.session_state.get("show_auth_form") and not check_authentication():
        if render_login_form():
            st.rerun()
        if st.button("Cancel", key="cancel_auth"):
            st.session_state.show_auth_form = False
            st.rerun()


def initialize_navigation():
    """
    Initialize auth state and sidebar controls.
    Call this at the start of every page.
    """
    initialize_session_state()
    add_logout_button()
    render_auth_prompt()
