"""Login page shown while no user is signed in."""

import logging

import streamlit as st

from recycling_map.ui.actions import sign_in
from recycling_map.ui.services import AppServices

logger = logging.getLogger(__name__)


def render_login_page(services: AppServices) -> None:
    """E-mail/password form. A successful sign-in triggers a rerun."""
    ctx = services.machine.context

    _, col_form, _ = st.columns([1, 2, 1])
    with col_form:
        st.subheader("🔑 Sign In")
        st.caption("Sign in to see recycling points and manage your favorites.")

        with st.form("login_form"):
            email = st.text_input("E-mail", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)

        if submitted:
            logger.info(f"[LOGIN] Sign-in attempt for {email.strip()!r}")
            for message in sign_in(services, email=email, password=password):
                message.display()

        if ctx.notices.sign_in_error:
            st.error(ctx.notices.sign_in_error)
