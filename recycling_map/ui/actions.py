"""UI Actions - Routing of typed commands and notices.

Widgets produce Commands (model.commands); everything here turns them into
core calls and turns core outcomes back into user-facing messages.

This module handles:
- Command execution (filters, favorites, point selection, sign-out)
- Sign-in through the auth client and session watcher
- Notices from drained events -> toast messages

apply_command / notices_to_messages / sign_in take an AppServices and do not
touch st.session_state, so they are testable without Streamlit.
"""

import logging

import streamlit as st

from recycling_map.model.commands import (
    ClearSelection,
    Command,
    SelectPoint,
    SignOut,
)
from recycling_map.model.errors import AuthenticationRequired, SignInError
from recycling_map.model.events import (
    FavoriteAction,
    FavoriteWriteFailed,
    FavoriteWriteSucceeded,
    StoreEvent,
)
from recycling_map.model.message import (
    AuthenticationRequiredMessage,
    FavoriteAddedMessage,
    FavoriteRemovedMessage,
    FavoriteWriteFailedMessage,
    SignInFailedMessage,
    ToastMessage,
)
from recycling_map.ui.services import AppServices

logger = logging.getLogger(__name__)


def apply_command(command: Command, services: AppServices) -> list[ToastMessage]:
    """Execute one command; return the messages to show.

    UI-only commands (selection, sign-out) are handled here; filter and
    favorite commands go through the dispatcher.
    """
    ctx = services.machine.context

    if isinstance(command, SelectPoint):
        ctx.selection.select(command.point_id)
        logger.info(f"[ACTION] Selected point {command.point_id}")
        point = services.store.snapshot.find_point(command.point_id)
        if command.center_map and point is not None:
            ctx.map.set_center(lon=point.lon, lat=point.lat)
        return []
    if isinstance(command, ClearSelection):
        ctx.selection.clear()
        return []
    if isinstance(command, SignOut):
        services.watcher.sign_out()
        return []

    try:
        services.dispatcher.handle_command(command, controller=services.controller)
    except AuthenticationRequired:
        return [AuthenticationRequiredMessage()]
    return []


def _point_name(services: AppServices, point_id: str) -> str:
    point = services.store.snapshot.find_point(point_id)
    return point.name if point is not None else point_id


def notices_to_messages(notices: list[StoreEvent], services: AppServices) -> list[ToastMessage]:
    """Toasts for write results. Stream failures are shown inline instead."""
    messages: list[ToastMessage] = []
    for notice in notices:
        if isinstance(notice, FavoriteWriteFailed):
            cause = getattr(notice.error, "cause", notice.error)
            messages.append(FavoriteWriteFailedMessage(point_name=_point_name(services, notice.point_id), error=str(cause)))
        elif isinstance(notice, FavoriteWriteSucceeded):
            name = _point_name(services, notice.point_id)
            if notice.action is FavoriteAction.ADD:
                messages.append(FavoriteAddedMessage(point_name=name))
            else:
                messages.append(FavoriteRemovedMessage(point_name=name))
    return messages


def sign_in(services: AppServices, email: str, password: str) -> list[ToastMessage]:
    """Sign in and start a session; on failure record the reason for the login page."""
    if services.auth_client is None:
        raise RuntimeError("No auth client configured")

    ctx = services.machine.context
    try:
        user = services.auth_client.sign_in(email=email.strip(), password=password)
    except SignInError as e:
        ctx.notices.sign_in_error = e.reason
        return [SignInFailedMessage(reason=e.reason)]

    ctx.notices.clear()
    # Transition fires StreamlitUIListener -> st.rerun() when running in the app
    services.watcher.sign_in(user)
    return []


# =============================================================================
# STREAMLIT ENTRY POINTS
# =============================================================================


def get_services() -> AppServices:
    """AppServices of the current browser session."""
    return st.session_state.services


def execute_command(command: Command) -> None:
    """Widget callback: run a command and show resulting toasts."""
    for message in apply_command(command, get_services()):
        message.display()
