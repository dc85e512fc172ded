"""Recycling Points Map - Interactive map of recycling points with favorites.

Shows the recycling points of the remote store on a map, filtered by
accepted material, and lets a signed-in user keep a personal list of
favorite points. Points and favorites are live: remote changes show up
within one refresh interval.

Run: streamlit run recycling_map/app.py
"""

import logging
import traceback

import streamlit as st

from recycling_map.constants import AppConfig, MapConfig
from recycling_map.core.auth import FirebaseAuthClient
from recycling_map.core.dispatcher import DrainResult
from recycling_map.core.remote_store import FirestoreRemoteStore, create_firestore_client
from recycling_map.model.commands import SelectPoint
from recycling_map.model.errors import ConfigurationError
from recycling_map.model.message import LoadingPointsMessage, SubscriptionErrorMessage
from recycling_map.settings import load_firebase_settings
from recycling_map.ui import (
    AppServices,
    MapRenderer,
    PointDetailsPanel,
    SidebarRenderer,
    build_services,
    execute_command,
    notices_to_messages,
    render_login_page,
)
from recycling_map.ui.pydeck_click_handler import render_pydeck_map

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# SHARED RESOURCES
# =============================================================================


@st.cache_resource
def get_remote_store() -> FirestoreRemoteStore:
    """One Firestore client for all browser sessions."""
    settings = load_firebase_settings()
    return FirestoreRemoteStore(client=create_firestore_client(settings))


@st.cache_resource
def get_auth_client() -> FirebaseAuthClient:
    settings = load_firebase_settings()
    return FirebaseAuthClient(api_key=settings.api_key)


# =============================================================================
# SESSION STATE
# =============================================================================


def init_session_state() -> None:
    """Initialize per-session services and the map renderer."""
    if "services" not in st.session_state:
        st.session_state.services = build_services(remote=get_remote_store(), auth_client=get_auth_client())

    if "map_renderer" not in st.session_state:
        st.session_state.map_renderer = MapRenderer(
            center_lat=MapConfig.START_CENTER_LAT,
            center_lon=MapConfig.START_CENTER_LON,
            zoom=MapConfig.DEFAULT_ZOOM,
        )

    if "pending_notices" not in st.session_state:
        st.session_state.pending_notices = []


def reset_ui_state() -> None:
    """Reset UI state while keeping the signed-in session.

    Called when an error occurs to recover gracefully. Clears the selection,
    the map view and the filter selection; the store, listeners and session
    are preserved.
    """
    logger.info("Resetting UI state due to error recovery")
    services: AppServices = st.session_state.services
    services.machine.context.selection.clear()
    services.machine.context.map.clear()
    services.engine.clear_filters()
    st.session_state.pending_notices = []
    logger.info("UI state reset complete - session preserved")


# =============================================================================
# REMOTE EVENTS
# =============================================================================


def _collect(result: DrainResult) -> None:
    st.session_state.pending_notices.extend(result.notices)


def _show_pending_notices(services: AppServices) -> None:
    notices = st.session_state.pending_notices
    st.session_state.pending_notices = []
    for message in notices_to_messages(notices, services):
        message.display()


@st.fragment(run_every=AppConfig.REFRESH_INTERVAL_S)
def _poll_remote_events() -> None:
    """Drain events posted by listener/writer threads; rerun the app on change.

    Streamlit cannot be driven from background threads, so the threads only
    post into the dispatcher and this poller applies them on the UI thread.
    """
    services: AppServices = st.session_state.services
    if services.dispatcher.pending == 0:
        return
    result = services.dispatcher.drain()
    _collect(result)
    if result.changed:
        st.rerun()


# =============================================================================
# MAP
# =============================================================================


def _render_map(services: AppServices) -> None:
    """Render visible points and turn a marker click into a selection."""
    ctx = services.machine.context
    renderer: MapRenderer = st.session_state.map_renderer
    view = services.engine.view

    if not view.points_loaded:
        LoadingPointsMessage().display()

    renderer.update_view(lat=ctx.map.lat, lon=ctx.map.lon, zoom=ctx.map.zoom)
    deck = renderer.render(view=view, selected_point_id=ctx.selection.point_id)
    click_result = render_pydeck_map(deck=deck, key="main_map", height=MapConfig.MAP_HEIGHT)

    point_id = click_result.point_id
    if point_id is not None and point_id != ctx.selection.point_id:
        execute_command(SelectPoint(point_id=point_id))
        st.rerun()


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Application entry point."""
    st.set_page_config(page_title=AppConfig.TITLE, page_icon=AppConfig.ICON, layout=AppConfig.LAYOUT)

    try:
        init_session_state()
    except ConfigurationError as e:
        logger.error(f"[CONFIG] {e}")
        st.error(f"⚙️ {e}. Add a [firebase] section to .streamlit/secrets.toml.")
        return

    st.title(AppConfig.TITLE)

    try:
        _run_app_ui()
    except Exception as e:
        # Log full traceback for debugging
        error_msg = f"{type(e).__name__}: {e}"
        full_traceback = traceback.format_exc()
        logger.error(f"[UI] UI error caught: {error_msg}\n{full_traceback}")

        st.error(f"⚠️ [UI] Something went wrong: {error_msg}")

        reset_ui_state()

        if st.button("🔄 Reset and Continue", type="primary"):
            st.rerun()


def _run_app_ui() -> None:
    """Run the main application UI. Separated for error handling wrapper."""
    services: AppServices = st.session_state.services
    sm = services.machine
    logger.info(f"[MAIN] Render cycle starting: state={sm.get_state_name()}")

    _collect(services.dispatcher.drain())

    if sm.is_signed_out:
        render_login_page(services)
        return

    _show_pending_notices(services)
    _poll_remote_events()

    view = services.engine.view
    SidebarRenderer(view=view, session=services.store.session).render()

    for failure in services.dispatcher.subscription_errors:
        SubscriptionErrorMessage(channel=failure.channel.value, error=str(failure.error)).display()

    col_map, col_details = st.columns([3, 1])
    with col_map:
        _render_map(services)
    with col_details:
        PointDetailsPanel(snapshot=services.store.snapshot, selection=sm.context.selection).render()


if __name__ == "__main__":
    main()
