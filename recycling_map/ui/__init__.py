"""User interface components for the recycling map.

File Structure (layout-based naming):
- left_panel.py: Sidebar with user label, material filters, favorites list
- center_map.py: Pydeck map with one pin per visible point
- right_panel.py: Details of the selected point and the favorite button
- login_page.py: E-mail/password form shown while signed out

Core Components:
- state_machine.py: SessionStateMachine (signed_out / signed_in) + ViewerContext
- services.py: Per-session wiring of store, view engine, dispatcher, listeners
- actions.py: Command execution and notice -> toast conversion
"""

from recycling_map.ui.actions import apply_command, execute_command, notices_to_messages, sign_in
from recycling_map.ui.center_map import MapRenderer
from recycling_map.ui.context import ViewerContext
from recycling_map.ui.left_panel import SidebarRenderer
from recycling_map.ui.login_page import render_login_page
from recycling_map.ui.right_panel import PointDetailsPanel
from recycling_map.ui.services import AppServices, build_services
from recycling_map.ui.state_machine import SessionStateMachine, StreamlitUIListener

__all__ = [
    "AppServices",
    "build_services",
    "SessionStateMachine",
    "ViewerContext",
    "StreamlitUIListener",
    "MapRenderer",
    "SidebarRenderer",
    "PointDetailsPanel",
    "render_login_page",
    "apply_command",
    "execute_command",
    "notices_to_messages",
    "sign_in",
]
