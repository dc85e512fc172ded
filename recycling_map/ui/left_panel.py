"""Sidebar UI renderer for the recycling map.

Renders the left sidebar with:
- Signed-in user label and sign-out button
- Material filter checkboxes (one per material in the universe)
- Favorites list with a remove button per row

Widgets report through commands (on_change/on_click callbacks run before
the next script run, so the view is already recomputed when it renders).
"""

import logging

import streamlit as st

from recycling_map.constants import StyleConfig
from recycling_map.core.derived_view import DerivedView, filter_widget_key
from recycling_map.model.commands import ClearFilters, SelectPoint, SignOut, ToggleFavorite, ToggleFilter
from recycling_map.model.message import NoFavoritesMessage, SignedInAsMessage
from recycling_map.model.session import Session
from recycling_map.ui.actions import execute_command

logger = logging.getLogger(__name__)


class SidebarRenderer:
    """Renders the sidebar from the derived view.

    Example:
        SidebarRenderer(view=engine.view, session=store.session).render()
    """

    def __init__(self, view: DerivedView, session: Session | None) -> None:
        """Initialize sidebar renderer with required dependencies."""
        self.view = view
        self.session = session

    def render(self) -> None:
        """Render complete sidebar."""
        with st.sidebar:
            self._render_user()
            st.divider()
            self._render_filters()
            st.divider()
            self._render_favorites()

    def _render_user(self) -> None:
        if self.session is None:
            return
        SignedInAsMessage(label=self.session.label).display()
        if st.button("🚪 Sign Out", use_container_width=True, key="sign_out"):
            # Not a callback: the transition's st.rerun() must be able to fire
            execute_command(SignOut())

    def _render_filters(self) -> None:
        """One checkbox per material, in universe order."""
        st.subheader("Filter by Material")
        if not self.view.materials:
            st.caption("No materials available yet.")
            return

        for material in self.view.materials:
            key = filter_widget_key(material)
            # Keep widget state in line with the engine (selection may have been pruned)
            st.session_state[key] = material in self.view.active_filters
            st.checkbox(
                material,
                key=key,
                on_change=execute_command,
                args=(ToggleFilter(material=material),),
            )

        st.button(
            "✖️ Clear Filters",
            use_container_width=True,
            disabled=not self.view.active_filters,
            on_click=execute_command,
            args=(ClearFilters(),),
            key="clear_filters",
        )
        st.caption(f"Showing {self.view.visible_count} of {self.view.total_points} points")

    def _render_favorites(self) -> None:
        """Favorites that exist locally; dangling favorites are not listed."""
        st.subheader(f"{StyleConfig.FAVORITE_EMOJI} My Favorites")
        if not self.view.favorites:
            NoFavoritesMessage().display()
            return

        for point in self.view.favorites:
            col_name, col_remove = st.columns([5, 1])
            with col_name:
                st.button(
                    f"**{point.name}**  \n{point.commune}",
                    key=f"fav_show_{point.id}",
                    use_container_width=True,
                    on_click=execute_command,
                    args=(SelectPoint(point_id=point.id, center_map=True),),
                )
            with col_remove:
                st.button(
                    StyleConfig.REMOVE_EMOJI,
                    key=f"fav_remove_{point.id}",
                    help="Remove from favorites",
                    on_click=execute_command,
                    args=(ToggleFavorite(point_id=point.id, was_favorite=True),),
                )
