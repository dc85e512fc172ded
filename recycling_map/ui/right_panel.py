"""Right panel components for the recycling map.

PointDetailsPanel shows the point picked on the map (or in the favorites
list): name, commune, schedule, accepted materials, and the add/remove
favorite button. The button label follows the point's favorite flag, which
is re-derived from the latest favorites snapshot on every run.
"""

import logging

import streamlit as st

from recycling_map.constants import StyleConfig
from recycling_map.core.derived_view import is_favorite
from recycling_map.core.state_store import StoreSnapshot
from recycling_map.model.commands import ClearSelection, ToggleFavorite
from recycling_map.ui.actions import execute_command
from recycling_map.ui.context import SelectionContext

logger = logging.getLogger(__name__)


class PointDetailsPanel:
    """Details and favorite toggle for the selected point."""

    def __init__(self, snapshot: StoreSnapshot, selection: SelectionContext) -> None:
        self.snapshot = snapshot
        self.selection = selection

    def render(self) -> None:
        if not self.selection.has_selection():
            st.caption(f"{StyleConfig.POINT_EMOJI} Click a marker to see its details.")
            return

        point = self.snapshot.find_point(self.selection.point_id)
        if point is None:
            # Removed remotely since it was selected
            logger.info(f"[PANEL] Selected point {self.selection.point_id} no longer exists")
            self.selection.clear()
            st.caption(f"{StyleConfig.POINT_EMOJI} Click a marker to see its details.")
            return

        favorite = is_favorite(point, self.snapshot.favorite_ids)
        title = f"{StyleConfig.FAVORITE_EMOJI} {point.name}" if favorite else f"{StyleConfig.POINT_EMOJI} {point.name}"
        st.subheader(title)
        st.markdown(f"**Comuna:** {point.commune or '-'}")
        st.markdown(f"**Horario:** {point.schedule or '-'}")
        st.markdown("**Materiales:**")
        if point.materials:
            st.markdown("\n".join(f"- {m}" for m in point.materials))
        else:
            st.caption("No materials listed.")

        st.button(
            StyleConfig.REMOVE_FAVORITE_LABEL if favorite else StyleConfig.ADD_FAVORITE_LABEL,
            key=f"toggle_favorite_{point.id}",
            type="primary",
            use_container_width=True,
            on_click=execute_command,
            args=(ToggleFavorite(point_id=point.id, was_favorite=favorite),),
        )
        st.button(
            "✖️ Close",
            key="close_details",
            use_container_width=True,
            on_click=execute_command,
            args=(ClearSelection(),),
        )
