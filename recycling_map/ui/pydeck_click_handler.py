"""Pydeck click handler using streamlit-deckgl for marker click support.

Uses st_deckgl from streamlit-deckgl, which returns the full deck.gl onClick
event, so a marker click gives us the picked point's properties.
"""

import logging
from dataclasses import dataclass
from typing import Any

import pydeck as pdk
import streamlit as st
from streamlit_deckgl import st_deckgl  # type: ignore[import-untyped]

from recycling_map.constants import ClickConfig, MapConfig

logger = logging.getLogger(__name__)


@dataclass
class PydeckClickResult:
    """Result from Pydeck click detection.

    Attributes:
        clicked_object: The picked deck.gl object data (dict) or None for empty-map clicks
        clicked_coordinate: [lon, lat] of click location
    """

    clicked_object: dict[str, Any] | None
    clicked_coordinate: list[float] | None

    @property
    def is_object_click(self) -> bool:
        return self.clicked_object is not None

    @property
    def point_id(self) -> str | None:
        """Id of the clicked recycling point, if a point marker was clicked."""
        return point_id_from_click(self.clicked_object)

    @staticmethod
    def empty() -> "PydeckClickResult":
        """Return empty result (no click detected)."""
        return PydeckClickResult(clicked_object=None, clicked_coordinate=None)


def point_id_from_click(clicked_object: dict[str, Any] | None) -> str | None:
    """Extract the point id from a picked object, None for anything else."""
    if not clicked_object:
        return None
    if clicked_object.get("type") != ClickConfig.TYPE_POINT:
        return None
    point_id = clicked_object.get("id")
    return str(point_id) if point_id else None


def parse_click_event(event: dict[str, Any] | None) -> PydeckClickResult:
    """Convert an st_deckgl click event into a PydeckClickResult.

    st_deckgl SPREADS object properties into the event dict (no "object" key):
    - Empty-map click: {coordinate: [lon, lat], eventType: "click"}
    - Object click: {type: ..., id: ..., position: [...], coordinate: [lon, lat], eventType: "click"}
    """
    if not event:
        return PydeckClickResult.empty()

    clicked_coordinate: list[float] | None = None
    coord = event.get("coordinate")
    if isinstance(coord, (list, tuple)) and len(coord) >= 2:
        clicked_coordinate = [float(coord[0]), float(coord[1])]

    clicked_object: dict[str, Any] | None = None
    if event.get("type") and event["type"] != "click":
        clicked_object = {k: v for k, v in event.items() if k not in ("coordinate", "eventType")}

    if clicked_coordinate is None and clicked_object is None:
        return PydeckClickResult.empty()
    return PydeckClickResult(clicked_object=clicked_object, clicked_coordinate=clicked_coordinate)


def render_pydeck_map(deck: pdk.Deck, key: str, height: int = MapConfig.MAP_HEIGHT) -> PydeckClickResult:
    """Render Pydeck map and return the new click, if any.

    The same event is returned by the component on every rerun until the
    next click, so clicks are deduplicated by object id / coordinate.

    Args:
        deck: Configured pydeck.Deck object
        key: Unique key for this component instance
        height: Height in pixels
    """
    last_click_key = f"_deckgl_last_click_{key}"
    if last_click_key not in st.session_state:
        st.session_state[last_click_key] = None

    # MUST pass events=['click'] to enable click detection
    event = st_deckgl(deck, key=key, height=height, events=["click"])
    result = parse_click_event(event)
    if result.clicked_object is None and result.clicked_coordinate is None:
        return result

    click_id = _get_click_id(obj=result.clicked_object, coord=result.clicked_coordinate)
    if click_id == st.session_state.get(last_click_key):
        return PydeckClickResult.empty()

    st.session_state[last_click_key] = click_id
    logger.debug(f"[MAP] Click detected: object={result.is_object_click}, coord={result.clicked_coordinate}")
    return result


def _get_click_id(obj: dict[str, Any] | None, coord: list[float] | None) -> str:
    """Generate unique ID for click deduplication."""
    parts = []
    if obj:
        obj_type = obj.get("type", "")
        obj_id = obj.get("id", "")
        if obj_type and obj_id:
            parts.append(f"{obj_type}_{obj_id}")
    if coord:
        # Round coordinates for dedup tolerance
        parts.append(f"coord_{coord[0]:.5f}_{coord[1]:.5f}")
    return "_".join(parts)
