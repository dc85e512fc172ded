"""MapRenderer - Pydeck map rendering for the recycling map.

Renders the visible recycling points as pin icons on an OpenStreetMap
raster basemap:
- Favorite points use the red pin, others the green pin
- Every render builds the full marker list again, replacing all previous markers
- Markers are pickable; a click selects the point (details + favorite button
  in the right panel)

Key pydeck conventions:
- Uses [lon, lat] coordinate order (GeoJSON standard)
- Data prepared as list[dict] for GPU streaming
- pickable=True enables click detection
"""

import html
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import pydeck as pdk

from recycling_map.constants import ClickConfig, MapConfig, MarkerConfig, StyleConfig
from recycling_map.core.derived_view import AnnotatedPoint, DerivedView
from recycling_map.model.recycling_point import RecyclingPoint

logger = logging.getLogger(__name__)


class IconVariant(Enum):
    """Pin color of a marker."""

    DEFAULT = "default"  # Green
    FAVORITE = "favorite"  # Red

    @property
    def url(self) -> str:
        if self is IconVariant.FAVORITE:
            return MarkerConfig.ICON_URL_FAVORITE
        return MarkerConfig.ICON_URL_DEFAULT

    def icon_data(self) -> dict[str, Any]:
        """IconLayer icon descriptor (anchored at the pin tip)."""
        return {
            "url": self.url,
            "width": MarkerConfig.ICON_WIDTH,
            "height": MarkerConfig.ICON_HEIGHT,
            "anchorY": MarkerConfig.ICON_ANCHOR_Y,
        }


@dataclass(frozen=True)
class MarkerSpec:
    """One marker handed to the map: where, what to show, which pin.

    Attributes:
        coordinates: (lon, lat) - Pydeck order
        payload: Display data (id, name, commune, schedule, materials, popup html)
        icon_variant: Pin color
    """

    coordinates: tuple[float, float]
    payload: dict[str, Any]
    icon_variant: IconVariant

    def to_layer_datum(self) -> dict[str, Any]:
        """Flatten into the dict the IconLayer consumes."""
        return {
            **self.payload,
            "type": ClickConfig.TYPE_POINT,
            "position": list(self.coordinates),
            "icon_data": self.icon_variant.icon_data(),
        }


def popup_html(point: RecyclingPoint, is_favorite: bool) -> str:
    """Details snippet for tooltips and the details panel (escaped)."""
    items = "".join(f"<li>{html.escape(m)}</li>" for m in point.materials)
    status = f"<p>{StyleConfig.FAVORITE_EMOJI} Favorite</p>" if is_favorite else ""
    return (
        f"<b>{html.escape(point.name)}</b>"
        f"<p>Comuna: {html.escape(point.commune)}</p>"
        f"<p>Horario: {html.escape(point.schedule)}</p>"
        f"<p>Materiales:</p><ul>{items}</ul>"
        f"{status}"
    )


def build_markers(points: tuple[AnnotatedPoint, ...] | list[AnnotatedPoint]) -> list[MarkerSpec]:
    """One MarkerSpec per visible point, in view order."""
    return [
        MarkerSpec(
            coordinates=annotated.point.lon_lat,
            payload={
                "id": annotated.point.id,
                "name": annotated.point.name,
                "commune": annotated.point.commune,
                "schedule": annotated.point.schedule,
                "materials": ", ".join(annotated.point.materials),
                "is_favorite": annotated.is_favorite,
                "popup": popup_html(annotated.point, annotated.is_favorite),
            },
            icon_variant=IconVariant.FAVORITE if annotated.is_favorite else IconVariant.DEFAULT,
        )
        for annotated in points
    ]


# Mapbox GL style for the 2D raster basemap.
# pydeck's TileLayer needs a JavaScript renderSubLayers callback, so raster
# tiles go through map_style with map_provider="mapbox" instead.
OSM_STYLE: dict[str, object] = {
    "version": 8,
    "sources": {
        "osm": {
            "type": "raster",
            "tiles": MapConfig.OSM_TILES_ABC,
            "tileSize": 256,
            "attribution": MapConfig.OSM_ATTRIBUTION,
        }
    },
    "layers": [
        {
            "id": "osm",
            "type": "raster",
            "source": "osm",
            "minzoom": 0,
            "maxzoom": MapConfig.MAX_ZOOM,
        }
    ],
}


class MapRenderer:
    """Renders the derived view's points on a Pydeck map.

    Example:
        renderer = MapRenderer()
        deck = renderer.render(view=engine.view)
    """

    def __init__(
        self,
        center_lat: float = MapConfig.START_CENTER_LAT,
        center_lon: float = MapConfig.START_CENTER_LON,
        zoom: int = MapConfig.DEFAULT_ZOOM,
    ) -> None:
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.zoom = zoom

    def get_view_state(self) -> pdk.ViewState:
        """Create Pydeck ViewState from current settings."""
        return pdk.ViewState(
            latitude=self.center_lat,
            longitude=self.center_lon,
            zoom=self.zoom,
            pitch=MapConfig.DEFAULT_PITCH,
            bearing=MapConfig.DEFAULT_BEARING,
            max_zoom=MapConfig.MAX_ZOOM,
        )

    def update_view(self, lat: float | None = None, lon: float | None = None, zoom: int | None = None) -> None:
        """Update view state parameters."""
        if lat is not None:
            self.center_lat = lat
        if lon is not None:
            self.center_lon = lon
        if zoom is not None:
            self.zoom = zoom

    def render(self, view: DerivedView, selected_point_id: str | None = None) -> pdk.Deck:
        """Render all visible points, replacing any previously rendered markers.

        Args:
            view: Current derived view (visible points with favorite flags)
            selected_point_id: Point to highlight, if any

        Returns:
            pdk.Deck object ready for display.
        """
        markers = build_markers(view.points)
        layers = [self._create_points_layer(markers)]
        if selected_point_id is not None:
            selected = [m for m in markers if m.payload["id"] == selected_point_id]
            if selected:
                layers.insert(0, self._create_selection_layer(selected[0]))

        logger.debug(f"[MAP] Rendering {len(markers)} markers (selected={selected_point_id})")
        return pdk.Deck(
            map_style=OSM_STYLE,
            map_provider="mapbox",  # Required when map_style is a dict
            initial_view_state=self.get_view_state(),
            layers=layers,
            tooltip=self._create_tooltip_config(),
            parameters={"pickingRadius": ClickConfig.PICKING_RADIUS_PX},
        )

    def _create_points_layer(self, markers: list[MarkerSpec]) -> pdk.Layer:
        return pdk.Layer(
            "IconLayer",
            [m.to_layer_datum() for m in markers],
            get_icon="icon_data",
            get_position="position",
            get_size=MarkerConfig.ICON_SIZE_PX,
            size_units="pixels",
            pickable=True,
            auto_highlight=True,
            id=ClickConfig.LAYER_ID_POINTS,
        )

    @staticmethod
    def _create_selection_layer(marker: MarkerSpec) -> pdk.Layer:
        """Halo under the selected point."""
        return pdk.Layer(
            "ScatterplotLayer",
            [{"position": list(marker.coordinates)}],
            get_position="position",
            get_radius=14,
            radius_units="pixels",
            get_fill_color=[34, 197, 94, 90],
            get_line_color=[21, 128, 61, 220],
            stroked=True,
            line_width_min_pixels=2,
            pickable=False,
            id="selected_point",
        )

    @staticmethod
    def _create_tooltip_config() -> dict[str, str | dict[str, str]]:
        """Name, commune and materials on hover; full details in the side panel."""
        return {
            "html": "<b>{name}</b><br/>{commune}<br/><small>{materials}</small>",
            "style": {
                "backgroundColor": "rgba(255, 255, 255, 0.95)",
                "color": "#333",
                "padding": "6px 10px",
                "borderRadius": "4px",
            },
        }
