"""Context Classes for the Session State Machine.

UI-only state that is NOT derived from the remote store: which point's
details are open, where the map is centred, the last sign-in error.

Architecture:
- All contexts inherit from BaseContext (provides clear() interface)
- ViewerContext composes all sub-contexts and is the state machine model
- Contexts are pure data holders - no business logic

Sub-contexts:
    SelectionContext: Point whose details panel is open
    MapContext: Map center and zoom
    NoticeContext: Last sign-in error shown on the login page
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from recycling_map.constants import MapConfig


class BaseContext(ABC):
    """Abstract base class for all context dataclasses.

    All contexts should be clearable to reset to their initial state.
    """

    @abstractmethod
    def clear(self) -> None:
        """Reset context to initial state."""
        ...


@dataclass
class SelectionContext(BaseContext):
    """Point whose details panel is open."""

    point_id: str | None = None

    def clear(self) -> None:
        self.point_id = None

    def select(self, point_id: str) -> None:
        self.point_id = point_id

    def has_selection(self) -> bool:
        return self.point_id is not None


@dataclass
class MapContext(BaseContext):
    """Map view state (pydeck ViewState values)."""

    lat: float = MapConfig.START_CENTER_LAT
    lon: float = MapConfig.START_CENTER_LON
    zoom: int = MapConfig.DEFAULT_ZOOM

    def set_center(self, lon: float, lat: float) -> None:
        self.lon = lon
        self.lat = lat

    def reset_view(self) -> None:
        """Back to the default center and zoom."""
        self.lat = MapConfig.START_CENTER_LAT
        self.lon = MapConfig.START_CENTER_LON
        self.zoom = MapConfig.DEFAULT_ZOOM

    def clear(self) -> None:
        self.reset_view()


@dataclass
class NoticeContext(BaseContext):
    """Persistent notices that survive a rerun."""

    sign_in_error: str = ""

    def clear(self) -> None:
        self.sign_in_error = ""


@dataclass
class ViewerContext:
    """Shared context/model for the session state machine.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model. It stores the current state value.
    """

    # State managed by python-statemachine (model pattern)
    state: str | None = None

    selection: SelectionContext = field(default_factory=SelectionContext)
    map: MapContext = field(default_factory=MapContext)
    notices: NoticeContext = field(default_factory=NoticeContext)

    def clear(self) -> None:
        """Reset all UI state (session ended)."""
        self.selection.clear()
        self.map.clear()
        self.notices.clear()

    def __repr__(self) -> str:
        return f"ViewerContext(state={self.state}, selected={self.selection.point_id})"
