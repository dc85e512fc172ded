"""Typed UI commands.

Widgets never touch state directly: they produce one of these and
ui.actions.execute_command routes it to the core.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """Base class for all UI commands."""


@dataclass(frozen=True)
class ToggleFilter(Command):
    """Check or uncheck one material filter."""

    material: str


@dataclass(frozen=True)
class ClearFilters(Command):
    """Uncheck all material filters."""


@dataclass(frozen=True)
class ToggleFavorite(Command):
    """Add (was_favorite=False) or remove (was_favorite=True) a favorite."""

    point_id: str
    was_favorite: bool


@dataclass(frozen=True)
class SelectPoint(Command):
    """Open the details panel for a point.

    center_map moves the map onto the point (favorites list); a marker
    click leaves the view where the user put it.
    """

    point_id: str
    center_map: bool = False


@dataclass(frozen=True)
class ClearSelection(Command):
    """Close the details panel."""


@dataclass(frozen=True)
class SignOut(Command):
    """End the current session."""
