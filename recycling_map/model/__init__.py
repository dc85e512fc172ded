"""Data model classes for the recycling map.

- RecyclingPoint: Drop-off location mirrored from the remote store
- FavoriteMark: Per-user bookmark on a point (may dangle)
- Session: Authenticated user plus generation number
- Commands: Typed UI intents (ToggleFilter, ToggleFavorite, ...)
- Events: Tagged deliveries from listeners and writers
- Errors: AuthenticationRequired, WriteError, SubscriptionError, ...
"""

from recycling_map.model.commands import (
    ClearFilters,
    ClearSelection,
    Command,
    SelectPoint,
    SignOut,
    ToggleFavorite,
    ToggleFilter,
)
from recycling_map.model.errors import (
    AuthenticationRequired,
    ConfigurationError,
    RecyclingMapError,
    SignInError,
    SubscriptionError,
    WriteError,
)
from recycling_map.model.events import (
    Channel,
    FavoriteAction,
    FavoritesSnapshot,
    FavoriteWriteFailed,
    FavoriteWriteSucceeded,
    PointsSnapshot,
    StoreEvent,
    SubscriptionFailed,
)
from recycling_map.model.favorite import FavoriteMark
from recycling_map.model.recycling_point import RecyclingPoint
from recycling_map.model.session import Session

__all__ = [
    "RecyclingPoint",
    "FavoriteMark",
    "Session",
    "Command",
    "ToggleFilter",
    "ClearFilters",
    "ToggleFavorite",
    "SelectPoint",
    "ClearSelection",
    "SignOut",
    "StoreEvent",
    "PointsSnapshot",
    "FavoritesSnapshot",
    "SubscriptionFailed",
    "FavoriteWriteSucceeded",
    "FavoriteWriteFailed",
    "Channel",
    "FavoriteAction",
    "RecyclingMapError",
    "AuthenticationRequired",
    "WriteError",
    "SubscriptionError",
    "SignInError",
    "ConfigurationError",
]
