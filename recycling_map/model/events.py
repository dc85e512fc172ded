"""Events delivered to the dispatcher from listener and writer threads.

Every event carries the epoch of the session that produced it. The
dispatcher drops events whose epoch is not the current session's.
"""

from dataclasses import dataclass
from enum import Enum

from recycling_map.model.favorite import FavoriteMark
from recycling_map.model.recycling_point import RecyclingPoint


class Channel(Enum):
    """Real-time subscription channels."""

    POINTS = "points"
    FAVORITES = "favorites"


class FavoriteAction(Enum):
    """Kind of favorite write."""

    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class StoreEvent:
    """Base class for all dispatcher events."""

    epoch: int


@dataclass(frozen=True)
class PointsSnapshot(StoreEvent):
    """Full replacement of the recycling point collection."""

    points: tuple[RecyclingPoint, ...]


@dataclass(frozen=True)
class FavoritesSnapshot(StoreEvent):
    """Full replacement of the user's favorites."""

    favorites: tuple[FavoriteMark, ...]

    @property
    def point_ids(self) -> frozenset[str]:
        return frozenset(f.point_id for f in self.favorites)


@dataclass(frozen=True)
class SubscriptionFailed(StoreEvent):
    """A snapshot stream failed; last-known state stays displayed."""

    channel: Channel
    error: Exception


@dataclass(frozen=True)
class FavoriteWriteSucceeded(StoreEvent):
    """A favorite create/delete was acknowledged by the remote store."""

    point_id: str
    action: FavoriteAction


@dataclass(frozen=True)
class FavoriteWriteFailed(StoreEvent):
    """A favorite create/delete failed; nothing was changed locally."""

    point_id: str
    action: FavoriteAction
    error: Exception
