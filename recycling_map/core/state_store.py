"""Local State Store - Last-known mirror of the remote collections.

Holds the current session, the recycling points and the favorite point ids
as ONE immutable StoreSnapshot. Every mutation swaps in a new snapshot, so
a reader never sees new points with old favorites (or cleared favorites
with old points).

Mutation entry points (nothing else may change the data):
    begin_session(): a new session starts with empty collections
    replace_points(): points snapshot replaced
    replace_favorites(): favorites set replaced
    clear(): session ended, everything emptied at once

Mutations must come from the UI thread (EventDispatcher.drain); listener
threads only post events.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace

from recycling_map.model.recycling_point import RecyclingPoint
from recycling_map.model.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    """Consistent view of the store at one point in time."""

    session: Session | None = None
    points: tuple[RecyclingPoint, ...] = ()
    favorite_ids: frozenset[str] = field(default_factory=frozenset)
    points_loaded: bool = False
    version: int = 0

    @property
    def is_signed_in(self) -> bool:
        return self.session is not None

    @property
    def epoch(self) -> int | None:
        """Epoch of the active session, or None when signed out."""
        return self.session.epoch if self.session else None

    def find_point(self, point_id: str | None) -> RecyclingPoint | None:
        """Known point by id (filtered-out points included)."""
        if point_id is None:
            return None
        for point in self.points:
            if point.id == point_id:
                return point
        return None


StoreListener = Callable[[StoreSnapshot], None]


class LocalStateStore:
    """Owned, single-instance store of points, favorites and session.

    Example:
        store = LocalStateStore()
        store.begin_session(session)
        store.replace_points(points)
        snap = store.snapshot
    """

    def __init__(self) -> None:
        self._snapshot = StoreSnapshot()
        self._listeners: list[StoreListener] = []

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def session(self) -> Session | None:
        return self._snapshot.session

    def add_listener(self, listener: StoreListener) -> None:
        """Register a callback invoked with the new snapshot after each mutation."""
        self._listeners.append(listener)

    def begin_session(self, session: Session) -> None:
        """Start a session with empty points and favorites."""
        logger.info(f"[STORE] Begin session {session}")
        self._swap(StoreSnapshot(session=session, version=self._snapshot.version + 1))

    def replace_points(self, points: Iterable[RecyclingPoint]) -> None:
        """Replace the whole point list.

        Raises:
            RuntimeError: If no session is active.
        """
        self._require_session("replace points")
        new_points = tuple(points)
        logger.info(f"[STORE] Points replaced: {len(new_points)} points")
        self._swap(
            replace(
                self._snapshot,
                points=new_points,
                points_loaded=True,
                version=self._snapshot.version + 1,
            )
        )

    def replace_favorites(self, favorite_ids: Iterable[str]) -> None:
        """Replace the whole favorite id set.

        Raises:
            RuntimeError: If no session is active.
        """
        self._require_session("replace favorites")
        new_ids = frozenset(favorite_ids)
        logger.info(f"[STORE] Favorites replaced: {len(new_ids)} favorites")
        self._swap(replace(self._snapshot, favorite_ids=new_ids, version=self._snapshot.version + 1))

    def clear(self) -> None:
        """Drop session, points and favorites in a single replacement."""
        logger.info("[STORE] Cleared")
        self._swap(StoreSnapshot(version=self._snapshot.version + 1))

    def _require_session(self, action: str) -> None:
        if self._snapshot.session is None:
            raise RuntimeError(f"Cannot {action} without an active session")

    def _swap(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot
        for listener in self._listeners:
            listener(snapshot)

    def __repr__(self) -> str:
        snap = self._snapshot
        return (
            f"LocalStateStore(session={snap.session}, points={len(snap.points)}, "
            f"favorites={len(snap.favorite_ids)}, version={snap.version})"
        )
