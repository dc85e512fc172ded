"""Event Dispatcher - Serializes remote events and UI commands into the core.

Listener and writer threads call post(); the UI thread calls drain() on
every poll. drain() applies queued events one at a time in arrival order,
so two recomputations never interleave and the store is only mutated from
the UI thread.

Snapshots are full replacements, so a queued snapshot is dropped when a
newer one of the same kind and epoch is posted. The inbox holds at most
one snapshot per channel and epoch however long nobody drains it.

Events from another session (epoch mismatch, or no session at all) are
discarded. Points and favorites may arrive in either order; the derived
view copes with whatever partial state exists.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from recycling_map.core.derived_view import DerivedViewEngine
from recycling_map.core.state_store import LocalStateStore
from recycling_map.model.commands import ClearFilters, Command, ToggleFavorite, ToggleFilter
from recycling_map.model.events import (
    Channel,
    FavoritesSnapshot,
    FavoriteWriteFailed,
    FavoriteWriteSucceeded,
    PointsSnapshot,
    StoreEvent,
    SubscriptionFailed,
)

if TYPE_CHECKING:
    from recycling_map.core.favorites_controller import FavoritesController

logger = logging.getLogger(__name__)


def _coalesce_key(event: StoreEvent) -> tuple | None:
    """Events sharing a key supersede each other; None means never coalesced."""
    if isinstance(event, PointsSnapshot):
        return (Channel.POINTS, event.epoch)
    if isinstance(event, FavoritesSnapshot):
        return (Channel.FAVORITES, event.epoch)
    return None


@dataclass
class DrainResult:
    """Outcome of one drain() pass.

    Attributes:
        applied: Snapshots applied to the store
        discarded: Events dropped because they belong to another session
        notices: Non-snapshot events for the UI to report (failures, confirmations)
    """

    applied: int = 0
    discarded: int = 0
    notices: list[StoreEvent] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if the UI should re-render."""
        return self.applied > 0 or bool(self.notices)


class EventDispatcher:
    """Single consumer of remote events and core commands."""

    def __init__(self, store: LocalStateStore, engine: DerivedViewEngine) -> None:
        self._store = store
        self._engine = engine
        self._inbox: deque[StoreEvent] = deque()
        self._lock = threading.Lock()
        self._failures: dict[Channel, SubscriptionFailed] = {}

    def post(self, event: StoreEvent) -> None:
        """Queue an event, replacing a superseded snapshot. Safe to call from any thread."""
        key = _coalesce_key(event)
        with self._lock:
            if key is not None:
                kept = deque(e for e in self._inbox if _coalesce_key(e) != key)
                if len(kept) < len(self._inbox):
                    logger.debug(f"[DISPATCH] Coalesced {type(event).__name__} (epoch {event.epoch})")
                self._inbox = kept
            self._inbox.append(event)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._inbox)

    @property
    def subscription_errors(self) -> tuple[SubscriptionFailed, ...]:
        """Current stream failures, one per failing channel."""
        return tuple(self._failures.values())

    def drain(self) -> DrainResult:
        """Apply all queued events in order. Call from the UI thread only."""
        with self._lock:
            events, self._inbox = self._inbox, deque()

        result = DrainResult()
        for event in events:
            self._apply(event, result)

        if result.applied or result.discarded:
            logger.info(
                f"[DISPATCH] Drained: applied={result.applied}, discarded={result.discarded}, "
                f"notices={len(result.notices)}"
            )
        return result

    def _apply(self, event: StoreEvent, result: DrainResult) -> None:
        current_epoch = self._store.snapshot.epoch
        if current_epoch is None or event.epoch != current_epoch:
            logger.debug(f"[DISPATCH] Discarding stale {type(event).__name__} (epoch {event.epoch} != {current_epoch})")
            result.discarded += 1
            return

        if isinstance(event, PointsSnapshot):
            self._store.replace_points(event.points)
            self._failures.pop(Channel.POINTS, None)
            result.applied += 1
        elif isinstance(event, FavoritesSnapshot):
            self._store.replace_favorites(event.point_ids)
            self._failures.pop(Channel.FAVORITES, None)
            result.applied += 1
        elif isinstance(event, SubscriptionFailed):
            # Keep last-known state on screen; the client reconnects on its own
            logger.error(f"[DISPATCH] {event.channel.value} subscription failed: {event.error}")
            self._failures[event.channel] = event
            result.notices.append(event)
        elif isinstance(event, (FavoriteWriteSucceeded, FavoriteWriteFailed)):
            result.notices.append(event)
        else:
            raise TypeError(f"Unknown event type: {type(event).__name__}")

    def handle_command(self, command: Command, controller: "FavoritesController") -> None:
        """Route a core command to the engine or the favorites controller.

        Raises:
            AuthenticationRequired: From the controller when signed out.
            TypeError: For commands the core does not handle.
        """
        logger.info(f"[DISPATCH] Command {command}")
        if isinstance(command, ToggleFilter):
            self._engine.toggle_filter(command.material)
        elif isinstance(command, ClearFilters):
            self._engine.clear_filters()
        elif isinstance(command, ToggleFavorite):
            controller.toggle_favorite(point_id=command.point_id, currently_favorite=command.was_favorite)
        else:
            raise TypeError(f"Command not handled by the core: {type(command).__name__}")

    def reset(self) -> None:
        """Forget stream failures (new session)."""
        self._failures.clear()
