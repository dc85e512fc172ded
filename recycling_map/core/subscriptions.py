"""Subscription lifecycle - Two live listeners per session.

open(session) starts the points and favorites listeners. Every delivery is
wrapped in an event tagged with session.epoch and posted to the
dispatcher; the listener thread never applies anything itself.

close() unsubscribes both. A delivery already in flight when close() runs
still reaches the dispatcher, which drops it because its epoch no longer
matches the store's session.
"""

import logging
from collections.abc import Callable

from recycling_map.core.remote_store import RemoteStore, Subscription
from recycling_map.model.events import (
    Channel,
    FavoritesSnapshot,
    PointsSnapshot,
    StoreEvent,
    SubscriptionFailed,
)
from recycling_map.model.favorite import FavoriteMark
from recycling_map.model.recycling_point import RecyclingPoint
from recycling_map.model.session import Session

logger = logging.getLogger(__name__)


class SubscriptionManager:
    """Owns the live listeners of the current session."""

    def __init__(self, remote: RemoteStore, post_event: Callable[[StoreEvent], None]) -> None:
        self._remote = remote
        self._post = post_event
        self._subscriptions: dict[Channel, Subscription] = {}
        self._epoch: int | None = None

    @property
    def is_open(self) -> bool:
        return bool(self._subscriptions)

    @property
    def epoch(self) -> int | None:
        """Epoch the open listeners are tagged with."""
        return self._epoch

    def open(self, session: Session) -> None:
        """Start both listeners for ``session``, closing any previous ones."""
        if self.is_open:
            self.close()

        epoch = session.epoch
        self._epoch = epoch

        def on_points(points: tuple[RecyclingPoint, ...]) -> None:
            self._post(PointsSnapshot(epoch=epoch, points=points))

        def on_favorites(favorites: tuple[FavoriteMark, ...]) -> None:
            self._post(FavoritesSnapshot(epoch=epoch, favorites=favorites))

        def on_error_for(channel: Channel) -> Callable[[Exception], None]:
            def on_error(error: Exception) -> None:
                logger.error(f"[SUB] {channel.value} stream failed (epoch={epoch}): {error}")
                self._post(SubscriptionFailed(epoch=epoch, channel=channel, error=error))

            return on_error

        self._subscriptions[Channel.POINTS] = self._remote.subscribe_points(
            on_points=on_points, on_error=on_error_for(Channel.POINTS)
        )
        self._subscriptions[Channel.FAVORITES] = self._remote.subscribe_favorites(
            user_id=session.user_id, on_favorites=on_favorites, on_error=on_error_for(Channel.FAVORITES)
        )
        logger.info(f"[SUB] Opened points + favorites listeners for {session}")

    def close(self) -> None:
        """Unsubscribe all listeners. Safe to call when nothing is open."""
        for channel, subscription in self._subscriptions.items():
            try:
                subscription.unsubscribe()
            except Exception as e:
                # The epoch guard already drops anything it still delivers
                logger.warning(f"[SUB] Unsubscribe of {channel.value} failed: {e}")
        if self._subscriptions:
            logger.info(f"[SUB] Closed listeners (epoch={self._epoch})")
        self._subscriptions = {}
        self._epoch = None
