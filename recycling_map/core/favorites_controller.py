"""Favorites Controller - Toggle requests from the UI to the remote store.

toggle_favorite() never changes local state. The write runs on a worker
thread; the favorites listener delivers the authoritative result later. A
FavoriteWriteSucceeded/FavoriteWriteFailed event tagged with the epoch of
the session that started the write is posted on completion, so a result
that lands after sign-out is dropped by the dispatcher.
"""

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime, timezone

from recycling_map.constants import WriteConfig
from recycling_map.core.remote_store import RemoteStore
from recycling_map.core.state_store import LocalStateStore
from recycling_map.model.errors import AuthenticationRequired, WriteError
from recycling_map.model.events import (
    FavoriteAction,
    FavoriteWriteFailed,
    FavoriteWriteSucceeded,
    StoreEvent,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FavoritesController:
    """Mediates favorite toggles, enforcing the signed-in precondition.

    Example:
        controller = FavoritesController(store=store, remote=remote, post_event=dispatcher.post)
        future = controller.toggle_favorite(point_id="p1", currently_favorite=False)
    """

    def __init__(
        self,
        store: LocalStateStore,
        remote: RemoteStore,
        post_event: Callable[[StoreEvent], None],
        executor: Executor | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize controller.

        Args:
            store: Source of the current session (read only)
            remote: Remote store receiving the writes
            post_event: Where completion events go (EventDispatcher.post)
            executor: Runs writes off the UI thread (own thread pool if None)
            clock: Timestamp source for new favorites
        """
        self._store = store
        self._remote = remote
        self._post = post_event
        self._executor = executor or ThreadPoolExecutor(
            max_workers=WriteConfig.MAX_WORKERS,
            thread_name_prefix=WriteConfig.THREAD_NAME_PREFIX,
        )
        self._clock = clock

    def toggle_favorite(self, point_id: str, currently_favorite: bool) -> Future:
        """Request removal (currently_favorite=True) or creation of a favorite.

        Returns:
            Future of the remote write. Callers do not need to wait on it.

        Raises:
            AuthenticationRequired: If no session is active. No write is issued.
        """
        session = self._store.session
        if session is None:
            logger.warning(f"[FAV] Toggle of {point_id} blocked: not signed in")
            raise AuthenticationRequired()

        user_id, epoch = session.user_id, session.epoch
        if currently_favorite:
            action = FavoriteAction.REMOVE
            logger.info(f"[FAV] Removing {point_id} for {user_id}")
            future = self._executor.submit(self._remote.delete_favorite, user_id, point_id)
        else:
            action = FavoriteAction.ADD
            added_at = self._clock().isoformat()
            logger.info(f"[FAV] Adding {point_id} for {user_id} at {added_at}")
            future = self._executor.submit(self._remote.create_favorite, user_id, point_id, added_at)

        future.add_done_callback(lambda f: self._on_write_done(f, epoch=epoch, point_id=point_id, action=action))
        return future

    def _on_write_done(self, future: Future, epoch: int, point_id: str, action: FavoriteAction) -> None:
        error = future.exception()
        if error is None:
            self._post(FavoriteWriteSucceeded(epoch=epoch, point_id=point_id, action=action))
            return
        logger.error(f"[FAV] {action.value} of {point_id} failed: {error}")
        self._post(
            FavoriteWriteFailed(
                epoch=epoch,
                point_id=point_id,
                action=action,
                error=WriteError(point_id=point_id, cause=error),
            )
        )

    def shutdown(self) -> None:
        """Stop accepting writes; in-flight writes finish on their own."""
        self._executor.shutdown(wait=False)
