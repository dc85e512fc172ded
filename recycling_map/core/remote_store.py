"""Remote Store - Firestore boundary for points and favorites.

Two real-time reads and two writes:
    subscribe_points(): puntos_reciclaje collection
    subscribe_favorites(): favoritos/{user_id}/puntos
    create_favorite(): set favoritos/{user_id}/puntos/{point_id} {agregado: ...}
    delete_favorite(): delete that document

Listener callbacks run on the Firestore watch thread. They must only hand
data onward (SubscriptionManager posts events); they never touch the store.
"""

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Protocol

from recycling_map.constants import FirestoreConfig
from recycling_map.model.errors import SubscriptionError
from recycling_map.model.favorite import FavoriteMark
from recycling_map.model.recycling_point import RecyclingPoint

if TYPE_CHECKING:
    from google.cloud import firestore

    from recycling_map.settings import FirebaseSettings

logger = logging.getLogger(__name__)


PointsCallback = Callable[[tuple[RecyclingPoint, ...]], None]
FavoritesCallback = Callable[[tuple[FavoriteMark, ...]], None]
ErrorCallback = Callable[[Exception], None]


class Subscription(Protocol):
    """Handle of a live listener."""

    def unsubscribe(self) -> None: ...


class RemoteStore(Protocol):
    """What the core needs from the remote document store."""

    def subscribe_points(self, on_points: PointsCallback, on_error: ErrorCallback) -> Subscription: ...

    def subscribe_favorites(
        self, user_id: str, on_favorites: FavoritesCallback, on_error: ErrorCallback
    ) -> Subscription: ...

    def create_favorite(self, user_id: str, point_id: str, added_at: str) -> None: ...

    def delete_favorite(self, user_id: str, point_id: str) -> None: ...


# =============================================================================
# DOCUMENT CONVERSION
# =============================================================================


def points_from_documents(docs: Iterable[Any]) -> tuple[RecyclingPoint, ...]:
    """Convert point document snapshots, skipping ones without usable coordinates.

    Args:
        docs: Objects with ``.id`` and ``.to_dict()`` (Firestore DocumentSnapshot)
    """
    points = []
    for doc in docs:
        try:
            points.append(RecyclingPoint.from_document(doc.id, doc.to_dict() or {}))
        except ValueError as e:
            logger.warning(f"[REMOTE] Skipping malformed point document: {e}")
    return tuple(points)


def favorites_from_documents(user_id: str, docs: Iterable[Any]) -> tuple[FavoriteMark, ...]:
    """Convert favorite document snapshots (doc id = point id)."""
    return tuple(FavoriteMark.from_document(user_id, doc.id, doc.to_dict()) for doc in docs)


# =============================================================================
# FIRESTORE ADAPTER
# =============================================================================


class FirestoreRemoteStore:
    """RemoteStore backed by google-cloud-firestore.

    Example:
        remote = FirestoreRemoteStore(client=create_firestore_client(settings))
        sub = remote.subscribe_points(on_points=print, on_error=print)
        sub.unsubscribe()
    """

    def __init__(self, client: "firestore.Client") -> None:
        self.client = client

    def _favorites_ref(self, user_id: str) -> Any:
        return (
            self.client.collection(FirestoreConfig.FAVORITES_COLLECTION)
            .document(user_id)
            .collection(FirestoreConfig.FAVORITES_SUBCOLLECTION)
        )

    def subscribe_points(self, on_points: PointsCallback, on_error: ErrorCallback) -> Subscription:
        """Listen to the whole points collection."""
        collection_ref = self.client.collection(FirestoreConfig.POINTS_COLLECTION)
        logger.info(f"[REMOTE] Listening to {FirestoreConfig.POINTS_COLLECTION}")

        def callback(docs: list[Any], changes: Any, read_time: Any) -> None:
            try:
                points = points_from_documents(docs)
            except Exception as e:
                on_error(SubscriptionError(f"Could not read points snapshot: {e}"))
                return
            on_points(points)

        return collection_ref.on_snapshot(callback)

    def subscribe_favorites(
        self, user_id: str, on_favorites: FavoritesCallback, on_error: ErrorCallback
    ) -> Subscription:
        """Listen to one user's favorites collection."""
        logger.info(f"[REMOTE] Listening to favorites of {user_id}")

        def callback(docs: list[Any], changes: Any, read_time: Any) -> None:
            try:
                favorites = favorites_from_documents(user_id, docs)
            except Exception as e:
                on_error(SubscriptionError(f"Could not read favorites snapshot: {e}"))
                return
            on_favorites(favorites)

        return self._favorites_ref(user_id).on_snapshot(callback)

    def create_favorite(self, user_id: str, point_id: str, added_at: str) -> None:
        mark = FavoriteMark(point_id=point_id, user_id=user_id, added_at=added_at)
        self._favorites_ref(user_id).document(point_id).set(mark.to_dict())
        logger.info(f"[REMOTE] Favorite {point_id} created for {user_id}")

    def delete_favorite(self, user_id: str, point_id: str) -> None:
        self._favorites_ref(user_id).document(point_id).delete()
        logger.info(f"[REMOTE] Favorite {point_id} deleted for {user_id}")


def create_firestore_client(settings: "FirebaseSettings") -> "firestore.Client":
    """Create a Firestore client from a service account or default credentials."""
    from google.cloud import firestore
    from google.oauth2 import service_account

    if settings.service_account:
        credentials = service_account.Credentials.from_service_account_info(settings.service_account)
        logger.info(f"[REMOTE] Firestore client for {settings.project_id} (service account)")
        return firestore.Client(project=settings.project_id, credentials=credentials)

    logger.info(f"[REMOTE] Firestore client for {settings.project_id} (default credentials)")
    return firestore.Client(project=settings.project_id)
