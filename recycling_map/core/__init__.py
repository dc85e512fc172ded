"""Reactive core of the recycling map.

- LocalStateStore: Immutable snapshots of session, points and favorites
- DerivedViewEngine: Material universe, filtering and favorite annotations
- FavoritesController: Asynchronous favorite writes behind a sign-in check
- SubscriptionManager: Per-session real-time listeners, epoch-tagged
- EventDispatcher: Serializes events into the store on the UI thread
- FirestoreRemoteStore / FirebaseAuthClient: External service adapters

No module in this package imports Streamlit.
"""

from recycling_map.core.auth import AuthSessionWatcher, AuthUser, FirebaseAuthClient
from recycling_map.core.derived_view import (
    AnnotatedPoint,
    DerivedView,
    DerivedViewEngine,
    annotate_points,
    compute_view,
    favorite_points,
    is_favorite,
    material_universe,
    visible_points,
)
from recycling_map.core.dispatcher import DrainResult, EventDispatcher
from recycling_map.core.favorites_controller import FavoritesController
from recycling_map.core.remote_store import FirestoreRemoteStore, RemoteStore, Subscription
from recycling_map.core.state_store import LocalStateStore, StoreSnapshot
from recycling_map.core.subscriptions import SubscriptionManager

__all__ = [
    "LocalStateStore",
    "StoreSnapshot",
    "DerivedViewEngine",
    "DerivedView",
    "AnnotatedPoint",
    "material_universe",
    "visible_points",
    "is_favorite",
    "annotate_points",
    "favorite_points",
    "compute_view",
    "FavoritesController",
    "RemoteStore",
    "Subscription",
    "FirestoreRemoteStore",
    "SubscriptionManager",
    "EventDispatcher",
    "DrainResult",
    "FirebaseAuthClient",
    "AuthUser",
    "AuthSessionWatcher",
]
