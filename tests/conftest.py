"""Shared pytest fixtures for recycling_map tests.

Provides FakeRemoteStore and reusable test data for all recycling_map tests.

FAKE REMOTE STORE:
    Records every subscribe/unsubscribe/write and keeps the listener
    callbacks, so a test can push snapshots "from the server" by calling
    them directly. Writes run through InlineExecutor, so completion events
    are posted before toggle_favorite() returns.
"""

from collections.abc import Callable
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import Any

import pytest

from recycling_map.core.derived_view import DerivedViewEngine
from recycling_map.core.dispatcher import EventDispatcher
from recycling_map.core.state_store import LocalStateStore
from recycling_map.model.favorite import FavoriteMark
from recycling_map.model.recycling_point import RecyclingPoint
from recycling_map.model.session import Session
from recycling_map.ui.services import AppServices, build_services

# =============================================================================
# FAKES
# =============================================================================


@dataclass
class FakeSubscription:
    """Listener handle; records whether it was cancelled."""

    channel: str
    user_id: str | None = None
    cancelled: bool = False

    def unsubscribe(self) -> None:
        self.cancelled = True


@dataclass
class FakeRemoteStore:
    """In-memory RemoteStore that exposes the listener callbacks.

    Attributes:
        subscriptions: Every subscription ever opened, in order
        writes: ("create" | "delete", user_id, point_id) per write
        fail_writes: If set, writes raise this exception
    """

    subscriptions: list[FakeSubscription] = field(default_factory=list)
    points_callbacks: list[tuple[Callable, Callable]] = field(default_factory=list)
    favorites_callbacks: list[tuple[Callable, Callable]] = field(default_factory=list)
    writes: list[tuple[str, str, str]] = field(default_factory=list)
    added_at: list[str] = field(default_factory=list)
    fail_writes: Exception | None = None

    def subscribe_points(self, on_points: Callable, on_error: Callable) -> FakeSubscription:
        sub = FakeSubscription(channel="points")
        self.subscriptions.append(sub)
        self.points_callbacks.append((on_points, on_error))
        return sub

    def subscribe_favorites(self, user_id: str, on_favorites: Callable, on_error: Callable) -> FakeSubscription:
        sub = FakeSubscription(channel="favorites", user_id=user_id)
        self.subscriptions.append(sub)
        self.favorites_callbacks.append((on_favorites, on_error))
        return sub

    def create_favorite(self, user_id: str, point_id: str, added_at: str) -> None:
        if self.fail_writes is not None:
            raise self.fail_writes
        self.writes.append(("create", user_id, point_id))
        self.added_at.append(added_at)

    def delete_favorite(self, user_id: str, point_id: str) -> None:
        if self.fail_writes is not None:
            raise self.fail_writes
        self.writes.append(("delete", user_id, point_id))

    # Server-side pushes -------------------------------------------------------

    def push_points(self, points: tuple[RecyclingPoint, ...], index: int = -1) -> None:
        on_points, _ = self.points_callbacks[index]
        on_points(points)

    def push_favorites(self, user_id: str, point_ids: list[str], index: int = -1) -> None:
        on_favorites, _ = self.favorites_callbacks[index]
        on_favorites(tuple(FavoriteMark(point_id=pid, user_id=user_id) for pid in point_ids))

    def fail_points(self, error: Exception, index: int = -1) -> None:
        _, on_error = self.points_callbacks[index]
        on_error(error)

    @property
    def open_subscriptions(self) -> list[FakeSubscription]:
        return [s for s in self.subscriptions if not s.cancelled]


class InlineExecutor(Executor):
    """Runs submitted callables immediately on the calling thread."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@dataclass
class FakeDocument:
    """Stand-in for a Firestore DocumentSnapshot (id + to_dict())."""

    id: str
    data: dict[str, Any] | None

    def to_dict(self) -> dict[str, Any] | None:
        return self.data


# =============================================================================
# POINT FIXTURES
# =============================================================================


@pytest.fixture
def point_a() -> RecyclingPoint:
    """Accepts plastic and glass."""
    return RecyclingPoint(
        id="a",
        name="Punto Limpio Providencia",
        commune="Providencia",
        schedule="Lun-Vie 9:00-18:00",
        lat=-33.4263,
        lon=-70.6170,
        materials=("plastic", "glass"),
    )


@pytest.fixture
def point_b() -> RecyclingPoint:
    """Accepts glass only."""
    return RecyclingPoint(
        id="b",
        name="Campana Vidrio Ñuñoa",
        commune="Ñuñoa",
        schedule="24 horas",
        lat=-33.4569,
        lon=-70.5975,
        materials=("glass",),
    )


@pytest.fixture
def points_ab(point_a: RecyclingPoint, point_b: RecyclingPoint) -> tuple[RecyclingPoint, ...]:
    return (point_a, point_b)


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def session_u1() -> Session:
    return Session(user_id="u1", label="ana@example.com", epoch=1)


@pytest.fixture
def session_u2() -> Session:
    return Session(user_id="u2", label="beto@example.com", epoch=2)


# =============================================================================
# CORE FIXTURES
# =============================================================================


@pytest.fixture
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def store() -> LocalStateStore:
    return LocalStateStore()


@pytest.fixture
def engine(store: LocalStateStore) -> DerivedViewEngine:
    return DerivedViewEngine(store)


@pytest.fixture
def dispatcher(store: LocalStateStore, engine: DerivedViewEngine) -> EventDispatcher:
    return EventDispatcher(store=store, engine=engine)


@pytest.fixture
def services(remote: FakeRemoteStore) -> AppServices:
    """Fully wired services without the Streamlit rerun listener, starting signed out."""
    return build_services(remote=remote, executor=InlineExecutor(), add_ui_listener=False)
