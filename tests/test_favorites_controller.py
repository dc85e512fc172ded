"""Tests for FavoritesController: toggle semantics and completion events."""

from datetime import datetime, timezone

import pytest
from conftest import FakeRemoteStore, InlineExecutor

from recycling_map.core.favorites_controller import FavoritesController
from recycling_map.core.state_store import LocalStateStore
from recycling_map.model.errors import AuthenticationRequired, WriteError
from recycling_map.model.events import FavoriteAction, FavoriteWriteFailed, FavoriteWriteSucceeded, StoreEvent
from recycling_map.model.session import Session

FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def posted() -> list[StoreEvent]:
    return []


@pytest.fixture
def controller(store: LocalStateStore, remote: FakeRemoteStore, posted: list[StoreEvent]) -> FavoritesController:
    return FavoritesController(
        store=store,
        remote=remote,
        post_event=posted.append,
        executor=InlineExecutor(),
        clock=lambda: FIXED_NOW,
    )


class TestToggleSemantics:
    def test_add_issues_create_with_timestamp(
        self, controller: FavoritesController, store: LocalStateStore, remote: FakeRemoteStore, session_u1: Session
    ) -> None:
        store.begin_session(session_u1)
        controller.toggle_favorite("a", currently_favorite=False)
        assert remote.writes == [("create", "u1", "a")]
        assert remote.added_at == [FIXED_NOW.isoformat()]

    def test_remove_issues_delete(
        self, controller: FavoritesController, store: LocalStateStore, remote: FakeRemoteStore, session_u1: Session
    ) -> None:
        store.begin_session(session_u1)
        controller.toggle_favorite("b", currently_favorite=True)
        assert remote.writes == [("delete", "u1", "b")]

    def test_signed_out_raises_and_writes_nothing(
        self, controller: FavoritesController, remote: FakeRemoteStore, posted: list[StoreEvent]
    ) -> None:
        with pytest.raises(AuthenticationRequired):
            controller.toggle_favorite("b", currently_favorite=True)
        assert remote.writes == []
        assert posted == []

    def test_toggle_never_changes_local_state(
        self, controller: FavoritesController, store: LocalStateStore, session_u1: Session
    ) -> None:
        store.begin_session(session_u1)
        before = store.snapshot
        controller.toggle_favorite("a", currently_favorite=False)
        assert store.snapshot is before


class TestCompletionEvents:
    def test_success_posts_event_with_session_epoch(
        self, controller: FavoritesController, store: LocalStateStore, session_u1: Session, posted: list[StoreEvent]
    ) -> None:
        store.begin_session(session_u1)
        future = controller.toggle_favorite("a", currently_favorite=False)
        assert future.done()
        assert posted == [FavoriteWriteSucceeded(epoch=1, point_id="a", action=FavoriteAction.ADD)]

    def test_failure_posts_write_error(
        self,
        controller: FavoritesController,
        store: LocalStateStore,
        remote: FakeRemoteStore,
        session_u1: Session,
        posted: list[StoreEvent],
    ) -> None:
        store.begin_session(session_u1)
        remote.fail_writes = PermissionError("denied")
        controller.toggle_favorite("a", currently_favorite=True)

        assert len(posted) == 1
        event = posted[0]
        assert isinstance(event, FavoriteWriteFailed)
        assert event.action is FavoriteAction.REMOVE
        assert isinstance(event.error, WriteError)
        assert isinstance(event.error.cause, PermissionError)
        assert store.snapshot.favorite_ids == frozenset()


class TestShutdown:
    def test_shutdown_stops_own_pool(self, store: LocalStateStore, remote: FakeRemoteStore, session_u1: Session) -> None:
        controller = FavoritesController(store=store, remote=remote, post_event=lambda e: None)
        store.begin_session(session_u1)
        controller.toggle_favorite("a", currently_favorite=False).result(timeout=5)
        controller.shutdown()
        with pytest.raises(RuntimeError):
            controller.toggle_favorite("b", currently_favorite=False)
