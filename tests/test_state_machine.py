"""Tests for SessionStateMachine: sign-in/out cycles and their side effects.

Uses the fully wired services (FakeRemoteStore, InlineExecutor) without the
Streamlit rerun listener.
"""

import gc

import pytest
from conftest import FakeRemoteStore, InlineExecutor
from statemachine.exceptions import TransitionNotAllowed

from recycling_map.core.auth import AuthUser
from recycling_map.model.events import PointsSnapshot
from recycling_map.model.session import Session
from recycling_map.ui.services import AppServices, build_services

ANA = AuthUser(user_id="u1", email="ana@example.com")
BETO = AuthUser(user_id="u2", email="beto@example.com")


class TestTransitions:
    def test_starts_signed_out(self, services: AppServices) -> None:
        assert services.machine.is_signed_out
        assert services.machine.get_state_name() == "SignedOut"

    def test_log_in_opens_listeners(self, services: AppServices, remote: FakeRemoteStore) -> None:
        session = services.watcher.sign_in(ANA)
        assert services.machine.is_signed_in
        assert services.store.session == session
        assert services.subscriptions.is_open
        assert len(remote.open_subscriptions) == 2

    def test_log_out_closes_and_clears(self, services: AppServices, remote: FakeRemoteStore, points_ab: tuple) -> None:
        services.watcher.sign_in(ANA)
        remote.push_points(points_ab)
        services.dispatcher.drain()
        services.engine.toggle_filter("glass")
        services.machine.context.selection.select("a")

        services.watcher.sign_out()
        assert services.machine.is_signed_out
        assert remote.open_subscriptions == []
        assert services.store.snapshot.points == ()
        assert services.engine.view.points == () and services.engine.selection == frozenset()
        assert not services.machine.context.selection.has_selection()

    def test_log_out_when_signed_out_not_allowed(self, services: AppServices) -> None:
        with pytest.raises(TransitionNotAllowed):
            services.machine.log_out()

    def test_repeatable_cycles(self, services: AppServices, remote: FakeRemoteStore) -> None:
        for _ in range(3):
            services.watcher.sign_in(ANA)
            services.watcher.sign_out()
        assert services.machine.is_signed_out
        assert len(remote.subscriptions) == 6
        assert remote.open_subscriptions == []

    def test_switch_user_without_sign_out(self, services: AppServices, remote: FakeRemoteStore, points_ab: tuple) -> None:
        services.watcher.sign_in(ANA)
        remote.push_points(points_ab)
        remote.push_favorites("u1", ["a"])
        services.dispatcher.drain()

        services.watcher.sign_in(BETO)
        assert services.machine.is_signed_in
        assert services.store.session.user_id == "u2"
        assert services.store.snapshot.favorite_ids == frozenset()
        assert [s.user_id for s in remote.open_subscriptions if s.channel == "favorites"] == ["u2"]

    def test_same_session_is_not_a_transition(self, services: AppServices, remote: FakeRemoteStore) -> None:
        session = services.watcher.sign_in(ANA)
        services.machine.handle_session_change(session)
        assert len(remote.subscriptions) == 2


class TestStaleDeliveries:
    def test_previous_user_snapshot_dropped_after_relogin(
        self, services: AppServices, remote: FakeRemoteStore, points_ab: tuple
    ) -> None:
        services.watcher.sign_in(ANA)
        services.watcher.sign_out()
        services.watcher.sign_in(BETO)

        # Ana's favorites listener fires late
        remote.push_favorites("u1", ["a"], index=0)
        result = services.dispatcher.drain()
        assert result.discarded == 1
        assert services.store.snapshot.favorite_ids == frozenset()

    def test_snapshot_queued_before_sign_out_dropped(self, services: AppServices, points_ab: tuple) -> None:
        session = services.watcher.sign_in(ANA)
        services.dispatcher.post(PointsSnapshot(epoch=session.epoch, points=points_ab))
        services.watcher.sign_out()

        services.dispatcher.drain()
        assert services.store.snapshot.points == ()

    def test_epochs_increase_per_sign_in(self, services: AppServices) -> None:
        first = services.watcher.sign_in(ANA)
        services.watcher.sign_out()
        second = services.watcher.sign_in(ANA)
        assert isinstance(first, Session) and second.epoch > first.epoch


class TestServicesShutdown:
    def test_shutdown_closes_listeners(self, services: AppServices, remote: FakeRemoteStore) -> None:
        services.watcher.sign_in(ANA)
        services.shutdown()
        assert remote.open_subscriptions == []
        assert not services.subscriptions.is_open

    def test_shutdown_twice_is_harmless(self, services: AppServices, remote: FakeRemoteStore) -> None:
        services.watcher.sign_in(ANA)
        services.shutdown()
        services.shutdown()
        assert len(remote.subscriptions) == 2

    def test_dropped_services_release_listeners(self, remote: FakeRemoteStore) -> None:
        services = build_services(remote=remote, executor=InlineExecutor(), add_ui_listener=False)
        services.watcher.sign_in(ANA)
        assert len(remote.open_subscriptions) == 2

        # Session ended: nothing but the remote's listener callbacks remain
        del services
        gc.collect()
        assert remote.open_subscriptions == []
