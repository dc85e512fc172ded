"""Wiring of the core objects for one browser session.

One AppServices per Streamlit session (kept in st.session_state): its own
store, view engine, dispatcher, listeners and state machine. The remote
store and auth client may be shared between sessions.

Listener threads only hold the dispatcher, never the AppServices object, so
once Streamlit drops an ended session's state the object is collected and
its listeners and writer pool are released.
"""

import logging
import weakref
from concurrent.futures import Executor
from dataclasses import dataclass, field

from recycling_map.core.auth import AuthSessionWatcher, FirebaseAuthClient
from recycling_map.core.derived_view import DerivedViewEngine
from recycling_map.core.dispatcher import EventDispatcher
from recycling_map.core.favorites_controller import FavoritesController
from recycling_map.core.remote_store import RemoteStore
from recycling_map.core.state_store import LocalStateStore
from recycling_map.core.subscriptions import SubscriptionManager
from recycling_map.ui.state_machine import SessionStateMachine

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything a session's UI needs to read state and issue commands."""

    store: LocalStateStore
    engine: DerivedViewEngine
    dispatcher: EventDispatcher
    subscriptions: SubscriptionManager
    controller: FavoritesController
    watcher: AuthSessionWatcher
    machine: SessionStateMachine
    auth_client: FirebaseAuthClient | None = None
    _finalizer: weakref.finalize = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._finalizer = weakref.finalize(self, _release, self.subscriptions, self.controller)

    def shutdown(self) -> None:
        """Close listeners and stop the writer pool. Runs at most once."""
        self._finalizer()


def _release(subscriptions: SubscriptionManager, controller: FavoritesController) -> None:
    logger.info("Releasing session listeners and writer pool")
    subscriptions.close()
    controller.shutdown()


def build_services(
    remote: RemoteStore,
    auth_client: FirebaseAuthClient | None = None,
    executor: Executor | None = None,
    add_ui_listener: bool = True,
) -> AppServices:
    """Create and connect the core objects.

    Args:
        remote: Remote store adapter (Firestore in the app, a fake in tests)
        auth_client: Sign-in client, None when sign-in is driven elsewhere
        executor: Runs favorite writes (own thread pool if None)
        add_ui_listener: Add StreamlitUIListener (st.rerun after transitions)
    """
    store = LocalStateStore()
    engine = DerivedViewEngine(store)
    dispatcher = EventDispatcher(store=store, engine=engine)
    subscriptions = SubscriptionManager(remote=remote, post_event=dispatcher.post)
    controller = FavoritesController(store=store, remote=remote, post_event=dispatcher.post, executor=executor)
    machine, _ = SessionStateMachine.create(
        store=store,
        subscriptions=subscriptions,
        dispatcher=dispatcher,
        add_ui_listener=add_ui_listener,
    )
    watcher = AuthSessionWatcher()
    watcher.add_listener(machine.handle_session_change)
    logger.info("Built AppServices")
    return AppServices(
        store=store,
        engine=engine,
        dispatcher=dispatcher,
        subscriptions=subscriptions,
        controller=controller,
        watcher=watcher,
        machine=machine,
        auth_client=auth_client,
    )
