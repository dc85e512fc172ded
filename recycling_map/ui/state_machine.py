"""State machine for the recycling map session lifecycle.

Uses python-statemachine for robust state management with:
- Clear state definitions
- Entry/exit hooks for side effects
- Explicit event-driven transitions

States (2 states):
    SIGNED_OUT: No session. Store, filters and UI context are empty.
    SIGNED_IN: Session active, points + favorites listeners open.

Transitions:
    SIGNED_OUT -> SIGNED_IN: log_in (session begins, listeners open)
    SIGNED_IN -> SIGNED_IN: switch_user (old listeners closed, data cleared, new session)
    SIGNED_IN -> SIGNED_OUT: log_out (listeners closed, everything cleared)

The cycle repeats for the life of the process; there is no final state.

Stale deliveries: closing listeners does not stop a snapshot that is already
queued. The store's session epoch changes on every transition, so the
dispatcher drops whatever the old listeners or old writes still deliver.

Every session change maps to exactly ONE transition, so the UI listener's
st.rerun() never cuts a change in half.
"""

import logging
import streamlit as st
from statemachine import State, StateMachine

from recycling_map.core.dispatcher import EventDispatcher
from recycling_map.core.state_store import LocalStateStore
from recycling_map.core.subscriptions import SubscriptionManager
from recycling_map.model.session import Session
from recycling_map.ui.context import ViewerContext

logger = logging.getLogger(__name__)


class StreamlitUIListener:
    """Listener that triggers st.rerun() after state transitions.

    Keeps the state machine free of Streamlit page-flow concerns.

    Usage:
        sm = SessionStateMachine(...)
        sm.add_listener(StreamlitUIListener())
    """

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[STATE] {source.name} --({event})--> {target.name}")
        st.rerun()


class SessionStateMachine(StateMachine):
    """Session lifecycle: which user's data may be shown, and listening.

    States:
        signed_out: initial, nothing displayed
        signed_in: listeners open for the active session
    """

    signed_out = State("SignedOut", initial=True)
    signed_in = State("SignedIn")

    log_in = signed_out.to(signed_in)
    switch_user = signed_in.to(signed_in)
    log_out = signed_in.to(signed_out)

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_signed_in(self) -> bool:
        return self.signed_in.is_active

    @property
    def is_signed_out(self) -> bool:
        return self.signed_out.is_active

    # ==========================================================================
    # Entry / Exit Hooks
    # ==========================================================================

    def on_enter_signed_out(self) -> None:
        """Hook: No session. Nothing from the previous user may remain."""
        self.store.clear()
        self.context.clear()
        self.dispatcher.reset()

    def on_exit_signed_in(self) -> None:
        """Hook: Leaving a session. Its listeners are now invalid."""
        self.subscriptions.close()

    # ==========================================================================
    # Transition Actions
    # ==========================================================================

    def before_log_in(self, session: Session) -> None:
        self.store.begin_session(session)
        self.context.clear()

    def after_log_in(self, session: Session) -> None:
        self.subscriptions.open(session)

    def before_switch_user(self, session: Session) -> None:
        self.subscriptions.close()
        self.store.clear()
        self.context.clear()
        self.dispatcher.reset()
        self.store.begin_session(session)

    def after_switch_user(self, session: Session) -> None:
        self.subscriptions.open(session)

    # ==========================================================================
    # Session watcher entry point
    # ==========================================================================

    def handle_session_change(self, session: Session | None) -> None:
        """Listener for AuthSessionWatcher: map a session change to one transition."""
        if session is None:
            if self.is_signed_in:
                self.log_out()
            return

        if self.is_signed_out:
            self.log_in(session=session)
        elif self.store.session != session:
            self.switch_user(session=session)

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def __init__(
        self,
        store: LocalStateStore,
        subscriptions: SubscriptionManager,
        dispatcher: EventDispatcher,
        context: ViewerContext | None = None,
        start_value: str | None = None,
    ) -> None:
        """Initialize state machine with model pattern.

        Args:
            store: Local state store (cleared on sign-out)
            subscriptions: Listener manager (opened/closed per session)
            dispatcher: Event dispatcher (stream error state reset per session)
            context: Shared UI context/model (creates new if None)
            start_value: Optional initial state value (for restoring state)
        """
        # Set before super().__init__: entering the initial state runs hooks
        self.store = store
        self.subscriptions = subscriptions
        self.dispatcher = dispatcher
        super().__init__(model=context or ViewerContext(), start_value=start_value)

    @property
    def context(self) -> ViewerContext:
        """Alias for model."""
        return self.model

    def get_state_name(self) -> str:
        return self.current_state.name

    def __repr__(self) -> str:
        return f"SessionStateMachine(state={self.get_state_name()}, model={self.context!r})"

    @staticmethod
    def create(
        store: LocalStateStore,
        subscriptions: SubscriptionManager,
        dispatcher: EventDispatcher,
        add_ui_listener: bool = True,
    ) -> tuple["SessionStateMachine", ViewerContext]:
        """Factory method to create state machine with context and optional UI listener.

        Args:
            add_ui_listener: If True, adds StreamlitUIListener for auto st.rerun().
                             Set to False for testing or non-Streamlit usage.

        Returns:
            Tuple of (SessionStateMachine, ViewerContext)
        """
        context = ViewerContext()
        sm = SessionStateMachine(store=store, subscriptions=subscriptions, dispatcher=dispatcher, context=context)
        if add_ui_listener:
            sm.add_listener(StreamlitUIListener())
            logger.info("Created SessionStateMachine with StreamlitUIListener")
        else:
            logger.info("Created SessionStateMachine without UI listener")
        return sm, context
