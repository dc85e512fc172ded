"""Message - User-facing messages for the recycling map UI.

Architecture:
- LEFT (sidebar): Signed-in label, filters, favorites list status
- CENTER (under map): Loading and stream-failure notices
- Toasts: Transient feedback for favorite writes and blocked actions

Design Principles:
- Persistent context goes through Message (st.info/st.warning/st.error)
- Feedback about a single user action goes through ToastMessage
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class MessageLevel(Enum):
    """Display level for UI messages."""

    INFO = "info"  # Blue - context/status/loading
    WARNING = "warning"  # Yellow - degraded but usable
    ERROR = "error"  # Red - failures


@dataclass(frozen=True)
class Message(ABC):
    """Abstract base class for user-facing messages displayed inline (sidebars/panels).

    These messages are rendered as st.info/st.warning/st.error blocks that persist
    in the UI until replaced.
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for display in Streamlit."""
        raise NotImplementedError

    @property
    @abstractmethod
    def level(self) -> MessageLevel:
        """Display level."""
        raise NotImplementedError

    def display(self) -> None:
        """Render this message using the appropriate Streamlit function."""
        import streamlit as st

        render_fn = {
            MessageLevel.INFO: st.info,
            MessageLevel.WARNING: st.warning,
            MessageLevel.ERROR: st.error,
        }[self.level]
        render_fn(self.message)


@dataclass(frozen=True)
class ToastMessage(ABC):
    """Abstract base class for transient popup notifications.

    Good for: write failures, blocked actions, quick confirmations
    Bad for: context messages, status displays
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for the toast notification."""
        raise NotImplementedError

    @property
    @abstractmethod
    def icon(self) -> str:
        """Icon to show in toast. Override in subclasses."""
        raise NotImplementedError

    def display(self) -> None:
        """Show this message as a toast notification and log it."""
        import streamlit as st

        logger = logging.getLogger(__name__)
        logger.info(f"[TOAST] {self.icon} {self.message}")
        st.toast(f"{self.icon} {self.message}")


# =============================================================================
# TOAST MESSAGES - Transient popup notifications
# =============================================================================


@dataclass(frozen=True)
class AuthenticationRequiredMessage(ToastMessage):
    """User tried to change favorites without a session."""

    @property
    def icon(self) -> str:
        return "🔒"

    @property
    def message(self) -> str:
        return "Sign In Required: You must sign in to add favorites."


@dataclass(frozen=True)
class FavoriteWriteFailedMessage(ToastMessage):
    """Remote create/delete of a favorite failed."""

    point_name: str
    error: str

    @property
    def icon(self) -> str:
        return "⚠️"

    @property
    def message(self) -> str:
        return f"Favorites Not Updated: {self.point_name}: {self.error}"


@dataclass(frozen=True)
class FavoriteAddedMessage(ToastMessage):
    point_name: str

    @property
    def icon(self) -> str:
        return "⭐"

    @property
    def message(self) -> str:
        return f"{self.point_name} added to favorites."


@dataclass(frozen=True)
class FavoriteRemovedMessage(ToastMessage):
    point_name: str

    @property
    def icon(self) -> str:
        return "🗑️"

    @property
    def message(self) -> str:
        return f"{self.point_name} removed from favorites."


@dataclass(frozen=True)
class SignInFailedMessage(ToastMessage):
    """Credentials rejected or auth service unreachable."""

    reason: str

    @property
    def icon(self) -> str:
        return "🔑"

    @property
    def message(self) -> str:
        return f"Sign In Failed: {self.reason}"


# =============================================================================
# INLINE MESSAGES
# =============================================================================


@dataclass(frozen=True)
class SubscriptionErrorMessage(Message):
    """CENTER: A real-time stream failed; last-known data is still shown."""

    channel: str
    error: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return f"📡 **Live updates for {self.channel} interrupted**: showing last known data. ({self.error})"


@dataclass(frozen=True)
class LoadingPointsMessage(Message):
    """CENTER: Shown until the first points snapshot arrives."""

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return "🗺️ **Loading Recycling Points**: waiting for the first update..."


@dataclass(frozen=True)
class NoFavoritesMessage(Message):
    """LEFT: The user has no favorites yet."""

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return "You have no favorite points."


@dataclass(frozen=True)
class SignedInAsMessage(Message):
    """LEFT: Who is signed in."""

    label: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return f"Usuario: {self.label}"
