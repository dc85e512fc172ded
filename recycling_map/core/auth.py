"""Auth boundary - Firebase e-mail/password sign-in and session changes.

FirebaseAuthClient talks to the Firebase Authentication REST API.
AuthSessionWatcher turns sign-in/sign-out into Session | None
notifications; each sign-in gets a new epoch.
"""

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass

import requests

from recycling_map.constants import AuthConfig
from recycling_map.model.errors import SignInError
from recycling_map.model.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """A user returned by a successful sign-in."""

    user_id: str
    email: str


class FirebaseAuthClient:
    """E-mail/password sign-in against Firebase Authentication.

    Example:
        client = FirebaseAuthClient(api_key=settings.api_key)
        user = client.sign_in(email="ana@example.com", password="...")
    """

    def __init__(self, api_key: str, http: requests.Session | None = None) -> None:
        self.api_key = api_key
        self.http = http or requests.Session()

    def sign_in(self, email: str, password: str) -> AuthUser:
        """Sign in with e-mail and password.

        Raises:
            SignInError: If credentials are rejected or the service is unreachable.
        """
        if not email or not password:
            raise SignInError("E-mail and password are required.")

        try:
            response = self.http.post(
                AuthConfig.SIGN_IN_URL,
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=AuthConfig.REQUEST_TIMEOUT_S,
            )
        except requests.RequestException as e:
            logger.error(f"[AUTH] Sign-in request failed: {e}")
            raise SignInError("Could not reach the authentication service.") from e

        if not response.ok:
            code = _error_code(response)
            logger.warning(f"[AUTH] Sign-in rejected for {email}: {code}")
            raise SignInError(AuthConfig.ERROR_REASONS.get(code, f"Sign-in failed ({code})."), code=code)

        data = response.json()
        logger.info(f"[AUTH] Signed in {data.get('email', email)}")
        return AuthUser(user_id=data["localId"], email=data.get("email", email))


def _error_code(response: requests.Response) -> str:
    """Extract the Firebase error code ("INVALID_PASSWORD", ...) from an error response."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP_{response.status_code}"
    # Some codes carry a suffix: "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account..."
    return str(message).split(" ")[0]


SessionListener = Callable[[Session | None], None]


class AuthSessionWatcher:
    """Publishes session transitions to listeners.

    Example:
        watcher = AuthSessionWatcher()
        watcher.add_listener(machine.handle_session_change)
        watcher.sign_in(user)   # listeners get Session(..., epoch=1)
        watcher.sign_out()      # listeners get None
    """

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []
        self._epochs = itertools.count(1)
        self._session: Session | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def sign_in(self, user: AuthUser) -> Session:
        """Start a new session for ``user`` and notify listeners."""
        session = Session(user_id=user.user_id, label=user.email, epoch=next(self._epochs))
        self._publish(session)
        return session

    def sign_out(self) -> None:
        """End the current session (no-op notification if already signed out)."""
        if self._session is None:
            return
        self._publish(None)

    def _publish(self, session: Session | None) -> None:
        logger.info(f"[AUTH] Session changed: {self._session} -> {session}")
        self._session = session
        for listener in self._listeners:
            listener(session)
