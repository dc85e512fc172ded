"""Error taxonomy for the recycling map.

None of these is fatal: the worst outcome is a stale view plus a notice.
"""


class RecyclingMapError(Exception):
    """Base class for all application errors."""


class AuthenticationRequired(RecyclingMapError):
    """An action needs a signed-in user and there is none."""

    def __init__(self, action: str = "modify favorites") -> None:
        self.action = action
        super().__init__(f"You must sign in to {action}.")


class WriteError(RecyclingMapError):
    """A favorite create/delete failed on the remote store."""

    def __init__(self, point_id: str, cause: BaseException) -> None:
        self.point_id = point_id
        self.cause = cause
        super().__init__(f"Could not update favorite {point_id}: {cause}")


class SubscriptionError(RecyclingMapError):
    """A real-time snapshot stream failed or delivered unusable data."""


class SignInError(RecyclingMapError):
    """Credentials were rejected or the auth service could not be reached."""

    def __init__(self, reason: str, code: str | None = None) -> None:
        self.reason = reason
        self.code = code
        super().__init__(reason)


class ConfigurationError(RecyclingMapError):
    """Required settings are missing."""
