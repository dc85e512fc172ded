"""Session - The authenticated user, tagged with a generation number."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """An authenticated session.

    Attributes:
        user_id: Firebase user id (favorites are scoped to it)
        label: Display label, usually the e-mail
        epoch: Generation number, unique per sign-in. Subscriptions and
            in-flight writes carry it so late results from an older
            session can be recognized and dropped.
    """

    user_id: str
    label: str
    epoch: int

    def __repr__(self) -> str:
        return f"Session({self.user_id}, epoch={self.epoch})"
