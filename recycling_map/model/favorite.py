"""FavoriteMark - A user's bookmark on a recycling point.

The document id is the point id, scoped under the user's favorites
collection. The referenced point may not exist locally; that is fine.
"""

from dataclasses import dataclass
from typing import Any

from recycling_map.constants import FirestoreConfig


@dataclass(frozen=True)
class FavoriteMark:
    """A favorite marker for (user_id, point_id)."""

    point_id: str
    user_id: str
    added_at: str | None = None  # ISO-8601 timestamp

    @classmethod
    def from_document(cls, user_id: str, doc_id: str, data: dict[str, Any] | None) -> "FavoriteMark":
        """Create from a favorites document (doc id = point id)."""
        added_at = (data or {}).get(FirestoreConfig.FIELD_ADDED)
        return cls(point_id=doc_id, user_id=user_id, added_at=str(added_at) if added_at is not None else None)

    def to_dict(self) -> dict[str, Any]:
        return {FirestoreConfig.FIELD_ADDED: self.added_at}
