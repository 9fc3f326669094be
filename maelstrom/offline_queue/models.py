"""Offline Queue Models

Data model for notes awaiting remote persistence.

Related Classes: OfflineNoteQueue (note_queue.py), NoteSynchronizer (sync.py)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(slots=True)
class PendingNote:
    """A note captured locally but not yet confirmed persisted remotely.

    The id is generated locally with the ``offline_`` prefix so it never
    collides with server-assigned ids.
    """

    id: str
    content: str
    created_at: str  # ISO8601
    user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "created_at": self.created_at,
        }
        if self.user_id is not None:
            data["user_id"] = self.user_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingNote":
        """Build from a stored JSON object

        Raises:
            KeyError: a required field is missing
        """
        return cls(
            id=str(data["id"]),
            content=str(data["content"]),
            created_at=str(data["created_at"]),
            user_id=data.get("user_id"),
        )


@dataclass(slots=True)
class SubmissionOutcome:
    """Result of submitting one note through the capture protocol"""

    delivered: bool
    pending: Optional[PendingNote] = None

    @property
    def queued(self) -> bool:
        return self.pending is not None


@dataclass(slots=True)
class SyncReport:
    """Summary of one sync pass"""

    synced: list[str]
    failed: list[str]
    skipped: Optional[str] = None  # "offline", "in_flight", "empty", "no_identity"

    @classmethod
    def skip(cls, reason: str) -> "SyncReport":
        return cls(synced=[], failed=[], skipped=reason)
