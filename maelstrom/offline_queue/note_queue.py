"""Offline note queue.

Notes that could not be delivered are kept as a JSON array under a single
storage key. Storage failures never propagate: a failed read lists as an
empty queue but never overwrites the stored array, and a failed write is
logged and dropped, so capturing a note never blocks the user.

Related Classes: PendingNote (models.py), NoteSynchronizer (sync.py)
"""

from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from .connectivity import ConnectivityMonitor
from .models import PendingNote
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

PENDING_NOTES_KEY = "maelstrom_pending_notes"
OFFLINE_ID_PREFIX = "offline_"


def generate_offline_id() -> str:
    """Local id that can never match a server UUID."""
    return f"{OFFLINE_ID_PREFIX}{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def is_offline_id(note_id: str) -> bool:
    return note_id.startswith(OFFLINE_ID_PREFIX)


def parse_snapshot(raw: Optional[str]) -> List[PendingNote]:
    """Decode the stored JSON array.

    Entries that are not note objects are skipped; duplicate ids keep the
    first occurrence.

    Raises:
        ValueError: the payload is not a JSON array
    """
    if not raw:
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("pending notes payload is not a JSON array")

    notes: List[PendingNote] = []
    seen: set[str] = set()
    for entry in data:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed pending note entry: %r", entry)
            continue
        try:
            note = PendingNote.from_dict(entry)
        except KeyError as exc:
            logger.warning("Skipping pending note without %s", exc)
            continue
        if note.id in seen:
            continue
        seen.add(note.id)
        notes.append(note)
    return notes


def serialize_snapshot(notes: Iterable[PendingNote]) -> str:
    return json.dumps([note.to_dict() for note in notes], ensure_ascii=False)


def without_note(notes: Iterable[PendingNote], note_id: str) -> List[PendingNote]:
    return [note for note in notes if note.id != note_id]


class OfflineNoteQueue:
    """Durable queue of notes awaiting remote persistence."""

    def __init__(
        self,
        storage: KeyValueStorage,
        connectivity: Optional[ConnectivityMonitor] = None,
        key: str = PENDING_NOTES_KEY,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            storage: key/value store holding the serialized queue
            connectivity: reachability source (defaults to an always-online monitor)
            key: storage key for the JSON array
            clock: returns the current time (injectable for tests)
        """
        self.storage = storage
        self.connectivity = connectivity or ConnectivityMonitor()
        self.key = key
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        # read-modify-write of the stored array must not interleave
        self._lock = threading.RLock()

    def is_online(self) -> bool:
        return self.connectivity.is_online()

    def list_pending(self) -> List[PendingNote]:
        """All queued notes in insertion order ([] on read failure)."""
        with self._lock:
            return self._read_snapshot() or []

    def save_offline(self, content: str, user_id: Optional[str] = None) -> PendingNote:
        """Queue a note. Always returns the note, even if the write fails."""
        note = PendingNote(
            id=generate_offline_id(),
            content=content,
            created_at=self._clock().isoformat(),
            user_id=user_id,
        )
        with self._lock:
            notes = self._read_snapshot()
            if notes is None:
                # an unreadable queue must not be replaced by [note]
                logger.warning("Pending notes unreadable, note %s not queued", note.id)
                return note
            notes.append(note)
            self._write(notes)
        logger.info("Queued note %s for later sync", note.id)
        return note

    def clear_pending(self, note_id: str) -> None:
        with self._lock:
            notes = self._read_snapshot()
            if notes is None:
                return
            remaining = without_note(notes, note_id)
            if len(remaining) != len(notes):
                self._write(remaining)

    def clear_all(self) -> None:
        with self._lock:
            try:
                self.storage.remove_item(self.key)
            except Exception as exc:
                logger.warning("Failed to clear pending notes: %s", exc)

    def pending_count(self) -> int:
        return len(self.list_pending())

    def _read_snapshot(self) -> Optional[List[PendingNote]]:
        """Stored notes, or None when the payload cannot be read or decoded."""
        try:
            return parse_snapshot(self.storage.get_item(self.key))
        except Exception as exc:
            logger.warning("Failed to read pending notes: %s", exc)
            return None

    def _write(self, notes: List[PendingNote]) -> None:
        try:
            self.storage.set_item(self.key, serialize_snapshot(notes))
        except Exception as exc:
            logger.warning("Failed to persist pending notes: %s", exc)
