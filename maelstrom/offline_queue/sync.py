"""Note submission and sync protocol.

Submission: offline notes go straight to the queue; online notes get exactly
one remote attempt and fall back to the queue on any failure.

Sync: one sequential pass over the queue with the current identity. A note
is removed only after its remote write succeeds; failures stay queued for
the next pass. Passes are triggered on startup and when connectivity comes
back; there is no retry loop or backoff.

Related Classes: OfflineNoteQueue (note_queue.py), ConnectivityMonitor (connectivity.py)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol

from maelstrom.notes.models import normalize_note_content

from .connectivity import ConnectivityMonitor
from .models import SubmissionOutcome, SyncReport
from .note_queue import OfflineNoteQueue

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    def insert_note(self, user_id: str, content: str) -> Any:
        """Persist a note remotely; raise on failure."""
        ...


class IdentityProvider(Protocol):
    def current_user_id(self) -> Optional[str]:
        ...


class StaticIdentity:
    """Identity fixed at construction time (None means signed out)."""

    def __init__(self, user_id: Optional[str] = None) -> None:
        self.user_id = user_id

    def current_user_id(self) -> Optional[str]:
        return self.user_id


class NoteSynchronizer:
    """Drives an OfflineNoteQueue against a remote note store."""

    def __init__(
        self,
        queue: OfflineNoteQueue,
        store: NoteStore,
        identity: IdentityProvider,
    ):
        self.queue = queue
        self.store = store
        self.identity = identity
        self._in_flight = threading.Lock()

    def submit(self, content: str) -> SubmissionOutcome:
        """Capture a note. Never fails once the content is valid.

        Raises:
            NoteValidationError: content is empty or longer than 280 characters
        """
        content = normalize_note_content(content)

        if not self.queue.is_online():
            return SubmissionOutcome(delivered=False, pending=self.queue.save_offline(content))

        user_id: Optional[str] = None
        try:
            user_id = self.identity.current_user_id()
            if not user_id:
                raise LookupError("no authenticated user")
            self.store.insert_note(user_id, content)
            return SubmissionOutcome(delivered=True)
        except Exception as exc:
            logger.error("Error saving note, saving offline: %s", exc)
            return SubmissionOutcome(
                delivered=False, pending=self.queue.save_offline(content, user_id)
            )

    def sync(self) -> SyncReport:
        """Run one sync pass. Concurrent calls are skipped, not queued."""
        if not self.queue.is_online():
            return SyncReport.skip("offline")

        if not self._in_flight.acquire(blocking=False):
            logger.debug("Sync already in progress")
            return SyncReport.skip("in_flight")

        try:
            pending = self.queue.list_pending()
            if not pending:
                return SyncReport.skip("empty")

            try:
                user_id = self.identity.current_user_id()
            except Exception as exc:
                logger.warning("Could not resolve identity for sync: %s", exc)
                user_id = None
            if not user_id:
                return SyncReport.skip("no_identity")

            report = SyncReport(synced=[], failed=[])
            for note in pending:
                try:
                    self.store.insert_note(user_id, note.content)
                except Exception as exc:
                    logger.error("Error syncing note %s: %s", note.id, exc)
                    report.failed.append(note.id)
                    continue
                self.queue.clear_pending(note.id)
                report.synced.append(note.id)

            logger.info(
                "Sync pass finished: %d synced, %d still pending",
                len(report.synced),
                len(report.failed),
            )
            return report
        finally:
            self._in_flight.release()

    def start(self) -> SyncReport:
        """Startup trigger."""
        return self.sync()

    def attach(self, monitor: ConnectivityMonitor) -> Callable[[], None]:
        """Sync whenever the monitor transitions to online."""

        def on_change(online: bool) -> None:
            if online:
                self.sync()

        return monitor.subscribe(on_change)
