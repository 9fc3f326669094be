"""Offline note queue and sync protocol."""

from .connectivity import ConnectivityMonitor, HttpConnectivityMonitor
from .models import PendingNote, SubmissionOutcome, SyncReport
from .note_queue import PENDING_NOTES_KEY, OfflineNoteQueue, is_offline_id
from .storage import KeyValueStorage, MemoryStorage, SQLiteStorage
from .sync import IdentityProvider, NoteStore, NoteSynchronizer, StaticIdentity

__all__ = [
    "ConnectivityMonitor",
    "HttpConnectivityMonitor",
    "PendingNote",
    "SubmissionOutcome",
    "SyncReport",
    "PENDING_NOTES_KEY",
    "OfflineNoteQueue",
    "is_offline_id",
    "KeyValueStorage",
    "MemoryStorage",
    "SQLiteStorage",
    "IdentityProvider",
    "NoteStore",
    "NoteSynchronizer",
    "StaticIdentity",
]
