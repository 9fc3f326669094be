"""Note and undercurrent storage."""

from .models import MAX_NOTE_LENGTH, Note, Undercurrent, normalize_note_content
from .repository import NoteRepository, UndercurrentRepository

__all__ = [
    "MAX_NOTE_LENGTH",
    "Note",
    "Undercurrent",
    "normalize_note_content",
    "NoteRepository",
    "UndercurrentRepository",
]
