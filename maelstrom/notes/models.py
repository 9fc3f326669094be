"""Note Store Models

Related Classes: NoteRepository, UndercurrentRepository (repository.py)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List

from maelstrom.errors import NoteValidationError

MAX_NOTE_LENGTH = 280


def normalize_note_content(content: str) -> str:
    """Trim a submitted note and enforce the length limit.

    Raises:
        NoteValidationError: empty after trimming, or longer than MAX_NOTE_LENGTH
    """
    text = (content or "").strip()
    if not text:
        raise NoteValidationError("note content is empty")
    if len(text) > MAX_NOTE_LENGTH:
        raise NoteValidationError(
            f"note content exceeds {MAX_NOTE_LENGTH} characters ({len(text)})"
        )
    return text


@dataclass(slots=True)
class Note:
    """A persisted note"""

    id: str  # UUID4
    user_id: str
    content: str
    created_at: str  # ISO8601

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "content": self.content,
            "created_at": self.created_at,
        }


@dataclass(slots=True)
class Undercurrent:
    """A generated insight over a batch of notes

    notes_included is ordered: position k is the note cited as [k+1].
    List fields are stored as JSON strings, like the chat history messages.
    """

    id: str
    user_id: str
    summary_text: str
    questions_json: str
    notes_included_json: str
    sentiment_colors_json: str
    timeframe: str
    created_at: str

    @property
    def questions(self) -> List[str]:
        return json.loads(self.questions_json)

    @property
    def notes_included(self) -> List[str]:
        return json.loads(self.notes_included_json)

    @property
    def sentiment_colors(self) -> List[str]:
        return json.loads(self.sentiment_colors_json)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "summary_text": self.summary_text,
            "questions": self.questions,
            "notes_included": self.notes_included,
            "sentiment_colors": self.sentiment_colors,
            "timeframe": self.timeframe,
            "created_at": self.created_at,
        }
