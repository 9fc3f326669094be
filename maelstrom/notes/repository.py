"""Note Store Repositories

SQLite-backed storage for notes and undercurrents. Every query is scoped by
user_id.

Related Classes: Note, Undercurrent (models.py)
"""

from __future__ import annotations

import json
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from maelstrom.config import PROJECT_ROOT

from .models import Note, Undercurrent


def resolve_db_path(db_path: Optional[Path] = None) -> Path:
    default_path = PROJECT_ROOT / "data" / "maelstrom.db"
    env_path = os.getenv("MAELSTROM_DB_PATH")
    if db_path:
        path = Path(db_path)
    elif env_path:
        path = Path(env_path)
    else:
        path = default_path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


class _SQLiteRepository:
    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = resolve_db_path(db_path)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        raise NotImplementedError

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()


class NoteRepository(_SQLiteRepository):
    """SQLite-backed note storage."""

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    content TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_notes_user_created ON notes(user_id, created_at DESC)"
            )
            conn.commit()

    @staticmethod
    def _row_to_note(row: sqlite3.Row) -> Note:
        return Note(
            id=row["id"],
            user_id=row["user_id"],
            content=row["content"],
            created_at=row["created_at"],
        )

    def insert_note(self, user_id: str, content: str) -> Note:
        note = Note(
            id=str(uuid.uuid4()),
            user_id=user_id,
            content=content,
            created_at=self._now(),
        )
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO notes (id, user_id, content, created_at) VALUES (?, ?, ?, ?)",
                (note.id, note.user_id, note.content, note.created_at),
            )
            conn.commit()
        return note

    def list_for_user(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Note]:
        """Notes for a user, newest first."""
        query = "SELECT * FROM notes WHERE user_id = ?"
        params: list[object] = [user_id]
        if since is not None:
            query += " AND created_at >= ?"
            params.append(since.astimezone(timezone.utc).isoformat())
        query += " ORDER BY created_at DESC, rowid DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_note(row) for row in rows]

    def get_many(self, user_id: str, note_ids: Sequence[str]) -> List[Note]:
        """Notes matching the given ids, in the order the ids were given."""
        if not note_ids:
            return []
        placeholders = ", ".join("?" for _ in note_ids)
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM notes WHERE user_id = ? AND id IN ({placeholders})",
                [user_id, *note_ids],
            ).fetchall()
        by_id = {row["id"]: self._row_to_note(row) for row in rows}
        return [by_id[note_id] for note_id in dict.fromkeys(note_ids) if note_id in by_id]

    def delete(self, user_id: str, note_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM notes WHERE user_id = ? AND id = ?", (user_id, note_id)
            )
            conn.commit()
            return cursor.rowcount > 0


class UndercurrentRepository(_SQLiteRepository):
    """SQLite-backed undercurrent storage."""

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS undercurrents (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    summary_text TEXT NOT NULL,
                    questions_json TEXT NOT NULL DEFAULT '[]',
                    notes_included_json TEXT NOT NULL DEFAULT '[]',
                    sentiment_colors_json TEXT NOT NULL DEFAULT '[]',
                    timeframe TEXT NOT NULL DEFAULT 'all',
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_undercurrents_user_created ON undercurrents(user_id, created_at DESC)"
            )
            conn.commit()

    @staticmethod
    def _row_to_undercurrent(row: sqlite3.Row) -> Undercurrent:
        return Undercurrent(
            id=row["id"],
            user_id=row["user_id"],
            summary_text=row["summary_text"],
            questions_json=row["questions_json"],
            notes_included_json=row["notes_included_json"],
            sentiment_colors_json=row["sentiment_colors_json"],
            timeframe=row["timeframe"],
            created_at=row["created_at"],
        )

    def create(
        self,
        user_id: str,
        summary_text: str,
        questions: Sequence[str],
        notes_included: Sequence[str],
        sentiment_colors: Sequence[str],
        timeframe: str = "all",
    ) -> Undercurrent:
        undercurrent = Undercurrent(
            id=str(uuid.uuid4()),
            user_id=user_id,
            summary_text=summary_text,
            questions_json=json.dumps(list(questions), ensure_ascii=False),
            notes_included_json=json.dumps(list(notes_included)),
            sentiment_colors_json=json.dumps(list(sentiment_colors)),
            timeframe=timeframe,
            created_at=self._now(),
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO undercurrents (
                    id, user_id, summary_text, questions_json, notes_included_json,
                    sentiment_colors_json, timeframe, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    undercurrent.id,
                    undercurrent.user_id,
                    undercurrent.summary_text,
                    undercurrent.questions_json,
                    undercurrent.notes_included_json,
                    undercurrent.sentiment_colors_json,
                    undercurrent.timeframe,
                    undercurrent.created_at,
                ),
            )
            conn.commit()
        return undercurrent

    def list_for_user(self, user_id: str) -> List[Undercurrent]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM undercurrents WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_undercurrent(row) for row in rows]

    def get(self, user_id: str, undercurrent_id: str) -> Optional[Undercurrent]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM undercurrents WHERE user_id = ? AND id = ?",
                (user_id, undercurrent_id),
            ).fetchone()
        return self._row_to_undercurrent(row) if row else None

    def delete(self, user_id: str, undercurrent_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM undercurrents WHERE user_id = ? AND id = ?",
                (user_id, undercurrent_id),
            )
            conn.commit()
            return cursor.rowcount > 0
