"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException

from maelstrom.config import Config
from maelstrom.insight import InsightGenerator
from maelstrom.logger import setup_logger
from maelstrom.notes import Note, NoteRepository, Undercurrent, UndercurrentRepository
from maelstrom.ollama_client import OllamaClient

from .schemas import NoteResponse, UndercurrentResponse

config = Config.load()
setup_logger(log_level=config.log_level, log_file=config.log_file)


def _db_path():
    return config.resolve_storage_path(config.storage.db_path, "MAELSTROM_DB_PATH")


@lru_cache(maxsize=1)
def get_note_repository() -> NoteRepository:
    """Singleton NoteRepository."""
    return NoteRepository(db_path=_db_path())


@lru_cache(maxsize=1)
def get_undercurrent_repository() -> UndercurrentRepository:
    """Singleton UndercurrentRepository."""
    return UndercurrentRepository(db_path=_db_path())


@lru_cache(maxsize=1)
def get_ollama_client() -> OllamaClient:
    """Singleton OllamaClient built from config."""
    return OllamaClient(
        host=config.ollama.host,
        model=config.ollama.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


@lru_cache(maxsize=1)
def get_insight_generator() -> InsightGenerator:
    """Singleton InsightGenerator."""
    return InsightGenerator(
        note_repository=get_note_repository(),
        undercurrent_repository=get_undercurrent_repository(),
        ollama_client=get_ollama_client(),
        min_notes=config.insight.min_notes,
        max_notes=config.insight.max_notes,
    )


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()


def serialize_note(note: Note) -> NoteResponse:
    """Convert domain Note to API response."""
    return NoteResponse(**note.to_dict())


def serialize_undercurrent(undercurrent: Undercurrent) -> UndercurrentResponse:
    """Convert domain Undercurrent to API response."""
    return UndercurrentResponse(**undercurrent.to_dict())
