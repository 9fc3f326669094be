"""Note endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query

from ..dependencies import get_current_user_id, get_note_repository, serialize_note
from ..schemas import DeleteResponse, HealthResponse, NoteCreateRequest, NoteResponse

logger = logging.getLogger(__name__)

NOTES_MISSING_DETAIL = "These notes no longer exist."


def register_note_routes(app: FastAPI) -> None:
    """Register health check and note CRUD endpoints."""

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Reachability probe used by offline clients."""
        return HealthResponse(status="ok")

    @app.post("/api/notes", response_model=NoteResponse)
    async def create_note(
        request: NoteCreateRequest, user_id: str = Depends(get_current_user_id)
    ) -> NoteResponse:
        """Persist a new note."""
        repo = get_note_repository()
        try:
            note = await asyncio.to_thread(repo.insert_note, user_id, request.content)
            return serialize_note(note)
        except Exception as exc:
            logger.exception("Failed to create note: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to create note") from exc

    @app.get("/api/notes", response_model=List[NoteResponse])
    async def list_notes(user_id: str = Depends(get_current_user_id)) -> List[NoteResponse]:
        """List notes, newest first."""
        repo = get_note_repository()
        try:
            notes = await asyncio.to_thread(repo.list_for_user, user_id)
            return [serialize_note(note) for note in notes]
        except Exception as exc:
            logger.exception("Failed to list notes: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to list notes") from exc

    @app.get("/api/notes/lookup", response_model=List[NoteResponse])
    async def lookup_notes(
        ids: List[str] = Query(default=[]),
        user_id: str = Depends(get_current_user_id),
    ) -> List[NoteResponse]:
        """Fetch the notes behind a citation."""
        repo = get_note_repository()
        try:
            notes = await asyncio.to_thread(repo.get_many, user_id, ids)
        except Exception as exc:
            logger.exception("Failed to fetch notes: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to fetch notes") from exc
        if not notes:
            raise HTTPException(status_code=404, detail=NOTES_MISSING_DETAIL)
        return [serialize_note(note) for note in notes]

    @app.delete("/api/notes/{note_id}", response_model=DeleteResponse)
    async def delete_note(
        note_id: str, user_id: str = Depends(get_current_user_id)
    ) -> DeleteResponse:
        """Delete a note."""
        repo = get_note_repository()
        try:
            deleted = await asyncio.to_thread(repo.delete, user_id, note_id)
            if not deleted:
                raise HTTPException(status_code=404, detail="Note not found")
            return DeleteResponse(deleted=True)
        except HTTPException:
            raise
        except Exception as exc:
            logger.exception("Failed to delete note: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to delete note") from exc
