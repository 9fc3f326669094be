"""Undercurrent endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException

from maelstrom.citations import render_summary, segments_to_dicts
from maelstrom.errors import InsightGenerationError
from maelstrom.insight import InsufficientData

from ..dependencies import (
    get_current_user_id,
    get_insight_generator,
    get_undercurrent_repository,
    serialize_undercurrent,
)
from ..schemas import (
    DeleteResponse,
    GenerateUndercurrentRequest,
    GenerateUndercurrentResponse,
    RenderedUndercurrentResponse,
    UndercurrentResponse,
    segment_models,
)

logger = logging.getLogger(__name__)


def register_undercurrent_routes(app: FastAPI) -> None:
    """Register undercurrent generation, listing and rendering endpoints."""

    @app.get("/api/undercurrents", response_model=List[UndercurrentResponse])
    async def list_undercurrents(
        user_id: str = Depends(get_current_user_id),
    ) -> List[UndercurrentResponse]:
        """List undercurrents, newest first."""
        repo = get_undercurrent_repository()
        try:
            undercurrents = await asyncio.to_thread(repo.list_for_user, user_id)
            return [serialize_undercurrent(item) for item in undercurrents]
        except Exception as exc:
            logger.exception("Failed to list undercurrents: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to list undercurrents") from exc

    @app.post("/api/undercurrents/generate", response_model=GenerateUndercurrentResponse)
    async def generate_undercurrent(
        request: GenerateUndercurrentRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> GenerateUndercurrentResponse:
        """Synthesize a new undercurrent from recent notes."""
        generator = get_insight_generator()
        try:
            result = await asyncio.to_thread(generator.generate, user_id, request.timeframe)
        except InsightGenerationError as exc:
            logger.error("Error generating undercurrent: %s", exc)
            raise HTTPException(status_code=502, detail=str(exc)) from exc

        if isinstance(result, InsufficientData):
            return GenerateUndercurrentResponse(message=result.message)
        return GenerateUndercurrentResponse(undercurrent=serialize_undercurrent(result))

    @app.get(
        "/api/undercurrents/{undercurrent_id}/rendered",
        response_model=RenderedUndercurrentResponse,
    )
    async def render_undercurrent(
        undercurrent_id: str, user_id: str = Depends(get_current_user_id)
    ) -> RenderedUndercurrentResponse:
        """Summary and questions split into text and resolved citation segments."""
        repo = get_undercurrent_repository()
        try:
            undercurrent = await asyncio.to_thread(repo.get, user_id, undercurrent_id)
        except Exception as exc:
            logger.exception("Failed to fetch undercurrent: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to fetch undercurrent") from exc
        if not undercurrent:
            raise HTTPException(status_code=404, detail="Undercurrent not found")

        note_ids = undercurrent.notes_included
        summary = segments_to_dicts(render_summary(undercurrent.summary_text, note_ids))
        questions = [
            segments_to_dicts(render_summary(question, note_ids))
            for question in undercurrent.questions
        ]
        return RenderedUndercurrentResponse(
            id=undercurrent.id,
            summary=segment_models(summary),
            questions=[segment_models(question) for question in questions],
        )

    @app.delete("/api/undercurrents/{undercurrent_id}", response_model=DeleteResponse)
    async def delete_undercurrent(
        undercurrent_id: str, user_id: str = Depends(get_current_user_id)
    ) -> DeleteResponse:
        """Delete an undercurrent."""
        repo = get_undercurrent_repository()
        try:
            deleted = await asyncio.to_thread(repo.delete, user_id, undercurrent_id)
            if not deleted:
                raise HTTPException(status_code=404, detail="Undercurrent not found")
            return DeleteResponse(deleted=True)
        except HTTPException:
            raise
        except Exception as exc:
            logger.exception("Failed to delete undercurrent: %s", exc)
            raise HTTPException(
                status_code=500, detail="Failed to delete undercurrent"
            ) from exc
