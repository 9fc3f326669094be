"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from maelstrom.insight import Timeframe
from maelstrom.notes import MAX_NOTE_LENGTH, normalize_note_content


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str


class NoteCreateRequest(BaseModel):
    """Request body for note creation."""

    content: str = Field(..., description=f"Note text, 1-{MAX_NOTE_LENGTH} characters after trimming")

    @field_validator("content")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_note_content(value)


class NoteResponse(BaseModel):
    """Single note."""

    id: str
    user_id: str
    content: str
    created_at: str


class UndercurrentResponse(BaseModel):
    """Single undercurrent."""

    id: str
    user_id: str
    summary_text: str
    questions: List[str]
    notes_included: List[str]
    sentiment_colors: List[str]
    timeframe: str
    created_at: str


class GenerateUndercurrentRequest(BaseModel):
    """Request body for undercurrent generation."""

    timeframe: Timeframe = Field(default=Timeframe.ALL, description="24h, week, month or all")


class GenerateUndercurrentResponse(BaseModel):
    """Either the new undercurrent or an informational message."""

    undercurrent: Optional[UndercurrentResponse] = None
    message: Optional[str] = Field(
        default=None, description="Set when there were not enough notes to generate"
    )


class SegmentResponse(BaseModel):
    """Rendered text or citation segment."""

    type: Literal["text", "citation"]
    text: Optional[str] = None
    display_index: Optional[int] = None
    note_ids: Optional[List[str]] = None


class RenderedUndercurrentResponse(BaseModel):
    """Undercurrent text rendered into segments with resolved citations."""

    id: str
    summary: List[SegmentResponse]
    questions: List[List[SegmentResponse]]


class DeleteResponse(BaseModel):
    deleted: bool


def segment_models(segments: List[Dict[str, Any]]) -> List[SegmentResponse]:
    return [SegmentResponse(**segment) for segment in segments]
