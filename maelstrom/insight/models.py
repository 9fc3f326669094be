"""
Undercurrent generation models.

Related modules:
- maelstrom/insight/generator.py: produces these from a note batch
- maelstrom/server/routes/undercurrents.py: exposes them over HTTP
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_SENTIMENT_COLORS = ["#1e3a5f", "#2d5a7c", "#3d7a9c", "#4d9abc"]
INSUFFICIENT_DATA_MESSAGE = "Not enough turbulence yet. Keep writing."

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class Timeframe(str, Enum):
    """Window of notes considered for an undercurrent."""

    DAY = "24h"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"

    def cutoff(self, now: datetime) -> Optional[datetime]:
        """Earliest note time included, or None for no limit."""
        if self is Timeframe.DAY:
            return now - timedelta(hours=24)
        if self is Timeframe.WEEK:
            return now - timedelta(days=7)
        if self is Timeframe.MONTH:
            return now - timedelta(days=30)
        return None


class InsightOutput(BaseModel):
    """Structured output expected from the model"""

    summary_text: str = Field(..., description="Short observation with inline [n] citations")
    questions: List[str] = Field(default_factory=list, description="Reflective questions")
    sentiment_colors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SENTIMENT_COLORS),
        description="Exactly 4 hex colors forming the emotional palette",
    )

    @field_validator("questions", mode="before")
    @classmethod
    def _coerce_questions(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @field_validator("sentiment_colors", mode="before")
    @classmethod
    def _fallback_palette(cls, value: Any) -> List[str]:
        if (
            isinstance(value, list)
            and len(value) == 4
            and all(isinstance(color, str) and _HEX_COLOR.match(color) for color in value)
        ):
            return value
        return list(DEFAULT_SENTIMENT_COLORS)


@dataclass(slots=True)
class InsufficientData:
    """Soft failure: too few notes in the timeframe"""

    message: str = INSUFFICIENT_DATA_MESSAGE
