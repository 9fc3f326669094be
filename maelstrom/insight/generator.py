"""
InsightGenerator: LLM-based undercurrent synthesis

Flow:
- Fetch the user's most recent notes within the timeframe
- Too few notes: return InsufficientData (soft failure, no LLM call)
- Otherwise send the newest batch to the model, parse its JSON and store
  the undercurrent together with the ordered ids of the notes it cites

Related:
- maelstrom/insight/prompts.py: prompt construction
- maelstrom/ollama_client.py: LLM inference
- maelstrom/citations/parser.py: renders the stored summary against notes_included
"""

import json
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from pydantic import ValidationError

from maelstrom.errors import InsightGenerationError
from maelstrom.notes import NoteRepository, Undercurrent, UndercurrentRepository
from maelstrom.ollama_client import OllamaClient

from .models import InsightOutput, InsufficientData, Timeframe
from .prompts import build_messages

logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> str:
    """Strip markdown fences and any chatter around the outermost JSON object."""
    cleaned = text.replace("```json", "").replace("```", "").strip()
    first = cleaned.find("{")
    last = cleaned.rfind("}")
    if first != -1 and last != -1:
        cleaned = cleaned[first : last + 1]
    return cleaned


def parse_insight_response(text: str) -> InsightOutput:
    """
    Parse raw model output into an InsightOutput

    Raises:
        InsightGenerationError: not JSON, or missing required fields
    """
    try:
        data = json.loads(extract_json_object(text))
    except json.JSONDecodeError as e:
        raise InsightGenerationError(f"Model response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InsightGenerationError("Model response is not a JSON object")
    try:
        return InsightOutput.model_validate(data)
    except ValidationError as e:
        raise InsightGenerationError(f"Model response has an unexpected shape: {e}") from e


class InsightGenerator:
    """Generates undercurrents from a user's recent notes"""

    def __init__(
        self,
        note_repository: NoteRepository,
        undercurrent_repository: UndercurrentRepository,
        ollama_client: Optional[OllamaClient] = None,
        min_notes: int = 3,
        max_notes: int = 20,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            note_repository: source of notes
            undercurrent_repository: destination for generated undercurrents
            ollama_client: LLM client (injectable for tests)
            min_notes: below this count generation is skipped
            max_notes: newest notes sent to the model
            clock: returns the current time (injectable for tests)
        """
        self.note_repository = note_repository
        self.undercurrent_repository = undercurrent_repository
        self.ollama_client = ollama_client or OllamaClient()
        self.min_notes = min_notes
        self.max_notes = max_notes
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(
        self, user_id: str, timeframe: Timeframe = Timeframe.ALL
    ) -> Union[Undercurrent, InsufficientData]:
        """
        Generate and store an undercurrent

        Args:
            user_id: owner of the notes
            timeframe: window of notes to consider

        Returns:
            the stored Undercurrent, or InsufficientData when there are too few notes

        Raises:
            InsightGenerationError: fetching, LLM call, parsing or storing failed
        """
        timeframe = Timeframe(timeframe)
        cutoff = timeframe.cutoff(self._clock())

        try:
            notes = self.note_repository.list_for_user(user_id, since=cutoff)
        except Exception as e:
            logger.error(f"Error fetching notes: {e}")
            raise InsightGenerationError(f"Failed to fetch notes: {e}") from e

        if len(notes) < self.min_notes:
            logger.info(
                f"Only {len(notes)} notes for timeframe {timeframe.value}, skipping generation"
            )
            return InsufficientData()

        batch = notes[: self.max_notes]
        logger.info(f"Generating undercurrent from {len(batch)} notes, timeframe: {timeframe.value}")

        try:
            raw = self.ollama_client.chat(build_messages(batch), return_json=False)
        except Exception as e:
            logger.error(f"AI generation error: {e}")
            raise InsightGenerationError(str(e)) from e

        if isinstance(raw, dict):
            raw = json.dumps(raw)
        output = parse_insight_response(raw)

        try:
            return self.undercurrent_repository.create(
                user_id=user_id,
                summary_text=output.summary_text,
                questions=output.questions,
                notes_included=[note.id for note in batch],
                sentiment_colors=output.sentiment_colors,
                timeframe=timeframe.value,
            )
        except Exception as e:
            logger.error(f"Error storing undercurrent: {e}")
            raise InsightGenerationError(f"Failed to store undercurrent: {e}") from e
