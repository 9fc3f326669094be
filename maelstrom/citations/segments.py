"""Rendered segment types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

FetchNotesCallback = Callable[[List[str]], Any]


@dataclass(slots=True)
class TextSegment:
    """Plain text, rendered verbatim."""

    text: str


@dataclass(slots=True)
class CitationSegment:
    """A clickable citation marker.

    display_index is the sequential number shown to the user; note_ids are
    the resolved notes to fetch when the marker is activated.
    """

    display_index: int
    note_ids: List[str]
    on_activate: Optional[FetchNotesCallback] = field(default=None, repr=False, compare=False)

    def activate(self) -> Any:
        if self.on_activate is None:
            return None
        return self.on_activate(list(self.note_ids))


Segment = Union[TextSegment, CitationSegment]


def segments_to_dicts(segments: Sequence[Segment]) -> List[Dict[str, Any]]:
    """JSON-friendly representation used by the HTTP API."""
    result: List[Dict[str, Any]] = []
    for segment in segments:
        if isinstance(segment, CitationSegment):
            result.append(
                {
                    "type": "citation",
                    "display_index": segment.display_index,
                    "note_ids": list(segment.note_ids),
                }
            )
        else:
            result.append({"type": "text", "text": segment.text})
    return result


def segments_to_text(segments: Sequence[Segment]) -> str:
    """Flatten to a string with renumbered markers, e.g. ``"It rained.[1]"``."""
    parts: List[str] = []
    for segment in segments:
        if isinstance(segment, CitationSegment):
            parts.append(f"[{segment.display_index}]")
        else:
            parts.append(segment.text)
    return "".join(parts)
