"""Citation-aware rendering of generated summaries."""

from .parser import (
    consolidate_adjacent,
    parse_indices,
    render_summary,
    reorder_punctuation,
    resolve_note_ids,
    split_citation_groups,
)
from .segments import CitationSegment, Segment, TextSegment, segments_to_dicts, segments_to_text

__all__ = [
    "consolidate_adjacent",
    "parse_indices",
    "render_summary",
    "reorder_punctuation",
    "resolve_note_ids",
    "split_citation_groups",
    "CitationSegment",
    "Segment",
    "TextSegment",
    "segments_to_dicts",
    "segments_to_text",
]
