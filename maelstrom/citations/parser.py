"""Citation parsing and re-indexing for generated summaries.

Generated prose cites notes with bracket groups such as ``[2]`` or
``[1, 3]``, where each number is the 1-based position of a note in the
batch sent to the model. Rendering is a fixed pipeline of pure functions:

1. ``consolidate_adjacent``: ``[1][2]`` / ``[1] [2]`` -> ``[1, 2]``
2. ``reorder_punctuation``: ``word[1].`` -> ``word.[1]``
3. ``render_summary``: split into text and citation spans, resolve the
   numbers against the note ids and renumber surviving citations 1, 2, ...

Each step is a single left-to-right pass. Step 1 is not re-applied after
step 2, so ``"A[1].[2]"`` still renders two separate markers.

The marker grammar is ``[`` followed by one or more of ``0-9 , <space>``
followed by ``]``. Anything else in brackets is plain text.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence

from .segments import CitationSegment, FetchNotesCallback, Segment, TextSegment

GROUP_CHARS = frozenset("0123456789, ")
TRAILING_PUNCTUATION = frozenset(".,;:!")


class Span(NamedTuple):
    text: str
    is_citation: bool


def match_citation_group(text: str, start: int) -> int:
    """Return the end (exclusive) of a citation group at ``start``, or -1."""
    n = len(text)
    if start >= n or text[start] != "[":
        return -1
    i = start + 1
    while i < n and text[i] in GROUP_CHARS:
        i += 1
    if i == start + 1 or i >= n or text[i] != "]":
        return -1
    return i + 1


def consolidate_adjacent(text: str) -> str:
    """Replace every ``]<whitespace>*[`` boundary with ``", "``."""
    out: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "]":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] == "[":
                out.append(", ")
                i = j + 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def reorder_punctuation(text: str) -> str:
    """Move trailing ``. , ; : !`` runs in front of the citation groups they follow."""
    out: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        run_end = match_citation_group(text, i)
        if run_end == -1:
            out.append(text[i])
            i += 1
            continue

        # extend over directly adjacent groups
        while True:
            next_end = match_citation_group(text, run_end)
            if next_end == -1:
                break
            run_end = next_end

        punct_end = run_end
        while punct_end < n and text[punct_end] in TRAILING_PUNCTUATION:
            punct_end += 1

        if punct_end > run_end:
            out.append(text[run_end:punct_end])
        out.append(text[i:run_end])
        i = punct_end
    return "".join(out)


def split_citation_groups(text: str) -> List[Span]:
    """Partition text into alternating plain and citation spans.

    Plain spans may be empty (e.g. before a leading citation).
    """
    spans: List[Span] = []
    plain_start = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "[":
            end = match_citation_group(text, i)
            if end != -1:
                spans.append(Span(text[plain_start:i], False))
                spans.append(Span(text[i:end], True))
                i = end
                plain_start = end
                continue
        i += 1
    spans.append(Span(text[plain_start:], False))
    return spans


def parse_indices(group: str) -> List[int]:
    """All integers embedded in a citation group, in order."""
    numbers: List[int] = []
    digits: List[str] = []
    for ch in group:
        if ch.isdigit():
            digits.append(ch)
        elif digits:
            numbers.append(int("".join(digits)))
            digits = []
    if digits:
        numbers.append(int("".join(digits)))
    return numbers


def resolve_note_ids(indices: Sequence[int], note_ids: Sequence[str]) -> List[str]:
    """Map 1-based citation numbers to note ids, dropping anything unresolvable."""
    resolved: List[str] = []
    for number in indices:
        position = number - 1
        if 0 <= position < len(note_ids) and note_ids[position]:
            resolved.append(note_ids[position])
    return resolved


def render_summary(
    text: str,
    note_ids: Sequence[str],
    on_fetch_notes: Optional[FetchNotesCallback] = None,
) -> List[Segment]:
    """
    Render generated text into text and citation segments.

    Args:
        text: summary or question text containing citation markers
        note_ids: ids of the notes sent to the model, in prompt order
        on_fetch_notes: called with a citation's note ids when it is activated

    Returns:
        segments in text order; citations numbered sequentially from 1
    """
    processed = reorder_punctuation(consolidate_adjacent(text))

    segments: List[Segment] = []
    display_index = 1
    for span in split_citation_groups(processed):
        if not span.is_citation:
            if not span.text:
                continue
            if segments and isinstance(segments[-1], TextSegment):
                segments[-1].text += span.text
            else:
                segments.append(TextSegment(span.text))
            continue

        resolved = resolve_note_ids(parse_indices(span.text), note_ids)
        if not resolved:
            continue
        segments.append(
            CitationSegment(
                display_index=display_index,
                note_ids=resolved,
                on_activate=on_fetch_notes,
            )
        )
        display_index += 1
    return segments
