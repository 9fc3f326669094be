"""Citation rendering tests"""

from unittest.mock import MagicMock

import pytest

from maelstrom.citations import (
    CitationSegment,
    TextSegment,
    consolidate_adjacent,
    parse_indices,
    render_summary,
    reorder_punctuation,
    resolve_note_ids,
    segments_to_dicts,
    segments_to_text,
    split_citation_groups,
)
from maelstrom.citations.parser import Span, match_citation_group


@pytest.mark.parametrize(
    "text, expected",
    [
        ("[1][2]", "[1, 2]"),
        ("[1] [2]", "[1, 2]"),
        ("a[1]\n[2][3] b", "a[1, 2, 3] b"),
        ("no markers here", "no markers here"),
    ],
)
def test_consolidate_adjacent(text, expected):
    assert consolidate_adjacent(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("word[1].", "word.[1]"),
        ("word[1][2];", "word;[1][2]"),
        ("end[1, 2]...", "end...[1, 2]"),
        ("a[1]!?", "a![1]?"),
        ("a[1] b.", "a[1] b."),
        ("[abc].", "[abc]."),
    ],
)
def test_reorder_punctuation(text, expected):
    assert reorder_punctuation(text) == expected


def test_match_citation_group_grammar():
    assert match_citation_group("[1, 3] x", 0) == 6
    assert match_citation_group("[]", 0) == -1
    assert match_citation_group("[1a]", 0) == -1
    assert match_citation_group("[12", 0) == -1
    assert match_citation_group("x[1]", 0) == -1


def test_split_citation_groups():
    assert split_citation_groups("[3] then [1]") == [
        Span("", False),
        Span("[3]", True),
        Span(" then ", False),
        Span("[1]", True),
        Span("", False),
    ]


def test_parse_indices_and_resolution():
    assert parse_indices("[1, 3]") == [1, 3]
    assert parse_indices("[12,4]") == [12, 4]
    assert parse_indices("[ , ]") == []
    assert resolve_note_ids([1, 3, 4, 0], ["a", "b", "c"]) == ["a", "c"]
    assert resolve_note_ids([1, 2], ["", "b"]) == ["b"]


@pytest.mark.parametrize("text", ["X[1][2]", "X[1] [2]", "X[1, 2]"])
def test_adjacent_groups_render_as_one_citation(text):
    segments = render_summary(text, ["a", "b"])

    assert segments == [TextSegment("X"), CitationSegment(1, ["a", "b"])]


@pytest.mark.parametrize("text", ["It rained.[1]", "It rained[1]."])
def test_punctuation_is_placed_before_citation(text):
    segments = render_summary(text, ["x"])

    assert segments == [TextSegment("It rained."), CitationSegment(1, ["x"])]


def test_display_index_follows_text_order():
    segments = render_summary("[3] then [1]", ["a", "b", "c"])

    assert segments == [
        CitationSegment(1, ["c"]),
        TextSegment(" then "),
        CitationSegment(2, ["a"]),
    ]


def test_out_of_range_citation_is_elided():
    segments = render_summary("See[5].", ["a", "b"])

    assert segments == [TextSegment("See.")]
    assert segments_to_text(segments) == "See."


def test_elided_citation_consumes_no_display_index():
    segments = render_summary("One[3]. Two[9]. Three[1].", ["a", "b", "c"])

    assert segments == [
        TextSegment("One."),
        CitationSegment(1, ["c"]),
        TextSegment(" Two. Three."),
        CitationSegment(2, ["a"]),
    ]


def test_partially_valid_group_keeps_valid_ids():
    segments = render_summary("Mixed[1, 9, 2]", ["a", "b"])
    assert segments[-1] == CitationSegment(1, ["a", "b"])


def test_zero_is_not_a_valid_citation():
    assert render_summary("Zero[0]", ["a"]) == [TextSegment("Zero")]


def test_malformed_brackets_are_plain_text():
    segments = render_summary("Option [abc] and [1a].", ["a"])
    assert segments == [TextSegment("Option [abc] and [1a].")]


def test_empty_and_plain_inputs():
    assert render_summary("", ["a"]) == []
    assert render_summary("Just text.", []) == [TextSegment("Just text.")]


def test_single_pass_leaves_split_citations_separate():
    segments = render_summary("A[1].[2]", ["a", "b"])

    assert segments == [
        TextSegment("A."),
        CitationSegment(1, ["a"]),
        CitationSegment(2, ["b"]),
    ]


def test_end_to_end_activation():
    fetch_notes = MagicMock(return_value=["I'm tired.", "Good news today."])

    segments = render_summary("Mixed feelings emerged.[1, 2]", ["n1", "n2"], fetch_notes)

    assert segments == [
        TextSegment("Mixed feelings emerged."),
        CitationSegment(1, ["n1", "n2"]),
    ]
    assert segments[1].activate() == ["I'm tired.", "Good news today."]
    fetch_notes.assert_called_once_with(["n1", "n2"])


def test_activate_without_callback_returns_none():
    assert CitationSegment(1, ["a"]).activate() is None


def test_segments_to_dicts():
    segments = render_summary("Calm[1].", ["n1"])

    assert segments_to_dicts(segments) == [
        {"type": "text", "text": "Calm."},
        {"type": "citation", "display_index": 1, "note_ids": ["n1"]},
    ]
    assert segments_to_text(segments) == "Calm.[1]"


def test_rendering_does_not_mutate_note_ids():
    note_ids = ["a", "b"]
    segments = render_summary("X[1, 2]", note_ids)
    segments[-1].note_ids.append("c")
    assert note_ids == ["a", "b"]
