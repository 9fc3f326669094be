"""InsightGenerator tests (LLM mocked)"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from maelstrom.citations import CitationSegment, TextSegment, render_summary
from maelstrom.errors import InsightGenerationError
from maelstrom.insight import (
    DEFAULT_SENTIMENT_COLORS,
    INSUFFICIENT_DATA_MESSAGE,
    InsightGenerator,
    InsufficientData,
    Timeframe,
    extract_json_object,
    parse_insight_response,
)
from maelstrom.notes import NoteRepository, UndercurrentRepository

PALETTE = ["#111111", "#222222", "#333333", "#444444"]


def model_reply(**overrides):
    payload = {
        "summary_text": "Mixed feelings emerged.[1, 2]",
        "questions": ["What changed today?[3]"],
        "sentiment_colors": PALETTE,
    }
    payload.update(overrides)
    return "```json\n" + json.dumps(payload) + "\n```"


@pytest.fixture
def note_repository(tmp_path):
    return NoteRepository(db_path=tmp_path / "notes.db")


@pytest.fixture
def undercurrent_repository(tmp_path):
    return UndercurrentRepository(db_path=tmp_path / "notes.db")


@pytest.fixture
def ollama_client():
    client = MagicMock()
    client.chat.return_value = model_reply()
    return client


@pytest.fixture
def generator(note_repository, undercurrent_repository, ollama_client):
    return InsightGenerator(
        note_repository=note_repository,
        undercurrent_repository=undercurrent_repository,
        ollama_client=ollama_client,
    )


def add_notes(repository, count, user_id="user-1"):
    return [repository.insert_note(user_id, f"note {i}") for i in range(count)]


def test_too_few_notes_is_a_soft_failure(generator, note_repository, ollama_client):
    add_notes(note_repository, 2)

    result = generator.generate("user-1")

    assert isinstance(result, InsufficientData)
    assert result.message == INSUFFICIENT_DATA_MESSAGE
    ollama_client.chat.assert_not_called()


def test_generate_stores_undercurrent(
    generator, note_repository, undercurrent_repository, ollama_client
):
    notes = add_notes(note_repository, 3)
    newest_first = [note.id for note in reversed(notes)]

    undercurrent = generator.generate("user-1", Timeframe.WEEK)

    assert undercurrent.summary_text == "Mixed feelings emerged.[1, 2]"
    assert undercurrent.questions == ["What changed today?[3]"]
    assert undercurrent.sentiment_colors == PALETTE
    assert undercurrent.notes_included == newest_first
    assert undercurrent.timeframe == "week"
    assert undercurrent_repository.get("user-1", undercurrent.id) == undercurrent

    messages = ollama_client.chat.call_args.args[0]
    assert ollama_client.chat.call_args.kwargs["return_json"] is False
    assert messages[0]["role"] == "system"
    assert f'Note 1 (ID: {newest_first[0]}): "note 2"' in messages[1]["content"]


def test_stored_summary_renders_against_included_notes(generator, note_repository):
    add_notes(note_repository, 3)

    undercurrent = generator.generate("user-1")
    ids = undercurrent.notes_included

    assert render_summary(undercurrent.summary_text, ids) == [
        TextSegment("Mixed feelings emerged."),
        CitationSegment(1, [ids[0], ids[1]]),
    ]


def test_batch_is_capped_at_newest_notes(note_repository, undercurrent_repository, ollama_client):
    notes = add_notes(note_repository, 5)
    generator = InsightGenerator(
        note_repository, undercurrent_repository, ollama_client=ollama_client, max_notes=3
    )

    undercurrent = generator.generate("user-1")

    assert undercurrent.notes_included == [note.id for note in reversed(notes[2:])]


def test_other_users_notes_are_ignored(generator, note_repository, ollama_client):
    add_notes(note_repository, 5, user_id="someone-else")
    add_notes(note_repository, 1)

    assert isinstance(generator.generate("user-1"), InsufficientData)


def test_timeframe_excludes_older_notes(note_repository, undercurrent_repository, ollama_client):
    add_notes(note_repository, 3)
    two_days_later = datetime.now(timezone.utc) + timedelta(days=2)
    generator = InsightGenerator(
        note_repository,
        undercurrent_repository,
        ollama_client=ollama_client,
        clock=lambda: two_days_later,
    )

    assert isinstance(generator.generate("user-1", Timeframe.DAY), InsufficientData)
    assert not isinstance(generator.generate("user-1", "week"), InsufficientData)


def test_invalid_palette_falls_back_to_default(generator, note_repository, ollama_client):
    add_notes(note_repository, 3)
    ollama_client.chat.return_value = model_reply(sentiment_colors=["red", "#000000"])

    undercurrent = generator.generate("user-1")

    assert undercurrent.sentiment_colors == DEFAULT_SENTIMENT_COLORS


def test_dict_reply_is_accepted(generator, note_repository, ollama_client):
    add_notes(note_repository, 3)
    ollama_client.chat.return_value = {"summary_text": "Quiet.", "questions": None}

    undercurrent = generator.generate("user-1")

    assert undercurrent.summary_text == "Quiet."
    assert undercurrent.questions == []


def test_llm_failure_is_a_hard_error(generator, note_repository, ollama_client):
    add_notes(note_repository, 3)
    ollama_client.chat.side_effect = RuntimeError("model offline")

    with pytest.raises(InsightGenerationError, match="model offline"):
        generator.generate("user-1")


@pytest.mark.parametrize(
    "reply",
    ["I could not find any pattern.", '{"questions": []}', "[1, 2, 3]"],
)
def test_unusable_reply_is_a_hard_error(generator, note_repository, ollama_client, reply):
    add_notes(note_repository, 3)
    ollama_client.chat.return_value = reply

    with pytest.raises(InsightGenerationError):
        generator.generate("user-1")


def test_fetch_failure_is_a_hard_error(undercurrent_repository, ollama_client):
    broken_notes = MagicMock()
    broken_notes.list_for_user.side_effect = OSError("database is locked")
    generator = InsightGenerator(broken_notes, undercurrent_repository, ollama_client=ollama_client)

    with pytest.raises(InsightGenerationError, match="database is locked"):
        generator.generate("user-1")


def test_extract_json_object_strips_chatter():
    assert extract_json_object('Sure! {"a": {"b": 1}} hope this helps') == '{"a": {"b": 1}}'
    assert extract_json_object('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_parse_insight_response_defaults():
    output = parse_insight_response('{"summary_text": "Still waters."}')

    assert output.questions == []
    assert output.sentiment_colors == DEFAULT_SENTIMENT_COLORS


def test_timeframe_cutoffs():
    now = datetime(2026, 5, 10, tzinfo=timezone.utc)

    assert Timeframe.DAY.cutoff(now) == now - timedelta(hours=24)
    assert Timeframe.WEEK.cutoff(now) == now - timedelta(days=7)
    assert Timeframe.MONTH.cutoff(now) == now - timedelta(days=30)
    assert Timeframe.ALL.cutoff(now) is None
