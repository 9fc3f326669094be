"""NoteRepository / UndercurrentRepository tests"""

from datetime import datetime, timedelta, timezone

import pytest

from maelstrom.notes import NoteRepository, UndercurrentRepository
from maelstrom.notes.models import normalize_note_content
from maelstrom.errors import NoteValidationError


@pytest.fixture
def notes(tmp_path):
    return NoteRepository(db_path=tmp_path / "maelstrom.db")


@pytest.fixture
def undercurrents(tmp_path):
    return UndercurrentRepository(db_path=tmp_path / "maelstrom.db")


def test_insert_and_list_newest_first(notes):
    first = notes.insert_note("user-1", "first")
    second = notes.insert_note("user-1", "second")
    notes.insert_note("user-2", "not yours")

    assert notes.list_for_user("user-1") == [second, first]
    assert notes.list_for_user("user-1", limit=1) == [second]


def test_list_since_filters_older_notes(notes):
    notes.insert_note("user-1", "old enough")

    future = datetime.now(timezone.utc) + timedelta(hours=1)
    past = datetime.now(timezone.utc) - timedelta(hours=1)

    assert notes.list_for_user("user-1", since=future) == []
    assert len(notes.list_for_user("user-1", since=past)) == 1


def test_get_many_preserves_requested_order(notes):
    a = notes.insert_note("user-1", "a")
    b = notes.insert_note("user-1", "b")
    other = notes.insert_note("user-2", "c")

    assert notes.get_many("user-1", [b.id, "missing", a.id, b.id, other.id]) == [b, a]
    assert notes.get_many("user-1", []) == []


def test_delete_is_scoped_to_owner(notes):
    note = notes.insert_note("user-1", "mine")

    assert notes.delete("user-2", note.id) is False
    assert notes.delete("user-1", note.id) is True
    assert notes.delete("user-1", note.id) is False
    assert notes.list_for_user("user-1") == []


def test_db_path_from_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env" / "notes.db"
    monkeypatch.setenv("MAELSTROM_DB_PATH", str(db_path))

    repository = NoteRepository()

    assert repository.db_path == db_path
    assert db_path.exists()


def test_undercurrent_round_trip(undercurrents):
    created = undercurrents.create(
        user_id="user-1",
        summary_text="Restless.[1]",
        questions=["Why now?"],
        notes_included=["n1", "n2"],
        sentiment_colors=["#000000", "#111111", "#222222", "#333333"],
        timeframe="week",
    )

    fetched = undercurrents.get("user-1", created.id)

    assert fetched == created
    assert fetched.notes_included == ["n1", "n2"]
    assert fetched.to_dict()["questions"] == ["Why now?"]
    assert undercurrents.get("user-2", created.id) is None


def test_undercurrent_list_and_delete(undercurrents):
    older = undercurrents.create("user-1", "a", [], [], [])
    newer = undercurrents.create("user-1", "b", [], [], [])

    assert [u.id for u in undercurrents.list_for_user("user-1")] == [newer.id, older.id]
    assert undercurrents.delete("user-1", older.id) is True
    assert [u.id for u in undercurrents.list_for_user("user-1")] == [newer.id]


def test_normalize_note_content():
    assert normalize_note_content("  hello \n") == "hello"
    assert normalize_note_content("x" * 280) == "x" * 280
    with pytest.raises(NoteValidationError):
        normalize_note_content(" \t ")
    with pytest.raises(ValueError):
        normalize_note_content("x" * 281)
