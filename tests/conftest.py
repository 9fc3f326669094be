import pytest
from fastapi.testclient import TestClient

from maelstrom.server import dependencies
from maelstrom.server.app import create_app


def _clear_singletons():
    dependencies.get_note_repository.cache_clear()
    dependencies.get_undercurrent_repository.cache_clear()
    dependencies.get_ollama_client.cache_clear()
    dependencies.get_insight_generator.cache_clear()


@pytest.fixture
def api_client(tmp_path, monkeypatch):
    """TestClient backed by a throwaway SQLite database"""
    monkeypatch.setenv("MAELSTROM_DB_PATH", str(tmp_path / "api.db"))
    _clear_singletons()
    with TestClient(create_app()) as client:
        yield client
    _clear_singletons()


@pytest.fixture
def auth_headers():
    return {"X-User-Id": "user-1"}
