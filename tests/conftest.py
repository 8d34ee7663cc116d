from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from agent.agent import ReplyGenerator
from agent.core.memory import NoteStore
from app.main import create_app
from config.settings import Settings


@pytest.fixture
def notes_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "notes.json"


@pytest.fixture
def store(notes_path: Path) -> NoteStore:
    store = NoteStore(notes_path)
    store.load()
    return store


@pytest.fixture
def settings(tmp_path: Path, notes_path: Path, monkeypatch) -> Settings:
    monkeypatch.setenv("NOTES_PATH", str(notes_path))
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "public"))
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    return Settings()


@pytest.fixture
def generator() -> MagicMock:
    fake = MagicMock(spec=ReplyGenerator)
    fake.generate.return_value = "model reply"
    return fake


@pytest.fixture
def client(settings: Settings, store: NoteStore, generator: MagicMock) -> TestClient:
    app = create_app(settings=settings, store=store, generator=generator)
    return TestClient(app)
