"""Persistent note memory.

Notes live in process memory for the lifetime of the service and are written
through to a single JSON file on every change. The file is the durable copy;
the in-memory list is authoritative while the process runs.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


logger = logging.getLogger(__name__)

MAX_NOTES = 200
TOPIC_LENGTH = 50
TRUNCATION_MARKER = "..."


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Note(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    topic: str
    summary: str
    created_at: str = Field(default_factory=_utc_now_iso, alias="createdAt")

    @classmethod
    def from_text(cls, text: str) -> "Note":
        summary = text.strip()
        topic = summary[:TOPIC_LENGTH]
        if len(summary) > TOPIC_LENGTH:
            topic += TRUNCATION_MARKER
        return cls(topic=topic, summary=summary)


class NoteStore:
    """Bounded, insertion-ordered note collection backed by a JSON file."""

    def __init__(self, path: Union[str, Path], capacity: int = MAX_NOTES) -> None:
        self.path = Path(path)
        self.capacity = capacity
        self._notes: List[Note] = []

    def load(self) -> None:
        """Replace the in-memory notes with whatever is on disk.

        A missing file means an empty store. An unreadable or malformed file
        is logged and also treated as empty.
        """
        if not self.path.exists():
            logger.info("No note file at %s, starting empty", self.path)
            self._notes = []
            return

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            notes = [Note.model_validate(item) for item in raw]
        except (OSError, ValueError, ValidationError) as exc:
            logger.error("Failed to load notes from %s: %s", self.path, exc)
            self._notes = []
            return

        self._notes = notes[-self.capacity:]
        logger.info("Loaded %s notes from %s", len(self._notes), self.path)

    def save(self) -> None:
        """Rewrite the note file via a temp file so a failed write leaves the old copy intact."""
        payload = [note.model_dump(by_alias=True) for note in self._notes]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(suffix=".json", prefix=".tmp_", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, ensure_ascii=False, indent=2)
                shutil.move(tmp_path, self.path)
            except Exception:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            logger.error("Failed to save notes to %s: %s", self.path, exc)

    def append(self, text: str) -> Optional[Note]:
        if not text or not text.strip():
            return None

        note = Note.from_text(text)
        self._notes.append(note)
        if len(self._notes) > self.capacity:
            self._notes = self._notes[-self.capacity:]
        logger.info("Stored note %r (%s total)", note.topic, len(self._notes))
        self.save()
        return note

    def all(self) -> Tuple[Note, ...]:
        return tuple(self._notes)

    def __len__(self) -> int:
        return len(self._notes)
