from __future__ import annotations

from typing import Optional

from agent.core.memory import NoteStore


MEMORY_PREFIXES = ("remember:", "teach:")

ACKNOWLEDGEMENT = "Got it! I'll remember that."


def parse_memory_command(text: str) -> Optional[str]:
    """Return the note text if ``text`` is a memory command, else None."""
    stripped = (text or "").strip()
    lowered = stripped.lower()
    for prefix in MEMORY_PREFIXES:
        if lowered.startswith(prefix):
            return stripped[len(prefix):].strip()
    return None


def handle_memory_command(text: str, store: NoteStore) -> Optional[str]:
    note_text = parse_memory_command(text)
    if note_text is None:
        return None
    store.append(note_text)
    return ACKNOWLEDGEMENT
