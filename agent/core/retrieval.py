from __future__ import annotations

from typing import List, Sequence

from agent.core.memory import Note


RECENT_FALLBACK = 5

CONTEXT_INTRO = (
    "Here are some notes you have been taught. "
    "Use them if they help answer the user's message."
)


def select_notes(notes: Sequence[Note], query: str) -> List[Note]:
    """Pick the notes to show the model for ``query``.

    Any query token found inside a note's topic selects that note. Only the
    topic is searched, so words that appear past the truncated prefix of a
    long note never match. With no match at all the most recent notes are
    returned instead. A query with no tokens selects nothing.
    """
    tokens = [token for token in (query or "").lower().split() if token]
    if not notes or not tokens:
        return []

    matches = [
        note for note in notes if any(token in note.topic.lower() for token in tokens)
    ]
    if matches:
        return matches
    return list(notes[-RECENT_FALLBACK:])


def build_context_block(notes: Sequence[Note]) -> str:
    if not notes:
        return ""
    entries = [
        f"{idx}. {note.topic}\n{note.summary}" for idx, note in enumerate(notes, start=1)
    ]
    return "\n\n".join([CONTEXT_INTRO, *entries])
