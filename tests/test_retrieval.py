from __future__ import annotations

from agent.core.memory import Note
from agent.core.retrieval import CONTEXT_INTRO, build_context_block, select_notes


def _notes(*texts: str):
    return [Note.from_text(t) for t in texts]


class TestSelectNotes:
    def test_empty_notes(self):
        assert select_notes([], "anything") == []

    def test_empty_query(self):
        assert select_notes(_notes("a"), "") == []

    def test_whitespace_only_query_selects_nothing(self):
        assert select_notes(_notes("a", "b", "c"), "   \n\t") == []

    def test_token_substring_match(self):
        notes = _notes("pizza night plans with friends", "dentist on friday")
        selected = select_notes(notes, "tell me about pizza")
        assert selected == [notes[0]]

    def test_case_insensitive(self):
        notes = _notes("Kubernetes cluster upgrade", "lunch")
        assert select_notes(notes, "CLUSTER status") == [notes[0]]

    def test_matches_keep_insertion_order(self):
        notes = _notes("tea time", "coffee beans", "green tea brand")
        assert select_notes(notes, "tea") == [notes[0], notes[2]]

    def test_summary_tail_does_not_match(self):
        text = "a" * 60 + " zebra"
        notes = _notes(text, "other")
        selected = select_notes(notes, "zebra")
        # Falls back to recent notes rather than matching the summary tail
        assert selected == notes

    def test_fallback_to_last_five(self):
        notes = _notes(*[f"note {c}" for c in "abcdefg"])
        selected = select_notes(notes, "unrelated")
        assert selected == notes[-5:]

    def test_fallback_with_fewer_than_five(self):
        notes = _notes("one", "two")
        assert select_notes(notes, "zzz") == notes


class TestBuildContextBlock:
    def test_empty(self):
        assert build_context_block([]) == ""

    def test_format(self):
        notes = _notes("first", "second")
        block = build_context_block(notes)
        assert block == f"{CONTEXT_INTRO}\n\n1. first\nfirst\n\n2. second\nsecond"
