from __future__ import annotations

import pytest

from agent.core.commands import ACKNOWLEDGEMENT, handle_memory_command, parse_memory_command
from agent.core.memory import NoteStore


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Remember: the sky is blue", "the sky is blue"),
        ("remember:x", "x"),
        ("TEACH:   docker volumes persist data  ", "docker volumes persist data"),
        ("  teach: padded", "padded"),
        ("remember: remember: twice", "remember: twice"),
        ("remember:", ""),
    ],
)
def test_parse_memory_command(text, expected):
    assert parse_memory_command(text) == expected


@pytest.mark.parametrize(
    "text", ["what should I remember: nothing", "remember the sky", "hello", ""]
)
def test_non_commands(text):
    assert parse_memory_command(text) is None


def test_handle_appends_and_acknowledges(store: NoteStore):
    reply = handle_memory_command("Remember: the sky is blue", store)
    assert reply == ACKNOWLEDGEMENT
    assert store.all()[-1].summary == "the sky is blue"


def test_handle_empty_command_acknowledges_without_note(store: NoteStore):
    assert handle_memory_command("teach:   ", store) == ACKNOWLEDGEMENT
    assert store.all() == ()


def test_handle_ignores_normal_message(store: NoteStore):
    assert handle_memory_command("how are you?", store) is None
    assert store.all() == ()
