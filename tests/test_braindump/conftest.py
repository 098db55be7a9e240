"""Shared fixtures for the braindump unit tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from braindump.note import Note, new_note
from braindump.store import FileStore


@pytest.fixture()
def store(tmp_path: Path):
    """An empty store rooted in a temporary directory."""
    with FileStore(tmp_path / "notes") as s:
        yield s


@pytest.fixture()
def add_note(store: FileStore):
    """Factory that creates a note and adds it to ``store``."""

    def _add(category: str, title: str, content: str, tags: list[str] | None = None) -> Note:
        note = new_note(category, title, content, tags)
        store.add(note)
        return note

    return _add
