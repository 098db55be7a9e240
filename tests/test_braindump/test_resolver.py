"""Unit tests for braindump.resolver.resolve."""

import pytest

from braindump.errors import AmbiguousID, AmbiguousTitle, NotFound
from braindump.note import Note
from braindump.resolver import resolve
from braindump.store import FileStore


def _with_id(store: FileStore, note_id: str, title: str, category: str = "misc") -> Note:
    note = Note(id=note_id, category=category, title=title, content="x")
    store.add(note)
    return note


class TestResolve:
    def test_exact_id(self, store: FileStore, add_note):
        note = add_note("misc", "Alpha", "x")
        assert resolve(store, note.id).id == note.id

    def test_unique_prefix(self, store: FileStore):
        _with_id(store, "abc123", "Alpha")
        _with_id(store, "def456", "Beta")
        assert resolve(store, "abc").id == "abc123"

    def test_ambiguous_prefix(self, store: FileStore):
        _with_id(store, "abc123", "Alpha")
        _with_id(store, "abc456", "Beta")
        with pytest.raises(AmbiguousID) as info:
            resolve(store, "abc")
        assert {n.id for n in info.value.candidates} == {"abc123", "abc456"}

    def test_prefix_beats_title(self, store: FileStore):
        _with_id(store, "abc123", "Alpha")
        _with_id(store, "zzz999", "abc")
        assert resolve(store, "abc").id == "abc123"

    def test_unique_title(self, store: FileStore):
        _with_id(store, "abc123", "Stripe Key")
        assert resolve(store, "Stripe Key").id == "abc123"

    def test_title_match_is_exact(self, store: FileStore):
        _with_id(store, "abc123", "Stripe Key")
        with pytest.raises(NotFound):
            resolve(store, "stripe key")

    def test_ambiguous_title(self, store: FileStore):
        _with_id(store, "abc123", "Stripe Key", category="creds")
        _with_id(store, "def456", "Stripe Key", category="vault")
        with pytest.raises(AmbiguousTitle) as info:
            resolve(store, "Stripe Key")
        assert {n.id for n in info.value.candidates} == {"abc123", "def456"}
        assert info.value.identifier == "Stripe Key"

    def test_not_found(self, store: FileStore):
        _with_id(store, "abc123", "Alpha")
        with pytest.raises(NotFound):
            resolve(store, "nothing")

    @pytest.mark.parametrize("identifier", ["", "   "])
    def test_blank_identifier(self, store: FileStore, identifier):
        _with_id(store, "abc123", "Alpha")
        with pytest.raises(NotFound):
            resolve(store, identifier)

    def test_deterministic(self, store: FileStore):
        _with_id(store, "abc123", "Alpha")
        _with_id(store, "abc456", "Beta")
        outcomes = []
        for _ in range(3):
            with pytest.raises(AmbiguousID) as info:
                resolve(store, "ab")
            outcomes.append(sorted(n.id for n in info.value.candidates))
        assert outcomes[0] == outcomes[1] == outcomes[2]

    def test_does_not_mutate(self, store: FileStore):
        _with_id(store, "abc123", "Alpha")
        resolve(store, "abc")
        assert store.index.count() == 1
        assert len(store.repo.locations()) == 1
