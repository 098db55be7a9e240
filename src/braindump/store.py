"""Store facade: note files + search index kept in lockstep.

Usage::

    with open_store() as store:
        note = new_note("creds", "Stripe Key", "sk_test_123", ["payment"])
        store.add(note)
        hits = store.search("stripe", tags=["payment"])

Write ordering
--------------
``add`` writes the file before indexing it; ``delete`` and ``update`` drop
the index row before touching the file.  A crash between the two steps
therefore leaves the files authoritative, and :meth:`FileStore.reindex`
rebuilds the index from them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import duckdb
import polars as pl

from braindump import config
from braindump.errors import (
    CorruptRecord,
    DuplicateNote,
    IndexSyncFailed,
    NotFound,
)
from braindump.index import SearchIndex
from braindump.note import Note, utcnow
from braindump.parser import slugify
from braindump.ranking import rank_notes
from braindump.repository import NOTE_SUFFIX, NoteRepository

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Store(Protocol):
    """Capability interface consumed by the resolver and actions."""

    def add(self, note: Note) -> None: ...
    def get(self, id: str) -> Note: ...
    def get_by_title(self, category: str, title: str) -> Note: ...
    def list(self, category: str = "") -> list[Note]: ...
    def update(self, note: Note) -> None: ...
    def delete(self, id: str) -> None: ...
    def search(
        self, term: str, category: str = "", tags: list[str] | None = None
    ) -> list[Note]: ...
    def get_categories(self) -> list[str]: ...
    def get_tags(self) -> list[str]: ...
    def close(self) -> None: ...


# ---------------------------------------------------------------------------
# File-backed implementation
# ---------------------------------------------------------------------------


def _validate(note: Note) -> None:
    category = note.category
    if not category or not category.strip():
        raise ValueError("category is required")
    if "/" in category or "\\" in category or category.startswith("."):
        raise ValueError(f"invalid category name: {category!r}")
    if not note.title or not note.title.strip():
        raise ValueError("title is required")


def _has_any_tag(note_tags: list[str], wanted: list[str]) -> bool:
    have = {t.lower() for t in note_tags}
    return any(t.lower() in have for t in wanted)


class FileStore:
    """Markdown files under *base_dir* plus a DuckDB index in ``.index/``."""

    def __init__(self, base_dir: Path | str, *, search_limit: int | None = None) -> None:
        self.base_dir = Path(base_dir).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        if search_limit is None:
            search_limit = config.search_limit()
        if search_limit < 1:
            raise ValueError(f"search_limit must be positive, got {search_limit}")
        self.search_limit = search_limit
        self.repo = NoteRepository(self.base_dir)
        self.index = SearchIndex.for_base(self.base_dir)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _index_note(self, note: Note, location: str) -> None:
        self.index.upsert(
            note.id, note.title, note.content, note.tags, note.category, location
        )

    def _restore_row(self, id: str, location: str) -> None:
        """Re-index the file at *location* after a failed mutation, if possible."""
        try:
            self._index_note(self.repo.read(location), location)
        except (CorruptRecord, OSError, duckdb.Error) as exc:
            logger.warning("Could not restore index row for %s: %s", id, exc)

    def _indexed_at(self, id: str, location: str) -> bool:
        try:
            return self.index.location_of(id) == location
        except NotFound:
            return False

    def _hydrate(self, locations: list[str]) -> list[Note]:
        notes: list[Note] = []
        for location in locations:
            try:
                notes.append(self.repo.read(location))
            except (CorruptRecord, OSError) as exc:
                logger.warning("Skipping unreadable note %s: %s", location, exc)
        return notes

    # ------------------------------------------------------------------
    # Store API
    # ------------------------------------------------------------------

    def add(self, note: Note) -> None:
        _validate(note)
        try:
            self.index.location_of(note.id)
        except NotFound:
            pass
        else:
            raise DuplicateNote(f"note already exists: {note.id}")
        location = self.repo.write(note)
        try:
            self._index_note(note, location)
        except duckdb.Error as exc:
            try:
                self.repo.delete(location)
            except OSError:
                logger.warning("Could not remove unindexed note file %s", location)
            raise IndexSyncFailed(note.id, str(exc)) from exc
        logger.info("Added note %s at %s", note.id, location)

    def get(self, id: str) -> Note:
        location = self.index.location_of(id)
        try:
            return self.repo.read(location)
        except FileNotFoundError as exc:
            raise NotFound(f"note file missing for {id}: {location}") from exc

    def get_by_title(self, category: str, title: str) -> Note:
        direct = f"{category}/{slugify(title)}{NOTE_SUFFIX}"
        if self.repo.path_for(direct).exists():
            try:
                note = self.repo.read(direct)
            except CorruptRecord as exc:
                logger.warning("Skipping unreadable note %s: %s", direct, exc)
            else:
                if note.title == title and self._indexed_at(note.id, direct):
                    return note

        location = self.index.location_by_title(category, title)
        try:
            return self.repo.read(location)
        except FileNotFoundError as exc:
            raise NotFound(f"note file missing: {location}") from exc

    def list(self, category: str = "") -> list[Note]:
        return self._hydrate(self.index.list_locations(category))

    def update(self, note: Note) -> None:
        _validate(note)
        old_location = self.index.location_of(note.id)
        note.updated = utcnow()

        # The new record goes down before the old one is touched; a failed
        # write leaves the previous file and row as they were.
        location = self.repo.write(note)
        self.index.remove(note.id)

        stale_error: OSError | None = None
        if location != old_location:
            try:
                self.repo.delete(old_location)
            except OSError as exc:
                stale_error = exc
                logger.warning("Could not remove old note file %s: %s", old_location, exc)

        try:
            self._index_note(note, location)
        except duckdb.Error as exc:
            logger.warning("Note %s written to %s but not indexed", note.id, location)
            raise IndexSyncFailed(note.id, str(exc)) from exc
        if stale_error is not None:
            raise IndexSyncFailed(
                note.id, f"old file {old_location} left behind: {stale_error}"
            ) from stale_error
        logger.info("Updated note %s (%s -> %s)", note.id, old_location, location)

    def delete(self, id: str) -> None:
        location = self.index.location_of(id)
        self.index.remove(id)
        if not self.repo.path_for(location).exists():
            logger.warning("Note file already gone for %s: %s", id, location)
        try:
            self.repo.delete(location)
        except OSError as exc:
            self._restore_row(id, location)
            raise IndexSyncFailed(id, f"could not remove {location}: {exc}") from exc
        logger.info("Deleted note %s at %s", id, location)

    def search(
        self, term: str, category: str = "", tags: list[str] | None = None
    ) -> list[Note]:
        hits = self.index.search(term, category, limit=self.search_limit)
        notes = self._hydrate([location for location, _rank in hits])
        if tags:
            notes = [n for n in notes if _has_any_tag(n.tags, tags)]
        return rank_notes(notes, term)

    def get_categories(self) -> list[str]:
        return self.index.distinct_categories()

    def get_tags(self) -> list[str]:
        return self.index.distinct_tags()

    def category_counts(self) -> pl.DataFrame:
        return self.index.category_counts()

    def tag_counts(self) -> pl.DataFrame:
        return self.index.tag_counts()

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def reindex(self) -> int:
        """Rebuild the index from the note files; return the number indexed."""
        latest: dict[str, tuple[Note, str]] = {}
        for location in self.repo.locations():
            try:
                note = self.repo.read(location)
            except (CorruptRecord, OSError) as exc:
                logger.warning("Skipping unreadable note %s: %s", location, exc)
                continue
            seen = latest.get(note.id)
            if seen is not None:
                logger.warning(
                    "Duplicate note id %s in %s and %s", note.id, seen[1], location
                )
                if seen[0].updated >= note.updated:
                    continue
            latest[note.id] = (note, location)

        self.index.clear()
        for note, location in latest.values():
            self._index_note(note, location)
        logger.info("Reindexed %d notes from %s", len(latest), self.base_dir)
        return len(latest)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.index.close()

    def __enter__(self) -> "FileStore":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


def open_store(base_dir: Path | str | None = None) -> FileStore:
    """Open the store at *base_dir*, or the configured default location."""
    return FileStore(base_dir if base_dir is not None else config.default_store_path())
