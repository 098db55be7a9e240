"""braindump: local note store with a synchronized search index."""

from braindump.actions import append_note, delete_note, update_note
from braindump.errors import (
    AmbiguousID,
    AmbiguousMatch,
    AmbiguousTitle,
    BraindumpError,
    CorruptRecord,
    DuplicateNote,
    IndexSyncFailed,
    NotFound,
)
from braindump.index import SearchIndex
from braindump.note import Note, new_note
from braindump.ranking import rank_results
from braindump.repository import NoteRepository
from braindump.resolver import resolve
from braindump.store import FileStore, Store, open_store

__all__ = [
    "Note",
    "new_note",
    "NoteRepository",
    "SearchIndex",
    "Store",
    "FileStore",
    "open_store",
    "resolve",
    "rank_results",
    "delete_note",
    "update_note",
    "append_note",
    "BraindumpError",
    "NotFound",
    "DuplicateNote",
    "CorruptRecord",
    "IndexSyncFailed",
    "AmbiguousMatch",
    "AmbiguousID",
    "AmbiguousTitle",
]
