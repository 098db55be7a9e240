"""Exception taxonomy shared by the repository, index, store and resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from braindump.note import Note


class BraindumpError(Exception):
    """Base class for every error raised by the note store."""


class NotFound(BraindumpError):
    """No note exists for the given ID, title or location."""


class DuplicateNote(BraindumpError):
    """A note with the same ID is already indexed."""


class CorruptRecord(BraindumpError):
    """A durable note file could not be parsed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"corrupt note record {location}: {reason}")
        self.location = location
        self.reason = reason


class IndexSyncFailed(BraindumpError):
    """The search index could not be kept in step with the note files.

    Retrying the operation, or running :meth:`FileStore.reindex`, restores
    consistency.
    """

    def __init__(self, note_id: str, reason: str) -> None:
        super().__init__(f"index out of sync for note {note_id}: {reason}")
        self.note_id = note_id
        self.reason = reason


class AmbiguousMatch(BraindumpError):
    """More than one note matches a loose identifier."""

    kind = "identifier"

    def __init__(self, identifier: str, candidates: list["Note"]) -> None:
        super().__init__(
            f"{len(candidates)} notes match {self.kind} {identifier!r}"
        )
        self.identifier = identifier
        self.candidates = candidates


class AmbiguousID(AmbiguousMatch):
    kind = "ID prefix"


class AmbiguousTitle(AmbiguousMatch):
    kind = "title"
