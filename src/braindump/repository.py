"""NoteRepository: one markdown file per note, grouped by category directory.

Layout::

    <base>/
        <category>/
            <slug(title)>.md      # ---\\n<yaml>---\\n\\n<content>\\n
        .index/                   # owned by SearchIndex, skipped here

Locations are POSIX-style paths relative to ``<base>`` (``creds/stripe-key.md``).
The repository knows nothing about the search index.
"""

from __future__ import annotations

import logging
from pathlib import Path

from braindump.errors import CorruptRecord
from braindump.note import Note
from braindump.parser import decode_note, encode_note, slugify

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"


class NoteRepository:
    """Reads and writes durable note records under *base_dir*."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def path_for(self, location: str) -> Path:
        return self.base_dir / location

    def location_for(self, note: Note) -> str:
        """Return the location *note* would be written to.

        The slug of the title is used unless a different note already owns
        that file, in which case the short ID (then the full ID) is appended.
        """
        slug = slugify(note.title)
        for stem in (slug, f"{slug}-{note.short_id}", f"{slug}-{note.id}"):
            location = f"{note.category}/{stem}{NOTE_SUFFIX}"
            if self._is_free_for(location, note.id):
                return location
        raise FileExistsError(f"no free location for note {note.id} in {note.category}")

    def _is_free_for(self, location: str, note_id: str) -> bool:
        path = self.path_for(location)
        if not path.exists():
            return True
        try:
            owner = self.read(location)
        except (CorruptRecord, OSError):
            # Never overwrite a file we cannot identify
            return False
        return owner.id == note_id

    def locations(self) -> list[str]:
        """Every note location on disk, hidden directories excluded."""
        result: list[str] = []
        for path in sorted(self.base_dir.glob(f"*/*{NOTE_SUFFIX}")):
            if path.parent.name.startswith("."):
                continue
            result.append(path.relative_to(self.base_dir).as_posix())
        return result

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def write(self, note: Note) -> str:
        """Persist *note* and return the location it was written to."""
        location = self.location_for(note)
        path = self.path_for(location)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(encode_note(note), encoding="utf-8")
        logger.debug("Wrote note %s to %s", note.id, location)
        return location

    def read(self, location: str) -> Note:
        """Load the note stored at *location*.

        Raises :class:`CorruptRecord` when the file is not UTF-8 text or
        cannot be decoded; a missing file raises :class:`FileNotFoundError`.
        """
        try:
            content = self.path_for(location).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptRecord(location, f"not valid UTF-8: {exc}") from exc
        try:
            return decode_note(content)
        except ValueError as exc:
            raise CorruptRecord(location, str(exc)) from exc

    def delete(self, location: str, *, missing_ok: bool = True) -> None:
        self.path_for(location).unlink(missing_ok=missing_ok)
        logger.debug("Deleted note file %s", location)
