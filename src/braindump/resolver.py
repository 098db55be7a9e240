"""Resolve a loose user identifier (ID, ID prefix or title) to one note.

Policy, in order:

1. an exact ID wins;
2. a single ID-prefix match wins, several raise :class:`AmbiguousID`;
3. with no prefix match, a single exact-title match wins, several raise
   :class:`AmbiguousTitle`, none raises :class:`NotFound`.

Every command that accepts a loose identifier goes through :func:`resolve`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from braindump.errors import AmbiguousID, AmbiguousTitle, NotFound

if TYPE_CHECKING:
    from braindump.note import Note
    from braindump.store import Store


def resolve(store: "Store", identifier: str) -> "Note":
    if not identifier or not identifier.strip():
        raise NotFound("empty note identifier")

    try:
        return store.get(identifier)
    except NotFound:
        pass

    prefix_matches: list["Note"] = []
    title_matches: list["Note"] = []
    for note in store.list(""):
        if note.id.startswith(identifier):
            prefix_matches.append(note)
        if note.title == identifier:
            title_matches.append(note)

    if len(prefix_matches) == 1:
        return prefix_matches[0]
    if prefix_matches:
        raise AmbiguousID(identifier, prefix_matches)
    if not title_matches:
        raise NotFound(f"note not found: {identifier}")
    if len(title_matches) == 1:
        return title_matches[0]
    raise AmbiguousTitle(identifier, title_matches)
