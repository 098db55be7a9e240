"""Mutations addressed by a loose identifier (see :mod:`braindump.resolver`)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from braindump.resolver import resolve

if TYPE_CHECKING:
    from braindump.note import Note
    from braindump.store import Store

logger = logging.getLogger(__name__)


def parse_tags(raw: str) -> list[str]:
    """Split a comma-separated tag string, dropping blanks."""
    return [t.strip() for t in raw.split(",") if t.strip()]


def delete_note(store: "Store", identifier: str) -> "Note":
    note = resolve(store, identifier)
    store.delete(note.id)
    return note


def update_note(
    store: "Store",
    identifier: str,
    *,
    title: str | None = None,
    content: str | None = None,
    tags: list[str] | None = None,
    category: str | None = None,
) -> "Note":
    """Replace the given fields of the resolved note and persist it.

    Fields left as ``None`` are unchanged; at least one must be supplied.
    """
    if title is None and content is None and tags is None and category is None:
        raise ValueError("at least one of title, content, tags or category is required")

    note = resolve(store, identifier)
    if title is not None:
        note.title = title
    if content is not None:
        note.content = content
    if tags is not None:
        note.tags = list(tags)
    if category is not None:
        note.category = category
    store.update(note)
    return note


def append_note(store: "Store", identifier: str, text: str) -> "Note":
    """Append *text* as a new line at the end of the resolved note."""
    note = resolve(store, identifier)
    note.content = f"{note.content}\n{text}"
    store.update(note)
    logger.debug("Appended %d chars to note %s", len(text), note.id)
    return note
