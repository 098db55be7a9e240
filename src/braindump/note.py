"""Core Note dataclass."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Note:
    """A single note stored under a category."""

    id: str
    category: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    created: datetime = field(default_factory=utcnow)
    updated: datetime = field(default_factory=utcnow)
    #: Provenance annotations; never interpreted by the store
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def short_id(self) -> str:
        return self.id[:8]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "title": self.title,
            "content": self.content,
            "tags": self.tags,
            "created": self.created.isoformat(),
            "updated": self.updated.isoformat(),
            "metadata": self.metadata,
        }


def new_note(
    category: str,
    title: str,
    content: str,
    tags: list[str] | None = None,
) -> Note:
    """Build a fresh :class:`Note` with a new ID and ``created == updated``."""
    now = utcnow()
    return Note(
        id=str(uuid.uuid4()),
        category=category,
        title=title,
        content=content,
        tags=list(tags or []),
        created=now,
        updated=now,
        metadata={"created_by": "agent", "source": "braindump"},
    )
