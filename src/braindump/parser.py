"""YAML-frontmatter encoding, decoding and title slugs."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

import yaml

from braindump.note import Note

# YAML front-matter block; the closing fence may end the file
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)
_SLUG_DROP_RE = re.compile(r"[^a-z0-9 _]")
_SLUG_SEPARATOR_RE = re.compile(r"[ _]+")

MAX_SLUG_LENGTH = 100
EMPTY_SLUG = "untitled"


def slugify(title: str) -> str:
    """Derive a filesystem-safe file stem from *title*.

    Spaces and underscores become hyphens; any other character outside
    ``[a-z0-9]`` (after lower-casing) is dropped, hyphens included.
    """
    slug = _SLUG_DROP_RE.sub("", title.lower())
    slug = _SLUG_SEPARATOR_RE.sub("-", slug).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or EMPTY_SLUG


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``.  Raises :class:`ValueError` when the
    block is missing, is not valid YAML, or is not a mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        raise ValueError("missing frontmatter")
    try:
        meta = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as exc:
        raise ValueError(f"malformed frontmatter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ValueError("frontmatter is not a mapping")
    return meta, content[match.end() :]


def _parse_timestamp(value: Any, key: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValueError(f"invalid {key} timestamp {value!r}") from exc
    else:
        raise ValueError(f"invalid {key} timestamp {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_tag_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, list):
        return [str(t) for t in value]
    raise ValueError(f"invalid tags {value!r}")


def decode_note(content: str) -> Note:
    """Parse a full note file (frontmatter + body) into a :class:`Note`."""
    meta, body = parse_frontmatter(content)

    for key in ("id", "title", "category"):
        if meta.get(key) in (None, ""):
            raise ValueError(f"frontmatter is missing {key!r}")

    extra = meta.get("metadata") or {}
    if not isinstance(extra, dict):
        raise ValueError("metadata is not a mapping")

    return Note(
        id=str(meta["id"]),
        category=str(meta["category"]),
        title=str(meta["title"]),
        content=body.strip(),
        tags=_parse_tag_list(meta.get("tags")),
        created=_parse_timestamp(meta.get("created"), "created"),
        updated=_parse_timestamp(meta.get("updated"), "updated"),
        metadata={str(k): str(v) for k, v in extra.items()},
    )


def encode_note(note: Note) -> str:
    """Render *note* as ``---`` fenced YAML followed by a blank line and the body."""
    header: dict[str, Any] = {
        "id": note.id,
        "title": note.title,
        "created": note.created.isoformat(),
        "updated": note.updated.isoformat(),
    }
    if note.tags:
        header["tags"] = list(note.tags)
    header["category"] = note.category
    if note.metadata:
        header["metadata"] = dict(note.metadata)

    frontmatter = yaml.safe_dump(
        header, sort_keys=False, allow_unicode=True, default_flow_style=False
    )
    return f"---\n{frontmatter}---\n\n{note.content}\n"
