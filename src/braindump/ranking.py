"""Relevance ranking for search results.

Scores are independent of the index's own ordering:

- title equals the query (case-insensitive): +100, else title contains it: +50
- content starts with the query: +30, else content contains it: +10
"""

from __future__ import annotations

from dataclasses import dataclass

from braindump.note import Note

PREVIEW_BEFORE = 20
PREVIEW_AFTER = 40
PREVIEW_FALLBACK = 80


@dataclass
class ScoredNote:
    note: Note
    score: int


def score(note: Note, query: str) -> int:
    q = query.lower()
    title = note.title.lower()
    content = note.content.lower()

    result = 0
    if title == q:
        result += 100
    elif q in title:
        result += 50

    if content.startswith(q):
        result += 30
    elif q in content:
        result += 10
    return result


def rank_results(notes: list[Note], query: str) -> list[ScoredNote]:
    """Score *notes* against *query*, best first; ties keep input order."""
    scored = [ScoredNote(note, score(note, query)) for note in notes]
    # sorted() is stable
    return sorted(scored, key=lambda s: s.score, reverse=True)


def rank_notes(notes: list[Note], query: str) -> list[Note]:
    return [s.note for s in rank_results(notes, query)]


def match_preview(content: str, query: str) -> str:
    """Return a one-line excerpt of *content* around the first *query* hit."""
    idx = content.lower().find(query.lower()) if query else -1
    if idx == -1:
        if len(content) > PREVIEW_FALLBACK:
            return content[:PREVIEW_FALLBACK] + "..."
        return content

    start = max(idx - PREVIEW_BEFORE, 0)
    end = min(idx + len(query) + PREVIEW_AFTER, len(content))
    preview = content[start:end].replace("\n", " ")
    if start > 0:
        preview = "..." + preview
    if end < len(content):
        preview += "..."
    return preview
