"""SearchIndex: derived, rebuildable DuckDB index over the note files.

One row per live note::

    notes(id PK, title, content, tags, category, location)

``tags`` holds the note's tags joined with single spaces; ``location`` is the
repository-relative path of the authoritative file.  The database lives at
``<base>/.index/search.duckdb`` and can always be rebuilt from the files
(see :meth:`braindump.store.FileStore.reindex`).

Matching engine
---------------
The search term is split on whitespace.  A row matches when *every* token
occurs, case-insensitively, as a substring of its title, content or tags.
The engine rank adds 3 per token found in the title, 2 in the tags and 1 in
the content.  An empty term matches every row.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import duckdb
import polars as pl

from braindump.errors import NotFound

INDEX_DIRNAME = ".index"
INDEX_FILENAME = "search.duckdb"
DEFAULT_SEARCH_LIMIT = 100


class SearchIndex:
    """Persistent DuckDB table mapping note fields to note locations."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(self.db_path)
        self._create_schema()

    @classmethod
    def for_base(cls, base_dir: Path) -> "SearchIndex":
        """Open the index stored in the hidden directory under *base_dir*."""
        return cls(Path(base_dir) / INDEX_DIRNAME / INDEX_FILENAME)

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS notes (
                id        VARCHAR PRIMARY KEY,
                title     VARCHAR NOT NULL,
                content   TEXT    NOT NULL,
                tags      VARCHAR NOT NULL,
                category  VARCHAR NOT NULL,
                location  VARCHAR NOT NULL
            )
        """)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def upsert(
        self,
        id: str,
        title: str,
        content: str,
        tags: list[str],
        category: str,
        location: str,
    ) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO notes VALUES (?, ?, ?, ?, ?, ?)",
            [id, title, content, " ".join(tags), category, location],
        )

    def remove(self, id: str) -> None:
        self.conn.execute("DELETE FROM notes WHERE id = ?", [id])

    def clear(self) -> None:
        self.conn.execute("DELETE FROM notes")

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]

    def ids(self) -> list[str]:
        rows = self.conn.execute("SELECT id FROM notes ORDER BY id").fetchall()
        return [r[0] for r in rows]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def location_of(self, id: str) -> str:
        row = self.conn.execute(
            "SELECT location FROM notes WHERE id = ?", [id]
        ).fetchone()
        if row is None:
            raise NotFound(f"note not found: {id}")
        return row[0]

    def location_by_title(self, category: str, title: str) -> str:
        row = self.conn.execute(
            """
            SELECT location FROM notes
            WHERE category = ? AND title = ?
            ORDER BY location
            LIMIT 1
            """,
            [category, title],
        ).fetchone()
        if row is None:
            raise NotFound(f"note not found: {category}/{title}")
        return row[0]

    def list_locations(self, category: str = "") -> list[str]:
        if category:
            rows = self.conn.execute(
                "SELECT location FROM notes WHERE category = ? ORDER BY location",
                [category],
            ).fetchall()
        else:
            rows = self.conn.execute(
                "SELECT location FROM notes ORDER BY location"
            ).fetchall()
        return [r[0] for r in rows]

    def search(
        self,
        term: str,
        category: str = "",
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[tuple[str, int]]:
        """Return ``(location, engine_rank)`` pairs, best first."""
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        params: dict[str, Any] = {}
        rank_parts: list[str] = []
        where_clauses: list[str] = []

        for i, token in enumerate(term.lower().split()):
            key = f"t{i}"
            params[key] = token
            rank_parts.append(
                f"(CASE WHEN contains(lower(title), ${key}) THEN 3 ELSE 0 END"
                f" + CASE WHEN contains(lower(tags), ${key}) THEN 2 ELSE 0 END"
                f" + CASE WHEN contains(lower(content), ${key}) THEN 1 ELSE 0 END)"
            )
            where_clauses.append(
                f"(contains(lower(title), ${key})"
                f" OR contains(lower(content), ${key})"
                f" OR contains(lower(tags), ${key}))"
            )
        if category:
            params["category"] = category
            where_clauses.append("category = $category")

        rank = " + ".join(rank_parts) if rank_parts else "0"
        where = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""
        sql = (
            f"SELECT location, {rank} AS engine_rank FROM notes {where} "
            f"ORDER BY engine_rank DESC, location LIMIT {int(limit)}"
        )
        rows = self.conn.execute(sql, params or None).fetchall()
        return [(r[0], int(r[1])) for r in rows]

    # ------------------------------------------------------------------
    # Facets
    # ------------------------------------------------------------------

    def distinct_categories(self) -> list[str]:
        rows = self.conn.execute(
            "SELECT DISTINCT category FROM notes ORDER BY category"
        ).fetchall()
        return [r[0] for r in rows]

    def distinct_tags(self) -> list[str]:
        rows = self.conn.execute(
            "SELECT DISTINCT tags FROM notes WHERE tags <> ''"
        ).fetchall()
        tags: set[str] = set()
        for (joined,) in rows:
            tags.update(joined.split())
        return sorted(tags)

    def category_counts(self) -> pl.DataFrame:
        """Return a category → note count table sorted by category."""
        return self.conn.execute(
            """
            SELECT category, COUNT(*) AS note_count
            FROM notes
            GROUP BY category
            ORDER BY category
            """
        ).pl()

    def tag_counts(self) -> pl.DataFrame:
        """Return a tag → note count table sorted by frequency."""
        return self.conn.execute(
            """
            SELECT tag, COUNT(DISTINCT id) AS note_count
            FROM (
                SELECT id, unnest(string_split(tags, ' ')) AS tag
                FROM notes
                WHERE tags <> ''
            )
            WHERE tag <> ''
            GROUP BY tag
            ORDER BY note_count DESC, tag
            """
        ).pl()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "SearchIndex":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
