"""Operations on the ``pages`` table."""

from __future__ import annotations

import sqlite3
from typing import Optional, Sequence

from backend.db.connection import transaction
from backend.db.models import Page


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_page(row: sqlite3.Row) -> Page:
    return Page(
        id=row["id"],
        site_id=row["site_id"],
        path=row["path"],
        code=row["code"],
        content=row["content"],
    )


def _placeholders(values: Sequence) -> str:
    return ",".join("?" for _ in values)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_page(
    conn: sqlite3.Connection,
    site_id: int,
    path: str,
    code: int,
    content: str,
) -> Page:
    """Insert a page and return it.

    Raises:
        sqlite3.IntegrityError: If the site already has a page at *path*.
    """
    with transaction(conn):
        cursor = conn.execute(
            "INSERT INTO pages (site_id, path, code, content) VALUES (?, ?, ?, ?)",
            (site_id, path, code, content),
        )
    return Page(id=cursor.lastrowid, site_id=site_id, path=path, code=code, content=content)  # type: ignore[arg-type]


def get_page(conn: sqlite3.Connection, page_id: int) -> Optional[Page]:
    row = conn.execute("SELECT * FROM pages WHERE id = ?", (page_id,)).fetchone()
    return _row_to_page(row) if row else None


def find_page(conn: sqlite3.Connection, site_id: int, path: str) -> Optional[Page]:
    """Return the page stored at (*site_id*, *path*), or ``None``."""
    row = conn.execute(
        "SELECT * FROM pages WHERE site_id = ? AND path = ?", (site_id, path)
    ).fetchone()
    return _row_to_page(row) if row else None


def delete_page(conn: sqlite3.Connection, page_id: int) -> None:
    """Delete a page (its postings cascade).  No-op if it does not exist."""
    with transaction(conn):
        conn.execute("DELETE FROM pages WHERE id = ?", (page_id,))


def count_pages(conn: sqlite3.Connection, site_id: int) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM pages WHERE site_id = ?", (site_id,)
    ).fetchone()
    return row[0]


def pages_for_lemma(
    conn: sqlite3.Connection,
    lemma: str,
    site_ids: Sequence[int],
) -> list[Page]:
    """Posting-list lookup: pages of *site_ids* that contain *lemma*."""
    if not site_ids:
        return []
    rows = conn.execute(
        f"""
        SELECT p.*
        FROM   postings i
        JOIN   lemmas l ON l.id = i.lemma_id
        JOIN   pages  p ON p.id = i.page_id
        WHERE  l.lemma = ?
          AND  l.site_id IN ({_placeholders(site_ids)})
        ORDER  BY p.id
        """,  # noqa: S608
        [lemma, *site_ids],
    ).fetchall()
    return [_row_to_page(r) for r in rows]
