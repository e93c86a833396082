"""Operations on the ``postings`` table (the inverted index)."""

from __future__ import annotations

import sqlite3
from typing import Iterable, Optional

from backend.db.connection import transaction
from backend.db.models import Posting


def _row_to_posting(row: sqlite3.Row) -> Posting:
    return Posting(
        id=row["id"],
        page_id=row["page_id"],
        lemma_id=row["lemma_id"],
        rank=row["rank"],
    )


def add_postings(
    conn: sqlite3.Connection,
    page_id: int,
    entries: Iterable[tuple[int, float]],
) -> None:
    """Insert one posting per ``(lemma_id, rank)`` pair for *page_id*."""
    with transaction(conn):
        conn.executemany(
            "INSERT INTO postings (page_id, lemma_id, rank) VALUES (?, ?, ?)",
            [(page_id, lemma_id, float(rank)) for lemma_id, rank in entries],
        )


def postings_for_page(conn: sqlite3.Connection, page_id: int) -> list[Posting]:
    rows = conn.execute(
        "SELECT * FROM postings WHERE page_id = ? ORDER BY id", (page_id,)
    ).fetchall()
    return [_row_to_posting(r) for r in rows]


def delete_postings_for_page(conn: sqlite3.Connection, page_id: int) -> None:
    with transaction(conn):
        conn.execute("DELETE FROM postings WHERE page_id = ?", (page_id,))


def rank_for(conn: sqlite3.Connection, page_id: int, lemma: str) -> Optional[float]:
    """Rank of *lemma* (by text) on *page_id*, or ``None`` without a posting."""
    row = conn.execute(
        """
        SELECT i.rank
        FROM   postings i
        JOIN   lemmas l ON l.id = i.lemma_id
        JOIN   pages  p ON p.id = i.page_id
        WHERE  i.page_id = ? AND l.lemma = ? AND l.site_id = p.site_id
        """,
        (page_id, lemma),
    ).fetchone()
    return row[0] if row else None
