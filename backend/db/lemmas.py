"""Operations on the ``lemmas`` table."""

from __future__ import annotations

import sqlite3
from typing import Iterable, Optional, Sequence

from backend.db.connection import transaction
from backend.db.models import Lemma


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_lemma(row: sqlite3.Row) -> Lemma:
    return Lemma(
        id=row["id"],
        site_id=row["site_id"],
        lemma=row["lemma"],
        frequency=row["frequency"],
    )


def _placeholders(values: Sequence) -> str:
    return ",".join("?" for _ in values)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def find_lemmas(
    conn: sqlite3.Connection,
    site_id: int,
    names: Iterable[str],
) -> dict[str, Lemma]:
    """Return the existing lemma rows of *site_id* among *names*, keyed by text."""
    wanted = list(names)
    if not wanted:
        return {}
    rows = conn.execute(
        f"SELECT * FROM lemmas WHERE site_id = ? AND lemma IN ({_placeholders(wanted)})",  # noqa: S608
        [site_id, *wanted],
    ).fetchall()
    return {r["lemma"]: _row_to_lemma(r) for r in rows}


def get_lemmas(conn: sqlite3.Connection, lemma_ids: Iterable[int]) -> list[Lemma]:
    """Fetch lemma rows by id."""
    ids = list(lemma_ids)
    if not ids:
        return []
    rows = conn.execute(
        f"SELECT * FROM lemmas WHERE id IN ({_placeholders(ids)}) ORDER BY id",  # noqa: S608
        ids,
    ).fetchall()
    return [_row_to_lemma(r) for r in rows]


def find_lemma(conn: sqlite3.Connection, site_id: int, name: str) -> Optional[Lemma]:
    row = conn.execute(
        "SELECT * FROM lemmas WHERE site_id = ? AND lemma = ?", (site_id, name)
    ).fetchone()
    return _row_to_lemma(row) if row else None


def create_lemma(
    conn: sqlite3.Connection,
    site_id: int,
    name: str,
    frequency: int = 0,
) -> Lemma:
    """Insert a lemma row for *site_id* and return it."""
    with transaction(conn):
        cursor = conn.execute(
            "INSERT INTO lemmas (site_id, lemma, frequency) VALUES (?, ?, ?)",
            (site_id, name, frequency),
        )
    return Lemma(id=cursor.lastrowid, site_id=site_id, lemma=name, frequency=frequency)  # type: ignore[arg-type]


def set_frequency(conn: sqlite3.Connection, lemmas: Iterable[Lemma]) -> None:
    """Persist the ``frequency`` field of every lemma in *lemmas*."""
    with transaction(conn):
        conn.executemany(
            "UPDATE lemmas SET frequency = ? WHERE id = ?",
            [(lemma.frequency, lemma.id) for lemma in lemmas],
        )


def delete_lemmas(conn: sqlite3.Connection, lemma_ids: Iterable[int]) -> None:
    """Bulk-delete lemma rows (their postings cascade)."""
    with transaction(conn):
        conn.executemany(
            "DELETE FROM lemmas WHERE id = ?", [(lemma_id,) for lemma_id in lemma_ids]
        )


def total_frequency(
    conn: sqlite3.Connection,
    name: str,
    site_ids: Sequence[int],
) -> int:
    """Sum of ``frequency`` for *name* over *site_ids* (0 when absent)."""
    if not site_ids:
        return 0
    row = conn.execute(
        f"""
        SELECT COALESCE(SUM(frequency), 0)
        FROM   lemmas
        WHERE  lemma = ? AND site_id IN ({_placeholders(site_ids)})
        """,  # noqa: S608
        [name, *site_ids],
    ).fetchone()
    return row[0]


def count_lemma_rows(
    conn: sqlite3.Connection,
    name: str,
    site_ids: Sequence[int],
) -> int:
    """Number of sites among *site_ids* that have a row for *name*."""
    if not site_ids:
        return 0
    row = conn.execute(
        f"SELECT COUNT(*) FROM lemmas WHERE lemma = ? AND site_id IN ({_placeholders(site_ids)})",  # noqa: S608
        [name, *site_ids],
    ).fetchone()
    return row[0]


def count_lemmas(conn: sqlite3.Connection, site_id: int) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM lemmas WHERE site_id = ?", (site_id,)
    ).fetchone()
    return row[0]
