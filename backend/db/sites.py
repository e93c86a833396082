"""Operations on the ``sites`` table."""

from __future__ import annotations

import sqlite3
from time import time
from typing import Optional

from backend.db.connection import transaction
from backend.db.models import Site, SiteStatus


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_site(row: sqlite3.Row) -> Site:
    return Site(
        id=row["id"],
        url=row["url"],
        name=row["name"],
        status=SiteStatus(row["status"]),
        status_time=row["status_time"],
        last_error=row["last_error"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_site(
    conn: sqlite3.Connection,
    url: str,
    name: str,
    status: SiteStatus = SiteStatus.INDEXING,
) -> Site:
    """Insert a new site row and return it."""
    with transaction(conn):
        cursor = conn.execute(
            """
            INSERT INTO sites (url, name, status, status_time, last_error)
            VALUES (?, ?, ?, ?, NULL)
            """,
            (url, name, status.value, int(time())),
        )
        site_id = cursor.lastrowid
    return get_site(conn, site_id)  # type: ignore[arg-type,return-value]


def get_site(conn: sqlite3.Connection, site_id: int) -> Optional[Site]:
    """Fetch a single site by id.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM sites WHERE id = ?", (site_id,)).fetchone()
    return _row_to_site(row) if row else None


def get_site_by_url(conn: sqlite3.Connection, url: str) -> Optional[Site]:
    """Fetch the site whose root URL is exactly *url*."""
    row = conn.execute("SELECT * FROM sites WHERE url = ?", (url,)).fetchone()
    return _row_to_site(row) if row else None


def list_sites(
    conn: sqlite3.Connection,
    status: Optional[SiteStatus] = None,
) -> list[Site]:
    """Return all sites, optionally filtered by ``status``."""
    if status is not None:
        rows = conn.execute(
            "SELECT * FROM sites WHERE status = ? ORDER BY id", (status.value,)
        ).fetchall()
    else:
        rows = conn.execute("SELECT * FROM sites ORDER BY id").fetchall()
    return [_row_to_site(r) for r in rows]


def update_site_status(
    conn: sqlite3.Connection,
    site_id: int,
    status: SiteStatus,
    last_error: Optional[str] = None,
    only_if: Optional[SiteStatus] = None,
) -> bool:
    """Set the status (and ``last_error``) of a site, refreshing its timestamp.

    When *only_if* is given the update applies only while the site is still
    in that status, so a late completion cannot overwrite a failure.

    Returns:
        ``True`` if a row was updated.
    """
    sql = "UPDATE sites SET status = ?, status_time = ?, last_error = ? WHERE id = ?"
    params: list = [status.value, int(time()), last_error, site_id]
    if only_if is not None:
        sql += " AND status = ?"
        params.append(only_if.value)

    with transaction(conn):
        cursor = conn.execute(sql, params)
    return cursor.rowcount > 0


def touch_site(conn: sqlite3.Connection, site_id: int) -> None:
    """Refresh ``status_time`` without changing the status."""
    with transaction(conn):
        conn.execute(
            "UPDATE sites SET status_time = ? WHERE id = ?", (int(time()), site_id)
        )


def count_sites_not_in_status(conn: sqlite3.Connection, status: SiteStatus) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM sites WHERE status != ?", (status.value,)
    ).fetchone()
    return row[0]


def delete_all_sites(conn: sqlite3.Connection) -> None:
    """Delete every site (pages and lemmas cascade)."""
    with transaction(conn):
        conn.execute("DELETE FROM sites")
