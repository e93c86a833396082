"""Inverted-index maintenance.

Every function here is one atomic unit: it runs inside
:func:`~backend.db.connection.transaction`, so a page is either fully indexed
or absent, and lemma frequencies always equal the number of pages of the site
that have a posting for the lemma.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Mapping, Optional

from backend.db import lemmas, pages, postings, sites
from backend.db.connection import transaction
from backend.db.models import Page, Site

logger = logging.getLogger(__name__)


def index_page(conn: sqlite3.Connection, page: Page, lemma_counts: Mapping[str, int]) -> None:
    """Add *page*'s lemmas to the index.

    Each lemma's frequency grows by one (one more page contains it) and one
    posting per lemma is written with ``rank`` = occurrences on the page.
    """
    if not lemma_counts:
        return

    with transaction(conn):
        known = lemmas.find_lemmas(conn, page.site_id, lemma_counts.keys())
        touched = []
        for name in lemma_counts:
            lemma = known.get(name) or lemmas.create_lemma(conn, page.site_id, name)
            lemma.frequency += 1
            touched.append(lemma)
        lemmas.set_frequency(conn, touched)
        postings.add_postings(
            conn,
            page.id,
            [(lemma.id, lemma_counts[lemma.lemma]) for lemma in touched],
        )


def save_page(
    conn: sqlite3.Connection,
    site: Site,
    path: str,
    code: int,
    content: str,
    lemma_counts: Optional[Mapping[str, int]] = None,
) -> Page:
    """Insert a page and index *lemma_counts* for it in the same transaction."""
    with transaction(conn):
        page = pages.create_page(conn, site.id, path, code, content)
        if lemma_counts:
            index_page(conn, page, lemma_counts)
    return page


def remove_page(conn: sqlite3.Connection, site_id: int, path: str) -> bool:
    """Delete the page at (*site_id*, *path*) and undo its index contributions.

    Returns:
        ``True`` if a page existed and was removed.
    """
    with transaction(conn):
        page = pages.find_page(conn, site_id, path)
        if page is None:
            return False

        page_postings = postings.postings_for_page(conn, page.id)
        if page_postings:
            affected = lemmas.get_lemmas(conn, {p.lemma_id for p in page_postings})
            for lemma in affected:
                lemma.frequency -= 1
            postings.delete_postings_for_page(conn, page.id)
            lemmas.set_frequency(conn, [l for l in affected if l.frequency > 0])
            lemmas.delete_lemmas(conn, [l.id for l in affected if l.frequency <= 0])

        pages.delete_page(conn, page.id)

    logger.debug("Removed page %s (site %s) from the index", path, site_id)
    return True


def wipe(conn: sqlite3.Connection) -> None:
    """Delete every site, page, lemma and posting (full re-index)."""
    # pages and lemmas cascade from sites, postings from both
    sites.delete_all_sites(conn)
