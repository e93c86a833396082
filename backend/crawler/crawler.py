"""One crawl step: fetch a URL, persist and index it, return child tasks."""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlsplit

import httpx

from backend.crawler.frontier import Frontier
from backend.db import pages
from backend.db.connection import transaction
from backend.db.models import Site
from backend.indexing.indexer import save_page
from backend.morphology import Lemmatizer
from backend.scraper import FetchFailure, FetchResult, fetch_page

logger = logging.getLogger(__name__)

SKIPPED_EXTENSIONS = (
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
    "jpg", "jpeg", "png", "gif", "bmp", "svg", "webp", "ico",
    "zip", "rar", "7z", "tar", "gz", "exe", "msi",
    "mp3", "wav", "mp4", "avi", "mov", "xml",
)

_SKIPPED_RE = re.compile(r"\.(%s)$" % "|".join(SKIPPED_EXTENSIONS), re.IGNORECASE)


@dataclass(frozen=True)
class CrawlTask:
    url: str
    site: Site
    frontier: Frontier


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def is_crawlable(url: str, root: str) -> bool:
    """True if *url* lies under *root*, has no fragment and is not a binary asset."""
    if not url.startswith(root) or "#" in url:
        return False
    return _SKIPPED_RE.search(urlsplit(url).path) is None


def page_path(url: str, root: str) -> str:
    """Path of *url* relative to the site *root*; always begins with ``/``."""
    rest = url[len(root):] if url.startswith(root) else url
    if not rest:
        return "/"
    return rest if rest.startswith("/") else "/" + rest


class Crawler:
    """Executes crawl steps against a shared store, lemmatizer and HTTP client.

    Args:
        conn: Shared store connection.
        lemmatizer: Text to lemma counts.
        client: HTTP client shared by all workers of the run.
        delay: Politeness pause before each fetch, in seconds.
        fetch: Fetch function; defaults to :func:`backend.scraper.fetch_page`.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        lemmatizer: Lemmatizer,
        client: httpx.Client,
        delay: float,
        fetch: Optional[Callable[[str, httpx.Client], FetchResult]] = None,
    ) -> None:
        self.conn = conn
        self.lemmatizer = lemmatizer
        self.client = client
        self.delay = delay
        self._fetch = fetch or fetch_page

    def crawl(self, task: CrawlTask) -> list[CrawlTask]:
        frontier = task.frontier
        if not frontier.is_running or not frontier.try_visit(task.url):
            return []
        if not frontier.pause(self.delay):
            return []

        site = task.site
        path = page_path(task.url, site.url)

        try:
            result = self._fetch(task.url, self.client)
        except FetchFailure as exc:
            logger.warning("Fetch failed for %s: %s", task.url, exc)
            self._store(site, path, 500, exc.describe())
            return []

        if not frontier.is_running:
            return []

        if not result.ok:
            self._store(site, path, result.status_code, result.content)
            return []

        counts = self.lemmatizer.find_lemmas(result.text) if result.text.strip() else None
        if not self._store(site, path, result.status_code, result.content, counts):
            return []

        if not result.is_html:
            return []
        return [
            CrawlTask(url=link, site=site, frontier=frontier)
            for link in result.links
            if is_crawlable(link, site.url) and link not in frontier
        ]

    # ------------------------------------------------------------------

    def _store(
        self,
        site: Site,
        path: str,
        code: int,
        content: str,
        lemma_counts: Optional[dict[str, int]] = None,
    ) -> bool:
        """Save the page unless its path is already stored.  ``False`` if skipped."""
        with transaction(self.conn):
            if pages.find_page(self.conn, site.id, path) is not None:
                logger.debug("Path %s already stored for %s, skipping", path, site.url)
                return False
            save_page(self.conn, site, path, code, content, lemma_counts)
        logger.debug("Stored %s%s (%s)", site.url, path, code)
        return True
