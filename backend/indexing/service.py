"""Indexing run orchestration.

:class:`IndexingService` owns the lifecycle of a crawl run:

* ``start_indexing`` wipes the index, registers every configured site as
  INDEXING and feeds one root task per site into a :class:`CrawlPool`.
* A supervisor thread waits for the pool to drain and marks the sites that
  are still INDEXING as INDEXED.
* ``stop_indexing`` sets the run's stop event, cancels queued work and marks
  the INDEXING sites FAILED.

Only one run exists at a time.  A run that has been stopped is detached
immediately, so its supervisor can no longer mark sites INDEXED.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from backend.config import Settings, SiteConfig, settings as default_settings
from backend.crawler import CrawlPool, CrawlTask, Crawler, Frontier, page_path
from backend.db import sites
from backend.db.connection import transaction
from backend.db.models import Site, SiteStatus
from backend.indexing.indexer import remove_page, save_page, wipe
from backend.morphology import Lemmatizer
from backend.responses import ApiResponse
from backend.scraper import FetchResult, fetch_page, make_client

logger = logging.getLogger(__name__)

ALREADY_RUNNING = "Indexing is already running"
NOT_RUNNING = "Indexing is not running"
STOPPED_BY_USER = "Indexing stopped by user"
INTERRUPTED = "Indexing interrupted"


@dataclass
class _Run:
    pool: CrawlPool
    client: httpx.Client
    sites: list[Site]
    stop_event: threading.Event = field(default_factory=threading.Event)
    done: threading.Event = field(default_factory=threading.Event)


class IndexingService:
    """Starts, stops and supervises indexing runs; indexes single pages.

    Args:
        conn: Shared store connection.
        lemmatizer: Built once at startup and shared by every worker.
        site_configs: Configured sites, in configuration order.
        config: Runtime settings (workers, politeness delay).
        client_factory: Builds the HTTP client of a run.
        fetch: Page fetch function, defaults to :func:`fetch_page`.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        lemmatizer: Lemmatizer,
        site_configs: list[SiteConfig],
        config: Optional[Settings] = None,
        client_factory: Callable[[], httpx.Client] = make_client,
        fetch: Optional[Callable[[str, httpx.Client], FetchResult]] = None,
    ) -> None:
        self.conn = conn
        self.lemmatizer = lemmatizer
        self.site_configs = list(site_configs)
        self.config = config or default_settings
        self._client_factory = client_factory
        self._fetch = fetch or fetch_page
        self._lock = threading.Lock()
        self._run: Optional[_Run] = None
        self._last_run: Optional[_Run] = None

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------

    def start_indexing(self) -> ApiResponse:
        with self._lock:
            if self._run is not None:
                return ApiResponse.fail(ALREADY_RUNNING)

            with transaction(self.conn):
                wipe(self.conn)
                created = [
                    sites.create_site(self.conn, cfg.url, cfg.name)
                    for cfg in self.site_configs
                ]

            client = self._client_factory()
            crawler = Crawler(
                self.conn,
                self.lemmatizer,
                client,
                self.config.politeness_delay,
                fetch=self._fetch,
            )
            pool: CrawlPool[CrawlTask] = CrawlPool(
                crawler.crawl, self.config.crawl_workers, on_error=self._task_failed
            )
            run = _Run(pool=pool, client=client, sites=created)
            self._run = run
            self._last_run = run

        logger.info("Indexing started for %d site(s)", len(created))
        for site in created:
            frontier = Frontier(site.url, run.stop_event)
            pool.submit(CrawlTask(url=site.url, site=site, frontier=frontier))

        threading.Thread(
            target=self._supervise, args=(run,), name="indexing-supervisor", daemon=True
        ).start()
        return ApiResponse.ok()

    def stop_indexing(self) -> ApiResponse:
        with self._lock:
            run = self._run
            if run is None:
                return ApiResponse.fail(NOT_RUNNING)
            self._run = None

        run.stop_event.set()
        run.pool.cancel()
        self._fail_indexing_sites(STOPPED_BY_USER)
        logger.info("Indexing stopped by user")
        return ApiResponse.ok()

    def is_indexing(self) -> bool:
        with self._lock:
            return self._run is not None

    def is_indexing_complete(self) -> bool:
        """True when every site in the store is INDEXED."""
        return sites.count_sites_not_in_status(self.conn, SiteStatus.INDEXED) == 0

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current (or last) run has fully wound down.

        Returns ``False`` on timeout.  Returns ``True`` at once if no run was
        ever started.
        """
        with self._lock:
            run = self._run or self._last_run
        if run is None:
            return True
        return run.done.wait(timeout)

    # ------------------------------------------------------------------
    # Single page
    # ------------------------------------------------------------------

    def index_single_page(self, url: str) -> bool:
        """Fetch *url* and replace its page in the index.

        Returns ``False`` if *url* is not under any configured site.  Fetch
        failures and store errors propagate; the page is replaced in one
        transaction so it is either fully re-indexed or left untouched.

        Raises:
            FetchFailure: If the page cannot be fetched.
        """
        cfg = next((s for s in self.site_configs if url.startswith(s.url)), None)
        if cfg is None:
            return False

        site = sites.get_site_by_url(self.conn, cfg.url)
        if site is None:
            site = sites.create_site(self.conn, cfg.url, cfg.name, status=SiteStatus.INDEXED)
        path = page_path(url, site.url)

        client = self._client_factory()
        try:
            result = self._fetch(url, client)
        finally:
            client.close()

        counts = None
        if result.ok and result.text.strip():
            counts = self.lemmatizer.find_lemmas(result.text)

        with transaction(self.conn):
            remove_page(self.conn, site.id, path)
            save_page(self.conn, site, path, result.status_code, result.content, counts)
            sites.touch_site(self.conn, site.id)

        logger.info("Re-indexed %s (%s)", url, result.status_code)
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _supervise(self, run: _Run) -> None:
        try:
            run.pool.wait()
            with self._lock:
                if self._run is not run:
                    return
                for site in run.sites:
                    sites.update_site_status(
                        self.conn, site.id, SiteStatus.INDEXED, only_if=SiteStatus.INDEXING
                    )
                self._run = None
            logger.info("Indexing finished")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Indexing supervisor failed")
            with self._lock:
                if self._run is run:
                    self._run = None
            run.stop_event.set()
            run.pool.cancel()
            self._fail_indexing_sites(f"{INTERRUPTED}: {exc}")
        finally:
            run.client.close()
            run.done.set()

    def _task_failed(self, task: CrawlTask, exc: Exception) -> None:
        logger.error(
            "Crawl step failed for %s", task.url, exc_info=(type(exc), exc, exc.__traceback__)
        )
        sites.update_site_status(
            self.conn,
            task.site.id,
            SiteStatus.FAILED,
            last_error=f"{type(exc).__name__}: {exc}",
            only_if=SiteStatus.INDEXING,
        )

    def _fail_indexing_sites(self, error: str) -> None:
        for site in sites.list_sites(self.conn, SiteStatus.INDEXING):
            sites.update_site_status(
                self.conn, site.id, SiteStatus.FAILED, last_error=error,
                only_if=SiteStatus.INDEXING,
            )
