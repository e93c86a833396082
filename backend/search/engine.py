"""Multi-term AND search over the inverted index.

Query flow
----------
1. Lemmatize the query.
2. Order its lemmas by ascending total frequency over the candidate sites,
   so the rarest lemma produces the smallest starting posting list.
3. Intersect the posting lists (AND semantics).
4. Score each page by the sum of its posting ranks (absolute relevance) and
   normalise by the best page (relative relevance, 0..1).
5. Sort, page with ``offset``/``limit`` and build snippets for the returned
   page of results only.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Optional

from backend.config import Settings, settings as default_settings
from backend.db import lemmas, pages, postings, sites
from backend.db.models import Page, Site
from backend.morphology import Lemmatizer
from backend.responses import SearchItem, SearchResponse
from backend.scraper import extract_title, page_text
from backend.search.snippets import build_snippet

logger = logging.getLogger(__name__)

EMPTY_QUERY = "Empty search query"
INDEXING_IN_PROGRESS = "Indexing is in progress, search is unavailable until it completes"


class SearchService:
    """Answers free-text queries against the store.

    Args:
        conn: Store connection.
        lemmatizer: Shared lemmatizer (same one the indexer uses).
        is_indexing: Returns ``True`` while a crawl run is active.
        config: Snippet and paging defaults.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        lemmatizer: Lemmatizer,
        is_indexing: Callable[[], bool] = lambda: False,
        config: Optional[Settings] = None,
    ) -> None:
        self.conn = conn
        self.lemmatizer = lemmatizer
        self._is_indexing = is_indexing
        self.config = config or default_settings

    def search(
        self,
        query: str,
        site: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> SearchResponse:
        if not query or not query.strip():
            return SearchResponse.fail(EMPTY_QUERY)
        if self._is_indexing():
            return SearchResponse.fail(INDEXING_IN_PROGRESS)

        limit = self.config.search_limit if limit is None else limit
        candidates = self._candidate_sites(site)
        query_lemmas = self.lemmatizer.lemma_set(query)
        if not query_lemmas or not candidates:
            return SearchResponse(result=True)

        site_ids = [s.id for s in candidates]
        ordered = sorted(
            query_lemmas,
            key=lambda name: (lemmas.total_frequency(self.conn, name, site_ids), name),
        )
        found = self._intersect(ordered, site_ids)
        if not found:
            return SearchResponse(result=True)

        scored = self._score(found, ordered)
        best = max(score for _, score in scored)
        ranked = sorted(
            ((page, score / best if best else 0.0) for page, score in scored),
            key=lambda item: item[1],
            reverse=True,
        )

        by_id = {s.id: s for s in candidates}
        window = ranked[max(offset, 0):max(offset, 0) + max(limit, 0)]
        data = [self._item(page, by_id[page.site_id], rel, query_lemmas) for page, rel in window]
        logger.debug("Query %r matched %d page(s)", query, len(ranked))
        return SearchResponse(result=True, count=len(ranked), data=data)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _candidate_sites(self, site_url: Optional[str]) -> list[Site]:
        if site_url:
            found = sites.get_site_by_url(self.conn, site_url)
            return [found] if found else []
        return sites.list_sites(self.conn)

    def _intersect(self, ordered: list[str], site_ids: list[int]) -> list[Page]:
        """Pages containing every lemma, starting from the rarest one."""
        result = pages.pages_for_lemma(self.conn, ordered[0], site_ids)
        for name in ordered[1:]:
            if not result:
                break
            keep = {p.id for p in pages.pages_for_lemma(self.conn, name, site_ids)}
            result = [p for p in result if p.id in keep]
        return result

    def _score(self, found: list[Page], names: list[str]) -> list[tuple[Page, float]]:
        scored = []
        for page in found:
            total = 0.0
            for name in names:
                total += postings.rank_for(self.conn, page.id, name) or 0.0
            scored.append((page, total))
        return scored

    def _item(self, page: Page, site: Site, relevance: float, query_lemmas: set[str]) -> SearchItem:
        return SearchItem(
            site=site.url,
            site_name=site.name,
            uri=page.path,
            title=extract_title(page.content),
            relevance=relevance,
            snippet=build_snippet(
                page_text(page.content),
                query_lemmas,
                self.lemmatizer,
                max_length=self.config.snippet_length,
                window=self.config.snippet_window,
            ),
        )
