"""Read-only index statistics for the dashboard endpoint and ``stats`` command."""

from __future__ import annotations

import sqlite3
from typing import Callable

from backend.db import lemmas, pages, sites
from backend.responses import SiteStatistics, StatisticsResponse, TotalStatistics


class StatisticsService:
    def __init__(
        self,
        conn: sqlite3.Connection,
        is_indexing: Callable[[], bool] = lambda: False,
    ) -> None:
        self.conn = conn
        self._is_indexing = is_indexing

    def get_statistics(self) -> StatisticsResponse:
        """Totals over all sites plus one entry per site.

        ``status_time`` is reported in milliseconds since the epoch.
        """
        detailed = []
        for site in sites.list_sites(self.conn):
            detailed.append(
                SiteStatistics(
                    url=site.url,
                    name=site.name,
                    status=site.status.value,
                    status_time=site.status_time * 1000,
                    error=site.last_error,
                    pages=pages.count_pages(self.conn, site.id),
                    lemmas=lemmas.count_lemmas(self.conn, site.id),
                )
            )

        total = TotalStatistics(
            sites=len(detailed),
            pages=sum(item.pages for item in detailed),
            lemmas=sum(item.lemmas for item in detailed),
            indexing=self._is_indexing(),
        )
        return StatisticsResponse(total=total, detailed=detailed)
