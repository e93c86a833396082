"""Wiring of the service objects shared by the API and the CLI."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from backend.config import Settings, SiteConfig, load_sites, settings as default_settings
from backend.indexing.service import IndexingService
from backend.morphology import Lemmatizer, build_lemmatizer
from backend.search import SearchService
from backend.statistics import StatisticsService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    conn: sqlite3.Connection
    indexing: IndexingService
    search: SearchService
    statistics: StatisticsService


def build_services(
    conn: sqlite3.Connection,
    lemmatizer: Optional[Lemmatizer] = None,
    site_configs: Optional[list[SiteConfig]] = None,
    config: Optional[Settings] = None,
) -> Services:
    """Create the indexing, search and statistics services around *conn*.

    The lemmatizer (morphology dictionaries) and the site list are loaded
    here unless supplied.
    """
    config = config or default_settings
    if site_configs is None:
        site_configs = load_sites(config.sites_file)
    if lemmatizer is None:
        logger.info("Loading morphology dictionaries")
        lemmatizer = build_lemmatizer()

    indexing = IndexingService(conn, lemmatizer, site_configs, config=config)
    return Services(
        conn=conn,
        indexing=indexing,
        search=SearchService(conn, lemmatizer, indexing.is_indexing, config=config),
        statistics=StatisticsService(conn, indexing.is_indexing),
    )
