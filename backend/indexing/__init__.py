"""Indexing package — inverted-index maintenance and the run orchestrator.

The orchestrator lives in :mod:`backend.indexing.service` and is imported from
there directly; it depends on :mod:`backend.crawler`, which in turn uses the
indexer functions re-exported here.
"""

from backend.indexing.indexer import index_page, remove_page, save_page, wipe

__all__ = ["index_page", "save_page", "remove_page", "wipe"]
