"""Crawler package — concurrent site traversal."""

from backend.crawler.crawler import CrawlTask, Crawler, is_crawlable, page_path
from backend.crawler.frontier import Frontier
from backend.crawler.pool import CrawlPool

__all__ = [
    "Crawler",
    "CrawlTask",
    "CrawlPool",
    "Frontier",
    "is_crawlable",
    "page_path",
]
