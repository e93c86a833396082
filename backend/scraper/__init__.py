"""Scraper package — web fetch & content extraction."""

from backend.scraper.extractor import extract_text, extract_title, page_text, parse_html
from backend.scraper.fetcher import fetch_page, make_client
from backend.scraper.models import FetchFailure, FetchResult

__all__ = [
    "fetch_page",
    "make_client",
    "extract_text",
    "extract_title",
    "page_text",
    "parse_html",
    "FetchResult",
    "FetchFailure",
]
